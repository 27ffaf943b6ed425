"""Canonical Pydantic models shared across all codingexpress modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Project models** -- persisted or passed explicitly through every command:
    :class:`OrmChoice`, :class:`ProjectConfig` and :class:`ProjectContext`.

**Parser output models** -- produced by the OpenAPI loader and consumed by the
generator:
    :class:`HTTPMethod`, the typed :data:`SchemaNode` union
    (:class:`StringSchema`, :class:`IntegerSchema`, :class:`NumberSchema`,
    :class:`BooleanSchema`, :class:`ArraySchema`, :class:`ObjectSchema`,
    :class:`UntypedSchema`), :class:`Operation` and :class:`SpecDocument`.

**Generation plan models** -- the structured, string-free description of what
gets written for one resource, rendered later by
:mod:`codingexpress.generator.renderer`:
    :class:`CrudKind`, :class:`ResourceNames`, :class:`ResourceGroup`,
    :class:`FieldSpec`, :class:`ModelPlan`, :class:`ValidatorPlan`,
    :class:`ControllerPlan`, :class:`RoutePlan`, :class:`ResourcePlan` and
    :class:`GeneratedArtifact`.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Project ---


class OrmChoice(str, enum.Enum):
    """Persistence style selected at ``init``.

    ``MONGOOSE`` produces document-model artifacts (Mongoose schemas),
    ``PRISMA`` produces relational-schema artifacts (Prisma models).
    """

    MONGOOSE = "mongoose"
    PRISMA = "prisma"

    @property
    def is_document(self) -> bool:
        return self is OrmChoice.MONGOOSE


class ProjectConfig(BaseModel):
    """Project settings persisted in ``codingexpress.json`` at the project root.

    Written once by ``codingexpress init`` and read by every later ``make:*``
    and ``update:*`` invocation. Keys are camelCase on disk.

    Example::

        {"appName": "shop", "ormChoice": "mongoose"}
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    app_name: str = Field(alias="appName")
    orm: OrmChoice = Field(default=OrmChoice.MONGOOSE, alias="ormChoice")


class ProjectContext(BaseModel):
    """Explicit generation context: where the project lives and how it is configured.

    Passed as an argument to every generation function instead of reading
    the project config as ambient state.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    config: ProjectConfig

    @property
    def orm(self) -> OrmChoice:
        return self.config.orm

    def with_orm(self, orm: Optional[OrmChoice]) -> ProjectContext:
        """Return a copy using *orm* for this invocation only (``--orm``)."""
        if orm is None or orm == self.config.orm:
            return self
        return self.model_copy(update={"config": self.config.model_copy(update={"orm": orm})})


# --- Parser Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class BaseSchema(BaseModel):
    """Attributes shared by every decoded schema variant."""

    format: Optional[str] = None
    description: Optional[str] = None
    enum_values: Optional[list[Any]] = None


class StringSchema(BaseSchema):
    type: Literal["string"] = "string"


class IntegerSchema(BaseSchema):
    type: Literal["integer"] = "integer"


class NumberSchema(BaseSchema):
    type: Literal["number"] = "number"


class BooleanSchema(BaseSchema):
    type: Literal["boolean"] = "boolean"


class ArraySchema(BaseSchema):
    type: Literal["array"] = "array"
    items: Optional[SchemaNode] = None


class ObjectSchema(BaseSchema):
    """An object schema with named properties.

    ``required`` keeps declaration order but behaves as a set: it must be a
    subset of the ``properties`` keys.
    """

    type: Literal["object"] = "object"
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _required_subset_of_properties(self) -> ObjectSchema:
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(
                f"required names not declared in properties: {', '.join(unknown)}"
            )
        return self

    def is_required(self, name: str) -> bool:
        return name in self.required


class UntypedSchema(BaseSchema):
    """A schema with no (or an unrecognised) ``type``."""

    type: Literal[None] = None


SchemaNode = Union[
    StringSchema,
    IntegerSchema,
    NumberSchema,
    BooleanSchema,
    ArraySchema,
    ObjectSchema,
    UntypedSchema,
]
"""Tagged union of decoded OpenAPI schema nodes, discriminated by ``type``."""

ArraySchema.model_rebuild()
ObjectSchema.model_rebuild()


class Operation(BaseModel):
    """A single OpenAPI operation (one route template + HTTP method pair)."""

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    security: Optional[list[dict[str, list[str]]]] = Field(
        default=None,
        description="None when undeclared, [] when the operation is explicitly public",
    )

    @property
    def has_path_parameter(self) -> bool:
        return any(
            seg.startswith("{") and seg.endswith("}")
            for seg in self.path.split("/")
        )

    @property
    def is_public(self) -> bool:
        return self.security is not None and len(self.security) == 0


class SpecDocument(BaseModel):
    """A fully dereferenced OpenAPI document.

    No ``$ref`` indirection remains anywhere below :attr:`schemas` or
    :attr:`operations`.
    """

    title: str = "Untitled API"
    version: str = "0.0.0"
    openapi_version: str
    schemas: dict[str, SchemaNode] = Field(default_factory=dict)
    operations: list[Operation] = Field(default_factory=list)

    @property
    def paths(self) -> dict[str, dict[HTTPMethod, Operation]]:
        """Route template -> HTTP method -> operation, in document order."""
        result: dict[str, dict[HTTPMethod, Operation]] = {}
        for op in self.operations:
            result.setdefault(op.path, {})[op.method] = op
        return result


# --- Generation Plan Models ---


class CrudKind(str, enum.Enum):
    """Canonical operation kind inferred by the classifier."""

    LIST = "list"
    CREATE = "create"
    RETRIEVE = "retrieve"
    REPLACE = "replace"
    DELETE = "delete"
    CUSTOM = "custom"


class ResourceNames(BaseModel):
    """The one agreed-upon set of names for a resource.

    Built once per resource by :func:`~codingexpress.generator.naming.resource_names`
    and threaded through every artifact so that model, validator, controller
    and route file can never disagree on casing or pluralisation.
    """

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Singular, capitalized: Product")
    lower: str = Field(description="Lowercase singular: product")
    camel: str = Field(description="Prisma client delegate: product, orderItem")
    plural: str = Field(description="Route mount segment: products")

    @property
    def controller(self) -> str:
        return f"{self.model}Controller"

    @property
    def validator(self) -> str:
        return f"{self.lower}Validator"

    @property
    def routes(self) -> str:
        return f"{self.lower}Routes"

    @property
    def controller_path(self) -> str:
        return f"app/controllers/{self.controller}.js"

    @property
    def validator_path(self) -> str:
        return f"app/validators/{self.model}Validator.js"

    @property
    def route_path(self) -> str:
        return f"app/routes/{self.routes}.js"

    def model_path(self, orm: OrmChoice) -> str:
        if orm.is_document:
            return f"app/models/{self.model}.js"
        return f"prisma/schema/{self.model}.prisma"


class ResourceGroup(BaseModel):
    """Operations judged to belong to one logical resource."""

    names: ResourceNames
    source: Literal["tag", "path", "manual"] = "path"
    operations: list[Operation] = Field(default_factory=list)


class FieldSpec(BaseModel):
    """One model field after type mapping."""

    name: str
    type_token: str
    required: bool = False
    trim: bool = False
    schema_type: Optional[str] = None
    format: Optional[str] = None


class ModelPlan(BaseModel):
    names: ResourceNames
    orm: OrmChoice
    properties: list[FieldSpec] = Field(default_factory=list)
    connection: str = "default"
    placeholder: bool = False


class ValidationCheck(BaseModel):
    """One call in an express-validator chain, e.g. ``isString()`` + its message."""

    call: str
    message: Optional[str] = None


class ValidationRule(BaseModel):
    field: str
    checks: list[ValidationCheck] = Field(default_factory=list)


class ValidatorPlan(BaseModel):
    names: ResourceNames
    store: list[ValidationRule] = Field(default_factory=list)
    update: list[ValidationRule] = Field(default_factory=list)


class ControllerMethod(BaseModel):
    name: str
    kind: CrudKind
    id_param: Optional[str] = None
    summary: Optional[str] = None
    http_method: HTTPMethod = HTTPMethod.GET
    path: str = "/"


class ControllerPlan(BaseModel):
    names: ResourceNames
    orm: OrmChoice
    methods: list[ControllerMethod] = Field(default_factory=list)


class RouteEntry(BaseModel):
    verb: str
    path: str
    handler: str
    middlewares: list[str] = Field(default_factory=list)


class RoutePlan(BaseModel):
    names: ResourceNames
    entries: list[RouteEntry] = Field(default_factory=list)
    uses_auth: bool = True
    uses_validator: bool = False


class ResourcePlan(BaseModel):
    """Everything needed to render the four coupled artifacts of one resource."""

    names: ResourceNames
    model: ModelPlan
    validator: Optional[ValidatorPlan] = None
    controller: ControllerPlan
    routes: RoutePlan
    warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_name_set(self) -> ResourcePlan:
        parts = [self.model, self.controller, self.routes]
        if self.validator is not None:
            parts.append(self.validator)
        for part in parts:
            if part.names != self.names:
                raise ValueError(
                    f"{type(part).__name__} names {part.names.model}/{part.names.lower} "
                    f"diverge from resource names {self.names.model}/{self.names.lower}"
                )
        return self


class ArtifactKind(str, enum.Enum):
    MODEL = "model"
    VALIDATOR = "validator"
    CONTROLLER = "controller"
    ROUTE = "route"


class GeneratedArtifact(BaseModel):
    """One rendered source file, relative to the project root."""

    kind: ArtifactKind
    target_path: str
    contents: str
