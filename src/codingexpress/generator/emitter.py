"""Turn a resource group into a generation plan and rendered artifacts.

:func:`plan_resource` is the pure half: it combines the type mapper, the
classifier and the grouper into a :class:`~codingexpress.models.ResourcePlan`
that holds no source text. :func:`emit` renders that plan through the Jinja2
templates in :mod:`codingexpress.generator.renderer`.

Every artifact of a resource reads its names from the single
:class:`~codingexpress.models.ResourceNames` on the group; the plan model
rejects sub-plans that carry any other name set.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

from codingexpress.generator.classifier import classify_operation
from codingexpress.generator.grouper import relative_route_path
from codingexpress.generator.naming import derive_method_name, method_identifier, to_express_path
from codingexpress.generator.renderer import render_resource
from codingexpress.generator.type_mapper import map_fields
from codingexpress.models import (
    ArraySchema,
    ArtifactKind,
    BooleanSchema,
    ControllerMethod,
    ControllerPlan,
    CrudKind,
    GeneratedArtifact,
    HTTPMethod,
    IntegerSchema,
    ModelPlan,
    NumberSchema,
    ObjectSchema,
    Operation,
    OrmChoice,
    ResourceGroup,
    ResourceNames,
    ResourcePlan,
    RouteEntry,
    RoutePlan,
    SchemaNode,
    StringSchema,
    ValidationCheck,
    ValidationRule,
    ValidatorPlan,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_SCHEMA = ObjectSchema(properties={"name": StringSchema()}, required=["name"])
"""Schema used when a resource has none: a single required string ``name``."""

STANDARD_METHODS: tuple[tuple[str, HTTPMethod, bool], ...] = (
    ("index", HTTPMethod.GET, False),
    ("store", HTTPMethod.POST, False),
    ("show", HTTPMethod.GET, True),
    ("update", HTTPMethod.PUT, True),
    ("destroy", HTTPMethod.DELETE, True),
)
"""``(operationId, method, has id)`` of the five CRUD actions ``make:*`` writes."""

AUTH_MIDDLEWARE = "authMiddleware"

_ID_KINDS = (CrudKind.RETRIEVE, CrudKind.REPLACE, CrudKind.DELETE)


@dataclass
class EmittedResource:
    """A plan together with the files rendered from it."""

    plan: ResourcePlan
    artifacts: list[GeneratedArtifact] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return self.plan.warnings

    def artifact(self, kind: ArtifactKind) -> Optional[GeneratedArtifact]:
        return next((a for a in self.artifacts if a.kind == kind), None)


def standard_group(names: ResourceNames) -> ResourceGroup:
    """Synthesize the five conventional CRUD operations for *names*.

    ``make:*`` has no OpenAPI document, so it plans a resource from these.
    The ``show`` operation has no naming hint and is classified ``Retrieve``
    by the structural rule.
    """
    operations = []
    for operation_id, method, has_id in STANDARD_METHODS:
        path = f"/{names.plural}/{{id}}" if has_id else f"/{names.plural}"
        operations.append(Operation(path=path, method=method, operation_id=operation_id))
    return ResourceGroup(names=names, source="manual", operations=operations)


def find_schema(schemas: dict[str, SchemaNode], names: ResourceNames) -> Optional[SchemaNode]:
    """Look up the component schema describing *names*.

    Tries the model name, then a case-insensitive match on the model name,
    then on the plural mount segment.
    """
    if names.model in schemas:
        return schemas[names.model]
    folded = {key.lower(): value for key, value in schemas.items()}
    for candidate in (names.lower, names.plural):
        if candidate in folded:
            return folded[candidate]
    return None


def plan_resource(
    group: ResourceGroup,
    orm: OrmChoice,
    schema: Optional[SchemaNode] = None,
    connection: str = "default",
    prefix: str = "",
) -> ResourcePlan:
    """Build the structured plan of one resource.

    Args:
        group: The resource and its operations.
        orm: Persistence style of the project.
        schema: The component schema of the resource. ``None`` (or a schema
            that is not an object) yields a placeholder model, no validator
            and a warning.
        connection: Named Mongoose connection the model binds to.
        prefix: Path prefix stripped by the grouper, removed again here so
            route paths stay relative to the resource mount.
    """
    names = group.names
    warnings: list[str] = []

    if isinstance(schema, ObjectSchema) and schema.properties:
        object_schema: ObjectSchema = schema
        placeholder = False
    else:
        warnings.append(
            f"No usable schema found for {names.model}; generated a placeholder model "
            "with a single 'name' field and no validator."
        )
        object_schema = PLACEHOLDER_SCHEMA
        placeholder = True

    model = ModelPlan(
        names=names,
        orm=orm,
        properties=map_fields(object_schema, orm),
        connection=connection,
        placeholder=placeholder,
    )
    validator = None if placeholder else plan_validator(names, object_schema)
    controller = plan_controller(group, orm)
    routes = plan_routes(group, controller, has_validator=validator is not None, prefix=prefix)

    return ResourcePlan(
        names=names,
        model=model,
        validator=validator,
        controller=controller,
        routes=routes,
        warnings=warnings,
    )


def plan_validator(names: ResourceNames, schema: ObjectSchema) -> ValidatorPlan:
    """Build the ``store`` and ``update`` express-validator chains."""
    store: list[ValidationRule] = []
    update: list[ValidationRule] = []
    for name, prop in schema.properties.items():
        label = name[:1].upper() + name[1:]
        type_checks = _type_checks(label, prop)
        if schema.is_required(name):
            head = ValidationCheck(call="notEmpty()", message=f"{label} is required")
        else:
            head = ValidationCheck(call="optional()")
        store.append(ValidationRule(field=name, checks=[head, *type_checks]))
        update.append(
            ValidationRule(field=name, checks=[ValidationCheck(call="optional()"), *type_checks])
        )
    return ValidatorPlan(names=names, store=store, update=update)


def _type_checks(label: str, prop: SchemaNode) -> list[ValidationCheck]:
    checks: list[ValidationCheck] = []
    if isinstance(prop, StringSchema):
        if prop.format == "email":
            checks.append(ValidationCheck(call="isEmail()", message="Invalid email format"))
            checks.append(ValidationCheck(call="normalizeEmail()"))
            return checks
        if prop.format in ("date-time", "date"):
            checks.append(
                ValidationCheck(call="isISO8601()", message=f"{label} must be a valid date")
            )
            return checks
        checks.append(ValidationCheck(call="isString()", message=f"{label} must be a string"))
        if prop.enum_values:
            allowed = ", ".join(str(v) for v in prop.enum_values)
            checks.append(
                ValidationCheck(
                    call=f"isIn({json.dumps(prop.enum_values)})",
                    message=f"{label} must be one of: {allowed}",
                )
            )
        checks.append(ValidationCheck(call="trim()"))
    elif isinstance(prop, IntegerSchema):
        checks.append(ValidationCheck(call="isInt()", message=f"{label} must be an integer"))
    elif isinstance(prop, NumberSchema):
        checks.append(ValidationCheck(call="isFloat()", message=f"{label} must be a number"))
    elif isinstance(prop, BooleanSchema):
        checks.append(ValidationCheck(call="isBoolean()", message=f"{label} must be a boolean"))
    elif isinstance(prop, ArraySchema):
        checks.append(ValidationCheck(call="isArray()", message=f"{label} must be an array"))
    elif isinstance(prop, ObjectSchema):
        checks.append(ValidationCheck(call="isObject()", message=f"{label} must be an object"))
    return checks


def plan_controller(group: ResourceGroup, orm: OrmChoice) -> ControllerPlan:
    """One controller method per operation, named after its ``operationId``.

    Operations without a usable ``operationId`` are named from their method
    and path. Name collisions get a numeric suffix (``show2``). A retrieve,
    replace or delete operation whose path has no parameter becomes a
    ``501`` stub.
    """
    methods: list[ControllerMethod] = []
    used: set[str] = set()
    for op in group.operations:
        kind = classify_operation(op)
        id_param = _last_path_param(op.path) if kind in _ID_KINDS else None
        if kind in _ID_KINDS and id_param is None:
            logger.debug("%s %s has no path parameter; emitting a stub", op.method.value, op.path)
            kind = CrudKind.CUSTOM
        base = (method_identifier(op.operation_id) if op.operation_id else None) or derive_method_name(
            op.method, op.path
        )
        name = base
        counter = 2
        while name in used:
            name = f"{base}{counter}"
            counter += 1
        used.add(name)

        methods.append(
            ControllerMethod(
                name=name,
                kind=kind,
                id_param=id_param,
                summary=op.summary,
                http_method=op.method,
                path=op.path,
            )
        )
    return ControllerPlan(names=group.names, orm=orm, methods=methods)


def plan_routes(
    group: ResourceGroup,
    controller: ControllerPlan,
    has_validator: bool,
    prefix: str = "",
) -> RoutePlan:
    """One route entry per operation, wired to its controller method.

    Static paths are ordered before parameterised ones so that ``/search``
    is not shadowed by ``/:id``; the order is otherwise the document order.
    """
    names = group.names
    entries: list[RouteEntry] = []
    uses_auth = False
    uses_validator = False

    for op, method in zip(group.operations, controller.methods):
        middlewares: list[str] = []
        if not op.is_public:
            middlewares.append(AUTH_MIDDLEWARE)
            uses_auth = True
        if has_validator and method.kind == CrudKind.CREATE:
            middlewares.append(f"{names.validator}.store")
            uses_validator = True
        elif has_validator and method.kind == CrudKind.REPLACE:
            middlewares.append(f"{names.validator}.update")
            uses_validator = True

        relative = relative_route_path(op.path, names, prefix)
        entries.append(
            RouteEntry(
                verb=op.method.value,
                path=to_express_path(relative),
                handler=f"{names.controller}.{method.name}",
                middlewares=middlewares,
            )
        )

    entries.sort(key=lambda entry: entry.path.count("/:"))
    return RoutePlan(names=names, entries=entries, uses_auth=uses_auth, uses_validator=uses_validator)


def _last_path_param(path: str) -> Optional[str]:
    params = [s[1:-1] for s in path.split("/") if s.startswith("{") and s.endswith("}")]
    return params[-1] if params else None


def emit(
    group: ResourceGroup,
    orm: OrmChoice,
    schema: Optional[SchemaNode] = None,
    connection: str = "default",
    prefix: str = "",
) -> EmittedResource:
    """Plan and render the four artifacts of one resource.

    Example::

        emitted = emit(group, OrmChoice.MONGOOSE, document.schemas.get("Product"))
        [a.target_path for a in emitted.artifacts]
        # ['app/models/Product.js', 'app/validators/ProductValidator.js',
        #  'app/controllers/ProductController.js', 'app/routes/productRoutes.js']
    """
    plan = plan_resource(group, orm, schema, connection=connection, prefix=prefix)
    for warning in plan.warnings:
        logger.debug("%s: %s", group.names.model, warning)
    return EmittedResource(plan=plan, artifacts=render_resource(plan))
