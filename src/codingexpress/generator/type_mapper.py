"""Map decoded OpenAPI schema nodes onto ORM field types.

Two parallel tables exist, one per persistence style:

* **Document** (Mongoose) -- :func:`to_document_field_type`.
* **Relational** (Prisma) -- :func:`to_relational_field_type`.

Both are pure and total: every :data:`~codingexpress.models.SchemaNode`
maps to exactly one token, and the same input always yields the same token.
:func:`map_fields` applies the active table to every property of an object
schema and attaches the required/trim flags.
"""

from __future__ import annotations

import enum

from codingexpress.models import (
    ArraySchema,
    BooleanSchema,
    FieldSpec,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    OrmChoice,
    SchemaNode,
    StringSchema,
)


class DocumentFieldType(str, enum.Enum):
    """Mongoose schema type tokens."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    ARRAY_OF_MIXED = "ArrayOfMixed"
    MIXED = "Mixed"


class RelationalFieldType(str, enum.Enum):
    """Prisma scalar type tokens."""

    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    DATETIME = "DateTime"
    JSON = "Json"


# Prisma adds these columns to every generated model.
RELATIONAL_IMPLICIT_COLUMNS = frozenset({"id", "createdAt", "updatedAt"})


def to_document_field_type(schema: SchemaNode) -> DocumentFieldType:
    """Return the Mongoose type token for *schema*.

    Unknown or missing types default to ``String``.
    """
    if isinstance(schema, (IntegerSchema, NumberSchema)):
        return DocumentFieldType.NUMBER
    if isinstance(schema, BooleanSchema):
        return DocumentFieldType.BOOLEAN
    if isinstance(schema, ArraySchema):
        return DocumentFieldType.ARRAY_OF_MIXED
    if isinstance(schema, ObjectSchema):
        return DocumentFieldType.MIXED
    return DocumentFieldType.STRING


def to_relational_field_type(schema: SchemaNode) -> RelationalFieldType:
    """Return the Prisma type token for *schema*.

    Anything that is not a scalar the table knows (arrays, objects, untyped
    nodes) defaults to ``Json``.
    """
    if isinstance(schema, StringSchema):
        if schema.format == "date-time":
            return RelationalFieldType.DATETIME
        return RelationalFieldType.STRING
    if isinstance(schema, IntegerSchema):
        return RelationalFieldType.INT
    if isinstance(schema, NumberSchema):
        return RelationalFieldType.FLOAT
    if isinstance(schema, BooleanSchema):
        return RelationalFieldType.BOOLEAN
    return RelationalFieldType.JSON


def map_fields(schema: ObjectSchema, orm: OrmChoice) -> list[FieldSpec]:
    """Translate every property of *schema* into a :class:`FieldSpec`.

    Fields keep declaration order. ``required`` reflects membership in the
    schema's ``required`` set; ``trim`` is only set for string-based fields
    in document mode. In relational mode properties named like an implicit
    column (``id``, ``createdAt``, ``updatedAt``) are skipped.
    """
    fields: list[FieldSpec] = []
    for name, prop in schema.properties.items():
        if orm.is_document:
            token = to_document_field_type(prop).value
            trim = isinstance(prop, StringSchema)
        else:
            if name in RELATIONAL_IMPLICIT_COLUMNS:
                continue
            token = to_relational_field_type(prop).value
            trim = False
        fields.append(
            FieldSpec(
                name=name,
                type_token=token,
                required=schema.is_required(name),
                trim=trim,
                schema_type=prop.type,
                format=prop.format,
            )
        )
    return fields