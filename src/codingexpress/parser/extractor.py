"""Extract typed schemas and operations from a resolved OpenAPI document.

This module walks a fully ``$ref``-resolved document and builds a
:class:`~codingexpress.models.SpecDocument`. Schemas are decoded once, here,
into the :data:`~codingexpress.models.SchemaNode` union; nothing downstream
inspects raw dictionaries again.

The public entry points are :func:`extract_document` and
:func:`decode_schema`.
"""

from __future__ import annotations

from typing import Any, Optional

from codingexpress.models import (
    ArraySchema,
    BooleanSchema,
    HTTPMethod,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    Operation,
    SchemaNode,
    SpecDocument,
    StringSchema,
    UntypedSchema,
)

_HTTP_METHODS = {m.value: m for m in HTTPMethod}

_SCALARS: dict[str, type] = {
    "string": StringSchema,
    "integer": IntegerSchema,
    "number": NumberSchema,
    "boolean": BooleanSchema,
}


def extract_document(spec: dict[str, Any], openapi_version: str) -> SpecDocument:
    """Build a :class:`SpecDocument` from a resolved document.

    Args:
        spec: The document after :func:`~codingexpress.parser.resolver.resolve_refs`.
        openapi_version: The version string returned by
            :func:`~codingexpress.parser.loader.validate_openapi_document`.
    """
    info = spec.get("info") or {}
    components = spec.get("components") or {}
    raw_schemas = components.get("schemas") or {}

    return SpecDocument(
        title=str(info.get("title", "Untitled API")),
        version=str(info.get("version", "0.0.0")),
        openapi_version=openapi_version,
        schemas={str(name): decode_schema(raw) for name, raw in raw_schemas.items()},
        operations=_extract_operations(spec),
    )


def decode_schema(raw: Any) -> SchemaNode:
    """Decode one raw schema object into its typed variant.

    * OpenAPI 3.1 type arrays (``["string", "null"]``) decode as the first
      non-null type.
    * ``allOf`` members are merged into one object schema together with the
      schema's own properties.
    * A schema without ``type`` but with ``properties`` is an object.
    * ``required`` names that are not declared properties are dropped.
    * Anything else without a recognised type is :class:`UntypedSchema`.
    """
    if not isinstance(raw, dict):
        return UntypedSchema()

    common = {
        "format": _optional_str(raw.get("format")),
        "description": _optional_str(raw.get("description")),
        "enum_values": raw.get("enum") if isinstance(raw.get("enum"), list) else None,
    }

    if isinstance(raw.get("allOf"), list):
        return _merge_all_of(raw, common)

    type_name = _schema_type(raw)
    if type_name is None and isinstance(raw.get("properties"), dict):
        type_name = "object"

    if type_name in _SCALARS:
        return _SCALARS[type_name](**common)
    if type_name == "array":
        items = raw.get("items")
        return ArraySchema(items=decode_schema(items) if items is not None else None, **common)
    if type_name == "object":
        properties = _decode_properties(raw.get("properties"))
        return ObjectSchema(
            properties=properties,
            required=_filter_required(raw.get("required"), properties),
            **common,
        )
    return UntypedSchema(**common)


def _schema_type(raw: dict[str, Any]) -> Optional[str]:
    type_value = raw.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None
    if type_value is None:
        return None
    return str(type_value)


def _decode_properties(raw: Any) -> dict[str, SchemaNode]:
    if not isinstance(raw, dict):
        return {}
    return {str(name): decode_schema(prop) for name, prop in raw.items()}


def _filter_required(raw: Any, properties: dict[str, SchemaNode]) -> list[str]:
    if not isinstance(raw, list):
        return []
    required: list[str] = []
    for name in raw:
        if name in properties and name not in required:
            required.append(name)
    return required


def _merge_all_of(raw: dict[str, Any], common: dict[str, Any]) -> ObjectSchema:
    properties: dict[str, SchemaNode] = {}
    required_names: list[str] = []

    for member in raw["allOf"]:
        decoded = decode_schema(member)
        if isinstance(decoded, ObjectSchema):
            properties.update(decoded.properties)
            required_names.extend(decoded.required)

    properties.update(_decode_properties(raw.get("properties")))
    if isinstance(raw.get("required"), list):
        required_names.extend(raw["required"])

    return ObjectSchema(
        properties=properties,
        required=_filter_required(required_names, properties),
        **common,
    )


def _extract_operations(spec: dict[str, Any]) -> list[Operation]:
    """Extract every operation in document order.

    Security follows the OpenAPI override rule: an operation-level
    ``security`` array replaces the global one, and an explicit empty array
    marks the operation as public.
    """
    paths = spec.get("paths") or {}
    global_security = _security(spec.get("security"))
    operations: list[Operation] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        for key, operation in path_item.items():
            method = _HTTP_METHODS.get(str(key).lower())
            if method is None or not isinstance(operation, dict):
                continue

            if "security" in operation:
                security = _security(operation["security"])
            else:
                security = global_security

            operation_id = operation.get("operationId")
            if isinstance(operation_id, str):
                operation_id = operation_id.strip() or None
            else:
                operation_id = None

            operations.append(
                Operation(
                    path=str(path),
                    method=method,
                    operation_id=operation_id,
                    summary=_optional_str(operation.get("summary")),
                    tags=_tags(operation.get("tags")),
                    security=security,
                )
            )

    return operations


def _tags(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [str(t) for t in raw if t]


def _security(raw: Any) -> Optional[list[dict[str, list[str]]]]:
    if not isinstance(raw, list):
        return None
    requirements: list[dict[str, list[str]]] = []
    for requirement in raw:
        if isinstance(requirement, dict):
            requirements.append(
                {str(name): [str(s) for s in scopes or []] for name, scopes in requirement.items()}
            )
    return requirements


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None
