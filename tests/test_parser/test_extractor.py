"""Tests for codingexpress.parser.extractor."""

from __future__ import annotations

from typing import Any

from codingexpress.models import (
    ArraySchema,
    HTTPMethod,
    IntegerSchema,
    ObjectSchema,
    StringSchema,
    UntypedSchema,
)
from codingexpress.parser.extractor import decode_schema, extract_document
from codingexpress.parser.resolver import resolve_refs


class TestDecodeSchema:
    def test_scalars(self) -> None:
        assert isinstance(decode_schema({"type": "string"}), StringSchema)
        assert isinstance(decode_schema({"type": "integer"}), IntegerSchema)
        assert decode_schema({"type": "number"}).type == "number"
        assert decode_schema({"type": "boolean"}).type == "boolean"

    def test_format_and_enum_kept(self) -> None:
        node = decode_schema({"type": "string", "format": "email", "enum": ["a", "b"]})
        assert node.format == "email"
        assert node.enum_values == ["a", "b"]

    def test_openapi_31_type_list(self) -> None:
        assert isinstance(decode_schema({"type": ["string", "null"]}), StringSchema)
        assert isinstance(decode_schema({"type": ["null"]}), UntypedSchema)

    def test_array_items(self) -> None:
        node = decode_schema({"type": "array", "items": {"type": "integer"}})
        assert isinstance(node, ArraySchema)
        assert isinstance(node.items, IntegerSchema)

    def test_properties_without_type_is_object(self) -> None:
        node = decode_schema({"properties": {"a": {"type": "string"}}})
        assert isinstance(node, ObjectSchema)
        assert list(node.properties) == ["a"]

    def test_required_filtered_and_deduplicated(self) -> None:
        node = decode_schema(
            {
                "type": "object",
                "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
                "required": ["b", "ghost", "b"],
            }
        )
        assert node.required == ["b"]
        assert node.is_required("b")
        assert not node.is_required("a")

    def test_all_of_merges_members(self) -> None:
        node = decode_schema(
            {
                "allOf": [
                    {"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]},
                    {"type": "object", "properties": {"name": {"type": "string"}}},
                ],
                "properties": {"extra": {"type": "boolean"}},
                "required": ["name"],
            }
        )
        assert isinstance(node, ObjectSchema)
        assert list(node.properties) == ["id", "name", "extra"]
        assert node.required == ["id", "name"]

    def test_unknown_type_is_untyped(self) -> None:
        assert isinstance(decode_schema({"type": "file"}), UntypedSchema)
        assert isinstance(decode_schema("not a schema"), UntypedSchema)


class TestExtractDocument:
    def test_products(self, products_raw: dict[str, Any]) -> None:
        document = extract_document(resolve_refs(products_raw), "3.0.3")
        assert document.title == "Product API"
        assert document.version == "1.0.0"

        product = document.schemas["Product"]
        assert isinstance(product, ObjectSchema)
        assert product.required == ["name"]
        assert product.properties["price"].type == "number"

        methods = [(op.method, op.path) for op in document.operations]
        assert methods == [
            (HTTPMethod.GET, "/products"),
            (HTTPMethod.POST, "/products"),
            (HTTPMethod.GET, "/products/{id}"),
        ]
        assert document.operations[0].summary == "List products"

    def test_paths_view(self, products_raw: dict[str, Any]) -> None:
        document = extract_document(resolve_refs(products_raw), "3.0.3")
        assert set(document.paths["/products"]) == {HTTPMethod.GET, HTTPMethod.POST}

    def test_security_override_and_public(self) -> None:
        spec = {
            "security": [{"bearerAuth": []}],
            "paths": {
                "/a": {
                    "get": {"operationId": "listA"},
                    "post": {"operationId": "createA", "security": []},
                    "put": {"operationId": "updateA", "security": [{"apiKey": ["write"]}]},
                }
            },
        }
        ops = extract_document(spec, "3.0.0").operations
        assert ops[0].security == [{"bearerAuth": []}]
        assert not ops[0].is_public
        assert ops[1].security == []
        assert ops[1].is_public
        assert ops[2].security == [{"apiKey": ["write"]}]

    def test_non_operation_keys_ignored(self) -> None:
        spec = {
            "paths": {
                "/a": {
                    "parameters": [{"name": "x", "in": "query"}],
                    "summary": "shared",
                    "get": {"operationId": "  listA  ", "tags": ["Alpha", None]},
                    "trace": "not an operation object",
                }
            }
        }
        ops = extract_document(spec, "3.0.0").operations
        assert len(ops) == 1
        assert ops[0].operation_id == "listA"
        assert ops[0].tags == ["Alpha"]

    def test_blank_operation_id_is_none(self) -> None:
        spec = {"paths": {"/a": {"get": {"operationId": "   "}}}}
        assert extract_document(spec, "3.0.0").operations[0].operation_id is None

    def test_non_list_tags_ignored(self) -> None:
        spec = {
            "paths": {
                "/pets": {
                    "get": {"operationId": "listPets", "tags": "pets"},
                    "post": {"operationId": "createPet", "tags": {"name": "pets"}},
                }
            }
        }
        ops = extract_document(spec, "3.0.0").operations
        assert [op.tags for op in ops] == [[], []]
