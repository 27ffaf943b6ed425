"""Tests for codingexpress.generator.grouper."""

from __future__ import annotations

from codingexpress.generator.grouper import (
    AUTO_PREFIX,
    find_common_prefix,
    group_operations,
    relative_route_path,
)
from codingexpress.generator.naming import resource_names
from codingexpress.models import HTTPMethod, Operation, SpecDocument


def _op(path: str, method: str = "get", operation_id: str | None = None, tags: list[str] | None = None) -> Operation:
    return Operation(path=path, method=HTTPMethod(method), operation_id=operation_id, tags=tags or [])


# ---------------------------------------------------------------------------
# group_operations
# ---------------------------------------------------------------------------


class TestGroupOperations:
    def test_products_document(self, products_document: SpecDocument) -> None:
        result = group_operations(products_document.operations)
        assert list(result.groups) == ["Product"]
        group = result.groups["Product"]
        assert group.source == "path"
        assert group.names.plural == "products"
        assert [op.operation_id for op in group.operations] == [
            "listProducts",
            "createProduct",
            "getProductById",
        ]
        assert result.warnings == []

    def test_groups_follow_document_order(self) -> None:
        ops = [_op("/widgets"), _op("/orders"), _op("/widgets/{id}"), _op("/orders/{id}")]
        result = group_operations(ops)
        assert list(result.groups) == ["Widget", "Order"]
        assert len(result.groups["Widget"].operations) == 2

    def test_tag_is_authoritative(self) -> None:
        ops = [
            _op("/v1/items", tags=["Catalog"]),
            _op("/v2/items", tags=["Catalog"]),
        ]
        result = group_operations(ops)
        assert list(result.groups) == ["Catalog"]
        assert result.groups["Catalog"].source == "tag"
        assert len(result.groups["Catalog"].operations) == 2

    def test_first_tagged_operation_names_the_path(self) -> None:
        ops = [_op("/things"), _op("/things", "post", tags=["Gadgets"])]
        assert list(group_operations(ops).groups) == ["Gadget"]

    def test_singular_and_plural_paths_merge(self) -> None:
        ops = [_op("/products"), _op("/product/{id}")]
        result = group_operations(ops)
        assert list(result.groups) == ["Product"]
        assert result.groups["Product"].names.plural == "products"
        assert len(result.groups["Product"].operations) == 2

    def test_explicit_prefix(self) -> None:
        ops = [_op("/api/v1/users"), _op("/api/v1/users/{id}")]
        result = group_operations(ops, strip_prefix="/api/v1")
        assert list(result.groups) == ["User"]
        assert result.prefix == "/api/v1"

    def test_auto_prefix(self) -> None:
        ops = [_op("/api/v1/users"), _op("/api/v1/tasks")]
        result = group_operations(ops, strip_prefix=AUTO_PREFIX)
        assert result.prefix == "/api/v1"
        assert list(result.groups) == ["User", "Task"]

    def test_without_prefix_first_segment_wins(self) -> None:
        ops = [_op("/api/v1/users"), _op("/api/v1/tasks")]
        assert list(group_operations(ops).groups) == ["Api"]


class TestUnusablePaths:
    def test_punctuation_only_segment_is_skipped(self) -> None:
        result = group_operations([_op("/---/x"), _op("/orders")])
        assert list(result.groups) == ["Order"]
        assert result.warnings == [
            "Skipping path '/---/x': no alphanumeric characters to derive a resource name from."
        ]

    def test_root_path_is_skipped(self) -> None:
        result = group_operations([_op("/")])
        assert result.groups == {}
        assert len(result.warnings) == 1
        assert "'/'" in result.warnings[0]

    def test_leading_digit_is_skipped(self) -> None:
        result = group_operations([_op("/123abc")])
        assert result.groups == {}
        assert result.warnings[0].startswith("Skipping path '/123abc': Invalid name")


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


class TestRelativeRoutePath:
    def test_collection_and_item(self) -> None:
        names = resource_names("products")
        assert relative_route_path("/products", names) == "/"
        assert relative_route_path("/products/{id}", names) == "/{id}"

    def test_singular_segment(self) -> None:
        assert relative_route_path("/product/{id}", resource_names("products")) == "/{id}"

    def test_nested_action(self) -> None:
        names = resource_names("orders")
        assert relative_route_path("/orders/{orderId}/ship", names) == "/{orderId}/ship"

    def test_prefix_removed_first(self) -> None:
        names = resource_names("users")
        assert relative_route_path("/api/v1/users/{id}", names, "/api/v1") == "/{id}"

    def test_unrelated_path_kept_whole(self) -> None:
        assert relative_route_path("/v1/catalog", resource_names("Item")) == "/v1/catalog"


class TestFindCommonPrefix:
    def test_shared_prefix(self) -> None:
        assert find_common_prefix(["/api/v1/users", "/api/v1/tasks"]) == "/api/v1"

    def test_no_shared_prefix(self) -> None:
        assert find_common_prefix(["/users", "/tasks"]) == ""

    def test_single_path(self) -> None:
        assert find_common_prefix(["/api/v1/users"]) == ""

    def test_keeps_one_segment_per_path(self) -> None:
        assert find_common_prefix(["/api/users", "/api/users/{id}"]) == "/api"

    def test_stops_at_parameter(self) -> None:
        assert find_common_prefix(["/{tenant}/users", "/{tenant}/tasks"]) == ""
