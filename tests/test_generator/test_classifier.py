"""Tests for codingexpress.generator.classifier."""

from __future__ import annotations

import itertools

import pytest

from codingexpress.generator.classifier import (
    RULES,
    classify,
    classify_operation,
    classify_with_rule,
    has_path_parameter,
)
from codingexpress.models import CrudKind, HTTPMethod, Operation


class TestRules:
    @pytest.mark.parametrize(
        "operation_id,method,path,kind,rule",
        [
            (None, "post", "/orders/{id}/ship", CrudKind.CUSTOM, "missing-operation-id"),
            ("   ", "get", "/orders", CrudKind.CUSTOM, "missing-operation-id"),
            ("createProduct", "post", "/products", CrudKind.CREATE, "create-prefix"),
            ("AddToCart", "put", "/cart/{id}", CrudKind.CREATE, "create-prefix"),
            ("store", "post", "/products", CrudKind.CREATE, "create-prefix"),
            ("updateOrder", "put", "/orders/{id}", CrudKind.REPLACE, "replace-prefix"),
            ("patchOrder", "patch", "/orders/{id}", CrudKind.REPLACE, "replace-prefix"),
            ("removeItem", "delete", "/items/{id}", CrudKind.DELETE, "delete-prefix"),
            ("destroy", "delete", "/items/{id}", CrudKind.DELETE, "delete-prefix"),
            ("getProductById", "get", "/products/{id}", CrudKind.RETRIEVE, "retrieve-by-id"),
            ("findOne", "get", "/products/{id}", CrudKind.RETRIEVE, "retrieve-by-id"),
            ("listProducts", "get", "/products", CrudKind.LIST, "list-keyword"),
            ("searchOrders", "get", "/orders/search", CrudKind.LIST, "list-keyword"),
            ("getPhone", "get", "/phones/{id}", CrudKind.LIST, "list-keyword"),
            ("show", "get", "/products/{id}", CrudKind.RETRIEVE, "structural"),
            ("fetchStats", "get", "/stats", CrudKind.LIST, "structural"),
            ("publish", "patch", "/posts/{id}", CrudKind.REPLACE, "structural"),
            ("purge", "delete", "/cache", CrudKind.DELETE, "structural"),
            ("register", "post", "/users", CrudKind.CREATE, "structural"),
            ("ship", "post", "/orders/{id}/ship", CrudKind.CUSTOM, "fallback"),
            ("ping", "head", "/health", CrudKind.CUSTOM, "fallback"),
        ],
    )
    def test_rule_decides(self, operation_id, method, path, kind, rule) -> None:
        assert classify_with_rule(operation_id, method, path) == (kind, rule)

    def test_name_wins_over_shape(self) -> None:
        assert classify("updateWidget", "GET", "/widgets/{id}") == CrudKind.REPLACE
        assert classify("deleteAll", HTTPMethod.GET, "/widgets") == CrudKind.DELETE

    def test_rules_are_ordered(self) -> None:
        assert [rule.name for rule in RULES] == [
            "missing-operation-id",
            "create-prefix",
            "replace-prefix",
            "delete-prefix",
            "retrieve-by-id",
            "list-keyword",
            "structural",
            "fallback",
        ]

    def test_totality(self) -> None:
        operation_ids = [None, "", "createX", "updateX", "deleteX", "getXById", "listX", "doX"]
        paths = ["/x", "/x/{id}", "/x/{id}/y"]
        for operation_id, method, path in itertools.product(operation_ids, HTTPMethod, paths):
            assert isinstance(classify(operation_id, method, path), CrudKind)

    def test_classify_operation(self) -> None:
        op = Operation(path="/products/{id}", method=HTTPMethod.GET, operation_id="getProductById")
        assert classify_operation(op) == CrudKind.RETRIEVE

    def test_has_path_parameter(self) -> None:
        assert has_path_parameter("/a/{id}")
        assert not has_path_parameter("/a/b")
