"""Tests for codingexpress.scaffold.postman."""

from __future__ import annotations

import json

import pytest

from codingexpress.generator.emitter import emit, find_schema
from codingexpress.generator.grouper import group_operations
from codingexpress.models import FieldSpec, OrmChoice, SpecDocument
from codingexpress.scaffold.postman import (
    BASE_URL,
    POSTMAN_SCHEMA,
    auth_folder,
    build_collection,
    collection_filename,
    resource_folder,
    sample_value,
)


@pytest.fixture
def product_plan(products_document: SpecDocument):
    group = group_operations(products_document.operations).groups["Product"]
    return emit(group, OrmChoice.MONGOOSE, find_schema(products_document.schemas, group.names)).plan


class TestCollection:
    def test_auth_only(self) -> None:
        collection = build_collection("shop")
        assert collection["info"]["name"] == "shop"
        assert collection["info"]["schema"] == POSTMAN_SCHEMA
        assert [folder["name"] for folder in collection["item"]] == ["Authentication"]
        variables = {v["key"]: v["value"] for v in collection["variable"]}
        assert variables == {"baseUrl": BASE_URL, "accessToken": "", "refreshToken": ""}

    def test_serialisable(self, product_plan) -> None:
        json.dumps(build_collection("shop", [product_plan]))

    def test_filename(self) -> None:
        assert collection_filename("shop") == "shop.postman_collection.json"


class TestAuthFolder:
    def test_requests(self) -> None:
        items = auth_folder()["item"]
        assert len(items) == 10
        login = next(item for item in items if item["name"] == "Login User (with Password)")
        assert login["request"]["method"] == "POST"
        assert login["request"]["url"]["raw"] == "{{baseUrl}}/api/auth/login"
        assert "pm.collectionVariables" in "\n".join(login["event"][0]["script"]["exec"])

    def test_profile_is_authenticated(self) -> None:
        profile = next(item for item in auth_folder()["item"] if item["name"] == "Get User Profile")
        headers = {h["key"]: h["value"] for h in profile["request"]["header"]}
        assert headers == {"Authorization": "Bearer {{accessToken}}"}
        assert "body" not in profile["request"]


class TestResourceFolder:
    def test_one_request_per_route(self, product_plan) -> None:
        folder = resource_folder(product_plan)
        assert folder["name"] == "Product"
        assert [item["name"] for item in folder["item"]] == [
            "Product listProducts",
            "Product createProduct",
            "Product getProductById",
        ]
        urls = [item["request"]["url"]["raw"] for item in folder["item"]]
        assert urls == [
            "{{baseUrl}}/api/products",
            "{{baseUrl}}/api/products",
            "{{baseUrl}}/api/products/:id",
        ]

    def test_body_only_on_writes(self, product_plan) -> None:
        items = resource_folder(product_plan)["item"]
        assert "body" not in items[0]["request"]
        body = json.loads(items[1]["request"]["body"]["raw"])
        assert body == {"name": "Sample name", "price": 1.5}


class TestSampleValue:
    @pytest.mark.parametrize(
        "field,expected",
        [
            (FieldSpec(name="email", type_token="String", schema_type="string", format="email"), "user@example.com"),
            (FieldSpec(name="at", type_token="String", schema_type="string", format="date-time"), "2024-01-01T00:00:00.000Z"),
            (FieldSpec(name="qty", type_token="Number", schema_type="integer"), 1),
            (FieldSpec(name="ok", type_token="Boolean", schema_type="boolean"), True),
            (FieldSpec(name="tags", type_token="ArrayOfMixed", schema_type="array"), []),
            (FieldSpec(name="title", type_token="String", schema_type="string"), "Sample title"),
            (FieldSpec(name="blob", type_token="String"), "Sample blob"),
        ],
    )
    def test_values(self, field: FieldSpec, expected) -> None:
        assert sample_value(field) == expected
