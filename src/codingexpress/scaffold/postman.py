"""Postman v2.1 collection for a generated project.

The collection always holds an *Authentication* folder covering every
endpoint of ``authRoutes.js``. Each resource generated from an OpenAPI
document adds one folder with a request per route entry. Login and refresh
requests store the returned tokens in the ``accessToken`` and
``refreshToken`` variables.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from codingexpress.models import FieldSpec, ResourcePlan

POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
BASE_URL = "http://localhost:3000"
API_PREFIX = "api"

_STORE_TOKENS = [
    "try {",
    "  var jsonData = pm.response.json();",
    "  if (jsonData.accessToken) {",
    '    pm.collectionVariables.set("accessToken", jsonData.accessToken);',
    "  }",
    "  if (jsonData.refreshToken) {",
    '    pm.collectionVariables.set("refreshToken", jsonData.refreshToken);',
    "  }",
    "} catch (e) {",
    "  console.log('Could not parse response JSON or find tokens.');",
    "}",
]

# (name, method, path, body, stores tokens, authenticated)
_AUTH_REQUESTS: tuple[tuple[str, str, str, Optional[dict[str, str]], bool, bool], ...] = (
    (
        "Register New User (Email & Password)",
        "POST",
        "auth/register",
        {"email": "newuser@example.com", "password": "password123"},
        False,
        False,
    ),
    (
        "Register New User (Phone Only)",
        "POST",
        "auth/register",
        {"phone": "+1234567890", "password": "password123"},
        False,
        False,
    ),
    ("Send OTP (to Email)", "POST", "auth/send-otp", {"email": "user@example.com"}, False, False),
    ("Send OTP (to Phone)", "POST", "auth/send-otp", {"phone": "+1234567890"}, False, False),
    (
        "Login User (with Password)",
        "POST",
        "auth/login",
        {"email": "user@example.com", "password": "password123"},
        True,
        False,
    ),
    (
        "Login User (with OTP)",
        "POST",
        "auth/login",
        {"email": "user@example.com", "otp": "123456"},
        True,
        False,
    ),
    (
        "Refresh Token",
        "POST",
        "auth/refresh-token",
        {"refreshToken": "{{refreshToken}}"},
        True,
        False,
    ),
    (
        "Forgot Password (Send OTP to Email)",
        "POST",
        "auth/forgot-password",
        {"email": "user@example.com"},
        False,
        False,
    ),
    (
        "Reset Password (with OTP)",
        "POST",
        "auth/reset-password",
        {"email": "user@example.com", "otp": "123456", "newPassword": "newpassword123"},
        False,
        False,
    ),
    ("Get User Profile", "GET", "auth/profile", None, False, True),
)

_BODY_METHODS = {"post", "put", "patch"}


def collection_filename(app_name: str) -> str:
    return f"{app_name}.postman_collection.json"


def _url(path_segments: list[str]) -> dict[str, Any]:
    segments = [API_PREFIX, *path_segments]
    return {
        "raw": "{{baseUrl}}/" + "/".join(segments),
        "host": ["{{baseUrl}}"],
        "path": segments,
    }


def _request(
    name: str,
    method: str,
    path_segments: list[str],
    body: Optional[dict[str, Any]] = None,
    stores_tokens: bool = False,
    authenticated: bool = False,
) -> dict[str, Any]:
    headers = []
    if body is not None:
        headers.append({"key": "Content-Type", "value": "application/json"})
    if authenticated:
        headers.append({"key": "Authorization", "value": "Bearer {{accessToken}}", "type": "text"})

    request: dict[str, Any] = {"method": method, "header": headers}
    if body is not None:
        request["body"] = {"mode": "raw", "raw": json.dumps(body, indent=2)}
    request["url"] = _url(path_segments)

    item: dict[str, Any] = {"name": name}
    if stores_tokens:
        item["event"] = [
            {"listen": "test", "script": {"exec": list(_STORE_TOKENS), "type": "text/javascript"}}
        ]
    item["request"] = request
    item["response"] = []
    return item


def sample_value(field: FieldSpec) -> Any:
    """An example value for *field* in a request body."""
    if field.format == "email":
        return "user@example.com"
    if field.format in ("date", "date-time"):
        return "2024-01-01T00:00:00.000Z"
    samples: dict[Optional[str], Any] = {
        "integer": 1,
        "number": 1.5,
        "boolean": True,
        "array": [],
        "object": {},
    }
    if field.schema_type in samples:
        return samples[field.schema_type]
    return f"Sample {field.name}"


def auth_folder() -> dict[str, Any]:
    items = [
        _request(name, method, path.split("/"), body, stores, authenticated)
        for name, method, path, body, stores, authenticated in _AUTH_REQUESTS
    ]
    return {"name": "Authentication", "item": items}


def resource_folder(plan: ResourcePlan) -> dict[str, Any]:
    """One request per route entry of *plan*, named after its handler."""
    names = plan.names
    body = {field.name: sample_value(field) for field in plan.model.properties}
    items = []
    for entry in plan.routes.entries:
        segments = [names.plural, *(s for s in entry.path.split("/") if s)]
        method_name = entry.handler.rsplit(".", 1)[-1]
        items.append(
            _request(
                f"{names.model} {method_name}",
                entry.verb.upper(),
                segments,
                body=dict(body) if entry.verb in _BODY_METHODS else None,
                authenticated="authMiddleware" in entry.middlewares,
            )
        )
    return {"name": names.model, "item": items}


def build_collection(app_name: str, plans: Optional[list[ResourcePlan]] = None) -> dict[str, Any]:
    """The full collection: authentication plus one folder per plan."""
    folders = [auth_folder()]
    folders.extend(resource_folder(plan) for plan in plans or [])
    return {
        "info": {"_postman_id": "{{$guid}}", "name": app_name, "schema": POSTMAN_SCHEMA},
        "item": folders,
        "variable": [
            {"key": "baseUrl", "value": BASE_URL, "type": "string"},
            {"key": "accessToken", "value": "", "type": "string"},
            {"key": "refreshToken", "value": "", "type": "string"},
        ],
    }
