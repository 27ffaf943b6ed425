"""Load OpenAPI documents from a local file or a remote URL.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python dictionaries. JSON and YAML are both accepted, with the
format taken from the file extension or the response ``content-type`` and
sniffed from the content otherwise.

The public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`validate_openapi_document` -- Check the top-level structure and
  return the ``openapi`` version string.
* :func:`load_spec_document` -- The whole pipeline: load, validate, resolve
  every ``$ref`` and extract a :class:`~codingexpress.models.SpecDocument`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from codingexpress.exceptions import SpecParseError
from codingexpress.models import SpecDocument

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from a URL or a file path.

    Args:
        source: An ``http(s)://`` URL or a local file path.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if is_url(source):
        return _load_from_url(source)
    return _load_from_file(source)


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP. Supports JSON and YAML responses."""
    logger.debug("Fetching %s", url)
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint, origin=url)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Falls back to content-based detection when the extension is not one of
    ``.json``, ``.yaml`` or ``.yml``.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint, origin=path)


def _parse_content(content: str, hint: str = "", origin: str = "spec") -> dict[str, Any]:
    """Parse *content* as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; valid JSON is also valid
    YAML, but the JSON parser gives better error messages for JSON input.

    Raises:
        SpecParseError: If the content is neither, or is not a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON in {origin}: {exc}") from exc
        else:
            return _require_mapping(result, origin)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {origin} as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc

    return _require_mapping(result, origin)


def _require_mapping(result: Any, origin: str) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"{origin} must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_document(spec: dict[str, Any]) -> str:
    """Validate the top-level structure and return the OpenAPI version string.

    Accepts any ``3.x`` version. Swagger 2.x documents, a missing ``openapi``
    field, and a missing or non-object ``info`` or ``paths`` are rejected.

    Raises:
        SpecParseError: With a message naming the offending field.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x documents are accepted. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version_str = str(openapi_version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. Only OpenAPI 3.x is supported."
        )

    if not isinstance(spec.get("info"), dict):
        raise SpecParseError("Invalid OpenAPI document: 'info' must be an object.")
    if not isinstance(spec.get("paths"), dict):
        raise SpecParseError("Invalid OpenAPI document: 'paths' must be an object.")

    return version_str


def load_spec_document(source: str) -> SpecDocument:
    """Load *source* and return a fully dereferenced :class:`SpecDocument`.

    Example::

        document = load_spec_document("openapi.yaml")
        [op.operation_id for op in document.operations]
    """
    from codingexpress.parser.extractor import extract_document
    from codingexpress.parser.resolver import resolve_refs

    raw = load_spec(source)
    version = validate_openapi_document(raw)
    base = source if is_url(source) else str(Path(source).resolve())
    resolved = resolve_refs(raw, base=base)
    document = extract_document(resolved, version)
    logger.debug(
        "Loaded %s: %d schemas, %d operations",
        source,
        len(document.schemas),
        len(document.operations),
    )
    return document
