"""Naming utilities for code generation.

Every identifier that ends up in a generated JavaScript or Prisma file is
derived here, so that the four artifacts of a resource agree on one
capitalized singular and one lowercase form.
"""

from __future__ import annotations

import re
from typing import Optional

from codingexpress.exceptions import NameValidationError
from codingexpress.models import HTTPMethod, ResourceNames

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

_ARTIFACT_SUFFIXES = ("Controller", "Validator", "Routes", "Route")


def sanitize_name(raw: str) -> str:
    """Strip every non-alphanumeric character from *raw*."""
    return _NON_ALNUM.sub("", raw)


def capitalize(name: str) -> str:
    """Uppercase the first letter only (``orderItems`` -> ``OrderItems``)."""
    return name[:1].upper() + name[1:]


def singularize(name: str) -> str:
    """Strip one trailing ``s`` (``Products`` -> ``Product``).

    Irregular plurals are deliberately not handled: ``Categories`` becomes
    ``Categorie``.
    """
    if len(name) > 1 and name.endswith("s"):
        return name[:-1]
    return name


def resource_names(raw: str, plural: Optional[str] = None) -> ResourceNames:
    """Build the canonical :class:`~codingexpress.models.ResourceNames` for *raw*.

    Args:
        raw: A tag, a path segment or a name typed on the command line.
        plural: Explicit route mount segment. Defaults to the sanitized
            *raw* name, lowercased.

    Raises:
        NameValidationError: If *raw* has no alphanumeric character or starts
            with a digit (not a valid JavaScript identifier).

    Example::

        >>> resource_names("products").model
        'Product'
        >>> resource_names("products").plural
        'products'
    """
    sanitized = sanitize_name(raw)
    if not sanitized:
        raise NameValidationError(
            f"Invalid name '{raw}': it must contain at least one letter or digit."
        )
    if sanitized[0].isdigit():
        raise NameValidationError(
            f"Invalid name '{raw}': it must start with a letter."
        )

    model = singularize(capitalize(sanitized))
    mount = sanitize_name(plural) if plural else sanitized
    return ResourceNames(
        model=model,
        lower=model.lower(),
        camel=model[:1].lower() + model[1:],
        plural=(mount or sanitized).lower(),
    )


def strip_artifact_suffix(name: str) -> str:
    """Drop a trailing ``Controller``/``Validator``/``Routes`` from a CLI name.

    ``make:controller ProductController`` must produce
    ``ProductController.js``, not ``ProductControllerController.js``.
    """
    for suffix in _ARTIFACT_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def method_identifier(raw: str) -> Optional[str]:
    """Turn an ``operationId`` into a JavaScript method name.

    Separators are folded into camelCase (``list-products`` ->
    ``listProducts``); an identifier that would start with a digit gets an
    ``op`` prefix. Returns ``None`` when nothing usable is left.
    """
    words = [w for w in _WORD_SPLIT.split(raw) if w]
    if not words:
        return None
    ident = words[0][:1].lower() + words[0][1:] + "".join(capitalize(w) for w in words[1:])
    if ident[0].isdigit():
        ident = "op" + capitalize(ident)
    return ident


def derive_method_name(method: HTTPMethod, path: str) -> str:
    """Name a controller method after its HTTP method and path.

    Used when an operation has no ``operationId``::

        >>> derive_method_name(HTTPMethod.GET, "/widgets/{id}/stats")
        'getWidgetsByIdStats'
    """
    parts = [method.value]
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append("By" + capitalize(sanitize_name(segment[1:-1])))
        else:
            parts.append(capitalize(sanitize_name(segment)))
    return "".join(parts)


def kebab_case(name: str) -> str:
    """``publishAll`` -> ``publish-all``."""
    return _CAMEL_BOUNDARY.sub("-", name).lower()


def to_express_path(path: str) -> str:
    """Rewrite OpenAPI ``{param}`` placeholders as Express ``:param`` segments."""
    segments = []
    for segment in path.split("/"):
        if segment.startswith("{") and segment.endswith("}"):
            segments.append(":" + segment[1:-1])
        else:
            segments.append(segment)
    rewritten = "/".join(segments)
    return rewritten or "/"
