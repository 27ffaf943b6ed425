"""Infer the CRUD kind of an OpenAPI operation.

Classification is an explicit ordered list of rules, evaluated top to bottom;
the first rule that yields a kind wins:

1. **missing-operation-id** -- no ``operationId`` -> ``Custom``.
2. **create-prefix** -- ``create|add|store`` prefix -> ``Create``.
3. **replace-prefix** -- ``update|patch|edit`` prefix -> ``Replace``.
4. **delete-prefix** -- ``delete|remove|destroy`` prefix -> ``Delete``.
5. **retrieve-by-id** -- ``get|find|show|retrieve`` prefix and a ``ById`` or
   ``One`` suffix -> ``Retrieve``.
6. **list-keyword** -- ``list|get|find|index|search`` anywhere -> ``List``.
7. **structural** -- HTTP method and whether the path has a ``{param}``.
8. **fallback** -- ``Custom``.

Naming rules (2-6) sit above the structural rule because an explicit
``operationId`` expresses the author's intent: ``updateWidget`` on
``GET /widgets/{id}`` is a ``Replace``, not a ``Retrieve``. Prefix matches are
case-insensitive; the ``ById``/``One`` suffix is case-sensitive so that
``getPhone`` is not mistaken for ``get...One``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from codingexpress.models import CrudKind, HTTPMethod, Operation

RuleFn = Callable[[Optional[str], HTTPMethod, bool], Optional[CrudKind]]


@dataclass(frozen=True)
class ClassificationRule:
    """A named step of the classification pipeline."""

    name: str
    apply: RuleFn


def _prefix_rule(pattern: str, kind: CrudKind) -> RuleFn:
    regex = re.compile(rf"^(?:{pattern})", re.IGNORECASE)

    def _rule(operation_id: Optional[str], method: HTTPMethod, has_param: bool) -> Optional[CrudKind]:
        if operation_id and regex.match(operation_id):
            return kind
        return None

    return _rule


_RETRIEVE_PREFIX = re.compile(r"^(?:get|find|show|retrieve)", re.IGNORECASE)
_RETRIEVE_SUFFIX = re.compile(r"(?:ById|One)$")
_LIST_KEYWORD = re.compile(r"list|get|find|index|search", re.IGNORECASE)


def _missing_operation_id(operation_id: Optional[str], method: HTTPMethod, has_param: bool) -> Optional[CrudKind]:
    if not operation_id or not operation_id.strip():
        return CrudKind.CUSTOM
    return None


def _retrieve_by_id(operation_id: Optional[str], method: HTTPMethod, has_param: bool) -> Optional[CrudKind]:
    if operation_id and _RETRIEVE_PREFIX.match(operation_id) and _RETRIEVE_SUFFIX.search(operation_id):
        return CrudKind.RETRIEVE
    return None


def _list_keyword(operation_id: Optional[str], method: HTTPMethod, has_param: bool) -> Optional[CrudKind]:
    if operation_id and _LIST_KEYWORD.search(operation_id):
        return CrudKind.LIST
    return None


def _structural(operation_id: Optional[str], method: HTTPMethod, has_param: bool) -> Optional[CrudKind]:
    if method == HTTPMethod.GET:
        return CrudKind.RETRIEVE if has_param else CrudKind.LIST
    if method == HTTPMethod.POST and not has_param:
        return CrudKind.CREATE
    if method in (HTTPMethod.PUT, HTTPMethod.PATCH):
        return CrudKind.REPLACE
    if method == HTTPMethod.DELETE:
        return CrudKind.DELETE
    return None


def _fallback(operation_id: Optional[str], method: HTTPMethod, has_param: bool) -> Optional[CrudKind]:
    return CrudKind.CUSTOM


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("missing-operation-id", _missing_operation_id),
    ClassificationRule("create-prefix", _prefix_rule("create|add|store", CrudKind.CREATE)),
    ClassificationRule("replace-prefix", _prefix_rule("update|patch|edit", CrudKind.REPLACE)),
    ClassificationRule("delete-prefix", _prefix_rule("delete|remove|destroy", CrudKind.DELETE)),
    ClassificationRule("retrieve-by-id", _retrieve_by_id),
    ClassificationRule("list-keyword", _list_keyword),
    ClassificationRule("structural", _structural),
    ClassificationRule("fallback", _fallback),
)
"""The classification pipeline, in priority order."""


def has_path_parameter(path: str) -> bool:
    """Return ``True`` if *path* contains a ``{...}`` segment."""
    return any(seg.startswith("{") and seg.endswith("}") for seg in path.split("/"))


def classify_with_rule(
    operation_id: Optional[str],
    method: HTTPMethod | str,
    path: str,
) -> tuple[CrudKind, str]:
    """Classify an operation and report which rule decided it.

    Returns:
        A ``(kind, rule_name)`` tuple.
    """
    http_method = HTTPMethod(method.lower()) if isinstance(method, str) else method
    has_param = has_path_parameter(path)
    for rule in RULES:
        kind = rule.apply(operation_id, http_method, has_param)
        if kind is not None:
            return kind, rule.name
    # The fallback rule always matches; kept for type checkers.
    return CrudKind.CUSTOM, "fallback"


def classify(operation_id: Optional[str], method: HTTPMethod | str, path: str) -> CrudKind:
    """Return the :class:`~codingexpress.models.CrudKind` of one operation.

    Example::

        >>> classify("updateWidget", "GET", "/widgets/{id}")
        <CrudKind.REPLACE: 'replace'>
        >>> classify("fetchStats", "GET", "/stats")
        <CrudKind.LIST: 'list'>
    """
    return classify_with_rule(operation_id, method, path)[0]


def classify_operation(operation: Operation) -> CrudKind:
    """Shortcut for :func:`classify` on a parsed :class:`Operation`."""
    return classify(operation.operation_id, operation.method, operation.path)
