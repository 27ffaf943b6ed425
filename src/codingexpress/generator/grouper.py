"""Partition OpenAPI operations into named resource groups.

Each route template yields one candidate resource name:

1. **Tag** -- ``tags[0]`` of the first operation under the path that has
   tags. Tags are authoritative, which lets a spec author merge
   ``/v1/items`` and ``/v2/items`` into one ``Item`` resource.
2. **Path** -- otherwise the first non-empty path segment (after an
   optional prefix strip) with non-alphanumeric characters removed.

Groups are keyed by the singular model name from
:func:`~codingexpress.generator.naming.resource_names`, so ``/product`` and
``/products`` land in the same group instead of fighting over
``Product.js``. A path whose candidate has no usable characters is skipped
with a warning; it never aborts the run.

:func:`relative_route_path` then turns each template into the path used
inside the resource's own route file, relative to where the router mounts it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from codingexpress.exceptions import NameValidationError
from codingexpress.generator.naming import resource_names, sanitize_name
from codingexpress.models import Operation, ResourceGroup, ResourceNames

logger = logging.getLogger(__name__)

AUTO_PREFIX = "auto"
"""Value of ``strip_prefix`` that requests common-prefix auto-detection."""


@dataclass
class GroupingResult:
    """Groups keyed by singular model name plus the warnings raised on the way."""

    groups: dict[str, ResourceGroup] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    prefix: str = ""


def group_operations(
    operations: list[Operation],
    strip_prefix: Optional[str] = None,
) -> GroupingResult:
    """Group *operations* into resources.

    Args:
        operations: Parsed operations in document order.
        strip_prefix: A path prefix such as ``/api/v1`` to remove before the
            first segment is read, or ``"auto"`` to strip the longest
            common prefix of all paths. ``None`` keeps paths as they are.

    Returns:
        A :class:`GroupingResult`. Group order follows the first appearance
        of each resource in the document.

    Example::

        result = group_operations(spec.operations)
        result.groups["Product"].names.plural   # 'products'
    """
    result = GroupingResult()
    by_path: dict[str, list[Operation]] = {}
    for op in operations:
        by_path.setdefault(op.path, []).append(op)

    prefix = _resolve_prefix(list(by_path), strip_prefix)
    result.prefix = prefix

    for path, path_ops in by_path.items():
        raw_name, source = _candidate_name(path, path_ops, prefix)
        if raw_name is None:
            result.warnings.append(
                f"Skipping path '{path}': no alphanumeric characters to derive a resource name from."
            )
            continue

        try:
            names = resource_names(raw_name)
        except NameValidationError as exc:
            result.warnings.append(f"Skipping path '{path}': {exc}")
            continue

        group = result.groups.get(names.model)
        if group is None:
            result.groups[names.model] = ResourceGroup(
                names=names, source=source, operations=list(path_ops)
            )
            logger.debug("New resource group %s from %s '%s'", names.model, source, raw_name)
        else:
            group.operations.extend(path_ops)

    return result


def relative_route_path(
    path: str,
    names: ResourceNames,
    prefix: str = "",
) -> str:
    """Return *path* relative to the resource's mount point.

    Segments up to and including the first one naming the resource (its
    plural or singular form) are removed. When no segment names the resource
    (e.g. a tag-grouped ``/v1/catalog``), the full path is kept.

    Example::

        >>> relative_route_path("/products/{id}", resource_names("products"))
        '/{id}'
    """
    if prefix:
        path = _strip_prefix(path, prefix)
    segments = _split_segments(path)
    targets = {names.plural, names.lower}
    for index, segment in enumerate(segments):
        if _is_path_param(segment):
            continue
        if sanitize_name(segment).lower() in targets:
            remaining = segments[index + 1 :]
            return "/" + "/".join(remaining) if remaining else "/"
    return "/" + "/".join(segments) if segments else "/"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _candidate_name(
    path: str,
    path_ops: list[Operation],
    prefix: str,
) -> tuple[Optional[str], str]:
    """Pick the raw resource name for *path* and say where it came from."""
    tagged = next((op for op in path_ops if op.tags), None)
    if tagged is not None and sanitize_name(tagged.tags[0]):
        return tagged.tags[0], "tag"

    segments = _split_segments(_strip_prefix(path, prefix) if prefix else path)
    if not segments:
        return None, "path"
    candidate = sanitize_name(segments[0])
    return (candidate or None), "path"


def _resolve_prefix(paths: list[str], strip_prefix: Optional[str]) -> str:
    if not strip_prefix:
        return ""
    if strip_prefix == AUTO_PREFIX:
        detected = find_common_prefix(paths)
        if detected:
            logger.debug("Detected common prefix: %s", detected)
        return detected
    return strip_prefix


def find_common_prefix(paths: list[str]) -> str:
    """Find the longest common path prefix across all *paths*.

    Only strips at segment boundaries and never across a path parameter.
    A single path returns an empty prefix since there is nothing to compare
    against, and the prefix is shortened until every path keeps at least one
    segment after stripping.

    Example::

        >>> find_common_prefix(["/api/v1/users", "/api/v1/tasks"])
        '/api/v1'
        >>> find_common_prefix(["/users", "/tasks"])
        ''
    """
    split_paths = [_split_segments(p) for p in paths]
    if len(split_paths) < 2:
        return ""

    prefix_segments: list[str] = []
    for parts in zip(*split_paths):
        if len(set(parts)) == 1 and not _is_path_param(parts[0]):
            prefix_segments.append(parts[0])
        else:
            break

    while prefix_segments:
        prefix_len = len(prefix_segments)
        if all(len(segs) > prefix_len for segs in split_paths):
            break
        prefix_segments.pop()

    if not prefix_segments:
        return ""
    return "/" + "/".join(prefix_segments)


def _is_path_param(segment: str) -> bool:
    """Return ``True`` if *segment* is a path parameter (e.g., ``{id}``)."""
    return segment.startswith("{") and segment.endswith("}")


def _split_segments(path: str) -> list[str]:
    """Split a path into non-empty segments.

    ``"/api/v1/users"`` -> ``["api", "v1", "users"]``
    ``"/"``             -> ``[]``
    """
    return [s for s in path.split("/") if s]


def _strip_prefix(path: str, prefix: str) -> str:
    """Strip *prefix* from *path*. Returns path with leading ``/``.

    If *path* does not start with *prefix*, it is returned unchanged.
    """
    prefix_segments = _split_segments(prefix)
    path_segments = _split_segments(path)

    if path_segments[: len(prefix_segments)] != prefix_segments:
        return path

    remaining = path_segments[len(prefix_segments) :]
    if not remaining:
        return "/"
    return "/" + "/".join(remaining)
