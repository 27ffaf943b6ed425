"""Resolve ``$ref`` JSON Reference pointers in OpenAPI documents.

Every ``$ref`` is replaced with a deep copy of its target, so the extractor
never sees indirection. Three reference forms are handled:

* internal -- ``#/components/schemas/Pet``
* relative file -- ``common.yaml#/Pet`` or ``./schemas/pet.json``
* URL -- ``https://example.com/schemas.yaml#/Pet``

Relative references are resolved against the document that *contains* them,
not against the root document, so a file referenced from ``schemas/a.yaml``
may itself refer to ``b.yaml`` next to it. Each external document is loaded
once per :func:`resolve_refs` call and cached.

Circular references are detected via a ``seen`` set of the references on the
current resolution stack. At the cycle point the ``$ref`` is replaced with an
untyped object placeholder, so the returned tree contains no ``$ref`` at all.

The single public function is :func:`resolve_refs`.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urljoin

from codingexpress.exceptions import SpecParseError
from codingexpress.parser.loader import is_url, load_spec

logger = logging.getLogger(__name__)

_ROOT = "#root"


def circular_placeholder(ref: str) -> dict[str, Any]:
    """The node that stands in for a reference back into its own ancestry."""
    return {"type": "object", "description": f"Circular reference to {ref}"}


class RefResolver:
    """Resolves references for one root document and caches external documents.

    Args:
        root: The root document, already parsed.
        base: Absolute file path or URL of the root document. ``None`` means
            only internal references can be resolved.
        loader: Callable used to fetch external documents.
    """

    def __init__(
        self,
        root: dict[str, Any],
        base: Optional[str] = None,
        loader: Callable[[str], dict[str, Any]] = load_spec,
    ) -> None:
        self._base = base
        self._loader = loader
        self._documents: dict[str, dict[str, Any]] = {base or _ROOT: root}

    def resolve(self) -> dict[str, Any]:
        root_key = self._base or _ROOT
        return self._deep_resolve(self._documents[root_key], root_key, frozenset())

    def _deep_resolve(self, obj: Any, doc_key: str, seen: frozenset[str]) -> Any:
        if isinstance(obj, dict):
            ref = obj.get("$ref")
            if isinstance(ref, str):
                target_key, pointer = self._split_ref(ref, doc_key)
                identity = f"{target_key}#{pointer}"
                if identity in seen:
                    logger.debug("Circular $ref %s replaced with a placeholder", ref)
                    return circular_placeholder(ref)
                document = self._document(target_key, ref)
                target = resolve_pointer(document, pointer, ref)
                return self._deep_resolve(target, target_key, seen | {identity})
            return {key: self._deep_resolve(value, doc_key, seen) for key, value in obj.items()}

        if isinstance(obj, list):
            return [self._deep_resolve(item, doc_key, seen) for item in obj]

        return obj

    def _split_ref(self, ref: str, doc_key: str) -> tuple[str, str]:
        """Return ``(document key, JSON pointer)`` for *ref* seen in *doc_key*."""
        location, _, pointer = ref.partition("#")
        if not location:
            return doc_key, pointer
        if is_url(location):
            return location, pointer
        if is_url(doc_key):
            return urljoin(doc_key, location), pointer
        if doc_key == _ROOT:
            raise SpecParseError(
                f"Cannot resolve external $ref '{ref}': the containing document has no location."
            )
        return str((Path(doc_key).parent / location).resolve()), pointer

    def _document(self, key: str, ref: str) -> dict[str, Any]:
        if key not in self._documents:
            logger.debug("Loading external document %s", key)
            try:
                self._documents[key] = self._loader(key)
            except SpecParseError as exc:
                raise SpecParseError(f"Cannot resolve $ref '{ref}': {exc}") from exc
        return self._documents[key]


def resolve_pointer(document: Any, pointer: str, ref: str) -> Any:
    """Navigate *document* along an RFC 6901 JSON Pointer.

    An empty pointer designates the whole document. ``~1`` decodes to ``/``
    and ``~0`` to ``~``, in that order.

    Raises:
        SpecParseError: If any segment of the pointer does not exist.
    """
    if not pointer:
        return document
    if not pointer.startswith("/"):
        raise SpecParseError(f"Cannot resolve $ref '{ref}': invalid JSON pointer '{pointer}'")

    current = document
    for raw_segment in pointer[1:].split("/"):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot navigate into {type(current).__name__}"
            )
    return current


def resolve_refs(
    spec: dict[str, Any],
    base: Optional[str] = None,
    loader: Callable[[str], dict[str, Any]] = load_spec,
) -> dict[str, Any]:
    """Return a deep copy of *spec* with every ``$ref`` replaced by its target.

    Args:
        spec: The raw document, as returned by
            :func:`~codingexpress.parser.loader.load_spec`.
        base: Absolute path or URL of *spec*; required for relative external
            references.
        loader: Callable used to fetch external documents.

    Raises:
        SpecParseError: If a target does not exist or an external document
            cannot be loaded.

    Example::

        raw = load_spec("openapi.yaml")
        resolved = resolve_refs(raw, base="/abs/path/openapi.yaml")
    """
    return RefResolver(copy.deepcopy(spec), base=base, loader=loader).resolve()
