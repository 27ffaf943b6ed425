"""OpenAPI document parser -- load, dereference, and decode.

This sub-package turns an OpenAPI 3.x document (JSON or YAML, local file or
remote URL) into a :class:`~codingexpress.models.SpecDocument` whose schemas
are typed :data:`~codingexpress.models.SchemaNode` trees and whose operations
carry no ``$ref`` indirection.

Typical usage::

    from codingexpress.parser import load_spec_document

    document = load_spec_document("openapi.yaml")

Sub-modules:

* :mod:`~codingexpress.parser.loader` -- I/O layer (URL, file), format
  detection and structural validation.
* :mod:`~codingexpress.parser.resolver` -- ``$ref`` resolution across
  documents with circular-reference detection.
* :mod:`~codingexpress.parser.extractor` -- Decodes schemas and operations.
"""

from codingexpress.parser.extractor import decode_schema, extract_document
from codingexpress.parser.loader import load_spec, load_spec_document, validate_openapi_document
from codingexpress.parser.resolver import resolve_refs

__all__ = [
    "decode_schema",
    "extract_document",
    "load_spec",
    "load_spec_document",
    "resolve_refs",
    "validate_openapi_document",
]
