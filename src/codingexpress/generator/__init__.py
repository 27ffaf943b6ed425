"""Code generator -- turn parsed operations into Express.js source files.

This sub-package is the second half of the codingexpress pipeline: it takes
the :class:`~codingexpress.models.Operation` list and component schemas of a
:class:`~codingexpress.models.SpecDocument` and produces the model,
validator, controller and route file of every resource.

Typical usage::

    from codingexpress.generator import emit, find_schema, group_operations

    grouping = group_operations(document.operations)
    for group in grouping.groups.values():
        emitted = emit(group, OrmChoice.MONGOOSE, find_schema(document.schemas, group.names))

Sub-modules:

* :mod:`~codingexpress.generator.naming` -- resource names, method names and
  Express path conversion.
* :mod:`~codingexpress.generator.type_mapper` -- schema types to Mongoose or
  Prisma field types.
* :mod:`~codingexpress.generator.classifier` -- label each operation with a
  CRUD kind by ordered rules.
* :mod:`~codingexpress.generator.grouper` -- group operations into resources.
* :mod:`~codingexpress.generator.emitter` -- plan and render one resource.
* :mod:`~codingexpress.generator.renderer` -- the Jinja2 environment and
  templates.
* :mod:`~codingexpress.generator.registrar` -- mount route files in the main
  router.
"""

from codingexpress.generator.classifier import classify, classify_operation
from codingexpress.generator.emitter import emit, find_schema, plan_resource, standard_group
from codingexpress.generator.grouper import group_operations
from codingexpress.generator.naming import resource_names
from codingexpress.generator.registrar import register, register_in_router
from codingexpress.generator.type_mapper import map_fields

__all__ = [
    "classify",
    "classify_operation",
    "emit",
    "find_schema",
    "group_operations",
    "map_fields",
    "plan_resource",
    "register",
    "register_in_router",
    "resource_names",
    "standard_group",
]
