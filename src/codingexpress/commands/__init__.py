"""Built-in CLI commands for codingexpress.

* :mod:`~codingexpress.commands.init` -- create a project, optionally from
  an OpenAPI document.
* :mod:`~codingexpress.commands.make` -- ``make:controller``,
  ``make:model``, ``make:route`` and ``make:resource``.
* :mod:`~codingexpress.commands.update` -- ``update:resource``.

Each module exports plain callback functions that
:func:`codingexpress.app.main` registers on the root application under their
colon-separated names.
"""
