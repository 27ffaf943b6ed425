"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~codingexpress.exceptions.CodingExpressError` subclass.
Shell scripts wrapping the generator can inspect the exit code to find out
why a run stopped without parsing stderr.

Example::

    $ codingexpress make:model Product
    $ echo $?
    3   # EXIT_MISSING_CONFIG -- not run from a project root
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_MISSING_CONFIG = 3
"""A ``make:*``/``update:*`` command was run outside an initialised project."""

EXIT_MISSING_ARTIFACT = 4
"""A file that ``update:*`` needs to modify does not exist."""

EXIT_DEPENDENCY_INSTALL_FAILURE = 5
"""``npm install`` failed while bootstrapping a project."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI specification could not be loaded, parsed or validated."""
