"""Exception hierarchy for codingexpress.

All exceptions inherit from :class:`CodingExpressError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`codingexpress.exit_codes`. Commands catch ``CodingExpressError``, print
the message and exit with that code, while unexpected exceptions reaching
:func:`codingexpress.app.main` produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    CodingExpressError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- NameValidationError        (exit 2, isolated per name)
    +-- MissingConfigError         (exit 3)
    +-- MissingArtifactError       (exit 4)
    +-- DependencyInstallFailure   (exit 5)
    +-- SpecParseError             (exit 7)
    +-- ConfigError                (exit 1)
    +-- RegistrationError          (non-fatal)
        +-- RegistrationConflict
        +-- RegistrationHookMissing
        +-- RegistrationRouterMissing
"""

from codingexpress.exit_codes import (
    EXIT_DEPENDENCY_INSTALL_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MISSING_ARTIFACT,
    EXIT_MISSING_CONFIG,
    EXIT_SPEC_PARSE_ERROR,
)


class CodingExpressError(Exception):
    """Base exception for all codingexpress errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`codingexpress.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CodingExpressError):
    """Raised for invalid CLI arguments (e.g. ``update:resource`` without ``Name.method``)."""

    exit_code = EXIT_INVALID_USAGE


class NameValidationError(CodingExpressError):
    """Raised when a resource name sanitizes to an empty string.

    Only the offending name is skipped; sibling names given in the same
    invocation are still generated.
    """

    exit_code = EXIT_INVALID_USAGE


class MissingConfigError(CodingExpressError):
    """Raised when ``codingexpress.json`` is absent (command not run from a project root)."""

    exit_code = EXIT_MISSING_CONFIG


class MissingArtifactError(CodingExpressError):
    """Raised when ``update:*`` targets a controller or route file that does not exist."""

    exit_code = EXIT_MISSING_ARTIFACT


class DependencyInstallFailure(CodingExpressError):
    """Raised when ``npm install`` fails during project bootstrap."""

    exit_code = EXIT_DEPENDENCY_INSTALL_FAILURE


class SpecParseError(CodingExpressError):
    """Raised when the OpenAPI spec cannot be loaded, parsed, resolved or validated."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(CodingExpressError):
    """Raised when ``codingexpress.json`` exists but is not valid."""

    exit_code = EXIT_GENERIC_FAILURE


class RegistrationError(CodingExpressError):
    """Base class for non-fatal router registration outcomes."""


class RegistrationConflict(RegistrationError):
    """Raised when a resource's routes are already registered in the router."""


class RegistrationHookMissing(RegistrationError):
    """Raised when the router file lacks the insertion hook line.

    The message contains the lines the user has to add by hand.
    """


class RegistrationRouterMissing(RegistrationError):
    """Raised when ``app/routes/index.js`` does not exist.

    The message contains the lines the user has to add by hand.
    """
