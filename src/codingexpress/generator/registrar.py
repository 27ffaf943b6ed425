"""Mount generated route files in the project's main router.

``app/routes/index.js`` carries a hook line, ``// [codingexpress] routes``.
Registering a resource inserts two lines immediately above it::

    const productRoutes = require('./productRoutes');
    router.use('/products', productRoutes);

:func:`register` is a pure string transformation; :func:`register_in_router`
applies it to the file on disk. Registration is idempotent: an import line
that is already present raises :class:`RegistrationConflict` and the file is
left untouched, so registering twice yields the same bytes as registering
once.
"""

from __future__ import annotations

import logging
from pathlib import Path

from codingexpress.exceptions import (
    RegistrationConflict,
    RegistrationHookMissing,
    RegistrationRouterMissing,
)
from codingexpress.models import ResourceNames
from codingexpress.scaffold.files import atomic_write

logger = logging.getLogger(__name__)

ROUTER_PATH = "app/routes/index.js"
ROUTES_HOOK = "// [codingexpress] routes"
METHODS_HOOK = "// [codingexpress] methods"


def import_line(names: ResourceNames) -> str:
    return f"const {names.routes} = require('./{names.routes}');"


def mount_line(names: ResourceNames) -> str:
    return f"router.use('/{names.plural}', {names.routes});"


def insert_before_hook(source: str, hook: str, lines: list[str]) -> str:
    """Insert *lines* directly above the first line containing *hook*.

    The inserted lines take the hook line's indentation.

    Raises:
        RegistrationHookMissing: If no line contains *hook*.
    """
    source_lines = source.splitlines(keepends=True)
    for index, line in enumerate(source_lines):
        if hook in line:
            indent = line[: len(line) - len(line.lstrip())]
            newline = "\r\n" if line.endswith("\r\n") else "\n"
            block = [f"{indent}{text}{newline}" if text else newline for text in lines]
            return "".join(source_lines[:index] + block + source_lines[index:])
    raise RegistrationHookMissing(f"Hook line '{hook}' not found.")


def register(names: ResourceNames, router_source: str) -> str:
    """Return *router_source* with the resource's route file mounted.

    Raises:
        RegistrationConflict: If the import line is already present.
        RegistrationHookMissing: If the hook line is absent; the message
            contains the two lines to add by hand.
    """
    if import_line(names) in router_source:
        raise RegistrationConflict(
            f"Routes for {names.model} are already registered in {ROUTER_PATH}."
        )
    try:
        return insert_before_hook(router_source, ROUTES_HOOK, [import_line(names), mount_line(names)])
    except RegistrationHookMissing:
        raise RegistrationHookMissing(
            f"Could not find '{ROUTES_HOOK}' in {ROUTER_PATH}. Add these lines manually:\n"
            f"  {import_line(names)}\n"
            f"  {mount_line(names)}"
        ) from None


def register_in_router(root: Path, names: ResourceNames) -> Path:
    """Apply :func:`register` to ``app/routes/index.js`` under *root*.

    The file is rewritten only after the new contents are fully computed.

    Raises:
        RegistrationRouterMissing: If the router does not exist.
        RegistrationConflict: See :func:`register`.
        RegistrationHookMissing: See :func:`register`.
    """
    router = root / ROUTER_PATH
    if not router.is_file():
        raise RegistrationRouterMissing(
            f"Main router not found at {ROUTER_PATH}. Add these lines manually once it exists:\n"
            f"  {import_line(names)}\n"
            f"  {mount_line(names)}"
        )
    updated = register(names, router.read_text(encoding="utf-8"))
    atomic_write(router, updated)
    logger.debug("Registered %s in %s", names.routes, router)
    return router
