"""Update command -- add a custom action to an existing resource."""

from __future__ import annotations

from pathlib import Path

import typer

from codingexpress.output import error, success, suggest


def update_resource_command(
    target: str = typer.Argument(
        ..., metavar="NAME.METHOD", help="Resource and new method, e.g. Product.publishAll."
    ),
) -> None:
    """Add a stub controller method and a GET route for it.

    The method answers ``501 Not Implemented`` until it is filled in.

    Example::

        codingexpress update:resource Product.publishAll
    """
    from codingexpress.config import load_project_context
    from codingexpress.exceptions import CodingExpressError
    from codingexpress.scaffold.makers import update_resource

    try:
        context = load_project_context(Path.cwd())
        changed = update_resource(target, context)
    except CodingExpressError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if changed:
        success(f"update:resource {target} done.")
        suggest("Implement the new method in the controller; it currently returns 501.")
