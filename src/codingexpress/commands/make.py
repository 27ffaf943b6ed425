"""Make commands -- add artifacts to an existing project.

``make:controller``, ``make:model``, ``make:route`` and ``make:resource``
each accept one or more names. They must run from the project root, where
``codingexpress.json`` records the ORM the artifacts are written for.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from codingexpress.exit_codes import EXIT_INVALID_USAGE
from codingexpress.models import OrmChoice, ProjectContext
from codingexpress.output import error, success, suggest

_NAMES_ARGUMENT = typer.Argument(..., help="One or more resource names, e.g. Product Order.")
_ORM_HELP = "Override the project's ORM for this invocation."


def _run(
    target: str,
    names: list[str],
    orm: Optional[OrmChoice],
    connection: str = "default",
) -> ProjectContext:
    from codingexpress.config import load_project_context
    from codingexpress.exceptions import CodingExpressError
    from codingexpress.scaffold.makers import MakeTarget, make_many

    try:
        context = load_project_context(Path.cwd()).with_orm(orm)
        result = make_many(MakeTarget(target), names, context, connection=connection)
    except CodingExpressError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    for resource in result.generated:
        success(f"make:{target} {resource.model} done.")
    if result.all_failed:
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    return context


def make_controller_command(
    names: list[str] = _NAMES_ARGUMENT,
    orm: Optional[OrmChoice] = typer.Option(None, "--orm", case_sensitive=False, help=_ORM_HELP),
) -> None:
    """Create a controller with the five CRUD actions, plus its validator.

    Example::

        codingexpress make:controller Product
        codingexpress make:controller ProductController Order
    """
    _run("controller", names, orm)


def make_model_command(
    names: list[str] = _NAMES_ARGUMENT,
    connection: str = typer.Option(
        "default", "--connection", help="Named database connection (Mongoose only)."
    ),
    orm: Optional[OrmChoice] = typer.Option(None, "--orm", case_sensitive=False, help=_ORM_HELP),
) -> None:
    """Create a model.

    Mongoose models are written to ``app/models``; Prisma models to
    ``prisma/schema``.
    """
    context = _run("model", names, orm, connection=connection)
    if not context.orm.is_document:
        suggest("Run `npx prisma migrate dev` to apply the new model.")


def make_route_command(
    names: list[str] = _NAMES_ARGUMENT,
    orm: Optional[OrmChoice] = typer.Option(None, "--orm", case_sensitive=False, help=_ORM_HELP),
) -> None:
    """Create a route file and mount it in ``app/routes/index.js``."""
    _run("route", names, orm)


def make_resource_command(
    names: list[str] = _NAMES_ARGUMENT,
    connection: str = typer.Option(
        "default", "--connection", help="Named database connection (Mongoose only)."
    ),
    orm: Optional[OrmChoice] = typer.Option(None, "--orm", case_sensitive=False, help=_ORM_HELP),
) -> None:
    """Create model, validator, controller and route file, and mount the routes.

    Example::

        codingexpress make:resource Product
        codingexpress make:resource Invoice --connection secondary
    """
    _run("resource", names, orm, connection=connection)

