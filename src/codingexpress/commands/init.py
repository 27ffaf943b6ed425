"""Init command -- create a new Express.js project.

Implements ``codingexpress init``. Without an argument it writes the project
skeleton and the authentication system; with an OpenAPI document (local path
or URL) it also generates a model, validator, controller and route file for
every resource the document describes.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import typer

from codingexpress.models import OrmChoice
from codingexpress.output import error, info


def init_command(
    spec_file: Optional[str] = typer.Argument(
        None,
        help="OpenAPI 3.x document (file path or URL) to generate resources from.",
    ),
    name: Optional[str] = typer.Option(
        None, "--name", help="Application name (defaults to the current directory name)."
    ),
    orm: Optional[OrmChoice] = typer.Option(
        None, "--orm", case_sensitive=False, help="Persistence layer: mongoose or prisma."
    ),
    strip_prefix: Optional[str] = typer.Option(
        None,
        "--strip-prefix",
        help="Path prefix to ignore when grouping resources, e.g. /api/v1, or 'auto'.",
    ),
    skip_install: bool = typer.Option(
        False, "--skip-install", help="Do not run npm install and npm audit."
    ),
    no_server: bool = typer.Option(
        False, "--no-server", help="Do not start the development server."
    ),
    no_input: bool = typer.Option(
        False, "--no-input", help="Disable interactive prompts; use defaults."
    ),
) -> None:
    """Create a new Express.js project in the current directory.

    The application name and ORM come from ``--name`` / ``--orm``. When
    either is missing and stdin is a terminal, they are prompted for;
    otherwise the directory name and ``mongoose`` are used.

    Example::

        codingexpress init
        codingexpress init openapi.yaml --name shop --orm prisma
        codingexpress init https://example.com/openapi.json --skip-install
    """
    from codingexpress.exceptions import CodingExpressError
    from codingexpress.models import ProjectConfig, ProjectContext
    from codingexpress.scaffold.bootstrap import bootstrap_project

    root = Path.cwd()
    interactive = not no_input and sys.stdin.isatty()

    app_name = name
    if app_name is None:
        app_name = root.name or "app"
        if interactive:
            app_name = typer.prompt("Application name", default=app_name)

    if orm is None:
        orm = OrmChoice.MONGOOSE
        if interactive:
            choice = typer.prompt(
                "ORM",
                default=OrmChoice.MONGOOSE.value,
                type=click.Choice([o.value for o in OrmChoice], case_sensitive=False),
            )
            orm = OrmChoice(choice.lower())

    context = ProjectContext(root=root, config=ProjectConfig(app_name=app_name, orm=orm))

    try:
        result = bootstrap_project(
            context,
            spec_source=spec_file,
            install=not skip_install,
            start_server=not no_server,
            strip_prefix=strip_prefix,
        )
    except CodingExpressError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if result.failures:
        info(f"{len(result.failures)} resource(s) could not be generated; see the errors above.")
