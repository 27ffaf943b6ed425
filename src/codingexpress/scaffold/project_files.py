"""The static files of a new project and of its authentication system.

JSON files (``package.json``, ``.prettierrc``, ``.vscode/settings.json``) are
built as dictionaries and serialised; JavaScript and dotenv files are
rendered from ``templates/project`` and ``templates/auth``.
"""

from __future__ import annotations

import re
import secrets
from pathlib import Path
from typing import Any, Iterable

from codingexpress.exceptions import NameValidationError
from codingexpress.generator.registrar import ROUTES_HOOK
from codingexpress.generator.renderer import orm_context, render_json, render_template
from codingexpress.models import OrmChoice, ProjectConfig
from codingexpress.output import get_output
from codingexpress.scaffold.files import append_unless_present, create_file_if_absent

BASE_DIRECTORIES = (
    "app/controllers",
    "app/models",
    "app/routes",
    "app/middleware",
    "app/validators",
    "config",
    "public",
    ".vscode",
)
PRISMA_SCHEMA_DIR = "prisma/schema"

_COMMON_DEPENDENCIES = {
    "bcryptjs": "^2.4.3",
    "cors": "^2.8.5",
    "dotenv": "^16.4.5",
    "express": "^4.19.2",
    "express-validator": "^7.2.0",
    "jsonwebtoken": "^9.0.2",
    "nodemailer": "^6.9.15",
    "twilio": "^5.3.3",
}

_ENV_AUTH_MARKER = "JWT_SECRET="


def project_directories(orm: OrmChoice) -> list[str]:
    directories = list(BASE_DIRECTORIES)
    if not orm.is_document:
        directories.append(PRISMA_SCHEMA_DIR)
    return directories


def package_name(app_name: str) -> str:
    """npm package name for *app_name* (lowercase, whitespace as hyphens)."""
    return re.sub(r"\s+", "-", app_name.strip()).lower() or "app"


def database_name(app_name: str) -> str:
    return re.sub(r"[^a-z0-9_]", "_", package_name(app_name))


def package_json(config: ProjectConfig) -> dict[str, Any]:
    dependencies = dict(_COMMON_DEPENDENCIES)
    dev_dependencies = {"nodemon": "^3.1.7", "prettier": "^3.3.3"}
    scripts = {
        "start": "node server.js",
        "dev": "nodemon server.js",
        "format": "prettier --write .",
    }
    data: dict[str, Any] = {
        "name": package_name(config.app_name),
        "version": "1.0.0",
        "description": f"{config.app_name}, an Express.js application generated by codingexpress",
        "main": "server.js",
        "scripts": scripts,
    }

    if config.orm.is_document:
        dependencies["mongoose"] = "^8.7.0"
    else:
        dependencies["@prisma/client"] = "^5.22.0"
        dev_dependencies["prisma"] = "^5.22.0"
        scripts["postinstall"] = "prisma generate"
        scripts["prisma:migrate"] = "prisma migrate dev"
        scripts["prisma:studio"] = "prisma studio"
        data["prisma"] = {"schema": PRISMA_SCHEMA_DIR}

    data["dependencies"] = dict(sorted(dependencies.items()))
    data["devDependencies"] = dev_dependencies
    data["keywords"] = []
    data["author"] = ""
    data["license"] = "ISC"
    return data


PRETTIER_CONFIG = {
    "semi": True,
    "trailingComma": "es5",
    "singleQuote": True,
    "printWidth": 100,
    "tabWidth": 2,
    "useTabs": False,
    "bracketSpacing": True,
    "arrowParens": "avoid",
}

VSCODE_SETTINGS = {
    "editor.defaultFormatter": "esbenp.prettier-vscode",
    "editor.formatOnSave": True,
    "[javascript]": {
        "editor.defaultFormatter": "esbenp.prettier-vscode",
        "editor.formatOnSave": True,
    },
    "[json]": {
        "editor.defaultFormatter": "esbenp.prettier-vscode",
        "editor.formatOnSave": True,
    },
}


def core_files(config: ProjectConfig) -> dict[str, str]:
    """Relative path -> contents of every static project file."""
    context = {
        **orm_context(config.orm),
        "app_name": config.app_name,
        "db_name": database_name(config.app_name),
        "hook": ROUTES_HOOK,
    }
    database_template = (
        "project/database_mongoose.js.j2"
        if config.orm.is_document
        else "project/database_prisma.js.j2"
    )
    files = {
        "package.json": render_json(package_json(config)),
        "server.js": render_template("project/server.js.j2", **context),
        "app/routes/index.js": render_template("project/router_index.js.j2", **context),
        "app/middleware/errorHandler.js": render_template("project/error_handler.js.j2", **context),
        ".env": render_template("project/env.j2", **context),
        ".gitignore": render_template("project/gitignore.j2", **context),
        "config/database.js": render_template(database_template, **context),
        ".prettierrc": render_json(PRETTIER_CONFIG),
        ".prettierignore": render_template("project/prettierignore.j2", **context),
        ".vscode/settings.json": render_json(VSCODE_SETTINGS),
    }
    if not config.orm.is_document:
        files[f"{PRISMA_SCHEMA_DIR}/schema.prisma"] = render_template(
            "project/schema.prisma.j2", **context
        )
    return files


AUTH_CONTROLLER_PATH = "app/controllers/AuthController.js"
AUTH_ROUTES_PATH = "app/routes/authRoutes.js"
AUTH_MIDDLEWARE_PATH = "app/middleware/authMiddleware.js"
AUTH_VALIDATOR_PATH = "app/validators/authValidator.js"


def auth_user_model_path(orm: OrmChoice) -> str:
    if orm.is_document:
        return "app/models/User.js"
    return f"{PRISMA_SCHEMA_DIR}/User.prisma"


def auth_file_paths(orm: OrmChoice) -> list[str]:
    return [
        auth_user_model_path(orm),
        AUTH_CONTROLLER_PATH,
        AUTH_ROUTES_PATH,
        AUTH_MIDDLEWARE_PATH,
        AUTH_VALIDATOR_PATH,
    ]


def check_not_reserved(model: str, target_paths: Iterable[str], orm: OrmChoice) -> None:
    """Refuse artifacts that would take the place of an authentication file.

    Paths are compared case-insensitively, so ``AuthValidator.js`` clashes
    with ``authValidator.js`` on case-insensitive file systems too.

    Raises:
        NameValidationError: If any of *target_paths* is an auth file.
    """
    reserved = {path.lower(): path for path in auth_file_paths(orm)}
    clashes = [reserved[path.lower()] for path in target_paths if path.lower() in reserved]
    if clashes:
        raise NameValidationError(
            f"'{model}' is reserved for the authentication system "
            f"({', '.join(clashes)}). Rename the resource, e.g. with a different tag."
        )


def auth_files(config: ProjectConfig) -> dict[str, str]:
    """Relative path -> contents of the authentication system."""
    context = {**orm_context(config.orm), "app_name": config.app_name}
    if config.orm.is_document:
        user_model = render_template("auth/user_mongoose.js.j2", **context)
        controller = render_template("auth/auth_controller_mongoose.js.j2", **context)
    else:
        user_model = render_template("auth/user_prisma.prisma.j2", **context)
        controller = render_template("auth/auth_controller_prisma.js.j2", **context)
    return {
        auth_user_model_path(config.orm): user_model,
        AUTH_CONTROLLER_PATH: controller,
        AUTH_ROUTES_PATH: render_template("auth/auth_routes.js.j2", **context),
        AUTH_MIDDLEWARE_PATH: render_template("auth/auth_middleware.js.j2", **context),
        AUTH_VALIDATOR_PATH: render_template("auth/auth_validator.js.j2", **context),
    }


def write_files(root: Path, files: dict[str, str]) -> None:
    for relative, contents in files.items():
        create_file_if_absent(root, relative, contents)


def append_auth_settings(root: Path) -> bool:
    """Append JWT, OTP, mail, SMS and CORS settings to ``.env`` once.

    Fresh random JWT secrets are generated for each project. Nothing is
    appended when ``JWT_SECRET`` is already defined.
    """
    block = render_template(
        "auth/env_auth.j2",
        jwt_secret=secrets.token_hex(32),
        jwt_refresh_secret=secrets.token_hex(32),
    )
    changed = append_unless_present(root / ".env", _ENV_AUTH_MARKER, block)
    if changed:
        get_output().info(
            "Updated file: .env (added JWT, refresh token, OTP, email/SMS and CORS settings)"
        )
    else:
        get_output().info("Skipped: .env auth settings (already present)")
    return changed
