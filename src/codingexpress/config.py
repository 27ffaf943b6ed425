"""Project configuration and user directories.

This module handles all persistent state of codingexpress:

* **Project config** -- ``codingexpress.json`` at the root of a generated
  project, deserialised into a :class:`~codingexpress.models.ProjectConfig`.
  Written once by ``init`` (:func:`save_project_config`) and read by every
  ``make:*`` and ``update:*`` command (:func:`load_project_config`).
* **Data directory** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.codingexpress/`` on macOS and Windows. Holds crash logs
  (:func:`get_data_dir`).

The project config is never held in a module-level variable: callers wrap it
in a :class:`~codingexpress.models.ProjectContext` and pass it explicitly.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path

from pydantic import ValidationError

from codingexpress.exceptions import ConfigError, MissingConfigError
from codingexpress.models import ProjectConfig, ProjectContext
from codingexpress.scaffold.files import WriteOutcome, create_file_if_absent

_APP_NAME = "codingexpress"
PROJECT_CONFIG_FILENAME = "codingexpress.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/codingexpress/`` (default
    ``~/.local/share/codingexpress/``). On macOS/Windows:
    ``~/.codingexpress/logs/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project config ---


def project_config_path(root: Path) -> Path:
    return root / PROJECT_CONFIG_FILENAME


def load_project_config(root: Path) -> ProjectConfig:
    """Load ``codingexpress.json`` from *root*.

    Raises:
        MissingConfigError: If the file does not exist, which almost always
            means the command was not run from the project root.
        ConfigError: If the file is not valid JSON or holds invalid values
            (for example an unknown ``ormChoice``).
    """
    path = project_config_path(root)
    if not path.is_file():
        raise MissingConfigError(
            f"{PROJECT_CONFIG_FILENAME} not found in {root}. "
            "Run this command from the root of a project created with 'codingexpress init'."
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


def load_project_context(root: Path) -> ProjectContext:
    """Shortcut: the :class:`ProjectContext` of the project at *root*."""
    return ProjectContext(root=root, config=load_project_config(root))


def save_project_config(root: Path, config: ProjectConfig) -> WriteOutcome:
    """Write ``codingexpress.json`` unless it already exists."""
    contents = json.dumps(config.model_dump(mode="json", by_alias=True), indent=2) + "\n"
    return create_file_if_absent(root, PROJECT_CONFIG_FILENAME, contents)
