"""Run the Node.js package manager for a freshly generated project.

:class:`NodeToolchain` wraps the three ``npm`` invocations ``init`` needs.
Commands inherit the terminal so the user sees npm's own progress output.
Tests substitute a fake object with the same three methods.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from codingexpress.exceptions import DependencyInstallFailure

logger = logging.getLogger(__name__)


class Toolchain(Protocol):
    def install(self, root: Path) -> None: ...

    def audit(self, root: Path) -> bool: ...

    def run_dev(self, root: Path) -> bool: ...


class NodeToolchain:
    """``npm install`` / ``npm audit`` / ``npm run dev`` in the project root."""

    def __init__(self, npm: str = "npm") -> None:
        self._npm = npm

    def _run(self, root: Path, *args: str) -> int:
        executable = shutil.which(self._npm)
        if executable is None:
            raise FileNotFoundError(f"'{self._npm}' was not found on PATH")
        logger.debug("Running %s %s in %s", self._npm, " ".join(args), root)
        return subprocess.run([executable, *args], cwd=root).returncode

    def install(self, root: Path) -> None:
        """Install the project's dependencies.

        Raises:
            DependencyInstallFailure: If npm is missing or exits non-zero.
        """
        try:
            returncode = self._run(root, "install")
        except FileNotFoundError as exc:
            raise DependencyInstallFailure(
                f"Failed to install dependencies: {exc}. Please run `npm install` manually."
            ) from exc
        if returncode != 0:
            raise DependencyInstallFailure(
                f"Failed to install dependencies (npm exited with {returncode}). "
                "Please run `npm install` manually."
            )

    def audit(self, root: Path) -> bool:
        """Run ``npm audit``. Returns ``False`` when vulnerabilities were reported."""
        try:
            return self._run(root, "audit") == 0
        except FileNotFoundError:
            return False

    def run_dev(self, root: Path) -> bool:
        """Start the development server; blocks until it exits."""
        try:
            return self._run(root, "run", "dev") == 0
        except FileNotFoundError:
            return False
