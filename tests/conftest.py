"""Shared test fixtures for codingexpress.

Provides reusable fixtures for loading OpenAPI fixtures, creating isolated
project directories, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml
from typer.testing import CliRunner

from codingexpress.models import OrmChoice, ProjectConfig, ProjectContext, SpecDocument
from codingexpress.output import OutputFormat, OutputManager, reset_output, set_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# OpenAPI fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def products_spec_path() -> Path:
    """Path of the Product end-to-end OpenAPI document."""
    return FIXTURES_DIR / "products.yaml"


@pytest.fixture
def products_raw(products_spec_path: Path) -> dict[str, Any]:
    with open(products_spec_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def products_document(products_spec_path: Path) -> SpecDocument:
    """The Product document, loaded and dereferenced."""
    from codingexpress.parser import load_spec_document

    return load_spec_document(str(products_spec_path))


@pytest.fixture
def shop_spec_path() -> Path:
    """A document with a schemaless ``/widgets`` group next to ``/orders``."""
    return FIXTURES_DIR / "shop.json"


@pytest.fixture
def split_spec_path() -> Path:
    """A document whose schemas live in a sibling file (``schemas/common.yaml``)."""
    return FIXTURES_DIR / "split" / "openapi.yaml"


# ---------------------------------------------------------------------------
# Project fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_DATA_HOME at a temporary directory so crash logs stay local."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))
    return data_dir


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, isolated_data_dir: Path) -> Path:
    """An empty project directory that is also the working directory."""
    root = tmp_path / "shop"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def mongoose_context(project_root: Path) -> ProjectContext:
    return ProjectContext(
        root=project_root,
        config=ProjectConfig(app_name="shop", orm=OrmChoice.MONGOOSE),
    )


@pytest.fixture
def prisma_context(project_root: Path) -> ProjectContext:
    return ProjectContext(
        root=project_root,
        config=ProjectConfig(app_name="shop", orm=OrmChoice.PRISMA),
    )


class FakeToolchain:
    """Records npm invocations instead of running them."""

    def __init__(self, install_error: Exception | None = None, audit_ok: bool = True) -> None:
        self.calls: list[str] = []
        self._install_error = install_error
        self._audit_ok = audit_ok

    def install(self, root: Path) -> None:
        self.calls.append("install")
        if self._install_error is not None:
            raise self._install_error

    def audit(self, root: Path) -> bool:
        self.calls.append("audit")
        return self._audit_ok

    def run_dev(self, root: Path) -> bool:
        self.calls.append("run_dev")
        return True


@pytest.fixture
def fake_toolchain() -> FakeToolchain:
    return FakeToolchain()


@pytest.fixture
def failing_toolchain() -> FakeToolchain:
    """A toolchain whose install step fails and whose audit reports problems."""
    from codingexpress.exceptions import DependencyInstallFailure

    return FakeToolchain(
        install_error=DependencyInstallFailure(
            "Failed to install dependencies (npm exited with 1). Please run `npm install` manually."
        ),
        audit_ok=False,
    )


@pytest.fixture
def initialized_project(mongoose_context: ProjectContext, fake_toolchain: FakeToolchain) -> ProjectContext:
    """A Mongoose project bootstrapped without an OpenAPI document."""
    from codingexpress.scaffold.bootstrap import bootstrap_project

    bootstrap_project(mongoose_context, install=False, toolchain=fake_toolchain)
    return mongoose_context


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """A non-quiet, colourless PLAIN output manager, for asserting messages."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    return CliRunner()
