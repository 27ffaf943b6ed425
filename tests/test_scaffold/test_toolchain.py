"""Tests for codingexpress.scaffold.toolchain."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from codingexpress.exceptions import DependencyInstallFailure
from codingexpress.scaffold.toolchain import NodeToolchain


def _completed(returncode: int) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["npm"], returncode=returncode)


class TestNodeToolchain:
    def test_install_runs_in_project_root(self, tmp_path: Path) -> None:
        with patch("codingexpress.scaffold.toolchain.shutil.which", return_value="/usr/bin/npm"), patch(
            "codingexpress.scaffold.toolchain.subprocess.run", return_value=_completed(0)
        ) as run:
            NodeToolchain().install(tmp_path)
        run.assert_called_once_with(["/usr/bin/npm", "install"], cwd=tmp_path)

    def test_install_failure(self, tmp_path: Path) -> None:
        with patch("codingexpress.scaffold.toolchain.shutil.which", return_value="/usr/bin/npm"), patch(
            "codingexpress.scaffold.toolchain.subprocess.run", return_value=_completed(1)
        ):
            with pytest.raises(DependencyInstallFailure, match="npm exited with 1") as exc_info:
                NodeToolchain().install(tmp_path)
        assert exc_info.value.exit_code == 5

    def test_missing_npm(self, tmp_path: Path) -> None:
        with patch("codingexpress.scaffold.toolchain.shutil.which", return_value=None):
            with pytest.raises(DependencyInstallFailure, match="npm install"):
                NodeToolchain().install(tmp_path)
            assert NodeToolchain().audit(tmp_path) is False
            assert NodeToolchain().run_dev(tmp_path) is False

    def test_audit_and_dev(self, tmp_path: Path) -> None:
        with patch("codingexpress.scaffold.toolchain.shutil.which", return_value="/usr/bin/npm"), patch(
            "codingexpress.scaffold.toolchain.subprocess.run", side_effect=[_completed(1), _completed(0)]
        ) as run:
            assert NodeToolchain().audit(tmp_path) is False
            assert NodeToolchain().run_dev(tmp_path) is True
        assert run.call_args_list[1].args[0] == ["/usr/bin/npm", "run", "dev"]
