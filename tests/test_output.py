"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet mode suppression rules
- Verbose mode debug output
- print_table in all three modes
- Markup escaping of generated-code snippets
- Logging configuration
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest

from codingexpress.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    configure_logging,
    get_output,
    reset_output,
    set_output,
)
from codingexpress import output as output_module


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("codingexpress.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("codingexpress.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on TTY state."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty, monkeypatch):
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        assert mgr.format == OutputFormat.JSON


# ------------------------------------------------------------------ #
# Color disabling
# ------------------------------------------------------------------ #


class TestColorDisabling:
    """Test NO_COLOR and TERM=dumb detection."""

    def test_no_color_env_disables_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert _should_disable_color() is True

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Test that data goes to stdout and diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    def test_created_file_goes_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.info("Created file: app/models/Product.js")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Created file: app/models/Product.js" in captured.err

    def test_error_has_prefix(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.error("something broke")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Error: something broke" in captured.err

    def test_warning_has_prefix(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.warning("be careful")
        assert "Warning: be careful" in capfd.readouterr().err

    def test_suggest_has_arrow(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.suggest("Install dependencies: npm install")
        assert "→ Install dependencies: npm install" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Quiet and verbose modes
# ------------------------------------------------------------------ #


class TestQuietMode:
    """Test that --quiet suppresses the right messages."""

    def test_quiet_suppresses_info_success_suggest(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("info")
        mgr.success("success")
        mgr.suggest("suggest")
        assert capfd.readouterr().err == ""

    def test_quiet_does_not_suppress_warning_or_error(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.warning("careful")
        mgr.error("broken")
        err = capfd.readouterr().err
        assert "careful" in err
        assert "broken" in err

    def test_quiet_does_not_suppress_stdout_data(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.print_table(["Resource"], [["Product"]])
        assert "Product" in capfd.readouterr().out


class TestVerboseMode:
    def test_debug_hidden_by_default(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.debug("hidden")
        assert capfd.readouterr().err == ""

    def test_debug_prefix_in_no_color(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("visible")
        assert "[debug] visible" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# print_table
# ------------------------------------------------------------------ #


class TestPrintTable:
    HEADERS = ["Resource", "Mount"]
    ROWS = [["Product", "/api/products"], ["Order", "/api/orders"]]

    def test_plain_is_tab_separated(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(self.HEADERS, self.ROWS)
        lines = capfd.readouterr().out.splitlines()
        assert lines == ["Resource\tMount", "Product\t/api/products", "Order\t/api/orders"]

    def test_json_is_list_of_records(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(self.HEADERS, self.ROWS)
        records = json.loads(capfd.readouterr().out)
        assert records[0] == {"Resource": "Product", "Mount": "/api/products"}

    def test_rich_renders_cells(self, capfd, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.print_table(self.HEADERS, self.ROWS, title="Generated resources")
        out = capfd.readouterr().out
        assert "Resource" in out
        assert "Product" in out


class TestMarkupEscaping:
    def test_hook_line_is_printed_verbatim(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.PLAIN)
        mgr.warning("Could not find '// [codingexpress] routes' in app/routes/index.js.")
        assert "// [codingexpress] routes" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestConfigureLogging:
    def test_verbose_enables_debug(self, non_tty):
        configure_logging(OutputManager(format=OutputFormat.PLAIN, verbose=True))
        logger = logging.getLogger("codingexpress")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_default_is_warning(self, non_tty):
        configure_logging(OutputManager(format=OutputFormat.PLAIN))
        configure_logging(OutputManager(format=OutputFormat.PLAIN))
        logger = logging.getLogger("codingexpress")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1


# ------------------------------------------------------------------ #
# Global instance management
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self, non_tty):
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_output_installs_instance(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_reset_output_clears_instance(self, non_tty):
        set_output(OutputManager(format=OutputFormat.JSON))
        reset_output()
        assert output_module._output is None

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.info("via module")
        output_module.warning("module warning")
        err = capfd.readouterr().err
        assert "via module" in err
        assert "Warning: module warning" in err
