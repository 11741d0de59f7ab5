"""Regression tests for optional CLI UI dependencies (rich/questionary).

These tests verify bootstrap commands are resilient when optional UI
packages are missing, and that the UI paths fail cleanly only when they
are actually exercised.
"""

from __future__ import annotations

import logging
import sys

import pytest

from redirect_porter.cli import exit_codes
from redirect_porter.cli.app import main
from redirect_porter.exceptions import EnvironmentError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.logging", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.progress", None)
    monkeypatch.setattr("redirect_porter.cli.console._shared_console", None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


def test_help_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


def test_console_falls_back_to_plain_stderr(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    from redirect_porter.cli.console import console

    _hide_rich(monkeypatch)
    console.print("plain message")
    assert "plain message" in capsys.readouterr().err


def test_logging_falls_back_to_stream_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    from redirect_porter.cli.logging_setup import configure_logging

    _hide_rich(monkeypatch)
    logger = configure_logging()
    assert len(logger.handlers) == 1
    assert type(logger.handlers[0]) is logging.StreamHandler


def test_progress_errors_cleanly_when_rich_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    from redirect_porter.cli.progress import RichChunkProgress

    _hide_rich(monkeypatch)
    with pytest.raises(EnvironmentError, match="rich is not installed"):
        RichChunkProgress()


def test_reset_confirmation_errors_cleanly_when_questionary_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    from redirect_porter.cli.confirm import confirm_reset_deletion

    _hide_questionary(monkeypatch)
    with pytest.raises(EnvironmentError, match="questionary is not installed") as exc_info:
        confirm_reset_deletion(3)
    assert "--yes" in (exc_info.value.hint or "")
