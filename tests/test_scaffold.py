"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import argparse
from unittest.mock import patch

import pytest

from redirect_porter import __version__
from redirect_porter.cli import exit_codes
from redirect_porter.cli.app import main
from redirect_porter.exceptions import (
    CheckpointWriteError,
    ConfigurationError,
    EnvironmentError,
    InputError,
    InputFileError,
    InputValidationError,
    RedirectPorterError,
    RemoteError,
    RemotePermanentError,
    RemoteTransientError,
    RetriesExhaustedError,
    TransferAbortedError,
    TransferInterruptedError,
)
from redirect_porter.infra.settings import Settings


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            EnvironmentError,
            InputError,
            InputFileError,
            InputValidationError,
            CheckpointWriteError,
            RemoteError,
            RemotePermanentError,
            RemoteTransientError,
            TransferAbortedError,
            TransferInterruptedError,
        ],
    )
    def test_all_exceptions_inherit_from_base(
        self, exc_class: type[RedirectPorterError]
    ) -> None:
        assert issubclass(exc_class, RedirectPorterError)

    def test_input_errors_share_a_parent(self) -> None:
        assert issubclass(InputFileError, InputError)
        assert issubclass(InputValidationError, InputError)

    def test_hint_is_stored(self) -> None:
        err = RedirectPorterError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        err = RedirectPorterError("boom")
        assert err.hint is None

    @pytest.mark.parametrize(
        ("exc", "retryable"),
        [
            (RemoteError("x"), True),
            (RemoteTransientError("x"), True),
            (RemotePermanentError("x"), False),
            (InputValidationError("x"), False),
            (CheckpointWriteError("x"), False),
        ],
    )
    def test_retryable_flag(self, exc: RedirectPorterError, retryable: bool) -> None:
        assert exc.retryable is retryable

    def test_permanent_error_keeps_messages(self) -> None:
        err = RemotePermanentError("rejected", messages=["a", "b"])
        assert err.messages == ("a", "b")

    def test_retries_exhausted_counts_attempts(self) -> None:
        err = RetriesExhaustedError("gave up", attempts=3)
        assert err.attempts == 3

    def test_interrupted_carries_resume_details(self, tmp_path) -> None:
        err = TransferInterruptedError(
            "stopped",
            operation="import",
            path=tmp_path / "r.csv",
            completed_chunks=2,
        )
        assert err.operation == "import"
        assert err.path == tmp_path / "r.csv"
        assert err.completed_chunks == 2


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No arguments should print help and exit 0."""
        code = main([])
        assert code == exit_codes.SUCCESS
        assert "import" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    @patch("redirect_porter.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_returns_success(self, _mock_doc: object) -> None:
        code = main(["doctor"])
        assert code == exit_codes.SUCCESS

    def test_import_routes_to_handler(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        seen: dict[str, object] = {}

        def fake_handle(args: argparse.Namespace, settings: Settings) -> int:
            seen["path"] = args.csv_path
            seen["reset"] = args.reset
            seen["account"] = settings.account
            return exit_codes.SUCCESS

        monkeypatch.setattr("redirect_porter.cli.app._handle_import", fake_handle)
        code = main(["--account", "store", "import", "routes.csv", "--reset"])

        assert code == exit_codes.SUCCESS
        assert str(seen["path"]) == "routes.csv"
        assert seen["reset"] is True
        assert seen["account"] == "store"

    def test_delete_routes_to_handler(
        self, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            "redirect_porter.cli.app._handle_delete",
            lambda args, settings: exit_codes.SUCCESS,
        )
        assert main(["delete", "old.csv"]) == exit_codes.SUCCESS

    def test_import_requires_a_path(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["import"])
        assert exc_info.value.code == 2
