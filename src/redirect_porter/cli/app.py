"""CLI application entry point and command routing for redirect-porter.

This module is the **sole error boundary** for the entire application.
It catches :class:`~redirect_porter.exceptions.RedirectPorterError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  service and infrastructure layers.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import shlex
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from redirect_porter.cli import exit_codes
from redirect_porter.cli.console import console
from redirect_porter.cli.logging_setup import configure_logging
from redirect_porter.exceptions import (
    RedirectPorterError,
    RemotePermanentError,
    TransferAbortedError,
    TransferInterruptedError,
)
from redirect_porter.infra.settings import Settings, load_settings
from redirect_porter.utils.constants import PROG
from redirect_porter.version import __version__

if TYPE_CHECKING:
    from redirect_porter.core.protocols import RewriterApi
    from redirect_porter.core.transfer_service import TransferService


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``redirect-porter import <csv> [--reset] [--yes]``
    * ``redirect-porter delete <csv>``
    * ``redirect-porter doctor``
    * ``redirect-porter --version``
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Import and delete redirects in bulk. Interrupted or failed runs "
            "resume where they stopped when re-run on the same file."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including full error details.",
    )
    parser.add_argument("--account", default=None, help="Account to operate on.")
    parser.add_argument("--workspace", default=None, help="Workspace to operate on.")

    commands = parser.add_subparsers(dest="command", metavar="<command>")

    import_parser = commands.add_parser(
        "import",
        help="Import redirects for the current account and workspace.",
    )
    import_parser.add_argument("csv_path", type=Path, help="';'-separated file with from;to;type[;endDate].")
    import_parser.add_argument(
        "-r",
        "--reset",
        action="store_true",
        help="Remove all previous redirects that are not in the file.",
    )
    import_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask before deleting old redirects with --reset.",
    )

    delete_parser = commands.add_parser(
        "delete",
        help="Delete redirects in the current account and workspace.",
    )
    delete_parser.add_argument("csv_path", type=Path, help="';'-separated file with a 'from' column.")

    commands.add_parser("doctor", help="Check the runtime environment.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _build_service(settings: Settings, client: RewriterApi) -> TransferService:
    """Wire infra adapters into a :class:`TransferService`."""
    from redirect_porter.cli.progress import RichChunkProgress
    from redirect_porter.core.transfer_service import TransferService
    from redirect_porter.infra.checkpoint_store import JsonCheckpointStore
    from redirect_porter.infra.csv_source import CsvRecordSource
    from redirect_porter.infra.interrupt import InterruptGuard

    return TransferService(
        client,
        JsonCheckpointStore(settings.state_file),
        CsvRecordSource(),
        account=settings.account,
        workspace=settings.workspace,
        max_retries=settings.max_retries,
        retry_delay=settings.retry_interval,
        interrupt_scope=InterruptGuard,
        progress=RichChunkProgress(),
    )


def _handle_import(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch a bulk import, optionally followed by the reset deletion."""
    from redirect_porter.cli.confirm import confirm_reset_deletion
    from redirect_porter.infra.rewriter_client import RewriterClient

    settings.require_credentials()
    confirm = None if args.yes else confirm_reset_deletion

    with RewriterClient(settings) as client:
        service = _build_service(settings, client)
        outcome = service.import_redirects(
            args.csv_path,
            reset=args.reset,
            confirm_reset=confirm,
        )

    console.print(
        f"\n[bold green]Import complete.[/bold green]  "
        f"{outcome.chunks_sent} of {outcome.total_chunks} chunk(s) sent."
    )
    return exit_codes.SUCCESS


def _handle_delete(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch a bulk deletion."""
    from redirect_porter.infra.rewriter_client import RewriterClient

    settings.require_credentials()

    with RewriterClient(settings) as client:
        service = _build_service(settings, client)
        outcome = service.delete_redirects(args.csv_path)

    console.print(
        f"\n[bold green]Delete complete.[/bold green]  "
        f"{outcome.chunks_sent} of {outcome.total_chunks} chunk(s) sent."
    )
    return exit_codes.SUCCESS


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from redirect_porter.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the redirect-porter CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(verbose=args.verbose)
    settings = load_settings(account=args.account, workspace=args.workspace)

    if args.command == "doctor":
        return _handle_doctor(settings)
    if args.command == "import":
        return _handle_import(args, settings)
    return _handle_delete(args, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _resume_command(exc: TransferAbortedError | TransferInterruptedError) -> str | None:
    """Return the command that resumes the transfer *exc* stopped.

    The session is always spelled out: the checkpoint is keyed on it, so a
    resume under another account or workspace would start over.
    """
    if exc.operation is None or exc.path is None:
        return None
    parts = [PROG]
    if exc.account:
        parts += ["--account", exc.account]
    if exc.workspace:
        parts += ["--workspace", exc.workspace]
    parts.append(exc.operation)
    if exc.reset:
        parts.append("--reset")
    parts.append(str(exc.path))
    return shlex.join(parts)


def _print_remote_messages(exc: BaseException) -> None:
    cause = exc.__cause__
    if isinstance(cause, RemotePermanentError):
        for message in cause.messages:
            console.print(f"  [red]-[/red] {message}")
        if cause.hint:
            console.print(f"[yellow]Hint:[/yellow] {cause.hint}")


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TransferInterruptedError as exc:
        console.print(f"\n[yellow]{exc}[/yellow]")
        resume = _resume_command(exc)
        if resume:
            console.print(f"Run [bold]{resume}[/bold] to resume.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except TransferAbortedError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        _print_remote_messages(exc)
        resume = _resume_command(exc)
        if resume:
            console.print(f"[yellow]Hint:[/yellow] Progress was kept. Run [bold]{resume}[/bold] to resume.")
        elif exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except RedirectPorterError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
