"""``redirect-porter doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies redirect-porter's
requirements.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import importlib
import importlib.metadata
import os
import platform
import sys

from redirect_porter.cli import exit_codes
from redirect_porter.cli.console import console
from redirect_porter.infra.settings import ENV_PREFIX, Settings
from redirect_porter.version import __version__

_OK = "[green]OK[/green]"
_WARN = "[yellow]WARN[/yellow]"
_FAIL = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _package_check(label: str, module: str, *, required: bool) -> tuple[str, str, str]:
    """Return (label, value, status) for an importable dependency."""
    try:
        importlib.import_module(module)
    except ImportError:
        return label, "NOT INSTALLED", _FAIL if required else _WARN
    try:
        version = importlib.metadata.version(label)
    except importlib.metadata.PackageNotFoundError:
        version = "unknown"
    return label, version, _OK


def _credentials_check(settings: Settings) -> tuple[str, str, str]:
    """Return (label, value, status) for the configured session."""
    if not settings.account:
        return "Account", f"{ENV_PREFIX}ACCOUNT not set", _WARN
    value = f"{settings.account} / {settings.workspace}"
    if not settings.token:
        return "Account", f"{value} (no token)", _WARN
    return "Account", value, _OK


def _state_file_check(settings: Settings) -> tuple[str, str, str]:
    """Return (label, value, status) for the checkpoint state file location."""
    directory = settings.state_file.parent
    resolved = directory.resolve()
    if not resolved.is_dir():
        return "State file", f"{resolved} missing", _FAIL
    if not os.access(resolved, os.W_OK):
        return "State file", f"{resolved} not writable", _FAIL
    return "State file", str(settings.state_file), _OK


def _version_check() -> tuple[str, str, str]:
    return "redirect-porter", __version__, _OK


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nredirect-porter doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<38} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<38} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.  Warnings do not fail.
    """
    checks = [
        _version_check(),
        _python_version_check(),
        _package_check("httpx", "httpx", required=True),
        _package_check("jsonschema", "jsonschema", required=True),
        _package_check("rich", "rich", required=False),
        _package_check("questionary", "questionary", required=False),
        _credentials_check(settings),
        _state_file_check(settings),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    code = exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS
    summary = "Some checks failed." if has_failure else "All checks passed."

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print(summary, file=sys.stderr)
        return code

    table = Table(
        title="redirect-porter doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()
    if has_failure:
        console.print(f"[bold red]{summary}[/bold red]")
    else:
        console.print(f"[bold green]{summary}[/bold green]")
    return code
