"""Allow ``python -m redirect_porter`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m redirect_porter`` behaves identically to the
``redirect-porter`` console script.
"""

from __future__ import annotations

from redirect_porter.cli.app import cli

if __name__ == "__main__":
    cli()
