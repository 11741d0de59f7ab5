"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — every chunk was transferred, or there was nothing to do."""

GENERAL_ERROR: int = 1
"""A known RedirectPorterError was caught. User-facing message was displayed."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

KEYBOARD_INTERRUPT: int = 130
"""User cancelled the run.  Follows POSIX convention (128 + SIGINT=2)."""
