"""Interactive confirmation before destructive reset deletions."""

from __future__ import annotations

from typing import Any

from redirect_porter.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive confirmation."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
            hint="Or pass --yes to skip the confirmation.",
        ) from exc
    return questionary


def confirm_reset_deletion(count: int) -> bool:
    """Ask whether *count* old redirects may be deleted.

    Returns ``False`` when the user declines or cancels the prompt
    (questionary returns ``None`` on Ctrl+C / Esc).
    """
    questionary = _import_questionary()
    answer: bool | None = questionary.confirm(
        f"{count} existing redirect(s) are not in the imported file. Delete them?",
        default=False,
    ).ask()
    return bool(answer)
