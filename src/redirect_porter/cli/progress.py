"""Rich-based chunk progress display.

:class:`RichChunkProgress` satisfies
:class:`~redirect_porter.core.protocols.ProgressReporter`: the transfer
executor starts it at the resumed chunk count, advances it once per
confirmed chunk and stops it on every exit path.

Design
------
* One Rich task at a time; a retry replaces it with a fresh task at the
  checkpoint.
* Shutdown-safe: calls made while stopped are silently ignored.
* No ``print()`` — Rich handles all rendering.
"""

from __future__ import annotations

from typing import Any

from redirect_porter.cli.console import get_rich_console
from redirect_porter.exceptions import EnvironmentError


class RichChunkProgress:
    """Progress bar counting transferred chunks.

    Usage::

        progress = RichChunkProgress()
        progress.start("Importing routes...", completed=2, total=3)
        progress.advance()
        progress.stop()
    """

    def __init__(self) -> None:
        try:
            from rich.progress import (
                BarColumn,
                MofNCompleteColumn,
                Progress,
                SpinnerColumn,
                TextColumn,
                TimeElapsedColumn,
                TimeRemainingColumn,
            )
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._task_id: Any = None
        self._started: bool = False

    # ------------------------------------------------------------------
    # ProgressReporter protocol
    # ------------------------------------------------------------------

    def start(self, description: str, *, completed: int, total: int) -> None:
        """Show a new bar for one run, pre-filled with resumed chunks.

        The bar of a previous attempt is removed so a retry redraws in place.
        """
        if self._task_id is not None:
            self._progress.remove_task(self._task_id)
            self._task_id = None
        if not self._started:
            self._progress.start()
            self._started = True
        self._task_id = self._progress.add_task(
            description,
            total=total,
            completed=completed,
        )

    def advance(self) -> None:
        if not self._started or self._task_id is None:
            return
        self._progress.advance(self._task_id)

    def stop(self) -> None:
        """Stop the Rich progress display (idempotent).

        The last bar stays on screen until the next :meth:`start`.
        """
        if self._started:
            self._progress.stop()
            self._started = False
