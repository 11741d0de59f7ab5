"""Infrastructure: signal-based cancellation observer for one transfer run.

:class:`InterruptGuard` satisfies
:class:`~redirect_porter.core.protocols.InterruptScope`.  While armed it
replaces the SIGINT and SIGTERM handlers; on receipt it persists progress
through the supplied hook and flags the run as cancelled.  The transfer
executor polls the flag between chunks, so an in-flight request is
allowed to finish (or fail) on its own first.  A second signal raises
:class:`KeyboardInterrupt` immediately.

Leaving the ``with`` block restores the previous handlers on every exit
path, so a signal arriving after the run has finished cannot write a
stale checkpoint.
"""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Callable
from types import FrameType
from typing import Any

from redirect_porter.exceptions import RedirectPorterError

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class InterruptGuard:
    """Context manager arming a cancellation observer.

    Parameters
    ----------
    on_interrupt:
        Called synchronously from the signal handler, once, right after
        the run is flagged as cancelled.
    signals:
        Signals to observe.
    """

    def __init__(
        self,
        on_interrupt: Callable[[], None],
        *,
        signals: tuple[signal.Signals, ...] = DEFAULT_SIGNALS,
    ) -> None:
        self._on_interrupt = on_interrupt
        self._signals = signals
        self._previous: dict[signal.Signals, Any] = {}
        self._armed = False
        self._triggered = False

    @property
    def triggered(self) -> bool:
        return self._triggered

    @property
    def armed(self) -> bool:
        return self._armed

    def __enter__(self) -> InterruptGuard:
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread; interrupt guard left unarmed.")
            return self
        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self._handle)
        self._armed = True
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self._armed = False
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def _handle(self, signum: int, _frame: FrameType | None) -> None:
        if not self._armed:
            return
        if self._triggered:
            # Second signal: stop waiting for the in-flight request.
            raise KeyboardInterrupt
        logger.warning(
            "%s received. Saving progress and stopping after the current request...",
            signal.Signals(signum).name,
        )
        self._triggered = True
        try:
            self._on_interrupt()
        except RedirectPorterError as exc:
            logger.error("Could not save progress on interrupt: %s", exc)
