"""Retry controller — bounded, fixed-delay re-attempts of a whole run.

State machine
-------------
``ATTEMPTING`` → success → ``DONE``
``ATTEMPTING`` → transient failure, retries left → ``WAITING`` → ``ATTEMPTING``
``ATTEMPTING`` → transient failure, retries exhausted → ``ABORTED``
``ATTEMPTING`` → permanent failure → ``ABORTED``

Each re-attempt re-invokes the caller's attempt function, which resumes
from the latest persisted checkpoint, so retries never resend confirmed
chunks.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from redirect_porter.exceptions import (
    RedirectPorterError,
    RetriesExhaustedError,
    TransferInterruptedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailureKind(str, Enum):
    PERMANENT = "permanent"
    TRANSIENT = "transient"


class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    DONE = "done"
    ABORTED = "aborted"


def classify_failure(exc: BaseException) -> FailureKind:
    """Decide whether repeating the attempt that raised *exc* may help.

    Our own errors declare it through ``retryable``.  Anything else is
    treated as transient: an ambiguous failure is retried (boundedly)
    rather than silently dropping work.
    """
    if isinstance(exc, RedirectPorterError) and not exc.retryable:
        return FailureKind.PERMANENT
    return FailureKind.TRANSIENT


def supervise(
    attempt: Callable[[], T],
    max_retries: int,
    retry_delay: float,
    *,
    sleep: Callable[[float], None] = time.sleep,
    cancel_requested: Callable[[], bool] | None = None,
    on_state: Callable[[RetryState], None] | None = None,
) -> T:
    """Run *attempt* until it succeeds, fails permanently or runs out of retries.

    Parameters
    ----------
    attempt:
        One full transfer attempt.
    max_retries:
        Number of re-attempts allowed after the first failure.
    retry_delay:
        Fixed wait in seconds between attempts.
    sleep:
        Injected for tests.
    cancel_requested:
        When it returns ``True`` after a failure, no further attempt is
        made and :class:`TransferInterruptedError` is raised instead.
    on_state:
        Optional observer of state transitions.

    Raises
    ------
    RedirectPorterError
        The error of a permanent failure, re-raised unchanged.
    RetriesExhaustedError
        After ``max_retries`` re-attempts failed transiently; chained to
        the last failure.
    TransferInterruptedError
        When the run was cancelled.
    """
    notify = on_state or (lambda _state: None)
    retries = 0

    while True:
        notify(RetryState.ATTEMPTING)
        try:
            result = attempt()
        except TransferInterruptedError:
            notify(RetryState.ABORTED)
            raise
        except Exception as exc:
            kind = classify_failure(exc)
            logger.error("Attempt %d failed (%s): %s", retries + 1, kind.value, exc)
            logger.debug("Failure details", exc_info=True)

            if kind is FailureKind.PERMANENT:
                notify(RetryState.ABORTED)
                raise

            if retries >= max_retries:
                notify(RetryState.ABORTED)
                raise RetriesExhaustedError(
                    f"Giving up after {retries + 1} attempt(s): {exc}",
                    attempts=retries + 1,
                ) from exc

            if cancel_requested is not None and cancel_requested():
                notify(RetryState.ABORTED)
                raise TransferInterruptedError("Transfer interrupted.") from exc

            retries += 1
            notify(RetryState.WAITING)
            logger.error("Retrying in %s seconds...", retry_delay)
            logger.info("Press CTRL+C to abort")
            sleep(retry_delay)
            continue

        notify(RetryState.DONE)
        return result
