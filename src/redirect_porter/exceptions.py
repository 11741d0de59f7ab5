"""Custom exception hierarchy for redirect-porter.

All exceptions that cross layer boundaries must inherit from
:class:`RedirectPorterError`.  Raw third-party exceptions (e.g. from
httpx or jsonschema) must NEVER propagate beyond the infrastructure
layer — they must be caught and re-raised as a typed subclass defined
here.

Hierarchy
---------
RedirectPorterError
├── ConfigurationError
├── EnvironmentError
├── InputError
│   ├── InputFileError
│   └── InputValidationError
├── CheckpointWriteError
├── RemoteError
│   ├── RemotePermanentError
│   └── RemoteTransientError
├── RetriesExhaustedError
├── TransferAbortedError
└── TransferInterruptedError
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class RedirectPorterError(Exception):
    """Base exception for all redirect-porter errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    retryable: bool = False
    """Whether repeating the failed transfer attempt may succeed."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration / environment -------------------------------------------

class ConfigurationError(RedirectPorterError):
    """Raised when required settings are missing or malformed."""


class EnvironmentError(RedirectPorterError):
    """Raised when a required runtime dependency is not available."""


# --- Input -----------------------------------------------------------------

class InputError(RedirectPorterError):
    """Raised when the redirect input file cannot be used."""


class InputFileError(InputError):
    """Raised when the input file cannot be read."""


class InputValidationError(InputError):
    """Raised when any input row fails shape validation."""


# --- Local state -----------------------------------------------------------

class CheckpointWriteError(RedirectPorterError):
    """Raised when progress cannot be persisted to the state file."""


# --- Remote rewriter API ---------------------------------------------------

class RemoteError(RedirectPorterError):
    """Raised when the rewriter API call fails without a clear cause.

    Unclassified remote failures are retried.
    """

    retryable = True


class RemotePermanentError(RemoteError):
    """Raised when the rewriter rejects a request for good.

    Carries the structured error messages returned by the service, if any.
    """

    retryable = False

    def __init__(
        self,
        message: str,
        *,
        messages: Sequence[str] = (),
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.messages: tuple[str, ...] = tuple(messages)


class RemoteTransientError(RemoteError):
    """Raised for network errors, timeouts and overloaded responses."""


# --- Transfer outcomes -----------------------------------------------------

class RetriesExhaustedError(RedirectPorterError):
    """Raised when a transfer keeps failing after every allowed retry."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts: int = attempts


class _ResumableTransferError(RedirectPorterError):
    """A transfer stopped part way; the same command resumes it."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        path: Path | None = None,
        completed_chunks: int = 0,
        account: str | None = None,
        workspace: str | None = None,
        reset: bool = False,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.operation: str | None = operation
        self.path: Path | None = path
        self.completed_chunks: int = completed_chunks
        self.account: str | None = account
        self.workspace: str | None = workspace
        """Session the checkpoint belongs to; a resume must use the same one."""
        self.reset: bool = reset
        """Whether the stopped import was a ``--reset`` import."""


class TransferAbortedError(_ResumableTransferError):
    """Raised when a transfer gives up; the checkpoint is kept."""


class TransferInterruptedError(_ResumableTransferError):
    """Raised when the user cancels a transfer; progress has been saved."""
