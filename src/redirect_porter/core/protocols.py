"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from redirect_porter.core.models import CheckpointRecord, OperationKind, Redirect


class RewriterApi(Protocol):
    """Contract for the remote redirect-rule management API.

    Implementations must map all backend-specific exceptions to
    :class:`~redirect_porter.exceptions.RemotePermanentError` or
    :class:`~redirect_porter.exceptions.RemoteTransientError`.
    """

    def import_redirects(self, redirects: Sequence[Redirect]) -> None:
        """Create or overwrite one batch of redirects."""
        ...  # pragma: no cover

    def delete_redirects(self, paths: Sequence[str]) -> None:
        """Delete the redirects registered for one batch of ``from`` paths."""
        ...  # pragma: no cover

    def routes_index_files(self) -> list[str]:
        """Return the names of the pages of the remote rule index."""
        ...  # pragma: no cover

    def routes_index(self, file_name: str) -> list[str]:
        """Return the rule ids (``from`` paths) listed in one index page."""
        ...  # pragma: no cover


class CheckpointStore(Protocol):
    """Contract for the persistent progress store.

    Read failures must degrade to "no checkpoint"; they never abort a run.
    """

    def load(
        self,
        operation: OperationKind,
        fingerprint: str,
    ) -> CheckpointRecord | None:
        ...  # pragma: no cover

    def save(
        self,
        operation: OperationKind,
        fingerprint: str,
        completed_chunks: int,
    ) -> None:
        """Persist *completed_chunks* durably before returning.

        Raises
        ------
        CheckpointWriteError
            When the state cannot be written.
        """
        ...  # pragma: no cover

    def clear(self, operation: OperationKind, fingerprint: str) -> None:
        """Remove the record; a missing record is not an error."""
        ...  # pragma: no cover


class RecordSource(Protocol):
    """Contract for reading and writing redirect input files."""

    def read_bytes(self, path: Path) -> bytes:
        """Return the exact bytes of *path*.

        Raises
        ------
        InputFileError
            When the file cannot be read.
        """
        ...  # pragma: no cover

    def parse_rows(self, data: bytes) -> list[dict[str, str]]:
        """Parse delimited *data* into one dict per non-empty row.

        Raises
        ------
        InputValidationError
            When a row has the wrong number of columns.
        """
        ...  # pragma: no cover

    def write_delete_file(self, paths: Sequence[str]) -> Path:
        """Write *paths* as a delete input file and return its location."""
        ...  # pragma: no cover

    def remove(self, path: Path) -> None:
        ...  # pragma: no cover


class ProgressReporter(Protocol):
    """Contract for the visible per-chunk progress indicator."""

    def start(self, description: str, *, completed: int, total: int) -> None:
        ...  # pragma: no cover

    def advance(self) -> None:
        ...  # pragma: no cover

    def stop(self) -> None:
        ...  # pragma: no cover


class InterruptScope(Protocol):
    """A cancellation observer armed for the duration of one run."""

    @property
    def triggered(self) -> bool:
        ...  # pragma: no cover

    def __enter__(self) -> InterruptScope:
        ...  # pragma: no cover

    def __exit__(self, *exc_info: object) -> None:
        ...  # pragma: no cover


InterruptScopeFactory = Callable[[Callable[[], None]], InterruptScope]
"""Builds an :class:`InterruptScope` that calls the given hook on cancellation."""

ResetConfirmation = Callable[[int], bool]
"""Asked before reset deletion with the number of rules to delete."""
