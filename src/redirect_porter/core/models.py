"""Domain models for redirect-porter.

All models are **frozen** dataclasses or enums — immutable value
objects with no behaviour beyond data access and payload shaping.  They
carry zero I/O and zero dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class OperationKind(str, Enum):
    """The two bulk operations the transfer engine performs."""

    IMPORT = "import"
    DELETE = "delete"

    @property
    def state_key(self) -> str:
        """Top-level key of this operation in the checkpoint state file."""
        return f"{self.value}s"

    @property
    def progress_label(self) -> str:
        """Description shown next to the progress bar."""
        if self is OperationKind.IMPORT:
            return "Importing routes..."
        return "Deleting routes..."


class RedirectType(str, Enum):
    """Closed set of redirect types accepted by the rewriter."""

    PERMANENT = "PERMANENT"
    TEMPORARY = "TEMPORARY"


# ---------------------------------------------------------------------------
# Work identity and progress
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class WorkIdentity:
    """Stable identity of one (account, workspace, input file) work unit."""

    account: str
    workspace: str
    fingerprint: str
    """Hex digest of account, workspace and the raw input bytes."""


@dataclass(frozen=True, slots=True)
class CheckpointRecord:
    """Persisted progress of one operation on one work identity."""

    operation: OperationKind
    fingerprint: str
    completed_chunks: int
    """Number of chunks the rewriter confirmed, counted from chunk 0."""


# ---------------------------------------------------------------------------
# Records and chunks
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Redirect:
    """One routing rule read from an import file."""

    from_path: str
    to_path: str
    type: RedirectType
    end_date: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the rewriter ``RedirectInput`` representation."""
        payload: dict[str, Any] = {
            "from": self.from_path,
            "to": self.to_path,
            "type": self.type.value,
        }
        if self.end_date is not None:
            payload["endDate"] = self.end_date
        return payload


@dataclass(frozen=True, slots=True)
class Chunk:
    """An ordered slice of validated records sent as one remote request."""

    index: int
    """Position of the chunk in the input, starting at 0."""

    items: tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class TransferOutcome:
    """Summary of a transfer run that reached the last chunk."""

    operation: OperationKind
    total_chunks: int
    resumed_from: int
    """Chunk index the last attempt started at; earlier chunks were skipped."""

    chunks_sent: int
    """Chunks confirmed by the remote side across every attempt of the run."""
