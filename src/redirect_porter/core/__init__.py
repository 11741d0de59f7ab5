"""Core / service layer — the resumable bulk transfer engine.

Rules
-----
* No ``print()`` calls.
* No filesystem, network or signal handling; those arrive through the
  protocols in :mod:`redirect_porter.core.protocols`.
* No imports from ``cli`` or ``infra``.
"""

from redirect_porter.core.batching import split_into_chunks
from redirect_porter.core.fingerprint import fingerprint, work_identity
from redirect_porter.core.models import (
    CheckpointRecord,
    Chunk,
    OperationKind,
    Redirect,
    RedirectType,
    TransferOutcome,
    WorkIdentity,
)
from redirect_porter.core.reset_diff import routes_to_delete
from redirect_porter.core.retry import supervise
from redirect_porter.core.transfer import TransferExecutor
from redirect_porter.core.transfer_service import TransferService

__all__: list[str] = [
    "CheckpointRecord",
    "Chunk",
    "OperationKind",
    "Redirect",
    "RedirectType",
    "TransferExecutor",
    "TransferOutcome",
    "TransferService",
    "WorkIdentity",
    "fingerprint",
    "routes_to_delete",
    "split_into_chunks",
    "supervise",
    "work_identity",
]
