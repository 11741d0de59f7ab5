"""Core transfer service — resumable bulk import and deletion of redirects.

This is the central service class consumed by the CLI layer.  It wires
the fingerprint, checkpoint store, batch splitter, transfer executor,
interrupt scope and retry controller together for one operation on one
input file.  All collaborators are injected as protocols, keeping the
core free of any external-system imports.

Flow of one run
---------------
1. Read the input bytes and derive the :class:`WorkIdentity`.
2. Parse and validate every row (fail fast, before any remote call).
3. Split the records into fixed-size chunks.
4. Seed the executor from the stored checkpoint, arm the interrupt
   scope, then let the retry controller drive the
   transfer executor, each attempt resuming from the stored checkpoint.
5. Disarm the scope and clear the checkpoint once every chunk is done.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from redirect_porter.core.batching import split_into_chunks
from redirect_porter.core.fingerprint import work_identity
from redirect_porter.core.models import Chunk, OperationKind, TransferOutcome
from redirect_porter.core.protocols import (
    CheckpointStore,
    InterruptScope,
    InterruptScopeFactory,
    ProgressReporter,
    RecordSource,
    ResetConfirmation,
    RewriterApi,
)
from redirect_porter.core.reset_diff import routes_to_delete
from redirect_porter.core.retry import supervise
from redirect_porter.core.transfer import TransferExecutor
from redirect_porter.core.validation import parse_delete_paths, parse_import_records
from redirect_porter.exceptions import (
    CheckpointWriteError,
    RemoteError,
    RetriesExhaustedError,
    TransferAbortedError,
    TransferInterruptedError,
)
from redirect_porter.utils.constants import MAX_ENTRIES_PER_REQUEST, PROG

logger = logging.getLogger(__name__)


class _NoInterruptScope:
    triggered = False

    def __enter__(self) -> _NoInterruptScope:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def _no_interrupt_scope(_on_interrupt: Callable[[], None]) -> InterruptScope:
    return _NoInterruptScope()


class TransferService:
    """Run bulk redirect imports and deletions that survive interruption.

    Parameters
    ----------
    api:
        The remote rewriter API.
    store:
        Persistent checkpoint store.
    source:
        Reader/writer of delimited input files.
    account, workspace:
        The session the work belongs to; part of every work identity.
    max_retries, retry_delay:
        Retry policy applied to each run.
    interrupt_scope:
        Builds the cancellation observer armed during a run.
    progress:
        Optional progress indicator.
    sleep:
        Wait function used between retries; injected for tests.
    """

    def __init__(
        self,
        api: RewriterApi,
        store: CheckpointStore,
        source: RecordSource,
        *,
        account: str,
        workspace: str,
        max_retries: int,
        retry_delay: float,
        interrupt_scope: InterruptScopeFactory | None = None,
        progress: ProgressReporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api = api
        self._store = store
        self._source = source
        self._account = account
        self._workspace = workspace
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._interrupt_scope = interrupt_scope or _no_interrupt_scope
        self._progress = progress
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def import_redirects(
        self,
        path: Path,
        *,
        reset: bool = False,
        confirm_reset: ResetConfirmation | None = None,
    ) -> TransferOutcome:
        """Import every redirect in *path*.

        With *reset*, the remote index is captured first; rules it lists
        that the import does not re-create are deleted afterwards through
        the regular delete path.  *confirm_reset* is asked before that
        deletion and may veto it.
        """
        indexed = self.fetch_indexed_routes() if reset else []

        outcome, redirects = self._run(OperationKind.IMPORT, path, reset=reset)
        if not reset:
            return outcome

        stale = routes_to_delete(indexed, (r.from_path for r in redirects))
        if not stale:
            logger.info("No old redirects to delete.")
            return outcome
        if confirm_reset is not None and not confirm_reset(len(stale)):
            logger.warning("Kept %d old redirect(s); nothing was deleted.", len(stale))
            return outcome

        delete_file = self._source.write_delete_file(stale)
        logger.info("Deleting %d old redirect(s)...", len(stale))
        logger.info(
            "In case this step fails, run '%s --account %s --workspace %s delete %s' "
            "to finish deleting old redirects.",
            PROG,
            self._account,
            self._workspace,
            delete_file.resolve(),
        )
        self.delete_redirects(delete_file)
        self._source.remove(delete_file)
        return outcome

    def delete_redirects(self, path: Path) -> TransferOutcome:
        """Delete the redirect of every ``from`` path listed in *path*."""
        outcome, _paths = self._run(OperationKind.DELETE, path)
        return outcome

    def fetch_indexed_routes(self) -> list[str]:
        """Enumerate the remote rule index page by page."""

        def attempt() -> list[str]:
            routes: list[str] = []
            for file_name in self._api.routes_index_files():
                routes.extend(self._api.routes_index(file_name))
            return routes

        try:
            routes = supervise(
                attempt,
                self._max_retries,
                self._retry_delay,
                sleep=self._sleep,
            )
        except (RemoteError, RetriesExhaustedError) as exc:
            raise TransferAbortedError(
                "Could not read the current redirect index; nothing was changed.",
                operation=OperationKind.IMPORT.value,
            ) from exc
        logger.info("Found %d indexed redirect(s).", len(routes))
        return routes

    # ------------------------------------------------------------------
    # One resumable run
    # ------------------------------------------------------------------

    def _load_items(self, operation: OperationKind, rows: list[dict[str, str]]) -> list[Any]:
        if operation is OperationKind.IMPORT:
            return list(parse_import_records(rows))
        return list(parse_delete_paths(rows))

    def _sender(self, operation: OperationKind) -> Callable[[Chunk], None]:
        if operation is OperationKind.IMPORT:
            return lambda chunk: self._api.import_redirects(chunk.items)
        return lambda chunk: self._api.delete_redirects(chunk.items)

    def _run(
        self,
        operation: OperationKind,
        path: Path,
        *,
        reset: bool = False,
    ) -> tuple[TransferOutcome, Sequence[Any]]:
        data = self._source.read_bytes(path)
        identity = work_identity(self._account, self._workspace, data)
        items = self._load_items(operation, self._source.parse_rows(data))
        chunks = split_into_chunks(items, MAX_ENTRIES_PER_REQUEST)
        logger.debug(
            "%s %s: %d record(s), %d chunk(s), fingerprint=%s",
            operation.value,
            path,
            len(items),
            len(chunks),
            identity.fingerprint,
        )

        stored = self._store.load(operation, identity.fingerprint)
        scope = self._interrupt_scope(lambda: executor.save_checkpoint())
        executor = TransferExecutor(
            self._store,
            operation,
            identity.fingerprint,
            progress=self._progress,
            cancel_requested=lambda: scope.triggered,
            completed_chunks=stored.completed_chunks if stored is not None else 0,
        )
        send_chunk = self._sender(operation)

        def attempt() -> TransferOutcome:
            record = self._store.load(operation, identity.fingerprint)
            resume_from = record.completed_chunks if record is not None else 0
            return executor.run(chunks, resume_from, send_chunk)

        with scope:
            try:
                outcome = supervise(
                    attempt,
                    self._max_retries,
                    self._retry_delay,
                    sleep=self._sleep,
                    cancel_requested=lambda: scope.triggered,
                )
            except TransferInterruptedError as exc:
                raise TransferInterruptedError(
                    f"The {operation.value} of {path} was interrupted after "
                    f"{executor.completed_chunks} of {len(chunks)} chunk(s). "
                    "Progress was saved.",
                    operation=operation.value,
                    path=path,
                    completed_chunks=executor.completed_chunks,
                    account=self._account,
                    workspace=self._workspace,
                    reset=reset,
                ) from exc
            except (RemoteError, RetriesExhaustedError, CheckpointWriteError) as exc:
                raise TransferAbortedError(
                    f"The {operation.value} of {path} stopped after "
                    f"{executor.completed_chunks} of {len(chunks)} chunk(s): {exc}",
                    operation=operation.value,
                    path=path,
                    completed_chunks=executor.completed_chunks,
                    account=self._account,
                    workspace=self._workspace,
                    reset=reset,
                ) from exc

        self._store.clear(operation, identity.fingerprint)
        logger.info("Finished! %d chunk(s) sent.", outcome.chunks_sent)
        return outcome, items
