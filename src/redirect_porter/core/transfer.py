"""Transfer executor — replays chunks through the remote API in order.

Chunks are sent strictly one at a time.  The checkpoint for chunk N is
persisted before chunk N+1 is sent, so a crash between "remote accepted"
and "checkpoint written" resends at most one chunk and never skips one.

Guarantees
----------
* No ``print()``; progress is reported through a
  :class:`~redirect_porter.core.protocols.ProgressReporter`.
* The input chunks are never modified.
* Before any error propagates, the checkpoint reflects the last chunk the
  remote side confirmed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from redirect_porter.core.models import Chunk, OperationKind, TransferOutcome
from redirect_porter.core.protocols import CheckpointStore, ProgressReporter
from redirect_porter.exceptions import TransferInterruptedError

logger = logging.getLogger(__name__)

SendChunk = Callable[[Chunk], None]


class TransferExecutor:
    """Drive chunks through *send_chunk*, checkpointing after each one.

    Parameters
    ----------
    store:
        Where progress is persisted.
    operation, fingerprint:
        Key of the checkpoint record this executor owns.
    progress:
        Optional progress indicator.
    cancel_requested:
        Polled between chunks; when it returns ``True`` the run stops with
        :class:`TransferInterruptedError`.
    completed_chunks:
        Count already held by the store, so a checkpoint saved before the
        first :meth:`run` never moves backwards.
    """

    def __init__(
        self,
        store: CheckpointStore,
        operation: OperationKind,
        fingerprint: str,
        *,
        progress: ProgressReporter | None = None,
        cancel_requested: Callable[[], bool] | None = None,
        completed_chunks: int = 0,
    ) -> None:
        self._store = store
        self._operation = operation
        self._fingerprint = fingerprint
        self._progress = progress
        self._cancel_requested = cancel_requested or (lambda: False)
        self.completed_chunks: int = completed_chunks
        """Chunks confirmed by the remote side, counted from chunk 0."""
        self.chunks_sent: int = 0
        """Chunks this executor got confirmed, over every call to :meth:`run`."""

    def save_checkpoint(self) -> None:
        """Persist :attr:`completed_chunks` for this executor's record."""
        self._store.save(self._operation, self._fingerprint, self.completed_chunks)

    def run(
        self,
        chunks: Sequence[Chunk],
        resume_from: int,
        send_chunk: SendChunk,
    ) -> TransferOutcome:
        """Send ``chunks[resume_from:]`` in order.

        Raises
        ------
        TransferInterruptedError
            When cancellation was requested between two chunks.
        Exception
            Whatever *send_chunk* raised for the first failing chunk.
        """
        total = len(chunks)
        if resume_from > total:
            logger.warning(
                "Checkpoint says %d chunks were done but the input has only %d; "
                "treating the transfer as complete.",
                resume_from,
                total,
            )
            resume_from = total
        self.completed_chunks = resume_from

        if resume_from:
            logger.info("Resuming after %d of %d chunks.", resume_from, total)

        if self._progress is not None:
            self._progress.start(
                self._operation.progress_label,
                completed=resume_from,
                total=total,
            )
        try:
            for chunk in chunks[resume_from:]:
                if self._cancel_requested():
                    self.save_checkpoint()
                    raise TransferInterruptedError(
                        "Transfer interrupted.",
                        operation=self._operation.value,
                        completed_chunks=self.completed_chunks,
                    )
                try:
                    send_chunk(chunk)
                except Exception:
                    logger.debug("Chunk %d failed.", chunk.index, exc_info=True)
                    self.save_checkpoint()
                    raise

                self.completed_chunks = chunk.index + 1
                self.chunks_sent += 1
                self.save_checkpoint()
                if self._progress is not None:
                    self._progress.advance()
        finally:
            if self._progress is not None:
                self._progress.stop()

        return TransferOutcome(
            operation=self._operation,
            total_chunks=total,
            resumed_from=resume_from,
            chunks_sent=self.chunks_sent,
        )
