"""Tests for the transfer executor (core/transfer.py).

Coverage:
* Chunks are sent in order, starting at the resume point.
* The checkpoint is saved after every confirmed chunk.
* A failing chunk leaves the checkpoint at the last confirmed chunk.
* Cancellation stops between chunks with progress saved.
* Progress reporting starts at the resumed count and always stops.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, call

import pytest

from conftest import MemoryCheckpointStore
from redirect_porter.core.batching import split_into_chunks
from redirect_porter.core.models import Chunk, OperationKind
from redirect_porter.core.transfer import TransferExecutor
from redirect_porter.exceptions import RemoteTransientError, TransferInterruptedError

FP = "fp"


def _chunks(count: int, size: int = 10) -> list[Chunk]:
    return split_into_chunks(list(range(count * size)), size)


def _executor(store: MemoryCheckpointStore, **kwargs: Any) -> TransferExecutor:
    return TransferExecutor(store, OperationKind.IMPORT, FP, **kwargs)


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestRun:
    def test_sends_every_chunk_in_order(self, memory_store: MemoryCheckpointStore) -> None:
        sent: list[int] = []
        outcome = _executor(memory_store).run(_chunks(3), 0, lambda c: sent.append(c.index))

        assert sent == [0, 1, 2]
        assert outcome.total_chunks == 3
        assert outcome.chunks_sent == 3

    def test_checkpoint_saved_after_each_chunk(self, memory_store: MemoryCheckpointStore) -> None:
        _executor(memory_store).run(_chunks(3), 0, lambda c: None)
        assert memory_store.saves == [1, 2, 3]

    def test_resume_skips_confirmed_chunks(self, memory_store: MemoryCheckpointStore) -> None:
        sent: list[int] = []
        outcome = _executor(memory_store).run(_chunks(3), 2, lambda c: sent.append(c.index))

        assert sent == [2]
        assert outcome.resumed_from == 2
        assert outcome.chunks_sent == 1

    def test_resume_past_the_end_is_clamped(self, memory_store: MemoryCheckpointStore) -> None:
        send = MagicMock()
        executor = _executor(memory_store)
        outcome = executor.run(_chunks(2), 5, send)

        send.assert_not_called()
        assert outcome.resumed_from == 2
        assert executor.completed_chunks == 2

    def test_no_chunks(self, memory_store: MemoryCheckpointStore) -> None:
        outcome = _executor(memory_store).run([], 0, MagicMock())
        assert outcome.total_chunks == 0
        assert memory_store.saves == []


# ---------------------------------------------------------------------------
# Failure
# ---------------------------------------------------------------------------

class TestFailure:
    def test_failure_keeps_last_confirmed_chunk(self, memory_store: MemoryCheckpointStore) -> None:
        def send(chunk: Chunk) -> None:
            if chunk.index == 1:
                raise RemoteTransientError("503")

        executor = _executor(memory_store)
        with pytest.raises(RemoteTransientError):
            executor.run(_chunks(3), 0, send)

        assert executor.completed_chunks == 1
        assert memory_store.records[(OperationKind.IMPORT, FP)] == 1

    def test_chunks_sent_counts_every_run(self, memory_store: MemoryCheckpointStore) -> None:
        send = MagicMock(side_effect=[None, RemoteTransientError("503"), None, None])
        executor = _executor(memory_store)

        with pytest.raises(RemoteTransientError):
            executor.run(_chunks(3), 0, send)
        outcome = executor.run(_chunks(3), 1, send)

        assert outcome.resumed_from == 1
        assert outcome.chunks_sent == 3

    def test_failure_on_first_resumed_chunk_saves_resume_point(
        self, memory_store: MemoryCheckpointStore,
    ) -> None:
        send = MagicMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            _executor(memory_store).run(_chunks(3), 2, send)
        assert memory_store.records[(OperationKind.IMPORT, FP)] == 2


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

class TestCancellation:
    def test_stops_between_chunks(self, memory_store: MemoryCheckpointStore) -> None:
        sent: list[int] = []
        executor = _executor(memory_store, cancel_requested=lambda: len(sent) == 2)

        with pytest.raises(TransferInterruptedError) as exc_info:
            executor.run(_chunks(3), 0, lambda c: sent.append(c.index))

        assert sent == [0, 1]
        assert exc_info.value.completed_chunks == 2
        assert exc_info.value.operation == "import"
        assert memory_store.records[(OperationKind.IMPORT, FP)] == 2

    def test_cancel_before_first_chunk(self, memory_store: MemoryCheckpointStore) -> None:
        send = MagicMock()
        with pytest.raises(TransferInterruptedError):
            _executor(memory_store, cancel_requested=lambda: True).run(_chunks(2), 0, send)
        send.assert_not_called()

    def test_save_checkpoint_records_current_count(
        self, memory_store: MemoryCheckpointStore,
    ) -> None:
        executor = _executor(memory_store)
        executor.completed_chunks = 4
        executor.save_checkpoint()
        assert memory_store.records[(OperationKind.IMPORT, FP)] == 4

    def test_save_before_run_keeps_seeded_count(
        self, memory_store: MemoryCheckpointStore,
    ) -> None:
        _executor(memory_store, completed_chunks=3).save_checkpoint()
        assert memory_store.records[(OperationKind.IMPORT, FP)] == 3


# ---------------------------------------------------------------------------
# Progress reporting
# ---------------------------------------------------------------------------

class TestProgress:
    def test_starts_at_resume_point_and_advances(self, memory_store: MemoryCheckpointStore) -> None:
        progress = MagicMock()
        _executor(memory_store, progress=progress).run(_chunks(3), 1, lambda c: None)

        progress.start.assert_called_once_with("Importing routes...", completed=1, total=3)
        assert progress.advance.call_count == 2
        progress.stop.assert_called_once_with()

    def test_stops_on_failure(self, memory_store: MemoryCheckpointStore) -> None:
        progress = MagicMock()
        with pytest.raises(RuntimeError):
            _executor(memory_store, progress=progress).run(
                _chunks(2), 0, MagicMock(side_effect=RuntimeError("boom")),
            )
        assert progress.mock_calls[-1] == call.stop()
        progress.advance.assert_not_called()

    def test_delete_label(self, memory_store: MemoryCheckpointStore) -> None:
        progress = MagicMock()
        TransferExecutor(memory_store, OperationKind.DELETE, FP, progress=progress).run(
            _chunks(1), 0, lambda c: None,
        )
        progress.start.assert_called_once_with("Deleting routes...", completed=0, total=1)
