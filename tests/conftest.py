"""Shared pytest fixtures and fakes for the redirect-porter test suite.

Guidelines
----------
* No internet access in any test.
* The rewriter API is replaced by :class:`FakeRewriterApi` or an
  ``httpx.MockTransport``.
* Retry waits are injected so no test ever sleeps.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path

import pytest

from redirect_porter.core.models import CheckpointRecord, OperationKind, Redirect


class FakeRewriterApi:
    """In-memory rewriter recording every call.

    *failures* is consumed one entry per send call: ``None`` lets the call
    succeed, an exception instance is raised instead.
    """

    def __init__(
        self,
        *,
        failures: Iterable[Exception | None] = (),
        index: dict[str, list[str]] | None = None,
    ) -> None:
        self.failures: deque[Exception | None] = deque(failures)
        self.index = index or {}
        self.imported: list[list[Redirect]] = []
        self.deleted: list[list[str]] = []
        self.on_send: Callable[[], None] | None = None

    def _send(self) -> None:
        if self.on_send is not None:
            self.on_send()
        if self.failures:
            failure = self.failures.popleft()
            if failure is not None:
                raise failure

    def import_redirects(self, redirects: Sequence[Redirect]) -> None:
        self._send()
        self.imported.append(list(redirects))

    def delete_redirects(self, paths: Sequence[str]) -> None:
        self._send()
        self.deleted.append(list(paths))

    def routes_index_files(self) -> list[str]:
        return list(self.index)

    def routes_index(self, file_name: str) -> list[str]:
        return list(self.index[file_name])

    @property
    def send_count(self) -> int:
        return len(self.imported) + len(self.deleted)


class MemoryCheckpointStore:
    """Dict-backed checkpoint store keeping a history of saves."""

    def __init__(self) -> None:
        self.records: dict[tuple[OperationKind, str], int] = {}
        self.saves: list[int] = []

    def load(self, operation: OperationKind, fingerprint: str) -> CheckpointRecord | None:
        count = self.records.get((operation, fingerprint))
        if count is None:
            return None
        return CheckpointRecord(operation, fingerprint, count)

    def save(self, operation: OperationKind, fingerprint: str, completed_chunks: int) -> None:
        self.records[(operation, fingerprint)] = completed_chunks
        self.saves.append(completed_chunks)

    def clear(self, operation: OperationKind, fingerprint: str) -> None:
        self.records.pop((operation, fingerprint), None)


class FakeInterruptScope:
    """Interrupt scope triggered programmatically via :meth:`fire`."""

    instances: list[FakeInterruptScope] = []

    def __init__(self, on_interrupt: Callable[[], None]) -> None:
        self.on_interrupt = on_interrupt
        self.triggered = False
        self.entered = False
        self.exited = False
        FakeInterruptScope.instances.append(self)

    def __enter__(self) -> FakeInterruptScope:
        self.entered = True
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.exited = True

    def fire(self) -> None:
        self.triggered = True
        self.on_interrupt()


def write_import_csv(path: Path, count: int, *, start: int = 0) -> Path:
    lines = ["from;to;type"]
    lines += [f"/old/{i};/new/{i};PERMANENT" for i in range(start, start + count)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_delete_csv(path: Path, paths: Iterable[str]) -> Path:
    path.write_text("\n".join(["from", *paths]) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_fake_scopes() -> None:
    FakeInterruptScope.instances.clear()


@pytest.fixture()
def api() -> FakeRewriterApi:
    return FakeRewriterApi()


@pytest.fixture()
def memory_store() -> MemoryCheckpointStore:
    return MemoryCheckpointStore()


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so ``caplog`` sees records again."""
    logger = logging.getLogger("redirect_porter")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
