"""Infrastructure: JSON file implementation of the checkpoint store.

Layout of the state file::

    {
      "imports": {"<fingerprint>": {"counter": 3, "updatedAt": "..."}},
      "deletes": {"<fingerprint>": {"counter": 1, "updatedAt": "..."}}
    }

The file is read in full on every access and rewritten in full on every
update.  Writes go to a temporary file in the same directory which then
atomically replaces the target, so a reader never sees a torn file.

Concurrent invocations on the same input file are not coordinated.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from redirect_porter.core.models import CheckpointRecord, OperationKind
from redirect_porter.exceptions import CheckpointWriteError

logger = logging.getLogger(__name__)


class JsonCheckpointStore:
    """Concrete :class:`~redirect_porter.core.protocols.CheckpointStore`.

    An unreadable or corrupt state file is treated as empty: the transfer
    restarts from chunk 0 instead of failing.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def load(
        self,
        operation: OperationKind,
        fingerprint: str,
    ) -> CheckpointRecord | None:
        section = self._read().get(operation.state_key)
        if not isinstance(section, dict):
            return None
        entry = section.get(fingerprint)
        if not isinstance(entry, dict):
            return None

        counter = entry.get("counter")
        if isinstance(counter, bool) or not isinstance(counter, int) or counter < 0:
            logger.warning(
                "Ignoring invalid %s checkpoint for %s: counter=%r",
                operation.value,
                fingerprint,
                counter,
            )
            return None
        return CheckpointRecord(
            operation=operation,
            fingerprint=fingerprint,
            completed_chunks=counter,
        )

    def save(
        self,
        operation: OperationKind,
        fingerprint: str,
        completed_chunks: int,
    ) -> None:
        data = self._read()
        section = data.get(operation.state_key)
        if not isinstance(section, dict):
            section = {}
            data[operation.state_key] = section
        section[fingerprint] = {
            "counter": completed_chunks,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        self._write(data)

    def clear(self, operation: OperationKind, fingerprint: str) -> None:
        data = self._read()
        section = data.get(operation.state_key)
        if not isinstance(section, dict) or fingerprint not in section:
            return
        del section[fingerprint]
        if not section:
            del data[operation.state_key]
        try:
            self._write(data)
        except CheckpointWriteError as exc:
            # The work itself is done; a stale record only makes the next
            # run of the same file skip straight to completion.
            logger.warning("%s", exc)

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed state file %s", self.path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        directory = self.path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise CheckpointWriteError(
                f"Could not save progress to {self.path}: {exc}",
                hint="Check that the state file location is writable.",
            ) from exc
