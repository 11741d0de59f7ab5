"""Infrastructure: delimited redirect input files.

Input files are ``;``-separated text with a header row naming the
fields.  Cell values are trimmed, empty cells are dropped from their row
and blank lines are ignored.  A row whose column count differs from the
header's rejects the whole file.
"""

from __future__ import annotations

import contextlib
import csv
import io
import time
from collections.abc import Sequence
from pathlib import Path

from redirect_porter.exceptions import InputFileError, InputValidationError
from redirect_porter.utils.constants import INPUT_DELIMITER, RESET_FILE_PREFIX


class CsvRecordSource:
    """Concrete :class:`~redirect_porter.core.protocols.RecordSource`.

    Parameters
    ----------
    delimiter:
        Column separator.
    work_dir:
        Directory for intermediate files; defaults to the working directory.
    """

    def __init__(
        self,
        *,
        delimiter: str = INPUT_DELIMITER,
        work_dir: Path | None = None,
    ) -> None:
        self._delimiter = delimiter
        self._work_dir = work_dir

    def read_bytes(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise InputFileError(
                f"Error reading file: {path}",
                hint=exc.strerror or str(exc),
            ) from exc

    def parse_rows(self, data: bytes) -> list[dict[str, str]]:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InputValidationError(
                "Input file is not valid UTF-8 text.",
            ) from exc

        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self._delimiter)
        header: list[str] | None = None
        rows: list[dict[str, str]] = []
        try:
            for raw in reader:
                cells = [cell.strip() for cell in raw]
                if not any(cells):
                    continue
                if header is None:
                    header = self._check_header(cells)
                    continue
                if len(cells) != len(header):
                    raise InputValidationError(
                        f"Line {reader.line_num}: expected {len(header)} column(s), "
                        f"found {len(cells)}.",
                        hint=f"Columns must be separated by '{self._delimiter}'.",
                    )
                rows.append({name: value for name, value in zip(header, cells) if value})
        except csv.Error as exc:
            raise InputValidationError(
                f"Line {reader.line_num}: {exc}",
            ) from exc
        return rows

    def write_delete_file(self, paths: Sequence[str]) -> Path:
        directory = self._work_dir or Path.cwd()
        target = directory / f"{RESET_FILE_PREFIX}{time.time_ns() // 1_000_000}.csv"
        try:
            with target.open("w", encoding="utf-8", newline="") as fh:
                writer = csv.writer(fh, delimiter=self._delimiter, lineterminator="\n")
                writer.writerow(["from"])
                writer.writerows([path] for path in paths)
        except OSError as exc:
            raise InputFileError(
                f"Could not write {target}",
                hint=exc.strerror or str(exc),
            ) from exc
        return target

    def remove(self, path: Path) -> None:
        with contextlib.suppress(FileNotFoundError):
            Path(path).unlink()

    def _check_header(self, cells: list[str]) -> list[str]:
        if "" in cells:
            raise InputValidationError("The header row has an unnamed column.")
        duplicates = sorted({name for name in cells if cells.count(name) > 1})
        if duplicates:
            raise InputValidationError(
                f"The header row repeats column(s): {', '.join(duplicates)}.",
            )
        return cells
