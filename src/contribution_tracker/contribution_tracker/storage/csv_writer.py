from __future__ import annotations

import csv
import io
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..core.exceptions import io_failure
from .csv_reader import RecordReader
from .schemas import headers_for

logger = logging.getLogger(__name__)


class RecordWriter:
    """Appends records to CSV entity files, or rewrites them whole.

    Writers to the same file are serialized through a per-path lock so two
    appends can never interleave into a torn row. Readers take no lock.
    """

    def __init__(self, reader: Optional[RecordReader] = None):
        self._reader = reader or RecordReader()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def lock_for(self, path: Union[str, Path]) -> threading.Lock:
        key = str(Path(path).resolve())
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def append(
        self,
        path: Union[str, Path],
        record: Mapping[str, object],
        headers: Optional[Sequence[str]] = None,
    ) -> None:
        path = Path(path)
        with self.lock_for(path):
            self._drop_torn_tail(path)
            existing = self._reader.read_header(path)
            columns = existing or self._columns(path, headers, [record])

            chunks: List[str] = []
            if not existing:
                chunks.append(_format_row(columns))
            chunks.append(_format_row([_cell(record.get(c)) for c in columns]))

            try:
                with path.open("a", encoding="utf-8", newline="") as f:
                    f.write("".join(chunks))
                    f.flush()
                    os.fsync(f.fileno())
            except OSError as e:
                logger.error("Failed to append to CSV file %s: %s", path, e)
                raise io_failure(f"Failed to append to CSV file {path}: {e}", path=str(path)) from e

        logger.info("CSV append completed: %s (new file: %s)", path, not existing)

    def rewrite(
        self,
        path: Union[str, Path],
        records: Iterable[Mapping[str, object]],
        headers: Optional[Sequence[str]] = None,
    ) -> None:
        """Replace the file with a header line and ``records``.

        Content goes to a temp file in the same directory which is then
        renamed over the target, so readers see either the old or the new file.
        """
        path = Path(path)
        records = list(records)
        with self.lock_for(path):
            columns = list(headers) if headers else (self._reader.read_header(path) or self._columns(path, None, records))
            tmp_name = None
            try:
                fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    writer = csv.writer(f, lineterminator="\n")
                    writer.writerow(columns)
                    for record in records:
                        writer.writerow([_cell(record.get(c)) for c in columns])
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
                tmp_name = None
            except OSError as e:
                logger.error("Failed to write CSV file %s: %s", path, e)
                raise io_failure(f"Failed to write CSV file {path}: {e}", path=str(path)) from e
            finally:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)

        logger.info("CSV write completed: %s (%d records)", path, len(records))

    @staticmethod
    def _drop_torn_tail(path: Path) -> None:
        """Cut a partial last row left by an interrupted append.

        Caller holds the path lock.
        """
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return
        except OSError as e:
            raise io_failure(f"Failed to inspect CSV file {path}: {e}", path=str(path)) from e

        end = _last_record_end(data)
        if end == len(data):
            return

        logger.warning("Dropping partial row at the end of %s (%d bytes)", path, len(data) - end)
        try:
            os.truncate(path, end)
        except OSError as e:
            raise io_failure(f"Failed to repair CSV file {path}: {e}", path=str(path)) from e

    @staticmethod
    def _columns(
        path: Path,
        headers: Optional[Sequence[str]],
        records: Sequence[Mapping[str, object]],
    ) -> List[str]:
        if headers:
            return list(headers)
        known = headers_for(path.name)
        if known:
            return list(known)
        columns: List[str] = []
        for record in records:
            for key in record:
                if key not in columns:
                    columns.append(key)
        return columns


def _cell(value: object) -> str:
    return "" if value is None else str(value)


def _format_row(values: Sequence[str]) -> str:
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(values)
    return buf.getvalue()


def _last_record_end(data: bytes) -> int:
    """Offset just past the last complete record in ``data``.

    A record ends at a newline reached with an even number of quote
    characters seen so far; escaped quotes are doubled, so an odd count
    means the newline sits inside a quoted field.
    """
    end = 0
    offset = 0
    quotes = 0
    for line in data.split(b"\n")[:-1]:
        offset += len(line) + 1
        quotes += line.count(b'"')
        if quotes % 2 == 0:
            end = offset
    return end
