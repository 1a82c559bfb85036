from __future__ import annotations

import csv
import logging
import time
from pathlib import Path
from typing import Dict, List, Union

from tenacity import RetryError, Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_fixed

from ..core.constants import DEFAULT_READ_MAX_ATTEMPTS, DEFAULT_READ_RETRY_DELAY_SECONDS
from ..core.exceptions import io_failure

logger = logging.getLogger(__name__)

Record = Dict[str, str]


def _is_transient(exc: BaseException) -> bool:
    # A missing file is an empty entity file, never something to retry.
    return isinstance(exc, OSError) and not isinstance(exc, FileNotFoundError)


class RecordReader:
    """Reads CSV entity files into lists of records.

    Rows whose field count differs from the header are skipped, blank lines
    are ignored, and transient OS errors are retried a bounded number of
    times before surfacing as an IO_FAILURE.
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_READ_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_READ_RETRY_DELAY_SECONDS,
    ):
        if int(max_attempts) < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = int(max_attempts)
        self._retry_delay = float(retry_delay)

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def read(self, path: Union[str, Path]) -> List[Record]:
        path = Path(path)
        started = time.monotonic()
        records = self._with_retry(self._read_records, path)
        logger.info(
            "CSV read completed: %s (%d records, %.1f ms)",
            path,
            len(records),
            (time.monotonic() - started) * 1000,
        )
        return records

    def read_header(self, path: Union[str, Path]) -> List[str]:
        return self._with_retry(self._read_header, Path(path))

    def _with_retry(self, fn, path: Path):
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._retry_delay),
            retry=retry_if_exception(_is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        try:
            return retrying(fn, path)
        except RetryError as e:
            attempts = e.last_attempt.attempt_number
            cause = e.last_attempt.exception()
            logger.error("Failed to read %s after %d attempts: %s", path, attempts, cause)
            raise io_failure(
                f"Failed to read CSV file {path} after {attempts} attempts: {cause}",
                path=str(path),
                attempts=attempts,
            ) from cause

    def _read_header(self, path: Path) -> List[str]:
        try:
            with path.open("r", encoding="utf-8-sig", newline="") as f:
                for row in csv.reader(f):
                    if _is_blank(row):
                        continue
                    return [h.strip() for h in row]
        except FileNotFoundError:
            pass
        return []

    def _read_records(self, path: Path) -> List[Record]:
        try:
            f = path.open("r", encoding="utf-8-sig", newline="")
        except FileNotFoundError:
            logger.debug("CSV file %s does not exist, returning no records", path)
            return []

        records: List[Record] = []
        header: List[str] = []
        skipped = 0
        with f:
            reader = csv.reader(f)
            try:
                for row in reader:
                    if _is_blank(row):
                        continue
                    if not header:
                        header = [h.strip() for h in row]
                        continue
                    if len(row) != len(header):
                        skipped += 1
                        logger.warning(
                            "Skipping malformed row at line %d of %s (expected %d fields, got %d)",
                            reader.line_num,
                            path,
                            len(header),
                            len(row),
                        )
                        continue
                    records.append(dict(zip(header, row)))
            except csv.Error as e:
                raise io_failure(f"Failed to parse CSV file {path}: {e}", path=str(path)) from e

        if skipped:
            logger.info("Skipped %d malformed rows in %s", skipped, path)
        return records


def _is_blank(row: List[str]) -> bool:
    return not row or all(not cell.strip() for cell in row)
