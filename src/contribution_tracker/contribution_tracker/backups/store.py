from __future__ import annotations

import itertools
import logging
import os
import re
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Callable, List, Tuple, Union

from ..common.datetime_utils import format_backup_timestamp, parse_backup_timestamp, utc_now
from ..common.validators import require_non_empty, require_plain_name
from ..core.constants import BACKUP_NAME_MARKER, CHECKSUM_ALGORITHM, DEFAULT_RETENTION_DAYS
from ..core.exceptions import io_failure, not_found, validation_failure
from ..storage.checksum import file_checksum
from .model import BackupInfo

logger = logging.getLogger(__name__)

_BACKUP_NAME_RE = re.compile(
    r"^(?P<source>.+)" + re.escape(BACKUP_NAME_MARKER) + r"(?P<ts>\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z)(?:-(?P<seq>\d+))?$"
)


def is_backup_name(name: str) -> bool:
    return bool(_BACKUP_NAME_RE.match(name))


def backup_name_for(source_name: str, when: datetime) -> str:
    return f"{source_name}{BACKUP_NAME_MARKER}{format_backup_timestamp(when)}"


class BackupStore:
    """Timestamped, checksummed copies of files in one backup directory.

    Backups are named ``<file>.backup-<UTC timestamp>``; a ``-<n>`` suffix is
    added when the name is already taken so a backup never overwrites
    another. Only files following that convention are listed or cleaned up.
    """

    def __init__(
        self,
        backup_dir: Union[str, Path],
        *,
        clock: Callable[[], datetime] = utc_now,
        algorithm: str = CHECKSUM_ALGORITHM,
    ):
        self._dir = Path(backup_dir)
        self._clock = clock
        self._algorithm = algorithm

    @property
    def backup_dir(self) -> Path:
        return self._dir

    def create(self, source_path: Union[str, Path]) -> BackupInfo:
        source = Path(source_path)
        logger.debug("Creating backup of %s", source)
        if not source.is_file():
            logger.warning("Source file does not exist for backup: %s", source)
            raise not_found(f"Source file does not exist: {source}", path=str(source))

        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise io_failure(f"Failed to create backup directory {self._dir}: {e}", path=str(self._dir)) from e

        created_at = self._clock()
        target, dst = self._reserve(backup_name_for(source.name, created_at))
        try:
            with dst, source.open("rb") as src:
                shutil.copyfileobj(src, dst)
                dst.flush()
                os.fsync(dst.fileno())
        except FileNotFoundError as e:
            _unlink_quietly(target)
            raise not_found(f"Source file does not exist: {source}", path=str(source)) from e
        except OSError as e:
            _unlink_quietly(target)
            logger.error("Failed to create backup of %s: %s", source, e)
            raise io_failure(f"Failed to create backup of {source}: {e}", path=str(source)) from e

        checksum = file_checksum(target, self._algorithm)
        info = BackupInfo(
            file_name=target.name,
            backup_path=target,
            size=target.stat().st_size,
            created_at=created_at,
            checksum=checksum,
            source_path=source,
        )
        logger.info("Backup created: %s -> %s (%d bytes)", source, target, info.size)
        return info

    def list(self) -> List[BackupInfo]:
        """Backups in directory order; callers sort if they need to."""
        backups: List[BackupInfo] = []
        try:
            entries = list(os.scandir(self._dir))
        except FileNotFoundError:
            return backups
        except OSError as e:
            raise io_failure(f"Failed to list backups in {self._dir}: {e}", path=str(self._dir)) from e

        for entry in entries:
            if not is_backup_name(entry.name):
                continue
            try:
                if not entry.is_file():
                    continue
                backups.append(self._describe(Path(entry.path), entry.stat()))
            except OSError as e:
                logger.warning("Failed to get metadata for backup file %s: %s", entry.name, e)

        logger.info("Backups listed in %s: %d", self._dir, len(backups))
        return backups

    def info(self, backup_file_name: str) -> BackupInfo:
        path = self._backup_path(backup_file_name)
        try:
            st = path.stat()
        except FileNotFoundError as e:
            raise not_found(f"Backup file does not exist: {backup_file_name}", path=str(path)) from e
        except OSError as e:
            raise io_failure(f"Failed to read backup {backup_file_name}: {e}", path=str(path)) from e
        info = self._describe(path, st)
        return BackupInfo(
            file_name=info.file_name,
            backup_path=info.backup_path,
            size=info.size,
            created_at=info.created_at,
            modified_at=info.modified_at,
            checksum=file_checksum(path, self._algorithm),
        )

    def restore(self, backup_file_name: str, target_path: Union[str, Path, None]) -> Path:
        backup = self._backup_path(backup_file_name)
        if target_path is None or not str(target_path).strip():
            raise validation_failure("target file name is required", field="targetFileName")
        target = Path(target_path)

        logger.debug("Restoring %s over %s", backup, target)
        if not backup.is_file():
            logger.warning("Backup file does not exist for restoration: %s", backup)
            raise not_found(f"Backup file does not exist: {backup_file_name}", path=str(backup))

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".restore", dir=str(target.parent))
            with os.fdopen(fd, "wb") as dst, backup.open("rb") as src:
                shutil.copyfileobj(src, dst)
                dst.flush()
                os.fsync(dst.fileno())
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            logger.error("Failed to restore %s over %s: %s", backup, target, e)
            raise io_failure(f"Failed to restore from backup {backup_file_name}: {e}", path=str(target)) from e
        finally:
            if tmp_name is not None:
                _unlink_quietly(Path(tmp_name))

        logger.info("File restored from backup: %s -> %s", backup, target)
        return target

    def verify(self, backup_file_name: str, expected_checksum: str) -> bool:
        """Recompute the backup's checksum and compare.

        A mismatch returns False; only a missing or unreadable backup raises.
        """
        path = self._backup_path(backup_file_name)
        expected = require_non_empty(expected_checksum, "expectedChecksum").lower()
        if not path.is_file():
            logger.warning("Backup file does not exist for integrity verification: %s", path)
            raise not_found(f"Backup file does not exist: {backup_file_name}", path=str(path))

        actual = file_checksum(path, self._algorithm)
        is_valid = actual == expected
        if is_valid:
            logger.info("Backup integrity verified: %s", path)
        else:
            logger.warning(
                "Backup integrity verification failed for %s (expected %s, actual %s)",
                path,
                expected,
                actual,
            )
        return is_valid

    def cleanup(self, max_age_days: float = DEFAULT_RETENTION_DAYS) -> int:
        if max_age_days is None or float(max_age_days) < 0:
            raise validation_failure("max_age_days must be zero or positive", field="max_age_days")

        cutoff = (self._clock() - timedelta(days=float(max_age_days))).timestamp()
        deleted = 0
        try:
            entries = list(os.scandir(self._dir))
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise io_failure(f"Failed to scan backups in {self._dir}: {e}", path=str(self._dir)) from e

        for entry in entries:
            if not is_backup_name(entry.name):
                continue
            try:
                if not entry.is_file() or entry.stat().st_mtime >= cutoff:
                    continue
                os.unlink(entry.path)
            except OSError as e:
                logger.warning("Failed to delete backup file %s: %s", entry.name, e)
                continue
            deleted += 1
            logger.info("Deleted old backup %s", entry.path)

        logger.info("Old backups cleaned up in %s: %d deleted (max age %s days)", self._dir, deleted, max_age_days)
        return deleted

    def _backup_path(self, backup_file_name: str) -> Path:
        return self._dir / require_plain_name(backup_file_name, "backupFileName")

    def _reserve(self, base_name: str) -> Tuple[Path, BinaryIO]:
        for n in itertools.count():
            path = self._dir / (base_name if n == 0 else f"{base_name}-{n}")
            try:
                return path, path.open("xb")
            except FileExistsError:
                continue
            except OSError as e:
                raise io_failure(f"Failed to create backup file {path}: {e}", path=str(path)) from e

    @staticmethod
    def _describe(path: Path, st: os.stat_result) -> BackupInfo:
        created_at = parse_backup_timestamp(path.name) or datetime.fromtimestamp(st.st_ctime, timezone.utc)
        return BackupInfo(
            file_name=path.name,
            backup_path=path,
            size=st.st_size,
            created_at=created_at,
            modified_at=datetime.fromtimestamp(st.st_mtime, timezone.utc),
        )


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
