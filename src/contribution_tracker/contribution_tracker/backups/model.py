from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class BackupInfo:
    """One backup file and its metadata.

    ``checksum`` and ``source_path`` are only known right after ``create`` (or
    from ``info``); listings carry size and timestamps only.
    """

    file_name: str
    backup_path: Path
    size: int
    created_at: datetime
    checksum: Optional[str] = None
    source_path: Optional[Path] = None
    modified_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {
            "fileName": self.file_name,
            "filePath": str(self.backup_path),
            "size": self.size,
            "createdAt": to_iso(self.created_at),
        }
        if self.modified_at is not None:
            data["modifiedAt"] = to_iso(self.modified_at)
        if self.checksum is not None:
            data["checksum"] = self.checksum
        if self.source_path is not None:
            data["sourceFile"] = str(self.source_path)
        return data


@dataclass(frozen=True)
class FileBackupResult:
    """Outcome of backing up one entity file during a sweep."""

    file: str
    success: bool
    backup: Optional[BackupInfo] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"file": self.file, "success": self.success}
        if self.backup is not None:
            data["backupInfo"] = self.backup.to_dict()
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class TenantBackupResult:
    """Outcome of one tenant's part of a sweep."""

    tenant_id: str
    files: tuple = ()
    error: Optional[str] = None

    @property
    def successful(self) -> int:
        return sum(1 for r in self.files if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.files if not r.success)

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"error": self.error}
        return {
            "successful": self.successful,
            "failed": self.failed,
            "details": [r.to_dict() for r in self.files],
        }
