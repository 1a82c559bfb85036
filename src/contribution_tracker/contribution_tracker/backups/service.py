from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..common.datetime_utils import utc_now
from ..common.validators import require_plain_name, require_tenant_id
from ..core.constants import DEFAULT_RETENTION_DAYS
from ..core.exceptions import StorageError
from ..storage.csv_writer import RecordWriter
from ..storage.paths import TenantPathResolver
from ..tenants.service import TenantService
from .model import BackupInfo, FileBackupResult, TenantBackupResult
from .store import BackupStore

logger = logging.getLogger(__name__)


class BackupService:
    """Backups of tenant entity files.

    Each tenant gets its own backup directory (``<backup_root>/<tenant_id>``),
    so listing, verifying and restoring never cross tenant boundaries.
    """

    def __init__(
        self,
        resolver: TenantPathResolver,
        tenants: TenantService,
        backup_root: Union[str, Path],
        *,
        writer: Optional[RecordWriter] = None,
        retention_days: float = DEFAULT_RETENTION_DAYS,
        clock: Callable = utc_now,
    ):
        self._resolver = resolver
        self._tenants = tenants
        self._root = Path(backup_root)
        self._writer = writer
        self._retention_days = retention_days
        self._clock = clock

    @property
    def retention_days(self) -> float:
        return self._retention_days

    def store_for(self, tenant_id: str) -> BackupStore:
        return BackupStore(self._root / require_tenant_id(tenant_id), clock=self._clock)

    def create_tenant_backups(self, tenant_id: str) -> List[FileBackupResult]:
        tenant_id = self._tenants.get_tenant(tenant_id).tenant_id
        store = self.store_for(tenant_id)
        logger.info("Starting backup of tenant %s", tenant_id)

        results: List[FileBackupResult] = []
        for name, path in self._resolver.entity_paths(tenant_id):
            try:
                info = store.create(path)
            except StorageError as e:
                logger.error("Failed to back up %s for tenant %s: %s", name, tenant_id, e)
                results.append(FileBackupResult(file=name, success=False, error=str(e)))
                continue
            results.append(FileBackupResult(file=name, success=True, backup=info))

        try:
            deleted = store.cleanup(self._retention_days)
            logger.info("Old backups cleaned up for tenant %s: %d", tenant_id, deleted)
        except StorageError as e:
            logger.error("Failed to clean up old backups for tenant %s: %s", tenant_id, e)

        logger.info(
            "Backup of tenant %s completed: %d successful, %d failed",
            tenant_id,
            sum(1 for r in results if r.success),
            sum(1 for r in results if not r.success),
        )
        return results

    def create_all_backups(self) -> List[TenantBackupResult]:
        """One sweep: back up every tenant found in the data directory."""
        tenant_ids = self._tenants.list_tenant_ids()
        logger.info("Starting backup sweep over %d tenants", len(tenant_ids))

        sweep: List[TenantBackupResult] = []
        for tenant_id in tenant_ids:
            try:
                files = self.create_tenant_backups(tenant_id)
            except Exception as e:
                logger.exception("Backup of tenant %s failed", tenant_id)
                sweep.append(TenantBackupResult(tenant_id=tenant_id, error=str(e)))
                continue
            sweep.append(TenantBackupResult(tenant_id=tenant_id, files=tuple(files)))

        logger.info("Backup sweep completed for %d tenants", len(tenant_ids))
        return sweep

    def list_backups(self, tenant_id: str) -> List[BackupInfo]:
        return self.store_for(tenant_id).list()

    def restore_backup(self, tenant_id: str, backup_file_name: str, target_file_name: str) -> Path:
        backup_file_name = require_plain_name(backup_file_name, "backupFileName")
        target_file_name = require_plain_name(target_file_name, "targetFileName")
        store = self.store_for(tenant_id)
        target = self._resolver.resolve(tenant_id, target_file_name)

        logger.info("Restoring %s over %s for tenant %s", backup_file_name, target_file_name, tenant_id)
        if self._writer is None:
            return store.restore(backup_file_name, target)
        with self._writer.lock_for(target):
            return store.restore(backup_file_name, target)

    def verify_backup(self, tenant_id: str, backup_file_name: str, expected_checksum: str) -> bool:
        return self.store_for(tenant_id).verify(backup_file_name, expected_checksum)

    def cleanup(self, tenant_id: str, max_age_days: Optional[float] = None) -> int:
        days = self._retention_days if max_age_days is None else max_age_days
        return self.store_for(tenant_id).cleanup(days)
