from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .backups.scheduler import BackupScheduler
from .backups.service import BackupService
from .core.constants import (
    DEFAULT_READ_MAX_ATTEMPTS,
    DEFAULT_READ_RETRY_DELAY_SECONDS,
    DEFAULT_RETENTION_DAYS,
)
from .storage.csv_reader import RecordReader
from .storage.csv_writer import RecordWriter
from .storage.paths import TenantPathResolver
from .storage.tenant_store import TenantCsvStore
from .tenants.service import TenantService


@dataclass(frozen=True)
class Container:
    resolver: TenantPathResolver
    reader: RecordReader
    writer: RecordWriter

    tenant_store: TenantCsvStore
    tenant_service: TenantService
    backup_service: BackupService
    backup_scheduler: BackupScheduler


def build_container(*, storage_config: Mapping[str, Any]) -> Container:
    data_dir = Path(storage_config["data_dir"])
    backup_dir = Path(storage_config["backup_dir"])

    resolver = TenantPathResolver(data_dir)
    reader = RecordReader(
        max_attempts=int(storage_config.get("read_max_attempts", DEFAULT_READ_MAX_ATTEMPTS)),
        retry_delay=float(storage_config.get("read_retry_delay_ms", DEFAULT_READ_RETRY_DELAY_SECONDS * 1000)) / 1000,
    )
    writer = RecordWriter(reader)

    tenant_store = TenantCsvStore(resolver, reader, writer)
    tenant_service = TenantService(resolver)
    backup_service = BackupService(
        resolver,
        tenant_service,
        backup_dir,
        writer=writer,
        retention_days=float(storage_config.get("retention_days", DEFAULT_RETENTION_DAYS)),
    )
    backup_scheduler = BackupScheduler(backup_service.create_all_backups)

    return Container(
        resolver=resolver,
        reader=reader,
        writer=writer,
        tenant_store=tenant_store,
        tenant_service=tenant_service,
        backup_service=backup_service,
        backup_scheduler=backup_scheduler,
    )
