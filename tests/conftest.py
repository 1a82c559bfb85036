from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.contribution_tracker.contribution_tracker.container import build_container
from src.contribution_tracker.contribution_tracker.storage.csv_reader import RecordReader
from src.contribution_tracker.contribution_tracker.storage.csv_writer import RecordWriter
from src.contribution_tracker.contribution_tracker.storage.paths import TenantPathResolver
from src.contribution_tracker.contribution_tracker.storage.tenant_store import TenantCsvStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 5, 123000, tzinfo=timezone.utc)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "backups"


@pytest.fixture
def resolver(data_dir) -> TenantPathResolver:
    return TenantPathResolver(data_dir)


@pytest.fixture
def reader() -> RecordReader:
    return RecordReader(max_attempts=3, retry_delay=0)


@pytest.fixture
def writer(reader) -> RecordWriter:
    return RecordWriter(reader)


@pytest.fixture
def store(resolver, reader, writer) -> TenantCsvStore:
    return TenantCsvStore(resolver, reader, writer)


@pytest.fixture
def container(data_dir, backup_dir):
    c = build_container(
        storage_config={
            "data_dir": str(data_dir),
            "backup_dir": str(backup_dir),
            "retention_days": 7,
            "read_max_attempts": 3,
            "read_retry_delay_ms": 0,
        }
    )
    yield c
    c.backup_scheduler.stop()
