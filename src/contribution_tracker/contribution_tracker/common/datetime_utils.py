from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

_BACKUP_TS_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})T(\d{2})-(\d{2})-(\d{2})-(\d{3})Z")


def utc_now() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """ISO-8601 with millisecond precision, 'Z' suffix for UTC values."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    return value.isoformat(timespec="milliseconds")


def format_backup_timestamp(value: datetime) -> str:
    """ISO-8601 UTC timestamp with ':' and '.' replaced by '-'.

    e.g. 2026-10-19T08:30:05.123Z -> 2026-10-19T08-30-05-123Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return to_iso(value).replace(":", "-").replace(".", "-")


def parse_backup_timestamp(value: str) -> Optional[datetime]:
    match = _BACKUP_TS_RE.search(value)
    if not match:
        return None
    year, month, day, hour, minute, second, millis = (int(p) for p in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second, millis * 1000, tzinfo=timezone.utc)
    except ValueError:
        return None
