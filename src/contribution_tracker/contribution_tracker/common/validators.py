from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_TENANT_ID_LENGTH
from ..core.exceptions import validation_failure

_TENANT_ID_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise validation_failure(f"{field_name} is required", field=field_name)
    return value.strip()


def require_plain_name(value: Optional[str], field_name: str) -> str:
    """Accept a bare file name only: no directories, no traversal."""
    value = require_non_empty(value, field_name)
    if value in {".", ".."} or "/" in value or "\\" in value or "\x00" in value:
        raise validation_failure(f"{field_name} must be a plain file name", field=field_name)
    return value


def require_tenant_id(value: Optional[str], field_name: str = "tenant_id") -> str:
    value = require_non_empty(value, field_name)
    if len(value) > MAX_TENANT_ID_LENGTH or not _TENANT_ID_RE.match(value):
        raise validation_failure(f"{field_name} {value!r} is not a valid tenant identifier", field=field_name)
    return value


def optional_text(value: Optional[object], field_name: str) -> Optional[str]:
    """None passes through; anything else must be a string and comes back stripped."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise validation_failure(f"{field_name} must be a string", field=field_name)
    return value.strip()
