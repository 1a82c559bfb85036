from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.constants import DEFAULT_TENANT_ID
from ..core.enums import ErrorKind
from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.IO_FAILURE: 500,
}


def current_tenant_id() -> str:
    return (request.headers.get("X-Tenant-ID") or "").strip() or DEFAULT_TENANT_ID


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def error_response(error: str, e: StorageError):
    status = STATUS_BY_KIND.get(e.kind, 500)
    if status >= 500:
        logger.error("%s: %s", error, e)
    else:
        logger.warning("%s: %s", error, e)
    return jsonify({"error": error, "message": str(e), "kind": e.kind.value}), status
