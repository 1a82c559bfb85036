from __future__ import annotations

from typing import Optional

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""


class StorageError(DomainError):
    """Raised by the storage and backup layer.

    Callers dispatch on ``kind`` rather than on subclasses. ``path`` names the
    file or backup involved, ``attempts`` is set when a retried read gave up and
    ``field`` names the missing/invalid parameter of a validation failure.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        path: Optional[str] = None,
        attempts: Optional[int] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.path = path
        self.attempts = attempts
        self.field = field

    def to_dict(self) -> dict:
        data = {"kind": self.kind.value, "message": str(self)}
        if self.path is not None:
            data["path"] = self.path
        if self.attempts is not None:
            data["attempts"] = self.attempts
        if self.field is not None:
            data["field"] = self.field
        return data


def not_found(message: str, *, path: Optional[str] = None) -> StorageError:
    return StorageError(ErrorKind.NOT_FOUND, message, path=path)


def io_failure(message: str, *, path: Optional[str] = None, attempts: Optional[int] = None) -> StorageError:
    return StorageError(ErrorKind.IO_FAILURE, message, path=path, attempts=attempts)


def validation_failure(message: str, *, field: Optional[str] = None) -> StorageError:
    return StorageError(ErrorKind.VALIDATION, message, field=field)
