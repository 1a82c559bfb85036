from __future__ import annotations

from enum import Enum


class EntityFile(str, Enum):
    """Entity files every tenant directory holds."""

    EMPLOYEES = "employees.csv"
    INTERACTIONS = "interactions.csv"
    KUDOS = "kudos.csv"
    CONTRIBUTIONS = "contributions.csv"


class ErrorKind(str, Enum):
    """Kind of a storage failure, mapped to HTTP status by the controllers."""

    NOT_FOUND = "NOT_FOUND"
    IO_FAILURE = "IO_FAILURE"
    VALIDATION = "VALIDATION"
