from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..core.enums import EntityFile

# Header row of each entity file, in column order.
ENTITY_HEADERS: Dict[str, Tuple[str, ...]] = {
    EntityFile.EMPLOYEES.value: (
        "employee_id",
        "name",
        "email",
        "password",
        "department",
        "team",
        "role",
        "hire_date",
    ),
    EntityFile.INTERACTIONS.value: (
        "interaction_id",
        "employee_id",
        "type",
        "content",
        "timestamp",
        "context_tags",
    ),
    EntityFile.KUDOS.value: (
        "kudos_id",
        "from_employee_id",
        "to_employee_id",
        "message",
        "timestamp",
    ),
    EntityFile.CONTRIBUTIONS.value: (
        "employee_id",
        "calculated_at",
        "problem_solving_score",
        "collaboration_score",
        "initiative_score",
        "overall_score",
    ),
}


def headers_for(file_name: str) -> Optional[Tuple[str, ...]]:
    return ENTITY_HEADERS.get(file_name)
