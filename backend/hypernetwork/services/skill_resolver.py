# backend/hypernetwork/services/skill_resolver.py
from __future__ import annotations

from typing import Iterable, List, Optional
import logging

from .connectors.base import BaseConnector, Table
from .decoding import parse_student_id, student_key
from .filters import PropertyCondition, any_of, from_hard_skills, from_student_ids

logger = logging.getLogger(__name__)


async def resolve_student_filters(
    gateway: BaseConnector,
    hard_skills: Optional[Iterable[str]],
    request_id: Optional[str] = None,
) -> List[PropertyCondition]:
    """
    Turn requested hard skills into ``Student ID`` conditions for the roster.

    Skills live in their own table, one row per (student, skill). We query
    that table for any of the requested skills, collect the owning student
    IDs (deduplicated, first-seen order) and emit one title-equality
    condition per ID.

    An empty return value means "nobody has these skills". Callers must not
    treat it as "no constraint".
    """
    skill_filter = any_of(from_hard_skills(hard_skills))
    if skill_filter is None:
        return []

    rows = await gateway.query(Table.HARD_SKILLS, skill_filter)

    # Conditions reuse the stored title text; "042" would not match "42".
    student_keys: List[str] = []
    for row in rows:
        key = student_key(row)
        if parse_student_id(row) is None or key in student_keys:
            continue
        student_keys.append(key)

    logger.info(
        "Resolved %d skill rows to %d students",
        len(rows),
        len(student_keys),
        extra={"request_id": request_id, "step": "resolve_skills", "count": len(student_keys)},
    )
    return from_student_ids(student_keys)
