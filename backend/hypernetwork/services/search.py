# backend/hypernetwork/services/search.py
from __future__ import annotations

from typing import List, Optional
import logging

from ..schemas.hypernetwork import PersonView, SearchQuery
from .composer import compose_people
from .connectors.base import BaseConnector, Table
from .decoding import decode_people
from .filters import (
    FilterExpression,
    all_of,
    any_of,
    from_languages,
    from_name,
    from_programs,
)
from .projection import to_views
from .skill_resolver import resolve_student_filters

logger = logging.getLogger(__name__)


async def build_roster_filter(
    gateway: BaseConnector,
    query: SearchQuery,
    request_id: Optional[str] = None,
) -> Optional[FilterExpression]:
    """
    Combined roster filter for ``query``, or ``None`` when nothing may match.

    Values inside one criterion are alternatives (OR); criteria that were
    supplied all have to hold (AND). Requested hard skills that match no
    skill rows make the whole query unsatisfiable, regardless of the other
    criteria.
    """
    dimensions: List[Optional[FilterExpression]] = [
        any_of(from_name(query.name)),
        any_of(from_programs(query.programs)),
        any_of(from_languages(query.languages)),
    ]

    if query.hard_skills:
        student_filters = await resolve_student_filters(
            gateway, query.hard_skills, request_id=request_id
        )
        if not student_filters:
            logger.info(
                "No students hold the requested hard skills",
                extra={"request_id": request_id, "step": "resolve_skills"},
            )
            return None
        dimensions.append(any_of(student_filters))

    return all_of(dimensions)


async def search_students(
    gateway: BaseConnector,
    query: SearchQuery,
    request_id: Optional[str] = None,
) -> List[PersonView]:
    """
    Run one search end to end:

      criteria -> roster filter -> roster query -> decode -> compose -> project

    An unconstrained or unsatisfiable query returns ``[]`` without querying
    the roster. Store errors propagate to the caller unchanged.
    """
    roster_filter = await build_roster_filter(gateway, query, request_id=request_id)
    if roster_filter is None:
        logger.info(
            "Search has no satisfiable criteria; returning no students",
            extra={"request_id": request_id, "step": "build_filter"},
        )
        return []

    rows = await gateway.query(Table.ROSTER, roster_filter)
    logger.info(
        "Roster query returned %d rows",
        len(rows),
        extra={"request_id": request_id, "step": "roster_query", "count": len(rows)},
    )

    people = decode_people(rows)
    composed = await compose_people(gateway, people, request_id=request_id)
    return to_views(composed)
