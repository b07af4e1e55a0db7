# backend/hypernetwork/services/composer.py
from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Awaitable, Iterable, List, Optional
import logging

from .connectors.base import BaseConnector, Table
from .decoding import PersonRecord, decode_contact, decode_skill
from .filters import any_of, from_student_ids
from ..schemas.hypernetwork import ContactEntry, SkillEntry

logger = logging.getLogger(__name__)


async def _fetch_hard_skills(gateway: BaseConnector, person: PersonRecord) -> List[SkillEntry]:
    if not person.hard_skills_relation or person.id is None:
        return []
    rows = await gateway.query(Table.HARD_SKILLS, any_of(from_student_ids([person.student_key])))
    return [decode_skill(row) for row in rows]


async def _fetch_contact(gateway: BaseConnector, person: PersonRecord) -> Optional[ContactEntry]:
    if not person.contact_relation or person.id is None:
        return None
    rows = await gateway.query(Table.CONTACTS, any_of(from_student_ids([person.student_key])))
    if not rows:
        return None
    if len(rows) > 1:
        logger.warning(
            "Student %s has %d contact rows; using the first",
            person.id,
            len(rows),
            extra={"table": Table.CONTACTS.value, "count": len(rows)},
        )
    return decode_contact(rows[0])


async def _join_all(aws: Iterable[Awaitable[Any]]) -> List[Any]:
    """
    Await every awaitable concurrently; results come back in input order.

    On the first failure (or if the caller is cancelled) the lookups still
    running are cancelled and awaited before the error is re-raised, so
    nothing keeps using the gateway after the request has failed.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [t for t in tasks if not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    errors = [t.exception() for t in tasks if not t.cancelled() and t.exception() is not None]
    if errors:
        raise errors[0]
    return [t.result() for t in tasks]


async def compose_person(gateway: BaseConnector, person: PersonRecord) -> PersonRecord:
    """
    Attach hard skills and contact details to one student.

    Both lookups are keyed by the student's own title text, not by
    the relation-link page IDs; the relation lists only decide whether a
    lookup is worth issuing.
    """
    hard_skills, contact = await _join_all((
        _fetch_hard_skills(gateway, person),
        _fetch_contact(gateway, person),
    ))
    return replace(person, hard_skills=hard_skills, contact=contact)


async def compose_people(
    gateway: BaseConnector,
    people: List[PersonRecord],
    request_id: Optional[str] = None,
) -> List[PersonRecord]:
    """
    Compose every student concurrently.

    The first failing lookup fails the whole batch and cancels the rest;
    there is no partial result.
    Output order matches input order.
    """
    if not people:
        return []

    composed = await _join_all(compose_person(gateway, p) for p in people)

    logger.info(
        "Composed %d students",
        len(composed),
        extra={"request_id": request_id, "step": "compose", "count": len(composed)},
    )
    return list(composed)
