# backend/hypernetwork/services/decoding.py
"""
Decoders from raw Notion page objects to typed records.

Notion returns each row as ``{"id": ..., "properties": {name: {"type": ..., <type>: ...}}}``.
Individual rows routinely have unset optional properties (``"select": null``,
empty ``rich_text`` arrays, a missing column after a schema edit), so every
extractor below falls back to ``""`` or ``[]`` instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..schemas.hypernetwork import ContactEntry, SkillEntry, SlackStatus
from . import filters as f


@dataclass
class PersonRecord:
    id: Optional[int] = None
    # Title text exactly as stored; satellite lookups match on this, since
    # "042" and "42" are different titles to Notion.
    student_key: str = ""
    first_name: str = ""
    last_name: str = ""
    program: str = ""
    languages: List[str] = field(default_factory=list)
    availability: str = ""
    portfolio: str = ""
    hyper_email: str = ""
    # Relation-link page IDs. They only gate composition; the lookups
    # themselves are keyed by ``student_key``.
    hard_skills_relation: List[str] = field(default_factory=list)
    contact_relation: List[str] = field(default_factory=list)
    # Filled in by the composer
    hard_skills: List[SkillEntry] = field(default_factory=list)
    contact: Optional[ContactEntry] = None


def _prop(row: Dict[str, Any], name: str) -> Dict[str, Any]:
    props = (row or {}).get("properties") or {}
    value = props.get(name)
    return value if isinstance(value, dict) else {}


def _first_plain_text(items: Any) -> str:
    if not isinstance(items, list) or not items:
        return ""
    first = items[0]
    if not isinstance(first, dict):
        return ""
    return first.get("plain_text") or ""


def title_text(row: Dict[str, Any], name: str) -> str:
    return _first_plain_text(_prop(row, name).get("title"))


def rich_text(row: Dict[str, Any], name: str) -> str:
    return _first_plain_text(_prop(row, name).get("rich_text"))


def select_name(row: Dict[str, Any], name: str) -> str:
    selected = _prop(row, name).get("select")
    if not isinstance(selected, dict):
        return ""
    return selected.get("name") or ""


def multi_select_names(row: Dict[str, Any], name: str) -> List[str]:
    options = _prop(row, name).get("multi_select")
    if not isinstance(options, list):
        return []
    return [o["name"] for o in options if isinstance(o, dict) and o.get("name")]


def url_value(row: Dict[str, Any], name: str) -> str:
    value = _prop(row, name).get("url")
    return value if isinstance(value, str) else ""


def email_value(row: Dict[str, Any], name: str) -> str:
    value = _prop(row, name).get("email")
    return value if isinstance(value, str) else ""


def relation_ids(row: Dict[str, Any], name: str) -> List[str]:
    links = _prop(row, name).get("relation")
    if not isinstance(links, list):
        return []
    return [link["id"] for link in links if isinstance(link, dict) and link.get("id")]


def student_key(row: Dict[str, Any]) -> str:
    return title_text(row, f.STUDENT_ID)


def parse_student_id(row: Dict[str, Any]) -> Optional[int]:
    """Student IDs are stored as numeric text in the title column of every table."""
    raw = student_key(row).strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        try:
            # "42.0" and friends
            as_float = float(raw)
        except ValueError:
            return None
        return int(as_float) if as_float.is_integer() else None


def decode_person(row: Dict[str, Any]) -> PersonRecord:
    return PersonRecord(
        id=parse_student_id(row),
        student_key=student_key(row),
        first_name=rich_text(row, f.FIRST_NAME),
        last_name=rich_text(row, f.LAST_NAME),
        program=select_name(row, f.PROGRAM),
        languages=multi_select_names(row, f.LANGUAGES),
        availability=select_name(row, f.AVAILABILITY),
        portfolio=url_value(row, f.PORTFOLIO),
        hyper_email=email_value(row, f.HYPER_EMAIL),
        hard_skills_relation=relation_ids(row, f.HARD_SKILLS),
        contact_relation=relation_ids(row, f.CONTACT),
    )


def decode_people(rows: List[Dict[str, Any]]) -> List[PersonRecord]:
    return [decode_person(row) for row in rows or []]


def decode_skill(row: Dict[str, Any]) -> SkillEntry:
    return SkillEntry(
        skill=select_name(row, f.SKILL),
        comment=rich_text(row, f.COMMENT),
    )


def decode_contact(row: Dict[str, Any]) -> ContactEntry:
    member_id = rich_text(row, f.SLACK_MEMBER_ID)
    slack = SlackStatus(checked=True, member_id=member_id) if member_id else SlackStatus()
    return ContactEntry(
        email=email_value(row, f.EMAIL),
        linkedin=url_value(row, f.LINKEDIN),
        slack=slack,
    )
