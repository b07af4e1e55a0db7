# backend/hypernetwork/services/filters.py
"""
Builders for Notion database query filters.

Each ``from_*`` builder turns one search criterion into a flat list of
property conditions and never decides how siblings are combined; the caller
wraps them with ``any_of`` / ``all_of``. Combinators return ``None`` instead
of an empty compound node, so "no constraint" can never reach the store as
``{"or": []}``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

# Roster (primary) table
STUDENT_ID = "Student ID"
FIRST_NAME = "First Name"
LAST_NAME = "Last Name"
PROGRAM = "Program"
LANGUAGES = "Languages"
AVAILABILITY = "Availability"
PORTFOLIO = "Portfolio"
HYPER_EMAIL = "Hyper Email"
HARD_SKILLS = "Hard Skills"
CONTACT = "Contact"

# Hard skills table
SKILL = "Skill"
COMMENT = "Comment"

# Contacts table
EMAIL = "Email"
LINKEDIN = "LinkedIn"
SLACK_MEMBER_ID = "Slack Member ID"

PropertyKind = Literal["title", "rich_text", "select", "multi_select"]
Operator = Literal["equals", "contains"]


@dataclass(frozen=True)
class PropertyCondition:
    property: str
    kind: PropertyKind
    operator: Operator
    value: str

    def to_notion(self) -> Dict[str, Any]:
        return {"property": self.property, self.kind: {self.operator: self.value}}


@dataclass(frozen=True)
class CompoundFilter:
    op: Literal["and", "or"]
    children: List["FilterExpression"] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.children

    def to_notion(self) -> Dict[str, Any]:
        return {self.op: [child.to_notion() for child in self.children]}


FilterExpression = Union[PropertyCondition, CompoundFilter]


def _clean(values: Optional[Iterable[str]]) -> List[str]:
    if not values:
        return []
    return [v.strip() for v in values if isinstance(v, str) and v.strip()]


def from_programs(programs: Optional[Iterable[str]]) -> List[PropertyCondition]:
    return [
        PropertyCondition(PROGRAM, "select", "equals", program)
        for program in _clean(programs)
    ]


def from_languages(languages: Optional[Iterable[str]]) -> List[PropertyCondition]:
    return [
        PropertyCondition(LANGUAGES, "multi_select", "contains", language)
        for language in _clean(languages)
    ]


def from_name(name: Optional[str]) -> List[PropertyCondition]:
    """Every whitespace-separated token may match either the first or last name."""
    if not name:
        return []

    conditions: List[PropertyCondition] = []
    for token in name.split():
        conditions.append(PropertyCondition(FIRST_NAME, "rich_text", "contains", token))
        conditions.append(PropertyCondition(LAST_NAME, "rich_text", "contains", token))
    return conditions


def from_hard_skills(hard_skills: Optional[Iterable[str]]) -> List[PropertyCondition]:
    # Skill is a single select column on the hard skills table. The roster's
    # "Hard Skills" column is a relation and is never filtered directly.
    return [
        PropertyCondition(SKILL, "select", "equals", skill)
        for skill in _clean(hard_skills)
    ]


def from_student_ids(ids: Optional[Iterable[Union[int, str]]]) -> List[PropertyCondition]:
    if not ids:
        return []
    return [PropertyCondition(STUDENT_ID, "title", "equals", str(sid)) for sid in ids]


def _combine(op: Literal["and", "or"], children: Iterable[Optional[FilterExpression]]) -> Optional[FilterExpression]:
    kept = [
        c for c in children
        if c is not None and not (isinstance(c, CompoundFilter) and c.is_empty())
    ]
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return CompoundFilter(op, kept)


def any_of(children: Iterable[Optional[FilterExpression]]) -> Optional[FilterExpression]:
    return _combine("or", children)


def all_of(children: Iterable[Optional[FilterExpression]]) -> Optional[FilterExpression]:
    return _combine("and", children)
