# backend/hypernetwork/services/projection.py
from __future__ import annotations

from typing import Iterable, List, Union

from ..schemas.hypernetwork import PersonView
from .decoding import PersonRecord


def to_view(person: Union[PersonRecord, PersonView]) -> PersonView:
    """
    Public view of a composed student.

    PersonView declares no relation-link fields, so reading the record by
    attribute drops ``hard_skills_relation`` / ``contact_relation``. Passing
    an existing view yields an equal view.
    """
    return PersonView.model_validate(person, from_attributes=True)


def to_views(people: Iterable[Union[PersonRecord, PersonView]]) -> List[PersonView]:
    return [to_view(p) for p in people]
