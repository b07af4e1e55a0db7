# backend/hypernetwork/schemas/hypernetwork.py
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# A name token becomes two roster conditions and every list entry one; these
# caps keep a single query filter inside Notion's compound and request limits.
MAX_NAME_LEN = 200
MAX_CRITERIA_PER_FIELD = 50


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SearchQuery(CamelModel):
    name: str | None = None
    programs: List[str] = []
    languages: List[str] = []
    hard_skills: List[str] = []

    @field_validator("name", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            stripped = v.strip()
            return stripped or None
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None and len(v) > MAX_NAME_LEN:
            raise ValueError(f"name must be at most {MAX_NAME_LEN} characters")
        return v

    @field_validator("programs", "languages", "hard_skills", mode="before")
    @classmethod
    def _null_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("programs", "languages", "hard_skills")
    @classmethod
    def _drop_blank_entries(cls, v: List[str]) -> List[str]:
        cleaned = [item.strip() for item in v if item and item.strip()]
        if len(cleaned) > MAX_CRITERIA_PER_FIELD:
            raise ValueError(
                f"at most {MAX_CRITERIA_PER_FIELD} values are accepted per criterion"
            )
        return cleaned


class SkillEntry(CamelModel):
    skill: str = ""
    comment: str = ""


class SlackStatus(CamelModel):
    checked: bool = False
    member_id: str | None = None


class ContactEntry(CamelModel):
    email: str = ""
    linkedin: str = ""
    slack: SlackStatus = Field(default_factory=SlackStatus)


class PersonView(CamelModel):
    """Public, denormalized shape of one student."""

    id: int | None = None
    first_name: str = ""
    last_name: str = ""
    program: str = ""
    languages: List[str] = []
    availability: str = ""
    portfolio: str = ""
    hyper_email: str = ""
    hard_skills: List[SkillEntry] = []
    contact: ContactEntry | None = None

    @field_serializer("contact")
    def _serialize_contact(self, contact: ContactEntry | None) -> Dict[str, Any]:
        # A student without a contact row renders as {}; memberId only when set.
        if contact is None:
            return {}
        return contact.model_dump(by_alias=True, exclude_none=True)
