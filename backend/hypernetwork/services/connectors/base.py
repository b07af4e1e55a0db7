from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from ..filters import FilterExpression


class Table(str, Enum):
    ROSTER = "roster"
    HARD_SKILLS = "hard_skills"
    CONTACTS = "contacts"


Row = Dict[str, Any]


class BaseConnector(ABC):
    name: str

    @abstractmethod
    async def query(self, table: Table, filter: Optional[FilterExpression]) -> List[Row]:
        """Return the rows of ``table`` matching ``filter``; no filter means no rows."""
        ...
