from __future__ import annotations

from typing import Optional

from ...core.config import Settings
from .base import BaseConnector, Row, Table
from .notion import NotionConnector, NotionStoreConfig

__all__ = [
    "BaseConnector",
    "NotionConnector",
    "NotionStoreConfig",
    "Row",
    "Table",
    "get_connector",
]


def get_connector(settings: Optional[Settings] = None) -> NotionConnector:
    """Build a store gateway from explicit settings (or the cached process settings)."""
    return NotionConnector(NotionStoreConfig.from_settings(settings))
