# backend/hypernetwork/services/connectors/notion.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import logging

import httpx

from tenacity import AsyncRetrying, wait_exponential, stop_after_attempt, retry_if_exception_type

from .base import BaseConnector, Row, Table
from ..filters import CompoundFilter, FilterExpression
from ...core.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotionStoreConfig:
    api_key: str
    databases: Dict[Table, str] = field(default_factory=dict)
    base_url: str = "https://api.notion.com/v1"
    version: str = "2022-06-28"
    timeout: int = 20
    page_size: int = 100
    max_attempts: int = 3

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NotionStoreConfig":
        settings = settings or get_settings()
        return cls(
            api_key=settings.NOTION_API_KEY,
            databases={
                Table.ROSTER: settings.HYPER_NETWORK_DATABASE_ID,
                Table.HARD_SKILLS: settings.HYPER_NETWORK_HARD_SKILLS_DATABASE_ID,
                Table.CONTACTS: settings.HYPER_NETWORK_CONTACTS_DATABASE_ID,
            },
            base_url=settings.NOTION_BASE_URL.rstrip("/"),
            version=settings.NOTION_VERSION,
            timeout=int(settings.NOTION_TIMEOUT_SECONDS or 20),
            page_size=int(settings.NOTION_PAGE_SIZE or 100),
            max_attempts=max(1, int(settings.NOTION_MAX_ATTEMPTS or 1)),
        )


class NotionConnector(BaseConnector):
    """
    Store gateway over the Notion database query endpoint.

    - One ``POST /databases/{id}/query`` per ``query()`` call, first page only.
    - An absent or empty filter returns ``[]`` without touching the network;
      Notion would otherwise answer an unfiltered query with the whole table.
    - HTTP status errors (auth, rate limit, filter validation) are raised
      unmodified as ``httpx.HTTPStatusError``. Only transport failures are
      retried, and the last one is re-raised as-is.

    Usage:

        async with NotionConnector(NotionStoreConfig.from_settings()) as notion:
            rows = await notion.query(Table.ROSTER, filter)
    """

    name = "notion"

    def __init__(
        self,
        config: NotionStoreConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "NotionConnector":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Notion-Version": self.config.version,
            "Content-Type": "application/json",
        }

    def _database_id(self, table: Table) -> str:
        database_id = self.config.databases.get(table)
        if not database_id:
            raise KeyError(f"No Notion database configured for table '{table.value}'")
        return database_id

    async def query(self, table: Table, filter: Optional[FilterExpression]) -> List[Row]:
        if filter is None or (isinstance(filter, CompoundFilter) and filter.is_empty()):
            logger.debug(
                "Empty filter for %s; skipping Notion query",
                table.value,
                extra={"table": table.value, "step": "notion_query_skipped"},
            )
            return []

        url = f"{self.config.base_url}/databases/{self._database_id(table)}/query"
        payload: Dict[str, Any] = {
            "filter": filter.to_notion(),
            "page_size": self.config.page_size,
        }
        client = self._get_client()

        async for attempt in AsyncRetrying(
            wait=wait_exponential(multiplier=1, min=1, max=10),
            stop=stop_after_attempt(self.config.max_attempts),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                resp = await client.post(url, json=payload, headers=self._headers())

        if resp.status_code >= 400:
            logger.warning(
                "Notion query on %s returned %s: %s",
                table.value,
                resp.status_code,
                resp.text[:200],
                extra={"table": table.value, "status": resp.status_code},
            )
        resp.raise_for_status()

        body = resp.json()
        results = body.get("results") or []
        if body.get("has_more"):
            logger.info(
                "Notion query on %s has more than one page; returning the first %d rows",
                table.value,
                len(results),
                extra={"table": table.value, "count": len(results)},
            )

        logger.debug(
            "Notion query on %s returned %d rows",
            table.value,
            len(results),
            extra={"table": table.value, "count": len(results), "step": "notion_query"},
        )
        return results
