"""
Tests for connectors/notion.py

The connector runs against httpx.MockTransport; no network access.
"""
import asyncio
import json

import httpx
import pytest

from hypernetwork.core.config import Settings
from hypernetwork.services.connectors import NotionConnector, NotionStoreConfig, Table, get_connector
from hypernetwork.services.filters import CompoundFilter, any_of, from_programs
from tests.fixtures.notion_fixtures import student_row


def _config(**overrides):
    defaults = dict(
        api_key="secret_abc",
        databases={
            Table.ROSTER: "roster-db",
            Table.HARD_SKILLS: "skills-db",
            Table.CONTACTS: "contacts-db",
        },
        base_url="https://notion.test/v1",
        max_attempts=1,
    )
    defaults.update(overrides)
    return NotionStoreConfig(**defaults)


def _query(handler, table, expr, **config_overrides):
    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            connector = NotionConnector(_config(**config_overrides), client=client)
            return await connector.query(table, expr)

    return asyncio.run(_go())


class TestNotionQuery:
    """Tests for the database query request/response handling."""

    def test_posts_filter_to_database_query_endpoint(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": [student_row("42")], "has_more": False})

        rows = _query(handler, Table.ROSTER, any_of(from_programs(["Design"])))

        assert len(rows) == 1
        (request,) = seen
        assert request.method == "POST"
        assert str(request.url) == "https://notion.test/v1/databases/roster-db/query"
        assert request.headers["Authorization"] == "Bearer secret_abc"
        assert request.headers["Notion-Version"] == "2022-06-28"
        assert json.loads(request.content) == {
            "filter": {"property": "Program", "select": {"equals": "Design"}},
            "page_size": 100,
        }

    def test_each_table_uses_its_own_database(self):
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(request.url.path)
            return httpx.Response(200, json={"results": []})

        expr = any_of(from_programs(["Design"]))
        _query(handler, Table.HARD_SKILLS, expr)
        _query(handler, Table.CONTACTS, expr)
        assert urls == ["/v1/databases/skills-db/query", "/v1/databases/contacts-db/query"]

    @pytest.mark.parametrize("expr", [None, CompoundFilter("or", [])])
    def test_empty_filter_never_hits_the_network(self, expr):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("Notion must not be called for an empty filter")

        assert _query(handler, Table.ROSTER, expr) == []

    def test_only_first_page_is_returned(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"results": [student_row("1")], "has_more": True, "next_cursor": "abc"},
            )

        rows = _query(handler, Table.ROSTER, any_of(from_programs(["Design"])))
        assert len(rows) == 1

    def test_missing_results_key_yields_empty_list(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"object": "list"})

        assert _query(handler, Table.ROSTER, any_of(from_programs(["Design"]))) == []


class TestNotionErrors:
    """Status errors propagate unmodified; only transport errors are retried."""

    @pytest.mark.parametrize("status", [400, 401, 429, 500])
    def test_status_errors_raise_without_retry(self, status):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status, json={"object": "error", "code": "nope"})

        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            _query(handler, Table.ROSTER, any_of(from_programs(["Design"])), max_attempts=3)

        assert excinfo.value.response.status_code == status
        assert len(calls) == 1

    def test_transport_error_reraised_when_attempts_exhausted(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.ConnectError, match="connection refused"):
            _query(handler, Table.ROSTER, any_of(from_programs(["Design"])))

    def test_transport_error_is_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("flaky", request=request)
            return httpx.Response(200, json={"results": [student_row("42")]})

        rows = _query(handler, Table.ROSTER, any_of(from_programs(["Design"])), max_attempts=2)
        assert len(rows) == 1
        assert len(calls) == 2


class TestNotionStoreConfig:
    """Tests for building the gateway configuration from settings."""

    def test_from_settings(self):
        settings = Settings(
            NOTION_API_KEY="secret_x",
            NOTION_BASE_URL="https://api.notion.com/v1/",
            HYPER_NETWORK_DATABASE_ID="r",
            HYPER_NETWORK_HARD_SKILLS_DATABASE_ID="s",
            HYPER_NETWORK_CONTACTS_DATABASE_ID="c",
            NOTION_MAX_ATTEMPTS=0,
        )
        config = NotionStoreConfig.from_settings(settings)

        assert config.api_key == "secret_x"
        assert config.base_url == "https://api.notion.com/v1"
        assert config.databases == {
            Table.ROSTER: "r",
            Table.HARD_SKILLS: "s",
            Table.CONTACTS: "c",
        }
        assert config.max_attempts == 1

    def test_get_connector_uses_explicit_settings(self):
        settings = Settings(
            NOTION_API_KEY="secret_y",
            HYPER_NETWORK_DATABASE_ID="r",
            HYPER_NETWORK_HARD_SKILLS_DATABASE_ID="s",
            HYPER_NETWORK_CONTACTS_DATABASE_ID="c",
        )
        connector = get_connector(settings)
        assert connector.config.api_key == "secret_y"

    def test_unconfigured_table_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"results": []})

        with pytest.raises(KeyError):
            _query(handler, Table.CONTACTS, any_of(from_programs(["Design"])),
                   databases={Table.ROSTER: "roster-db"})
