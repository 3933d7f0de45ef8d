"""Unit tests for SupabaseContentStore against a stubbed supabase client."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from postgrest.exceptions import APIError

from onelove.models.media import MediaType
from onelove.models.newsletter import NewsletterDraft
from onelove.providers.content_store.supabase_provider import SupabaseContentStore
from onelove.utils.errors import BackendError, NotFoundError
from tests.conftest import FIXED_NOW

SUPABASE_URL = "https://demo.supabase.co"
SERVICE_KEY = "service-role-key"

_TRACK_ROW = {
    "id": "t1",
    "title": "Rise Up",
    "description": None,
    "media_type": "track",
    "is_explicit": False,
    "play_count": None,
    "created_at": "2025-06-14T12:00:00+00:00",
    "url": None,
    "thumbnail_url": None,
    "album_id": None,
}


def _api_error(code: str, message: str) -> APIError:
    return APIError({"code": code, "message": message, "hint": None, "details": None})


class _Query:
    """Records the builder chain and answers ``execute`` with a fixed outcome."""

    def __init__(self, table: str, outcome: Any) -> None:
        self.table = table
        self.calls: list[tuple[str, tuple, dict]] = []
        self._outcome = outcome

    def __getattr__(self, name: str):
        def _chain(*args: Any, **kwargs: Any) -> _Query:
            self.calls.append((name, args, kwargs))
            return self

        return _chain

    def args(self, name: str) -> tuple:
        return next(args for called, args, _ in self.calls if called == name)

    def all_args(self, name: str) -> list[tuple]:
        return [args for called, args, _ in self.calls if called == name]

    async def execute(self) -> SimpleNamespace:
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return SimpleNamespace(data=self._outcome)


class _Client:
    """Hands out one ``_Query`` per ``table()`` call, in order."""

    def __init__(self, *outcomes: Any) -> None:
        self._outcomes = list(outcomes)
        self.queries: list[_Query] = []

    def table(self, name: str) -> _Query:
        query = _Query(name, self._outcomes.pop(0))
        self.queries.append(query)
        return query


def _store(*outcomes: Any) -> tuple[SupabaseContentStore, _Client]:
    client = _Client(*outcomes)
    return SupabaseContentStore(SUPABASE_URL, SERVICE_KEY, client=client), client


@pytest.mark.asyncio
async def test_initialize_creates_client_with_service_key() -> None:
    client = _Client([])
    with patch(
        "onelove.providers.content_store.supabase_provider.acreate_client",
        new=AsyncMock(return_value=client),
    ) as create:
        store = SupabaseContentStore(SUPABASE_URL, SERVICE_KEY)
        await store.initialize()

    create.assert_awaited_once_with(SUPABASE_URL, SERVICE_KEY)
    assert await store.list_favorites("u1") == []


@pytest.mark.asyncio
async def test_query_before_initialize_raises_backend_error() -> None:
    store = SupabaseContentStore(SUPABASE_URL, SERVICE_KEY)

    with pytest.raises(BackendError):
        await store.get_media("t1")


@pytest.mark.asyncio
async def test_list_media_filters_by_type_and_parses_rows() -> None:
    store, client = _store([_TRACK_ROW])

    records = await store.list_media([MediaType.TRACK])

    query = client.queries[0]
    assert query.table == "media"
    assert query.args("in_") == ("media_type", ["track"])
    assert records[0].id == "t1"
    assert records[0].play_count == 0
    assert records[0].media_type is MediaType.TRACK


@pytest.mark.asyncio
async def test_get_media_missing_returns_none() -> None:
    store, client = _store([])

    assert await store.get_media("zzz") is None
    assert client.queries[0].args("eq") == ("id", "zzz")


@pytest.mark.asyncio
async def test_mark_explicit_updates_true_only() -> None:
    store, client = _store([{"id": "t1"}])

    await store.mark_explicit("t1")

    query = client.queries[0]
    assert query.args("update") == ({"is_explicit": True},)
    assert query.args("eq") == ("id", "t1")


@pytest.mark.asyncio
async def test_recent_media_filters() -> None:
    store, client = _store([_TRACK_ROW])

    await store.recent_media(MediaType.VIDEO, FIXED_NOW - timedelta(days=7), limit=3)

    query = client.queries[0]
    assert query.args("eq") == ("media_type", "video")
    assert query.args("gte") == ("created_at", "2025-06-08T12:00:00.000000+00:00")
    assert query.calls[3] == ("order", ("created_at",), {"desc": True})
    assert query.args("limit") == (3,)


@pytest.mark.asyncio
async def test_recent_albums_only_published() -> None:
    row = {
        "id": "a1",
        "title": "Roots Journey",
        "album_type": "ep",
        "is_published": True,
        "created_at": "2025-06-14T12:00:00+00:00",
        "cover_url": None,
    }
    store, client = _store([row])

    albums = await store.recent_albums(FIXED_NOW - timedelta(days=7), limit=3)

    assert client.queries[0].table == "albums"
    assert client.queries[0].args("eq") == ("is_published", "true")
    assert albums[0].album_type.value == "ep"


@pytest.mark.asyncio
async def test_increment_play_count_reads_then_writes() -> None:
    store, client = _store([{"play_count": 9}], [{"id": "t1", "play_count": 10}])

    assert await store.increment_play_count("t1") == 10
    assert client.queries[1].args("update") == ({"play_count": 10},)


@pytest.mark.asyncio
async def test_increment_play_count_missing_record() -> None:
    store, _ = _store([])

    with pytest.raises(NotFoundError):
        await store.increment_play_count("t1")


@pytest.mark.asyncio
async def test_duplicate_subscriber_returns_false() -> None:
    store, _ = _store(_api_error("23505", "duplicate key value"))

    assert await store.add_subscriber("fan@example.com") is False


@pytest.mark.asyncio
async def test_new_subscriber_returns_true() -> None:
    store, client = _store([{"email": "fan@example.com", "is_active": True}])

    assert await store.add_subscriber("fan@example.com") is True
    assert client.queries[0].table == "newsletter_subscribers"
    assert client.queries[0].args("insert") == ({"email": "fan@example.com"},)


@pytest.mark.asyncio
async def test_duplicate_favorite_returns_false() -> None:
    store, _ = _store(_api_error("23505", "duplicate key value"))

    assert await store.add_favorite("u1", "t1") is False


@pytest.mark.asyncio
async def test_insert_news_draft_returns_row() -> None:
    store, client = _store([{"id": 7, "title": "Weekly Update - 6/15/2025"}])

    row = await store.insert_news_draft(
        NewsletterDraft.from_content("Weekly Update - 6/15/2025", "Hi")
    )

    assert row["id"] == 7
    (body,) = client.queries[0].args("insert")
    assert body["is_published"] is False
    assert body["category"] == "Newsletter"


@pytest.mark.asyncio
async def test_remove_favorite_reports_deleted_rows() -> None:
    store, client = _store([{"track_id": "t1"}], [])

    assert await store.remove_favorite("u1", "t1") is True
    assert await store.remove_favorite("u1", "t1") is False
    assert client.queries[0].all_args("eq") == [("user_id", "u1"), ("track_id", "t1")]


@pytest.mark.asyncio
async def test_api_error_raises_backend_error() -> None:
    store, _ = _store(_api_error("XX000", "db down"))

    with pytest.raises(BackendError) as exc_info:
        await store.active_subscribers()

    assert "db down" in exc_info.value.message
    assert exc_info.value.provider_name == "supabase"


@pytest.mark.asyncio
async def test_unique_violation_outside_insert_is_still_an_error() -> None:
    store, _ = _store(_api_error("23505", "duplicate key value"))

    with pytest.raises(BackendError):
        await store.mark_explicit("t1")


@pytest.mark.asyncio
async def test_transport_error_raises_backend_error() -> None:
    store, _ = _store(httpx.ConnectError("connection refused"))

    with pytest.raises(BackendError):
        await store.list_favorites("u1")
