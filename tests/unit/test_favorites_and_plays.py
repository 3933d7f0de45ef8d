"""Unit tests for FavoritesService and play-count tracking."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from onelove.interfaces.content_store import IContentStore
from onelove.services.favorites_service import FavoritesService
from onelove.services.play_tracker import PlayCountTracker, PlaySessionRegistry
from onelove.utils.errors import AuthRequiredError, BackendError
from tests.conftest import make_media

# ─── Favourites ────────────────────────────────────────────────────


@pytest.fixture
def favorites(sqlite_store) -> FavoritesService:
    return FavoritesService(store=sqlite_store)


@pytest.mark.asyncio
async def test_toggle_requires_user(favorites: FavoritesService) -> None:
    with pytest.raises(AuthRequiredError) as exc_info:
        await favorites.toggle(None, "t1")
    assert exc_info.value.message == "Please sign in to add favorites"
    assert exc_info.value.http_status == 401


@pytest.mark.asyncio
async def test_toggle_adds_then_removes(favorites: FavoritesService) -> None:
    added = await favorites.toggle("u1", "t1", "Rise Up")
    assert added.is_favorite is True
    assert added.changed is True
    assert added.message == 'Added "Rise Up" to favorites'
    assert await favorites.list_favorites("u1") == {"t1"}

    removed = await favorites.toggle("u1", "t1")
    assert removed.is_favorite is False
    assert removed.message == "Removed from favorites"
    assert await favorites.list_favorites("u1") == set()


@pytest.mark.asyncio
async def test_add_duplicate_returns_false(favorites: FavoritesService) -> None:
    assert await favorites.add_favorite("u1", "t1") is True
    assert await favorites.add_favorite("u1", "t1") is False


@pytest.mark.asyncio
async def test_favorites_are_per_user(favorites: FavoritesService) -> None:
    await favorites.add_favorite("u1", "t1")
    assert await favorites.is_favorite("u1", "t1") is True
    assert await favorites.is_favorite("u2", "t1") is False


# ─── Play counting ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_play_recorded_once_after_threshold(sqlite_store) -> None:
    await sqlite_store.upsert_media(make_media("t1", play_count=3))
    tracker = PlayCountTracker(sqlite_store)
    tracker.start_tracking("t1")

    assert await tracker.check_and_record("t1", 12.0) is False
    assert await tracker.check_and_record("t1", 30.0) is True
    assert await tracker.check_and_record("t1", 45.0) is False

    assert (await sqlite_store.get_media("t1")).play_count == 4
    assert tracker.tracked == frozenset({"t1"})


@pytest.mark.asyncio
async def test_reset_session_allows_new_count(sqlite_store) -> None:
    await sqlite_store.upsert_media(make_media("t1"))
    tracker = PlayCountTracker(sqlite_store)

    await tracker.check_and_record("t1", 31)
    tracker.reset_session()
    await tracker.check_and_record("t1", 31)

    assert (await sqlite_store.get_media("t1")).play_count == 2


@pytest.mark.asyncio
async def test_backend_failure_is_swallowed() -> None:
    store = MagicMock(spec=IContentStore)
    store.increment_play_count = AsyncMock(side_effect=BackendError(message="down"))
    tracker = PlayCountTracker(store)

    assert await tracker.check_and_record("t1", 40) is True
    assert await tracker.check_and_record("t1", 50) is False
    store.increment_play_count.assert_awaited_once_with("t1")


@pytest.mark.asyncio
async def test_empty_track_id_is_ignored() -> None:
    store = MagicMock(spec=IContentStore)
    store.increment_play_count = AsyncMock()
    tracker = PlayCountTracker(store)

    assert await tracker.check_and_record("", 99) is False
    store.increment_play_count.assert_not_awaited()


@pytest.mark.asyncio
async def test_registry_keeps_sessions_separate(sqlite_store) -> None:
    await sqlite_store.upsert_media(make_media("t1"))
    registry = PlaySessionRegistry(sqlite_store, threshold_seconds=10)

    assert await registry.get("s1").check_and_record("t1", 10) is True
    assert await registry.get("s2").check_and_record("t1", 10) is True
    assert await registry.get("s1").check_and_record("t1", 20) is False
    assert len(registry) == 2

    registry.reset("s1")
    assert len(registry) == 1
    assert (await sqlite_store.get_media("t1")).play_count == 2


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_registry_evicts_least_recently_used() -> None:
    registry = PlaySessionRegistry(MagicMock(spec=IContentStore), max_sessions=3)

    first = registry.get("s1")
    registry.get("s2")
    registry.get("s3")
    assert registry.get("s1") is first  # s1 is now most recent

    registry.get("s4")

    assert len(registry) == 3
    assert "s2" not in registry
    assert "s1" in registry


def test_registry_stays_bounded_under_many_sessions() -> None:
    registry = PlaySessionRegistry(MagicMock(spec=IContentStore), max_sessions=100)

    for i in range(10_000):
        registry.get(f"s{i}")

    assert len(registry) == 100
    assert "s9999" in registry
    assert "s0" not in registry


def test_registry_drops_idle_sessions() -> None:
    clock = _Clock()
    registry = PlaySessionRegistry(
        MagicMock(spec=IContentStore), idle_ttl_seconds=60, clock=clock
    )

    stale = registry.get("stale")
    clock.now = 30.0
    registry.get("active")
    clock.now = 61.0
    registry.get("active")

    assert "stale" not in registry
    assert "active" in registry
    assert registry.get("stale") is not stale
