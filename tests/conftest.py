"""Shared pytest fixtures for the One Love test suite."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from onelove.interfaces.llm_provider import ILLMProvider
from onelove.models.media import AlbumRecord, AlbumType, MediaRecord, MediaType
from onelove.providers.content_store.sqlite_provider import SQLiteContentStore

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_media(
    media_id: str = "t1",
    title: str = "One Love Riddim",
    description: str | None = None,
    media_type: MediaType = MediaType.TRACK,
    is_explicit: bool = False,
    play_count: int = 0,
    age: timedelta = timedelta(days=1),
) -> MediaRecord:
    return MediaRecord(
        id=media_id,
        title=title,
        description=description,
        media_type=media_type,
        is_explicit=is_explicit,
        play_count=play_count,
        created_at=FIXED_NOW - age,
    )


def make_album(
    album_id: str = "a1",
    title: str = "Roots Journey",
    album_type: AlbumType = AlbumType.ALBUM,
    is_published: bool = True,
    age: timedelta = timedelta(days=1),
) -> AlbumRecord:
    return AlbumRecord(
        id=album_id,
        title=title,
        album_type=album_type,
        is_published=is_published,
        created_at=FIXED_NOW - age,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
async def sqlite_store():
    """A SQLiteContentStore on a temporary file."""
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    store = SQLiteContentStore(db_path=tmp.name)
    await store.initialize()
    yield store
    await store.close()
    os.unlink(tmp.name)


@pytest.fixture
def mock_llm() -> MagicMock:
    """ILLMProvider mock whose ``complete`` is an AsyncMock."""
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value="")
    llm.get_provider_name.return_value = "mock-llm"
    return llm
