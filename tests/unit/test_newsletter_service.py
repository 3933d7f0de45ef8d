"""Unit tests for NewsletterAggregator."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from onelove.interfaces.content_store import IContentStore
from onelove.models.media import AlbumType, MediaType, SubscriberRecord
from onelove.services.newsletter_service import (
    NO_SUBSCRIBERS_MESSAGE,
    SYSTEM_PROMPT,
    NewsletterAggregator,
    build_newsletter_prompt,
    draft_title,
)
from onelove.utils.errors import BackendError, ConfigurationError, UpstreamError
from tests.conftest import FIXED_NOW, make_album, make_media

ARTIST = "The General Da Jamaican Boy"


def _aggregator(store, llm) -> NewsletterAggregator:
    return NewsletterAggregator(
        store=store,
        llm=llm,
        artist_name=ARTIST,
        clock=lambda: FIXED_NOW,
    )


async def _subscribe(store, *emails: str) -> None:
    for email in emails:
        await store.add_subscriber(email)


# ─── Prompt ────────────────────────────────────────────────────────


def test_prompt_lists_titles_and_album_types() -> None:
    prompt = build_newsletter_prompt(
        ARTIST,
        [make_media("t1", title="Rise Up"), make_media("t2", title="Yard Style")],
        [make_album("a1", title="Roots Journey", album_type=AlbumType.MIXTAPE)],
        [],
    )

    assert f'Generate a weekly newsletter for "{ARTIST}" music site.' in prompt
    assert "- New Tracks: Rise Up, Yard Style" in prompt
    assert "- New Albums/Mixtapes: Roots Journey (mixtape)" in prompt
    assert "- New Videos: None" in prompt
    assert '"One Love"' in prompt


def test_prompt_is_deterministic() -> None:
    tracks = [make_media("t1", title="Rise Up")]
    assert build_newsletter_prompt(ARTIST, tracks, [], []) == build_newsletter_prompt(
        ARTIST, tracks, [], []
    )


def test_draft_title_has_no_zero_padding() -> None:
    assert draft_title(FIXED_NOW) == "Weekly Update - 6/15/2025"


# ─── No subscribers ────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_no_subscribers_short_circuits(sqlite_store, mock_llm) -> None:
    await sqlite_store.upsert_media(make_media("t1"))

    result = await _aggregator(sqlite_store, mock_llm).send()

    assert result.message == NO_SUBSCRIBERS_MESSAGE
    assert result.success is False
    mock_llm.complete.assert_not_awaited()
    assert await sqlite_store.list_news() == []


@pytest.mark.asyncio
async def test_inactive_subscribers_do_not_count(sqlite_store, mock_llm) -> None:
    await _subscribe(sqlite_store, "gone@example.com")
    await sqlite_store.deactivate_subscriber("gone@example.com")

    result = await _aggregator(sqlite_store, mock_llm).send()

    assert result.message == NO_SUBSCRIBERS_MESSAGE
    mock_llm.complete.assert_not_awaited()


# ─── Full run ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_counts_match_window_contents(sqlite_store, mock_llm) -> None:
    await sqlite_store.upsert_media(make_media("t1", title="Rise Up"))
    await sqlite_store.upsert_media(make_media("t2", title="Yard Style", age=timedelta(days=2)))
    await sqlite_store.upsert_media(make_media("old", title="Old Tune", age=timedelta(days=30)))
    await sqlite_store.upsert_media(
        make_media("v1", title="Rise Up (Video)", media_type=MediaType.VIDEO)
    )
    await sqlite_store.upsert_album(make_album("a1", is_published=False))
    await _subscribe(sqlite_store, "a@example.com", "b@example.com", "c@example.com")
    mock_llm.complete.return_value = "Wah gwaan family! " * 20

    result = await _aggregator(sqlite_store, mock_llm).send()

    assert result.success is True
    assert result.subscriber_count == 3
    assert result.new_tracks == 2
    assert result.new_albums == 0
    assert result.new_videos == 1
    assert result.content_preview == ("Wah gwaan family! " * 20)[:200]
    assert result.draft_stored is True

    kwargs = mock_llm.complete.call_args.kwargs
    assert kwargs["system_prompt"] == SYSTEM_PROMPT
    assert "- New Tracks: Rise Up, Yard Style" in kwargs["user_prompt"]
    assert "Old Tune" not in kwargs["user_prompt"]


@pytest.mark.asyncio
async def test_limits_are_applied_newest_first(sqlite_store, mock_llm) -> None:
    for i in range(7):
        await sqlite_store.upsert_media(
            make_media(f"t{i}", title=f"Track {i}", age=timedelta(hours=i + 1))
        )
    await _subscribe(sqlite_store, "fan@example.com")
    mock_llm.complete.return_value = "Big up!"

    result = await _aggregator(sqlite_store, mock_llm).send()

    assert result.new_tracks == 5
    prompt = mock_llm.complete.call_args.kwargs["user_prompt"]
    assert "Track 0, Track 1, Track 2, Track 3, Track 4" in prompt


@pytest.mark.asyncio
async def test_draft_is_stored_unpublished(sqlite_store, mock_llm) -> None:
    await _subscribe(sqlite_store, "fan@example.com")
    content = "x" * 400
    mock_llm.complete.return_value = content

    await _aggregator(sqlite_store, mock_llm).send()

    rows = await sqlite_store.list_news()
    assert len(rows) == 1
    assert rows[0]["title"] == "Weekly Update - 6/15/2025"
    assert rows[0]["content"] == content
    assert rows[0]["excerpt"] == "x" * 150 + "..."
    assert rows[0]["category"] == "Newsletter"
    assert rows[0]["is_published"] == 0


@pytest.mark.asyncio
async def test_empty_ai_reply_uses_fallback(sqlite_store, mock_llm) -> None:
    await _subscribe(sqlite_store, "fan@example.com")
    mock_llm.complete.return_value = ""

    result = await _aggregator(sqlite_store, mock_llm).send()

    assert result.content_preview == f"Check out new music from {ARTIST}!"


@pytest.mark.asyncio
async def test_draft_insert_failure_still_returns(mock_llm) -> None:
    store = MagicMock(spec=IContentStore)
    store.recent_media = AsyncMock(return_value=[])
    store.recent_albums = AsyncMock(return_value=[])
    store.active_subscribers = AsyncMock(
        return_value=[SubscriberRecord(email="fan@example.com")]
    )
    store.insert_news_draft = AsyncMock(side_effect=BackendError(message="insert failed"))
    mock_llm.complete.return_value = "One Love"

    result = await _aggregator(store, mock_llm).send()

    assert result.success is True
    assert result.subscriber_count == 1
    assert result.draft_stored is False


# ─── Failures ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_ai_failure_fails_request_without_draft(sqlite_store, mock_llm) -> None:
    await _subscribe(sqlite_store, "fan@example.com")
    mock_llm.complete.side_effect = UpstreamError(
        message="AI gateway returned HTTP 500", provider_name="ai-gateway", status_code=500
    )

    with pytest.raises(UpstreamError) as exc_info:
        await _aggregator(sqlite_store, mock_llm).send()

    assert exc_info.value.message == "Failed to generate newsletter content"
    assert await sqlite_store.list_news() == []


@pytest.mark.asyncio
async def test_backend_read_failure_is_fatal(mock_llm) -> None:
    store = MagicMock(spec=IContentStore)
    store.recent_media = AsyncMock(return_value=[])
    store.recent_albums = AsyncMock(side_effect=BackendError(message="albums down"))
    store.active_subscribers = AsyncMock(return_value=[])

    with pytest.raises(BackendError):
        await _aggregator(store, mock_llm).send()
    mock_llm.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_ai_credential(sqlite_store) -> None:
    with pytest.raises(ConfigurationError):
        await _aggregator(sqlite_store, None).send()
