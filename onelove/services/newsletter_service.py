"""Weekly newsletter aggregation and drafting.

Collects the past window's new tracks, published albums and videos plus
the active subscriber list (four independent reads, fanned out and
joined), asks the AI gateway for a short digest, and stores the result as
an unpublished ``news`` row for an admin to review.  No email is sent.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import structlog

from onelove.interfaces.content_store import IContentStore
from onelove.interfaces.llm_provider import ILLMProvider
from onelove.models.media import AlbumRecord, MediaRecord, MediaType
from onelove.models.newsletter import (
    PREVIEW_LENGTH,
    DigestContent,
    NewsletterDraft,
    NewsletterResult,
)
from onelove.utils.concurrency import gather_named
from onelove.utils.errors import BackendError, ConfigurationError, UpstreamError

logger = structlog.get_logger(logger_name=__name__)

NO_SUBSCRIBERS_MESSAGE = "No active subscribers to send to"

SYSTEM_PROMPT = (
    "You are a newsletter writer for a reggae/dancehall artist. "
    "Write engaging, authentic content with Caribbean vibes."
)

_PROMPT_TEMPLATE = """Generate a weekly newsletter for "{artist}" music site.

New content this week:
- New Tracks: {tracks}
- New Albums/Mixtapes: {albums}
- New Videos: {videos}

Write a brief, engaging newsletter (200-300 words) that:
1. Opens with a warm reggae/dancehall greeting
2. Highlights the new content
3. Encourages readers to check out the music
4. Ends with a positive message about unity and music

Keep the tone authentic, warm, and Caribbean. Use "One Love" as the sign-off."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _join_titles(titles: list[str]) -> str:
    return ", ".join(titles) or "None"


def build_newsletter_prompt(
    artist: str,
    tracks: list[MediaRecord],
    albums: list[AlbumRecord],
    videos: list[MediaRecord],
) -> str:
    """Render the digest prompt.  Identical inputs give identical text."""
    return _PROMPT_TEMPLATE.format(
        artist=artist,
        tracks=_join_titles([t.title for t in tracks]),
        albums=_join_titles([f"{a.title} ({a.album_type.value})" for a in albums]),
        videos=_join_titles([v.title for v in videos]),
    )


def draft_title(when: datetime) -> str:
    """``Weekly Update - M/D/YYYY`` with no zero padding."""
    return f"Weekly Update - {when.month}/{when.day}/{when.year}"


class NewsletterAggregator:
    """Builds and stores the weekly newsletter draft."""

    def __init__(
        self,
        store: IContentStore,
        llm: ILLMProvider | None,
        artist_name: str,
        window_days: int = 7,
        track_limit: int = 5,
        album_limit: int = 3,
        video_limit: int = 3,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._llm = llm
        self._artist = artist_name
        self._window = timedelta(days=window_days)
        self._track_limit = track_limit
        self._album_limit = album_limit
        self._video_limit = video_limit
        self._clock = clock

    @property
    def fallback_content(self) -> str:
        return f"Check out new music from {self._artist}!"

    async def collect(self) -> DigestContent:
        """Fan out the four window reads and join them.

        Any failed read fails the whole collection with BackendError.
        """
        window_start = self._clock() - self._window
        results = await gather_named(
            {
                "tracks": self._store.recent_media(
                    MediaType.TRACK, window_start, self._track_limit
                ),
                "albums": self._store.recent_albums(window_start, self._album_limit),
                "videos": self._store.recent_media(
                    MediaType.VIDEO, window_start, self._video_limit
                ),
                "subscribers": self._store.active_subscribers(),
            },
            logger=logger,
        )
        return DigestContent(window_start=window_start, **results)

    async def send(self) -> NewsletterResult:
        """Generate the digest, store it as a draft and report counts."""
        if self._llm is None:
            raise ConfigurationError(
                message="AI_GATEWAY_API_KEY not configured",
                provider_name="ai-gateway",
            )

        digest = await self.collect()
        if not digest.subscribers:
            logger.info("newsletter_skipped", reason="no_active_subscribers")
            return NewsletterResult(message=NO_SUBSCRIBERS_MESSAGE)

        prompt = build_newsletter_prompt(
            self._artist, digest.tracks, digest.albums, digest.videos
        )
        try:
            content = await self._llm.complete(system_prompt=SYSTEM_PROMPT, user_prompt=prompt)
        except UpstreamError as exc:
            raise UpstreamError(
                message="Failed to generate newsletter content",
                provider_name=exc.provider_name,
                status_code=exc.status_code,
            ) from exc
        content = content or self.fallback_content

        draft = NewsletterDraft.from_content(draft_title(self._clock()), content)
        draft_stored = True
        try:
            await self._store.insert_news_draft(draft)
        except BackendError as exc:
            draft_stored = False
            logger.error("newsletter_draft_store_failed", error=str(exc))

        logger.info(
            "newsletter_generated",
            subscriber_count=len(digest.subscribers),
            new_tracks=len(digest.tracks),
            new_albums=len(digest.albums),
            new_videos=len(digest.videos),
            draft_stored=draft_stored,
        )
        return NewsletterResult(
            success=True,
            subscriber_count=len(digest.subscribers),
            content_preview=content[:PREVIEW_LENGTH],
            new_tracks=len(digest.tracks),
            new_albums=len(digest.albums),
            new_videos=len(digest.videos),
            draft_stored=draft_stored,
        )
