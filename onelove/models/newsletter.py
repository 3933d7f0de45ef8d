"""Newsletter digest and draft models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from onelove.models.media import AlbumRecord, MediaRecord, SubscriberRecord

NEWSLETTER_CATEGORY = "Newsletter"
EXCERPT_LENGTH = 150
PREVIEW_LENGTH = 200


class DigestContent(BaseModel):
    """Everything collected for one digest window."""

    model_config = ConfigDict(frozen=True)

    window_start: datetime
    tracks: list[MediaRecord] = Field(default_factory=list)
    albums: list[AlbumRecord] = Field(default_factory=list)
    videos: list[MediaRecord] = Field(default_factory=list)
    subscribers: list[SubscriberRecord] = Field(default_factory=list)


class NewsletterDraft(BaseModel):
    """A generated newsletter stored as an unpublished news article."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    excerpt: str
    category: str = NEWSLETTER_CATEGORY
    is_published: bool = False

    @classmethod
    def from_content(cls, title: str, content: str) -> NewsletterDraft:
        """Build a draft, cutting the excerpt at a hard character boundary."""
        return cls(
            title=title,
            content=content,
            excerpt=make_excerpt(content),
        )


def make_excerpt(content: str) -> str:
    """First 150 characters plus an ellipsis, even mid-word."""
    return content[:EXCERPT_LENGTH] + "..."


class NewsletterResult(BaseModel):
    """Outcome of one newsletter run.

    ``message`` is set (and every other field left at its default) when
    the run short-circuited because nobody is subscribed.
    """

    model_config = ConfigDict(frozen=True)

    message: str | None = None
    success: bool = False
    subscriber_count: int = 0
    content_preview: str = ""
    new_tracks: int = 0
    new_albums: int = 0
    new_videos: int = 0
    draft_stored: bool = False
