"""Catalogue domain models -- media, albums, subscribers, favorites.

Layer: Models (bottom of the dependency graph, no imports from upper layers).

All models are frozen Pydantic v2 models.  Field changes go through
``model_copy(update={...})``; the only fields the service layer ever
changes are ``is_explicit`` (False -> True only) and ``play_count``
(incremented only).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MediaType(str, Enum):
    """Kind of playable media row."""

    TRACK = "track"
    VIDEO = "video"


class AlbumType(str, Enum):
    """Release format of an album row."""

    ALBUM = "album"
    EP = "ep"
    SINGLE = "single"
    MIXTAPE = "mixtape"


class MediaRecord(BaseModel):
    """A track or video in the catalogue."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Backend identifier.")
    title: str
    description: str | None = None
    media_type: MediaType = MediaType.TRACK
    is_explicit: bool = Field(
        default=False,
        description="Set True by the content scanner; never cleared.",
    )
    play_count: int = Field(default=0, ge=0)
    created_at: datetime
    url: str | None = None
    thumbnail_url: str | None = None
    album_id: str | None = None

    def scan_text(self) -> str:
        """Return the lower-cased ``title + " " + description`` scan input."""
        return build_scan_text(self.title, self.description)


def build_scan_text(title: str, description: str | None) -> str:
    """Lower-cased concatenation of a title and optional description.

    A missing description still contributes the separating space, so
    ``("Hello", None)`` scans as ``"hello "``.
    """
    return f"{title} {description or ''}".lower()


class AlbumRecord(BaseModel):
    """An album, EP, single or mixtape release."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    album_type: AlbumType = AlbumType.ALBUM
    is_published: bool = False
    created_at: datetime
    cover_url: str | None = None


class SubscriberRecord(BaseModel):
    """A newsletter subscriber row."""

    model_config = ConfigDict(frozen=True)

    email: str
    is_active: bool = True


class FavoriteRecord(BaseModel):
    """A user's favourite track (unique per user/track pair)."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    track_id: str
