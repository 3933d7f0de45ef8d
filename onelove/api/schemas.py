"""Pydantic request/response schemas for the One Love API.

The function endpoints speak camelCase JSON (``markedExplicit``,
``subscriberCount``), so every schema here derives from
:class:`CamelModel`: Python code uses snake_case attribute names and the
wire uses the camelCase alias.  Incoming bodies accept either spelling.

Convention: request schemas end with "Request", response schemas end
with "Response".
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with camelCase keys in JSON mode."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


class ErrorResponse(CamelModel):
    """Body of every error reply."""

    error: str


# ---------------------------------------------------------------------------
# POST /filter-explicit-content
# ---------------------------------------------------------------------------


class FilterContentRequest(CamelModel):
    """Action dispatch body.  Unknown extra keys are ignored."""

    action: str | None = None
    track_id: str | None = None
    text: str | None = None


class ScannedItemResponse(CamelModel):
    id: str
    title: str
    marked: bool = True


class ScanAllResponse(CamelModel):
    success: bool
    scanned: int
    marked_explicit: int
    results: list[ScannedItemResponse] = Field(default_factory=list)


class ScanSingleResponse(CamelModel):
    id: str
    title: str
    is_explicit: bool
    updated: bool


class VerdictResponse(CamelModel):
    is_explicit: bool
    reason: str


# ---------------------------------------------------------------------------
# POST /send-newsletter
# ---------------------------------------------------------------------------


class NewsletterSkippedResponse(CamelModel):
    message: str


class NewsletterSentResponse(CamelModel):
    success: bool
    subscriber_count: int
    content_preview: str
    new_tracks: int
    new_albums: int
    new_videos: int


# ---------------------------------------------------------------------------
# POST /generate-news
# ---------------------------------------------------------------------------


class GenerateNewsRequest(CamelModel):
    topic: Any = None


class ArticleResponse(CamelModel):
    title: str
    excerpt: str
    content: str
    category: str


class GenerateNewsResponse(CamelModel):
    success: bool
    article: ArticleResponse | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# /api/v1 helpers
# ---------------------------------------------------------------------------


class HealthResponse(CamelModel):
    status: str
    version: str
    backend: str
    ai_enabled: bool


class FavoriteRequest(CamelModel):
    user_id: str | None = None
    track_id: str = Field(min_length=1)
    title: str | None = None


class FavoritesResponse(CamelModel):
    user_id: str
    track_ids: list[str]


class FavoriteToggleResponse(CamelModel):
    track_id: str
    is_favorite: bool
    changed: bool
    message: str


class PlaySessionRequest(CamelModel):
    session_id: str = Field(min_length=1)
    track_id: str | None = None


class PlayProgressRequest(CamelModel):
    session_id: str = Field(min_length=1)
    track_id: str = Field(min_length=1)
    current_time: float = Field(ge=0.0, description="Playback position in seconds")


class PlayProgressResponse(CamelModel):
    track_id: str
    recorded: bool


class ShareResponse(CamelModel):
    title: str
    text: str
    url: str
    social_urls: dict[str, str]


class MediaSessionRequest(CamelModel):
    title: str
    artist: str
    album: str | None = None
    artwork: str | None = None
    is_playing: bool = False


class ArtworkResponse(CamelModel):
    src: str
    sizes: str
    type: str


class MediaMetadataResponse(CamelModel):
    title: str
    artist: str
    album: str
    artwork: list[ArtworkResponse]


class MediaSessionResponse(CamelModel):
    metadata: MediaMetadataResponse
    playback_state: str
    actions: list[str]


class SubscribeRequest(CamelModel):
    email: Any = None


class SubscribeResponse(CamelModel):
    subscribed: bool
    message: str
