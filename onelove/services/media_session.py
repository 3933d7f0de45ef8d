"""Lock-screen / OS media-session metadata for the player.

The player sends the current track; this module returns the metadata
block, playback state and supported transport actions it should register.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ARTWORK_SIZES = ("96x96", "128x128", "192x192", "256x256", "384x384", "512x512")
ARTWORK_MIME_TYPE = "image/jpeg"
DEFAULT_ALBUM = "T.G.D.J.B Music"
TRANSPORT_ACTIONS = ("play", "pause", "nexttrack", "previoustrack", "seekto")


class Artwork(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str
    sizes: str
    type: str = ARTWORK_MIME_TYPE


class MediaMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    artist: str
    album: str = DEFAULT_ALBUM
    artwork: list[Artwork] = Field(default_factory=list)


def build_media_metadata(
    title: str,
    artist: str,
    album: str | None = None,
    artwork: str | None = None,
) -> MediaMetadata:
    """One artwork entry per standard size, all pointing at ``artwork``."""
    images = [Artwork(src=artwork, sizes=size) for size in ARTWORK_SIZES] if artwork else []
    return MediaMetadata(
        title=title,
        artist=artist,
        album=album or DEFAULT_ALBUM,
        artwork=images,
    )


def playback_state(is_playing: bool) -> str:
    return "playing" if is_playing else "paused"
