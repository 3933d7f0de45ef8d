"""Share payloads and social share URLs for the site and its tracks."""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from onelove.utils.errors import ValidationError

SOCIAL_PLATFORMS = ("twitter", "facebook", "whatsapp", "telegram")

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


class SharePayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    text: str
    url: str


class ShareLinkBuilder:
    """Builds share payloads with site defaults filled in."""

    def __init__(self, site_url: str, artist_name: str) -> None:
        self._origin = site_url.rstrip("/")
        self._artist = artist_name

    @property
    def default_title(self) -> str:
        return f"{self._artist} - Official Music"

    @property
    def default_text(self) -> str:
        return f"Check out {self._artist} - Pure Reggae vibes from Jamaica! 🇯🇲🎶"

    def share_payload(
        self,
        title: str | None = None,
        text: str | None = None,
        url: str | None = None,
    ) -> SharePayload:
        return SharePayload(
            title=title or self.default_title,
            text=text or self.default_text,
            url=url or self._origin,
        )

    def track_url(self, track_id: str) -> str:
        return f"{self._origin}/music?track={track_id}"

    def track_share(self, track_title: str, track_id: str) -> SharePayload:
        return self.share_payload(
            title=f"{track_title} - {self._artist}",
            text=f'Listen to "{track_title}" by {self._artist} 🎶',
            url=self.track_url(track_id),
        )

    def social_url(
        self,
        platform: str,
        url: str | None = None,
        text: str | None = None,
    ) -> str:
        """Return the share-intent URL for one of :data:`SOCIAL_PLATFORMS`."""
        u = encode_uri_component(url or self._origin)
        t = encode_uri_component(text or self.default_text)

        if platform == "twitter":
            return f"https://twitter.com/intent/tweet?text={t}&url={u}"
        if platform == "facebook":
            return f"https://www.facebook.com/sharer/sharer.php?u={u}"
        if platform == "whatsapp":
            return f"https://wa.me/?text={t}%20{u}"
        if platform == "telegram":
            return f"https://t.me/share/url?url={u}&text={t}"
        raise ValidationError(
            message=f"Unsupported platform '{platform}'; expected one of {', '.join(SOCIAL_PLATFORMS)}"
        )
