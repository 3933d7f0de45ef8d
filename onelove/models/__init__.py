"""Domain models for One Love (frozen Pydantic v2)."""

from onelove.models.media import (
    AlbumRecord,
    AlbumType,
    FavoriteRecord,
    MediaRecord,
    MediaType,
    SubscriberRecord,
    build_scan_text,
)
from onelove.models.moderation import ScanAllResult, ScannedItem, ScanSingleResult, Verdict
from onelove.models.news import NewsArticle, NewsCategory
from onelove.models.newsletter import (
    DigestContent,
    NewsletterDraft,
    NewsletterResult,
    make_excerpt,
)

__all__ = [
    "AlbumRecord",
    "AlbumType",
    "DigestContent",
    "FavoriteRecord",
    "MediaRecord",
    "MediaType",
    "NewsArticle",
    "NewsCategory",
    "NewsletterDraft",
    "NewsletterResult",
    "ScanAllResult",
    "ScanSingleResult",
    "ScannedItem",
    "SubscriberRecord",
    "Verdict",
    "build_scan_text",
    "make_excerpt",
]
