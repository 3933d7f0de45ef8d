"""Abstract base class for the managed content backend.

``IContentStore`` covers every read and write the service layer makes
against the platform database: media and album catalogue, newsletter
subscribers, news drafts, play counts and favourites.

Concrete implementations (onelove/providers/content_store/):
    SupabaseContentStore -- supabase async client, service-role credential
    SQLiteContentStore   -- local aiosqlite file for development and tests

All operations are async.  Any read or write failure is raised as
:class:`onelove.utils.errors.BackendError`; implementations never return
partial results in place of an error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from onelove.models.media import AlbumRecord, MediaRecord, MediaType, SubscriberRecord
from onelove.models.newsletter import NewsletterDraft


class IContentStore(ABC):
    """Contract for platform database access."""

    # ── Lifecycle ──────────────────────────────────────────────────────

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create tables, open pools).  Idempotent."""

    @abstractmethod
    async def close(self) -> None:
        """Release any held connections."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this backend."""

    # ── Media catalogue ────────────────────────────────────────────────

    @abstractmethod
    async def list_media(self, media_types: Sequence[MediaType]) -> list[MediaRecord]:
        """Return every media record whose type is in ``media_types``."""

    @abstractmethod
    async def get_media(self, media_id: str) -> MediaRecord | None:
        """Return one media record, or ``None`` if it does not exist."""

    @abstractmethod
    async def mark_explicit(self, media_id: str) -> None:
        """Set ``is_explicit = true`` on one record.

        This is the only write the backend exposes for the flag; nothing
        sets it back to false.
        """

    @abstractmethod
    async def recent_media(
        self,
        media_type: MediaType,
        since: datetime,
        limit: int,
    ) -> list[MediaRecord]:
        """Return up to ``limit`` records created at or after ``since``, newest first."""

    @abstractmethod
    async def recent_albums(self, since: datetime, limit: int) -> list[AlbumRecord]:
        """Return up to ``limit`` published albums created at or after ``since``, newest first."""

    @abstractmethod
    async def increment_play_count(self, media_id: str) -> int:
        """Add one to ``play_count`` and return the new value."""

    # ── Newsletter ─────────────────────────────────────────────────────

    @abstractmethod
    async def active_subscribers(self) -> list[SubscriberRecord]:
        """Return all subscribers with ``is_active = true``."""

    @abstractmethod
    async def add_subscriber(self, email: str) -> bool:
        """Insert an active subscriber.  Return False if the email exists."""

    @abstractmethod
    async def insert_news_draft(self, draft: NewsletterDraft) -> dict[str, Any]:
        """Insert an unpublished news row and return the stored row."""

    # ── Favourites ─────────────────────────────────────────────────────

    @abstractmethod
    async def list_favorites(self, user_id: str) -> list[str]:
        """Return the track ids a user has favourited."""

    @abstractmethod
    async def add_favorite(self, user_id: str, track_id: str) -> bool:
        """Insert a favourite.  Return False if the pair already exists."""

    @abstractmethod
    async def remove_favorite(self, user_id: str, track_id: str) -> bool:
        """Delete a favourite.  Return False if there was nothing to delete."""
