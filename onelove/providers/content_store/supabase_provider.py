"""Supabase content store.

Talks to the hosted Postgres database through the ``supabase`` client's
table API with the service-role key, which bypasses row-level security.

The async client is created in :meth:`initialize` (``acreate_client``)
unless one is injected, which is how the unit tests stub the backend.
PostgREST failures arrive as ``postgrest.exceptions.APIError``; a unique
violation (code ``23505``) on an insert means "already there" and is
reported as ``False``, every other failure as :class:`BackendError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from onelove.interfaces.content_store import IContentStore
from onelove.models.media import AlbumRecord, MediaRecord, MediaType, SubscriberRecord
from onelove.models.newsletter import NewsletterDraft
from onelove.utils.errors import BackendError, NotFoundError
from onelove.utils.timestamps import to_utc_iso

logger = structlog.get_logger(logger_name=__name__)

_UNIQUE_VIOLATION = "23505"

_MEDIA_SELECT = (
    "id,title,description,media_type,is_explicit,play_count,"
    "created_at,url,thumbnail_url,album_id"
)
_ALBUM_SELECT = "id,title,album_type,is_published,created_at,cover_url"


def _media_from_row(row: dict[str, Any]) -> MediaRecord:
    data = dict(row)
    data["is_explicit"] = bool(data.get("is_explicit"))
    data["play_count"] = data.get("play_count") or 0
    return MediaRecord.model_validate(data)


class SupabaseContentStore(IContentStore):
    """Supabase implementation of :class:`IContentStore`."""

    def __init__(
        self,
        supabase_url: str,
        service_role_key: str,
        client: AsyncClient | None = None,
    ) -> None:
        self._url = supabase_url
        self._key = service_role_key
        self._owns_client = client is None
        self._client = client

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _table(self, name: str):  # noqa: ANN202
        if self._client is None:
            raise BackendError(
                message="Supabase client is not initialized",
                provider_name=self.get_provider_name(),
            )
        return self._client.table(name)

    async def _execute(
        self,
        query: Any,
        operation: str,
        conflict_ok: bool = False,
    ) -> list[dict[str, Any]] | None:
        """Run one query and return its rows.

        Returns ``None`` instead of raising when ``conflict_ok`` is set and
        the backend reported a unique-constraint violation.
        """
        try:
            response = await query.execute()
        except APIError as exc:
            if conflict_ok and exc.code == _UNIQUE_VIOLATION:
                return None
            logger.error(
                "supabase_request_failed",
                operation=operation,
                code=exc.code,
                error=exc.message,
            )
            raise BackendError(
                message=f"{operation} failed: {exc.message}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("supabase_request_failed", operation=operation, error=str(exc))
            raise BackendError(
                message=f"{operation} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        data = response.data
        if isinstance(data, list):
            return data
        return [data] if data else []

    # ------------------------------------------------------------------
    # IContentStore implementation
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the client; the hosted schema is managed by migrations."""
        if self._client is None:
            self._client = await acreate_client(self._url, self._key)
        logger.info("supabase_store_ready", url=self._url)

    async def close(self) -> None:
        if self._owns_client:
            self._client = None

    def get_provider_name(self) -> str:
        return "supabase"

    async def list_media(self, media_types: Sequence[MediaType]) -> list[MediaRecord]:
        if not media_types:
            return []
        types = [MediaType(t).value for t in media_types]
        rows = await self._execute(
            self._table("media").select(_MEDIA_SELECT).in_("media_type", types),
            "list media",
        )
        return [_media_from_row(r) for r in rows]

    async def get_media(self, media_id: str) -> MediaRecord | None:
        rows = await self._execute(
            self._table("media").select(_MEDIA_SELECT).eq("id", media_id).limit(1),
            "get media",
        )
        return _media_from_row(rows[0]) if rows else None

    async def mark_explicit(self, media_id: str) -> None:
        await self._execute(
            self._table("media").update({"is_explicit": True}).eq("id", media_id),
            "mark explicit",
        )
        logger.info("media_marked_explicit", media_id=media_id, backend="supabase")

    async def recent_media(
        self,
        media_type: MediaType,
        since: datetime,
        limit: int,
    ) -> list[MediaRecord]:
        query = (
            self._table("media")
            .select(_MEDIA_SELECT)
            .eq("media_type", MediaType(media_type).value)
            .gte("created_at", to_utc_iso(since))
            .order("created_at", desc=True)
            .limit(limit)
        )
        rows = await self._execute(query, "recent media")
        return [_media_from_row(r) for r in rows]

    async def recent_albums(self, since: datetime, limit: int) -> list[AlbumRecord]:
        query = (
            self._table("albums")
            .select(_ALBUM_SELECT)
            .eq("is_published", "true")
            .gte("created_at", to_utc_iso(since))
            .order("created_at", desc=True)
            .limit(limit)
        )
        rows = await self._execute(query, "recent albums")
        return [AlbumRecord.model_validate(r) for r in rows]

    async def increment_play_count(self, media_id: str) -> int:
        # No atomic increment without an RPC; read then write.
        rows = await self._execute(
            self._table("media").select("play_count").eq("id", media_id).limit(1),
            "read play count",
        )
        if not rows:
            raise NotFoundError(
                message=f"Media {media_id} not found",
                provider_name=self.get_provider_name(),
            )
        new_count = (rows[0].get("play_count") or 0) + 1
        await self._execute(
            self._table("media").update({"play_count": new_count}).eq("id", media_id),
            "update play count",
        )
        return new_count

    async def active_subscribers(self) -> list[SubscriberRecord]:
        rows = await self._execute(
            self._table("newsletter_subscribers")
            .select("email,is_active")
            .eq("is_active", "true"),
            "active subscribers",
        )
        return [SubscriberRecord.model_validate(r) for r in rows]

    async def add_subscriber(self, email: str) -> bool:
        rows = await self._execute(
            self._table("newsletter_subscribers").insert({"email": email}),
            "add subscriber",
            conflict_ok=True,
        )
        return rows is not None

    async def insert_news_draft(self, draft: NewsletterDraft) -> dict[str, Any]:
        rows = await self._execute(
            self._table("news").insert(draft.model_dump()),
            "insert news draft",
        )
        return rows[0] if rows else draft.model_dump()

    async def list_favorites(self, user_id: str) -> list[str]:
        rows = await self._execute(
            self._table("favorites").select("track_id").eq("user_id", user_id),
            "list favorites",
        )
        return [r["track_id"] for r in rows]

    async def add_favorite(self, user_id: str, track_id: str) -> bool:
        rows = await self._execute(
            self._table("favorites").insert({"user_id": user_id, "track_id": track_id}),
            "add favorite",
            conflict_ok=True,
        )
        return rows is not None

    async def remove_favorite(self, user_id: str, track_id: str) -> bool:
        rows = await self._execute(
            self._table("favorites").delete().eq("user_id", user_id).eq("track_id", track_id),
            "remove favorite",
        )
        return len(rows) > 0
