"""SQLite-backed content store.

Local stand-in for the managed database, used in development and in the
test suite.  Table and column names mirror the hosted schema (``media``,
``albums``, ``newsletter_subscribers``, ``news``, ``favorites``) so rows
look the same whichever backend produced them.

Uses ``aiosqlite`` for async I/O.  Timestamps are stored as UTC ISO-8601
strings with microsecond precision so lexical order equals time order.
"""

from __future__ import annotations

import sqlite3
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from onelove.interfaces.content_store import IContentStore
from onelove.models.media import AlbumRecord, MediaRecord, MediaType, SubscriberRecord
from onelove.models.newsletter import NewsletterDraft
from onelove.utils.errors import BackendError, NotFoundError
from onelove.utils.timestamps import to_utc_iso

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/content.db")

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_TABLES = [
    """\
CREATE TABLE IF NOT EXISTS media (
    id            TEXT    PRIMARY KEY,
    title         TEXT    NOT NULL,
    description   TEXT,
    media_type    TEXT    NOT NULL,
    is_explicit   INTEGER NOT NULL DEFAULT 0,
    play_count    INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT    NOT NULL,
    url           TEXT,
    thumbnail_url TEXT,
    album_id      TEXT
);
""",
    """\
CREATE TABLE IF NOT EXISTS albums (
    id            TEXT    PRIMARY KEY,
    title         TEXT    NOT NULL,
    album_type    TEXT    NOT NULL DEFAULT 'album',
    is_published  INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT    NOT NULL,
    cover_url     TEXT
);
""",
    """\
CREATE TABLE IF NOT EXISTS newsletter_subscribers (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    email          TEXT    NOT NULL UNIQUE,
    is_active      INTEGER NOT NULL DEFAULT 1,
    subscribed_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
""",
    """\
CREATE TABLE IF NOT EXISTS news (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    title         TEXT    NOT NULL,
    content       TEXT,
    excerpt       TEXT,
    category      TEXT,
    is_published  INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
""",
    """\
CREATE TABLE IF NOT EXISTS favorites (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     TEXT    NOT NULL,
    track_id    TEXT    NOT NULL,
    created_at  TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    UNIQUE(user_id, track_id)
);
""",
]

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_media_type_created ON media(media_type, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_albums_created ON albums(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_favorites_user ON favorites(user_id);",
]

# ── DML ───────────────────────────────────────────────────────────────

_MEDIA_COLUMNS = (
    "id, title, description, media_type, is_explicit, play_count, "
    "created_at, url, thumbnail_url, album_id"
)

_UPSERT_MEDIA = f"""\
INSERT OR REPLACE INTO media ({_MEDIA_COLUMNS})
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
"""

_UPSERT_ALBUM = """\
INSERT OR REPLACE INTO albums (id, title, album_type, is_published, created_at, cover_url)
VALUES (?, ?, ?, ?, ?, ?);
"""

_SELECT_RECENT_MEDIA = f"""\
SELECT {_MEDIA_COLUMNS} FROM media
WHERE media_type = ? AND created_at >= ?
ORDER BY created_at DESC
LIMIT ?;
"""

_SELECT_RECENT_ALBUMS = """\
SELECT id, title, album_type, is_published, created_at, cover_url FROM albums
WHERE is_published = 1 AND created_at >= ?
ORDER BY created_at DESC
LIMIT ?;
"""

_INSERT_NEWS = """\
INSERT INTO news (title, content, excerpt, category, is_published)
VALUES (?, ?, ?, ?, 0);
"""


def _media_from_row(row: aiosqlite.Row) -> MediaRecord:
    data = dict(row)
    data["is_explicit"] = bool(data["is_explicit"])
    return MediaRecord.model_validate(data)


def _album_from_row(row: aiosqlite.Row) -> AlbumRecord:
    data = dict(row)
    data["is_published"] = bool(data["is_published"])
    return AlbumRecord.model_validate(data)


class SQLiteContentStore(IContentStore):
    """aiosqlite implementation of :class:`IContentStore`."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection and convert sqlite failures to BackendError."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except sqlite3.Error as exc:
            logger.error("sqlite_operation_failed", operation=operation, error=str(exc))
            raise BackendError(
                message=f"{operation} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    # ── Lifecycle ──────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connection("initialize") as db:
            for ddl in _CREATE_TABLES:
                await db.execute(ddl)
            for idx_sql in _CREATE_INDICES:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("content_db_initialized", path=str(self._db_path))

    async def close(self) -> None:
        """Connections are per-call; nothing to release."""

    def get_provider_name(self) -> str:
        return "sqlite"

    # ── Seeding (development / tests) ──────────────────────────────────

    async def upsert_media(self, record: MediaRecord) -> None:
        """Insert or replace a media row."""
        async with self._connection("upsert media") as db:
            await db.execute(
                _UPSERT_MEDIA,
                (
                    record.id,
                    record.title,
                    record.description,
                    record.media_type.value,
                    int(record.is_explicit),
                    record.play_count,
                    to_utc_iso(record.created_at),
                    record.url,
                    record.thumbnail_url,
                    record.album_id,
                ),
            )
            await db.commit()

    async def upsert_album(self, record: AlbumRecord) -> None:
        """Insert or replace an album row."""
        async with self._connection("upsert album") as db:
            await db.execute(
                _UPSERT_ALBUM,
                (
                    record.id,
                    record.title,
                    record.album_type.value,
                    int(record.is_published),
                    to_utc_iso(record.created_at),
                    record.cover_url,
                ),
            )
            await db.commit()

    async def list_news(self) -> list[dict[str, Any]]:
        """Return all news rows, oldest first."""
        async with self._connection("list news") as db:
            cursor = await db.execute(
                "SELECT id, title, content, excerpt, category, is_published, created_at "
                "FROM news ORDER BY id"
            )
            rows = await cursor.fetchall()
        return [dict(r) for r in rows]

    # ── Media catalogue ────────────────────────────────────────────────

    async def list_media(self, media_types: Sequence[MediaType]) -> list[MediaRecord]:
        if not media_types:
            return []
        placeholders = ", ".join("?" for _ in media_types)
        async with self._connection("list media") as db:
            cursor = await db.execute(
                f"SELECT {_MEDIA_COLUMNS} FROM media WHERE media_type IN ({placeholders}) "
                "ORDER BY created_at",
                tuple(MediaType(t).value for t in media_types),
            )
            rows = await cursor.fetchall()
        return [_media_from_row(r) for r in rows]

    async def get_media(self, media_id: str) -> MediaRecord | None:
        async with self._connection("get media") as db:
            cursor = await db.execute(
                f"SELECT {_MEDIA_COLUMNS} FROM media WHERE id = ?",
                (media_id,),
            )
            row = await cursor.fetchone()
        return _media_from_row(row) if row else None

    async def mark_explicit(self, media_id: str) -> None:
        async with self._connection("mark explicit") as db:
            await db.execute("UPDATE media SET is_explicit = 1 WHERE id = ?", (media_id,))
            await db.commit()
        logger.info("media_marked_explicit", media_id=media_id, backend="sqlite")

    async def recent_media(
        self,
        media_type: MediaType,
        since: datetime,
        limit: int,
    ) -> list[MediaRecord]:
        async with self._connection("recent media") as db:
            cursor = await db.execute(
                _SELECT_RECENT_MEDIA,
                (MediaType(media_type).value, to_utc_iso(since), limit),
            )
            rows = await cursor.fetchall()
        return [_media_from_row(r) for r in rows]

    async def recent_albums(self, since: datetime, limit: int) -> list[AlbumRecord]:
        async with self._connection("recent albums") as db:
            cursor = await db.execute(_SELECT_RECENT_ALBUMS, (to_utc_iso(since), limit))
            rows = await cursor.fetchall()
        return [_album_from_row(r) for r in rows]

    async def increment_play_count(self, media_id: str) -> int:
        async with self._connection("increment play count") as db:
            cursor = await db.execute(
                "UPDATE media SET play_count = play_count + 1 WHERE id = ?",
                (media_id,),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(
                    message=f"Media {media_id} not found",
                    provider_name=self.get_provider_name(),
                )
            await db.commit()
            cursor = await db.execute("SELECT play_count FROM media WHERE id = ?", (media_id,))
            row = await cursor.fetchone()
        return int(row["play_count"])

    # ── Newsletter ─────────────────────────────────────────────────────

    async def active_subscribers(self) -> list[SubscriberRecord]:
        async with self._connection("active subscribers") as db:
            cursor = await db.execute(
                "SELECT email, is_active FROM newsletter_subscribers WHERE is_active = 1"
            )
            rows = await cursor.fetchall()
        return [SubscriberRecord(email=r["email"], is_active=bool(r["is_active"])) for r in rows]

    async def add_subscriber(self, email: str) -> bool:
        async with self._connection("add subscriber") as db:
            cursor = await db.execute(
                "INSERT OR IGNORE INTO newsletter_subscribers (email, is_active) VALUES (?, 1)",
                (email,),
            )
            await db.commit()
            inserted = cursor.rowcount == 1
        return inserted

    async def deactivate_subscriber(self, email: str) -> None:
        """Mark a subscriber inactive (used by the admin tooling and tests)."""
        async with self._connection("deactivate subscriber") as db:
            await db.execute(
                "UPDATE newsletter_subscribers SET is_active = 0 WHERE email = ?",
                (email,),
            )
            await db.commit()

    async def insert_news_draft(self, draft: NewsletterDraft) -> dict[str, Any]:
        async with self._connection("insert news draft") as db:
            cursor = await db.execute(
                _INSERT_NEWS,
                (draft.title, draft.content, draft.excerpt, draft.category),
            )
            await db.commit()
            row_id = cursor.lastrowid
            cursor = await db.execute(
                "SELECT id, title, content, excerpt, category, is_published, created_at "
                "FROM news WHERE id = ?",
                (row_id,),
            )
            row = await cursor.fetchone()
        return dict(row)

    # ── Favourites ─────────────────────────────────────────────────────

    async def list_favorites(self, user_id: str) -> list[str]:
        async with self._connection("list favorites") as db:
            cursor = await db.execute(
                "SELECT track_id FROM favorites WHERE user_id = ? ORDER BY id",
                (user_id,),
            )
            rows = await cursor.fetchall()
        return [r["track_id"] for r in rows]

    async def add_favorite(self, user_id: str, track_id: str) -> bool:
        async with self._connection("add favorite") as db:
            cursor = await db.execute(
                "INSERT OR IGNORE INTO favorites (user_id, track_id) VALUES (?, ?)",
                (user_id, track_id),
            )
            await db.commit()
            inserted = cursor.rowcount == 1
        return inserted

    async def remove_favorite(self, user_id: str, track_id: str) -> bool:
        async with self._connection("remove favorite") as db:
            cursor = await db.execute(
                "DELETE FROM favorites WHERE user_id = ? AND track_id = ?",
                (user_id, track_id),
            )
            await db.commit()
            removed = cursor.rowcount > 0
        return removed
