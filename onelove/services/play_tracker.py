"""Play-count tracking.

A play counts once per listening session, after the listener has reached
``threshold_seconds`` of playback in a track.  Counting bumps the track's
``play_count`` by one in the content store; a failed write is logged and
the play stays counted for the session so it is not retried.

Sessions are keyed by a client-supplied id and kept in process memory by
:class:`PlaySessionRegistry`.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable

import structlog

from onelove.interfaces.content_store import IContentStore
from onelove.utils.errors import OneLoveError

logger = structlog.get_logger(logger_name=__name__)

PLAY_THRESHOLD_SECONDS = 30
MAX_SESSIONS = 10_000
SESSION_IDLE_TTL_SECONDS = 6 * 60 * 60


class PlayCountTracker:
    """Once-per-session play counting for one listener."""

    def __init__(
        self,
        store: IContentStore,
        threshold_seconds: float = PLAY_THRESHOLD_SECONDS,
    ) -> None:
        self._store = store
        self._threshold = threshold_seconds
        self._tracked: set[str] = set()
        self._started: dict[str, float] = {}

    @property
    def tracked(self) -> frozenset[str]:
        return frozenset(self._tracked)

    def start_tracking(self, track_id: str) -> None:
        if track_id:
            self._started[track_id] = time.monotonic()

    def stop_tracking(self, track_id: str) -> None:
        if track_id:
            self._started.pop(track_id, None)

    def reset_session(self) -> None:
        self._tracked.clear()
        self._started.clear()

    async def check_and_record(self, track_id: str, current_time: float) -> bool:
        """Count a play when ``current_time`` has reached the threshold.

        Returns True only on the call that counted the play.
        """
        if not track_id or track_id in self._tracked:
            return False
        if current_time < self._threshold:
            return False

        # Claimed before the write so concurrent progress reports can't double count.
        self._tracked.add(track_id)
        try:
            new_count = await self._store.increment_play_count(track_id)
        except OneLoveError as exc:
            logger.error("play_count_update_failed", track_id=track_id, error=str(exc))
        else:
            logger.info("play_recorded", track_id=track_id, play_count=new_count)
        return True


class PlaySessionRegistry:
    """In-process map of session id to :class:`PlayCountTracker`.

    Bounded two ways: sessions idle for longer than ``idle_ttl_seconds``
    are dropped on the next lookup, and once ``max_sessions`` is reached
    the least recently used session is evicted.  An evicted listener just
    starts a fresh session.
    """

    def __init__(
        self,
        store: IContentStore,
        threshold_seconds: float = PLAY_THRESHOLD_SECONDS,
        max_sessions: int = MAX_SESSIONS,
        idle_ttl_seconds: float = SESSION_IDLE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._threshold = threshold_seconds
        self._max_sessions = max_sessions
        self._idle_ttl = idle_ttl_seconds
        self._clock = clock
        # session id -> (tracker, last seen); oldest first
        self._sessions: OrderedDict[str, tuple[PlayCountTracker, float]] = OrderedDict()

    def _expire_idle(self, now: float) -> None:
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if now - last_seen <= self._idle_ttl:
                break
            del self._sessions[session_id]
            logger.debug("play_session_expired", session_id=session_id)

    def get(self, session_id: str) -> PlayCountTracker:
        now = self._clock()
        self._expire_idle(now)

        entry = self._sessions.pop(session_id, None)
        tracker = entry[0] if entry else PlayCountTracker(self._store, self._threshold)
        while len(self._sessions) >= self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug("play_session_evicted", session_id=evicted)
        self._sessions[session_id] = (tracker, now)
        return tracker

    def reset(self, session_id: str) -> None:
        entry = self._sessions.pop(session_id, None)
        if entry is not None:
            entry[0].reset_session()

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
