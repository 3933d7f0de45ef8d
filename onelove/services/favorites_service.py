"""Per-user favourite tracks."""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict

from onelove.interfaces.content_store import IContentStore
from onelove.utils.errors import AuthRequiredError, ValidationError

logger = structlog.get_logger(logger_name=__name__)

SIGN_IN_MESSAGE = "Please sign in to add favorites"
ALREADY_FAVORITE_MESSAGE = "Already in favorites"


class FavoriteToggle(BaseModel):
    """Outcome of a toggle: the new state, whether it changed, and a toast."""

    model_config = ConfigDict(frozen=True)

    track_id: str
    is_favorite: bool
    changed: bool
    message: str


class FavoritesService:
    """Add, remove and toggle favourites for signed-in users."""

    def __init__(self, store: IContentStore) -> None:
        self._store = store

    @staticmethod
    def _require_user(user_id: str | None) -> str:
        if not user_id:
            raise AuthRequiredError(message=SIGN_IN_MESSAGE)
        return user_id

    async def list_favorites(self, user_id: str | None) -> set[str]:
        user_id = self._require_user(user_id)
        return set(await self._store.list_favorites(user_id))

    async def is_favorite(self, user_id: str | None, track_id: str) -> bool:
        return track_id in await self.list_favorites(user_id)

    async def add_favorite(self, user_id: str | None, track_id: str) -> bool:
        """Return False when the pair already exists."""
        user_id = self._require_user(user_id)
        if not track_id:
            raise ValidationError(message="trackId is required")
        added = await self._store.add_favorite(user_id, track_id)
        if not added:
            logger.info("favorite_already_present", user_id=user_id, track_id=track_id)
        return added

    async def remove_favorite(self, user_id: str | None, track_id: str) -> bool:
        user_id = self._require_user(user_id)
        return await self._store.remove_favorite(user_id, track_id)

    async def toggle(
        self,
        user_id: str | None,
        track_id: str,
        title: str | None = None,
    ) -> FavoriteToggle:
        """Flip the favourite state of ``track_id`` for ``user_id``."""
        user_id = self._require_user(user_id)
        if not track_id:
            raise ValidationError(message="trackId is required")

        if await self.is_favorite(user_id, track_id):
            removed = await self._store.remove_favorite(user_id, track_id)
            message = f'Removed "{title}" from favorites' if title else "Removed from favorites"
            return FavoriteToggle(
                track_id=track_id, is_favorite=False, changed=removed, message=message
            )

        added = await self._store.add_favorite(user_id, track_id)
        if not added:
            return FavoriteToggle(
                track_id=track_id,
                is_favorite=True,
                changed=False,
                message=ALREADY_FAVORITE_MESSAGE,
            )
        message = f'Added "{title}" to favorites' if title else "Added to favorites"
        logger.info("favorite_added", user_id=user_id, track_id=track_id)
        return FavoriteToggle(track_id=track_id, is_favorite=True, changed=True, message=message)
