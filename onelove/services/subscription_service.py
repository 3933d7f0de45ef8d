"""Newsletter signup."""

from __future__ import annotations

import structlog
from pydantic import BaseModel, ConfigDict, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from onelove.interfaces.content_store import IContentStore
from onelove.utils.errors import ValidationError

logger = structlog.get_logger(logger_name=__name__)

MAX_EMAIL_LENGTH = 255
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
ALREADY_SUBSCRIBED_MESSAGE = "You're already subscribed!"
WELCOME_MESSAGE = "Welcome to the tribe! Check your inbox for updates."

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


class SubscriptionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    subscribed: bool
    message: str


def normalize_email(raw: object) -> str:
    """Trim and validate an email address; ValidationError when unusable."""
    if not isinstance(raw, str):
        raise ValidationError(message=INVALID_EMAIL_MESSAGE)
    email = raw.strip()
    if not email or len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(message=INVALID_EMAIL_MESSAGE)
    try:
        return _EMAIL_ADAPTER.validate_python(email)
    except PydanticValidationError as exc:
        raise ValidationError(message=INVALID_EMAIL_MESSAGE) from exc


class SubscriptionService:
    def __init__(self, store: IContentStore) -> None:
        self._store = store

    async def subscribe(self, raw_email: object) -> SubscriptionResult:
        email = normalize_email(raw_email)
        added = await self._store.add_subscriber(email)
        if not added:
            return SubscriptionResult(
                email=email, subscribed=False, message=ALREADY_SUBSCRIBED_MESSAGE
            )
        logger.info("newsletter_subscriber_added")
        return SubscriptionResult(email=email, subscribed=True, message=WELCOME_MESSAGE)
