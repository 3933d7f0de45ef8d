"""AI-drafted news articles about the artist.

The generated article is returned to the admin and never stored; the
admin decides whether to publish it through the news manager.
"""

from __future__ import annotations

import re

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from onelove.interfaces.llm_provider import ILLMProvider
from onelove.models.news import NewsArticle
from onelove.utils.errors import (
    ConfigurationError,
    ParseError,
    RateLimitError,
    UpstreamError,
    UsageLimitError,
    ValidationError,
)
from onelove.utils.json_reply import parse_json_reply

logger = structlog.get_logger(logger_name=__name__)

MAX_TOPIC_LENGTH = 200
GENERATION_FAILED_MESSAGE = "Failed to generate article"

_UNSAFE_TOPIC_CHARS = re.compile(r"[<>{}]")

_SYSTEM_PROMPT_TEMPLATE = """You are a music journalist specializing in reggae, dancehall, and Caribbean music. Write engaging, authentic news articles about "{artist}" - a rising reggae artist from Jamaica known for authentic vibes and positive messages.

Your articles should:
- Be written in an engaging, professional music journalism style
- Highlight the artist's unique sound blending traditional reggae with modern elements
- Mention the artist's connection to Jamaican culture and roots
- Be SEO-friendly with relevant keywords
- Include quotes (you can create realistic-sounding quotes from the artist)
- Be between 300-500 words

Respond with JSON only: {{"title": "...", "excerpt": "2-3 sentences", "content": "full article in markdown", "category": "Music|Tour|Release|Interview|News"}}"""

_OPEN_BRIEF_TEMPLATE = (
    "Write a fresh, engaging news article about {artist}. Choose an interesting "
    "angle like: new music release, upcoming shows, artist spotlight, "
    "collaborations, or music industry news involving the artist."
)


class NewsGenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    article: NewsArticle | None = None
    error: str | None = None


def sanitize_topic(topic: object) -> str | None:
    """Validate an optional topic and strip ``<>{}`` from it."""
    if topic is None:
        return None
    if not isinstance(topic, str):
        raise ValidationError(message="Invalid topic format")
    if len(topic) > MAX_TOPIC_LENGTH:
        raise ValidationError(message=f"Topic too long (max {MAX_TOPIC_LENGTH} characters)")
    cleaned = _UNSAFE_TOPIC_CHARS.sub("", topic).strip()
    return cleaned or None


class NewsGenerator:
    def __init__(self, llm: ILLMProvider | None, artist_name: str) -> None:
        self._llm = llm
        self._artist = artist_name

    async def generate(self, topic: object = None) -> NewsGenerationResult:
        """Draft one article, optionally about ``topic``.

        Raises
        ------
        ValidationError
            Topic is not a string or longer than 200 characters.
        RateLimitError / UsageLimitError
            The gateway answered 429 / 402.
        UpstreamError
            Any other gateway failure.
        """
        cleaned = sanitize_topic(topic)
        if self._llm is None:
            raise ConfigurationError(
                message="AI_GATEWAY_API_KEY is not configured",
                provider_name="ai-gateway",
            )

        user_prompt = (
            f"Write a news article about: {cleaned}"
            if cleaned
            else _OPEN_BRIEF_TEMPLATE.format(artist=self._artist)
        )
        try:
            reply = await self._llm.complete(
                system_prompt=_SYSTEM_PROMPT_TEMPLATE.format(artist=self._artist),
                user_prompt=user_prompt,
            )
        except UpstreamError as exc:
            if exc.status_code == 429:
                raise RateLimitError(provider_name=exc.provider_name) from exc
            if exc.status_code == 402:
                raise UsageLimitError(provider_name=exc.provider_name) from exc
            raise UpstreamError(
                message=GENERATION_FAILED_MESSAGE,
                provider_name=exc.provider_name,
                status_code=exc.status_code,
            ) from exc

        try:
            article = NewsArticle.model_validate(parse_json_reply(reply))
        except (ParseError, PydanticValidationError) as exc:
            logger.warning("news_article_unparseable", error=str(exc), reply=reply[:200])
            return NewsGenerationResult(success=False, error=GENERATION_FAILED_MESSAGE)

        logger.info("news_article_generated", topic=cleaned, category=article.category.value)
        return NewsGenerationResult(success=True, article=article)
