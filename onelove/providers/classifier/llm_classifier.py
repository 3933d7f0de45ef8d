"""AI-backed explicit-content classifier with a regex fallback.

The model is asked for strict JSON ``{"isExplicit": bool, "reason": str}``.
When the reply cannot be turned into that shape the classifier hands the
text to its :class:`PatternClassifier` instead, so a malformed reply
costs precision but never fails the request.

A non-2xx answer from the gateway is different: it is raised as
:class:`UpstreamError` and fails the request.
"""

from __future__ import annotations

import structlog

from onelove.interfaces.classifier import IExplicitContentClassifier
from onelove.interfaces.llm_provider import ILLMProvider
from onelove.models.moderation import Verdict
from onelove.providers.classifier.pattern_classifier import PatternClassifier
from onelove.utils.errors import ParseError, UpstreamError
from onelove.utils.json_reply import parse_json_reply

logger = structlog.get_logger(logger_name=__name__)

SYSTEM_PROMPT = (
    "You are a content filter that analyzes song titles and lyrics for explicit content. "
    'Respond with JSON only: { "isExplicit": boolean, "reason": "brief reason if explicit" }'
)

_USER_PROMPT_TEMPLATE = (
    "Analyze this for explicit content (profanity, drug references, violence, "
    'sexual content): "{text}"'
)

_AI_FLAGGED_REASON = "Flagged by AI review"
_AI_CLEAN_REASON = "No explicit content detected"


class LLMClassifier(IExplicitContentClassifier):
    """Classifier that asks the AI gateway and falls back to patterns."""

    def __init__(self, llm: ILLMProvider, fallback: PatternClassifier) -> None:
        self._llm = llm
        self._fallback = fallback

    async def classify(self, text: str) -> Verdict:
        try:
            reply = await self._llm.complete(
                system_prompt=SYSTEM_PROMPT,
                user_prompt=_USER_PROMPT_TEMPLATE.format(text=text),
            )
        except UpstreamError as exc:
            raise UpstreamError(
                message="AI analysis failed",
                provider_name=exc.provider_name,
                status_code=exc.status_code,
            ) from exc

        try:
            return self._to_verdict(reply)
        except ParseError as exc:
            logger.warning(
                "ai_classification_unparseable",
                error=exc.message,
                reply=reply[:200],
            )
            return self._fallback.verdict(text)

    @staticmethod
    def _to_verdict(reply: str) -> Verdict:
        """Map the model's JSON to a Verdict; ParseError on any shape mismatch."""
        data = parse_json_reply(reply)
        flag = data.get("isExplicit")
        if not isinstance(flag, bool):
            raise ParseError(message="AI reply lacks a boolean isExplicit")

        reason = data.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            reason = _AI_FLAGGED_REASON if flag else _AI_CLEAN_REASON
        return Verdict(is_explicit=flag, reason=reason.strip())

    def get_classifier_name(self) -> str:
        return f"llm:{self._llm.get_provider_name()}"
