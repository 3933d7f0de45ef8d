"""OpenAI-compatible chat-completions adapter for the AI gateway.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
The gateway speaks the OpenAI REST dialect, so the client is simply
pointed at ``AI_GATEWAY_URL`` and authorised with ``AI_GATEWAY_API_KEY``
as a bearer token.  The model is chosen by name (``AI_MODEL``).

Every SDK failure is re-raised as :class:`UpstreamError` carrying the
gateway's HTTP status, so callers never import ``openai`` themselves.
"""

from __future__ import annotations

import openai
import structlog

from onelove.config.settings import Settings
from onelove.interfaces.llm_provider import ILLMProvider
from onelove.utils.errors import UpstreamError

logger = structlog.get_logger(logger_name=__name__)


class OpenAICompatibleLLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.ai_gateway_api_key
        self._model = settings.ai_model
        self._timeout = settings.ai_timeout_seconds

        client_kwargs: dict = {
            # The SDK refuses to build without a key; main.py never builds
            # this provider without one.
            "api_key": self._api_key or "unset",
            "timeout": openai.Timeout(self._timeout, connect=5.0),
            "max_retries": 0,
        }
        if settings.ai_gateway_url:
            client_kwargs["base_url"] = settings.ai_gateway_url

        self._client = openai.AsyncOpenAI(**client_kwargs)

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Generate a text completion via the chat completions endpoint.

        Returns an empty string when the gateway answers 2xx without
        content; callers decide what an empty reply means for them.
        """
        kwargs: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.APITimeoutError as exc:
            raise UpstreamError(
                message=f"AI gateway timed out after {self._timeout:g}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIStatusError as exc:
            logger.error(
                "ai_gateway_error",
                model=self._model,
                status=exc.status_code,
                body=str(exc.body)[:200] if exc.body is not None else None,
            )
            raise UpstreamError(
                message=f"AI gateway returned HTTP {exc.status_code}",
                provider_name=self.get_provider_name(),
                status_code=exc.status_code,
            ) from exc
        except openai.APIError as exc:
            raise UpstreamError(
                message=f"AI gateway error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        logger.info(
            "ai_completion",
            model=self._model,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def get_provider_name(self) -> str:
        return "ai-gateway"
