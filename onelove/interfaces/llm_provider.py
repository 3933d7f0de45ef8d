"""Abstract base class for generative-AI text completion providers.

Implementations wrap an HTTP chat-completions endpoint selected by model
name and authorised with a bearer credential.  Keeping every call site on
this contract lets tests inject a fake and lets the gateway be swapped
without touching the scanner or the newsletter code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAICompatibleLLMProvider (onelove/providers/llm/)
class ILLMProvider(ABC):
    """Contract for chat-completion services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The instruction message that sets the model's behaviour.
        user_prompt:
            The request itself.

        Returns
        -------
        str
            The model's text response (may be empty).

        Raises
        ------
        onelove.utils.errors.UpstreamError
            If the API call fails or answers with a non-2xx status.  The
            provider's status code is available as ``status_code``.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"ai-gateway"``."""
