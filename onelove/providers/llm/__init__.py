"""LLM provider adapters.

One concrete implementation of ILLMProvider:
    - OpenAICompatibleLLMProvider -- chat completions against the AI gateway

main.py builds it from Settings and injects it into the scanner, the
newsletter aggregator and the news generator.
"""

from onelove.providers.llm.openai_provider import OpenAICompatibleLLMProvider

__all__ = ["OpenAICompatibleLLMProvider"]
