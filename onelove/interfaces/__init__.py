"""Public interface definitions for all external service providers.

Business logic talks to the outside world only through these ABCs;
concrete adapters in ``onelove/providers/`` are built in ``main.py`` and
injected into the services.

    Interface                    Concrete implementations
    ────────────────────────────────────────────────────────────────
    ILLMProvider                 OpenAICompatibleLLMProvider
    IContentStore                SupabaseContentStore, SQLiteContentStore
    IExplicitContentClassifier   PatternClassifier, LLMClassifier
"""

from onelove.interfaces.classifier import IExplicitContentClassifier
from onelove.interfaces.content_store import IContentStore
from onelove.interfaces.llm_provider import ILLMProvider

__all__ = [
    "IContentStore",
    "IExplicitContentClassifier",
    "ILLMProvider",
]
