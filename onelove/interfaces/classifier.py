"""Capability interface for explicit-content classification.

Two implementations live in onelove/providers/classifier/:

    PatternClassifier -- fixed regex cascade, synchronous and free
    LLMClassifier     -- AI-backed; holds a PatternClassifier and delegates
                         to it when the model reply cannot be parsed

They compose by delegation, not inheritance: the AI classifier is handed
the pattern classifier at construction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from onelove.models.moderation import Verdict


class IExplicitContentClassifier(ABC):
    """Contract for anything that can label a text span explicit or clean."""

    @abstractmethod
    async def classify(self, text: str) -> Verdict:
        """Return the verdict for ``text``."""

    @abstractmethod
    def get_classifier_name(self) -> str:
        """Return a short identifier used in logs."""
