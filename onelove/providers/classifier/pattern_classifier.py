"""Regex-cascade explicit-content classifier.

Applies the ordered pattern set from onelove/config/explicit_patterns.py
to a text span.  The verdict is True when any pattern matches anywhere;
evaluation stops at the first hit.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog

from onelove.config.explicit_patterns import EXPLICIT_PATTERNS
from onelove.interfaces.classifier import IExplicitContentClassifier
from onelove.models.moderation import Verdict

logger = structlog.get_logger(logger_name=__name__)

MATCHED_REASON = "Matched explicit pattern"
CLEAN_REASON = "No explicit content detected"


class PatternClassifier(IExplicitContentClassifier):
    """Explicit-content classifier over a fixed, immutable pattern tuple."""

    def __init__(self, patterns: Iterable[re.Pattern[str]] = EXPLICIT_PATTERNS) -> None:
        self._patterns: tuple[re.Pattern[str], ...] = tuple(patterns)

    @property
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._patterns

    def first_match(self, text: str) -> re.Pattern[str] | None:
        """Return the first pattern that matches ``text``, or ``None``."""
        for pattern in self._patterns:
            if pattern.search(text):
                return pattern
        return None

    def is_explicit(self, text: str) -> bool:
        """Synchronous verdict used by the catalogue sweep."""
        return self.first_match(text) is not None

    def verdict(self, text: str) -> Verdict:
        matched = self.first_match(text)
        if matched is None:
            return Verdict(is_explicit=False, reason=CLEAN_REASON)
        logger.debug("explicit_pattern_matched", pattern=matched.pattern)
        return Verdict(is_explicit=True, reason=MATCHED_REASON)

    async def classify(self, text: str) -> Verdict:
        return self.verdict(text)

    def get_classifier_name(self) -> str:
        return "pattern"
