"""Explicit-content classifiers (IExplicitContentClassifier implementations)."""

from onelove.providers.classifier.llm_classifier import LLMClassifier
from onelove.providers.classifier.pattern_classifier import PatternClassifier

__all__ = ["LLMClassifier", "PatternClassifier"]
