"""Configuration module -- exports Settings, load_config, and the pattern set."""

from onelove.config.explicit_patterns import EXPLICIT_PATTERNS
from onelove.config.loader import load_config
from onelove.config.settings import Settings

__all__ = ["EXPLICIT_PATTERNS", "Settings", "load_config"]
