"""One Love: server-side functions for The General Da Jamaican Boy music site."""

__version__ = "0.1.0"
