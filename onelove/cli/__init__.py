"""Command-line tools for One Love.

- ``python -m onelove.cli`` -- admin commands (scan, analyze, newsletter,
  subscribe) against the configured backend.
"""
