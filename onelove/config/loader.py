"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers win):

  1. config/config.yaml  -- tunables checked into the repo
  2. .env file           -- local developer overrides
  3. Environment vars    -- set at deploy time

``load_config()`` reads the YAML first, then deep-merges the values that
come from :class:`Settings` on top.
"""

from pathlib import Path

import yaml

from onelove.config.settings import Settings

# Used when config.yaml is missing or leaves a section out.
DEFAULTS: dict = {
    "scanner": {
        "media_types": ["track"],
    },
    "newsletter": {
        "window_days": 7,
        "track_limit": 5,
        "album_limit": 3,
        "video_limit": 3,
    },
    "player": {
        "play_threshold_seconds": 30,
        "max_sessions": 10000,
        "session_idle_ttl_seconds": 21600,
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance to merge.  A fresh one is read from the
                  environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config: dict = {}
    _deep_merge(config, DEFAULTS)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            _deep_merge(config, yaml.safe_load(f) or {})

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "ai": {
            "gateway_url": settings.ai_gateway_url,
            "model": settings.ai_model,
            "enabled": settings.has_ai_gateway(),
        },
        "backend": {
            "kind": "supabase" if settings.has_supabase() else "sqlite",
            "sqlite_path": settings.content_db_path,
        },
        "site": {
            "url": settings.site_url,
            "artist_name": settings.artist_name,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        elif isinstance(value, dict):
            base[key] = {}
            _deep_merge(base[key], value)
        else:
            base[key] = value
