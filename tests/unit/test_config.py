"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

from onelove.config.loader import DEFAULTS, load_config
from onelove.config.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_settings_defaults() -> None:
    settings = _settings()

    assert settings.ai_gateway_url == "https://ai.gateway.lovable.dev/v1"
    assert settings.ai_model == "google/gemini-2.5-flash"
    assert settings.artist_name == "The General Da Jamaican Boy"


def test_feature_detection() -> None:
    assert _settings(ai_gateway_api_key="k").has_ai_gateway() is True
    assert _settings(ai_gateway_api_key="").has_ai_gateway() is False
    assert _settings(supabase_url="https://x.supabase.co").has_supabase() is False
    assert _settings(
        supabase_url="https://x.supabase.co", supabase_service_role_key="k"
    ).has_supabase() is True


def test_missing_yaml_falls_back_to_defaults(tmp_path: Path) -> None:
    config = load_config(str(tmp_path / "absent.yaml"), settings=_settings())

    assert config["scanner"] == DEFAULTS["scanner"]
    assert config["newsletter"]["track_limit"] == 5
    assert config["player"]["play_threshold_seconds"] == 30


def test_yaml_overrides_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("scanner:\n  media_types: [track, video]\nnewsletter:\n  window_days: 14\n")

    config = load_config(str(path), settings=_settings())

    assert config["scanner"]["media_types"] == ["track", "video"]
    assert config["newsletter"]["window_days"] == 14
    assert config["newsletter"]["album_limit"] == 3


def test_defaults_are_not_mutated(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("newsletter:\n  track_limit: 9\n")

    load_config(str(path), settings=_settings())

    assert DEFAULTS["newsletter"]["track_limit"] == 5


def test_backend_selection(tmp_path: Path) -> None:
    missing = str(tmp_path / "absent.yaml")

    local = load_config(missing, settings=_settings(content_db_path="x.db"))
    hosted = load_config(
        missing,
        settings=_settings(supabase_url="https://x.supabase.co", supabase_service_role_key="k"),
    )

    assert local["backend"] == {"kind": "sqlite", "sqlite_path": "x.db"}
    assert hosted["backend"]["kind"] == "supabase"
    assert local["ai"]["enabled"] is False


def test_repo_config_file_loads() -> None:
    path = Path(__file__).resolve().parents[2] / "config" / "config.yaml"

    config = load_config(str(path), settings=_settings())

    assert config["scanner"]["media_types"] == ["track"]
