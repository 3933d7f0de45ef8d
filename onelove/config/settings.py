"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``SUPABASE_URL=https://xyz.supabase.co``
  2. ``.env`` in the project root (local development only, never committed)

Field ``ai_gateway_api_key`` maps to env var ``AI_GATEWAY_API_KEY``.
Empty strings mean "not configured"; main.py picks the content-store
backend and decides whether AI actions are available from them.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """One Love application settings.

    Environment variables override defaults.  Loaded from .env when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === AI gateway (OpenAI-compatible chat completions) ===
    ai_gateway_api_key: str = ""
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_model: str = "google/gemini-2.5-flash"
    ai_timeout_seconds: float = 25.0

    # === Managed database (Supabase PostgREST) ===
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # === Local content store (used when Supabase is not configured) ===
    content_db_path: str = "data/content.db"

    # === Site identity ===
    site_url: str = "http://localhost:8080"
    artist_name: str = "The General Da Jamaican Boy"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def has_ai_gateway(self) -> bool:
        """Return True when an AI gateway credential is configured."""
        return bool(self.ai_gateway_api_key)

    def has_supabase(self) -> bool:
        """Return True when both the Supabase URL and service key are set."""
        return bool(self.supabase_url and self.supabase_service_role_key)
