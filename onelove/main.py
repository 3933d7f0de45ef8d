"""One Love FastAPI application entry point.

Wires providers, services and routes together.  Settings come from the
environment / ``.env``; tunables from ``config/config.yaml``.

Backend selection: the Supabase REST store when ``SUPABASE_URL`` and
``SUPABASE_SERVICE_ROLE_KEY`` are both set, otherwise a local SQLite file.
AI features are enabled only when ``AI_GATEWAY_API_KEY`` is set.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from onelove import __version__
from onelove.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from onelove.api.routes import functions_router
from onelove.api.routes import router as api_router
from onelove.config.loader import load_config
from onelove.config.settings import Settings
from onelove.interfaces.content_store import IContentStore
from onelove.interfaces.llm_provider import ILLMProvider
from onelove.providers.classifier.llm_classifier import LLMClassifier
from onelove.providers.classifier.pattern_classifier import PatternClassifier
from onelove.providers.content_store.sqlite_provider import SQLiteContentStore
from onelove.providers.content_store.supabase_provider import SupabaseContentStore
from onelove.providers.llm.openai_provider import OpenAICompatibleLLMProvider
from onelove.services.content_scanner import ContentScanner
from onelove.services.favorites_service import FavoritesService
from onelove.services.news_generator import NewsGenerator
from onelove.services.newsletter_service import NewsletterAggregator
from onelove.services.play_tracker import PlaySessionRegistry
from onelove.services.share_links import ShareLinkBuilder
from onelove.services.subscription_service import SubscriptionService
from onelove.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_content_store(app_settings: Settings, app_config: dict) -> IContentStore:
    if app_settings.has_supabase():
        return SupabaseContentStore(
            supabase_url=app_settings.supabase_url,
            service_role_key=app_settings.supabase_service_role_key,
        )
    return SQLiteContentStore(db_path=app_config["backend"]["sqlite_path"])


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Return the gateway provider, or ``None`` when no key is configured."""
    if not app_settings.has_ai_gateway():
        return None
    return OpenAICompatibleLLMProvider(settings=app_settings)


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings,
    app_config: dict | None = None,
) -> dict[str, Any]:
    """Construct every provider and service.

    Returns a flat dict of named components to be stored on ``app.state``;
    the admin CLI uses the same dict.
    """
    if app_config is None:
        app_config = load_config(settings=app_settings)

    store = _build_content_store(app_settings, app_config)
    llm = _build_llm_provider(app_settings)

    patterns = PatternClassifier()
    ai_classifier = LLMClassifier(llm=llm, fallback=patterns) if llm else None

    newsletter_cfg = app_config["newsletter"]
    player_cfg = app_config["player"]
    site_cfg = app_config["site"]

    return {
        "settings": app_settings,
        "config": app_config,
        "content_store": store,
        "llm_provider": llm,
        "content_scanner": ContentScanner(
            store=store,
            pattern_classifier=patterns,
            ai_classifier=ai_classifier,
            media_types=app_config["scanner"]["media_types"],
        ),
        "newsletter": NewsletterAggregator(
            store=store,
            llm=llm,
            artist_name=site_cfg["artist_name"],
            window_days=newsletter_cfg["window_days"],
            track_limit=newsletter_cfg["track_limit"],
            album_limit=newsletter_cfg["album_limit"],
            video_limit=newsletter_cfg["video_limit"],
        ),
        "news_generator": NewsGenerator(llm=llm, artist_name=site_cfg["artist_name"]),
        "favorites": FavoritesService(store=store),
        "play_sessions": PlaySessionRegistry(
            store=store,
            threshold_seconds=player_cfg["play_threshold_seconds"],
            max_sessions=player_cfg["max_sessions"],
            idle_ttl_seconds=player_cfg["session_idle_ttl_seconds"],
        ),
        "share_links": ShareLinkBuilder(
            site_url=site_cfg["url"],
            artist_name=site_cfg["artist_name"],
        ),
        "subscriptions": SubscriptionService(store=store),
    }


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    ``components`` replaces :func:`build_components` when given, which is
    how tests inject stores and providers.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        built = components if components is not None else build_components(app_settings)
        for key, value in built.items():
            setattr(application.state, key, value)

        store: IContentStore = built["content_store"]
        await store.initialize()

        _logger.info(
            "app_startup",
            version=__version__,
            environment=app_settings.app_env,
            backend=store.get_provider_name(),
            ai_enabled=built.get("llm_provider") is not None,
        )

        yield

        await store.close()
        _logger.info("app_shutdown", backend=store.get_provider_name())

    application = FastAPI(
        title="One Love API",
        version=__version__,
        description=(
            "Server-side functions for The General Da Jamaican Boy music site: "
            "explicit-content scanning, weekly newsletter drafting, news "
            "generation and player helpers."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)
    register_exception_handlers(application)

    application.include_router(functions_router)
    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "onelove.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
