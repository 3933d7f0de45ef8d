"""FastAPI routes for the One Love service.

Two routers:

``functions_router`` -- the platform's server-side functions, mounted at
the root so existing clients keep their URLs.

# Endpoint                         Method  Description
# ─────────────────────────────────────────────────────────────────────
# /filter-explicit-content         POST    scan_all | scan_single | analyze_lyrics
# /send-newsletter                 POST    Build and store the weekly draft
# /generate-news                   POST    AI-draft a news article

``router`` -- helper endpoints under ``/api/v1``.

# /api/v1/health                   GET     Liveness + backend / AI status
# /api/v1/favorites                GET     List a user's favourites
# /api/v1/favorites                POST    Add a favourite
# /api/v1/favorites/toggle         POST    Add or remove a favourite
# /api/v1/favorites/{track_id}     DELETE  Remove a favourite
# /api/v1/plays/start              POST    Start tracking a track in a session
# /api/v1/plays/progress           POST    Report playback position
# /api/v1/plays/stop               POST    Stop tracking a track
# /api/v1/plays/reset              POST    Forget a listening session
# /api/v1/share                    GET     Site or track share payload
# /api/v1/share/{platform}         GET     Social share-intent URL
# /api/v1/media-session            POST    Lock-screen metadata for a track
# /api/v1/newsletter/subscribe     POST    Newsletter signup

Services are resolved from ``app.state`` (populated in main.py) through
``Depends`` helpers.  Failures are raised as ``OneLoveError`` subclasses
and rendered by ErrorHandlingMiddleware.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from onelove import __version__
from onelove.api.schemas import (
    ArticleResponse,
    FavoriteRequest,
    FavoritesResponse,
    FavoriteToggleResponse,
    FilterContentRequest,
    GenerateNewsResponse,
    HealthResponse,
    MediaMetadataResponse,
    MediaSessionRequest,
    MediaSessionResponse,
    NewsletterSentResponse,
    NewsletterSkippedResponse,
    PlayProgressRequest,
    PlayProgressResponse,
    PlaySessionRequest,
    ScanAllResponse,
    ScannedItemResponse,
    ScanSingleResponse,
    ShareResponse,
    SubscribeRequest,
    SubscribeResponse,
    VerdictResponse,
)
from onelove.interfaces.content_store import IContentStore
from onelove.services.content_scanner import ContentScanner
from onelove.services.favorites_service import FavoritesService
from onelove.services.media_session import (
    TRANSPORT_ACTIONS,
    build_media_metadata,
    playback_state,
)
from onelove.services.news_generator import NewsGenerator
from onelove.services.newsletter_service import NewsletterAggregator
from onelove.services.play_tracker import PlaySessionRegistry
from onelove.services.share_links import SOCIAL_PLATFORMS, ShareLinkBuilder
from onelove.services.subscription_service import SubscriptionService
from onelove.utils.errors import ValidationError
from onelove.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

functions_router = APIRouter()
router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_scanner(request: Request) -> ContentScanner:
    return request.app.state.content_scanner


def _get_newsletter(request: Request) -> NewsletterAggregator:
    return request.app.state.newsletter


def _get_news_generator(request: Request) -> NewsGenerator:
    return request.app.state.news_generator


def _get_favorites(request: Request) -> FavoritesService:
    return request.app.state.favorites


def _get_play_sessions(request: Request) -> PlaySessionRegistry:
    return request.app.state.play_sessions


def _get_share_links(request: Request) -> ShareLinkBuilder:
    return request.app.state.share_links


def _get_subscriptions(request: Request) -> SubscriptionService:
    return request.app.state.subscriptions


def _get_store(request: Request) -> IContentStore:
    return request.app.state.content_store


ScannerDep = Annotated[ContentScanner, Depends(_get_scanner)]
NewsletterDep = Annotated[NewsletterAggregator, Depends(_get_newsletter)]
NewsGeneratorDep = Annotated[NewsGenerator, Depends(_get_news_generator)]
FavoritesDep = Annotated[FavoritesService, Depends(_get_favorites)]
PlaySessionsDep = Annotated[PlaySessionRegistry, Depends(_get_play_sessions)]
ShareLinksDep = Annotated[ShareLinkBuilder, Depends(_get_share_links)]
SubscriptionsDep = Annotated[SubscriptionService, Depends(_get_subscriptions)]
StoreDep = Annotated[IContentStore, Depends(_get_store)]


async def _read_json(request: Request) -> Any:
    """Return the decoded body; an empty body reads as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationError(message="Request body is not valid JSON") from exc


# ---------------------------------------------------------------------------
# Platform functions
# ---------------------------------------------------------------------------


@functions_router.post("/filter-explicit-content", response_model=None)
async def filter_explicit_content(request: Request, scanner: ScannerDep) -> JSONResponse:
    """Dispatch on ``action``; an unknown or unavailable action is a 400."""
    body = await _read_json(request)
    if not isinstance(body, dict):
        raise ValidationError(message="Invalid action")
    try:
        payload = FilterContentRequest.model_validate(body)
    except PydanticValidationError as exc:
        raise ValidationError(message="Invalid request body") from exc

    if payload.action == "scan_all":
        result = await scanner.scan_all()
        reply = ScanAllResponse(
            success=result.success,
            scanned=result.scanned,
            marked_explicit=result.marked_explicit,
            results=[
                ScannedItemResponse(id=item.id, title=item.title, marked=item.marked)
                for item in result.results
            ],
        )
    elif payload.action == "scan_single":
        single = await scanner.scan_single(payload.track_id or "")
        reply = ScanSingleResponse(
            id=single.id,
            title=single.title,
            is_explicit=single.is_explicit,
            updated=single.updated,
        )
    elif payload.action == "analyze_lyrics" and scanner.ai_enabled:
        verdict = await scanner.analyze_lyrics(payload.text or "", payload.track_id)
        reply = VerdictResponse(is_explicit=verdict.is_explicit, reason=verdict.reason)
    else:
        raise ValidationError(message="Invalid action")

    return JSONResponse(content=reply.to_wire())


@functions_router.post("/send-newsletter", response_model=None)
async def send_newsletter(newsletter: NewsletterDep) -> JSONResponse:
    result = await newsletter.send()
    if result.message is not None:
        return JSONResponse(content=NewsletterSkippedResponse(message=result.message).to_wire())

    reply = NewsletterSentResponse(
        success=result.success,
        subscriber_count=result.subscriber_count,
        content_preview=result.content_preview,
        new_tracks=result.new_tracks,
        new_albums=result.new_albums,
        new_videos=result.new_videos,
    )
    return JSONResponse(content=reply.to_wire())


@functions_router.post("/generate-news", response_model=None)
async def generate_news(request: Request, generator: NewsGeneratorDep) -> JSONResponse:
    body = await _read_json(request)
    topic = body.get("topic") if isinstance(body, dict) else None

    result = await generator.generate(topic)
    article = None
    if result.article is not None:
        article = ArticleResponse(
            title=result.article.title,
            excerpt=result.article.excerpt,
            content=result.article.content,
            category=result.article.category.value,
        )
    reply = GenerateNewsResponse(success=result.success, article=article, error=result.error)
    return JSONResponse(content=reply.to_wire(exclude_none=True))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health(store: StoreDep, scanner: ScannerDep) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        backend=store.get_provider_name(),
        ai_enabled=scanner.ai_enabled,
    )


# ---------------------------------------------------------------------------
# Favourites
# ---------------------------------------------------------------------------


@router.get("/favorites", response_model=FavoritesResponse)
async def list_favorites(
    favorites: FavoritesDep,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> FavoritesResponse:
    track_ids = await favorites.list_favorites(user_id)
    return FavoritesResponse(user_id=user_id or "", track_ids=sorted(track_ids))


@router.post("/favorites", response_model=FavoriteToggleResponse)
async def add_favorite(
    body: FavoriteRequest,
    favorites: FavoritesDep,
) -> FavoriteToggleResponse:
    added = await favorites.add_favorite(body.user_id, body.track_id)
    if added:
        message = f'Added "{body.title}" to favorites' if body.title else "Added to favorites"
    else:
        message = "Already in favorites"
    return FavoriteToggleResponse(
        track_id=body.track_id, is_favorite=True, changed=added, message=message
    )


@router.post("/favorites/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    body: FavoriteRequest,
    favorites: FavoritesDep,
) -> FavoriteToggleResponse:
    outcome = await favorites.toggle(body.user_id, body.track_id, body.title)
    return FavoriteToggleResponse(
        track_id=outcome.track_id,
        is_favorite=outcome.is_favorite,
        changed=outcome.changed,
        message=outcome.message,
    )


@router.delete("/favorites/{track_id}", response_model=FavoriteToggleResponse)
async def remove_favorite(
    track_id: str,
    favorites: FavoritesDep,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> FavoriteToggleResponse:
    removed = await favorites.remove_favorite(user_id, track_id)
    return FavoriteToggleResponse(
        track_id=track_id,
        is_favorite=False,
        changed=removed,
        message="Removed from favorites" if removed else "Not in favorites",
    )


# ---------------------------------------------------------------------------
# Play counting
# ---------------------------------------------------------------------------


@router.post("/plays/start", status_code=204)
async def start_play(body: PlaySessionRequest, sessions: PlaySessionsDep) -> None:
    sessions.get(body.session_id).start_tracking(body.track_id or "")


@router.post("/plays/progress", response_model=PlayProgressResponse)
async def report_progress(
    body: PlayProgressRequest,
    sessions: PlaySessionsDep,
) -> PlayProgressResponse:
    recorded = await sessions.get(body.session_id).check_and_record(
        body.track_id, body.current_time
    )
    return PlayProgressResponse(track_id=body.track_id, recorded=recorded)


@router.post("/plays/stop", status_code=204)
async def stop_play(body: PlaySessionRequest, sessions: PlaySessionsDep) -> None:
    sessions.get(body.session_id).stop_tracking(body.track_id or "")


@router.post("/plays/reset", status_code=204)
async def reset_plays(body: PlaySessionRequest, sessions: PlaySessionsDep) -> None:
    sessions.reset(body.session_id)


# ---------------------------------------------------------------------------
# Sharing and media session
# ---------------------------------------------------------------------------


@router.get("/share", response_model=ShareResponse)
async def share(
    links: ShareLinksDep,
    track_id: Annotated[str | None, Query(alias="trackId")] = None,
    title: str | None = None,
) -> ShareResponse:
    if track_id:
        payload = links.track_share(title or "Untitled", track_id)
    else:
        payload = links.share_payload(title=title)
    social = {
        platform: links.social_url(platform, url=payload.url, text=payload.text)
        for platform in SOCIAL_PLATFORMS
    }
    return ShareResponse(
        title=payload.title, text=payload.text, url=payload.url, social_urls=social
    )


@router.get("/share/{platform}")
async def share_to_platform(platform: str, links: ShareLinksDep) -> dict[str, str]:
    return {"platform": platform, "url": links.social_url(platform)}


@router.post("/media-session", response_model=MediaSessionResponse)
async def media_session(body: MediaSessionRequest) -> MediaSessionResponse:
    metadata = build_media_metadata(body.title, body.artist, body.album, body.artwork)
    return MediaSessionResponse(
        metadata=MediaMetadataResponse.model_validate(metadata.model_dump()),
        playback_state=playback_state(body.is_playing),
        actions=list(TRANSPORT_ACTIONS),
    )


# ---------------------------------------------------------------------------
# Newsletter signup
# ---------------------------------------------------------------------------


@router.post("/newsletter/subscribe", response_model=SubscribeResponse)
async def subscribe(
    body: SubscribeRequest,
    subscriptions: SubscriptionsDep,
) -> SubscribeResponse:
    result = await subscriptions.subscribe(body.email)
    return SubscribeResponse(subscribed=result.subscribed, message=result.message)
