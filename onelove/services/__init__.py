"""Business services.  Each depends only on interfaces and models and is
built once in ``main.py`` with its providers injected."""

from onelove.services.content_scanner import ContentScanner
from onelove.services.favorites_service import FavoritesService, FavoriteToggle
from onelove.services.news_generator import NewsGenerationResult, NewsGenerator
from onelove.services.newsletter_service import NewsletterAggregator
from onelove.services.play_tracker import PlayCountTracker, PlaySessionRegistry
from onelove.services.share_links import ShareLinkBuilder, SharePayload
from onelove.services.subscription_service import SubscriptionResult, SubscriptionService

__all__ = [
    "ContentScanner",
    "FavoriteToggle",
    "FavoritesService",
    "NewsGenerationResult",
    "NewsGenerator",
    "NewsletterAggregator",
    "PlayCountTracker",
    "PlaySessionRegistry",
    "ShareLinkBuilder",
    "SharePayload",
    "SubscriptionResult",
    "SubscriptionService",
]
