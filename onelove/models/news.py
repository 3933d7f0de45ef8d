"""AI-drafted news article model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class NewsCategory(str, Enum):
    MUSIC = "Music"
    TOUR = "Tour"
    RELEASE = "Release"
    INTERVIEW = "Interview"
    NEWS = "News"


class NewsArticle(BaseModel):
    """Article returned to the admin for review; never auto-published."""

    model_config = ConfigDict(frozen=True)

    title: str
    excerpt: str
    content: str
    category: NewsCategory = NewsCategory.NEWS
