"""
News data models for Solana Analytics.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class Sentiment(str, Enum):
    """Article sentiment as tagged by the provider."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class NewsArticle(BaseModel):
    """
    An article normalized from any provider's schema.
    """
    title: str
    summary: str = ""
    source: str = ""
    url: str
    published_at: datetime
    categories: List[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL

    @field_validator("published_at")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        """Treat timestamps without an offset as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def matches_category(self, category: str) -> bool:
        """Case-insensitive substring match against the category list."""
        needle = category.lower()
        return any(needle in cat.lower() for cat in self.categories)

    def to_payload(self) -> dict:
        """Render the article in the action's JSON shape."""
        return {
            "title": self.title,
            "summary": self.summary,
            "source": self.source,
            "url": self.url,
            "publishedAt": self.published_at.isoformat(),
            "sentiment": self.sentiment.value,
            "categories": list(self.categories),
        }


class NewsDigest(BaseModel):
    """
    Deduplicated, time-sorted articles from all providers plus trending topics.
    """
    articles: List[NewsArticle] = Field(default_factory=list)
    trending_topics: List[str] = Field(default_factory=list)
    last_updated: datetime
    provider_warnings: List[str] = Field(default_factory=list)

    @property
    def total_results(self) -> int:
        """Number of unique articles."""
        return len(self.articles)
