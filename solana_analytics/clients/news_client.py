"""News aggregation client for Solana Analytics.

This module fetches articles from two independent providers (CryptoCompare
and NewsAPI), normalizes them into :class:`NewsArticle`, and builds the
deduplicated digest kept in the short-TTL news cache.
"""

# Standard library imports
import asyncio
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

# Third-party library imports
import httpx
from pydantic import ValidationError

# Internal imports
from solana_analytics.clients.base_client import BaseHTTPClient
from solana_analytics.config import NewsConfig, RetryConfig, get_news_config
from solana_analytics.constants import (
    NEWS_API_CATEGORIES,
    NEWS_API_QUERY,
    NEWS_SUMMARY_FALLBACK_LENGTH,
    TRENDING_MIN_WORD_LENGTH,
    TRENDING_STOP_WORDS,
    TRENDING_TOPIC_COUNT,
)
from solana_analytics.logging_config import get_logger, log_with_context
from solana_analytics.models.news import NewsArticle, NewsDigest, Sentiment
from solana_analytics.models.results import FetchResult
from solana_analytics.services.cache_service import TimedCache
from solana_analytics.utils.errors import ConfigurationMissingError, UpstreamError

# Get logger
logger = get_logger(__name__)

WORD_SPLIT_PATTERN = re.compile(r"\W+", re.ASCII)


def deduplicate_articles(articles: Iterable[NewsArticle]) -> List[NewsArticle]:
    """Drop articles whose title (case-insensitive) or URL was already seen.

    The first occurrence in iteration order is kept. Callers dedupe in
    provider merge order and sort afterwards, so a duplicate from the first
    provider wins even when a later provider carries a newer copy. Sorting
    first would keep the newest copy instead.

    Args:
        articles: Articles in merge order

    Returns:
        Unique articles, order preserved
    """
    seen_titles = set()
    seen_urls = set()
    unique = []

    for article in articles:
        title_key = article.title.lower()
        if title_key not in seen_titles and article.url not in seen_urls:
            unique.append(article)
        seen_titles.add(title_key)
        seen_urls.add(article.url)

    return unique


def extract_trending_topics(
    articles: Iterable[NewsArticle],
    count: int = TRENDING_TOPIC_COUNT
) -> List[str]:
    """Return the most frequent words across titles and summaries.

    Words of three characters or fewer and stop words are ignored. Ties keep
    the order in which words were first counted.

    Args:
        articles: Articles to scan
        count: Number of topics to return

    Returns:
        Up to ``count`` words, most frequent first
    """
    frequency: Counter = Counter()
    for article in articles:
        text = f"{article.title} {article.summary}".lower()
        frequency.update(
            word for word in WORD_SPLIT_PATTERN.split(text)
            if len(word) >= TRENDING_MIN_WORD_LENGTH and word not in TRENDING_STOP_WORDS
        )
    return [word for word, _ in frequency.most_common(count)]


def _sentiment_from_categories(categories: str) -> Sentiment:
    lowered = categories.lower()
    if "positive" in lowered:
        return Sentiment.POSITIVE
    if "negative" in lowered:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def parse_cryptocompare_article(item: Dict[str, Any]) -> NewsArticle:
    """Normalize one CryptoCompare ``Data`` entry."""
    categories = item.get("categories") or ""
    return NewsArticle(
        title=item.get("title") or "",
        summary=item.get("body") or "",
        source=item.get("source") or "",
        url=item.get("url") or "",
        published_at=datetime.fromtimestamp(int(item.get("published_on", 0)), tz=timezone.utc),
        categories=[cat for cat in categories.split("|") if cat],
        sentiment=_sentiment_from_categories(categories),
    )


def parse_newsapi_article(item: Dict[str, Any]) -> NewsArticle:
    """Normalize one NewsAPI ``articles`` entry."""
    summary = item.get("description")
    if not summary:
        content = item.get("content") or ""
        summary = f"{content[:NEWS_SUMMARY_FALLBACK_LENGTH]}..."
    return NewsArticle(
        title=item.get("title") or "",
        summary=summary,
        source=(item.get("source") or {}).get("name") or "",
        url=item.get("url") or "",
        published_at=item.get("publishedAt"),
        categories=list(NEWS_API_CATEGORIES),
        sentiment=Sentiment.NEUTRAL,
    )


def _parse_items(
    provider: str,
    items: List[Any],
    parser: Callable[[Dict[str, Any]], NewsArticle]
) -> List[NewsArticle]:
    """Normalize provider entries, skipping any that fail validation."""
    articles = []
    for item in items:
        try:
            articles.append(parser(item))
        except (ValidationError, TypeError, ValueError, AttributeError) as e:
            log_with_context(logger, "warning", "Skipping malformed article", provider=provider, error=str(e))
    return articles


class NewsClient(BaseHTTPClient):
    """Client aggregating the news providers."""

    def __init__(
        self,
        news_cache: TimedCache,
        config: Optional[NewsConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the news client.

        Args:
            news_cache: Cache holding the last aggregated digest
            config: News configuration. Defaults to environment-based config.
            retry_config: Retry policy settings
            http_client: Optional pre-built HTTP client
        """
        self.config = config or get_news_config()
        super().__init__(
            timeout=self.config.timeout,
            retry_config=retry_config,
            http_client=http_client
        )
        self.news_cache = news_cache

    async def _fetch_cryptocompare(self) -> List[NewsArticle]:
        if not self.config.cryptocompare_api_key:
            raise ConfigurationMissingError("CRYPTOCOMPARE_API_KEY")

        url = self.config.cryptocompare_url
        data = await self._with_retry(
            lambda: self._request_json(
                "GET",
                url,
                params={"lang": "EN"},
                headers={"authorization": f"Apikey {self.config.cryptocompare_api_key}"}
            ),
            operation_name="cryptocompare news"
        )
        items = data.get("Data") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise UpstreamError("CryptoCompare API error: unexpected response format", endpoint=url)
        return _parse_items("CryptoCompare", items, parse_cryptocompare_article)

    async def _fetch_newsapi(self) -> List[NewsArticle]:
        if not self.config.news_api_key:
            raise ConfigurationMissingError("NEWS_API_KEY")

        url = self.config.news_api_url
        data = await self._with_retry(
            lambda: self._request_json(
                "GET",
                url,
                params={
                    "q": NEWS_API_QUERY,
                    "language": "en",
                    "sortBy": "publishedAt",
                    "pageSize": self.config.page_size,
                },
                headers={"X-Api-Key": self.config.news_api_key}
            ),
            operation_name="newsapi everything"
        )
        items = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise UpstreamError("News API error: unexpected response format", endpoint=url)
        return _parse_items("NewsAPI", items, parse_newsapi_article)

    async def _fetch_provider(
        self,
        name: str,
        fetch: Callable[[], Awaitable[List[NewsArticle]]]
    ) -> FetchResult[List[NewsArticle]]:
        try:
            return FetchResult.ok(await fetch())
        except Exception as e:
            reason = getattr(e, "message", None) or str(e) or type(e).__name__
            log_with_context(logger, "warning", "News provider degraded", provider=name, reason=reason)
            return FetchResult.degraded([], f"{name}: {reason}")

    async def fetch_provider_a(self) -> FetchResult[List[NewsArticle]]:
        """Fetch CryptoCompare news. Never raises; failures are degraded."""
        return await self._fetch_provider("CryptoCompare", self._fetch_cryptocompare)

    async def fetch_provider_b(self) -> FetchResult[List[NewsArticle]]:
        """Fetch NewsAPI news. Never raises; failures are degraded."""
        return await self._fetch_provider("NewsAPI", self._fetch_newsapi)

    async def fetch_digest(self) -> NewsDigest:
        """Fetch every provider concurrently and build a digest, bypassing the cache.

        Raises:
            UpstreamError: If every provider failed
        """
        results = await asyncio.gather(self.fetch_provider_a(), self.fetch_provider_b())
        warnings = [result.reason for result in results if result.is_degraded]

        if all(result.is_degraded for result in results):
            raise UpstreamError(f"All news providers failed: {'; '.join(warnings)}")

        merged = [article for result in results for article in result.value]
        unique = deduplicate_articles(merged)
        unique.sort(key=lambda article: article.published_at, reverse=True)

        return NewsDigest(
            articles=unique,
            trending_topics=extract_trending_topics(unique),
            last_updated=datetime.now(timezone.utc),
            provider_warnings=warnings,
        )

    async def get_aggregated_news(self) -> NewsDigest:
        """Get the news digest, served from the cache while fresh.

        When every provider fails, the last digest is served if one exists.

        Raises:
            UpstreamError: If every provider failed and nothing is cached
        """
        return await self.news_cache.get_or_fetch(self.fetch_digest)
