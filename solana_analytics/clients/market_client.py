"""Market data client for Solana Analytics.

This module talks to the CoinGecko API: the full coin list backing token
resolution (kept in the long-TTL token list cache) and the simple price
endpoint.
"""

# Standard library imports
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# Third-party library imports
import httpx

# Internal imports
from solana_analytics.clients.base_client import BaseHTTPClient
from solana_analytics.config import MarketConfig, RetryConfig, get_market_config
from solana_analytics.logging_config import get_logger
from solana_analytics.models.token import PriceChanges, PriceSnapshot, TokenIdentity
from solana_analytics.services.cache_service import TimedCache
from solana_analytics.utils.errors import (
    DataUnavailableError,
    InvalidInputError,
    NotFoundError,
    UpstreamError,
)

# Get logger
logger = get_logger(__name__)

# Query flags for the simple price endpoint
PRICE_QUERY_FLAGS = {
    "vs_currencies": "usd",
    "include_24hr_vol": "true",
    "include_24hr_change": "true",
    "include_market_cap": "true",
    "include_price_change_percentage_1h_in_currency": "true",
    "include_price_change_percentage_7d_in_currency": "true",
    "include_price_change_percentage_14d_in_currency": "true",
    "include_price_change_percentage_30d_in_currency": "true",
}


def find_token(tokens: List[TokenIdentity], search_term: str) -> Optional[TokenIdentity]:
    """Resolve a search term against the token list.

    Exact id match wins over exact symbol match, which wins over exact name
    match. Comparison is case-insensitive and the first entry in each tier
    is returned.

    Args:
        tokens: The coin list
        search_term: Free-text id, symbol or name

    Returns:
        The matching identity, or None
    """
    needle = search_term.strip().lower()

    for token in tokens:
        if token.id.lower() == needle:
            return token
    for token in tokens:
        if token.symbol.lower() == needle:
            return token
    for token in tokens:
        if token.name.lower() == needle:
            return token
    return None


class MarketClient(BaseHTTPClient):
    """Client for the CoinGecko market data API."""

    def __init__(
        self,
        token_list_cache: TimedCache,
        config: Optional[MarketConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the market client.

        Args:
            token_list_cache: Cache holding the coin list
            config: Market configuration. Defaults to environment-based config.
            retry_config: Retry policy settings
            http_client: Optional pre-built HTTP client
        """
        self.config = config or get_market_config()
        super().__init__(
            timeout=self.config.timeout,
            retry_config=retry_config,
            http_client=http_client
        )
        self.token_list_cache = token_list_cache

    @property
    def headers(self) -> Dict[str, str]:
        """Request headers, including the demo API key when configured."""
        if self.config.has_api_key:
            return {"x-cg-demo-api-key": self.config.api_key}
        return {}

    async def fetch_token_list(self) -> List[TokenIdentity]:
        """Fetch the full coin list, bypassing the cache.

        Raises:
            UpstreamError: If the request fails after retries
        """
        url = f"{self.config.base_url}/coins/list"

        async def _fetch() -> List[TokenIdentity]:
            data = await self._request_json("GET", url, headers=self.headers)
            if not isinstance(data, list):
                raise UpstreamError("Failed to fetch token list: unexpected response format", endpoint=url)
            return [
                TokenIdentity(id=item["id"], symbol=item["symbol"], name=item["name"])
                for item in data
                if isinstance(item, dict) and {"id", "symbol", "name"} <= item.keys()
            ]

        tokens = await self._with_retry(_fetch, operation_name="coins/list")
        logger.info(f"Fetched token list with {len(tokens)} entries")
        return tokens

    async def get_token_list(self) -> List[TokenIdentity]:
        """Get the coin list from the cache, refetching it once expired."""
        return await self.token_list_cache.get_or_fetch(self.fetch_token_list)

    async def resolve_identity(self, search_term: str) -> Optional[TokenIdentity]:
        """Resolve an id, symbol or name to a token identity.

        Args:
            search_term: Free-text id, symbol or name

        Returns:
            The identity, or None if nothing matches
        """
        if not search_term or not search_term.strip():
            raise InvalidInputError("Token identifier must not be empty")
        tokens = await self.get_token_list()
        return find_token(tokens, search_term)

    async def get_price_snapshot(self, search_term: str) -> PriceSnapshot:
        """Get current market data for a token.

        Args:
            search_term: Free-text id, symbol or name

        Returns:
            A fresh price snapshot

        Raises:
            NotFoundError: If the search term does not resolve
            DataUnavailableError: If the token resolves but has no price entry
            UpstreamError: If a request fails after retries
        """
        identity = await self.resolve_identity(search_term)
        if identity is None:
            raise NotFoundError(
                f'Token "{search_term}" not found. Try using the token\'s ID (e.g., "bitcoin"), '
                f'symbol (e.g., "btc"), or name (e.g., "Bitcoin").',
                details={"search_term": search_term}
            )

        url = f"{self.config.base_url}/simple/price"
        params = {"ids": identity.id, **PRICE_QUERY_FLAGS}
        data = await self._with_retry(
            lambda: self._request_json("GET", url, params=params, headers=self.headers),
            operation_name="simple/price"
        )

        price_data: Optional[Dict[str, Any]] = data.get(identity.id) if isinstance(data, dict) else None
        if not price_data or price_data.get("usd") is None:
            raise DataUnavailableError("Token price data not found", details={"token_id": identity.id})

        return PriceSnapshot(
            identity=identity,
            current_price=price_data["usd"],
            price_changes=PriceChanges(
                last_hour=price_data.get("usd_1h_change"),
                last_24_hours=price_data.get("usd_24h_change"),
                last_7_days=price_data.get("usd_7d_change"),
                last_14_days=price_data.get("usd_14d_change"),
                last_30_days=price_data.get("usd_30d_change"),
            ),
            volume_24h=price_data.get("usd_24h_vol"),
            market_cap=price_data.get("usd_market_cap"),
            fetched_at=datetime.now(timezone.utc),
        )
