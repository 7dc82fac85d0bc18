"""Common test fixtures for Solana Analytics tests.

This module provides fixtures that can be reused across different test modules.
"""

import json
from datetime import datetime, timezone
from typing import Callable, List, Optional

import httpx
import pytest
from unittest.mock import AsyncMock

from solana_analytics.clients.market_client import MarketClient
from solana_analytics.clients.news_client import NewsClient
from solana_analytics.clients.solana_client import SolanaClient
from solana_analytics.config import (
    CacheConfig,
    MarketConfig,
    NewsConfig,
    RetryConfig,
    SolanaConfig,
)
from solana_analytics.models.news import NewsArticle, Sentiment
from solana_analytics.models.results import FetchResult
from solana_analytics.models.token import OnChainTokenMeta, TokenHolder
from solana_analytics.models.transaction import (
    LedgerTransaction,
    TransactionStatus,
    TransactionType,
)
from solana_analytics.services.analytics_service import AnalyticsService
from solana_analytics.services.cache_service import CacheService

# Real mainnet addresses, valid base58 public keys
TOKEN_ADDRESS = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
WALLET_ADDRESS = "So11111111111111111111111111111111111111112"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
MEMO_PROGRAM_ID = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"

RPC_URL = "https://rpc.test"
NOW = 1_700_000_000


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def mock_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """HTTP client whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def rpc_method(request: httpx.Request) -> str:
    """JSON-RPC method name of a request."""
    return json.loads(request.content)["method"]


def rpc_params(request: httpx.Request) -> list:
    """JSON-RPC params of a request."""
    return json.loads(request.content)["params"]


def rpc_result(result) -> httpx.Response:
    """Successful JSON-RPC response."""
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})


def make_transaction(
    signature: str = "sig",
    timestamp: Optional[int] = NOW,
    classified_type: TransactionType = TransactionType.UNKNOWN,
    lamport_delta: int = 0,
    programs: Optional[List[str]] = None,
    status: TransactionStatus = TransactionStatus.SUCCESS,
) -> LedgerTransaction:
    """Build a parsed transaction for tests."""
    return LedgerTransaction(
        signature=signature,
        timestamp=timestamp,
        classified_type=classified_type,
        lamport_delta=lamport_delta,
        counterparty_program_ids=programs or [],
        status=status,
    )


def make_holders(*percentages: float) -> List[TokenHolder]:
    """Build holder entries with the given observed-supply percentages."""
    return [
        TokenHolder(
            address=f"holder{i}",
            raw_balance=int(pct * 1000),
            percentage_of_observed_supply=pct,
        )
        for i, pct in enumerate(percentages)
    ]


def make_article(
    title: str = "Solana validators ship upgrade",
    url: str = "https://news.test/a",
    published_at: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
    categories: Optional[List[str]] = None,
    summary: str = "",
    sentiment: Sentiment = Sentiment.NEUTRAL,
) -> NewsArticle:
    """Build a normalized article for tests."""
    return NewsArticle(
        title=title,
        summary=summary,
        source="test",
        url=url,
        published_at=published_at,
        categories=categories or [],
        sentiment=sentiment,
    )


@pytest.fixture
def clock():
    """Manually advanced clock starting at ``NOW``."""
    return FakeClock()


@pytest.fixture
def fast_retry():
    """Retry policy without backoff delay."""
    return RetryConfig(max_attempts=3, base_delay=0.0)


@pytest.fixture
def cache_service(clock):
    """Cache service driven by the fake clock."""
    return CacheService(CacheConfig(token_list_ttl=3600.0, news_ttl=300.0), clock=clock)


@pytest.fixture
def solana_config():
    """Solana configuration pointing at a fake RPC endpoint."""
    return SolanaConfig(rpc_url=RPC_URL, commitment="confirmed", timeout=5.0)


@pytest.fixture
def market_config():
    """Market configuration pointing at a fake CoinGecko."""
    return MarketConfig(base_url="https://market.test/api/v3", api_key=None, timeout=5.0)


@pytest.fixture
def news_config():
    """News configuration with both provider keys set."""
    return NewsConfig(
        cryptocompare_api_key="cc-key",
        news_api_key="na-key",
        cryptocompare_url="https://cryptocompare.test/data/v2/news/",
        news_api_url="https://newsapi.test/v2/everything",
        page_size=20,
        timeout=5.0,
    )


@pytest.fixture
def token_meta():
    """Mint metadata with both authorities revoked."""
    return OnChainTokenMeta(supply=1_000_000, decimals=6, mint_authority=None, freeze_authority=None)


@pytest.fixture
def mock_solana_client(token_meta):
    """Create a mock Solana client."""
    client = AsyncMock(spec=SolanaClient)
    client.get_balance.return_value = FetchResult.ok(1.5)
    client.get_recent_transactions.return_value = FetchResult.ok([])
    client.get_on_chain_token_meta.return_value = token_meta
    client.get_token_holders.return_value = make_holders(20.0, 20.0, 20.0, 20.0, 20.0)
    return client


@pytest.fixture
def mock_market_client():
    """Create a mock market client."""
    return AsyncMock(spec=MarketClient)


@pytest.fixture
def mock_news_client():
    """Create a mock news client."""
    return AsyncMock(spec=NewsClient)


@pytest.fixture
def analytics_service(mock_solana_client, mock_market_client, mock_news_client, cache_service, clock):
    """Create an AnalyticsService with mock dependencies."""
    return AnalyticsService(
        solana_client=mock_solana_client,
        market_client=mock_market_client,
        news_client=mock_news_client,
        cache_service=cache_service,
        clock=clock,
    )
