"""
Analytics service for Solana Analytics.

This module provides the four action handlers. Each validates its parameter
object before any network call, runs the relevant clients, and returns a
JSON string. Failures surface as :class:`ActionError` with an
action-specific prefix and the original message kept.
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from solana_analytics.clients.market_client import MarketClient
from solana_analytics.clients.news_client import NewsClient
from solana_analytics.clients.solana_client import SolanaClient
from solana_analytics.config import RetryConfig, get_retry_config
from solana_analytics.constants import (
    ACTIVITY_TRANSACTION_LIMIT,
    RECENT_ACTIVITY_SIZE,
    RISK_TRANSACTION_LIMIT,
    TIME_RANGES,
)
from solana_analytics.models.requests import (
    AddressActivityRequest,
    CryptoNewsRequest,
    TokenPriceRequest,
    TokenRiskRequest,
    parse_params,
)
from solana_analytics.models.transaction import TransactionType
from solana_analytics.services.base_service import BaseService, handle_errors
from solana_analytics.services.cache_service import CacheService
from solana_analytics.token_risk_analyzer import TokenRiskAnalyzer
from solana_analytics.utils.errors import ActionError

TOKEN_DATA_UNAVAILABLE_MESSAGE = (
    "Unable to fetch token data. This could be due to:\n"
    "1. Invalid token address\n"
    "2. Network connectivity issues\n"
    "3. Token no longer exists\n"
    "Please verify the token address and try again."
)
RISK_RETRY_ADVICE = ". Please try again in a few moments."


def to_json(payload: Dict[str, Any]) -> str:
    """Serialize an action payload."""
    return json.dumps(payload, indent=2)


class AnalyticsService(BaseService):
    """
    Long-lived service owning the clients and the caches.

    Created once at startup and closed on shutdown.
    """

    def __init__(
        self,
        solana_client: SolanaClient,
        market_client: MarketClient,
        news_client: NewsClient,
        cache_service: CacheService,
        analyzer: Optional[TokenRiskAnalyzer] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the analytics service.

        Args:
            solana_client: Solana RPC client
            market_client: Market data client
            news_client: News aggregation client
            cache_service: Caches shared by the clients
            analyzer: Risk scoring engine
            clock: Time source for the activity window
            logger: Optional logger instance
        """
        super().__init__(logger=logger)
        self.solana_client = solana_client
        self.market_client = market_client
        self.news_client = news_client
        self.cache_service = cache_service
        self.analyzer = analyzer or TokenRiskAnalyzer()
        self.clock = clock

    @classmethod
    def create(
        cls,
        cache_service: Optional[CacheService] = None,
        retry_config: Optional[RetryConfig] = None
    ) -> "AnalyticsService":
        """Build the service and its clients from environment configuration."""
        cache_service = cache_service or CacheService()
        retry_config = retry_config or get_retry_config()
        return cls(
            solana_client=SolanaClient(retry_config=retry_config),
            market_client=MarketClient(cache_service.token_list, retry_config=retry_config),
            news_client=NewsClient(cache_service.news, retry_config=retry_config),
            cache_service=cache_service,
        )

    async def close(self) -> None:
        """Close every client."""
        await asyncio.gather(
            self.solana_client.close(),
            self.market_client.close(),
            self.news_client.close(),
        )
        self.logger.info("Analytics service closed")

    async def __aenter__(self) -> "AnalyticsService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @handle_errors("Error analyzing token")
    async def get_token_price(self, params: Optional[Mapping[str, Any]]) -> str:
        """Price and multi-window change data for a token id, symbol or name."""
        request = parse_params(TokenPriceRequest, params)

        async with self.log_timing(f"Token price for {request.token_id}"):
            snapshot = await self.market_client.get_price_snapshot(request.token_id)

        return to_json(snapshot.to_payload())

    @handle_errors("Error checking address activity")
    async def get_address_activity(self, params: Optional[Mapping[str, Any]]) -> str:
        """Balance and categorized recent activity of a wallet within a time range."""
        request = parse_params(AddressActivityRequest, params)
        address = request.wallet_address

        async with self.log_timing(f"Address activity for {address}"):
            balance, transactions = await asyncio.gather(
                self.solana_client.get_balance(address),
                self.solana_client.get_recent_transactions(address, ACTIVITY_TRANSACTION_LIMIT),
            )

        start_time = int(self.clock()) - TIME_RANGES[request.time_range]
        in_range = [
            tx for tx in transactions.value
            if tx.timestamp is not None and tx.timestamp >= start_time
        ]

        warnings = []
        if balance.is_degraded:
            warnings.append(f"Could not fetch balance: {balance.reason}")
        if transactions.is_degraded:
            warnings.append(f"Could not fetch transactions: {transactions.reason}")

        payload = {
            "totalBalance": balance.value,
            "transactionCount": len(in_range),
            "transactionTypes": {
                "defi": sum(1 for tx in in_range if tx.classified_type == TransactionType.DEFI),
                "nft": sum(1 for tx in in_range if tx.classified_type == TransactionType.NFT),
                "token": sum(1 for tx in in_range if tx.classified_type == TransactionType.TOKEN_TRANSFER),
            },
            "recentActivity": [
                {
                    "type": tx.classified_type.value,
                    "amount": tx.sol_delta,
                    "timestamp": tx.timestamp_iso,
                    "status": tx.status.value,
                }
                for tx in in_range[:RECENT_ACTIVITY_SIZE]
            ],
            "timeRange": request.time_range,
            "warnings": warnings,
        }
        return to_json(payload)

    @handle_errors("Error analyzing token risk", RISK_RETRY_ADVICE)
    async def analyze_token_risk(self, params: Optional[Mapping[str, Any]]) -> str:
        """Fraud and rug-pull risk score for a token mint."""
        request = parse_params(TokenRiskRequest, params)
        token_address = request.token_address

        async with self.log_timing(f"Token risk for {token_address}"):
            try:
                token_meta = await self.solana_client.get_on_chain_token_meta(token_address)
            except Exception as e:
                raise ActionError(
                    "Error analyzing token risk",
                    e,
                    f"\n\n{TOKEN_DATA_UNAVAILABLE_MESSAGE}"
                ) from e

            holders, transactions = await asyncio.gather(
                self.execute_with_fallback(
                    lambda: self.solana_client.get_token_holders(token_address),
                    default=[],
                    operation_name="Token holder fetch"
                ),
                self.solana_client.get_recent_transactions(token_address, RISK_TRANSACTION_LIMIT),
            )

            assessment = self.analyzer.assess(holders, transactions, token_meta)

        payload = {
            "riskScore": assessment.overall_risk_score,
            "riskLevel": assessment.risk_level.value,
            "detailedMetrics": assessment.to_metrics(),
            "summary": self.analyzer.build_summary(assessment),
        }
        return to_json(payload)

    @handle_errors("Error fetching crypto news")
    async def get_crypto_news(self, params: Optional[Mapping[str, Any]]) -> str:
        """Latest deduplicated news with trending topics, filtered by category."""
        request = parse_params(CryptoNewsRequest, params)

        async with self.log_timing(f"Crypto news for {request.category}"):
            digest = await self.news_client.get_aggregated_news()

        articles = digest.articles
        if request.category != "all":
            articles = [article for article in articles if article.matches_category(request.category)]
        articles = articles[:request.limit]

        payload = {
            "summary": {
                "totalResults": digest.total_results,
                "category": request.category,
                "trendingTopics": list(digest.trending_topics),
                "lastUpdated": digest.last_updated.isoformat(),
            },
            "articles": [article.to_payload() for article in articles],
        }
        return to_json(payload)
