"""Upstream clients for Solana Analytics."""

from solana_analytics.clients.base_client import BaseHTTPClient
from solana_analytics.clients.market_client import MarketClient
from solana_analytics.clients.news_client import NewsClient
from solana_analytics.clients.solana_client import SolanaClient

__all__ = [
    "BaseHTTPClient",
    "MarketClient",
    "NewsClient",
    "SolanaClient",
]
