"""Data models for Solana Analytics."""

from solana_analytics.models.news import NewsArticle, NewsDigest, Sentiment
from solana_analytics.models.requests import (
    AddressActivityRequest,
    CryptoNewsRequest,
    TokenPriceRequest,
    TokenRiskRequest,
    parse_params,
)
from solana_analytics.models.results import FetchResult
from solana_analytics.models.risk import RiskAssessment, RiskLevel, SubScore
from solana_analytics.models.token import (
    OnChainTokenMeta,
    PriceChanges,
    PriceSnapshot,
    TokenHolder,
    TokenIdentity,
)
from solana_analytics.models.transaction import (
    LedgerTransaction,
    TransactionStatus,
    TransactionType,
)

__all__ = [
    "AddressActivityRequest",
    "CryptoNewsRequest",
    "FetchResult",
    "LedgerTransaction",
    "NewsArticle",
    "NewsDigest",
    "OnChainTokenMeta",
    "PriceChanges",
    "PriceSnapshot",
    "RiskAssessment",
    "RiskLevel",
    "Sentiment",
    "SubScore",
    "TokenHolder",
    "TokenIdentity",
    "TokenPriceRequest",
    "TokenRiskRequest",
    "TransactionStatus",
    "TransactionType",
    "parse_params",
]
