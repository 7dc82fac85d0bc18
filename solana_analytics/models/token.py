"""
Token data models for Solana Analytics.

This module defines Pydantic models for token-related data structures:
resolved market identities, price snapshots, on-chain mint metadata and
holder distribution entries.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenIdentity(BaseModel):
    """
    Canonical token record from the market data provider's coin list.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    name: str


class PriceChanges(BaseModel):
    """
    Signed percentage price changes over several windows.
    """
    last_hour: Optional[float] = None
    last_24_hours: Optional[float] = None
    last_7_days: Optional[float] = None
    last_14_days: Optional[float] = None
    last_30_days: Optional[float] = None


class PriceSnapshot(BaseModel):
    """
    Point-in-time market data for a resolved token. Never cached.
    """
    identity: TokenIdentity
    current_price: float = Field(ge=0)
    price_changes: PriceChanges = Field(default_factory=PriceChanges)
    volume_24h: Optional[float] = None
    market_cap: Optional[float] = None
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict:
        """Render the snapshot in the action's JSON shape."""
        return {
            "name": self.identity.name,
            "symbol": self.identity.symbol.upper(),
            "currentPrice": self.current_price,
            "priceChanges": {
                "lastHour": self.price_changes.last_hour,
                "last24Hours": self.price_changes.last_24_hours,
                "last7Days": self.price_changes.last_7_days,
                "last14Days": self.price_changes.last_14_days,
                "last30Days": self.price_changes.last_30_days,
            },
            "marketData": {
                "volume24h": self.volume_24h,
                "marketCap": self.market_cap,
            },
            "lastUpdated": self.fetched_at.isoformat(),
            "tokenId": self.identity.id,
        }


class OnChainTokenMeta(BaseModel):
    """
    Parsed SPL mint account data.

    A non-null mint authority means supply can be inflated; a non-null
    freeze authority means holder accounts can be frozen. Both are risk
    signals, not failures.
    """
    supply: int
    decimals: int
    mint_authority: Optional[str] = None
    freeze_authority: Optional[str] = None


class TokenHolder(BaseModel):
    """
    One of the largest token accounts for a mint.

    ``percentage_of_observed_supply`` is relative to the sum of the
    enumerated holder set (the largest accounts the RPC node returns),
    not to the true circulating supply. It overstates concentration for
    tokens with a long tail of small holders.
    """
    address: str
    raw_balance: int
    percentage_of_observed_supply: float = Field(ge=0)
