"""
Transaction data models for Solana Analytics.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from solana_analytics.constants import LAMPORTS_PER_SOL


class TransactionType(str, Enum):
    """Coarse transaction category derived from log text."""

    DEFI = "DeFi"
    NFT = "NFT"
    TOKEN_TRANSFER = "Token Transfer"
    UNKNOWN = "Unknown"


class TransactionStatus(str, Enum):
    """Execution outcome of a transaction."""

    SUCCESS = "Success"
    FAILED = "Failed"


class LedgerTransaction(BaseModel):
    """
    A recent transaction touching an address, classified once at parse time.
    """
    signature: str
    timestamp: Optional[int] = None
    classified_type: TransactionType = TransactionType.UNKNOWN
    lamport_delta: int = 0
    counterparty_program_ids: List[str] = Field(default_factory=list)
    status: TransactionStatus = TransactionStatus.SUCCESS

    @property
    def sol_delta(self) -> float:
        """Balance change of the fee payer, in SOL."""
        return self.lamport_delta / LAMPORTS_PER_SOL

    @property
    def timestamp_iso(self) -> Optional[str]:
        """Block time as an ISO-8601 UTC string."""
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat()
