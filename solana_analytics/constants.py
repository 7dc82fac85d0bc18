"""Constants used throughout the Solana Analytics application.

This module defines common constants to avoid duplication and ensure consistency.
"""

LAMPORTS_PER_SOL = 1_000_000_000

SECONDS_PER_DAY = 86400

# Look-back windows for the address-activity action, in seconds
TIME_RANGES = {
    "24h": SECONDS_PER_DAY,
    "7d": 7 * SECONDS_PER_DAY,
    "30d": 30 * SECONDS_PER_DAY,
}
DEFAULT_TIME_RANGE = "7d"

# Transaction windows fetched by the actions
ACTIVITY_TRANSACTION_LIMIT = 20
RISK_TRANSACTION_LIMIT = 100
RECENT_ACTIVITY_SIZE = 5

# Log keywords used to classify transactions, checked in this order
DEFI_KEYWORDS = ("swap", "liquidity")
NFT_KEYWORDS = ("nft", "mint")
TOKEN_TRANSFER_KEYWORDS = ("token", "transfer")

# News categories accepted by the news action
NEWS_CATEGORIES = ("all", "defi", "nft", "web3", "trading")
DEFAULT_NEWS_LIMIT = 10
MAX_NEWS_LIMIT = 20

NEWS_API_QUERY = '(web3 OR blockchain OR cryptocurrency OR "crypto" OR "defi" OR "nft")'
NEWS_API_CATEGORIES = ("web3", "blockchain")
NEWS_SUMMARY_FALLBACK_LENGTH = 200

TRENDING_TOPIC_COUNT = 5
TRENDING_MIN_WORD_LENGTH = 4
TRENDING_STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at",
    "to", "for", "with", "by", "about", "as", "of",
})

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "solana-analytics/0.1",
}
