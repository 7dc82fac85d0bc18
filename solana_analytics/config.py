"""Configuration module for Solana Analytics."""

# Standard library imports
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

# Third-party library imports
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

PUBLIC_MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
ALCHEMY_RPC_URL_TEMPLATE = "https://solana-mainnet.g.alchemy.com/v2/{api_key}"


def get_env_var(key: str, default: Any = None, required: bool = False,
                validator: Optional[callable] = None) -> Any:
    """Get and validate environment variable.

    Args:
        key: Environment variable name
        default: Default value if not present
        required: If True, raises ValueError when not found
        validator: Optional validation function

    Returns:
        The environment variable value or default

    Raises:
        ValueError: If required and not found, or fails validation
    """
    value = os.environ.get(key)

    if value is None or value == "":
        if required:
            raise ValueError(f"Required environment variable '{key}' not found")
        return default

    if validator:
        try:
            return validator(value)
        except Exception as e:
            raise ValueError(f"Invalid value for environment variable '{key}': {str(e)}")

    return value


def bool_validator(value: str) -> bool:
    """Validate and convert string to boolean."""
    return value.lower() in ("true", "1", "yes", "y", "on")


def int_validator(value: str) -> int:
    """Validate and convert string to integer.

    Raises:
        ValueError: If not a valid integer
    """
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid integer")


def float_validator(value: str) -> float:
    """Validate and convert string to a non-negative float.

    Raises:
        ValueError: If not a valid number or negative
    """
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid number")
    if number < 0:
        raise ValueError(f"'{value}' must not be negative")
    return number


def url_validator(value: str) -> str:
    """Validate URL format.

    Raises:
        ValueError: If not a valid URL format
    """
    url_pattern = re.compile(
        r'^(https?):\/\/'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    if not url_pattern.match(value):
        raise ValueError(f"'{value}' is not a valid URL")
    return value


def commitment_validator(value: str) -> str:
    """Validate Solana commitment level.

    Raises:
        ValueError: If not a valid commitment level
    """
    valid_commitments = ("processed", "confirmed", "finalized")
    if value.lower() not in valid_commitments:
        raise ValueError(f"Commitment must be one of: {', '.join(valid_commitments)}")
    return value.lower()


def log_level_validator(value: str) -> str:
    """Validate log level.

    Raises:
        ValueError: If not a valid log level
    """
    valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    upper_value = value.upper()
    if upper_value not in valid_levels:
        raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
    return upper_value


def transport_validator(value: str) -> str:
    """Validate server transport.

    Raises:
        ValueError: If not a supported transport
    """
    valid_transports = ("stdio", "sse", "rest")
    if value.lower() not in valid_transports:
        raise ValueError(f"Transport must be one of: {', '.join(valid_transports)}")
    return value.lower()


@dataclass
class SolanaConfig:
    """Configuration for Solana RPC connection."""

    rpc_url: str
    commitment: str = "confirmed"
    timeout: float = 15.0  # seconds, per request


def _default_rpc_url() -> str:
    alchemy_key = get_env_var("ALCHEMY_API_KEY")
    if alchemy_key:
        return ALCHEMY_RPC_URL_TEMPLATE.format(api_key=alchemy_key)
    return PUBLIC_MAINNET_RPC_URL


@lru_cache()
def get_solana_config() -> SolanaConfig:
    """Get Solana configuration from environment variables.

    Returns:
        SolanaConfig instance

    Raises:
        ValueError: If environment variables fail validation
    """
    return SolanaConfig(
        rpc_url=get_env_var("SOLANA_RPC_URL", _default_rpc_url(), validator=url_validator),
        commitment=get_env_var("SOLANA_COMMITMENT", "confirmed",
                               validator=commitment_validator),
        timeout=get_env_var("SOLANA_TIMEOUT", 15.0, validator=float_validator)
    )


@dataclass
class MarketConfig:
    """Configuration for the market data provider (CoinGecko)."""

    base_url: str = "https://api.coingecko.com/api/v3"
    api_key: Optional[str] = None
    timeout: float = 15.0

    @property
    def has_api_key(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)


@lru_cache()
def get_market_config() -> MarketConfig:
    """Get market data configuration from environment variables."""
    return MarketConfig(
        base_url=get_env_var("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3",
                             validator=url_validator),
        api_key=get_env_var("COINGECKO_API_KEY"),
        timeout=get_env_var("MARKET_TIMEOUT", 15.0, validator=float_validator)
    )


@dataclass
class NewsConfig:
    """Configuration for the news providers."""

    cryptocompare_api_key: Optional[str] = None
    news_api_key: Optional[str] = None
    cryptocompare_url: str = "https://min-api.cryptocompare.com/data/v2/news/"
    news_api_url: str = "https://newsapi.org/v2/everything"
    page_size: int = 20
    timeout: float = 15.0


@lru_cache()
def get_news_config() -> NewsConfig:
    """Get news provider configuration from environment variables."""
    return NewsConfig(
        cryptocompare_api_key=get_env_var("CRYPTOCOMPARE_API_KEY"),
        news_api_key=get_env_var("NEWS_API_KEY"),
        cryptocompare_url=get_env_var("CRYPTOCOMPARE_NEWS_URL",
                                      "https://min-api.cryptocompare.com/data/v2/news/",
                                      validator=url_validator),
        news_api_url=get_env_var("NEWS_API_URL", "https://newsapi.org/v2/everything",
                                 validator=url_validator),
        page_size=get_env_var("NEWS_PAGE_SIZE", 20, validator=int_validator),
        timeout=get_env_var("NEWS_TIMEOUT", 15.0, validator=float_validator)
    )


@dataclass
class RetryConfig:
    """Configuration for the shared retry policy."""

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds, multiplied by the attempt number

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.max_attempts < 1:
            raise ValueError(f"Invalid max_attempts: {self.max_attempts}")


@lru_cache()
def get_retry_config() -> RetryConfig:
    """Get retry configuration from environment variables."""
    return RetryConfig(
        max_attempts=get_env_var("RETRY_MAX_ATTEMPTS", 3, validator=int_validator),
        base_delay=get_env_var("RETRY_BASE_DELAY", 1.0, validator=float_validator)
    )


@dataclass
class CacheConfig:
    """Configuration for caching."""

    token_list_ttl: float = 3600.0  # seconds
    news_ttl: float = 300.0  # seconds


@lru_cache()
def get_cache_config() -> CacheConfig:
    """Get cache configuration from environment variables."""
    return CacheConfig(
        token_list_ttl=get_env_var("TOKEN_LIST_CACHE_TTL", 3600.0, validator=float_validator),
        news_ttl=get_env_var("NEWS_CACHE_TTL", 300.0, validator=float_validator)
    )


@dataclass
class ServerConfig:
    """Configuration for the server."""

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    transport: str = "stdio"  # "stdio", "sse" or "rest"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.environment not in ("development", "testing", "staging", "production"):
            raise ValueError(f"Invalid environment: {self.environment}")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.transport not in ("stdio", "sse", "rest"):
            raise ValueError(f"Invalid transport: {self.transport}")


@lru_cache()
def get_server_config() -> ServerConfig:
    """Get server configuration from environment variables.

    Raises:
        ValueError: If environment variables fail validation
    """
    return ServerConfig(
        host=get_env_var("HOST", "0.0.0.0"),
        port=get_env_var("PORT", 8000, validator=int_validator),
        debug=get_env_var("DEBUG", False, validator=bool_validator),
        environment=get_env_var("ENVIRONMENT", "development"),
        log_level=get_env_var("LOG_LEVEL", "INFO", validator=log_level_validator),
        transport=get_env_var("TRANSPORT", "stdio", validator=transport_validator)
    )
