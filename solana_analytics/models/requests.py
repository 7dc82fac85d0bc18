"""Request validation models for the actions.

This module defines Pydantic models for validating action parameter objects.
Field aliases match the camelCase parameter names callers send.
"""

from typing import Any, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from solana_analytics.constants import DEFAULT_NEWS_LIMIT, MAX_NEWS_LIMIT
from solana_analytics.utils.errors import InvalidInputError
from solana_analytics.utils.validation import validate_public_key


class ActionRequest(BaseModel):
    """Base model for action parameter objects."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


RequestT = TypeVar("RequestT", bound=ActionRequest)


class TokenPriceRequest(ActionRequest):
    """Parameters for the price action."""

    token_id: str = Field(
        ...,
        alias="tokenId",
        min_length=1,
        description="Token identifier (can be the token's ID like 'bitcoin', "
                    "symbol like 'btc', or name like 'Bitcoin')"
    )

    @field_validator("token_id")
    @classmethod
    def strip_token_id(cls, value: str) -> str:
        """Reject blank identifiers."""
        value = value.strip()
        if not value:
            raise ValueError("tokenId must not be blank")
        return value


class AddressActivityRequest(ActionRequest):
    """Parameters for the address activity action."""

    wallet_address: str = Field(
        ...,
        alias="walletAddress",
        description="Solana wallet address to check activity for (must be a valid base58 address)"
    )
    time_range: Literal["24h", "7d", "30d"] = Field(
        "7d",
        alias="timeRange",
        description="Time range to check activity for (24h, 7d, or 30d)"
    )

    @field_validator("wallet_address")
    @classmethod
    def check_wallet_address(cls, value: str) -> str:
        """Validate the wallet address before any network call."""
        if not validate_public_key(value):
            raise ValueError("Invalid Solana wallet address format")
        return value


class TokenRiskRequest(ActionRequest):
    """Parameters for the token risk analysis action."""

    token_address: str = Field(
        ...,
        alias="tokenAddress",
        description="Solana token address to analyze for fraud/rugpull risk"
    )

    @field_validator("token_address")
    @classmethod
    def check_token_address(cls, value: str) -> str:
        """Validate the mint address before any network call."""
        if not validate_public_key(value):
            raise ValueError("Invalid token address format. Please provide a valid Solana address.")
        return value


class CryptoNewsRequest(ActionRequest):
    """Parameters for the news action."""

    category: Literal["all", "defi", "nft", "web3", "trading"] = Field(
        "all",
        description="Category of news to fetch (all, defi, nft, web3, or trading)"
    )
    limit: int = Field(
        DEFAULT_NEWS_LIMIT,
        ge=1,
        le=MAX_NEWS_LIMIT,
        description="Maximum number of news articles to return (1-20)"
    )


def parse_params(model: Type[RequestT], params: Optional[Mapping[str, Any]]) -> RequestT:
    """Validate an action parameter object.

    Args:
        model: Request model to validate against
        params: Raw parameter mapping, camelCase or snake_case keys

    Returns:
        The validated request

    Raises:
        InvalidInputError: If a field is missing or malformed
    """
    try:
        return model.model_validate(dict(params or {}))
    except ValidationError as e:
        first = e.errors()[0]
        message = str(first.get("msg", "Invalid parameters"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise InvalidInputError(message, details={"field": field}) from e
