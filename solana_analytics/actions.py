"""Action registry shared by the MCP and REST surfaces."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Type

from solana_analytics.models.requests import (
    ActionRequest,
    AddressActivityRequest,
    CryptoNewsRequest,
    TokenPriceRequest,
    TokenRiskRequest,
)
from solana_analytics.services.analytics_service import AnalyticsService
from solana_analytics.utils.errors import NotFoundError


@dataclass(frozen=True)
class Action:
    """A named, described action bound to an analytics service handler."""
    name: str
    description: str
    schema: Type[ActionRequest]
    handler: str

    async def invoke(self, service: AnalyticsService, params: Optional[Mapping[str, Any]]) -> str:
        """Run the action and return its JSON result string."""
        return await getattr(service, self.handler)(params)

    def describe(self) -> Dict[str, Any]:
        """Name, description and JSON schema of the parameter object."""
        return {
            "name": self.name,
            "description": self.description,
            "schema": self.schema.model_json_schema(by_alias=True),
        }


TOKEN_PRICE_ACTION = Action(
    name="get-token-price-with-sentiment",
    description=(
        "Get detailed price data and market analysis for a token. The analysis will "
        "consider price changes across multiple timeframes (1h, 24h, 7d, 14d, 30d) and "
        "market metrics to provide insights about the token's performance."
    ),
    schema=TokenPriceRequest,
    handler="get_token_price",
)

ADDRESS_ACTIVITY_ACTION = Action(
    name="get-address-activity",
    description="Analyze a Solana wallet address for recent activity and transactions",
    schema=AddressActivityRequest,
    handler="get_address_activity",
)

TOKEN_RISK_ACTION = Action(
    name="potential-rugpull-and-fraud-token-analysis",
    description=(
        "Analyze a Solana token for potential fraud or rugpull risk by examining holder "
        "concentration, transaction patterns, and liquidity metrics"
    ),
    schema=TokenRiskRequest,
    handler="analyze_token_risk",
)

CRYPTO_NEWS_ACTION = Action(
    name="get-latest-crypto-news",
    description=(
        "Get the latest cryptocurrency and web3 news, including trending topics and "
        "sentiment analysis"
    ),
    schema=CryptoNewsRequest,
    handler="get_crypto_news",
)

ACTIONS: List[Action] = [
    TOKEN_PRICE_ACTION,
    ADDRESS_ACTIVITY_ACTION,
    TOKEN_RISK_ACTION,
    CRYPTO_NEWS_ACTION,
]

_ACTIONS_BY_NAME = {action.name: action for action in ACTIONS}


def get_action(name: str) -> Action:
    """Look up an action by name.

    Raises:
        NotFoundError: If no action has that name
    """
    try:
        return _ACTIONS_BY_NAME[name]
    except KeyError:
        raise NotFoundError(f"Unknown action: {name}", details={"action": name}) from None
