"""Solana Analytics MCP server implementation using FastMCP."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Literal, Optional

import click
import uvicorn
from mcp.server.fastmcp import Context, FastMCP

from solana_analytics.actions import (
    ADDRESS_ACTIVITY_ACTION,
    CRYPTO_NEWS_ACTION,
    TOKEN_PRICE_ACTION,
    TOKEN_RISK_ACTION,
)
from solana_analytics.app import create_application
from solana_analytics.config import get_server_config
from solana_analytics.constants import DEFAULT_NEWS_LIMIT, DEFAULT_TIME_RANGE
from solana_analytics.logging_config import configure_logging
from solana_analytics.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context for the Solana Analytics MCP server."""

    analytics_service: AnalyticsService


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Create the analytics service for the server's lifetime.

    Args:
        server: The FastMCP server instance.

    Yields:
        The application context.
    """
    logger.info("Starting Solana Analytics server lifespan...")
    async with AnalyticsService.create() as analytics_service:
        logger.info("Analytics service initialized successfully")
        yield AppContext(analytics_service=analytics_service)
    logger.info("Application shutdown complete")


# Create the FastMCP server with the analytics lifespan
app = FastMCP("solana-analytics", lifespan=app_lifespan)


def _service(ctx: Context) -> AnalyticsService:
    return ctx.request_context.lifespan_context.analytics_service


@app.tool(name=TOKEN_PRICE_ACTION.name, description=TOKEN_PRICE_ACTION.description)
async def get_token_price_with_sentiment(ctx: Context, token_id: str) -> str:
    """Get price data for a token id, symbol or name.

    Args:
        ctx: The request context
        token_id: Token identifier, e.g. "bitcoin", "btc" or "Bitcoin"

    Returns:
        JSON price snapshot
    """
    return await TOKEN_PRICE_ACTION.invoke(_service(ctx), {"token_id": token_id})


@app.tool(name=ADDRESS_ACTIVITY_ACTION.name, description=ADDRESS_ACTIVITY_ACTION.description)
async def get_address_activity(
    ctx: Context,
    wallet_address: str,
    time_range: Literal["24h", "7d", "30d"] = DEFAULT_TIME_RANGE
) -> str:
    """Get recent activity of a Solana wallet.

    Args:
        ctx: The request context
        wallet_address: Base58 wallet address
        time_range: Look-back window

    Returns:
        JSON activity summary
    """
    return await ADDRESS_ACTIVITY_ACTION.invoke(
        _service(ctx),
        {"wallet_address": wallet_address, "time_range": time_range}
    )


@app.tool(name=TOKEN_RISK_ACTION.name, description=TOKEN_RISK_ACTION.description)
async def analyze_token_risk(ctx: Context, token_address: str) -> str:
    """Score a Solana token for fraud and rug-pull risk.

    Args:
        ctx: The request context
        token_address: Base58 mint address

    Returns:
        JSON risk assessment
    """
    return await TOKEN_RISK_ACTION.invoke(_service(ctx), {"token_address": token_address})


@app.tool(name=CRYPTO_NEWS_ACTION.name, description=CRYPTO_NEWS_ACTION.description)
async def get_latest_crypto_news(
    ctx: Context,
    category: Literal["all", "defi", "nft", "web3", "trading"] = "all",
    limit: int = DEFAULT_NEWS_LIMIT
) -> str:
    """Get the latest crypto news digest.

    Args:
        ctx: The request context
        category: Category filter
        limit: Maximum number of articles (1-20)

    Returns:
        JSON news digest
    """
    return await CRYPTO_NEWS_ACTION.invoke(
        _service(ctx),
        {"category": category, "limit": limit}
    )


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "rest"]),
    help="Transport type (stdio, sse or rest)",
)
@click.option("--port", type=int, help="Port to listen on for SSE and REST transports")
@click.option("--host", type=str, help="Host to bind to for SSE and REST transports")
def run_server(
    transport: Optional[str] = None,
    port: Optional[int] = None,
    host: Optional[str] = None,
) -> None:
    """Run the Solana Analytics server.

    Args:
        transport: Transport type. Defaults to environment setting or "stdio".
        port: Port to listen on. Defaults to environment setting or 8000.
        host: Host to bind to. Defaults to environment setting or "0.0.0.0".
    """
    config = get_server_config()

    transport = transport or config.transport
    port = port or config.port
    host = host or config.host

    configure_logging(config.log_level)
    logger.info(f"Starting server with {transport} transport")

    if transport == "rest":
        uvicorn.run(create_application(), host=host, port=port, log_level=config.log_level.lower())
    elif transport == "sse":
        app.settings.host = host
        app.settings.port = port
        app.run(transport="sse")
    else:
        app.run(transport="stdio")
