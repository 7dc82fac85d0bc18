"""Unit tests for the MCP server tools and the command-line entry point."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from solana_analytics import server
from solana_analytics.actions import ACTIONS
from solana_analytics.models.results import FetchResult
from tests.fixtures.common import WALLET_ADDRESS


@pytest.fixture
def ctx(analytics_service):
    """Tool context whose lifespan holds the mocked analytics service."""
    context = MagicMock()
    context.request_context.lifespan_context.analytics_service = analytics_service
    return context


class TestTools:
    """Test suite for the MCP tool functions."""

    @pytest.mark.asyncio
    async def test_tools_registered_under_action_names(self):
        tools = await server.app.list_tools()

        assert sorted(tool.name for tool in tools) == sorted(action.name for action in ACTIONS)

    @pytest.mark.asyncio
    async def test_address_activity_tool(self, ctx, mock_solana_client):
        mock_solana_client.get_recent_transactions.return_value = FetchResult.ok([])

        result = json.loads(await server.get_address_activity(ctx, WALLET_ADDRESS, "24h"))

        assert result["timeRange"] == "24h"
        mock_solana_client.get_balance.assert_awaited_once_with(WALLET_ADDRESS)

    @pytest.mark.asyncio
    async def test_news_tool_surfaces_action_error(self, ctx, mock_news_client):
        mock_news_client.get_aggregated_news.side_effect = RuntimeError("offline")

        with pytest.raises(Exception, match="Error fetching crypto news: offline"):
            await server.get_latest_crypto_news(ctx, "nft", 5)


class TestRunServer:
    """Test suite for the command-line entry point."""

    def test_rest_transport_runs_uvicorn(self):
        with patch("solana_analytics.server.uvicorn.run") as mock_run:
            result = CliRunner().invoke(server.run_server, ["--transport", "rest", "--port", "9001"])

        assert result.exit_code == 0
        assert mock_run.call_args.kwargs["port"] == 9001

    def test_stdio_transport(self):
        with patch.object(server.app, "run") as mock_run:
            result = CliRunner().invoke(server.run_server, ["--transport", "stdio"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with(transport="stdio")

    def test_rejects_unknown_transport(self):
        result = CliRunner().invoke(server.run_server, ["--transport", "grpc"])

        assert result.exit_code != 0
