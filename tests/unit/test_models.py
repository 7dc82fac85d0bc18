"""Unit tests for result and request models."""

import pytest

from solana_analytics.models.requests import (
    AddressActivityRequest,
    CryptoNewsRequest,
    TokenRiskRequest,
    parse_params,
)
from solana_analytics.models.results import FetchResult
from solana_analytics.models.transaction import LedgerTransaction
from solana_analytics.utils.errors import InvalidInputError
from tests.fixtures.common import TOKEN_ADDRESS, WALLET_ADDRESS, make_article


class TestFetchResult:
    """Test suite for the tagged fetch result."""

    def test_ok(self):
        result = FetchResult.ok(0.0)

        assert result.value == 0.0
        assert not result.is_degraded

    def test_degraded_keeps_reason(self):
        result = FetchResult.degraded(0.0, "timeout")

        assert result.value == 0.0
        assert result.is_degraded
        assert result.reason == "timeout"

    def test_degraded_without_reason(self):
        assert FetchResult.degraded([], "").reason == "unknown error"


class TestParseParams:
    """Test suite for action parameter validation."""

    def test_camel_case(self):
        request = parse_params(AddressActivityRequest, {"walletAddress": WALLET_ADDRESS, "timeRange": "30d"})

        assert request.wallet_address == WALLET_ADDRESS
        assert request.time_range == "30d"

    def test_snake_case(self):
        request = parse_params(TokenRiskRequest, {"token_address": TOKEN_ADDRESS})

        assert request.token_address == TOKEN_ADDRESS

    def test_defaults(self):
        request = parse_params(CryptoNewsRequest, None)

        assert request.category == "all"
        assert request.limit == 10

    def test_validator_message_surfaces(self):
        with pytest.raises(InvalidInputError) as exc_info:
            parse_params(TokenRiskRequest, {"tokenAddress": "abc"})

        assert exc_info.value.message == (
            "Invalid token address format. Please provide a valid Solana address."
        )
        assert exc_info.value.details == {"field": "tokenAddress"}

    def test_missing_field(self):
        with pytest.raises(InvalidInputError) as exc_info:
            parse_params(AddressActivityRequest, {})

        assert exc_info.value.details == {"field": "walletAddress"}


class TestPayloadModels:
    """Test suite for model helpers."""

    def test_sol_delta(self):
        tx = LedgerTransaction(signature="s", lamport_delta=-2_500_000_000)

        assert tx.sol_delta == -2.5

    def test_timestamp_iso_missing(self):
        assert LedgerTransaction(signature="s").timestamp_iso is None

    @pytest.mark.parametrize("category, expected", [("defi", True), ("DEFI", True), ("nft", False)])
    def test_matches_category(self, category, expected):
        article = make_article(categories=["DeFi Market"])

        assert article.matches_category(category) is expected
