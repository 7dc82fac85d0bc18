"""Unit tests for Solana address validation."""

import pytest

from solana_analytics.utils.errors import InvalidPublicKeyError
from solana_analytics.utils.validation import validate_public_key, validate_solana_address
from tests.fixtures.common import (
    MEMO_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_ADDRESS,
    TOKEN_PROGRAM_ID,
    WALLET_ADDRESS,
)


class TestValidatePublicKey:
    """Test suite for validate_public_key."""

    @pytest.mark.parametrize("address", [
        TOKEN_ADDRESS,
        WALLET_ADDRESS,
        TOKEN_PROGRAM_ID,
        SYSTEM_PROGRAM_ID,
        MEMO_PROGRAM_ID,
    ])
    def test_accepts_real_addresses(self, address):
        assert validate_public_key(address) is True

    @pytest.mark.parametrize("address", [
        "",
        None,
        12345,
        "not-an-address",
        # base58 excludes 0, O, I and l
        "0" * 32,
        "O" + TOKEN_ADDRESS[1:],
        TOKEN_ADDRESS[:20],
        TOKEN_ADDRESS + "abc",
        " " + TOKEN_ADDRESS,
    ])
    def test_rejects_malformed_addresses(self, address):
        assert validate_public_key(address) is False

    def test_rejects_wrong_decoded_length(self):
        # 44 characters of "z" decode to more than 32 bytes
        assert validate_public_key("z" * 44) is False


class TestValidateSolanaAddress:
    """Test suite for validate_solana_address."""

    def test_returns_valid_address(self):
        assert validate_solana_address(TOKEN_ADDRESS) == TOKEN_ADDRESS

    def test_raises_with_field_name(self):
        with pytest.raises(InvalidPublicKeyError) as exc_info:
            validate_solana_address("bogus", field_name="token address")

        assert exc_info.value.message == "Invalid Solana token address format: bogus"
        assert exc_info.value.details == {"field": "token address"}
