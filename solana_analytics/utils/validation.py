"""Validation utilities for Solana Analytics.

This module provides utilities for validating Solana-specific data.
"""

import re
from typing import Any

import base58

from solana_analytics.utils.errors import InvalidPublicKeyError

# Solana public key validation pattern (base58 format)
PUBKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

# Public keys are ed25519 points: exactly 32 bytes once decoded
PUBKEY_LENGTH = 32


def validate_public_key(pubkey: Any) -> bool:
    """Validate a Solana public key.

    The string must use the base58 alphabet and decode to exactly
    32 bytes. No network access is involved.

    Args:
        pubkey: The public key to validate

    Returns:
        True if the public key is valid, False otherwise
    """
    if not pubkey or not isinstance(pubkey, str):
        return False
    if not PUBKEY_PATTERN.match(pubkey):
        return False
    try:
        return len(base58.b58decode(pubkey)) == PUBKEY_LENGTH
    except ValueError:
        return False


def validate_solana_address(address: Any, field_name: str = "address") -> str:
    """Validate a Solana address and raise an exception if invalid.

    Args:
        address: The address to validate
        field_name: Name of the field for the error message

    Returns:
        The address, unchanged

    Raises:
        InvalidPublicKeyError: If the address is invalid
    """
    if not validate_public_key(address):
        raise InvalidPublicKeyError(address, field_name=field_name)
    return address
