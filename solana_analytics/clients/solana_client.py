"""Solana RPC client for Solana Analytics.

This module wraps the JSON-RPC endpoint of a Solana node. Best-effort calls
(balance, recent transactions) return a :class:`FetchResult` and never raise
on upstream failure. Calls feeding risk scoring (mint metadata, largest
holders) are retried and then propagate.
"""

# Standard library imports
import asyncio
from typing import Any, Dict, List, Optional

# Third-party library imports
import httpx

# Internal imports
from solana_analytics.clients.base_client import BaseHTTPClient
from solana_analytics.config import RetryConfig, SolanaConfig, get_solana_config
from solana_analytics.constants import (
    DEFI_KEYWORDS,
    LAMPORTS_PER_SOL,
    NFT_KEYWORDS,
    TOKEN_TRANSFER_KEYWORDS,
)
from solana_analytics.logging_config import get_logger, log_with_context
from solana_analytics.models.results import FetchResult
from solana_analytics.models.token import OnChainTokenMeta, TokenHolder
from solana_analytics.models.transaction import (
    LedgerTransaction,
    TransactionStatus,
    TransactionType,
)
from solana_analytics.utils.errors import (
    DataUnavailableError,
    NotFoundError,
    UpstreamError,
)
from solana_analytics.utils.validation import validate_solana_address

# Get logger
logger = get_logger(__name__)


def classify_transaction(log_messages: Optional[List[str]]) -> TransactionType:
    """Classify a transaction from its log text.

    Keyword groups are checked in priority order (DeFi, NFT, token
    transfer) and the first match wins.

    Args:
        log_messages: The transaction's log messages, if any

    Returns:
        The transaction type
    """
    if not log_messages:
        return TransactionType.UNKNOWN

    logs = " ".join(log_messages).lower()
    if any(keyword in logs for keyword in DEFI_KEYWORDS):
        return TransactionType.DEFI
    if any(keyword in logs for keyword in NFT_KEYWORDS):
        return TransactionType.NFT
    if any(keyword in logs for keyword in TOKEN_TRANSFER_KEYWORDS):
        return TransactionType.TOKEN_TRANSFER
    return TransactionType.UNKNOWN


def _account_key(key: Any) -> str:
    # jsonParsed responses give {"pubkey": ...}, json responses give plain strings
    if isinstance(key, dict):
        return str(key.get("pubkey", ""))
    return str(key)


def parse_transaction(
    signature: str,
    block_time: Optional[int],
    tx: Optional[Dict[str, Any]],
    address: str
) -> LedgerTransaction:
    """Build a LedgerTransaction from a getTransaction result.

    A missing transaction body yields an unclassified entry so that the
    signature order of the window is preserved.

    Args:
        signature: Transaction signature
        block_time: Block time from the signature listing
        tx: The getTransaction result, or None
        address: The queried address, excluded from counterparties

    Returns:
        The parsed transaction
    """
    if not tx:
        return LedgerTransaction(signature=signature, timestamp=block_time)

    meta = tx.get("meta") or {}
    message = (tx.get("transaction") or {}).get("message") or {}
    account_keys = [_account_key(key) for key in message.get("accountKeys", [])]

    pre_balances = meta.get("preBalances") or []
    post_balances = meta.get("postBalances") or []
    lamport_delta = 0
    if pre_balances and post_balances:
        lamport_delta = post_balances[0] - pre_balances[0]

    return LedgerTransaction(
        signature=signature,
        timestamp=block_time if block_time is not None else tx.get("blockTime"),
        classified_type=classify_transaction(meta.get("logMessages")),
        lamport_delta=lamport_delta,
        counterparty_program_ids=[key for key in account_keys if key and key != address],
        status=TransactionStatus.FAILED if meta.get("err") else TransactionStatus.SUCCESS,
    )


class SolanaClient(BaseHTTPClient):
    """Client for the Solana JSON-RPC endpoint."""

    def __init__(
        self,
        config: Optional[SolanaConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the Solana client.

        Args:
            config: Solana configuration. Defaults to environment-based config.
            retry_config: Retry policy settings
            http_client: Optional pre-built HTTP client
        """
        self.config = config or get_solana_config()
        super().__init__(
            timeout=self.config.timeout,
            retry_config=retry_config,
            http_client=http_client
        )
        self.headers = {"Content-Type": "application/json"}

    async def _make_request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Make a single JSON-RPC request to the Solana node.

        Args:
            method: The RPC method to call
            params: The parameters to pass to the method

        Returns:
            The ``result`` member of the JSON-RPC response

        Raises:
            UpstreamError: On transport, HTTP or RPC-level failure
        """
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params or []
        }
        logger.debug(f"RPC request: method={method}")

        result = await self._request_json(
            "POST",
            self.config.rpc_url,
            headers=self.headers,
            json_body=payload
        )

        if not isinstance(result, dict):
            raise UpstreamError(f"Unexpected RPC response for {method}", endpoint=method)

        if "error" in result:
            error = result["error"] or {}
            message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            raise UpstreamError(
                f"Solana RPC error: {message}",
                endpoint=method,
                details={"rpc_error": error}
            )

        return result.get("result")

    async def _rpc(self, method: str, params: List[Any]) -> Any:
        """Make a JSON-RPC request under the retry policy."""
        return await self._with_retry(
            lambda: self._make_request(method, params),
            operation_name=method
        )

    async def get_balance(self, address: str) -> FetchResult[float]:
        """Get an account's SOL balance.

        Args:
            address: The account public key

        Returns:
            The balance in SOL, or a degraded zero balance on failure

        Raises:
            InvalidPublicKeyError: If the address is not a valid Solana public key
        """
        validate_solana_address(address)

        try:
            result = await self._rpc(
                "getBalance",
                [address, {"commitment": self.config.commitment}]
            )
            lamports = result.get("value", 0) if isinstance(result, dict) else int(result or 0)
            return FetchResult.ok(lamports / LAMPORTS_PER_SOL)
        except Exception as e:
            log_with_context(logger, "warning", "Balance fetch degraded", address=address, reason=str(e))
            return FetchResult.degraded(0.0, str(e))

    async def get_signatures_for_address(self, address: str, limit: int) -> List[Dict[str, Any]]:
        """Get the most recent signatures for an address, newest first."""
        result = await self._rpc(
            "getSignaturesForAddress",
            [address, {"limit": limit, "commitment": self.config.commitment}]
        )
        return result if isinstance(result, list) else []

    async def get_transaction(self, signature: str) -> Optional[Dict[str, Any]]:
        """Get a transaction by signature, or None if the node has no record."""
        return await self._rpc(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "json",
                    "maxSupportedTransactionVersion": 0,
                    "commitment": self.config.commitment,
                }
            ]
        )

    async def get_recent_transactions(
        self,
        address: str,
        limit: int = 10
    ) -> FetchResult[List[LedgerTransaction]]:
        """Get up to ``limit`` recent transactions touching an address.

        Transaction bodies are fetched concurrently; the returned list keeps
        the signature order (newest first). Any failure degrades the whole
        window to an empty list.

        Args:
            address: The account public key
            limit: Maximum number of transactions

        Returns:
            The parsed transactions, or a degraded empty list on failure

        Raises:
            InvalidPublicKeyError: If the address is not a valid Solana public key
        """
        validate_solana_address(address)

        try:
            signatures = await self.get_signatures_for_address(address, limit)
            bodies = await asyncio.gather(
                *[self.get_transaction(sig["signature"]) for sig in signatures]
            )
            transactions = [
                parse_transaction(sig["signature"], sig.get("blockTime"), body, address)
                for sig, body in zip(signatures, bodies)
            ]
            return FetchResult.ok(transactions)
        except Exception as e:
            log_with_context(
                logger, "warning", "Transaction fetch degraded",
                address=address, reason=str(e)
            )
            return FetchResult.degraded([], str(e))

    async def get_on_chain_token_meta(self, token_address: str) -> OnChainTokenMeta:
        """Get parsed SPL mint data for a token.

        Args:
            token_address: The mint address

        Returns:
            The mint's supply, decimals and authorities

        Raises:
            InvalidPublicKeyError: If the address is not a valid Solana public key
            NotFoundError: If the account does not exist
            DataUnavailableError: If the account is not a parsable token mint
            UpstreamError: If the RPC call fails after retries
        """
        validate_solana_address(token_address, "token address")

        result = await self._rpc(
            "getAccountInfo",
            [token_address, {"encoding": "jsonParsed", "commitment": self.config.commitment}]
        )
        value = result.get("value") if isinstance(result, dict) else None
        if value is None:
            raise NotFoundError("Token account not found", details={"address": token_address})

        data = value.get("data")
        if not isinstance(data, dict) or "parsed" not in data:
            raise DataUnavailableError("Invalid token data format", details={"address": token_address})

        info = (data.get("parsed") or {}).get("info") or {}
        try:
            return OnChainTokenMeta(
                supply=int(info.get("supply", 0)),
                decimals=int(info.get("decimals", 0)),
                mint_authority=info.get("mintAuthority"),
                freeze_authority=info.get("freezeAuthority"),
            )
        except (TypeError, ValueError) as e:
            raise DataUnavailableError("Invalid token data format", details={"address": token_address}) from e

    async def get_token_holders(self, token_address: str) -> List[TokenHolder]:
        """Get the largest holder accounts of a token.

        Percentages are relative to the sum of the returned accounts, not
        the total supply.

        Args:
            token_address: The mint address

        Returns:
            Holder entries in the order the node returns them

        Raises:
            InvalidPublicKeyError: If the address is not a valid Solana public key
            UpstreamError: If the RPC call fails after retries
        """
        validate_solana_address(token_address, "token address")

        result = await self._rpc(
            "getTokenLargestAccounts",
            [token_address, {"commitment": self.config.commitment}]
        )
        accounts = result.get("value") if isinstance(result, dict) else result
        if not isinstance(accounts, list):
            logger.warning(f"Unexpected format for getTokenLargestAccounts for {token_address}")
            return []

        balances = [(str(account.get("address", "")), int(account.get("amount", 0) or 0))
                    for account in accounts]
        observed_supply = sum(balance for _, balance in balances)

        return [
            TokenHolder(
                address=address,
                raw_balance=balance,
                percentage_of_observed_supply=(
                    balance / observed_supply * 100 if observed_supply > 0 else 0.0
                ),
            )
            for address, balance in balances
        ]
