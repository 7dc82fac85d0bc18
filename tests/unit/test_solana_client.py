"""Unit tests for the Solana RPC client."""

import asyncio

import httpx
import pytest

from solana_analytics.clients.solana_client import (
    SolanaClient,
    classify_transaction,
    parse_transaction,
)
from solana_analytics.models.transaction import TransactionStatus, TransactionType
from solana_analytics.utils.errors import (
    DataUnavailableError,
    InvalidPublicKeyError,
    NotFoundError,
    UpstreamError,
)
from tests.fixtures.common import (
    NOW,
    SYSTEM_PROGRAM_ID,
    TOKEN_ADDRESS,
    TOKEN_PROGRAM_ID,
    WALLET_ADDRESS,
    mock_http_client,
    rpc_method,
    rpc_params,
    rpc_result,
)


def transaction_body(logs=None, pre=1_000_000_000, post=3_000_000_000, err=None, keys=None):
    return {
        "blockTime": NOW,
        "meta": {
            "err": err,
            "logMessages": logs or [],
            "preBalances": [pre, 0],
            "postBalances": [post, 0],
        },
        "transaction": {
            "message": {
                "accountKeys": keys or [WALLET_ADDRESS, TOKEN_PROGRAM_ID],
            }
        },
    }


class RpcRecorder:
    """MockTransport handler answering JSON-RPC calls from a method table."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = rpc_method(request)
        self.calls.append(method)
        response = self.responses[method]
        if callable(response):
            return response(request)
        return response


@pytest.fixture
def make_client(solana_config, fast_retry):
    def _make(responses):
        recorder = RpcRecorder(responses)
        client = SolanaClient(
            config=solana_config,
            retry_config=fast_retry,
            http_client=mock_http_client(recorder)
        )
        return client, recorder

    return _make


class TestClassifyTransaction:
    """Test suite for log-based classification."""

    @pytest.mark.parametrize("logs, expected", [
        (["Program log: Instruction: Swap", "Program log: Instruction: Transfer"], TransactionType.DEFI),
        (["Program log: add LIQUIDITY"], TransactionType.DEFI),
        (["Program log: Create NFT edition"], TransactionType.NFT),
        (["Program log: Instruction: MintTo", "token program"], TransactionType.NFT),
        (["Program log: Instruction: Transfer"], TransactionType.TOKEN_TRANSFER),
        (["Program log: vote"], TransactionType.UNKNOWN),
        ([], TransactionType.UNKNOWN),
        (None, TransactionType.UNKNOWN),
    ])
    def test_priority_order(self, logs, expected):
        assert classify_transaction(logs) == expected


class TestParseTransaction:
    """Test suite for transaction parsing."""

    def test_parses_body(self):
        body = transaction_body(
            logs=["Program log: Instruction: Transfer"],
            keys=[WALLET_ADDRESS, TOKEN_PROGRAM_ID, {"pubkey": SYSTEM_PROGRAM_ID}],
            err={"InstructionError": [0, "Custom"]},
        )

        tx = parse_transaction("sig1", NOW - 5, body, WALLET_ADDRESS)

        assert tx.signature == "sig1"
        assert tx.timestamp == NOW - 5
        assert tx.classified_type == TransactionType.TOKEN_TRANSFER
        assert tx.lamport_delta == 2_000_000_000
        assert tx.sol_delta == 2.0
        assert tx.counterparty_program_ids == [TOKEN_PROGRAM_ID, SYSTEM_PROGRAM_ID]
        assert tx.status == TransactionStatus.FAILED

    def test_missing_body_keeps_signature(self):
        tx = parse_transaction("sig1", NOW, None, WALLET_ADDRESS)

        assert tx.signature == "sig1"
        assert tx.classified_type == TransactionType.UNKNOWN
        assert tx.lamport_delta == 0
        assert tx.status == TransactionStatus.SUCCESS


class TestGetBalance:
    """Test suite for SolanaClient.get_balance."""

    @pytest.mark.asyncio
    async def test_returns_sol_balance(self, make_client):
        client, _ = make_client({"getBalance": rpc_result({"context": {}, "value": 2_500_000_000})})

        result = await client.get_balance(WALLET_ADDRESS)

        assert result.is_degraded is False
        assert result.value == 2.5

    @pytest.mark.asyncio
    async def test_degrades_to_zero_after_retries(self, make_client):
        client, recorder = make_client({"getBalance": httpx.Response(500)})

        result = await client.get_balance(WALLET_ADDRESS)

        assert result.is_degraded is True
        assert result.value == 0.0
        assert "500" in result.reason
        assert recorder.calls == ["getBalance"] * 3

    @pytest.mark.asyncio
    async def test_invalid_address_rejected_before_io(self, make_client):
        client, recorder = make_client({})

        with pytest.raises(InvalidPublicKeyError):
            await client.get_balance("not-an-address")

        assert recorder.calls == []



class ConcurrentTransactionHandler:
    """Holds getTransaction calls until all of them are in flight.

    Responses are released newest last, so completion order differs from
    signature order.
    """

    def __init__(self, signatures):
        self.signatures = signatures
        self.in_flight = 0
        self.max_in_flight = 0
        self.all_arrived = asyncio.Event()

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if rpc_method(request) == "getSignaturesForAddress":
            return rpc_result([{"signature": sig, "blockTime": NOW} for sig in self.signatures])

        signature = rpc_params(request)[0]
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.in_flight == len(self.signatures):
            self.all_arrived.set()
        try:
            await asyncio.wait_for(self.all_arrived.wait(), timeout=1.0)
        except asyncio.TimeoutError:
            pass
        await asyncio.sleep(0.01 * (len(self.signatures) - self.signatures.index(signature)))
        self.in_flight -= 1
        return rpc_result(transaction_body())


class TestGetRecentTransactions:
    """Test suite for SolanaClient.get_recent_transactions."""

    @pytest.mark.asyncio
    async def test_preserves_signature_order(self, make_client):
        signatures = [
            {"signature": "newest", "blockTime": NOW},
            {"signature": "middle", "blockTime": NOW - 60},
            {"signature": "oldest", "blockTime": NOW - 120},
        ]
        logs = {
            "newest": ["Program log: Instruction: Swap"],
            "middle": ["Program log: Instruction: Transfer"],
            "oldest": ["Program log: nft"],
        }

        def get_transaction(request):
            return rpc_result(transaction_body(logs=logs[rpc_params(request)[0]]))

        client, _ = make_client({
            "getSignaturesForAddress": rpc_result(signatures),
            "getTransaction": get_transaction,
        })

        result = await client.get_recent_transactions(WALLET_ADDRESS, limit=3)

        assert result.is_degraded is False
        assert [tx.signature for tx in result.value] == ["newest", "middle", "oldest"]
        assert [tx.timestamp for tx in result.value] == [NOW, NOW - 60, NOW - 120]
        assert [tx.classified_type for tx in result.value] == [
            TransactionType.DEFI,
            TransactionType.TOKEN_TRANSFER,
            TransactionType.NFT,
        ]

    @pytest.mark.asyncio
    async def test_fetches_transactions_concurrently(self, solana_config, fast_retry):
        handler = ConcurrentTransactionHandler(["s0", "s1", "s2"])
        client = SolanaClient(
            config=solana_config,
            retry_config=fast_retry,
            http_client=mock_http_client(handler)
        )

        result = await client.get_recent_transactions(WALLET_ADDRESS, limit=3)

        assert handler.max_in_flight == 3
        assert [tx.signature for tx in result.value] == ["s0", "s1", "s2"]

    @pytest.mark.asyncio
    async def test_passes_limit(self, make_client):
        seen = {}

        def get_signatures(request):
            seen["options"] = rpc_params(request)[1]
            return rpc_result([])

        client, _ = make_client({"getSignaturesForAddress": get_signatures})

        result = await client.get_recent_transactions(WALLET_ADDRESS, limit=20)

        assert result.value == []
        assert seen["options"]["limit"] == 20

    @pytest.mark.asyncio
    async def test_any_failure_degrades_to_empty(self, make_client):
        def get_transaction(request):
            if rpc_params(request)[0] == "bad":
                return httpx.Response(503)
            return rpc_result(transaction_body())

        client, _ = make_client({
            "getSignaturesForAddress": rpc_result([
                {"signature": "good", "blockTime": NOW},
                {"signature": "bad", "blockTime": NOW},
            ]),
            "getTransaction": get_transaction,
        })

        result = await client.get_recent_transactions(WALLET_ADDRESS, limit=2)

        assert result.is_degraded is True
        assert result.value == []


class TestGetOnChainTokenMeta:
    """Test suite for SolanaClient.get_on_chain_token_meta."""

    @pytest.mark.asyncio
    async def test_parses_mint_info(self, make_client):
        client, _ = make_client({"getAccountInfo": rpc_result({
            "context": {},
            "value": {
                "data": {
                    "parsed": {
                        "info": {
                            "supply": "5000000",
                            "decimals": 6,
                            "mintAuthority": WALLET_ADDRESS,
                            "freezeAuthority": None,
                        },
                        "type": "mint",
                    },
                    "program": "spl-token",
                },
            },
        })})

        meta = await client.get_on_chain_token_meta(TOKEN_ADDRESS)

        assert meta.supply == 5_000_000
        assert meta.decimals == 6
        assert meta.mint_authority == WALLET_ADDRESS
        assert meta.freeze_authority is None

    @pytest.mark.asyncio
    async def test_missing_account_is_not_found(self, make_client):
        client, recorder = make_client({"getAccountInfo": rpc_result({"context": {}, "value": None})})

        with pytest.raises(NotFoundError, match="Token account not found"):
            await client.get_on_chain_token_meta(TOKEN_ADDRESS)

        assert recorder.calls == ["getAccountInfo"]

    @pytest.mark.asyncio
    async def test_unparsed_account_is_data_unavailable(self, make_client):
        client, _ = make_client({"getAccountInfo": rpc_result({
            "context": {},
            "value": {"data": ["AAAA", "base64"]},
        })})

        with pytest.raises(DataUnavailableError, match="Invalid token data format"):
            await client.get_on_chain_token_meta(TOKEN_ADDRESS)

    @pytest.mark.asyncio
    async def test_rpc_error_propagates_after_retries(self, make_client):
        client, recorder = make_client({"getAccountInfo": httpx.Response(200, json={
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32005, "message": "Node is behind"},
        })})

        with pytest.raises(UpstreamError, match="Node is behind"):
            await client.get_on_chain_token_meta(TOKEN_ADDRESS)

        assert recorder.calls == ["getAccountInfo"] * 3


class TestGetTokenHolders:
    """Test suite for SolanaClient.get_token_holders."""

    @pytest.mark.asyncio
    async def test_percentages_of_observed_supply(self, make_client):
        client, _ = make_client({"getTokenLargestAccounts": rpc_result({
            "context": {},
            "value": [
                {"address": "a", "amount": "600", "decimals": 0},
                {"address": "b", "amount": "300", "decimals": 0},
                {"address": "c", "amount": "100", "decimals": 0},
            ],
        })})

        holders = await client.get_token_holders(TOKEN_ADDRESS)

        assert [h.address for h in holders] == ["a", "b", "c"]
        assert [h.raw_balance for h in holders] == [600, 300, 100]
        assert [h.percentage_of_observed_supply for h in holders] == pytest.approx([60.0, 30.0, 10.0])

    @pytest.mark.asyncio
    async def test_zero_observed_supply(self, make_client):
        client, _ = make_client({"getTokenLargestAccounts": rpc_result({
            "context": {},
            "value": [{"address": "a", "amount": "0"}],
        })})

        holders = await client.get_token_holders(TOKEN_ADDRESS)

        assert holders[0].percentage_of_observed_supply == 0.0

    @pytest.mark.asyncio
    async def test_failure_propagates(self, make_client):
        client, _ = make_client({"getTokenLargestAccounts": httpx.Response(502)})

        with pytest.raises(UpstreamError):
            await client.get_token_holders(TOKEN_ADDRESS)
