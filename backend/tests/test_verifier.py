"""
PURPOSE: Tests for the Hyperliquid-backed entity verifier.

Uses an AsyncMock HyperliquidClient so every source can be made to answer,
miss, or fail independently.
"""

from unittest.mock import AsyncMock

import pytest

from hyperlens.clients.hyperliquid import HyperliquidClient
from hyperlens.config.constants import EntityType
from hyperlens.exceptions import UpstreamError
from hyperlens.search.verifier import TRADE_INDEX, HyperliquidVerifier

WALLET = "0xdd590902cdac0abb4861a6748a256e888acb8d47"
TX_HASH = "0x" + "a" * 64
SPOT_TOKEN_ID = "0x" + "ab" * 16


@pytest.fixture
def client():
    """Client mock where every source answers "nothing here"."""
    mock = AsyncMock(spec=HyperliquidClient)
    mock.user_details.return_value = {"txs": []}
    mock.clearinghouse_state.return_value = {"marginSummary": {"accountValue": "0.0"}, "assetPositions": []}
    mock.evm_balance.return_value = 0
    mock.evm_code.return_value = "0x"
    mock.evm_transaction.return_value = None
    mock.tx_details.return_value = {}
    mock.evm_block.return_value = None
    mock.block_details.return_value = {}
    mock.perp_meta.return_value = {"universe": [{"name": "BTC"}, {"name": "ETH"}]}
    mock.spot_meta.return_value = {"tokens": [{"name": "PURR", "tokenId": SPOT_TOKEN_ID}]}
    return mock


@pytest.fixture
def verifier(client):
    return HyperliquidVerifier(client, l1_block_threshold=1000)


class TestWallet:
    """Test wallet verification across both domains."""

    async def test_hypercore_activity(self, verifier, client):
        client.user_details.return_value = {"txs": [{"hash": "0x1"}]}
        outcome = await verifier.verify(EntityType.WALLET, WALLET)
        assert outcome.exists is True
        assert outcome.domains.hypercore is True
        assert outcome.domains.hyperevm is False
        assert set(outcome.checked_sources) == {"hypercore", "hyperevm"}

    async def test_open_positions_count_as_activity(self, verifier, client):
        client.clearinghouse_state.return_value = {"assetPositions": [{"position": {"coin": "BTC"}}]}
        assert (await verifier.verify(EntityType.WALLET, WALLET)).domains.hypercore is True

    async def test_account_value_counts_as_activity(self, verifier, client):
        client.clearinghouse_state.return_value = {"marginSummary": {"accountValue": "12.5"}}
        assert (await verifier.verify(EntityType.WALLET, WALLET)).exists is True

    async def test_evm_balance(self, verifier, client):
        client.evm_balance.return_value = 10**18
        outcome = await verifier.verify(EntityType.WALLET, WALLET)
        assert outcome.domains.hyperevm is True
        assert outcome.domains.hypercore is False

    async def test_evm_contract_code(self, verifier, client):
        client.evm_code.return_value = "0x6080"
        assert (await verifier.verify(EntityType.WALLET, WALLET)).domains.hyperevm is True

    async def test_inactive_wallet(self, verifier):
        outcome = await verifier.verify(EntityType.WALLET, WALLET)
        assert outcome.exists is False

    async def test_one_source_failing_is_not_an_error(self, verifier, client):
        client.user_details.side_effect = UpstreamError("explorer", "HTTP 500")
        client.evm_balance.return_value = 1
        outcome = await verifier.verify(EntityType.WALLET, WALLET)
        assert outcome.exists is True
        assert outcome.domains.hyperevm is True

    async def test_all_sources_failing_raises(self, verifier, client):
        client.user_details.side_effect = UpstreamError("explorer", "HTTP 500")
        client.evm_balance.side_effect = UpstreamError("evm_rpc", "HTTP 503")
        with pytest.raises(UpstreamError):
            await verifier.verify(EntityType.WALLET, WALLET)


class TestTransaction:
    """Test transaction lookup order."""

    async def test_evm_transaction(self, verifier, client):
        client.evm_transaction.return_value = {"hash": TX_HASH}
        outcome = await verifier.verify(EntityType.TX, TX_HASH)
        assert outcome.domains.hyperevm is True
        assert outcome.checked_sources == ["hyperevm"]
        client.tx_details.assert_not_awaited()

    async def test_hypercore_fallback(self, verifier, client):
        client.tx_details.return_value = {"tx": {"hash": TX_HASH}}
        outcome = await verifier.verify(EntityType.TX, TX_HASH)
        assert outcome.exists is True
        assert outcome.domains.hypercore is True
        assert outcome.checked_sources == ["hyperevm", "hypercore"]

    async def test_not_found(self, verifier):
        outcome = await verifier.verify(EntityType.TX, TX_HASH)
        assert outcome.exists is False
        assert outcome.checked_sources == ["hyperevm", "hypercore"]

    async def test_hash_lowercased_before_lookup(self, verifier, client):
        await verifier.verify(EntityType.TX, " 0x" + "A" * 64 + " ")
        client.evm_transaction.assert_awaited_once_with(TX_HASH)

    async def test_malformed_hash_not_looked_up(self, verifier, client):
        outcome = await verifier.verify(EntityType.TX, "0x1234")
        assert outcome.exists is False
        client.evm_transaction.assert_not_awaited()
        client.tx_details.assert_not_awaited()


class TestBlock:
    """Test block lookup order by height."""

    async def test_high_block_checks_hypercore_first(self, verifier, client):
        client.block_details.return_value = {"blockDetails": {"height": 5000}}
        outcome = await verifier.verify(EntityType.BLOCK, "5000")
        assert outcome.domains.hypercore is True
        assert outcome.checked_sources == ["hypercore"]
        assert outcome.data == {"height": 5000, "domain": "hypercore"}
        client.evm_block.assert_not_awaited()

    async def test_low_block_checks_hyperevm_first(self, verifier, client):
        client.evm_block.return_value = {"number": "0x64"}
        outcome = await verifier.verify(EntityType.BLOCK, "100")
        assert outcome.domains.hyperevm is True
        assert outcome.checked_sources == ["hyperevm"]
        client.evm_block.assert_awaited_once_with(100)

    async def test_falls_back_to_other_domain(self, verifier, client):
        client.block_details.return_value = {"blockDetails": {"height": 100}}
        outcome = await verifier.verify(EntityType.BLOCK, "100")
        assert outcome.domains.hypercore is True
        assert outcome.checked_sources == ["hyperevm", "hypercore"]

    async def test_missing_block(self, verifier):
        outcome = await verifier.verify(EntityType.BLOCK, "100")
        assert outcome.exists is False

    async def test_non_numeric_height_not_looked_up(self, verifier, client):
        outcome = await verifier.verify(EntityType.BLOCK, "12a")
        assert outcome.exists is False
        assert outcome.checked_sources == []
        client.evm_block.assert_not_awaited()
        client.block_details.assert_not_awaited()


class TestMarketAndToken:
    """Test market and token lookups against exchange metadata."""

    async def test_market_found(self, verifier):
        outcome = await verifier.verify(EntityType.MARKET, "BTC")
        assert outcome.exists is True
        assert outcome.domains.hypercore is True
        assert outcome.data == {"name": "BTC"}

    async def test_market_with_suffix(self, verifier):
        assert (await verifier.verify(EntityType.MARKET, "ETH-PERP")).exists is True

    async def test_market_missing(self, verifier):
        outcome = await verifier.verify(EntityType.MARKET, "DOGE")
        assert outcome.exists is False
        assert outcome.checked_sources == ["hypercore"]

    async def test_token_from_perp_universe(self, verifier, client):
        outcome = await verifier.verify(EntityType.TOKEN, "ETH")
        assert outcome.data["kind"] == "perp"
        client.spot_meta.assert_not_awaited()

    async def test_token_by_spot_name(self, verifier):
        outcome = await verifier.verify(EntityType.TOKEN, "purr")
        assert outcome.exists is True
        assert outcome.data["kind"] == "spot"

    async def test_token_by_spot_id(self, verifier):
        outcome = await verifier.verify(EntityType.TOKEN, SPOT_TOKEN_ID.upper().replace("0X", "0x"))
        assert outcome.data["name"] == "PURR"

    async def test_malformed_universe_entries_skipped(self, verifier, client):
        client.perp_meta.return_value = {"universe": ["BTC", None, {"name": 7}, {"name": "SOL"}]}
        assert (await verifier.verify(EntityType.MARKET, "SOL")).exists is True
        assert (await verifier.verify(EntityType.MARKET, "BTC")).exists is False

    async def test_universe_not_a_list(self, verifier, client):
        client.perp_meta.return_value = {"universe": {"name": "BTC"}}
        client.spot_meta.return_value = {"tokens": "PURR"}
        assert (await verifier.verify(EntityType.TOKEN, "PURR")).exists is False

    async def test_metadata_failure_raises(self, verifier, client):
        client.perp_meta.side_effect = UpstreamError("info", "HTTP 500")
        with pytest.raises(UpstreamError):
            await verifier.verify(EntityType.MARKET, "BTC")


class TestTrade:
    """Test trade verification through the injected lookup."""

    async def test_without_lookup(self, verifier):
        outcome = await verifier.verify(EntityType.TRADE, "abc")
        assert outcome.exists is False
        assert outcome.checked_sources == [TRADE_INDEX]

    async def test_with_lookup(self, client):
        lookup = AsyncMock(return_value=True)
        verifier = HyperliquidVerifier(client, trade_lookup=lookup, l1_block_threshold=1000)
        outcome = await verifier.verify(EntityType.TRADE, "abc")
        assert outcome.exists is True
        lookup.assert_awaited_once_with("abc")


class TestUnknown:
    """Test unknown types are never checked."""

    async def test_unknown_type(self, verifier, client):
        outcome = await verifier.verify(EntityType.UNKNOWN, "???")
        assert outcome.exists is False
        assert outcome.checked_sources == []
