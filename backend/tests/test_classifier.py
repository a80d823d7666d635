"""
PURPOSE: Tests for lexical query classification and route building.
"""

import pytest
from hyperlens.config.constants import EntityType
from hyperlens.search.classifier import (
    RULES,
    build_route,
    canonical_identifier,
    classify,
    validate_input,
)

WALLET = "0xdd590902cdac0abb4861a6748a256e888acb8d47"
TX_HASH = "0x" + "a" * 64
TRADE_ID = "123e4567-e89b-12d3-a456-426614174000"
SPOT_TOKEN_ID = "0x" + "ab" * 16


class TestClassify:
    """Test classification rules and their order."""

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("836176486", EntityType.BLOCK),
            (WALLET, EntityType.WALLET),
            (TX_HASH, EntityType.TX),
            ("BTC-PERP", EntityType.MARKET),
            ("BTC", EntityType.MARKET),
            ("eth-perp", EntityType.MARKET),
            (TRADE_ID, EntityType.TRADE),
            (SPOT_TOKEN_ID, EntityType.TOKEN),
            ("not-a-valid-anything-!!", EntityType.UNKNOWN),
        ],
    )
    def test_examples(self, query, expected):
        assert classify(query) == expected

    def test_blank_input(self):
        assert classify("") == EntityType.UNKNOWN
        assert classify("   ") == EntityType.UNKNOWN

    def test_surrounding_whitespace_ignored(self):
        assert classify("  836176486\n") == EntityType.BLOCK

    def test_ticker_length_limits(self):
        assert classify("A") == EntityType.UNKNOWN
        assert classify("ABCDEFGHIJK") == EntityType.UNKNOWN

    def test_idempotent(self):
        assert classify(WALLET) == classify(WALLET)

    def test_market_rule_precedes_token_rule(self):
        """Test bare tickers are markets because the market rule comes first."""
        names = [rule.name for rule in RULES]
        assert names.index("market_symbol") < names.index("token_symbol")


class TestBuildRoute:
    """Test canonical routes."""

    def test_wallet_round_trip_lowercases(self):
        mixed = WALLET.upper().replace("0X", "0x")
        assert build_route(classify(mixed), mixed) == "/wallet/" + mixed.lower()

    def test_tx_routes(self):
        assert build_route(EntityType.TX, TX_HASH) == f"/tx/{TX_HASH}"
        assert build_route(EntityType.TX, "abc123") == "/trade/abc123"

    def test_trade_route(self):
        assert build_route(EntityType.TRADE, TRADE_ID) == f"/trade/{TRADE_ID}"

    def test_market_route_strips_perp(self):
        assert build_route(EntityType.MARKET, "btc-perp") == "/market/BTC"

    def test_token_and_block_routes(self):
        assert build_route(EntityType.TOKEN, "PURR") == "/token/PURR"
        assert build_route(EntityType.BLOCK, "123") == "/block/123"

    def test_unknown_route(self):
        assert build_route(EntityType.UNKNOWN, "???") == "/"


class TestValidateInput:
    """Test lexical validation results."""

    def test_wallet_cleaned_lowercase(self):
        result = validate_input("  " + WALLET.upper().replace("0X", "0x"))
        assert result.is_valid is True
        assert result.type == EntityType.WALLET
        assert result.cleaned == WALLET

    def test_market_cleaned(self):
        assert validate_input("sol-perp").cleaned == "SOL"

    def test_invalid(self):
        result = validate_input("%%%")
        assert result.is_valid is False
        assert result.type == EntityType.UNKNOWN

    def test_canonical_identifier_keeps_other_types(self):
        assert canonical_identifier(EntityType.TX, f" {TX_HASH} ") == TX_HASH


class TestSpotTokenId:
    """Test the spot token id rule."""

    def test_real_token_id(self):
        token_id = "0xc1fb593aeffbeb02f85e0308e9956a90"
        assert classify(token_id) == EntityType.TOKEN
        assert build_route(EntityType.TOKEN, token_id) == f"/token/{token_id}"

    def test_mixed_case_token_id(self):
        assert classify("0xC1FB593AEFFBEB02F85E0308E9956A90") == EntityType.TOKEN

    @pytest.mark.parametrize("digits", [31, 33, 34])
    def test_other_lengths_are_unknown(self, digits):
        assert classify("0x" + "a" * digits) == EntityType.UNKNOWN
