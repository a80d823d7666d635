"""
PURPOSE: Lexical classification of search queries into entity types, and
canonical route construction.

Classification is an explicit, ordered list of rules; the first match wins.
Bare 2-10 letter tickers such as "BTC" match the market rule before the
token rule and therefore classify as markets. Reordering RULES changes
observable routing, so the overlap is kept as is.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from hyperlens.config.constants import EntityType, PERP_SUFFIX
from hyperlens.search.models import ValidationResult
from hyperlens.utils.validators import (
    BLOCK_NUMBER_PATTERN,
    SPOT_TOKEN_ID_PATTERN,
    TX_HASH_PATTERN,
    WALLET_ADDRESS_PATTERN,
)


@dataclass(frozen=True)
class ClassificationRule:
    """
    PURPOSE: One (predicate, type) pair of the classifier.

    Attributes:
        name: Rule name for diagnostics.
        pattern: Regex matched against the trimmed query.
        entity_type: Type assigned on match.
    """

    name: str
    pattern: Pattern[str]
    entity_type: EntityType

    def matches(self, query: str) -> bool:
        return bool(self.pattern.fullmatch(query))


MARKET_PATTERN = re.compile(r"^[a-z]{2,10}(-perp)?$", re.IGNORECASE)
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
TOKEN_SYMBOL_PATTERN = re.compile(r"^[a-z]{2,10}$", re.IGNORECASE)

RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("block_height", BLOCK_NUMBER_PATTERN, EntityType.BLOCK),
    ClassificationRule("evm_address", WALLET_ADDRESS_PATTERN, EntityType.WALLET),
    ClassificationRule("evm_tx_hash", TX_HASH_PATTERN, EntityType.TX),
    ClassificationRule("market_symbol", MARKET_PATTERN, EntityType.MARKET),
    ClassificationRule("trade_uuid", UUID_PATTERN, EntityType.TRADE),
    ClassificationRule("token_symbol", TOKEN_SYMBOL_PATTERN, EntityType.TOKEN),
    ClassificationRule("spot_token_id", SPOT_TOKEN_ID_PATTERN, EntityType.TOKEN),
)


def classify(query: str) -> EntityType:
    """
    PURPOSE: Classify a raw query by its lexical shape. Never raises.

    Args:
        query: Raw user input; surrounding whitespace is ignored.

    Returns:
        EntityType: First matching rule's type, UNKNOWN when none match.
    """
    trimmed = query.strip()
    if not trimmed:
        return EntityType.UNKNOWN

    for rule in RULES:
        if rule.matches(trimmed):
            return rule.entity_type

    return EntityType.UNKNOWN


def strip_perp_suffix(symbol: str) -> str:
    """Uppercase a market symbol and drop a trailing -PERP."""
    upper = symbol.strip().upper()
    if upper.endswith(PERP_SUFFIX):
        return upper[: -len(PERP_SUFFIX)]
    return upper


def canonical_identifier(entity_type: EntityType, query: str) -> str:
    """
    PURPOSE: Canonical identifier for a classified query.

    Wallets are lowercased, market symbols uppercased without -PERP, and
    everything else is returned trimmed but otherwise as given.

    Args:
        entity_type: Classification of the query.
        query: Raw query.

    Returns:
        str: Canonical identifier.
    """
    trimmed = query.strip()
    if entity_type == EntityType.WALLET:
        return trimmed.lower()
    if entity_type == EntityType.MARKET:
        return strip_perp_suffix(trimmed)
    return trimmed


def build_route(entity_type: EntityType, identifier: str) -> str:
    """
    PURPOSE: Canonical explorer path for an entity.

    A "tx" identifier that is not a 64-hex EVM hash is routed to /trade/,
    which separates EVM transactions from internal trade ids.

    Args:
        entity_type: Entity type.
        identifier: Identifier, as given or canonical.

    Returns:
        str: Route such as "/wallet/0xabc..." or "/" for unknown input.
    """
    identifier = identifier.strip()

    if entity_type == EntityType.WALLET:
        return f"/wallet/{identifier.lower()}"
    if entity_type == EntityType.TX:
        if TX_HASH_PATTERN.fullmatch(identifier):
            return f"/tx/{identifier}"
        return f"/trade/{identifier}"
    if entity_type == EntityType.TRADE:
        return f"/trade/{identifier}"
    if entity_type == EntityType.MARKET:
        return f"/market/{strip_perp_suffix(identifier)}"
    if entity_type == EntityType.TOKEN:
        return f"/token/{identifier}"
    if entity_type == EntityType.BLOCK:
        return f"/block/{identifier}"
    return "/"


def validate_input(query: str) -> ValidationResult:
    """
    PURPOSE: Lexically validate a query without any network call.

    Args:
        query: Raw user input.

    Returns:
        ValidationResult: Validity, type and canonical identifier.
    """
    entity_type = classify(query)
    return ValidationResult(
        is_valid=entity_type != EntityType.UNKNOWN,
        type=entity_type,
        cleaned=canonical_identifier(entity_type, query),
    )
