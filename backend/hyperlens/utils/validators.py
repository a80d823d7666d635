"""
PURPOSE: Input validation helpers for addresses, hashes and numeric position fields.
Ensures data integrity before values reach the risk and search engines.
"""

import math
import re
from typing import Any


WALLET_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
# Spot token ids are 16 bytes (spotMeta "tokenId", e.g. 0xc1fb593aeffbeb02f85e0308e9956a90).
# 34-digit ids are not produced by the API and classify as unknown.
SPOT_TOKEN_ID_PATTERN = re.compile(r"^0x[0-9a-fA-F]{32}$")
BLOCK_NUMBER_PATTERN = re.compile(r"^[0-9]+$")


def is_finite_number(value: Any) -> bool:
    """
    PURPOSE: Validate that a value is a real, finite number (not NaN, not infinite, not bool).

    Args:
        value: Value to check.

    Returns:
        bool: True if value is an int/float and finite, False otherwise.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_wallet_address(address: str) -> bool:
    """
    PURPOSE: Validate an EVM-shaped wallet address (0x + 40 hex chars).

    Args:
        address: Address to validate. Surrounding whitespace is not tolerated.

    Returns:
        bool: True if the address matches the wallet shape.
    """
    return bool(WALLET_ADDRESS_PATTERN.fullmatch(address))


def validate_tx_hash(tx_hash: str) -> bool:
    """
    PURPOSE: Validate an EVM transaction hash (0x + 64 hex chars).

    Args:
        tx_hash: Hash to validate.

    Returns:
        bool: True if the hash matches the transaction shape.
    """
    return bool(TX_HASH_PATTERN.fullmatch(tx_hash))


def validate_block_number(value: str) -> bool:
    """
    PURPOSE: Validate a block height given as a digit string.

    Args:
        value: Candidate block number.

    Returns:
        bool: True if value is made of digits only.
    """
    return bool(BLOCK_NUMBER_PATTERN.fullmatch(value))


def normalize_address(address: str) -> str:
    """
    PURPOSE: Trim and lowercase a wallet address after validating its shape.

    Args:
        address: Raw address input.

    Returns:
        str: Lowercased address.

    Raises:
        ValueError: If the trimmed input is not a wallet address.
    """
    trimmed = address.strip().lower()
    if not validate_wallet_address(trimmed):
        raise ValueError("Invalid address format")
    return trimmed


def normalize_tx_hash(tx_hash: str) -> str:
    """
    PURPOSE: Trim and lowercase a transaction hash after validating its shape.

    Args:
        tx_hash: Raw hash input.

    Returns:
        str: Lowercased hash.

    Raises:
        ValueError: If the trimmed input is not a transaction hash.
    """
    trimmed = tx_hash.strip().lower()
    if not validate_tx_hash(trimmed):
        raise ValueError("Invalid transaction hash format")
    return trimmed
