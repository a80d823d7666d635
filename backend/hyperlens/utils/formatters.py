"""
PURPOSE: Display formatters for numbers, USD amounts, percentages and entity ids.
Large values are abbreviated with K, M, B and T suffixes.
"""


_SUFFIXES = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
)


def format_compact(value: float) -> str:
    """
    PURPOSE: Abbreviate a number (1.23M, 4.5K, 12.00).

    Args:
        value: Number to format.

    Returns:
        str: Compact representation.
    """
    magnitude = abs(value)

    for threshold, suffix in _SUFFIXES:
        if magnitude >= threshold:
            return f"{value / threshold:.2f}{suffix}"
    if magnitude >= 1e3:
        return f"{value / 1e3:.1f}K"

    return f"{value:.2f}"


def format_usd_compact(value: float, force_compact: bool = False) -> str:
    """
    PURPOSE: Format a USD amount, abbreviating large values.

    Values from 100K up are always abbreviated; force_compact abbreviates
    anything below a million to K as well.

    Args:
        value: Dollar amount.
        force_compact: Abbreviate to K even for small values.

    Returns:
        str: e.g. "$1.50M", "-$250.0K", "$1,234.5", "$12.00".
    """
    magnitude = abs(value)
    sign = "-" if value < 0 else ""

    for threshold, suffix in _SUFFIXES:
        if magnitude >= threshold:
            return f"{sign}${magnitude / threshold:.2f}{suffix}"
    if force_compact or magnitude >= 100_000:
        return f"{sign}${magnitude / 1e3:.1f}K"
    if magnitude >= 1000:
        formatted = f"{magnitude:,.2f}".rstrip("0").rstrip(".")
        return f"{sign}${formatted}"

    return f"{sign}${magnitude:.2f}"


def format_percent(value: float, show_sign: bool = True) -> str:
    """
    PURPOSE: Format a percentage value with one decimal, signed by default.

    Args:
        value: Percentage (12.5 means 12.5%).
        show_sign: Prefix non-negative values with "+".

    Returns:
        str: e.g. "+12.5%".
    """
    sign = "+" if show_sign and value >= 0 else ""
    return f"{sign}{value:.1f}%"


def format_leverage(value: float) -> str:
    """Format a leverage multiplier, e.g. 12.345 -> "12.3x"."""
    return f"{value:.1f}x"


def format_entity_id(identifier: str, entity_type: str) -> str:
    """
    PURPOSE: Shorten an entity identifier for display.

    Blocks render as "#1,234,567"; identifiers longer than 16 characters
    are truncated to their first 8 and last 6 characters.

    Args:
        identifier: Raw identifier.
        entity_type: EntityType value ("block", "wallet", ...).

    Returns:
        str: Display form of the identifier.
    """
    if entity_type == "block" and identifier.isdigit():
        return f"#{int(identifier):,}"

    if len(identifier) > 16:
        return f"{identifier[:8]}...{identifier[-6:]}"

    return identifier
