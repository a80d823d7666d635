"""
PURPOSE: Upstream API clients.
"""

from hyperlens.clients.hyperliquid import HyperliquidClient

__all__ = ["HyperliquidClient"]
