"""
HyperLens: account health scoring, liquidation risk and entity search for Hyperliquid.
"""
