"""
Business logic layer for HyperLens.

PURPOSE: Services sit between the API routes and the upstream clients and
engines.

CALLED BY: API routes in hyperlens.api

Services:
    - PositionsService: Live positions and account health of a wallet
"""

from hyperlens.services.positions_service import PositionsService

__all__ = ["PositionsService"]
