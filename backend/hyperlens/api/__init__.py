"""
PURPOSE: API router initialization and exports for HyperLens.

This module aggregates all API routers (system, risk, search, watchlist)
into a single api_router that is included in the main FastAPI application.
"""

from fastapi import APIRouter

from hyperlens.api.routes_system import router as system_router
from hyperlens.api.routes_risk import router as risk_router
from hyperlens.api.routes_search import router as search_router
from hyperlens.api.routes_watchlist import router as watchlist_router

# Create the main API router
api_router = APIRouter(prefix="/api", tags=["api"])

# Include all sub-routers
api_router.include_router(system_router, tags=["system"])
api_router.include_router(risk_router, tags=["risk"])
api_router.include_router(search_router, tags=["search"])
api_router.include_router(watchlist_router, tags=["watchlist"])

__all__ = ["api_router"]
