"""
PURPOSE: Rate limiting configuration for the HyperLens API using slowapi.

Provides a shared Limiter instance keyed by client IP address and
pre-defined rate limit strings for different endpoint categories:
    - RESOLVE_LIMIT: strict   (20/minute) endpoints that fan out to Hyperliquid
    - WRITE_LIMIT:   moderate (30/minute) watchlist and search history changes
    - READ_LIMIT:    relaxed  (60/minute) classification, risk scoring, listings
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from hyperlens.config.settings import settings

# Shared limiter instance, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# ── Rate limit tiers ──────────────────────────────────────────
RESOLVE_LIMIT = "20/minute"
WRITE_LIMIT = "30/minute"
READ_LIMIT = "60/minute"
