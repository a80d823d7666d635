"""
PURPOSE: System-level API routes for HyperLens.

Provides endpoints for health checks and version information.
"""

import time

from fastapi import APIRouter, Depends, Request

from hyperlens.api.dependencies import get_store
from hyperlens.core.rate_limit import limiter, READ_LIMIT
from hyperlens.schemas import HealthCheck, VersionInfo
from hyperlens.store.base import KeyValueStore
from hyperlens.utils.logger import get_logger
from hyperlens.utils.time_utils import get_utc_now
from hyperlens.version import get_version, version_string


logger = get_logger(__name__)
router = APIRouter(prefix="/system", tags=["system"])

_startup_time = time.time()


@router.get("/health", response_model=HealthCheck, tags=["health"])
@limiter.limit(READ_LIMIT)
async def health_check(
    request: Request,
    store: KeyValueStore = Depends(get_store),
) -> HealthCheck:
    """Liveness check including the key-value store status."""
    services = {}
    overall_status = "ok"

    try:
        reachable = await store.ping()
    except Exception as e:
        logger.warning("store_ping_failed", error=str(e))
        reachable = False

    services["store"] = "connected" if reachable else "disconnected"
    if not reachable:
        overall_status = "degraded"

    return HealthCheck(
        status=overall_status,
        services=services,
        version=version_string(),
        uptime_seconds=round(time.time() - _startup_time, 1),
    )


@router.get("/version", response_model=VersionInfo, tags=["version"])
@limiter.limit(READ_LIMIT)
async def get_system_version(request: Request) -> VersionInfo:
    """Retrieve system version information."""
    version_data = get_version()
    return VersionInfo(
        version=version_data.get("version", "unknown"),
        codename=version_data.get("codename", "HyperLens"),
        updated_at=version_data.get("updated_at", get_utc_now().isoformat()),
    )
