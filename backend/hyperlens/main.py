"""
PURPOSE: Main FastAPI application factory and lifecycle management for HyperLens.

Initializes the FastAPI application with:
- All API routers (system, risk, search, watchlist)
- CORS middleware for the configured frontend origins
- Exception handlers for validation, domain and unexpected errors
- Startup events (logging, key-value store, Hyperliquid client, resolver)
- Shutdown events (resource cleanup)
- Metadata from version.json
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from hyperlens.api import api_router
from hyperlens.clients.hyperliquid import HyperliquidClient
from hyperlens.config.settings import Settings, settings as default_settings
from hyperlens.core.rate_limit import limiter
from hyperlens.exceptions import HyperLensError
from hyperlens.search.recent import RecentSearches
from hyperlens.search.resolver import SearchResolver
from hyperlens.search.verifier import HyperliquidVerifier
from hyperlens.search.watchlist import Watchlist
from hyperlens.services.positions_service import PositionsService
from hyperlens.store import create_store
from hyperlens.utils.logger import setup_logging, get_logger
from hyperlens.version import version_string


logger = get_logger(__name__)


# ════════════════════════════════════════════════════════════════
# Lifecycle Events
# ════════════════════════════════════════════════════════════════


async def on_startup(app: FastAPI, config: Settings) -> None:
    """
    PURPOSE: Build the shared services and attach them to app.state.

    CALLED BY: FastAPI lifespan startup

    Tasks:
        1. Setup logging with configured level
        2. Connect the key-value store (memory or Redis)
        3. Create the Hyperliquid client, verifier and resolver
        4. Create the search history, watchlist and positions services
    """
    try:
        setup_logging(config.LOG_LEVEL, json_output=not config.DEBUG)
        logger.info(
            "application_startup_starting",
            version=version_string(),
            log_level=config.LOG_LEVEL,
            store_backend=config.STORE_BACKEND,
        )

        store = await create_store(config)
        client = HyperliquidClient(config)

        app.state.store = store
        app.state.client = client
        app.state.resolver = SearchResolver(HyperliquidVerifier(client), store, config)
        app.state.recent = RecentSearches(store, config.RECENT_SEARCHES_MAX)
        app.state.watchlist = Watchlist(store)
        app.state.positions = PositionsService(client)

        logger.info("application_startup_complete")

    except Exception as e:
        logger.critical("application_startup_failed", error=str(e))
        raise


async def on_shutdown(app: FastAPI) -> None:
    """
    PURPOSE: Close the HTTP client and the key-value store.

    CALLED BY: FastAPI lifespan shutdown
    """
    try:
        logger.info("application_shutdown_starting")

        client: Optional[HyperliquidClient] = getattr(app.state, "client", None)
        if client is not None:
            await client.close()
            logger.info("hyperliquid_client_closed")

        store = getattr(app.state, "store", None)
        if store is not None:
            await store.close()
            logger.info("store_closed")

        logger.info("application_shutdown_complete")

    except Exception as e:
        logger.error("application_shutdown_error", error=str(e))
        raise


def build_lifespan(config: Settings):
    """
    PURPOSE: Lifespan context manager bound to a settings instance.

    Args:
        config: Settings used by startup.

    Returns:
        Async context manager factory accepted by FastAPI(lifespan=...).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await on_startup(app, config)
        yield
        await on_shutdown(app)

    return lifespan


# ════════════════════════════════════════════════════════════════
# Exception Handlers
# ════════════════════════════════════════════════════════════════


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """422 with the pydantic error list; non-JSON error contexts are stringified."""
    logger.warning(
        "request_validation_failed",
        path=request.url.path,
        method=request.method,
        error_count=len(exc.errors())
    )

    safe_errors = jsonable_encoder(
        exc.errors(),
        custom_encoder={
            ValueError: lambda e: str(e),
            Exception: lambda e: str(e),
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "status": "error",
            "detail": "Request validation failed",
            "errors": safe_errors,
        },
    )


async def domain_exception_handler(
    request: Request,
    exc: HyperLensError
) -> JSONResponse:
    """
    PURPOSE: Map HyperLens domain errors to their HTTP status.

    CALLED BY: FastAPI when a route raises a HyperLensError subclass

    Args:
        request: HTTP request that raised the error
        exc: Domain error carrying a status_code

    Returns:
        JSONResponse: Error response with the domain message
    """
    logger.warning(
        "domain_error",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exception_type=type(exc).__name__,
        status_code=exc.status_code,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "detail": str(exc),
        },
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """500 for anything not mapped above. The error is logged, never returned."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exception_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "detail": "Internal server error",
        },
    )


# ════════════════════════════════════════════════════════════════
# FastAPI Application Factory
# ════════════════════════════════════════════════════════════════


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    PURPOSE: Create and configure FastAPI application with all routers, middleware, and handlers.

    CALLED BY: Application entrypoint (uvicorn), tests

    Args:
        config: Settings to run with (defaults to global settings)

    Returns:
        FastAPI: Configured FastAPI application ready to run
    """
    config = config or default_settings

    version = version_string()
    expose_docs = not config.is_production()

    app = FastAPI(
        title="HyperLens",
        description="Account health, liquidation risk and entity search for Hyperliquid",
        version=version,
        lifespan=build_lifespan(config),
        docs_url="/docs" if expose_docs else None,
        redoc_url="/redoc" if expose_docs else None,
        openapi_url="/openapi.json" if expose_docs else None,
    )

    # ────────────────────────────────────────────────────────────
    # Middleware
    # ────────────────────────────────────────────────────────────

    # Limiter state must be on the app before routes are hit
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "X-Request-ID",
        ],
    )

    # ────────────────────────────────────────────────────────────
    # Routes
    # ────────────────────────────────────────────────────────────

    app.include_router(api_router)

    @app.get("/", tags=["root"])
    async def root():
        """Service name and version."""
        return {
            "status": "ok",
            "service": "HyperLens API",
            "version": version,
        }

    # ────────────────────────────────────────────────────────────
    # Exception Handlers
    # ────────────────────────────────────────────────────────────

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HyperLensError, domain_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info(
        "fastapi_application_created",
        version=version,
        api_prefix="/api"
    )

    return app


# Create the application
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hyperlens.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
        log_level=default_settings.LOG_LEVEL.lower(),
    )
