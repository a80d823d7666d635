"""
PURPOSE: Search API routes for HyperLens.

Provides lexical classification, verified resolution and management of the
recent search history.
"""

from fastapi import APIRouter, Depends, Query, Request

from hyperlens.api.dependencies import get_recent_searches, get_resolver
from hyperlens.core.rate_limit import limiter, READ_LIMIT, RESOLVE_LIMIT, WRITE_LIMIT
from hyperlens.schemas import ClassifyResponse, RecentSearchesResponse
from hyperlens.search.classifier import build_route, validate_input
from hyperlens.search.models import ResolverResult
from hyperlens.search.recent import RecentSearches
from hyperlens.search.resolver import SearchResolver
from hyperlens.utils.logger import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/search", tags=["search"])


@router.get("/classify", response_model=ClassifyResponse)
@limiter.limit(READ_LIMIT)
async def classify_query(
    request: Request,
    q: str = Query(..., max_length=256, description="Raw search query"),
) -> ClassifyResponse:
    """Classify a query by its lexical shape without network calls."""
    validation = validate_input(q)
    return ClassifyResponse(
        query=q,
        type=validation.type,
        is_valid=validation.is_valid,
        cleaned=validation.cleaned,
        route=build_route(validation.type, validation.cleaned),
    )


@router.get("/resolve", response_model=ResolverResult)
@limiter.limit(RESOLVE_LIMIT)
async def resolve_query(
    request: Request,
    q: str = Query(..., max_length=256, description="Raw search query"),
    resolver: SearchResolver = Depends(get_resolver),
    recent: RecentSearches = Depends(get_recent_searches),
) -> ResolverResult:
    """Resolve a query and record it in the recent searches when verified."""
    result = await resolver.resolve(q)
    if result.verified:
        await recent.add(result.identifier, result.type)
    return result


@router.get("/recent", response_model=RecentSearchesResponse)
@limiter.limit(READ_LIMIT)
async def list_recent_searches(
    request: Request,
    recent: RecentSearches = Depends(get_recent_searches),
) -> RecentSearchesResponse:
    """List recent searches, newest first."""
    return RecentSearchesResponse(searches=await recent.list())


@router.delete("/recent", response_model=RecentSearchesResponse)
@limiter.limit(WRITE_LIMIT)
async def clear_recent_searches(
    request: Request,
    recent: RecentSearches = Depends(get_recent_searches),
) -> RecentSearchesResponse:
    """Clear the recent search history."""
    await recent.clear()
    logger.info("recent_searches_cleared")
    return RecentSearchesResponse(searches=[])


@router.delete("/recent/{query}", response_model=RecentSearchesResponse)
@limiter.limit(WRITE_LIMIT)
async def remove_recent_search(
    request: Request,
    query: str,
    recent: RecentSearches = Depends(get_recent_searches),
) -> RecentSearchesResponse:
    """Remove one query from the recent search history."""
    return RecentSearchesResponse(searches=await recent.remove(query))
