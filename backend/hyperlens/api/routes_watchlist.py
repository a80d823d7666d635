"""
PURPOSE: Watchlist API routes for HyperLens.

Provides listing, adding and removing watched wallets and tokens.
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request, status

from hyperlens.api.dependencies import get_watchlist
from hyperlens.core.rate_limit import limiter, READ_LIMIT, WRITE_LIMIT
from hyperlens.schemas import WatchlistResponse, WatchTokenRequest, WatchWalletRequest
from hyperlens.search.models import WatchlistItem
from hyperlens.search.watchlist import Watchlist
from hyperlens.utils.logger import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/watchlist", tags=["watchlist"])


async def _snapshot(watchlist: Watchlist) -> WatchlistResponse:
    items = await watchlist.items()
    return WatchlistResponse(
        items=items,
        wallets=[item for item in items if item.type == "wallet"],
        tokens=[item for item in items if item.type == "token"],
    )


@router.get("", response_model=WatchlistResponse)
@limiter.limit(READ_LIMIT)
async def list_watchlist(
    request: Request,
    watchlist: Watchlist = Depends(get_watchlist),
) -> WatchlistResponse:
    """List watched wallets and tokens."""
    return await _snapshot(watchlist)


@router.post("/wallets", response_model=WatchlistItem, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def watch_wallet(
    request: Request,
    body: WatchWalletRequest,
    watchlist: Watchlist = Depends(get_watchlist),
) -> WatchlistItem:
    """Watch a wallet. Watching it again returns the existing item."""
    item = await watchlist.add_wallet(body.address, body.name)
    logger.info("wallet_watched", item_id=item.id)
    return item


@router.post("/tokens", response_model=WatchlistItem, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def watch_token(
    request: Request,
    body: WatchTokenRequest,
    watchlist: Watchlist = Depends(get_watchlist),
) -> WatchlistItem:
    """Watch a token. Watching it again returns the existing item."""
    item = await watchlist.add_token(body.symbol, body.address)
    logger.info("token_watched", item_id=item.id)
    return item


@router.get("/check/{item_type}/{identifier}")
@limiter.limit(READ_LIMIT)
async def check_watching(
    request: Request,
    item_type: Literal["wallet", "token"],
    identifier: str,
    watchlist: Watchlist = Depends(get_watchlist),
) -> dict:
    """Whether a wallet or token is watched."""
    return {"watching": await watchlist.is_watching(item_type, identifier)}


@router.delete("/{item_id}", response_model=WatchlistResponse)
@limiter.limit(WRITE_LIMIT)
async def unwatch(
    request: Request,
    item_id: str,
    watchlist: Watchlist = Depends(get_watchlist),
) -> WatchlistResponse:
    """Remove a watched item by id."""
    if not await watchlist.remove(item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Watchlist item {item_id} not found",
        )
    logger.info("watchlist_item_removed", item_id=item_id)
    return await _snapshot(watchlist)
