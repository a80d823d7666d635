"""
PURPOSE: Watched wallets and tokens, persisted in the key-value store.

Wallet ids are "wallet-{lowercased address}", token ids are
"token-{UPPERCASED SYMBOL}". Adding an item that is already watched is a
no-op.
"""

from typing import Any, Callable, List, Literal, Optional

from hyperlens.exceptions import HyperLensError, InvalidWalletAddress
from hyperlens.search.models import WatchlistItem
from hyperlens.store.base import KeyValueStore
from hyperlens.utils.time_utils import now_ms
from hyperlens.utils.validators import normalize_address

WATCHLIST_KEY = "watchlist"


class Watchlist:
    """
    PURPOSE: Store-backed watchlist.

    CALLED BY: api/routes_watchlist.py
    """

    def __init__(self, store: KeyValueStore, key: str = WATCHLIST_KEY):
        self._store = store
        self._key = key

    async def items(self) -> List[WatchlistItem]:
        return _parse(await self._store.get(self._key))

    async def wallets(self) -> List[WatchlistItem]:
        return [item for item in await self.items() if item.type == "wallet"]

    async def tokens(self) -> List[WatchlistItem]:
        return [item for item in await self.items() if item.type == "token"]

    async def add_wallet(self, address: str, name: Optional[str] = None) -> WatchlistItem:
        """
        PURPOSE: Watch a wallet.

        Args:
            address: Wallet address, any case.
            name: Optional label.

        Returns:
            WatchlistItem: The new or already present item.

        Raises:
            InvalidWalletAddress: If address is not a wallet address.
        """
        try:
            address = normalize_address(address)
        except ValueError as e:
            raise InvalidWalletAddress(address) from e

        candidate = WatchlistItem(
            id=f"wallet-{address}",
            type="wallet",
            address=address,
            name=name,
            added_at=now_ms(),
        )
        return await self._add(candidate, lambda item: item.type == "wallet" and item.address == address)

    async def add_token(self, symbol: str, address: Optional[str] = None) -> WatchlistItem:
        """
        PURPOSE: Watch a token by symbol.

        Args:
            symbol: Token symbol, any case.
            address: Optional token contract or spot id.

        Returns:
            WatchlistItem: The new or already present item.
        """
        symbol = symbol.strip().upper()
        if not symbol:
            raise HyperLensError("Token symbol required")

        candidate = WatchlistItem(
            id=f"token-{symbol}",
            type="token",
            symbol=symbol,
            address=address,
            added_at=now_ms(),
        )
        return await self._add(candidate, lambda item: item.type == "token" and item.symbol == symbol)

    async def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns whether anything was removed."""
        removed = False

        def drop(raw: Optional[Any]) -> list:
            nonlocal removed
            items = _parse(raw)
            kept = [item for item in items if item.id != item_id]
            removed = len(kept) != len(items)
            return _dump(kept)

        await self._store.update(self._key, drop)
        return removed

    async def is_watching(self, item_type: Literal["wallet", "token"], identifier: str) -> bool:
        """Whether a wallet address or token symbol is watched (case-insensitive)."""
        for item in await self.items():
            if item.type != item_type:
                continue
            if item_type == "wallet" and item.address == identifier.strip().lower():
                return True
            if item_type == "token" and item.symbol == identifier.strip().upper():
                return True
        return False

    async def _add(self, candidate: WatchlistItem, same: Callable[[WatchlistItem], bool]) -> WatchlistItem:
        result = candidate

        def append(raw: Optional[Any]) -> list:
            nonlocal result
            items = _parse(raw)
            result = next((item for item in items if same(item)), candidate)
            if result is candidate:
                items.append(candidate)
            return _dump(items)

        await self._store.update(self._key, append)
        return result


def _parse(raw: Optional[Any]) -> List[WatchlistItem]:
    return [WatchlistItem.model_validate(entry) for entry in raw or []]


def _dump(items: List[WatchlistItem]) -> list:
    return [item.model_dump(mode="json") for item in items]
