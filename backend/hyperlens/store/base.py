"""
PURPOSE: Key-value store interface used for the resolution cache, recent
searches and the watchlist.

Values are JSON-compatible Python objects (dict, list, str, numbers, bool,
None). Implementations expire entries after an optional TTL.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

Mutation = Callable[[Optional[Any]], Any]


class KeyValueStore(ABC):
    """
    PURPOSE: Async key-value store with per-key time-to-live.

    CALLED BY: search/resolver.py, search/recent.py, search/watchlist.py
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        PURPOSE: Read a value.

        Args:
            key: Store key.

        Returns:
            Optional[Any]: Stored value, or None when missing or expired.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """
        PURPOSE: Write a value, replacing any previous one.

        Args:
            key: Store key.
            value: JSON-compatible value.
            ttl_seconds: Lifetime in seconds; None keeps the value until deleted.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        PURPOSE: Remove a key. Missing keys are ignored.

        Args:
            key: Store key.
        """

    async def update(self, key: str, mutate: Mutation, ttl_seconds: Optional[float] = None) -> Any:
        """
        PURPOSE: Read-modify-write one key without losing concurrent updates.

        The default implementation serialises updates per key inside this
        process. Stores shared between processes override it with an
        atomic primitive of their backend.

        Args:
            key: Store key.
            mutate: Pure function from the current value (None when missing)
                to the new value. It may be called more than once.
            ttl_seconds: Lifetime of the new value, as in set().

        Returns:
            Any: The value written.
        """
        async with self._key_lock(key):
            value = mutate(await self.get(key))
            await self.set(key, value, ttl_seconds)
            return value

    def _key_lock(self, key: str) -> asyncio.Lock:
        locks: Dict[str, asyncio.Lock] = self.__dict__.setdefault("_update_locks", {})
        return locks.setdefault(key, asyncio.Lock())

    async def ping(self) -> bool:
        """Whether the backing store is reachable."""
        return True

    async def close(self) -> None:
        """Release backing resources."""
        return None
