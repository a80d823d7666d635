"""
PURPOSE: In-process KeyValueStore used in development and tests.
"""

import copy
from typing import Any, Callable, Dict, Optional, Tuple

from hyperlens.store.base import KeyValueStore
from hyperlens.utils.time_utils import monotonic


class InMemoryStore(KeyValueStore):
    """
    PURPOSE: Dict-backed store with lazy TTL expiry.

    Values are deep-copied on write and read so callers never share mutable
    state with the store. The clock is injectable for deterministic tests.

    Attributes:
        _entries: key -> (value, expires_at or None)
        _clock: Monotonic clock in seconds.
    """

    def __init__(self, clock: Callable[[], float] = monotonic) -> None:
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None

        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds is not None else None
        self._entries[key] = (copy.deepcopy(value), expires_at)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
