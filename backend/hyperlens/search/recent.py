"""
PURPOSE: Recent search history, newest first, persisted in the key-value store.

Entries are de-duplicated case-insensitively and the list is capped at
RECENT_SEARCHES_MAX items.
"""

from typing import Any, List, Optional

from hyperlens.config.constants import EntityType
from hyperlens.config.settings import settings
from hyperlens.search.models import RecentSearch
from hyperlens.store.base import KeyValueStore
from hyperlens.utils.time_utils import now_ms

RECENT_SEARCHES_KEY = "recent_searches"


class RecentSearches:
    """
    PURPOSE: Store-backed recent search list.

    CALLED BY: search/session.py, api/routes_search.py
    """

    def __init__(self, store: KeyValueStore, max_items: Optional[int] = None, key: str = RECENT_SEARCHES_KEY):
        self._store = store
        self._max_items = max_items if max_items is not None else settings.RECENT_SEARCHES_MAX
        self._key = key

    async def list(self) -> List[RecentSearch]:
        """Recent searches, newest first. Unreadable entries are dropped."""
        return _parse(await self._store.get(self._key))

    async def add(self, query: str, entity_type: EntityType) -> List[RecentSearch]:
        """
        PURPOSE: Record a query at the front of the history.

        Args:
            query: Query as resolved (usually the canonical identifier).
            entity_type: Its classification.

        Returns:
            List[RecentSearch]: Updated history.
        """
        query = query.strip()
        if not query:
            return await self.list()

        entry = RecentSearch(query=query, type=entity_type, timestamp=now_ms())

        def prepend(raw: Optional[Any]) -> list:
            searches = [s for s in _parse(raw) if s.query.lower() != query.lower()]
            searches.insert(0, entry)
            return _dump(searches[: self._max_items])

        return _parse(await self._store.update(self._key, prepend))

    async def remove(self, query: str) -> List[RecentSearch]:
        """Drop a query (case-insensitive) and return the updated history."""
        query = query.strip().lower()

        def drop(raw: Optional[Any]) -> list:
            return _dump([s for s in _parse(raw) if s.query.lower() != query])

        return _parse(await self._store.update(self._key, drop))

    async def clear(self) -> None:
        await self._store.delete(self._key)


def _parse(raw: Optional[Any]) -> List[RecentSearch]:
    searches: List[RecentSearch] = []
    for entry in raw or []:
        try:
            searches.append(RecentSearch.model_validate(entry))
        except ValueError:
            continue
    return searches


def _dump(searches: List[RecentSearch]) -> list:
    return [s.model_dump(mode="json") for s in searches]
