"""
Search session

PURPOSE: Interactive search state machine. Tracks one query as the user
types (debounced lexical validation), submits it to the resolver, records
successful searches and navigates to the resolved route.

States:
    idle -> validating -> idle            (typing, debounced validation)
    idle/validating/success/error -> resolving -> success | error
    any -> idle                           (clear)

At most one resolution is active. Submitting again, editing the query or
clearing the session cancels the in-flight one, and a cancelled resolution
never touches the session.

CALLED BY: interactive clients embedding the search box behaviour
"""

import asyncio
from typing import Callable, Dict, FrozenSet, List, Optional

from hyperlens.config.constants import EntityType, SearchState
from hyperlens.config.settings import settings
from hyperlens.exceptions import InvalidStateTransition, ResolutionCancelled
from hyperlens.search.cancellation import CancellationToken
from hyperlens.search.classifier import build_route, validate_input
from hyperlens.search.models import RecentSearch, ResolverResult
from hyperlens.search.recent import RecentSearches
from hyperlens.search.resolver import UPSTREAM_ERROR_MESSAGE, SearchResolver
from hyperlens.utils.logger import get_logger

logger = get_logger("search.session")

TRANSITIONS: Dict[SearchState, FrozenSet[SearchState]] = {
    SearchState.IDLE: frozenset({SearchState.IDLE, SearchState.VALIDATING, SearchState.RESOLVING}),
    SearchState.VALIDATING: frozenset({SearchState.IDLE, SearchState.VALIDATING, SearchState.RESOLVING}),
    SearchState.RESOLVING: frozenset({
        SearchState.IDLE,
        SearchState.VALIDATING,
        SearchState.RESOLVING,
        SearchState.SUCCESS,
        SearchState.ERROR,
    }),
    SearchState.SUCCESS: frozenset({SearchState.IDLE, SearchState.VALIDATING, SearchState.RESOLVING}),
    SearchState.ERROR: frozenset({SearchState.IDLE, SearchState.VALIDATING, SearchState.RESOLVING}),
}


def _no_navigation(route: str) -> None:
    return None


class SearchSession:
    """
    PURPOSE: One user's search box.

    Attributes:
        query: Current raw query.
        state: Current SearchState.
        is_valid: Lexical validity, None until validated.
        detected_type: Lexical classification of the query.
        result: Last resolver result.
        error: Last failure message.
        checked_sources: Sources consulted by the last failed resolution.
        recent_searches: Snapshot of the recent search history.
    """

    def __init__(
        self,
        resolver: SearchResolver,
        recent: RecentSearches,
        debounce_seconds: Optional[float] = None,
        on_navigate: Callable[[str], None] = _no_navigation,
    ):
        self._resolver = resolver
        self._recent = recent
        self._debounce = debounce_seconds if debounce_seconds is not None else settings.SEARCH_DEBOUNCE_SECONDS
        self._on_navigate = on_navigate

        self.query = ""
        self.state = SearchState.IDLE
        self.is_valid: Optional[bool] = None
        self.detected_type = EntityType.UNKNOWN
        self.result: Optional[ResolverResult] = None
        self.error: Optional[str] = None
        self.checked_sources: List[str] = []
        self.recent_searches: List[RecentSearch] = []

        self._validation_handle: Optional[asyncio.TimerHandle] = None
        self._token: Optional[CancellationToken] = None
        self._task: Optional["asyncio.Future[ResolverResult]"] = None

    def _transition(self, target: SearchState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidStateTransition(self.state.value, target.value)
        self.state = target

    # ────────────────────────────────────────────────────────────
    # Typing
    # ────────────────────────────────────────────────────────────

    def set_query(self, value: str) -> None:
        """
        PURPOSE: Replace the query and schedule debounced validation.

        Must be called from a running event loop.

        Args:
            value: New raw query.
        """
        self.query = value
        self.result = None
        self.error = None
        self.checked_sources = []
        self._cancel_validation()
        self._cancel_inflight("query_changed")

        if not value.strip():
            self.is_valid = None
            self.detected_type = EntityType.UNKNOWN
            self._transition(SearchState.IDLE)
            return

        self._transition(SearchState.VALIDATING)
        loop = asyncio.get_running_loop()
        self._validation_handle = loop.call_later(self._debounce, self._run_validation, value)

    def _run_validation(self, value: str) -> None:
        self._validation_handle = None
        if value != self.query or self.state != SearchState.VALIDATING:
            return
        validation = validate_input(value)
        self.is_valid = validation.is_valid
        self.detected_type = validation.type
        self._transition(SearchState.IDLE)

    def _cancel_validation(self) -> None:
        if self._validation_handle is not None:
            self._validation_handle.cancel()
            self._validation_handle = None

    def _cancel_inflight(self, reason: str) -> None:
        if self._token is not None:
            self._token.cancel(reason)
            self._token = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    # ────────────────────────────────────────────────────────────
    # Resolution
    # ────────────────────────────────────────────────────────────

    async def submit(self) -> Optional[ResolverResult]:
        """
        PURPOSE: Resolve the current query, superseding any earlier submit.

        Returns:
            Optional[ResolverResult]: The result, or None when the query is
            blank or this resolution was superseded.
        """
        query = self.query.strip()
        if not query:
            return None

        self._cancel_validation()
        self._cancel_inflight("superseded")

        validation = validate_input(query)
        self.is_valid = validation.is_valid
        self.detected_type = validation.type

        token = CancellationToken()
        task = asyncio.ensure_future(self._resolver.resolve(query, token))
        self._token = token
        self._task = task
        self.error = None
        self.checked_sources = []
        self._transition(SearchState.RESOLVING)

        try:
            result = await task
        except ResolutionCancelled:
            return None
        except asyncio.CancelledError:
            if token.is_cancelled:
                return None
            raise
        except Exception as e:
            if token.is_cancelled:
                return None
            logger.error("search_submit_failed", query=query, error=str(e), exc_info=True)
            self._finish(token)
            self.error = UPSTREAM_ERROR_MESSAGE
            self._transition(SearchState.ERROR)
            return None

        if token.is_cancelled:
            return None

        if result.verified:
            recent = await self._recent.add(result.identifier, result.type)
            # the query may have changed while the history was written
            if token.is_cancelled or self._token is not token:
                return None
            self._finish(token)
            self.result = result
            self.recent_searches = recent
            self._transition(SearchState.SUCCESS)
            self._on_navigate(result.route)
        else:
            self._finish(token)
            self.result = result
            self.error = result.error
            self.checked_sources = list(result.checked_sources)
            self._transition(SearchState.ERROR)

        return result

    def _finish(self, token: CancellationToken) -> None:
        if self._token is token:
            self._token = None
            self._task = None

    def clear(self) -> None:
        """Reset the session and cancel any pending validation or resolution."""
        self._cancel_validation()
        self._cancel_inflight("cleared")
        self.query = ""
        self.is_valid = None
        self.detected_type = EntityType.UNKNOWN
        self.result = None
        self.error = None
        self.checked_sources = []
        self._transition(SearchState.IDLE)

    # ────────────────────────────────────────────────────────────
    # Recent searches
    # ────────────────────────────────────────────────────────────

    async def load_recent(self) -> List[RecentSearch]:
        self.recent_searches = await self._recent.list()
        return self.recent_searches

    async def remove_recent(self, query: str) -> List[RecentSearch]:
        self.recent_searches = await self._recent.remove(query)
        return self.recent_searches

    async def select_recent(self, search: RecentSearch) -> str:
        """
        PURPOSE: Navigate to a recent search without re-verifying it.

        Uses the cached verified route when one exists, otherwise the route
        built from the recorded type.

        Args:
            search: History entry picked by the user.

        Returns:
            str: Route navigated to.
        """
        self.query = search.query
        cached = await self._resolver.get_cached(search.query)
        route = cached.route if cached is not None else build_route(search.type, search.query)
        self._on_navigate(route)
        return route
