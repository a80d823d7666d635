"""
Search resolver

PURPOSE: Turn a raw search query into a ResolverResult: lexical
classification, cached lookup, bounded verification and route building.

Flow:
    1. Invalid input fails fast without calling the verifier.
    2. A cached verified result for the same query is returned as is.
    3. The verifier is awaited with a timeout.
    4. Verified results are cached; failures carry a kind and a message.

CALLED BY:
    - search/session.py
    - api/routes_search.py
"""

import asyncio
from typing import Optional

from hyperlens.config.constants import EntityType, ResolutionFailure
from hyperlens.config.settings import Settings, settings as default_settings
from hyperlens.exceptions import UpstreamError
from hyperlens.search.cancellation import CancellationToken
from hyperlens.search.classifier import build_route, validate_input
from hyperlens.search.models import ResolverResult, VerificationOutcome
from hyperlens.search.verifier import Verifier
from hyperlens.store.base import KeyValueStore
from hyperlens.utils.logger import get_logger

logger = get_logger("search.resolver")

INVALID_INPUT_MESSAGE = "Please enter a valid address, transaction, market, or token"
TIMEOUT_MESSAGE = "Resolution timed out. Please try again."
UPSTREAM_ERROR_MESSAGE = "Something went wrong. Please try again."

NOT_FOUND_MESSAGES = {
    EntityType.WALLET: "No activity found for this wallet",
    EntityType.TX: "Transaction not found. Check the hash and try again.",
    EntityType.TRADE: "Trade not found",
    EntityType.BLOCK: "Block not found",
    EntityType.MARKET: "Market not found",
    EntityType.TOKEN: "Token not found",
}


def cache_key(query: str) -> str:
    """Store key of the resolution cache for a query."""
    return f"resolve:{query.strip().lower()}"


class SearchResolver:
    """
    PURPOSE: Resolve search queries against a Verifier, caching verified results.

    Attributes:
        _verifier: Existence checker.
        _store: Key-value store holding the resolution cache.
        _timeout: Upper bound on one verification, in seconds.
        _cache_ttl: Lifetime of a cached verified result, in seconds.
    """

    def __init__(
        self,
        verifier: Verifier,
        store: KeyValueStore,
        config: Optional[Settings] = None,
    ):
        config = config or default_settings
        self._verifier = verifier
        self._store = store
        self._timeout = config.VERIFY_TIMEOUT_SECONDS
        self._cache_ttl = config.RESOLVE_CACHE_TTL_SECONDS

    async def get_cached(self, query: str) -> Optional[ResolverResult]:
        """
        PURPOSE: Return a cached verified result for a query, if any.

        Args:
            query: Raw query.

        Returns:
            Optional[ResolverResult]: Cached result with cached=True, or None.
        """
        raw = await self._store.get(cache_key(query))
        if not raw:
            return None
        result = ResolverResult.model_validate(raw)
        if not result.verified:
            return None
        return result.model_copy(update={"cached": True})

    async def resolve(
        self,
        query: str,
        token: Optional[CancellationToken] = None,
    ) -> ResolverResult:
        """
        PURPOSE: Resolve one query.

        Args:
            query: Raw user input.
            token: Optional cancellation token; when it fires while the
                verifier is running, the result is discarded.

        Returns:
            ResolverResult: Verified result or a failure with kind and message.

        Raises:
            ResolutionCancelled: If the token was cancelled.
        """
        validation = validate_input(query)
        if not validation.is_valid:
            return ResolverResult(
                type=EntityType.UNKNOWN,
                identifier=query.strip(),
                verified=False,
                route="/",
                error=INVALID_INPUT_MESSAGE,
                failure=ResolutionFailure.INVALID_INPUT,
            )

        entity_type = validation.type
        identifier = validation.cleaned
        route = build_route(entity_type, identifier)

        cached = await self.get_cached(query)
        if cached is not None:
            if token is not None:
                token.raise_if_cancelled()
            logger.debug("resolution_cache_hit", query=query.strip())
            return cached

        try:
            outcome: VerificationOutcome = await asyncio.wait_for(
                self._verifier.verify(entity_type, identifier),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            if token is not None:
                token.raise_if_cancelled()
            logger.warning(
                "resolution_timeout",
                entity_type=entity_type.value,
                identifier=identifier,
                timeout_seconds=self._timeout,
            )
            return self._failure(entity_type, identifier, route, ResolutionFailure.TIMEOUT, TIMEOUT_MESSAGE)
        except UpstreamError as e:
            if token is not None:
                token.raise_if_cancelled()
            logger.warning(
                "resolution_upstream_error",
                entity_type=entity_type.value,
                identifier=identifier,
                source=e.source,
                error=str(e),
            )
            return self._failure(
                entity_type, identifier, route, ResolutionFailure.UPSTREAM_ERROR, UPSTREAM_ERROR_MESSAGE
            )

        if token is not None:
            token.raise_if_cancelled()

        if not outcome.exists:
            logger.info(
                "resolution_not_found",
                entity_type=entity_type.value,
                identifier=identifier,
                checked_sources=outcome.checked_sources,
            )
            return self._failure(
                entity_type,
                identifier,
                route,
                ResolutionFailure.NOT_FOUND,
                NOT_FOUND_MESSAGES[entity_type],
                checked_sources=outcome.checked_sources,
            )

        result = ResolverResult(
            type=entity_type,
            identifier=identifier,
            verified=True,
            route=route,
            checked_sources=outcome.checked_sources,
            domains=outcome.domains,
        )
        await self._store.set(cache_key(query), result.model_dump(mode="json"), ttl_seconds=self._cache_ttl)
        logger.info("resolution_verified", entity_type=entity_type.value, route=route)
        return result

    @staticmethod
    def _failure(
        entity_type: EntityType,
        identifier: str,
        route: str,
        failure: ResolutionFailure,
        message: str,
        checked_sources: Optional[list] = None,
    ) -> ResolverResult:
        return ResolverResult(
            type=entity_type,
            identifier=identifier,
            verified=False,
            route=route,
            error=message,
            failure=failure,
            checked_sources=checked_sources or [],
        )
