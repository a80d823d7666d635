"""
Entity verification

PURPOSE: Confirm that a classified search query refers to something that
exists on Hyperliquid, and on which domain (Hypercore, HyperEVM).

A failing source counts as "not found on that source" and is logged. Only
when every consulted source failed is an UpstreamError raised, so the
resolver can tell "does not exist" apart from "could not check".

CALLED BY:
    - search/resolver.py
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from hyperlens.clients.hyperliquid import HyperliquidClient
from hyperlens.config.constants import Domain, EntityType
from hyperlens.config.settings import settings
from hyperlens.exceptions import UpstreamError
from hyperlens.search.classifier import strip_perp_suffix
from hyperlens.search.models import DomainFlags, VerificationOutcome
from hyperlens.utils.logger import get_logger
from hyperlens.utils.validators import normalize_tx_hash, validate_block_number

logger = get_logger("search.verifier")

TRADE_INDEX = "trade_index"
EMPTY_CODE = ("", "0x", "0x0")

TradeLookup = Callable[[str], Awaitable[bool]]


class Verifier(Protocol):
    """Anything able to confirm an entity's existence."""

    async def verify(self, entity_type: EntityType, identifier: str) -> VerificationOutcome:
        ...


@dataclass
class _Trail:
    checked: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _objects(value: Any) -> List[Dict[str, Any]]:
    """Dict entries of an upstream list; anything else is ignored."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


class HyperliquidVerifier:
    """
    PURPOSE: Verifier backed by the public Hyperliquid APIs.

    Attributes:
        _client: Upstream HTTP client.
        _trade_lookup: Optional coroutine answering whether a trade id exists.
        _l1_block_threshold: Block heights at or above this are tried on Hypercore first.
    """

    def __init__(
        self,
        client: HyperliquidClient,
        trade_lookup: Optional[TradeLookup] = None,
        l1_block_threshold: Optional[int] = None,
    ):
        self._client = client
        self._trade_lookup = trade_lookup
        self._l1_block_threshold = (
            l1_block_threshold if l1_block_threshold is not None else settings.L1_BLOCK_THRESHOLD
        )

    async def verify(self, entity_type: EntityType, identifier: str) -> VerificationOutcome:
        """
        PURPOSE: Dispatch verification by entity type.

        Args:
            entity_type: Classified type of the query.
            identifier: Canonical identifier.

        Returns:
            VerificationOutcome: Existence, confirming domains and consulted sources.

        Raises:
            UpstreamError: When every consulted source failed.
        """
        trail = _Trail()
        handlers = {
            EntityType.WALLET: self._verify_wallet,
            EntityType.TX: self._verify_tx,
            EntityType.TRADE: self._verify_trade,
            EntityType.BLOCK: self._verify_block,
            EntityType.MARKET: self._verify_market,
            EntityType.TOKEN: self._verify_token,
        }
        handler = handlers.get(entity_type)
        if handler is None:
            return VerificationOutcome(exists=False)

        outcome = await handler(identifier, trail)

        if not outcome.exists and trail.checked and len(trail.failed) == len(trail.checked):
            raise UpstreamError(",".join(trail.failed), "all verification sources failed")

        logger.debug(
            "entity_verified",
            entity_type=entity_type.value,
            identifier=identifier,
            exists=outcome.exists,
            checked_sources=outcome.checked_sources,
        )
        return outcome

    async def _check_source(self, source: str, check: Callable[[], Awaitable[bool]], trail: _Trail) -> bool:
        trail.checked.append(source)
        try:
            return bool(await check())
        except UpstreamError as e:
            trail.failed.append(source)
            logger.warning("verification_source_failed", source=source, error=str(e))
            return False

    # ────────────────────────────────────────────────────────────
    # Source checks
    # ────────────────────────────────────────────────────────────

    async def _hypercore_wallet_active(self, address: str) -> bool:
        details = await self._client.user_details(address)
        if details.get("txs"):
            return True

        state = await self._client.clearinghouse_state(address)
        if state.get("assetPositions"):
            return True
        summary = state.get("marginSummary")
        if not isinstance(summary, dict):
            return False
        return _to_float(summary.get("accountValue")) > 0

    async def _hyperevm_wallet_active(self, address: str) -> bool:
        balance, code = await asyncio.gather(
            self._client.evm_balance(address),
            self._client.evm_code(address),
        )
        return balance != 0 or code not in EMPTY_CODE

    async def _hyperevm_tx_exists(self, tx_hash: str) -> bool:
        tx = await self._client.evm_transaction(tx_hash)
        return bool(tx and tx.get("hash"))

    async def _hypercore_tx_exists(self, tx_hash: str) -> bool:
        details = await self._client.tx_details(tx_hash)
        return bool(details.get("tx"))

    async def _hyperevm_block_exists(self, height: int) -> bool:
        block = await self._client.evm_block(height)
        return bool(block and block.get("number"))

    async def _hypercore_block_exists(self, height: int) -> bool:
        details = await self._client.block_details(height)
        return bool(details.get("blockDetails"))

    # ────────────────────────────────────────────────────────────
    # Per-type verification
    # ────────────────────────────────────────────────────────────

    async def _verify_wallet(self, address: str, trail: _Trail) -> VerificationOutcome:
        hypercore, hyperevm = await asyncio.gather(
            self._check_source(Domain.HYPERCORE.value, lambda: self._hypercore_wallet_active(address), trail),
            self._check_source(Domain.HYPEREVM.value, lambda: self._hyperevm_wallet_active(address), trail),
        )
        return VerificationOutcome(
            exists=hypercore or hyperevm,
            domains=DomainFlags(hypercore=hypercore, hyperevm=hyperevm),
            checked_sources=list(trail.checked),
        )

    async def _verify_tx(self, identifier: str, trail: _Trail) -> VerificationOutcome:
        try:
            tx_hash = normalize_tx_hash(identifier)
        except ValueError:
            return VerificationOutcome(exists=False)

        if await self._check_source(Domain.HYPEREVM.value, lambda: self._hyperevm_tx_exists(tx_hash), trail):
            return VerificationOutcome(
                exists=True,
                domains=DomainFlags(hyperevm=True),
                checked_sources=list(trail.checked),
            )

        hypercore = await self._check_source(
            Domain.HYPERCORE.value, lambda: self._hypercore_tx_exists(tx_hash), trail
        )
        return VerificationOutcome(
            exists=hypercore,
            domains=DomainFlags(hypercore=hypercore),
            checked_sources=list(trail.checked),
        )

    async def _verify_trade(self, trade_id: str, trail: _Trail) -> VerificationOutcome:
        if self._trade_lookup is None:
            return VerificationOutcome(exists=False, checked_sources=[TRADE_INDEX])

        lookup = self._trade_lookup
        found = await self._check_source(TRADE_INDEX, lambda: lookup(trade_id), trail)
        return VerificationOutcome(
            exists=found,
            domains=DomainFlags(hypercore=found),
            checked_sources=list(trail.checked),
        )

    async def _verify_block(self, identifier: str, trail: _Trail) -> VerificationOutcome:
        if not validate_block_number(identifier):
            return VerificationOutcome(exists=False)
        height = int(identifier)
        checks = {
            Domain.HYPERCORE: self._hypercore_block_exists,
            Domain.HYPEREVM: self._hyperevm_block_exists,
        }
        if height >= self._l1_block_threshold:
            order = (Domain.HYPERCORE, Domain.HYPEREVM)
        else:
            order = (Domain.HYPEREVM, Domain.HYPERCORE)

        for domain in order:
            check = checks[domain]
            if await self._check_source(domain.value, lambda: check(height), trail):
                return VerificationOutcome(
                    exists=True,
                    domains=DomainFlags(**{domain.value: True}),
                    checked_sources=list(trail.checked),
                    data={"height": height, "domain": domain.value},
                )

        return VerificationOutcome(exists=False, checked_sources=list(trail.checked))

    async def _find_perp_market(self, symbol: str) -> Optional[Dict[str, Any]]:
        meta = await self._client.perp_meta()
        for market in _objects(meta.get("universe")):
            name = market.get("name")
            if isinstance(name, str) and strip_perp_suffix(name) == symbol:
                return market
        return None

    async def _find_spot_token(self, identifier: str) -> Optional[Dict[str, Any]]:
        meta = await self._client.spot_meta()
        upper = identifier.upper()
        lower = identifier.lower()
        for token in _objects(meta.get("tokens")):
            name = token.get("name")
            token_id = token.get("tokenId")
            if isinstance(name, str) and name.upper() == upper:
                return token
            if isinstance(token_id, str) and token_id.lower() == lower:
                return token
        return None

    async def _verify_market(self, symbol: str, trail: _Trail) -> VerificationOutcome:
        match: Dict[str, Any] = {}

        async def check() -> bool:
            market = await self._find_perp_market(strip_perp_suffix(symbol))
            if market:
                match.update(market)
            return market is not None

        found = await self._check_source(Domain.HYPERCORE.value, check, trail)
        return VerificationOutcome(
            exists=found,
            domains=DomainFlags(hypercore=found),
            checked_sources=list(trail.checked),
            data=match or None,
        )

    async def _verify_token(self, identifier: str, trail: _Trail) -> VerificationOutcome:
        found: Dict[str, Any] = {}

        async def check() -> bool:
            perp = await self._find_perp_market(strip_perp_suffix(identifier))
            if perp:
                found.update({"kind": "perp", **perp})
                return True
            spot = await self._find_spot_token(identifier)
            if spot:
                found.update({"kind": "spot", **spot})
                return True
            return False

        exists = await self._check_source(Domain.HYPERCORE.value, check, trail)
        return VerificationOutcome(
            exists=exists,
            domains=DomainFlags(hypercore=exists),
            checked_sources=list(trail.checked),
            data=found or None,
        )
