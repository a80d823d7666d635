"""
PURPOSE: Pytest fixtures for HyperLens tests.

Provides shared test data and fakes including:
- Test configuration settings
- Controllable clock and in-memory key-value store
- Slow store whose reads and writes suspend, for interleaving tests
- Fake verifier with per-identifier outcomes, delays and errors
- Sample positions and a sample clearinghouse snapshot
"""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from hyperlens.config.constants import EntityType
from hyperlens.config.settings import Settings
from hyperlens.risk.risk_models import Position
from hyperlens.search.models import DomainFlags, VerificationOutcome
from hyperlens.store.memory import InMemoryStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeVerifier:
    """
    Verifier double.

    Unknown identifiers are reported as not found on hypercore. Identifiers
    listed in delays sleep before answering; error, when set, is raised.
    """

    def __init__(self) -> None:
        self.outcomes: Dict[str, VerificationOutcome] = {}
        self.delays: Dict[str, float] = {}
        self.error: Optional[BaseException] = None
        self.calls: List[Tuple[EntityType, str]] = []

    def found(self, identifier: str, hypercore: bool = True, hyperevm: bool = False) -> None:
        sources = [name for name, on in (("hypercore", hypercore), ("hyperevm", hyperevm)) if on]
        self.outcomes[identifier] = VerificationOutcome(
            exists=True,
            domains=DomainFlags(hypercore=hypercore, hyperevm=hyperevm),
            checked_sources=sources,
        )

    async def verify(self, entity_type: EntityType, identifier: str) -> VerificationOutcome:
        self.calls.append((entity_type, identifier))
        delay = self.delays.get(identifier, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        return self.outcomes.get(
            identifier,
            VerificationOutcome(exists=False, checked_sources=["hypercore"]),
        )


@pytest.fixture
def test_settings():
    """
    PURPOSE: Settings override with test values.

    Provides a Settings object with:
    - In-memory store
    - Short verification timeout and debounce
    - Rate limiting disabled
    - Debug logging

    Returns:
        Settings: Configuration object with test values.
    """
    return Settings(
        STORE_BACKEND="memory",
        REDIS_URL="redis://localhost:6379/1",
        HYPERLIQUID_INFO_URL="https://api.test/info",
        HYPERLIQUID_EXPLORER_URL="https://api.test/explorer",
        HYPEREVM_RPC_URL="https://rpc.test/evm",
        CIRCUIT_FAILURE_THRESHOLD=2,
        CIRCUIT_RESET_SECONDS=30.0,
        VERIFY_TIMEOUT_SECONDS=0.2,
        RESOLVE_CACHE_TTL_SECONDS=300,
        RECENT_SEARCHES_MAX=5,
        SEARCH_DEBOUNCE_SECONDS=0.01,
        RATE_LIMIT_ENABLED=False,
        DEBUG=True,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def fake_clock():
    """FakeClock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def memory_store(fake_clock):
    """InMemoryStore driven by fake_clock."""
    return InMemoryStore(clock=fake_clock)


class SlowStore(InMemoryStore):
    """InMemoryStore whose get and set yield to the event loop for `delay` seconds."""

    def __init__(self, delay: float = 0.02, **kwargs):
        super().__init__(**kwargs)
        self.delay = delay

    async def get(self, key):
        await asyncio.sleep(self.delay)
        return await super().get(key)

    async def set(self, key, value, ttl_seconds=None):
        await asyncio.sleep(self.delay)
        await super().set(key, value, ttl_seconds)


@pytest.fixture
def slow_store(fake_clock):
    """SlowStore with a 20ms delay per read and write."""
    return SlowStore(clock=fake_clock)


@pytest.fixture
def fake_verifier():
    """FakeVerifier with no entities registered."""
    return FakeVerifier()


@pytest.fixture
def make_position():
    """
    PURPOSE: Factory for valid Position objects with safe defaults.

    Returns:
        Callable[..., Position]: Keyword overrides are applied on top of the defaults.
    """
    def _make(**overrides) -> Position:
        fields = {
            "market": "BTC-PERP",
            "effective_leverage": 1.0,
            "liq_score": 0.1,
            "margin_used": 1000.0,
            "position_value": 5000.0,
            "unrealized_pnl": 0.0,
        }
        fields.update(overrides)
        return Position(**fields)

    return _make


@pytest.fixture
def sample_clearinghouse_state():
    """
    PURPOSE: clearinghouseState payload with one cross, one isolated and one closed position.

    Returns:
        dict: Payload shaped like the Hyperliquid info API response.
    """
    return {
        "marginSummary": {
            "accountValue": "20000.0",
            "totalNtlPos": "60000.0",
            "totalRawUsd": "20000.0",
            "totalMarginUsed": "4450.0",
        },
        "assetPositions": [
            {
                "position": {
                    "coin": "ETH",
                    "szi": "-10.0",
                    "entryPx": "3000.0",
                    "positionValue": "29000.0",
                    "unrealizedPnl": "1000.0",
                    "returnOnEquity": "0.34",
                    "leverage": {"type": "isolated", "value": 10},
                    "liquidationPx": "3250.0",
                    "marginUsed": "2900.0",
                    "maxLeverage": 50,
                }
            },
            {
                "position": {
                    "coin": "BTC",
                    "szi": "0.5",
                    "entryPx": "60000.0",
                    "positionValue": "31000.0",
                    "unrealizedPnl": "1000.0",
                    "returnOnEquity": "0.06",
                    "leverage": {"type": "cross", "value": 20},
                    "liquidationPx": "40000.0",
                    "marginUsed": "1550.0",
                    "maxLeverage": 40,
                }
            },
            {
                "position": {
                    "coin": "SOL",
                    "szi": "0.0",
                    "entryPx": "150.0",
                    "positionValue": "0.0",
                    "unrealizedPnl": "0.0",
                    "returnOnEquity": "0.0",
                    "leverage": {"type": "cross", "value": 5},
                    "liquidationPx": None,
                    "marginUsed": "0.0",
                    "maxLeverage": 20,
                }
            },
        ],
    }


@pytest.fixture
def sample_mids():
    """Mid prices for the sample positions."""
    return {"BTC": 62000.0, "ETH": 2900.0}
