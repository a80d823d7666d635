"""
PURPOSE: Tests for the retry, timing and circuit breaker decorators.
"""

import pytest

from hyperlens.utils.decorators import CircuitBreaker, CircuitBreakerOpen, retry, timed


class Flaky:
    """Coroutine failing a fixed number of times before succeeding."""

    def __init__(self, failures: int, exc: Exception = ConnectionError("down")):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return "ok"


class TestRetry:
    """Test retry with backoff."""

    async def test_succeeds_after_retries(self):
        flaky = Flaky(2)
        wrapped = retry(max_retries=2, delay=0.001, exceptions=(ConnectionError,))(flaky)
        assert await wrapped() == "ok"
        assert flaky.calls == 3

    async def test_exhausted(self):
        flaky = Flaky(5)
        wrapped = retry(max_retries=1, delay=0.001, exceptions=(ConnectionError,))(flaky)
        with pytest.raises(ConnectionError):
            await wrapped()
        assert flaky.calls == 2

    async def test_other_exceptions_not_retried(self):
        flaky = Flaky(1, exc=ValueError("bad"))
        wrapped = retry(max_retries=3, delay=0.001, exceptions=(ConnectionError,))(flaky)
        with pytest.raises(ValueError):
            await wrapped()
        assert flaky.calls == 1


class TestTimed:
    """Test timing keeps the wrapped result."""

    async def test_returns_result(self):
        @timed
        async def answer():
            return 42

        assert await answer() == 42
        assert answer.__name__ == "answer"


class TestCircuitBreaker:
    """Test breaker state transitions."""

    @pytest.fixture
    def breaker(self, fake_clock):
        return CircuitBreaker("test", failure_threshold=2, reset_timeout=30.0, clock=fake_clock)

    async def test_opens_after_threshold(self, breaker):
        failing = Flaky(10)
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)
        assert breaker.state == CircuitBreaker.OPEN
        with pytest.raises(CircuitBreakerOpen):
            await breaker.call(failing)
        assert failing.calls == 2

    async def test_success_resets_count(self, breaker):
        flaky = Flaky(1)
        with pytest.raises(ConnectionError):
            await breaker.call(flaky)
        assert await breaker.call(flaky) == "ok"
        assert breaker.failure_count == 0
        assert breaker.state == CircuitBreaker.CLOSED

    async def test_half_open_then_closed(self, breaker, fake_clock):
        flaky = Flaky(2)
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(flaky)
        fake_clock.advance(30.0)
        assert await breaker.call(flaky) == "ok"
        assert breaker.state == CircuitBreaker.CLOSED

    async def test_half_open_failure_reopens(self, breaker, fake_clock):
        failing = Flaky(10)
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)
        fake_clock.advance(31.0)
        with pytest.raises(ConnectionError):
            await breaker.call(failing)
        assert breaker.state == CircuitBreaker.OPEN
