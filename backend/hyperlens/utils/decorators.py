"""
PURPOSE: Resilience decorators for upstream calls: retry with backoff, execution
timing, and a circuit breaker guarding the Hyperliquid endpoints.
"""

import asyncio
import functools
import threading
import time
from typing import Any, Callable, Optional, Tuple

from hyperlens.utils.logger import get_logger

logger = get_logger(__name__)


def retry(
    max_retries: int = 2,
    delay: float = 0.25,
    backoff: float = 2.0,
    exceptions: Tuple[type, ...] = (Exception,)
) -> Callable:
    """
    PURPOSE: Retry an async function with exponential backoff on the given exceptions.

    Args:
        max_retries: Maximum number of retry attempts after the first call.
        delay: Initial delay between attempts in seconds.
        backoff: Multiplier applied to the delay after each failure.
        exceptions: Exception types that trigger a retry.

    Returns:
        Callable: Decorated coroutine function.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            current_delay = delay
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        logger.error(
                            "retry_exhausted",
                            function=func.__name__,
                            attempts=attempt + 1,
                            error=str(e),
                        )
                        raise
                    logger.info(
                        "retry_attempt",
                        function=func.__name__,
                        attempt=attempt + 1,
                        delay=current_delay,
                        error=str(e),
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff

        return wrapper

    return decorator


def timed(func: Callable) -> Callable:
    """
    PURPOSE: Log the execution time of an async function in milliseconds.

    Args:
        func: Coroutine function to time.

    Returns:
        Callable: Decorated coroutine function.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Any:
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(
                "function_timed",
                function=func.__name__,
                elapsed_ms=f"{elapsed_ms:.2f}",
            )

    return wrapper


class CircuitBreakerOpen(Exception):
    """
    PURPOSE: Raised when a call is short-circuited because the breaker is OPEN.
    """
    pass


class CircuitBreaker:
    """
    PURPOSE: Circuit breaker for async upstream calls.

    Transitions CLOSED -> OPEN after failure_threshold consecutive failures,
    OPEN -> HALF_OPEN once reset_timeout has elapsed, and HALF_OPEN -> CLOSED
    on the next success (or back to OPEN on failure).

    Attributes:
        failure_threshold: Consecutive failures before opening.
        reset_timeout: Seconds to stay OPEN before a trial call.
        failure_count: Current consecutive failure count.
        state: CLOSED, OPEN or HALF_OPEN.
    """

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = self.CLOSED
        self._clock = clock
        self._lock = threading.Lock()

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        PURPOSE: Await func(*args, **kwargs) under breaker protection.

        Raises:
            CircuitBreakerOpen: If the breaker is OPEN and the reset timeout has not elapsed.
        """
        with self._lock:
            if self.state == self.OPEN:
                if self._should_attempt_reset():
                    self.state = self.HALF_OPEN
                    logger.info("circuit_breaker_half_open", breaker=self.name)
                else:
                    raise CircuitBreakerOpen(f"Circuit breaker OPEN for {self.name}")

        try:
            result = await func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise

        self._on_success()
        return result

    def _should_attempt_reset(self) -> bool:
        if self.last_failure_time is None:
            return False
        return self._clock() - self.last_failure_time >= self.reset_timeout

    def _on_success(self) -> None:
        with self._lock:
            self.failure_count = 0
            if self.state == self.HALF_OPEN:
                self.state = self.CLOSED
                logger.info("circuit_breaker_closed", breaker=self.name)

    def _on_failure(self) -> None:
        with self._lock:
            self.failure_count += 1
            self.last_failure_time = self._clock()

            if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
                self.state = self.OPEN
                logger.error(
                    "circuit_breaker_opened",
                    breaker=self.name,
                    failure_count=self.failure_count,
                )
