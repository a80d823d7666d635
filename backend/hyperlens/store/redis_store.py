"""
Redis-backed key-value store for HyperLens.

Stores JSON-encoded values under a key prefix so resolution cache entries,
recent searches and watchlists survive process restarts and are shared
between API workers.
"""

import json
import math
from typing import Any, Optional

import redis.asyncio as redis

from hyperlens.store.base import KeyValueStore, Mutation
from hyperlens.utils.logger import get_logger


UPDATE_ATTEMPTS = 5


class RedisStore(KeyValueStore):
    """
    Redis implementation of KeyValueStore.

    PURPOSE: Share cached resolutions and user lists across processes.

    CALLED BY: main.py (when STORE_BACKEND=redis)

    Attributes:
        _redis_url: Redis connection URL.
        _prefix: Prefix prepended to every key.
        _redis: Async Redis client, created on connect().
    """

    def __init__(self, redis_url: str, prefix: str = "hyperlens:") -> None:
        self._redis_url: str = redis_url
        self._prefix: str = prefix
        self._redis: Optional[redis.Redis] = None
        self._logger = get_logger("store.redis", prefix=prefix)

    async def connect(self) -> None:
        """
        Establish the Redis connection.

        Raises:
            redis.RedisError: If the server cannot be reached.
        """
        try:
            self._redis = redis.from_url(self._redis_url, decode_responses=True)
            await self._redis.ping()
            self._logger.info("redis_connected", redis_url=self._redis_url)
        except Exception as e:
            self._logger.error("redis_connection_failed", error=str(e))
            raise

    def _client(self) -> redis.Redis:
        if self._redis is None:
            raise RuntimeError("RedisStore.connect() must be awaited before use")
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        raw = await self._client().get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        payload = json.dumps(value)
        if ttl_seconds is None:
            await self._client().set(self._key(key), payload)
        else:
            # Redis EX takes whole seconds
            await self._client().set(self._key(key), payload, ex=max(1, math.ceil(ttl_seconds)))

    async def delete(self, key: str) -> None:
        await self._client().delete(self._key(key))

    async def update(self, key: str, mutate: Mutation, ttl_seconds: Optional[float] = None) -> Any:
        """
        Optimistic read-modify-write with WATCH/MULTI.

        Raises:
            redis.WatchError: If the key kept changing for UPDATE_ATTEMPTS tries.
        """
        full_key = self._key(key)
        for attempt in range(1, UPDATE_ATTEMPTS + 1):
            async with self._client().pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(full_key)
                    raw = await pipe.get(full_key)
                    value = mutate(None if raw is None else json.loads(raw))
                    pipe.multi()
                    payload = json.dumps(value)
                    if ttl_seconds is None:
                        pipe.set(full_key, payload)
                    else:
                        pipe.set(full_key, payload, ex=max(1, math.ceil(ttl_seconds)))
                    await pipe.execute()
                    return value
                except redis.WatchError:
                    self._logger.info("redis_update_conflict", key=key, attempt=attempt)
        raise redis.WatchError(f"{full_key} changed during {UPDATE_ATTEMPTS} update attempts")

    async def ping(self) -> bool:
        if self._redis is None:
            return False
        try:
            return bool(await self._redis.ping())
        except redis.RedisError as e:
            self._logger.warning("redis_ping_failed", error=str(e))
            return False

    async def close(self) -> None:
        if self._redis:
            try:
                await self._redis.aclose()
                self._logger.info("redis_disconnected")
            except redis.RedisError as e:
                self._logger.error("redis_disconnection_failed", error=str(e))
            self._redis = None
