"""
PURPOSE: Key-value store implementations and the factory selecting one from settings.
"""

from hyperlens.config.settings import Settings
from hyperlens.store.base import KeyValueStore
from hyperlens.store.memory import InMemoryStore
from hyperlens.store.redis_store import RedisStore


async def create_store(config: Settings) -> KeyValueStore:
    """
    PURPOSE: Build and connect the store selected by STORE_BACKEND.

    CALLED BY: main.py lifespan startup

    Args:
        config: Application settings.

    Returns:
        KeyValueStore: Ready-to-use store.
    """
    if config.uses_redis():
        store = RedisStore(config.REDIS_URL, prefix=config.STORE_KEY_PREFIX)
        await store.connect()
        return store

    return InMemoryStore()


__all__ = ["KeyValueStore", "InMemoryStore", "RedisStore", "create_store"]
