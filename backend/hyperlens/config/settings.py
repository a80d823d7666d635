"""
PURPOSE: Configuration settings for the HyperLens explorer backend.

This module uses Pydantic Settings to manage configuration from environment
variables and .env files. All settings are validated and typed.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    PURPOSE: Central configuration class for HyperLens.

    Manages upstream API endpoints, key-value store selection, search
    resolution timing and cache lifetimes. Settings are loaded from
    environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Upstream Hyperliquid endpoints
    HYPERLIQUID_INFO_URL: str = "https://api.hyperliquid.xyz/info"
    HYPERLIQUID_EXPLORER_URL: str = "https://api.hyperliquid.xyz/explorer"
    HYPEREVM_RPC_URL: str = "https://rpc.hyperliquid.xyz/evm"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HTTP_CONNECT_TIMEOUT_SECONDS: float = 5.0
    CIRCUIT_FAILURE_THRESHOLD: int = 5
    CIRCUIT_RESET_SECONDS: float = 30.0

    # Key-value store (memory | redis)
    STORE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    STORE_KEY_PREFIX: str = "hyperlens:"

    # Search resolution
    VERIFY_TIMEOUT_SECONDS: float = 2.0
    RESOLVE_CACHE_TTL_SECONDS: int = 300
    RECENT_SEARCHES_MAX: int = 5
    SEARCH_DEBOUNCE_SECONDS: float = 0.4
    # Hypercore L1 block heights start above this; smaller heights are HyperEVM
    L1_BLOCK_THRESHOLD: int = 100_000_000

    # System Settings
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    RATE_LIMIT_ENABLED: bool = True
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    def is_production(self) -> bool:
        """
        PURPOSE: Determine whether the app is running in production mode.

        Returns:
            bool: True when APP_ENV indicates production.
        """
        return self.APP_ENV.strip().lower() in {"prod", "production"}

    def uses_redis(self) -> bool:
        """
        PURPOSE: Whether the Redis-backed store is selected.

        Returns:
            bool: True when STORE_BACKEND is "redis".
        """
        return self.STORE_BACKEND.strip().lower() == "redis"


settings: Settings = Settings()
