"""Cache settings loaded from environment variables via pydantic-settings.

Values come from (highest priority first) environment variables, then a
``.env`` file in the working directory, then the defaults below.  Field
``redis_url`` maps to env var ``REDIS_URL`` and so on.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Read-through cache settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Backing store ===
    # "memory" keeps entries in-process; "redis" shares them between workers.
    store_backend: str = "memory"
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 5.0
    store_key_prefix: str = ""
    memory_store_max_size: int = 10000

    # === Cache behaviour ===
    # TTL used by ReadThroughCache.get when the caller passes none; 0 = no expiry.
    default_ttl: int = 0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
