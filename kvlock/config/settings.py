# kvlock/config/settings.py

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LockSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "kvlock"
    environment: Literal["dev", "test", "prod"] = "dev"
    version: str = "0.1.0"

    # --- Storage ---
    storage_backend: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://localhost:6379"
    redis_password: str | None = None
    # None: derived from the key prefix (see kvlock.locking.namespace)
    redis_db: int | None = Field(default=None, ge=0, le=15)
    redis_socket_timeout: float = Field(default=5.0, gt=0)

    # --- Locking ---
    deployment_id: str = "kvlock"
    lock_key_prefix: str = ""
    lock_default_ttl: int = Field(default=120, ge=1)
    lock_min_ttl: int = Field(default=5, ge=1)
    lock_store_ttl_margin: int = Field(default=600, ge=1)

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> LockSettings:
    return LockSettings()
