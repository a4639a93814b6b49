"""Runtime configuration for the storage gateway.

Values come from environment variables prefixed with ``STORAGE_GATEWAY_``
(or a local ``.env`` file), e.g. ``STORAGE_GATEWAY_MAX_WORKERS=16``.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_LOGGER = "storage_gateway"


class GatewaySettings(BaseSettings):
    """Settings shared by the routers, the gateway facade and the entry point."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_GATEWAY_",
        env_file=".env",
        extra="ignore",
    )

    api_prefix: str = "/api/storage"
    max_workers: int = Field(default=8, ge=1)
    default_write_timeout: float | None = Field(default=None, gt=0)
    spool_max_size: int = Field(default=1024 * 1024, ge=0)
    stream_chunk_size: int = Field(default=64 * 1024, ge=1)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


@lru_cache
def get_settings() -> GatewaySettings:
    return GatewaySettings()


def configure_logging(level: str | int) -> None:
    """Set the level of the package logger.

    Handlers are left to the host (uvicorn, pytest, ...).
    """
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
