"""
Pipeline configuration.

Settings are read from environment variables with the ``BLOBPIPE_`` prefix
and cached in a module-level singleton.

Example:
    >>> settings = get_settings()
    >>> settings.stripe_length
    8388608
    >>> configure_settings(max_parallel_stripes=16).max_parallel_stripes
    16
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from blobpipe.store.base import DEFAULT_MAX_COMPOSE_SOURCES, DEFAULT_READ_CHUNK_SIZE

MiB = 1024 * 1024

# 8MiB: balanced default, amortizes per-request overhead on most networks
# 16MiB: stable high-bandwidth connections
# 32MiB: low-latency links close to the store (e.g. same-region VMs)
RECOMMENDED_STRIPE_LENGTHS = (8 * MiB, 16 * MiB, 32 * MiB)


class PipelineSettings(BaseSettings):
    """Settings for composition and striped downloads."""

    model_config = SettingsConfigDict(
        env_prefix="BLOBPIPE_",
        extra="ignore",
    )

    # Composition
    compose_fan_in: int = Field(default=DEFAULT_MAX_COMPOSE_SOURCES, ge=2, le=1024)
    seed_size: int = Field(default=1 * MiB, ge=1)
    object_suffix: str = ".bin"

    # Download
    stripe_length: int = Field(default=RECOMMENDED_STRIPE_LENGTHS[0], ge=1)
    max_parallel_stripes: int = Field(default=8, ge=1, le=256)
    read_chunk_size: int = Field(default=DEFAULT_READ_CHUNK_SIZE, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False


_settings: PipelineSettings | None = None


def get_settings() -> PipelineSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = PipelineSettings()
    return _settings


def configure_settings(**overrides: Any) -> PipelineSettings:
    """Replace the process-wide settings with explicit overrides."""
    global _settings
    _settings = PipelineSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


__all__ = [
    "PipelineSettings",
    "RECOMMENDED_STRIPE_LENGTHS",
    "get_settings",
    "configure_settings",
    "reset_settings",
]
