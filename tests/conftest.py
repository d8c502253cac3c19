"""
Pytest configuration and fixtures for blobpipe tests.
"""

import pytest

from blobpipe.config import PipelineSettings, reset_settings
from blobpipe.store import InMemoryBlobStore


@pytest.fixture(autouse=True)
def _isolated_settings():
    """Reset the settings singleton around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> PipelineSettings:
    """Small settings so tests exercise many tiers and stripes."""
    return PipelineSettings(
        compose_fan_in=4,
        stripe_length=10,
        max_parallel_stripes=4,
        object_suffix=".txt",
    )


@pytest.fixture
def memory_store() -> InMemoryBlobStore:
    """In-memory store with fan-in 4 and tiny read chunks."""
    return InMemoryBlobStore(max_compose_sources=4, read_chunk_size=3)
