"""
Pytest fixtures for compose service tests.
"""

import pytest

from blobpipe.exceptions import StoreError
from blobpipe.services.compose import AsyncComposeService, ComposeService
from blobpipe.store import InMemoryBlobStore


class FailingComposeStore(InMemoryBlobStore):
    """In-memory store whose compose fails for given destination names."""

    def __init__(self, *fail_on: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.fail_on = set(fail_on)

    async def compose(self, dest_name, sources):
        if dest_name in self.fail_on:
            raise StoreError("backend error", status_code=503, object_name=dest_name)
        return await super().compose(dest_name, sources)


@pytest.fixture
def async_compose_service(memory_store, settings):
    """Provide async compose service with fan-in 4."""
    return AsyncComposeService(memory_store, settings)


@pytest.fixture
def sync_compose_service(memory_store, settings):
    """Provide sync compose service with fan-in 4."""
    return ComposeService(memory_store, settings)


@pytest.fixture
def failing_store_factory():
    """Build stores failing on a given destination."""

    def factory(*fail_on: str) -> FailingComposeStore:
        return FailingComposeStore(*fail_on, max_compose_sources=4)

    return factory
