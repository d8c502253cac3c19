"""
Pytest fixtures for download service tests.
"""

import asyncio

import pytest

from blobpipe.exceptions import StoreError
from blobpipe.services.download import AsyncDownloadService, DownloadService
from blobpipe.store import InMemoryBlobStore


class FaultyStore(InMemoryBlobStore):
    """In-memory store with per-offset faults on range reads."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.truncate: dict[int, int] = {}
        self.fail: set[int] = set()
        self.overflow: set[int] = set()
        self.delays: dict[int, float] = {}
        self.read_offsets: list[int] = []
        self.closed_offsets: list[int] = []

    async def read_range(self, ref, offset, length):
        self.read_offsets.append(offset)
        try:
            async for chunk in self._faulty_range(ref, offset, length):
                yield chunk
        finally:
            self.closed_offsets.append(offset)

    async def _faulty_range(self, ref, offset, length):
        if offset in self.delays:
            await asyncio.sleep(self.delays[offset])
        if offset in self.fail:
            raise StoreError(
                "service unavailable",
                status_code=503,
                object_name=ref.name,
                generation=ref.generation,
            )

        limit = self.truncate.get(offset, length)
        delivered = 0
        async for chunk in super().read_range(ref, offset, length):
            if delivered + len(chunk) > limit:
                chunk = chunk[: limit - delivered]
            if chunk:
                delivered += len(chunk)
                yield chunk
            if delivered >= limit:
                break
        if offset in self.overflow:
            yield b"!"


class OverwritingStore(InMemoryBlobStore):
    """Overwrites the object being read on the first range read."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.overwritten = False

    async def read_range(self, ref, offset, length):
        if not self.overwritten:
            self.overwritten = True
            await self.put(ref.name, b"X" * 1000)
        async for chunk in super().read_range(ref, offset, length):
            yield chunk


@pytest.fixture
def faulty_store() -> FaultyStore:
    """Provide store with injectable read faults."""
    return FaultyStore(read_chunk_size=7)


@pytest.fixture
def async_download_service(memory_store, settings):
    """Provide async download service over the in-memory store."""
    return AsyncDownloadService(memory_store, settings)


@pytest.fixture
def sync_download_service(memory_store, settings):
    """Provide sync download service over the in-memory store."""
    return DownloadService(memory_store, settings)


@pytest.fixture
def payload() -> bytes:
    """1000 bytes with no repeating period that matches a stripe length."""
    return bytes((i * 7 + i // 13) % 256 for i in range(1000))


@pytest.fixture
def overwriting_store() -> OverwritingStore:
    """Provide store that replaces the object under an in-progress read."""
    return OverwritingStore(read_chunk_size=16)
