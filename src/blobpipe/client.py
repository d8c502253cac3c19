"""
blobpipe client.

Single entry point bundling a store, settings and the pipeline services.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from blobpipe.config import get_settings
from blobpipe.store import InMemoryBlobStore, LocalBlobStore

if TYPE_CHECKING:
    from blobpipe.config import PipelineSettings
    from blobpipe.services.compose import AsyncComposeService, ComposeService
    from blobpipe.services.download import AsyncDownloadService, DownloadService
    from blobpipe.store.base import BlobStore


class AsyncBlobPipeClient:
    """
    Async blobpipe client.

    Services are created lazily and share the store and settings.

    Example:
        >>> async with AsyncBlobPipeClient(InMemoryBlobStore()) as client:
        ...     objects = await client.compose.build_seeded([2 * 1024**3])
        ...     result = await client.download.download(objects[2 * 1024**3], "out.bin")
    """

    def __init__(self, store: BlobStore, settings: PipelineSettings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._compose: AsyncComposeService | None = None
        self._download: AsyncDownloadService | None = None

    @classmethod
    def local(
        cls, root: str | Path, settings: PipelineSettings | None = None
    ) -> AsyncBlobPipeClient:
        """
        Create client over a directory-backed store.

        Range reads yield chunks of ``settings.read_chunk_size``.

        Args:
            root: Store root directory, created if missing.
            settings: Pipeline settings (default: process-wide settings).
        """
        settings = settings or get_settings()
        return cls(LocalBlobStore(root, read_chunk_size=settings.read_chunk_size), settings)

    @classmethod
    def memory(cls, settings: PipelineSettings | None = None) -> AsyncBlobPipeClient:
        """Create client over a fresh in-memory store."""
        settings = settings or get_settings()
        return cls(InMemoryBlobStore(read_chunk_size=settings.read_chunk_size), settings)

    @property
    def store(self) -> BlobStore:
        """Underlying store client."""
        return self._store

    @property
    def settings(self) -> PipelineSettings:
        """Settings shared by all services."""
        return self._settings

    @property
    def compose(self) -> AsyncComposeService:
        """Composition tree builder."""
        if self._compose is None:
            from blobpipe.services.compose import AsyncComposeService

            self._compose = AsyncComposeService(self._store, self._settings)
        return self._compose

    @property
    def download(self) -> AsyncDownloadService:
        """Striped download coordinator."""
        if self._download is None:
            from blobpipe.services.download import AsyncDownloadService

            self._download = AsyncDownloadService(self._store, self._settings)
        return self._download

    async def __aenter__(self) -> AsyncBlobPipeClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the store if it holds resources."""
        close = getattr(self._store, "close", None)
        if close is not None:
            result = close()
            if hasattr(result, "__await__"):
                await result

    def __repr__(self) -> str:
        return f"<AsyncBlobPipeClient store={type(self._store).__name__}>"


class BlobPipeClient:
    """
    Sync blobpipe client.

    Example:
        >>> client = BlobPipeClient(LocalBlobStore("./bucket"))
        >>> objects = client.compose.build_seeded([64 * 1024**2])
        >>> client.download.download(objects[64 * 1024**2], "64MiB.bin")
    """

    def __init__(self, store: BlobStore, settings: PipelineSettings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._compose: ComposeService | None = None
        self._download: DownloadService | None = None

    @classmethod
    def local(cls, root: str | Path, settings: PipelineSettings | None = None) -> BlobPipeClient:
        """Create client over a directory-backed store. See AsyncBlobPipeClient.local."""
        settings = settings or get_settings()
        return cls(LocalBlobStore(root, read_chunk_size=settings.read_chunk_size), settings)

    @classmethod
    def memory(cls, settings: PipelineSettings | None = None) -> BlobPipeClient:
        """Create client over a fresh in-memory store."""
        settings = settings or get_settings()
        return cls(InMemoryBlobStore(read_chunk_size=settings.read_chunk_size), settings)

    @property
    def store(self) -> BlobStore:
        """Underlying store client."""
        return self._store

    @property
    def settings(self) -> PipelineSettings:
        """Settings shared by all services."""
        return self._settings

    @property
    def compose(self) -> ComposeService:
        """Composition tree builder."""
        if self._compose is None:
            from blobpipe.services.compose import ComposeService

            self._compose = ComposeService(self._store, self._settings)
        return self._compose

    @property
    def download(self) -> DownloadService:
        """Striped download coordinator."""
        if self._download is None:
            from blobpipe.services.download import DownloadService

            self._download = DownloadService(self._store, self._settings)
        return self._download

    def __repr__(self) -> str:
        return f"<BlobPipeClient store={type(self._store).__name__}>"


__all__ = ["AsyncBlobPipeClient", "BlobPipeClient"]
