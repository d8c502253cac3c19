"""
Synchronous download service.

Wrapper around AsyncDownloadService using asyncio.run().
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from blobpipe.services.download._aio import AsyncDownloadService
from blobpipe.services.download._models import StripePlan, TransferResult

if TYPE_CHECKING:
    from blobpipe.config import PipelineSettings
    from blobpipe.models import ObjectRef
    from blobpipe.store.base import BlobStore


class DownloadService:
    """
    Synchronous striped download service.

    Thin wrapper around AsyncDownloadService. Must not be called from a
    running event loop; use AsyncDownloadService there.

    Example:
        >>> download = DownloadService(LocalBlobStore("./bucket"))
        >>> result = download.download("2GiB.bin", Path("./2GiB.bin"))
        >>> print(result)
    """

    def __init__(self, store: BlobStore, settings: PipelineSettings | None = None) -> None:
        self._async_service = AsyncDownloadService(store, settings)

    def configure(
        self,
        stripe_length: int | None = None,
        max_parallel: int | None = None,
    ) -> None:
        """
        Configure download settings.

        Args:
            stripe_length: Bytes per stripe.
            max_parallel: Max stripes in flight.
        """
        self._async_service.configure(
            stripe_length=stripe_length,
            max_parallel=max_parallel,
        )

    def plan(self, total_size: int, stripe_length: int | None = None) -> StripePlan:
        """Plan stripes for an object of ``total_size`` bytes."""
        return self._async_service.plan(total_size, stripe_length)

    def download(
        self,
        source: ObjectRef | str,
        destination: Path | str,
        stripe_length: int | None = None,
        max_parallel: int | None = None,
        on_progress: Callable[[int, int], None] | None = None,
        cleanup_on_failure: bool = False,
    ) -> TransferResult:
        """
        Download an object into ``destination`` using concurrent stripes.

        See AsyncDownloadService.download for arguments and errors.
        """
        return asyncio.run(
            self._async_service.download(
                source,
                destination,
                stripe_length=stripe_length,
                max_parallel=max_parallel,
                on_progress=on_progress,
                cleanup_on_failure=cleanup_on_failure,
            )
        )
