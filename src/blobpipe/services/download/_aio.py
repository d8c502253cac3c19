"""
Asynchronous download service.

Downloads one object as concurrent byte-range stripes into a single file:
- stat once and pin the generation for every stripe
- pre-size the destination, then write each stripe at its own offset
- bounded concurrency, fail-fast on the first stripe error
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from blobpipe.exceptions import InvalidArgumentError
from blobpipe.logging import get_logger
from blobpipe.services.base import BaseService
from blobpipe.services.download._models import StripePlan, StripeStats, TransferResult
from blobpipe.services.download._planner import plan_stripes
from blobpipe.services.download._transfer import StripeDownloader

if TYPE_CHECKING:
    from blobpipe.config import PipelineSettings
    from blobpipe.models import ObjectRef
    from blobpipe.services.download._models import Stripe
    from blobpipe.store.base import BlobStore

logger = get_logger(__name__)


def _create_sized_file(path: Path, size: int) -> None:
    """Create (or truncate) ``path`` and extend it to ``size`` bytes."""
    with open(path, "wb") as f:
        f.truncate(size)


class AsyncDownloadService(BaseService):
    """
    Asynchronous striped download service.

    On failure the destination is left partially written; there is no
    partial-result atomicity. Pass ``cleanup_on_failure=True`` to have the
    partial file removed.

    Example:
        >>> download = AsyncDownloadService(store)
        >>> result = await download.download("4GiB.bin", Path("./4GiB.bin"))
        >>> print(result)  # Completed 4096.00 MiB download in ...
    """

    def __init__(self, store: BlobStore, settings: PipelineSettings | None = None) -> None:
        super().__init__(store, settings)
        self._stripe_length = self._settings.stripe_length
        self._max_parallel = self._settings.max_parallel_stripes
        self._downloader = StripeDownloader(store)

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
        if stripe_length is not None:
            self._stripe_length = stripe_length
        if max_parallel is not None:
            self._max_parallel = max_parallel

    def plan(self, total_size: int, stripe_length: int | None = None) -> StripePlan:
        """Plan stripes for an object of ``total_size`` bytes."""
        stripe_length = self._stripe_length if stripe_length is None else stripe_length
        return plan_stripes(total_size, stripe_length)

    async def download(
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

        Args:
            source: Object name (latest generation) or pinned ref.
            destination: Local file path, created or truncated.
            stripe_length: Bytes per stripe (default: configured).
            max_parallel: Max stripes in flight (default: configured).
            on_progress: Callback(transferred, total) after each stripe.
            cleanup_on_failure: Delete the partial file if a stripe fails.

        Returns:
            TransferResult with bytes, stripe count and elapsed time.

        Raises:
            InvalidArgumentError: Bad stripe length or concurrency, before I/O.
            StoreError: The object could not be resolved.
            TransferError: The first stripe failure (ShortReadError for
                truncated streams). Remaining in-flight stripes finish first.
        """
        stripe_length = self._stripe_length if stripe_length is None else stripe_length
        max_parallel = self._max_parallel if max_parallel is None else max_parallel
        if stripe_length <= 0:
            raise InvalidArgumentError(f"Stripe length must be positive, got {stripe_length}")
        if max_parallel <= 0:
            raise InvalidArgumentError(f"max_parallel must be positive, got {max_parallel}")

        destination = Path(destination)
        metadata = await self._store.stat(source)
        ref = metadata.ref
        logger.debug(f"Resolved {ref}: {metadata.size:,} bytes")

        destination.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(_create_sized_file, destination, metadata.size)

        start = time.perf_counter()
        if metadata.size == 0:
            return TransferResult(object_ref=ref, destination=destination)

        plan = plan_stripes(metadata.size, stripe_length)
        try:
            transferred, chunks = await self._run_stripes(
                ref, plan, destination, max_parallel, on_progress
            )
        except Exception:
            if cleanup_on_failure:
                destination.unlink(missing_ok=True)
                logger.info(f"Removed partial file {destination}")
            raise

        result = TransferResult(
            object_ref=ref,
            destination=destination,
            bytes_transferred=transferred,
            stripe_count=plan.count,
            chunks_count=chunks,
            elapsed_seconds=time.perf_counter() - start,
        )
        logger.info(result.summary())
        return result

    async def _run_stripes(
        self,
        ref: ObjectRef,
        plan: StripePlan,
        destination: Path,
        max_parallel: int,
        on_progress: Callable[[int, int], None] | None,
    ) -> tuple[int, int]:
        """Fetch all stripes, join all, and raise the first failure."""
        semaphore = asyncio.Semaphore(max_parallel)
        failed = asyncio.Event()
        first_error: Exception | None = None

        async def fetch(stripe: Stripe) -> StripeStats | None:
            async with semaphore:
                # Stripes not yet started are skipped once one has failed
                if failed.is_set():
                    return None
                try:
                    return await self._downloader.fetch_stripe(ref, stripe, destination)
                except Exception:
                    # Set before the slot is released so waiters see it
                    failed.set()
                    raise

        logger.debug(
            f"Downloading {ref} in {plan.count} stripes of {plan.stripe_length:,} bytes, "
            f"{max_parallel} in parallel"
        )
        tasks = [asyncio.create_task(fetch(stripe)) for stripe in plan.stripes]
        transferred = 0
        chunks = 0

        try:
            for task in asyncio.as_completed(tasks):
                try:
                    stats = await task
                except Exception as e:
                    if first_error is None:
                        first_error = e
                        logger.error(f"Download of {ref} failed: {e}")
                    else:
                        logger.debug(f"Additional stripe failure: {e}")
                    continue

                if stats is None:
                    continue
                transferred += stats.bytes_written
                chunks += stats.chunks_count
                if on_progress and first_error is None:
                    on_progress(transferred, plan.total_size)
        finally:
            # Only reached with pending tasks when this coroutine is cancelled
            for pending in tasks:
                if not pending.done():
                    pending.cancel()

        if first_error is not None:
            raise first_error
        return transferred, chunks
