"""
Transfer logic for download service.

Fetches one stripe with a ranged read and writes it at its own offset of
the destination file. Stripes share the file without locking: each stripe
owns a disjoint byte range for the lifetime of the file, and each opens
its own handle.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from pathlib import Path
from typing import TYPE_CHECKING

from blobpipe.exceptions import BlobPipeError, ShortReadError, TransferError
from blobpipe.logging import get_logger
from blobpipe.services.download._models import Stripe, StripeStats

if TYPE_CHECKING:
    from blobpipe.models import ObjectRef
    from blobpipe.store.base import BlobStore

logger = get_logger(__name__)


class StripeDownloader:
    """Fetches single stripes of a pinned object into a pre-sized file."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def fetch_stripe(
        self,
        ref: ObjectRef,
        stripe: Stripe,
        destination: Path,
    ) -> StripeStats:
        """
        Download ``stripe`` of ``ref`` into ``destination``.

        The file must already be sized to hold the whole object. No retries
        are attempted here.

        Returns:
            StripeStats for the stripe.

        Raises:
            ShortReadError: The stream ended before ``stripe.length`` bytes.
            TransferError: Store, stream or local I/O failure.
        """
        stats = StripeStats(offset=stripe.offset, length=stripe.length)

        try:
            async with aclosing(
                self._store.read_range(ref, stripe.offset, stripe.length)
            ) as stream:
                with open(destination, "r+b") as f:
                    f.seek(stripe.offset)
                    async for chunk in stream:
                        if not chunk:
                            continue
                        if stats.bytes_written + len(chunk) > stripe.length:
                            raise self._error(
                                ref,
                                stripe,
                                f"stream returned more than {stripe.length:,} bytes",
                            )
                        await asyncio.to_thread(f.write, chunk)
                        stats.bytes_written += len(chunk)
                        stats.chunks_count += 1
        except TransferError:
            raise
        except BlobPipeError as e:
            raise self._error(ref, stripe, f"read failed: {e}", cause=e) from e
        except OSError as e:
            raise self._error(ref, stripe, f"I/O error on {destination}: {e}", cause=e) from e

        if stats.bytes_written < stripe.length:
            raise ShortReadError(
                object_name=ref.name,
                generation=ref.generation,
                offset=stripe.offset,
                length=stripe.length,
                actual=stats.bytes_written,
            )

        logger.debug(
            f"Stripe {stripe.index} [{stripe.offset:,}, +{stripe.length:,}) "
            f"done in {stats.chunks_count} chunks"
        )
        return stats

    @staticmethod
    def _error(
        ref: ObjectRef,
        stripe: Stripe,
        message: str,
        cause: BaseException | None = None,
    ) -> TransferError:
        return TransferError(
            message,
            object_name=ref.name,
            generation=ref.generation,
            offset=stripe.offset,
            length=stripe.length,
            cause=cause,
        )
