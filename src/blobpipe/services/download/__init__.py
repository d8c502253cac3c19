"""
Download service for blobpipe.

Downloads large objects by partitioning them into fixed-size byte-range
stripes fetched concurrently and written at their own offsets in one file.

Features:
- Generation pinned once per transfer for a consistent snapshot
- Lock-free positional writes (stripes own disjoint ranges)
- Bounded concurrency, fail-fast on the first stripe error
- Throughput reporting (bytes, stripes, elapsed)
"""

from blobpipe.services.download._aio import AsyncDownloadService
from blobpipe.services.download._models import Stripe, StripePlan, StripeStats, TransferResult
from blobpipe.services.download._planner import plan_stripes
from blobpipe.services.download._sync import DownloadService
from blobpipe.services.download._transfer import StripeDownloader

__all__ = [
    "AsyncDownloadService",
    "DownloadService",
    "StripeDownloader",
    "Stripe",
    "StripePlan",
    "StripeStats",
    "TransferResult",
    "plan_stripes",
]
