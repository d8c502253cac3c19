"""
blobpipe: large-object pipeline for object stores.

- Compose: synthesize large objects from a small seed in tiers of K copies
- Download: fetch large objects as concurrent byte-range stripes
"""

from blobpipe.client import AsyncBlobPipeClient, BlobPipeClient
from blobpipe.config import PipelineSettings, configure_settings, get_settings, reset_settings
from blobpipe.exceptions import (
    BlobPipeError,
    CompositionError,
    InvalidArgumentError,
    ObjectNotFoundError,
    ShortReadError,
    StoreError,
    TransferError,
)
from blobpipe.models import ObjectMetadata, ObjectRef
from blobpipe.services.compose import (
    AsyncComposeService,
    ComposeService,
    CompositionTier,
    make_seed,
    plan_composition,
)
from blobpipe.services.download import (
    AsyncDownloadService,
    DownloadService,
    StripePlan,
    TransferResult,
    plan_stripes,
)
from blobpipe.store import BlobStore, InMemoryBlobStore, LocalBlobStore

__version__ = "0.1.0"

__all__ = [
    # Clients
    "AsyncBlobPipeClient",
    "BlobPipeClient",
    # Config
    "PipelineSettings",
    "configure_settings",
    "get_settings",
    "reset_settings",
    # Models
    "ObjectRef",
    "ObjectMetadata",
    "CompositionTier",
    "StripePlan",
    "TransferResult",
    # Services
    "AsyncComposeService",
    "ComposeService",
    "AsyncDownloadService",
    "DownloadService",
    "plan_composition",
    "plan_stripes",
    "make_seed",
    # Stores
    "BlobStore",
    "InMemoryBlobStore",
    "LocalBlobStore",
    # Errors
    "BlobPipeError",
    "InvalidArgumentError",
    "StoreError",
    "ObjectNotFoundError",
    "CompositionError",
    "TransferError",
    "ShortReadError",
]
