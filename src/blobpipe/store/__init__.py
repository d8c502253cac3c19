"""
Object store clients.

The pipeline depends only on the BlobStore protocol; the stores here are
an in-process implementation for tests and a directory-backed one for
local runs.
"""

from blobpipe.store.base import BlobStore
from blobpipe.store.local import LocalBlobStore
from blobpipe.store.memory import InMemoryBlobStore

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "LocalBlobStore",
]
