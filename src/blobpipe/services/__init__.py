"""Services for blobpipe."""

from blobpipe.services.compose import AsyncComposeService, ComposeService
from blobpipe.services.download import AsyncDownloadService, DownloadService

__all__ = [
    "AsyncComposeService",
    "ComposeService",
    "AsyncDownloadService",
    "DownloadService",
]
