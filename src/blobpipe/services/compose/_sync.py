"""Synchronous compose service.

Auto-generated from AsyncComposeService using sync wrapper.
"""

from blobpipe.services._sync_wrapper import create_sync_service
from blobpipe.services.compose._aio import AsyncComposeService

# Generate sync service from async
ComposeService = create_sync_service(AsyncComposeService)

__all__ = ["ComposeService"]
