"""
Base service for blobpipe services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blobpipe.config import get_settings

if TYPE_CHECKING:
    from blobpipe.config import PipelineSettings
    from blobpipe.store.base import BlobStore


class BaseService:
    """Holds the store client and settings shared by all services."""

    def __init__(self, store: BlobStore, settings: PipelineSettings | None = None) -> None:
        self._store = store
        self._settings = settings or get_settings()

    @property
    def store(self) -> BlobStore:
        """Underlying store client."""
        return self._store

    @property
    def settings(self) -> PipelineSettings:
        """Settings in effect for this service."""
        return self._settings
