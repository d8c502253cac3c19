"""BlobStore: protocol for object store clients used by the pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from blobpipe.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from blobpipe.models import ObjectMetadata, ObjectRef

# Maximum sources per compose call on GCS-compatible stores
DEFAULT_MAX_COMPOSE_SOURCES = 32

# Upper bound on chunks yielded by range reads
DEFAULT_READ_CHUNK_SIZE = 256 * 1024


@runtime_checkable
class BlobStore(Protocol):
    """
    Minimal async object store interface.

    Implementations raise ``StoreError`` (or a subclass) for every failure.
    Retries, if any, are the implementation's concern.
    """

    @property
    def max_compose_sources(self) -> int:
        """Maximum number of sources a single compose call accepts."""
        ...

    async def put(self, name: str, data: bytes) -> ObjectRef:
        """Write ``data`` as a new generation of ``name``."""
        ...

    async def compose(self, dest_name: str, sources: Sequence[ObjectRef]) -> ObjectRef:
        """Concatenate pinned sources into a new generation of ``dest_name``."""
        ...

    async def stat(self, ref: ObjectRef | str) -> ObjectMetadata:
        """Resolve metadata. A bare name resolves to the latest generation."""
        ...

    def read_range(self, ref: ObjectRef, offset: int, length: int) -> AsyncIterator[bytes]:
        """Stream ``length`` bytes starting at ``offset`` of a pinned generation.

        The stream is finite and cannot be resumed; retrying means opening
        a new range read from the same offset.
        """
        ...


def check_range(size: int, offset: int, length: int) -> None:
    """Validate a read range against an object size."""
    if offset < 0 or length <= 0:
        raise InvalidArgumentError(f"Invalid range: offset={offset}, length={length}")
    if offset > size:
        raise InvalidArgumentError(f"Offset {offset:,} beyond object size {size:,}")


def check_fan_in(sources_count: int, max_sources: int) -> None:
    """Validate compose source count against the store limit."""
    if sources_count == 0:
        raise InvalidArgumentError("Compose requires at least one source")
    if sources_count > max_sources:
        raise InvalidArgumentError(
            f"Compose fan-in {sources_count} exceeds store limit {max_sources}"
        )


__all__ = [
    "BlobStore",
    "DEFAULT_MAX_COMPOSE_SOURCES",
    "DEFAULT_READ_CHUNK_SIZE",
    "check_range",
    "check_fan_in",
]
