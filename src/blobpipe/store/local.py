"""LocalBlobStore: directory-backed store with one file per generation."""

from __future__ import annotations

import asyncio
import os
import shutil
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from blobpipe.exceptions import ObjectNotFoundError, StoreError
from blobpipe.logging import get_logger
from blobpipe.models import ObjectMetadata, ObjectRef
from blobpipe.store.base import (
    DEFAULT_MAX_COMPOSE_SOURCES,
    DEFAULT_READ_CHUNK_SIZE,
    check_fan_in,
    check_range,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

logger = get_logger(__name__)

_COPY_BUFFER = 1024 * 1024


class LocalBlobStore:
    """
    Blob store on the local filesystem.

    Layout::

        root/
            <quoted object name>/
                00000001697040000000000000   # one file per generation

    Generations are nanosecond timestamps, strictly increasing per store
    instance. Compose copies source bytes, so it is not cheap for large
    objects, but it behaves like a remote store for the pipeline.
    """

    def __init__(
        self,
        root: str | Path,
        max_compose_sources: int = DEFAULT_MAX_COMPOSE_SOURCES,
        read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE,
    ) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._max_compose_sources = max_compose_sources
        self._read_chunk_size = read_chunk_size
        self._lock = threading.Lock()
        self._last_generation = 0

    @property
    def root(self) -> Path:
        return self._root

    @property
    def max_compose_sources(self) -> int:
        return self._max_compose_sources

    @property
    def read_chunk_size(self) -> int:
        return self._read_chunk_size

    def _object_dir(self, name: str) -> Path:
        return self._root / quote(name, safe="")

    def _version_path(self, ref: ObjectRef) -> Path:
        return self._object_dir(ref.name) / f"{ref.generation:026d}"

    def _next_generation(self) -> int:
        with self._lock:
            generation = max(time.time_ns(), self._last_generation + 1)
            self._last_generation = generation
            return generation

    def _existing(self, ref: ObjectRef) -> Path:
        path = self._version_path(ref)
        if not path.is_file():
            raise ObjectNotFoundError(ref.name, ref.generation)
        return path

    def _write_version(self, name: str, sources: list[Path] | None, data: bytes | None) -> ObjectRef:
        directory = self._object_dir(name)
        directory.mkdir(parents=True, exist_ok=True)
        ref = ObjectRef(name=name, generation=self._next_generation())
        final = self._version_path(ref)
        tmp = final.with_name(final.name + ".tmp")
        try:
            with open(tmp, "wb") as out:
                if data is not None:
                    out.write(data)
                for source in sources or []:
                    with open(source, "rb") as src:
                        shutil.copyfileobj(src, out, _COPY_BUFFER)
            os.replace(tmp, final)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StoreError(f"Failed to write {name}: {e}", object_name=name, cause=e) from e
        return ref

    async def put(self, name: str, data: bytes) -> ObjectRef:
        ref = await asyncio.to_thread(self._write_version, name, None, bytes(data))
        logger.debug(f"Stored {ref} ({len(data):,} bytes)")
        return ref

    async def compose(self, dest_name: str, sources: Sequence[ObjectRef]) -> ObjectRef:
        check_fan_in(len(sources), self._max_compose_sources)
        return await asyncio.to_thread(self._compose_version, dest_name, list(sources))

    def _compose_version(self, dest_name: str, sources: list[ObjectRef]) -> ObjectRef:
        paths = [self._existing(source) for source in sources]
        return self._write_version(dest_name, paths, None)

    def _latest_generation(self, name: str) -> int:
        directory = self._object_dir(name)
        generations = [
            int(p.name) for p in directory.glob("*") if p.is_file() and p.name.isdigit()
        ] if directory.is_dir() else []
        if not generations:
            raise ObjectNotFoundError(name)
        return max(generations)

    def _stat_version(self, ref: ObjectRef | str) -> ObjectMetadata:
        if isinstance(ref, str):
            ref = ObjectRef(name=ref, generation=self._latest_generation(ref))
        size = self._existing(ref).stat().st_size
        return ObjectMetadata(name=ref.name, generation=ref.generation, size=size)

    async def stat(self, ref: ObjectRef | str) -> ObjectMetadata:
        return await asyncio.to_thread(self._stat_version, ref)

    async def read_range(self, ref: ObjectRef, offset: int, length: int) -> AsyncIterator[bytes]:
        metadata = await asyncio.to_thread(self._stat_version, ref)
        check_range(metadata.size, offset, length)
        path = self._version_path(ref)
        try:
            with open(path, "rb") as f:
                f.seek(offset)
                remaining = length
                while remaining > 0:
                    chunk = await asyncio.to_thread(f.read, min(self._read_chunk_size, remaining))
                    if not chunk:
                        break
                    remaining -= len(chunk)
                    yield chunk
        except OSError as e:
            raise StoreError(
                f"Failed to read {ref}: {e}",
                object_name=ref.name,
                generation=ref.generation,
                cause=e,
            ) from e


__all__ = ["LocalBlobStore"]
