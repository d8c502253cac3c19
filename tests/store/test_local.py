"""Tests for LocalBlobStore."""

import asyncio

import pytest

from blobpipe.exceptions import InvalidArgumentError, ObjectNotFoundError
from blobpipe.models import ObjectRef
from blobpipe.services.compose import AsyncComposeService
from blobpipe.services.download import AsyncDownloadService
from blobpipe.store import BlobStore, LocalBlobStore


@pytest.fixture
def local_store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "bucket", max_compose_sources=4, read_chunk_size=4)


async def _read(store, ref, offset, length) -> bytes:
    return b"".join([chunk async for chunk in store.read_range(ref, offset, length)])


class TestLocalBlobStore:
    """Tests for the directory-backed store."""

    def test_satisfies_protocol(self, local_store):
        assert isinstance(local_store, BlobStore)
        assert local_store.root.is_dir()

    @pytest.mark.asyncio
    async def test_put_stat_read(self, local_store):
        ref = await local_store.put("dir/a.bin", b"0123456789")

        meta = await local_store.stat("dir/a.bin")
        assert meta.ref == ref
        assert meta.size == 10
        assert await _read(local_store, ref, 3, 5) == b"34567"

    @pytest.mark.asyncio
    async def test_old_generation_stays_readable(self, local_store):
        first = await local_store.put("a", b"old")
        second = await local_store.put("a", b"new!")

        assert second.generation > first.generation
        assert (await local_store.stat("a")).generation == second.generation
        assert await _read(local_store, first, 0, 3) == b"old"

    @pytest.mark.asyncio
    async def test_compose(self, local_store):
        a = await local_store.put("a", b"ab")
        b = await local_store.put("b", b"cd")

        ref = await local_store.compose("abba", [a, b, b, a])

        assert await _read(local_store, ref, 0, 8) == b"abcdcdab"

    @pytest.mark.asyncio
    async def test_compose_limits(self, local_store):
        a = await local_store.put("a", b"x")

        with pytest.raises(InvalidArgumentError):
            await local_store.compose("big", [a] * 5)
        with pytest.raises(ObjectNotFoundError):
            await local_store.compose("big", [ObjectRef(name="a", generation=1)])

    @pytest.mark.asyncio
    async def test_missing_object(self, local_store):
        with pytest.raises(ObjectNotFoundError):
            await local_store.stat("missing")

    @pytest.mark.asyncio
    async def test_read_past_end_is_truncated(self, local_store):
        ref = await local_store.put("a", b"0123")

        assert await _read(local_store, ref, 2, 10) == b"23"

    @pytest.mark.asyncio
    async def test_metadata_calls_run_off_the_event_loop(self, local_store, monkeypatch):
        a = await local_store.put("a", b"ab")
        offloaded = []
        to_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(func.__name__)
            return await to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

        await local_store.compose("aa", [a, a])
        await local_store.stat("aa")

        assert offloaded == ["_compose_version", "_stat_version"]

    @pytest.mark.asyncio
    async def test_compose_then_download(self, local_store, settings, tmp_path):
        compose = AsyncComposeService(local_store, settings)
        download = AsyncDownloadService(local_store, settings)

        objects = await compose.build_large(b"abc", [48, 96])
        result = await download.download(objects[96], tmp_path / "out" / "96.bin")

        assert result.bytes_transferred == 96
        assert (tmp_path / "out" / "96.bin").read_bytes() == b"abc" * 32
