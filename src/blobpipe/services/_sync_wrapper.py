"""
Sync wrapper generator for async services.

Write only async code; the sync class is generated at import time.

Usage:
    class AsyncComposeService(BaseService):
        async def build_large(self, seed: bytes, sizes: list[int]) -> dict[int, ObjectRef]:
            ...

    # Sync service is generated automatically
    ComposeService = create_sync_service(AsyncComposeService)
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import inspect
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")

# Plain methods forwarded as-is to the wrapped async service
_FORWARDED_METHODS = ("configure", "plan")


def _run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run coroutine synchronously."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        # Already in async context - run on a fresh loop in a worker thread
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


def _make_sync_method(async_method: Callable) -> Callable:
    """Convert async method to sync method."""

    @functools.wraps(async_method)
    def sync_method(self, *args, **kwargs):
        async_service = getattr(self, "_async_service", None)
        if async_service is None:
            raise RuntimeError("Sync service not properly initialized")
        return _run_sync(async_method(async_service, *args, **kwargs))

    return sync_method


def _make_forwarder(method_name: str) -> Callable:
    def forwarder(self, *args, **kwargs):
        return getattr(self._async_service, method_name)(*args, **kwargs)

    forwarder.__name__ = method_name
    return forwarder


def _make_property_forwarder(prop_name: str) -> property:
    @property
    def forwarder(self):
        return getattr(self._async_service, prop_name)

    return forwarder


def create_sync_service(async_class: type) -> type:
    """
    Create sync service class from async service class.

    Coroutine methods become blocking methods, public properties and the
    plain configuration methods are forwarded.

    Args:
        async_class: Async service class with async methods

    Returns:
        New sync service class wrapping an instance of ``async_class``
    """
    sync_name = async_class.__name__
    if sync_name.startswith("Async"):
        sync_name = sync_name[5:]

    class_dict: dict[str, Any] = {
        "__doc__": async_class.__doc__,
        "__module__": async_class.__module__,
    }

    def sync_init(self, store, settings=None):
        self._store = store
        self._async_service = async_class(store, settings)

    class_dict["__init__"] = sync_init

    for name in dir(async_class):
        if name.startswith("_"):
            continue
        attr = getattr(async_class, name)
        if inspect.iscoroutinefunction(attr):
            class_dict[name] = _make_sync_method(attr)
        elif isinstance(attr, property):
            class_dict[name] = _make_property_forwarder(name)
        elif name in _FORWARDED_METHODS and callable(attr):
            class_dict[name] = _make_forwarder(name)

    return type(sync_name, (), class_dict)


__all__ = ["create_sync_service"]
