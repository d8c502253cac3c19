"""Naming and seed helpers for compose service."""

from __future__ import annotations

import string

from blobpipe.services.compose._config import SIZE_UNITS


def size_label(size: int) -> str:
    """Exact binary size label: 1MiB, 32MiB, 2GiB, 1536B."""
    for unit, factor in SIZE_UNITS:
        if size >= factor and size % factor == 0:
            return f"{size // factor}{unit}"
    return f"{size}B"


def object_name(size: int, prefix: str = "", suffix: str = "") -> str:
    """Name of the composed object holding ``size`` bytes."""
    return f"{prefix}{size_label(size)}{suffix}"


def make_seed(size: int) -> bytes:
    """``size`` bytes of the lowercase alphabet, repeated."""
    alphabet = string.ascii_lowercase.encode()
    repeats, rest = divmod(size, len(alphabet))
    return alphabet * repeats + alphabet[:rest]
