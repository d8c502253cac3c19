"""
Exceptions for blobpipe.

Every error carries enough context (object name, generation, sizes,
offsets) to be acted on without re-running the pipeline.
"""

from __future__ import annotations


class BlobPipeError(Exception):
    """Base exception for all blobpipe errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self._original_cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause
            self.__suppress_context__ = True

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Argument errors
# =============================================================================


class InvalidArgumentError(BlobPipeError, ValueError):
    """Raised when an operation is called with invalid arguments.

    Always raised before any I/O begins.
    """


# =============================================================================
# Store errors
# =============================================================================


class StoreError(BlobPipeError):
    """Failure surfaced from the blob store (put, compose, stat, read)."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        object_name: str | None = None,
        generation: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.status_code = status_code
        self.object_name = object_name
        self.generation = generation
        super().__init__(f"[{status_code}] {message}", cause=cause)


class ObjectNotFoundError(StoreError):
    """Raised when an object (or a pinned generation of it) does not exist."""

    def __init__(self, object_name: str, generation: int | None = None) -> None:
        target = object_name if generation is None else f"{object_name}#{generation}"
        super().__init__(
            f"Object not found: {target}",
            status_code=404,
            object_name=object_name,
            generation=generation,
        )


class CompositionError(StoreError):
    """Raised when building a composed object fails.

    Objects created before the failure are left in the store.
    """

    def __init__(self, target_size: int, destination: str, cause: StoreError) -> None:
        self.target_size = target_size
        self.destination = destination
        super().__init__(
            f"Failed to compose {destination} ({target_size:,} bytes): {cause.message}",
            status_code=cause.status_code,
            object_name=destination,
            cause=cause,
        )


# =============================================================================
# Transfer errors
# =============================================================================


class TransferError(BlobPipeError):
    """Stripe-level failure during a download."""

    def __init__(
        self,
        message: str,
        object_name: str,
        generation: int,
        offset: int,
        length: int,
        cause: BaseException | None = None,
    ) -> None:
        self.object_name = object_name
        self.generation = generation
        self.offset = offset
        self.length = length
        super().__init__(
            f"Stripe [{offset:,}, +{length:,}) of {object_name}#{generation} failed: {message}",
            cause=cause,
        )


class ShortReadError(TransferError):
    """Raised when a range read ends before the expected byte count."""

    def __init__(
        self,
        object_name: str,
        generation: int,
        offset: int,
        length: int,
        actual: int,
    ) -> None:
        self.expected = length
        self.actual = actual
        super().__init__(
            f"short read, expected {length:,} bytes, got {actual:,}",
            object_name=object_name,
            generation=generation,
            offset=offset,
            length=length,
        )


__all__ = [
    "BlobPipeError",
    "InvalidArgumentError",
    "StoreError",
    "ObjectNotFoundError",
    "CompositionError",
    "TransferError",
    "ShortReadError",
]
