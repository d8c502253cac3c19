"""
Models for download service.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from blobpipe.models import ObjectRef


class Stripe(BaseModel):
    """One contiguous byte range of an object."""

    model_config = {"frozen": True}

    index: int = Field(ge=0)
    offset: int = Field(ge=0)
    length: int = Field(gt=0)

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.offset + self.length


class StripePlan(BaseModel):
    """Ordered, disjoint, contiguous stripes covering a whole object."""

    model_config = {"frozen": True}

    total_size: int = Field(gt=0)
    stripe_length: int = Field(gt=0)
    stripes: tuple[Stripe, ...]

    @property
    def count(self) -> int:
        """Number of stripes."""
        return len(self.stripes)

    @property
    def has_short_stripe(self) -> bool:
        """Whether the final stripe is shorter than the stripe length."""
        return self.stripes[-1].length < self.stripe_length


class StripeStats(BaseModel):
    """Statistics from one stripe fetch."""

    offset: int = 0
    length: int = 0
    bytes_written: int = 0
    chunks_count: int = 0


class TransferResult(BaseModel):
    """Result of a completed download."""

    model_config = {"frozen": True}

    object_ref: ObjectRef
    destination: Path
    bytes_transferred: int = 0
    stripe_count: int = 0
    chunks_count: int = 0
    elapsed_seconds: float = 0.0

    @property
    def elapsed(self) -> timedelta:
        """Wall-clock duration of the transfer."""
        return timedelta(seconds=self.elapsed_seconds)

    @property
    def throughput_mib_s(self) -> float:
        """Effective bandwidth in MiB/s."""
        if self.elapsed_seconds <= 0:
            return 0.0
        return (self.bytes_transferred / 1024 / 1024) / self.elapsed_seconds

    def summary(self) -> str:
        """Human-readable summary."""
        size_mib = self.bytes_transferred / 1024 / 1024
        return (
            f"Completed {size_mib:.2f} MiB download in {self.elapsed_seconds:.2f}s, "
            f"using {self.stripe_count} stripes, "
            f"effective bandwidth = {self.throughput_mib_s:.2f} MiB/s"
        )

    def __str__(self) -> str:
        return self.summary()
