"""Tests for download models."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from blobpipe.models import ObjectRef
from blobpipe.services.download import Stripe, StripeStats, TransferResult


def _result(**kwargs) -> TransferResult:
    return TransferResult(
        object_ref=ObjectRef(name="4GiB.bin", generation=7),
        destination=Path("out/4GiB.bin"),
        **kwargs,
    )


class TestStripe:
    """Tests for Stripe model."""

    def test_end(self):
        assert Stripe(index=2, offset=200, length=100).end == 300

    def test_rejects_empty_stripe(self):
        with pytest.raises(ValidationError):
            Stripe(index=0, offset=0, length=0)

    def test_rejects_negative_offset(self):
        with pytest.raises(ValidationError):
            Stripe(index=0, offset=-1, length=10)

    def test_frozen(self):
        stripe = Stripe(index=0, offset=0, length=10)
        with pytest.raises(ValidationError):
            stripe.offset = 5


class TestStripeStats:
    """Tests for StripeStats model."""

    def test_default_values(self):
        stats = StripeStats()
        assert stats.bytes_written == 0
        assert stats.chunks_count == 0


class TestTransferResult:
    """Tests for TransferResult model."""

    def test_default_values(self):
        result = _result()
        assert result.bytes_transferred == 0
        assert result.stripe_count == 0
        assert result.elapsed == timedelta(0)

    def test_throughput_zero_time(self):
        assert _result(bytes_transferred=1024 * 1024).throughput_mib_s == 0.0

    def test_throughput_calculation(self):
        result = _result(bytes_transferred=64 * 1024 * 1024, elapsed_seconds=4.0)
        assert result.throughput_mib_s == 16.0
        assert result.elapsed == timedelta(seconds=4)

    def test_summary(self):
        result = _result(
            bytes_transferred=32 * 1024 * 1024,
            stripe_count=4,
            elapsed_seconds=2.0,
        )
        summary = result.summary()
        assert "32.00 MiB" in summary
        assert "4 stripes" in summary
        assert "16.00 MiB/s" in summary
        assert str(result) == summary
