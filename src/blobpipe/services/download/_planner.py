"""
Stripe planning for download service.
"""

from __future__ import annotations

from blobpipe.exceptions import InvalidArgumentError
from blobpipe.services.download._models import Stripe, StripePlan


def plan_stripes(total_size: int, stripe_length: int) -> StripePlan:
    """
    Partition ``total_size`` bytes into stripes of ``stripe_length``.

    Full stripes come first; a remainder becomes one final short stripe.

    Raises:
        InvalidArgumentError: If either argument is not positive.

    Example:
        >>> plan = plan_stripes(10_000_003, 1_000_000)
        >>> plan.count, plan.stripes[-1].length
        (11, 3)
    """
    if total_size <= 0:
        raise InvalidArgumentError(f"Object size must be positive, got {total_size}")
    if stripe_length <= 0:
        raise InvalidArgumentError(f"Stripe length must be positive, got {stripe_length}")

    full_stripes, remainder = divmod(total_size, stripe_length)
    stripes = [
        Stripe(index=i, offset=i * stripe_length, length=stripe_length)
        for i in range(full_stripes)
    ]
    if remainder:
        stripes.append(
            Stripe(index=full_stripes, offset=full_stripes * stripe_length, length=remainder)
        )
    return StripePlan(total_size=total_size, stripe_length=stripe_length, stripes=tuple(stripes))
