"""
Composition planning.

Pure functions: no store access, so tier counts and fan-in bounds can be
checked before any object is written.
"""

from __future__ import annotations

from typing import Sequence

from blobpipe.exceptions import InvalidArgumentError
from blobpipe.services.compose._models import CompositionPlan, TargetRecipe


def validate_targets(seed_size: int, target_sizes: Sequence[int]) -> None:
    """Reject empty, non-increasing, non-positive or non-multiple targets."""
    if seed_size <= 0:
        raise InvalidArgumentError("Seed must not be empty")
    if not target_sizes:
        raise InvalidArgumentError("At least one target size is required")

    previous = 0
    for size in target_sizes:
        if size <= 0:
            raise InvalidArgumentError(f"Target size must be positive, got {size}")
        if size <= previous:
            raise InvalidArgumentError(
                f"Target sizes must be strictly increasing: {size:,} after {previous:,}"
            )
        if size % seed_size:
            raise InvalidArgumentError(
                f"Target size {size:,} is not a multiple of the seed size {seed_size:,}"
            )
        previous = size


def _digits(units: int, fan_in: int, width: int) -> tuple[int, ...]:
    """Base-``fan_in`` digits of ``units``, least significant first."""
    digits = []
    for _ in range(width):
        units, digit = divmod(units, fan_in)
        digits.append(digit)
    if units:
        # Unreachable while tiers are grown up to the largest target
        raise InvalidArgumentError(f"Target needs more than {width} tiers")
    return tuple(digits)


def plan_composition(
    seed_size: int,
    target_sizes: Sequence[int],
    fan_in: int,
) -> CompositionPlan:
    """
    Plan tiers and per-target recipes.

    Tiers grow by ``fan_in`` while the next tier does not exceed the
    largest target. Each target is then expressed as base-``fan_in`` digits
    over the tiers, so every digit (copies of one tier) stays below the
    fan-in cap.

    Example:
        >>> plan = plan_composition(1 << 20, [2 << 30, 4 << 30], 32)
        >>> plan.tier_sizes
        (1048576, 33554432, 1073741824)
        >>> [t.counts for t in plan.targets]
        [(0, 0, 2), (0, 0, 4)]
    """
    if fan_in < 2:
        raise InvalidArgumentError(f"Fan-in must be at least 2, got {fan_in}")
    validate_targets(seed_size, target_sizes)

    largest = target_sizes[-1]
    tier_sizes = [seed_size]
    while tier_sizes[-1] * fan_in <= largest:
        tier_sizes.append(tier_sizes[-1] * fan_in)

    targets = tuple(
        TargetRecipe(
            size=size,
            counts=_digits(size // seed_size, fan_in, len(tier_sizes)),
        )
        for size in target_sizes
    )
    return CompositionPlan(
        seed_size=seed_size,
        fan_in=fan_in,
        tier_sizes=tuple(tier_sizes),
        targets=targets,
    )
