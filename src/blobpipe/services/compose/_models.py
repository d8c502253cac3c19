"""
Models for compose service.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from blobpipe.models import ObjectRef


class CompositionTier(BaseModel):
    """One step of exponential growth: ``fan_in`` copies of ``source``."""

    model_config = {"frozen": True}

    source: ObjectRef
    size_bytes: int = Field(gt=0)
    fan_in: int = Field(ge=1)
    result: ObjectRef


class TargetRecipe(BaseModel):
    """How one requested size is assembled from tiers.

    ``counts[i]`` is the number of copies of tier ``i`` (tier 0 is the seed).
    Each count is below the fan-in factor.
    """

    model_config = {"frozen": True}

    size: int = Field(gt=0)
    counts: tuple[int, ...]

    @property
    def source_count(self) -> int:
        """Total number of tier copies concatenated into the target."""
        return sum(self.counts)

    @property
    def tier_index(self) -> int | None:
        """Index of the tier this target equals, or None if it must be composed."""
        if self.source_count != 1:
            return None
        return self.counts.index(1)


class CompositionPlan(BaseModel):
    """I/O-free plan for building a set of target sizes from a seed."""

    model_config = {"frozen": True}

    seed_size: int = Field(gt=0)
    fan_in: int = Field(ge=2)
    tier_sizes: tuple[int, ...]
    targets: tuple[TargetRecipe, ...]

    @property
    def tier_count(self) -> int:
        """Number of composed tiers (the seed is not counted)."""
        return len(self.tier_sizes) - 1

    def sources_for(self, recipe: TargetRecipe) -> list[int]:
        """Tier indexes to concatenate for a target, largest tier first."""
        indexes: list[int] = []
        for tier in reversed(range(len(recipe.counts))):
            indexes.extend([tier] * recipe.counts[tier])
        return indexes
