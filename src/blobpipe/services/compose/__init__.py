"""
Compose service for blobpipe.

Synthesizes large objects from a small seed by composing tiers of K copies
of the previous tier, never passing more than K sources to one call.

Features:
- Pure planning (tier sizes, per-target recipes) before any write
- Generation-pinned sources on every compose
- Intermediate objects when a target needs more than K sources
"""

from blobpipe.services.compose._aio import AsyncComposeService
from blobpipe.services.compose._helpers import make_seed, object_name, size_label
from blobpipe.services.compose._models import CompositionPlan, CompositionTier, TargetRecipe
from blobpipe.services.compose._planner import plan_composition
from blobpipe.services.compose._sync import ComposeService

__all__ = [
    "AsyncComposeService",
    "ComposeService",
    "CompositionPlan",
    "CompositionTier",
    "TargetRecipe",
    "plan_composition",
    "make_seed",
    "object_name",
    "size_label",
]
