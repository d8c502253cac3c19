"""
Asynchronous compose service.

Builds large objects from a small seed by composing tiers of K copies,
then one object per requested size.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Sequence

from blobpipe.exceptions import CompositionError, InvalidArgumentError, StoreError
from blobpipe.logging import get_logger
from blobpipe.services.base import BaseService
from blobpipe.services.compose._config import INTERMEDIATE_SUFFIX
from blobpipe.services.compose._helpers import make_seed, object_name
from blobpipe.services.compose._models import CompositionPlan, CompositionTier
from blobpipe.services.compose._planner import plan_composition

if TYPE_CHECKING:
    from blobpipe.config import PipelineSettings
    from blobpipe.models import ObjectRef
    from blobpipe.store.base import BlobStore

logger = get_logger(__name__)


class AsyncComposeService(BaseService):
    """
    Asynchronous composition tree builder.

    Example:
        >>> store = InMemoryBlobStore()
        >>> compose = AsyncComposeService(store)
        >>> objects = await compose.build_large(
        ...     make_seed(1024 * 1024),
        ...     [2 * 1024**3, 4 * 1024**3],
        ... )
        >>> objects[2 * 1024**3]
        ObjectRef(name='2GiB.bin', generation=4)
    """

    def __init__(self, store: BlobStore, settings: PipelineSettings | None = None) -> None:
        super().__init__(store, settings)
        self._fan_in = self._settings.compose_fan_in
        self._suffix = self._settings.object_suffix
        self._tiers: list[CompositionTier] = []
        self._seed_ref: ObjectRef | None = None

    def configure(self, fan_in: int | None = None, suffix: str | None = None) -> None:
        """
        Configure compose settings.

        Args:
            fan_in: Copies per tier (K). Capped by the store's source limit.
            suffix: Suffix appended to composed object names.
        """
        if fan_in is not None:
            self._fan_in = fan_in
        if suffix is not None:
            self._suffix = suffix

    @property
    def tiers(self) -> list[CompositionTier]:
        """Tier chain of the last build, smallest first."""
        return list(self._tiers)

    @property
    def seed_ref(self) -> ObjectRef | None:
        """Seed object written by the last build."""
        return self._seed_ref

    def plan(self, seed_size: int, target_sizes: Sequence[int]) -> CompositionPlan:
        """Plan a build without touching the store."""
        fan_in = self._fan_in
        if fan_in > self._store.max_compose_sources:
            raise InvalidArgumentError(
                f"Fan-in {fan_in} exceeds store limit {self._store.max_compose_sources}"
            )
        return plan_composition(seed_size, target_sizes, fan_in)

    async def build_large(
        self,
        seed: bytes,
        target_sizes: Sequence[int],
        prefix: str = "",
    ) -> dict[int, ObjectRef]:
        """
        Build one object per target size.

        Args:
            seed: Seed content, written once as tier 0.
            target_sizes: Strictly increasing sizes, multiples of len(seed).
            prefix: Prefix for every created object name.

        Returns:
            Mapping from target size to the object holding exactly that size.

        Raises:
            InvalidArgumentError: Bad targets or fan-in, before any write.
            CompositionError: A put or compose failed; carries the size.
                Objects created so far are left in place.
        """
        plan = self.plan(len(seed), list(target_sizes))
        self._tiers = []

        seed_name = object_name(plan.seed_size, prefix, self._suffix)
        try:
            seed_ref = await self._store.put(seed_name, seed)
        except StoreError as e:
            raise CompositionError(plan.seed_size, seed_name, e) from e
        self._seed_ref = seed_ref
        logger.info(f"Uploaded seed {seed_ref} ({plan.seed_size:,} bytes)")

        tier_refs = [seed_ref]
        for size in plan.tier_sizes[1:]:
            source = tier_refs[-1]
            name = object_name(size, prefix, self._suffix)
            ref = await self._compose(name, [source] * plan.fan_in, size)
            self._tiers.append(
                CompositionTier(source=source, size_bytes=size, fan_in=plan.fan_in, result=ref)
            )
            tier_refs.append(ref)
            logger.info(f"Created tier {len(tier_refs) - 1}: {ref} ({size:,} bytes)")

        results: dict[int, ObjectRef] = {}
        for recipe in plan.targets:
            if recipe.tier_index is not None:
                results[recipe.size] = tier_refs[recipe.tier_index]
                continue
            name = object_name(recipe.size, prefix, self._suffix)
            sources = [tier_refs[i] for i in plan.sources_for(recipe)]
            results[recipe.size] = await self._compose_bounded(name, sources, recipe.size)
            logger.info(
                f"Created {results[recipe.size]} ({recipe.size:,} bytes, "
                f"{recipe.source_count} sources)"
            )

        return results

    async def build_seeded(
        self,
        target_sizes: Sequence[int],
        seed_size: int | None = None,
        prefix: str = "",
    ) -> dict[int, ObjectRef]:
        """Build targets from a generated alphabet seed of ``seed_size`` bytes."""
        seed_size = seed_size or self._settings.seed_size
        return await self.build_large(make_seed(seed_size), target_sizes, prefix=prefix)

    async def _compose(self, name: str, sources: list[ObjectRef], size: int) -> ObjectRef:
        """Compose with pinned sources, attributing failures to ``size``."""
        try:
            return await self._store.compose(name, sources)
        except StoreError as e:
            logger.error(f"Compose of {name} ({size:,} bytes) failed: {e}")
            raise CompositionError(size, name, e) from e

    async def _compose_bounded(
        self,
        name: str,
        sources: list[ObjectRef],
        size: int,
    ) -> ObjectRef:
        """Compose any number of sources without exceeding the fan-in per call.

        Runs of at most K sources are composed into intermediate objects,
        level by level, until the final call fits.
        """
        fan_in = self._fan_in
        level = 0
        while len(sources) > fan_in:
            groups = [sources[i : i + fan_in] for i in range(0, len(sources), fan_in)]
            results = await asyncio.gather(
                *(
                    self._compose_group(name, level, index, group, size)
                    for index, group in enumerate(groups)
                ),
                return_exceptions=True,
            )
            # Every group runs to completion and logs its own failure
            failures = [r for r in results if isinstance(r, BaseException)]
            if failures:
                raise failures[0]
            sources = list(results)
            level += 1
        return await self._compose(name, sources, size)

    async def _compose_group(
        self,
        name: str,
        level: int,
        index: int,
        group: list[ObjectRef],
        size: int,
    ) -> ObjectRef:
        if len(group) == 1:
            return group[0]
        part_name = name + INTERMEDIATE_SUFFIX.format(level=level, index=index)
        ref = await self._compose(part_name, group, size)
        logger.debug(f"Created intermediate {ref} from {len(group)} sources")
        return ref
