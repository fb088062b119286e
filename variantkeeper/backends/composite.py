"""
Merging several variant sources into one.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence, Set, Tuple

from variantkeeper.utils.logger import get_logger
from variantkeeper.exceptions import BackendError
from variantkeeper.core.interfaces import VariantSource
from variantkeeper.models.variant import Variant
from variantkeeper.backends.naming import matches_identity

logger = get_logger("composite")


class CompositeVariantSource:
    """Query several variant sources concurrently and merge their answers.

    Results keep the order of *sources*. A failing source is logged and
    skipped; :class:`BackendError` is raised only when every source fails.
    """

    def __init__(self, sources: Sequence[VariantSource]) -> None:
        self.sources = list(sources)

    async def list_variants(self, name: str) -> List[Variant]:
        if not self.sources:
            return []

        results = await asyncio.gather(
            *(source.list_variants(name) for source in self.sources),
            return_exceptions=True,
        )

        merged: List[Variant] = []
        seen: Set[Tuple[str, Optional[str]]] = set()
        failures: List[str] = []

        for source, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "%s failed for %s: %s", type(source).__name__, name, result
                )
                failures.append(str(result))
                continue

            for variant in result:
                if not matches_identity(variant.package_name or name, name):
                    continue
                key = (variant.source.id, variant.package_name)
                if key in seen:
                    continue
                seen.add(key)
                merged.append(variant)

        if len(failures) == len(self.sources):
            raise BackendError(
                f"All variant sources failed for {name}: " + "; ".join(failures)
            )
        return merged
