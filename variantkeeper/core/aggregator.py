"""
Variant aggregation for variantkeeper.

Merges the backend listing, declared alternatives and search-result hints
for one package identity into a deduplicated list of installable variants.
Aggregation is pure: identical inputs always give an identical list.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from variantkeeper.utils.logger import get_logger
from variantkeeper.models.variant import (
    Alternative,
    PackageIdentity,
    SourceHint,
    Variant,
)

logger = get_logger("aggregator")


def _dedupe(variants: Iterable[Variant]) -> List[Variant]:
    seen: Set[Tuple[str, Optional[str], Optional[str]]] = set()
    result: List[Variant] = []
    for variant in variants:
        key = variant.dedup_key
        if key in seen:
            continue
        seen.add(key)
        result.append(variant)
    return result


def aggregate(
    identity: PackageIdentity,
    backend_variants: Sequence[Variant],
    declared_alternatives: Optional[Sequence[Alternative]] = None,
    available_source_hints: Optional[Sequence[SourceHint]] = None,
) -> List[Variant]:
    """Combine every origin of variants for *identity*.

    Args:
        identity: Package the variants belong to.
        backend_variants: Authoritative listing from the variant source.
        declared_alternatives: Manually declared alternatives; defaults to
            the identity's own.
        available_source_hints: Hints from the originating search result;
            defaults to the identity's own. Only used when the backend
            returned nothing.

    Returns:
        Variants in the order backend, alternatives, hints, with duplicates
        (same source, version and on-disk name) collapsed to the first seen
        and versionless entries dropped.
    """
    if declared_alternatives is None:
        declared_alternatives = identity.alternatives
    if available_source_hints is None:
        available_source_hints = identity.source_hints

    combined: List[Variant] = list(backend_variants)
    combined.extend(alt.to_variant() for alt in declared_alternatives)
    if not backend_variants:
        combined.extend(hint.to_variant() for hint in available_source_hints)

    result = [v for v in _dedupe(combined) if v.has_version]

    dropped = len(combined) - len(result)
    if dropped:
        logger.debug(
            "Aggregated %d variant(s) for %s (%d duplicate or versionless dropped)",
            len(result),
            identity.name,
            dropped,
        )
    return result


def choices(variants: Sequence[Variant]) -> List[Variant]:
    """Return one variant per source id, first seen, in aggregation order."""
    by_source: Dict[str, Variant] = {}
    for variant in variants:
        by_source.setdefault(variant.source.id, variant)
    return list(by_source.values())
