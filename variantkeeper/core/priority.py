"""
Source priority table for variantkeeper.

Expresses which source family wins when a package is available from
several, and which host distribution / source pairs are unsafe to mix.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from variantkeeper.models.variant import Variant
from variantkeeper.models.source import Source, SourceLike, coerce_source
from variantkeeper.constants import DEFAULT_RISK_PAIRS, DEFAULT_SOURCE_PRIORITY


class SourcePriorityTable:
    """Ordered source families plus known-incompatible (host, source) pairs.

    Args:
        order: Source ids from most to least preferred.
        risk_pairs: Mapping of ``(host distro id, source id)`` to a reason.
    """

    __slots__ = ("_order", "_ranks", "_risk_pairs")

    def __init__(
        self,
        order: Iterable[SourceLike] = DEFAULT_SOURCE_PRIORITY,
        risk_pairs: Optional[Mapping[Tuple[str, str], str]] = None,
    ) -> None:
        ids = []
        for entry in order:
            source_id = coerce_source(entry).id
            if source_id not in ids:
                ids.append(source_id)
        self._order: Tuple[str, ...] = tuple(ids)
        self._ranks: Dict[str, int] = {sid: i for i, sid in enumerate(self._order)}

        pairs = DEFAULT_RISK_PAIRS if risk_pairs is None else risk_pairs
        self._risk_pairs: Dict[Tuple[str, str], str] = {
            (host.lower(), source.lower()): reason
            for (host, source), reason in pairs.items()
        }

    @property
    def order(self) -> Tuple[str, ...]:
        return self._order

    @property
    def risk_pairs(self) -> Dict[Tuple[str, str], str]:
        return dict(self._risk_pairs)

    def rank(self, source: SourceLike) -> Optional[int]:
        """Return the position of *source* in the table, or ``None``."""
        return self._ranks.get(coerce_source(source).id)

    def first_present(self, variants: Sequence[Variant]) -> Optional[Source]:
        """Return the highest-ranked source that has a variant in *variants*."""
        present = {v.source.id: v.source for v in variants}
        for source_id in self._order:
            if source_id in present:
                return present[source_id]
        return None

    def risk_reason(
        self, host: Optional[str], source: Optional[SourceLike]
    ) -> Optional[str]:
        """Return why *source* is unsafe on *host*, or ``None`` if it is fine."""
        if not host or source is None:
            return None
        return self._risk_pairs.get((host.lower(), coerce_source(source).id))

    def with_preferred(self, source: SourceLike) -> "SourcePriorityTable":
        """Return a copy of this table with *source* moved to the front."""
        return SourcePriorityTable(
            (coerce_source(source).id,) + self._order, self._risk_pairs
        )

    def __repr__(self) -> str:
        return f"SourcePriorityTable(order={list(self._order)!r})"


DEFAULT_PRIORITY_TABLE = SourcePriorityTable()
