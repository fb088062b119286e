"""
Default source selection.

:func:`select_default` picks exactly one source from the aggregated
variants, or none when there are no variants. The returned source always
has a variant in the list.
"""

from __future__ import annotations

from typing import Optional, Sequence

from variantkeeper.utils.logger import get_logger
from variantkeeper.models.variant import Variant
from variantkeeper.models.status import InstallationStatus
from variantkeeper.models.source import Source, SourceLike, coerce_source
from variantkeeper.core.priority import DEFAULT_PRIORITY_TABLE, SourcePriorityTable

logger = get_logger("selector")


def find_variant(
    variants: Sequence[Variant], source: Optional[SourceLike]
) -> Optional[Variant]:
    """Return the first variant from *source*, or ``None``."""
    if source is None:
        return None
    source_id = coerce_source(source).id
    for variant in variants:
        if variant.source.id == source_id:
            return variant
    return None


def installed_source(
    variants: Sequence[Variant], status: Optional[InstallationStatus]
) -> Optional[Source]:
    """Return the source among *variants* that the installed package came from.

    Both the status' source id and its free-text repository label are
    consulted. ``None`` when nothing is installed, the label is missing, or
    the named source has no variant.
    """
    if status is None or not status.installed:
        return None
    for label in (status.source, status.repo):
        if not label:
            continue
        for variant in variants:
            if variant.source.matches_label(label):
                return variant.source
    return None


def select_default(
    variants: Sequence[Variant],
    installed_status: Optional[InstallationStatus],
    preferred_source: Optional[SourceLike] = None,
    identity_default_source: Optional[SourceLike] = None,
    priority: SourcePriorityTable = DEFAULT_PRIORITY_TABLE,
) -> Optional[Source]:
    """Pick the default source for a package view.

    First match wins:

    1. the source the package is installed from,
    2. the caller's preferred source,
    3. the identity's own default source,
    4. the first source in the priority table,
    5. the first variant.

    Each candidate must have a variant in *variants*; the result is ``None``
    only when *variants* is empty.
    """
    if not variants:
        return None

    source = installed_source(variants, installed_status)
    if source is not None:
        logger.debug("Selected installed source %s", source)
        return source

    for candidate in (preferred_source, identity_default_source):
        variant = find_variant(variants, candidate)
        if variant is not None:
            return variant.source

    source = priority.first_present(variants)
    if source is not None:
        return source

    return variants[0].source
