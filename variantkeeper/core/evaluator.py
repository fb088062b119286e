"""
Conflict, update and risk evaluation.

Everything here is a pure function of its arguments. Results are derived
on demand and never cached, since a stale evaluation could lead the user
to install the wrong source.
"""

from __future__ import annotations

from typing import Optional, Sequence

from variantkeeper.models.variant import Variant
from variantkeeper.models.status import InstallationStatus
from variantkeeper.models.source import SourceLike, coerce_source
from variantkeeper.models.evaluation import ConflictEvaluation, RiskAssessment
from variantkeeper.core.priority import DEFAULT_PRIORITY_TABLE, SourcePriorityTable
from variantkeeper.core.selector import find_variant
from variantkeeper.utils.version_utils import compare_versions


def is_conflict(
    selected_source: Optional[SourceLike],
    installed_status: Optional[InstallationStatus],
) -> bool:
    """Return True if the package is installed from a source other than the selected one.

    An installed package whose source and repository are both unknown is
    not treated as a conflict.
    """
    if selected_source is None or installed_status is None:
        return False
    if not installed_status.installed or not installed_status.label:
        return False

    source = coerce_source(selected_source)
    labels = [l for l in (installed_status.source, installed_status.repo) if l]
    return not any(source.matches_label(label) for label in labels)


def evaluate(
    variants: Sequence[Variant],
    selected_source: Optional[SourceLike],
    installed_status: Optional[InstallationStatus],
    fallback_version: Optional[str] = None,
) -> ConflictEvaluation:
    """Compute conflict and update state for the selected source.

    Args:
        variants: Aggregated variants.
        selected_source: Source the user is looking at.
        installed_status: Latest accepted installation status.
        fallback_version: Version to use when no variant matches the
            selection (normally the identity's display version).
    """
    variant = find_variant(variants, selected_source)
    candidate = variant.version if variant is not None else fallback_version

    installed = installed_status is not None and installed_status.installed
    installed_version = installed_status.version if installed else None

    conflict = is_conflict(selected_source, installed_status)
    update = (
        not conflict
        and installed
        and bool(candidate)
        and bool(installed_version)
        and compare_versions(candidate, installed_version) > 0
    )

    return ConflictEvaluation(
        is_conflict=conflict,
        is_update_available=update,
        candidate_version=candidate,
        installed_version=installed_version,
    )


def assess_risk(
    host: Optional[str],
    source: Optional[SourceLike],
    table: SourcePriorityTable = DEFAULT_PRIORITY_TABLE,
) -> RiskAssessment:
    """Flag *source* as risky when it is a known-bad match for *host*.

    Advisory only; nothing is blocked.
    """
    source_id = coerce_source(source).id if source is not None else None
    reason = table.risk_reason(host, source)
    return RiskAssessment(
        risky=reason is not None,
        reason=reason,
        host=host,
        source_id=source_id,
    )
