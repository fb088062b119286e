"""
Unified data model exports for variantkeeper.

This module re-exports all data models to provide a stable and convenient
public API. Users can import models directly from ``variantkeeper.models``
instead of individual submodules.

Example:
    >>> from variantkeeper.models import PackageIdentity, Variant, InstallationStatus
"""

from __future__ import annotations

from variantkeeper.models.source import (
    KNOWN_SOURCES,
    Source,
    SourceType,
    coerce_source,
    source_for_repo,
    sources_equal,
)
from variantkeeper.models.variant import (
    Alternative,
    PackageIdentity,
    SourceHint,
    Variant,
)
from variantkeeper.models.status import InstallationStatus
from variantkeeper.models.evaluation import (
    ConflictEvaluation,
    OperationKind,
    RiskAssessment,
    ViewState,
)

__all__ = [
    "Source",
    "SourceType",
    "KNOWN_SOURCES",
    "coerce_source",
    "sources_equal",
    "source_for_repo",
    "Variant",
    "Alternative",
    "SourceHint",
    "PackageIdentity",
    "InstallationStatus",
    "ConflictEvaluation",
    "RiskAssessment",
    "ViewState",
    "OperationKind",
]
