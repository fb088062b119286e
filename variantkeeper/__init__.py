"""
variantkeeper: package variant resolution for multi-source Linux systems.

The same application can often be installed from several places on an
Arch-based system: the official repositories, a prebuilt community
repository such as Chaotic-AUR, the AUR itself, or repositories shipped by
a distribution spin (CachyOS, Garuda, EndeavourOS, Manjaro).

variantkeeper decides, for one package at a time:
    • which sources can actually provide it, and at which version
    • what is installed right now, and from where
    • which source should be selected by default
    • whether the selected source conflicts with the installed one
    • whether a newer version of the installed lineage is available

The engine is an in-process decision layer; installing and removing
packages is left to an external executor.
"""

from __future__ import annotations

from variantkeeper.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "variantkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Package variant resolution and installation reconciliation."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from variantkeeper.models import (
    Alternative,
    ConflictEvaluation,
    InstallationStatus,
    PackageIdentity,
    RiskAssessment,
    Source,
    SourceHint,
    SourceType,
    Variant,
    ViewState,
)
from variantkeeper.core import (
    DEFAULT_PRIORITY_TABLE,
    EventBus,
    InstallationTracker,
    PackageView,
    SourcePriorityTable,
    VariantCache,
    aggregate,
    assess_risk,
    evaluate,
    select_default,
)
from variantkeeper.utils.version_utils import compare_versions

__all__ = [
    "__version__",
    # Models
    "Alternative",
    "ConflictEvaluation",
    "InstallationStatus",
    "PackageIdentity",
    "RiskAssessment",
    "Source",
    "SourceHint",
    "SourceType",
    "Variant",
    "ViewState",
    # Engine
    "DEFAULT_PRIORITY_TABLE",
    "EventBus",
    "InstallationTracker",
    "PackageView",
    "SourcePriorityTable",
    "VariantCache",
    "aggregate",
    "assess_risk",
    "compare_versions",
    "evaluate",
    "select_default",
]
