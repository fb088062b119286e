"""
Derived evaluation models for variantkeeper.

None of these are stored: they are recomputed from the current variants,
selection and installation status whenever any of those change.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from variantkeeper.utils.version_utils import get_update_type


class ViewState(str, Enum):
    """Lifecycle state of a package view."""

    UNKNOWN = "unknown"
    UNINSTALLED = "uninstalled"
    INSTALLED_MATCHING = "installed-matching"
    INSTALLED_CONFLICTING = "installed-conflicting"
    OPERATION_IN_FLIGHT = "operation-in-flight"


class OperationKind(str, Enum):
    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True)
class ConflictEvaluation:
    """Conflict and update state for the selected source.

    Args:
        is_conflict: The installed package comes from a different source.
        is_update_available: The selected source offers a newer version of
            the installed package. Never true together with ``is_conflict``.
        candidate_version: Version offered by the selected source.
        installed_version: Version currently installed.
    """

    is_conflict: bool = False
    is_update_available: bool = False
    candidate_version: Optional[str] = None
    installed_version: Optional[str] = None

    @property
    def update_type(self) -> Optional[str]:
        if not self.is_update_available:
            return None
        return get_update_type(self.installed_version, self.candidate_version)

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "conflict": self.is_conflict,
            "update_available": self.is_update_available,
            "candidate_version": self.candidate_version,
            "installed_version": self.installed_version,
            "update_type": self.update_type,
        }


@dataclass(frozen=True)
class RiskAssessment:
    """Advisory flag for a host distribution and source combination."""

    risky: bool
    reason: Optional[str] = None
    host: Optional[str] = None
    source_id: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "risky": self.risky,
            "reason": self.reason,
            "host": self.host,
            "source": self.source_id,
        }
