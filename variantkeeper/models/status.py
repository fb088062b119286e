"""
Installation status snapshot for variantkeeper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class InstallationStatus:
    """A point-in-time fact about what is installed for a package.

    Snapshots are never mutated; each status query produces a fresh one and
    the tracker decides whether to accept it.

    Args:
        installed: Whether any package for the subject is installed.
        version: Installed version.
        source: Source id the installed package came from, if known.
        repo: Free-text repository label reported by the package manager.
        package_name: Name of the package on disk.
    """

    installed: bool
    version: Optional[str] = None
    source: Optional[str] = None
    repo: Optional[str] = None
    package_name: Optional[str] = None

    @classmethod
    def not_installed(cls) -> "InstallationStatus":
        return cls(installed=False)

    @property
    def label(self) -> Optional[str]:
        """The source id, falling back to the repository label."""
        return self.source or self.repo or None

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "installed": self.installed,
            "version": self.version,
            "source": self.source,
            "repo": self.repo,
            "package_name": self.package_name,
        }

    def __str__(self) -> str:
        if not self.installed:
            return "not installed"
        where = self.label or "unknown source"
        return f"{self.package_name or '?'} {self.version or '?'} from {where}"
