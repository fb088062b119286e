"""
Variant and package identity models for variantkeeper.

A :class:`Variant` is one offering of a package from one source. The
identity a user selected carries optional extra inputs for aggregation:
manually declared alternatives and source hints from the search result the
user came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from variantkeeper.constants import CHAOTIC_REPO_NAME, SOURCE_CHAOTIC
from variantkeeper.models.source import Source, SourceLike, coerce_source


@dataclass(frozen=True)
class Variant:
    """One (source, version) offering of a package.

    Args:
        source: Origin family.
        version: Version string; a variant without one is not installable.
        repo_name: Sync database the package lives in, if known.
        package_name: On-disk package name when it differs from the identity.
    """

    source: Source
    version: Optional[str]
    repo_name: Optional[str] = None
    package_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", coerce_source(self.source))

    @property
    def has_version(self) -> bool:
        return bool(self.version and self.version.strip())

    @property
    def dedup_key(self) -> Tuple[str, Optional[str], Optional[str]]:
        return (self.source.id, self.version, self.package_name)

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "source": self.source.id,
            "version": self.version,
            "repo": self.repo_name,
            "package_name": self.package_name,
        }

    def __str__(self) -> str:
        return f"{self.package_name or '?'} {self.version or '?'} [{self.source.id}]"


@dataclass(frozen=True)
class Alternative:
    """A manually declared alternative package for an identity."""

    name: str
    source: SourceLike
    version: Optional[str] = None

    def to_variant(self) -> Variant:
        source = coerce_source(self.source)
        repo = CHAOTIC_REPO_NAME if source.id == SOURCE_CHAOTIC else None
        return Variant(source, self.version, repo_name=repo, package_name=self.name)


@dataclass(frozen=True)
class SourceHint:
    """Source availability carried on a search result."""

    source: SourceLike
    version: Optional[str] = None

    def to_variant(self) -> Variant:
        return Variant(coerce_source(self.source), self.version)


@dataclass(frozen=True)
class PackageIdentity:
    """The stable logical name correlating variants across sources.

    Args:
        name: Package name as the user selected it.
        default_source: Source the identity itself declares, if any.
        display_version: Last version shown for the package in a listing.
        alternatives: Declared alternative packages.
        source_hints: Sources the originating search result said carry it.
    """

    name: str
    default_source: Optional[SourceLike] = None
    display_version: Optional[str] = None
    alternatives: Tuple[Alternative, ...] = ()
    source_hints: Tuple[SourceHint, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Package identity name must not be empty")
        object.__setattr__(self, "name", self.name.strip())
        if self.default_source is not None:
            object.__setattr__(self, "default_source", coerce_source(self.default_source))
        object.__setattr__(self, "alternatives", tuple(self.alternatives))
        object.__setattr__(self, "source_hints", tuple(self.source_hints))

    def __str__(self) -> str:
        return self.name
