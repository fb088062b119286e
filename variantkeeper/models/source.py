"""
Package source model for variantkeeper.

A :class:`Source` is a package-origin family (official repositories, a
prebuilt community repository, the AUR, a distribution spin, ...). Sources
are compared by id alone, case-insensitively; labels are for display only.
Anywhere a source may arrive as a bare id string, run it through
:func:`coerce_source` and compare with :func:`sources_equal`.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional, Union

from variantkeeper.constants import (
    CHAOTIC_REPO_NAME,
    OFFICIAL_REPO_NAMES,
    SOURCE_AUR,
    SOURCE_CACHYOS,
    SOURCE_CHAOTIC,
    SOURCE_ENDEAVOUR,
    SOURCE_FLATPAK,
    SOURCE_GARUDA,
    SOURCE_LOCAL,
    SOURCE_MANJARO,
    SOURCE_OFFICIAL,
    SPIN_REPO_PREFIXES,
)


class SourceType(str, Enum):
    """How a source delivers packages."""

    BINARY_REPO = "binary-repo"
    SOURCE_BUILD = "source-build"
    ALTERNATE_FORMAT = "alternate-format"


@dataclass(frozen=True, eq=False)
class Source:
    """A package origin family.

    Args:
        id: Unique identifier, e.g. ``"official"`` or ``"chaotic"``.
        label: Human-readable name.
        type: Delivery mechanism discriminant.
    """

    id: str
    label: str = ""
    type: SourceType = SourceType.BINARY_REPO

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", self.id.strip().lower())
        if not self.label:
            object.__setattr__(self, "label", self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Source):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.id

    def matches_label(self, label: Optional[str]) -> bool:
        """Return True if a free-text source or repository label names this source.

        The label may be the source id, its display label, or the name of a
        sync database belonging to this source (``chaotic-aur``, ``extra``, ...).
        """
        if not label:
            return False
        text = label.strip().lower()
        if text in (self.id, self.label.lower()):
            return True
        mapped = source_for_repo(text)
        return mapped is not None and mapped.id == self.id

    def to_json(self) -> Dict[str, str]:
        """Return a JSON-serializable representation."""
        return {"id": self.id, "label": self.label, "type": self.type.value}


# ---------------------------------------------------------------------------
# Known sources
# ---------------------------------------------------------------------------

OFFICIAL = Source(SOURCE_OFFICIAL, "Official Arch repositories")
CHAOTIC = Source(SOURCE_CHAOTIC, "Chaotic-AUR")
AUR = Source(SOURCE_AUR, "AUR", SourceType.SOURCE_BUILD)
CACHYOS = Source(SOURCE_CACHYOS, "CachyOS")
GARUDA = Source(SOURCE_GARUDA, "Garuda")
ENDEAVOUR = Source(SOURCE_ENDEAVOUR, "EndeavourOS")
MANJARO = Source(SOURCE_MANJARO, "Manjaro")
FLATPAK = Source(SOURCE_FLATPAK, "Flatpak", SourceType.ALTERNATE_FORMAT)
LOCAL = Source(SOURCE_LOCAL, "Local package", SourceType.SOURCE_BUILD)

KNOWN_SOURCES: Dict[str, Source] = {
    source.id: source
    for source in (
        OFFICIAL,
        CHAOTIC,
        AUR,
        CACHYOS,
        GARUDA,
        ENDEAVOUR,
        MANJARO,
        FLATPAK,
        LOCAL,
    )
}

SourceLike = Union[str, Source]


def coerce_source(value: SourceLike) -> Source:
    """Turn a bare source id into a :class:`Source`.

    Known ids resolve to their canonical instance; anything else becomes a
    binary-repo source labelled with the id itself.
    """
    if isinstance(value, Source):
        return value
    key = value.strip().lower()
    return KNOWN_SOURCES.get(key) or Source(key)


def sources_equal(a: Optional[SourceLike], b: Optional[SourceLike]) -> bool:
    """Compare two sources (or source ids) by id, case-insensitively."""
    if a is None or b is None:
        return False
    return coerce_source(a).id == coerce_source(b).id


def source_for_repo(repo_name: Optional[str]) -> Optional[Source]:
    """Map a pacman sync database name to its source family.

    Returns ``None`` for repositories that belong to no known family.

    Example:
        >>> source_for_repo("cachyos-v3").id
        'cachyos'
    """
    if not repo_name:
        return None
    repo = repo_name.strip().lower()

    if repo == CHAOTIC_REPO_NAME:
        return CHAOTIC
    if repo in OFFICIAL_REPO_NAMES:
        return OFFICIAL
    for prefix, source_id in SPIN_REPO_PREFIXES.items():
        if repo.startswith(prefix):
            return KNOWN_SOURCES[source_id]
    return None
