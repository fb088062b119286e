"""
Package name matching helpers shared by the backends.
"""

from __future__ import annotations

from typing import Optional

from variantkeeper.constants import PACKAGE_NAME_SUFFIXES


def strip_package_suffix(name: str) -> str:
    """Remove one trailing packaging suffix such as ``-bin`` or ``-git``.

    Example:
        >>> strip_package_suffix("firefox-nightly")
        'firefox'
    """
    lowered = name.lower()
    for suffix in PACKAGE_NAME_SUFFIXES:
        if lowered.endswith(suffix) and len(lowered) > len(suffix):
            return lowered[: -len(suffix)]
    return lowered


def base_name(name: str) -> str:
    """Strip packaging suffixes repeatedly (``foo-bin-git`` -> ``foo``)."""
    current = name.strip().lower()
    while True:
        stripped = strip_package_suffix(current)
        if stripped == current:
            return current
        current = stripped


def matches_identity(candidate: Optional[str], identity_name: str) -> bool:
    """Return True if *candidate* is a packaging of *identity_name*.

    Matches the exact name, or equal base names once packaging suffixes
    are stripped from both sides.
    """
    if not candidate:
        return False
    if candidate.lower() == identity_name.strip().lower():
        return True
    return base_name(candidate) == base_name(identity_name)
