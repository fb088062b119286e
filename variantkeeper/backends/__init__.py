"""
Boundary adapters that answer the engine's queries from the real system.
"""

from __future__ import annotations

from variantkeeper.backends.aur import AURClient
from variantkeeper.backends.pacman import PacmanBackend
from variantkeeper.backends.composite import CompositeVariantSource
from variantkeeper.backends.naming import base_name, matches_identity, strip_package_suffix

__all__ = [
    "AURClient",
    "PacmanBackend",
    "CompositeVariantSource",
    "base_name",
    "matches_identity",
    "strip_package_suffix",
]
