from __future__ import annotations

import itertools

import pytest

from variantkeeper.core.priority import SourcePriorityTable
from variantkeeper.core.selector import find_variant, installed_source, select_default
from variantkeeper.models import InstallationStatus, Variant
from variantkeeper.models.source import AUR, CHAOTIC, OFFICIAL, Source

VARIANTS = [
    Variant("aur", "1.0", package_name="foo-git"),
    Variant("official", "1.0", "extra", "foo"),
    Variant("chaotic", "1.1", "chaotic-aur", "foo"),
]


@pytest.mark.unit
class TestSelectDefault:
    """Tests for the select_default precedence rules."""

    def test_empty_variants_unset(self) -> None:
        assert select_default([], InstallationStatus(True, "1", source="official")) is None

    def test_installed_source_wins(self) -> None:
        status = InstallationStatus(True, "1.0", source="aur")
        assert select_default(VARIANTS, status, preferred_source="official") == AUR

    def test_installed_repo_label_wins(self) -> None:
        status = InstallationStatus(True, "1.0", repo="Chaotic-AUR")
        assert select_default(VARIANTS, status, preferred_source="official") == CHAOTIC

    def test_installed_source_absent_ignored(self) -> None:
        status = InstallationStatus(True, "1.0", source="flatpak")
        assert select_default(VARIANTS, status, preferred_source="aur") == AUR

    def test_not_installed_ignores_source(self) -> None:
        status = InstallationStatus(False, source="aur")
        assert select_default(VARIANTS, status) == CHAOTIC

    def test_preferred_source(self) -> None:
        assert select_default(VARIANTS, None, preferred_source="Official") == OFFICIAL

    def test_preferred_absent_falls_through(self) -> None:
        assert select_default(VARIANTS, None, preferred_source="garuda") == CHAOTIC

    def test_identity_default_source(self) -> None:
        assert select_default(VARIANTS, None, identity_default_source="aur") == AUR

    def test_preferred_beats_identity_default(self) -> None:
        result = select_default(
            VARIANTS, None, preferred_source="official", identity_default_source="aur"
        )
        assert result == OFFICIAL

    def test_priority_table(self) -> None:
        variants = [Variant("aur", "1"), Variant("cachyos", "1"), Variant("official", "1")]
        assert select_default(variants, None) == OFFICIAL

    def test_custom_priority_table(self) -> None:
        table = SourcePriorityTable(["aur", "official"])
        assert select_default(VARIANTS, None, priority=table) == AUR

    def test_first_variant_when_no_table_match(self) -> None:
        variants = [Variant("flatpak", "1"), Variant("prebuilt", "1")]
        assert select_default(variants, None) == Source("flatpak")

    def test_deterministic_and_member(self) -> None:
        """Every combination returns the same member of the variant list."""
        statuses = [
            None,
            InstallationStatus(False),
            InstallationStatus(True, "1", source="official"),
            InstallationStatus(True, "1", source="nowhere"),
            InstallationStatus(True, "1"),
        ]
        hints = [None, "aur", "flatpak", "chaotic"]
        members = {v.source for v in VARIANTS}

        for status, preferred, default in itertools.product(statuses, hints, hints):
            first = select_default(VARIANTS, status, preferred, default)
            for _ in range(3):
                assert select_default(VARIANTS, status, preferred, default) == first
            assert first in members


@pytest.mark.unit
class TestHelpers:
    def test_find_variant(self) -> None:
        assert find_variant(VARIANTS, "chaotic") is VARIANTS[2]
        assert find_variant(VARIANTS, None) is None
        assert find_variant(VARIANTS, "garuda") is None

    def test_installed_source_none_when_not_installed(self) -> None:
        assert installed_source(VARIANTS, InstallationStatus(False)) is None
        assert installed_source(VARIANTS, None) is None

    def test_installed_source_without_labels(self) -> None:
        assert installed_source(VARIANTS, InstallationStatus(True, "1.0")) is None
