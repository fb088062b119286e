from __future__ import annotations

from typing import List

import pytest

from variantkeeper.core.aggregator import aggregate, choices
from variantkeeper.models import Alternative, PackageIdentity, SourceHint, Variant


@pytest.fixture
def identity() -> PackageIdentity:
    return PackageIdentity(
        "foo",
        alternatives=(Alternative("foo-bin", "chaotic", "2.0-1"),),
        source_hints=(SourceHint("official", "1.0-1"), SourceHint("aur", "1.1-1")),
    )


@pytest.mark.unit
class TestAggregate:
    """Tests for aggregate()."""

    def test_backend_then_alternatives(self, identity: PackageIdentity) -> None:
        backend = [Variant("official", "1.0-1", "extra", "foo")]

        result = aggregate(identity, backend)

        assert [v.source.id for v in result] == ["official", "chaotic"]
        assert result[1].repo_name == "chaotic-aur"

    def test_hints_ignored_when_backend_has_results(self, identity: PackageIdentity) -> None:
        backend = [Variant("official", "1.0-1", "extra", "foo")]

        result = aggregate(identity, backend, [], None)

        assert [v.source.id for v in result] == ["official"]

    def test_falls_back_to_hints_when_backend_empty(self, identity: PackageIdentity) -> None:
        result = aggregate(identity, [], [], None)

        assert [(v.source.id, v.version) for v in result] == [
            ("official", "1.0-1"),
            ("aur", "1.1-1"),
        ]

    def test_all_inputs_empty(self) -> None:
        assert aggregate(PackageIdentity("foo"), []) == []

    def test_duplicates_collapse_first_seen_wins(self) -> None:
        first = Variant("official", "1.0", "extra", "foo")
        second = Variant("official", "1.0", "core", "foo")

        result = aggregate(PackageIdentity("foo"), [first, second])

        assert result == [first]
        assert result[0].repo_name == "extra"

    def test_different_names_are_distinct(self) -> None:
        backend = [
            Variant("aur", "1.0", package_name="foo-bin"),
            Variant("aur", "1.0", package_name="foo-git"),
        ]

        assert len(aggregate(PackageIdentity("foo"), backend)) == 2

    @pytest.mark.parametrize("version", [None, "", " ", "\t\n"])
    def test_empty_versions_excluded(self, version) -> None:
        backend = [Variant("official", version, package_name="foo")]
        alternatives = [Alternative("foo-bin", "chaotic", version)]
        hints = [SourceHint("aur", version)]

        result = aggregate(PackageIdentity("foo"), backend, alternatives, hints)

        assert result == []

    def test_empty_version_exclusion_mixed(self) -> None:
        backend = [
            Variant("official", "", package_name="foo"),
            Variant("chaotic", "2.0", package_name="foo"),
            Variant("aur", None, package_name="foo"),
        ]

        result = aggregate(PackageIdentity("foo"), backend, [], [])

        assert all(v.version and v.version.strip() for v in result)
        assert [v.source.id for v in result] == ["chaotic"]

    def test_idempotent(self, identity: PackageIdentity) -> None:
        """Aggregating an aggregated list again changes nothing."""
        backend = [
            Variant("official", "1.0-1", "extra", "foo"),
            Variant("official", "1.0-1", "extra", "foo"),
            Variant("aur", "", package_name="foo"),
            Variant("chaotic", "2.0-1", "chaotic-aur", "foo-bin"),
        ]

        once = aggregate(identity, backend)
        twice = aggregate(identity, once)

        assert twice == once

    def test_deterministic(self, identity: PackageIdentity) -> None:
        backend: List[Variant] = [
            Variant("aur", "3", package_name="foo-git"),
            Variant("official", "1", "extra", "foo"),
        ]

        results = [aggregate(identity, list(backend)) for _ in range(5)]

        assert all(r == results[0] for r in results)


@pytest.mark.unit
class TestChoices:
    def test_one_per_source_first_seen(self) -> None:
        variants = [
            Variant("aur", "1.0", package_name="foo-bin"),
            Variant("official", "1.0", package_name="foo"),
            Variant("aur", "2.0", package_name="foo-git"),
        ]

        result = choices(variants)

        assert [(v.source.id, v.package_name) for v in result] == [
            ("aur", "foo-bin"),
            ("official", "foo"),
        ]
