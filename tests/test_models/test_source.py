from __future__ import annotations

from typing import Optional

import pytest

from variantkeeper.models.source import (
    AUR,
    CHAOTIC,
    FLATPAK,
    KNOWN_SOURCES,
    OFFICIAL,
    Source,
    SourceType,
    coerce_source,
    source_for_repo,
    sources_equal,
)


@pytest.mark.unit
class TestSource:
    """Tests for Source identity semantics."""

    def test_equality_by_id_only(self) -> None:
        """Labels and types do not take part in equality."""
        assert Source("official", "Arch") == Source("official", "Something else")

    def test_id_is_case_insensitive(self) -> None:
        assert Source("Chaotic") == CHAOTIC
        assert hash(Source("CHAOTIC")) == hash(CHAOTIC)

    def test_label_defaults_to_id(self) -> None:
        assert Source("prebuilt").label == "prebuilt"

    def test_not_equal_to_plain_string(self) -> None:
        assert (OFFICIAL == "official") is False

    def test_usable_as_dict_key(self) -> None:
        mapping = {OFFICIAL: 1}
        assert mapping[Source("official")] == 1

    def test_types(self) -> None:
        assert OFFICIAL.type is SourceType.BINARY_REPO
        assert AUR.type is SourceType.SOURCE_BUILD
        assert FLATPAK.type is SourceType.ALTERNATE_FORMAT

    def test_to_json(self) -> None:
        assert AUR.to_json() == {"id": "aur", "label": "AUR", "type": "source-build"}


@pytest.mark.unit
class TestMatchesLabel:
    @pytest.mark.parametrize("label", ["chaotic", "CHAOTIC", "Chaotic-AUR", "chaotic-aur"])
    def test_matches_id_label_and_repo(self, label: str) -> None:
        assert CHAOTIC.matches_label(label) is True

    @pytest.mark.parametrize("label", ["extra", "core", "multilib"])
    def test_official_repo_names(self, label: str) -> None:
        assert OFFICIAL.matches_label(label) is True

    @pytest.mark.parametrize("label", [None, "", "aur", "cachyos-v3"])
    def test_non_matching(self, label: Optional[str]) -> None:
        assert OFFICIAL.matches_label(label) is False


@pytest.mark.unit
class TestCoercion:
    def test_known_id_returns_canonical_instance(self) -> None:
        assert coerce_source("aur") is KNOWN_SOURCES["aur"]

    def test_unknown_id_becomes_binary_repo(self) -> None:
        source = coerce_source("Prebuilt")
        assert source.id == "prebuilt"
        assert source.type is SourceType.BINARY_REPO

    def test_source_passthrough(self) -> None:
        custom = Source("x", "X")
        assert coerce_source(custom) is custom

    def test_sources_equal_mixed(self) -> None:
        assert sources_equal("Official", OFFICIAL) is True
        assert sources_equal("aur", "chaotic") is False
        assert sources_equal(None, "aur") is False


@pytest.mark.unit
class TestSourceForRepo:
    @pytest.mark.parametrize(
        "repo, expected",
        [
            ("chaotic-aur", "chaotic"),
            ("core", "official"),
            ("extra", "official"),
            ("community", "official"),
            ("multilib", "official"),
            ("cachyos-v3", "cachyos"),
            ("cachyos", "cachyos"),
            ("garuda", "garuda"),
            ("endeavouros", "endeavour"),
            ("Manjaro-Extra", "manjaro"),
        ],
    )
    def test_known_repos(self, repo: str, expected: str) -> None:
        source = source_for_repo(repo)
        assert source is not None
        assert source.id == expected

    @pytest.mark.parametrize("repo", [None, "", "myrepo", "archlinuxcn"])
    def test_unknown_repos(self, repo: Optional[str]) -> None:
        assert source_for_repo(repo) is None
