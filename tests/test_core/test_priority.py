from __future__ import annotations

from pathlib import Path

import pytest

from variantkeeper.core.distro import (
    UNKNOWN_DISTRO,
    detect_host_distro,
    normalize_distro_id,
    parse_os_release,
)
from variantkeeper.core.priority import DEFAULT_PRIORITY_TABLE, SourcePriorityTable
from variantkeeper.models import Variant
from variantkeeper.models.source import OFFICIAL


@pytest.mark.unit
class TestSourcePriorityTable:
    """Tests for SourcePriorityTable."""

    def test_default_order(self) -> None:
        assert DEFAULT_PRIORITY_TABLE.order == (
            "chaotic",
            "official",
            "cachyos",
            "garuda",
            "endeavour",
            "manjaro",
            "aur",
        )

    def test_rank(self) -> None:
        assert DEFAULT_PRIORITY_TABLE.rank("chaotic") == 0
        assert DEFAULT_PRIORITY_TABLE.rank(OFFICIAL) == 1
        assert DEFAULT_PRIORITY_TABLE.rank("flatpak") is None

    def test_duplicates_removed(self) -> None:
        table = SourcePriorityTable(["aur", "AUR", "official"])
        assert table.order == ("aur", "official")

    def test_first_present(self) -> None:
        variants = [Variant("aur", "1"), Variant("garuda", "1")]
        source = DEFAULT_PRIORITY_TABLE.first_present(variants)
        assert source is not None and source.id == "garuda"

    def test_first_present_none(self) -> None:
        assert DEFAULT_PRIORITY_TABLE.first_present([Variant("flatpak", "1")]) is None

    def test_with_preferred(self) -> None:
        table = DEFAULT_PRIORITY_TABLE.with_preferred("aur")
        assert table.order[0] == "aur"
        assert table.order.count("aur") == 1
        assert table.risk_pairs == DEFAULT_PRIORITY_TABLE.risk_pairs

    def test_risk_reason(self) -> None:
        assert DEFAULT_PRIORITY_TABLE.risk_reason("manjaro", "chaotic")
        assert DEFAULT_PRIORITY_TABLE.risk_reason("arch", "chaotic") is None
        assert DEFAULT_PRIORITY_TABLE.risk_reason(None, "chaotic") is None


@pytest.mark.unit
class TestDistroDetection:
    """Tests for os-release based host detection."""

    def test_parse_os_release(self) -> None:
        text = '# comment\nNAME="Manjaro Linux"\nID=manjaro\nPRETTY_NAME=\'Manjaro\'\n\nbogus\n'
        assert parse_os_release(text) == {
            "NAME": "Manjaro Linux",
            "ID": "manjaro",
            "PRETTY_NAME": "Manjaro",
        }

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("arch", "arch"),
            ("Manjaro", "manjaro"),
            ("endeavouros", "endeavouros"),
            ("garuda", "garuda"),
            ("cachyos", "cachyos"),
            ("ubuntu", "unknown"),
            (None, "unknown"),
        ],
    )
    def test_normalize(self, raw, expected: str) -> None:
        assert normalize_distro_id(raw) == expected

    def test_detect_from_file(self, tmp_path: Path) -> None:
        os_release = tmp_path / "os-release"
        os_release.write_text('ID=garuda\nPRETTY_NAME="Garuda Linux"\n', encoding="utf-8")

        host = detect_host_distro(os_release)

        assert host.id == "garuda"
        assert host.pretty_name == "Garuda Linux"
        assert host.is_known is True

    def test_missing_file_is_unknown(self, tmp_path: Path) -> None:
        host = detect_host_distro(tmp_path / "missing")

        assert host == UNKNOWN_DISTRO
        assert host.pretty_name == "Unknown Linux"
        assert host.is_known is False
