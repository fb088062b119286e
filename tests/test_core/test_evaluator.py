from __future__ import annotations

import itertools

import pytest

from variantkeeper.core.evaluator import assess_risk, evaluate, is_conflict
from variantkeeper.core.priority import SourcePriorityTable
from variantkeeper.core.selector import select_default
from variantkeeper.models import InstallationStatus, Variant

TWO_SOURCES = [Variant("official", "1.2.0"), Variant("prebuilt", "1.2.0-2")]


@pytest.mark.unit
class TestScenarios:
    """End-to-end selection plus evaluation scenarios."""

    def test_installed_official_matches(self) -> None:
        status = InstallationStatus(True, "1.2.0", source="official")

        selected = select_default(TWO_SOURCES, status)
        result = evaluate(TWO_SOURCES, selected, status)

        assert selected is not None and selected.id == "official"
        assert result.is_conflict is False
        assert result.is_update_available is False

    def test_conflict_suppresses_update(self) -> None:
        """User views official while prebuilt 1.1.0 is installed."""
        status = InstallationStatus(True, "1.1.0", source="prebuilt")

        result = evaluate(TWO_SOURCES, "official", status)

        assert result.is_conflict is True
        assert result.is_update_available is False

    def test_update_available_same_source(self) -> None:
        variants = [Variant("prebuilt", "2.0.0")]
        status = InstallationStatus(True, "1.9.0", source="prebuilt")

        selected = select_default(variants, status)
        result = evaluate(variants, selected, status)

        assert selected is not None and selected.id == "prebuilt"
        assert result.is_conflict is False
        assert result.is_update_available is True
        assert result.candidate_version == "2.0.0"

    def test_nothing_available_nothing_installed(self) -> None:
        status = InstallationStatus(False)

        selected = select_default([], status)
        result = evaluate([], selected, status)

        assert selected is None
        assert result.is_conflict is False
        assert result.is_update_available is False


@pytest.mark.unit
class TestEvaluate:
    def test_candidate_falls_back_to_display_version(self) -> None:
        result = evaluate([], "official", None, fallback_version="3.0")
        assert result.candidate_version == "3.0"

    def test_installed_older_no_update_when_same_version(self) -> None:
        status = InstallationStatus(True, "1.2.0", source="official")
        assert evaluate(TWO_SOURCES, "official", status).is_update_available is False

    def test_repo_label_case_insensitive(self) -> None:
        variants = [Variant("chaotic", "2.0")]
        status = InstallationStatus(True, "1.0", repo="CHAOTIC-AUR")

        result = evaluate(variants, "chaotic", status)

        assert result.is_conflict is False
        assert result.is_update_available is True

    def test_installed_without_version_is_not_update(self) -> None:
        status = InstallationStatus(True, None, source="official")
        assert evaluate(TWO_SOURCES, "official", status).is_update_available is False

    def test_exclusivity(self) -> None:
        """Conflict and update are never both true."""
        statuses = [
            None,
            InstallationStatus(False),
            InstallationStatus(True, "0.1", source="official"),
            InstallationStatus(True, "0.1", source="prebuilt"),
            InstallationStatus(True, "9.9", repo="extra"),
            InstallationStatus(True, "0.1"),
        ]
        for status, selected in itertools.product(statuses, [None, "official", "prebuilt", "aur"]):
            result = evaluate(TWO_SOURCES, selected, status)
            assert not (result.is_conflict and result.is_update_available)


@pytest.mark.unit
class TestIsConflict:
    def test_no_selection(self) -> None:
        assert is_conflict(None, InstallationStatus(True, "1", source="aur")) is False

    def test_installed_without_labels_is_not_conflict(self) -> None:
        assert is_conflict("official", InstallationStatus(True, "1")) is False

    def test_any_label_matching_is_enough(self) -> None:
        status = InstallationStatus(True, "1", source="official", repo="extra")
        assert is_conflict("official", status) is False

    def test_unknown_repo_conflicts(self) -> None:
        status = InstallationStatus(True, "1", repo="myrepo")
        assert is_conflict("official", status) is True


@pytest.mark.unit
class TestAssessRisk:
    def test_manjaro_chaotic_is_risky(self) -> None:
        risk = assess_risk("manjaro", "chaotic")
        assert risk.risky is True
        assert risk.reason
        assert risk.source_id == "chaotic"

    def test_arch_chaotic_is_fine(self) -> None:
        assert assess_risk("arch", "chaotic").risky is False

    def test_unknown_host(self) -> None:
        assert assess_risk(None, "chaotic").risky is False

    def test_no_source(self) -> None:
        risk = assess_risk("manjaro", None)
        assert risk.risky is False
        assert risk.source_id is None

    def test_custom_table(self) -> None:
        table = SourcePriorityTable(risk_pairs={("arch", "aur"): "builds from source"})
        assert assess_risk("Arch", "AUR", table).reason == "builds from source"
