from __future__ import annotations

import asyncio
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

from variantkeeper.constants import OPERATION_COMPLETED
from variantkeeper.core.events import EventBus
from variantkeeper.core.tracker import InstallationTracker
from variantkeeper.models import InstallationStatus, PackageIdentity, Variant
from variantkeeper.models.source import CHAOTIC


class ControlledStateSource:
    """Install state source whose answers are released by the test."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.pending: List[asyncio.Future] = []

    async def query_installed(self, name: str) -> InstallationStatus:
        self.calls.append(name)
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


@pytest.fixture
def sink() -> MagicMock:
    return MagicMock()


@pytest.mark.unit
class TestCheckStatus:
    """Tests for status queries and the staleness guard."""

    @pytest.mark.asyncio
    async def test_accepts_response(self, sink: MagicMock) -> None:
        status = InstallationStatus(True, "1.0", source="official", package_name="foo")
        source = AsyncMock()
        source.query_installed.return_value = status
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        assert await tracker.check_status() is status
        assert tracker.status is status
        assert tracker.issued == 1
        assert tracker.accepted == 1
        source.query_installed.assert_awaited_once_with("foo")

    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, sink: MagicMock) -> None:
        """Query A then B; B answers first, A second; B is kept."""
        source = ControlledStateSource()
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        task_a = asyncio.create_task(tracker.check_status("foo"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(tracker.check_status("foo"))
        await asyncio.sleep(0)

        status_a = InstallationStatus(False)
        status_b = InstallationStatus(True, "2.0", source="aur", package_name="foo")
        source.pending[1].set_result(status_b)
        assert await task_b is status_b
        source.pending[0].set_result(status_a)
        assert await task_a is None

        assert tracker.status is status_b
        assert tracker.accepted == 2
        sink.report.assert_not_called()

    @pytest.mark.asyncio
    async def test_overlapping_queries_earlier_resolves_last(self, sink: MagicMock) -> None:
        """Different subjects: only the later-issued result is reflected."""
        source = ControlledStateSource()
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        old = asyncio.create_task(tracker.check_status("foo-bin"))
        await asyncio.sleep(0)
        new = asyncio.create_task(tracker.check_status("foo"))
        await asyncio.sleep(0)

        source.pending[1].set_result(InstallationStatus(False))
        await new
        source.pending[0].set_result(
            InstallationStatus(True, "1.0", source="chaotic", package_name="foo-bin")
        )
        await old

        assert tracker.status == InstallationStatus(False)
        assert tracker.learned_name is None

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_status(self, sink: MagicMock) -> None:
        good = InstallationStatus(True, "1.0", source="official", package_name="foo")
        source = AsyncMock()
        source.query_installed.side_effect = [good, RuntimeError("pacman exploded")]
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        await tracker.check_status()
        assert await tracker.check_status() is None

        assert tracker.status is good
        sink.report.assert_called_once()
        assert "pacman exploded" in sink.report.call_args[0][0]

    @pytest.mark.asyncio
    async def test_stale_failure_not_reported(self, sink: MagicMock) -> None:
        source = ControlledStateSource()
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        old = asyncio.create_task(tracker.check_status())
        await asyncio.sleep(0)
        new = asyncio.create_task(tracker.check_status())
        await asyncio.sleep(0)

        source.pending[0].set_exception(RuntimeError("late failure"))
        assert await old is None
        source.pending[1].set_result(InstallationStatus(False))
        await new

        sink.report.assert_not_called()
        assert tracker.status == InstallationStatus(False)

    @pytest.mark.asyncio
    async def test_listeners_notified(self, sink: MagicMock) -> None:
        status = InstallationStatus(False)
        source = AsyncMock()
        source.query_installed.return_value = status
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)
        seen: List[InstallationStatus] = []
        tracker.add_listener(seen.append)

        await tracker.check_status()

        assert seen == [status]


@pytest.mark.unit
class TestSubjectResolution:
    def test_identity_by_default(self, sink: MagicMock) -> None:
        tracker = InstallationTracker(PackageIdentity("foo"), AsyncMock(), sink)
        assert tracker.resolve_subject() == "foo"

    def test_selected_variant_package_name(self, sink: MagicMock) -> None:
        variants = [Variant("chaotic", "1", "chaotic-aur", "foo-bin")]
        tracker = InstallationTracker(
            PackageIdentity("foo"),
            AsyncMock(),
            sink,
            context=lambda: (variants, CHAOTIC),
        )
        assert tracker.resolve_subject() == "foo-bin"

    @pytest.mark.asyncio
    async def test_learned_name_preferred(self, sink: MagicMock) -> None:
        variants = [Variant("chaotic", "1", "chaotic-aur", "foo-bin")]
        source = AsyncMock()
        source.query_installed.return_value = InstallationStatus(
            True, "1", source="aur", package_name="foo-git"
        )
        tracker = InstallationTracker(
            PackageIdentity("foo"),
            source,
            sink,
            context=lambda: (variants, CHAOTIC),
        )

        await tracker.check_status()

        assert tracker.resolve_subject() == "foo-git"


@pytest.mark.unit
class TestExternalEvents:
    @pytest.mark.asyncio
    async def test_completion_triggers_recheck(self, sink: MagicMock) -> None:
        source = AsyncMock()
        source.query_installed.return_value = InstallationStatus(False)
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        await tracker.on_external_event(OPERATION_COMPLETED)

        source.query_installed.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_events_ignored(self, sink: MagicMock) -> None:
        source = AsyncMock()
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)

        assert await tracker.on_external_event("search-finished") is None
        source.query_installed.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_subscribe_to_bus(self, sink: MagicMock) -> None:
        source = AsyncMock()
        source.query_installed.return_value = InstallationStatus(False)
        tracker = InstallationTracker(PackageIdentity("foo"), source, sink)
        bus = EventBus()

        subscription = tracker.subscribe(bus)
        await bus.publish(OPERATION_COMPLETED)
        subscription.unsubscribe()
        await bus.publish(OPERATION_COMPLETED)

        assert source.query_installed.await_count == 1
