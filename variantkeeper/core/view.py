"""
Per-package view state machine.

:class:`PackageView` wires the engine together for one package identity:
it loads and aggregates variants, tracks installation status, keeps the
selected source, derives conflict/update/risk state on demand and gates
the install, update, switch-source, uninstall and launch actions.

States::

    Uninstalled --install--> OperationInFlight(install)
    Installed(matching) --update, if newer--> OperationInFlight(install)
    Installed(conflicting) --switch source--> OperationInFlight(install)
    Installed(*) --uninstall--> OperationInFlight(uninstall)
    OperationInFlight(*) --completion event--> re-check --> Uninstalled | Installed(*)
    Unknown --refresh--> Uninstalled | Installed(*)

Collaborator failures are reported to the error sink and never raised;
the last good variants and status are kept.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional

from variantkeeper.utils.logger import get_logger
from variantkeeper.constants import OPERATION_COMPLETED
from variantkeeper.core.cache import VariantCache
from variantkeeper.core.events import EventBus, Subscription
from variantkeeper.core.tracker import InstallationTracker
from variantkeeper.core.aggregator import aggregate, choices
from variantkeeper.core.evaluator import assess_risk, evaluate
from variantkeeper.core.selector import find_variant, installed_source, select_default
from variantkeeper.core.priority import DEFAULT_PRIORITY_TABLE, SourcePriorityTable
from variantkeeper.core.interfaces import (
    ErrorSink,
    InstallStateSource,
    OperationExecutor,
    VariantSource,
)
from variantkeeper.models.variant import PackageIdentity, Variant
from variantkeeper.models.status import InstallationStatus
from variantkeeper.models.source import Source, SourceLike, coerce_source
from variantkeeper.models.evaluation import (
    ConflictEvaluation,
    OperationKind,
    RiskAssessment,
    ViewState,
)

logger = get_logger("view")


class PackageView:
    """Resolution and reconciliation state for one package identity.

    Args:
        identity: Package being viewed.
        variant_source: Lists variants for the identity.
        state_source: Reports installation status.
        executor: Dispatches install/uninstall/launch.
        error_sink: Receives human-readable failure reports.
        bus: Event bus carrying operation completion events.
        priority_table: Source ordering and risk pairs.
        preferred_source: Source the user arrived from, if any.
        host_distro: Host distribution id for risk classification.
        cache: Shared variant listing cache.
    """

    def __init__(
        self,
        identity: PackageIdentity,
        *,
        variant_source: VariantSource,
        state_source: InstallStateSource,
        executor: OperationExecutor,
        error_sink: ErrorSink,
        bus: EventBus,
        priority_table: SourcePriorityTable = DEFAULT_PRIORITY_TABLE,
        preferred_source: Optional[SourceLike] = None,
        host_distro: Optional[str] = None,
        cache: Optional[VariantCache] = None,
    ) -> None:
        self.identity = identity
        self.variant_source = variant_source
        self.executor = executor
        self.error_sink = error_sink
        self.bus = bus
        self.priority_table = priority_table
        self.preferred_source = (
            coerce_source(preferred_source) if preferred_source is not None else None
        )
        self.host_distro = host_distro
        self.cache = cache

        self._variants: List[Variant] = []
        self._selected: Optional[Source] = None
        self._in_flight: Optional[OperationKind] = None
        self._subscription: Optional[Subscription] = None

        self.tracker = InstallationTracker(
            identity,
            state_source,
            error_sink,
            context=lambda: (self._variants, self._selected),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Subscribe to completion events and resolve the initial state."""
        if self._subscription is None or not self._subscription.active:
            self._subscription = self.bus.subscribe(
                OPERATION_COMPLETED, self._on_operation_completed
            )

        await self._load_variants(initial=True)
        # Provisional pick so the status query can use the variant's name
        self._selected = self._select_default()
        await self.tracker.check_status()
        self._selected = self._select_default()
        logger.info(
            "Opened %s: %d variant(s), selected %s",
            self.identity.name,
            len(self._variants),
            self._selected or "nothing",
        )

    def close(self) -> None:
        """Drop the event subscription. Safe to call more than once."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def __aenter__(self) -> "PackageView":
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    async def refresh(self, *, reselect: bool = False) -> None:
        """Reload variants and re-check status.

        The selection is recomputed when *reselect* is set or when the
        selected source no longer has a variant.
        """
        if self.cache is not None:
            self.cache.invalidate(self.identity.name)
        await self._load_variants(initial=False)
        await self.tracker.check_status()
        if reselect or not self._selection_available():
            self._selected = self._select_default()

    async def select_source(self, source: SourceLike) -> bool:
        """Apply an explicit user choice of source.

        Returns:
            False (with a report to the error sink) when *source* has no
            variant; True otherwise.
        """
        variant = find_variant(self._variants, source)
        if variant is None:
            self.error_sink.report(
                f"{coerce_source(source).label} does not provide {self.identity.name}"
            )
            return False

        self._selected = variant.source
        await self.tracker.check_status()
        return True

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def variants(self) -> List[Variant]:
        return list(self._variants)

    @property
    def choices(self) -> List[Variant]:
        return choices(self._variants)

    @property
    def selected_source(self) -> Optional[Source]:
        return self._selected

    @property
    def selected_variant(self) -> Optional[Variant]:
        return find_variant(self._variants, self._selected)

    @property
    def status(self) -> Optional[InstallationStatus]:
        return self.tracker.status

    @property
    def in_flight(self) -> Optional[OperationKind]:
        return self._in_flight

    @property
    def evaluation(self) -> ConflictEvaluation:
        return evaluate(
            self._variants,
            self._selected,
            self.tracker.status,
            self.identity.display_version,
        )

    @property
    def risk(self) -> RiskAssessment:
        return assess_risk(self.host_distro, self._selected, self.priority_table)

    @property
    def state(self) -> ViewState:
        if self._in_flight is not None:
            return ViewState.OPERATION_IN_FLIGHT
        status = self.tracker.status
        # No status accepted yet, e.g. the first query failed
        if status is None:
            return ViewState.UNKNOWN
        if not status.installed:
            return ViewState.UNINSTALLED
        if self.evaluation.is_conflict:
            return ViewState.INSTALLED_CONFLICTING
        return ViewState.INSTALLED_MATCHING

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def install(self) -> bool:
        """Install the selected variant. Only allowed when uninstalled."""
        if not self._permitted("install", ViewState.UNINSTALLED):
            return False
        return await self._install_selected()

    async def update(self) -> bool:
        """Reinstall the selected source at its newer version."""
        if not self._permitted("update", ViewState.INSTALLED_MATCHING):
            return False
        if not self.evaluation.is_update_available:
            logger.warning("No update available for %s", self.identity.name)
            return False
        return await self._install_selected()

    async def switch_source(self) -> bool:
        """Install the selected source over the conflicting installed one."""
        if not self._permitted("switch source", ViewState.INSTALLED_CONFLICTING):
            return False
        return await self._install_selected()

    async def uninstall(self) -> bool:
        """Remove the installed package."""
        if not self._permitted(
            "uninstall",
            ViewState.INSTALLED_MATCHING,
            ViewState.INSTALLED_CONFLICTING,
        ):
            return False

        status = self.tracker.status
        if status is None:
            return False
        source = installed_source(self._variants, status)
        if source is None:
            source = coerce_source(status.label) if status.label else self._selected
        name = self.tracker.resolve_subject()
        return await self._dispatch(
            OperationKind.UNINSTALL,
            f"uninstall {name}",
            lambda: self.executor.uninstall(name, source),
        )

    async def launch(self) -> bool:
        """Launch the installed application. Does not change state."""
        if not self._permitted(
            "launch",
            ViewState.INSTALLED_MATCHING,
            ViewState.INSTALLED_CONFLICTING,
        ):
            return False

        name = self.tracker.resolve_subject()
        try:
            await self.executor.launch(name)
        except Exception as exc:
            self.error_sink.report(f"Failed to launch {name}: {exc}")
            return False
        return True

    def _permitted(self, action: str, *states: ViewState) -> bool:
        state = self.state
        if state in states:
            return True
        logger.warning(
            "Cannot %s %s while %s", action, self.identity.name, state.value
        )
        return False

    async def _install_selected(self) -> bool:
        variant = self.selected_variant
        if variant is None:
            logger.warning("Nothing selected to install for %s", self.identity.name)
            return False

        name = variant.package_name or self.identity.name
        return await self._dispatch(
            OperationKind.INSTALL,
            f"install {name} from {variant.source.label}",
            lambda: self.executor.install(name, variant.source, variant.repo_name),
        )

    async def _dispatch(
        self,
        kind: OperationKind,
        description: str,
        call: Callable[[], Awaitable[None]],
    ) -> bool:
        # Entered before awaiting so duplicate triggers are refused meanwhile
        self._in_flight = kind
        try:
            await call()
        except Exception as exc:
            self._in_flight = None
            self.error_sink.report(f"Failed to {description}: {exc}")
            return False
        logger.info("Dispatched %s", description)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _select_default(self) -> Optional[Source]:
        return select_default(
            self._variants,
            self.tracker.status,
            self.preferred_source,
            self.identity.default_source,
            self.priority_table,
        )

    def _selection_available(self) -> bool:
        return find_variant(self._variants, self._selected) is not None

    async def _fetch_variants(self) -> List[Variant]:
        if self.cache is not None:
            return await self.cache.get_or_fetch(
                self.identity.name, self.variant_source.list_variants
            )
        return list(await self.variant_source.list_variants(self.identity.name))

    async def _load_variants(self, *, initial: bool) -> None:
        try:
            backend = await self._fetch_variants()
        except Exception as exc:
            self.error_sink.report(
                f"Could not list variants of {self.identity.name}: {exc}"
            )
            if not initial and self._variants:
                return
            backend = []

        self._variants = aggregate(self.identity, backend)

    async def _on_operation_completed(self, _payload: Any = None) -> None:
        if self.cache is not None:
            self.cache.invalidate(self.identity.name)

        # Actions stay gated until the re-check has settled the new state
        try:
            await self._load_variants(initial=False)
            status = await self.tracker.on_external_event(OPERATION_COMPLETED)
        finally:
            self._in_flight = None

        if not self._selection_available():
            self._selected = self._select_default()
            return

        source = installed_source(self._variants, status)
        if source is not None and source != self._selected:
            logger.info(
                "Installed source of %s changed; selecting %s",
                self.identity.name,
                source,
            )
            self._selected = source

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable summary of the view."""
        status = self.tracker.status
        return {
            "package": self.identity.name,
            "state": self.state.value,
            "selected": self._selected.id if self._selected else None,
            "variants": [v.to_json() for v in self._variants],
            "status": status.to_json() if status else None,
            "evaluation": self.evaluation.to_json(),
            "risk": self.risk.to_json(),
        }
