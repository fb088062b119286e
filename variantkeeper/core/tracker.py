"""
Installation status tracking.

:class:`InstallationTracker` queries the install state source for one
package identity and decides which responses to believe. Every query takes
a ticket from a strictly increasing counter when it is issued; a response
is accepted only if its ticket is still the latest issued, so a slow query
for an older subject can never overwrite a newer answer.

Failures never clear the last accepted status. The latest query's failure
is reported to the error sink; failures of superseded queries are dropped.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

from variantkeeper.utils.logger import get_logger
from variantkeeper.constants import OPERATION_COMPLETED
from variantkeeper.core.events import EventBus, Subscription
from variantkeeper.core.interfaces import ErrorSink, InstallStateSource
from variantkeeper.core.selector import find_variant
from variantkeeper.models.source import Source
from variantkeeper.models.status import InstallationStatus
from variantkeeper.models.variant import PackageIdentity, Variant

logger = get_logger("tracker")

SelectionContext = Callable[[], Tuple[Sequence[Variant], Optional[Source]]]
StatusListener = Callable[[InstallationStatus], Any]


class InstallationTracker:
    """Tracks what is installed for one package identity.

    Args:
        identity: Package being tracked.
        state_source: Collaborator answering installation queries.
        error_sink: Receives failure reports.
        context: Returns the current ``(variants, selected_source)``; used
            to resolve the on-disk name to query.
    """

    def __init__(
        self,
        identity: PackageIdentity,
        state_source: InstallStateSource,
        error_sink: ErrorSink,
        *,
        context: Optional[SelectionContext] = None,
    ) -> None:
        self.identity = identity
        self.state_source = state_source
        self.error_sink = error_sink
        self._context = context

        self._issued = 0
        self._accepted = 0
        self._status: Optional[InstallationStatus] = None
        self._learned_name: Optional[str] = None
        self._listeners: List[StatusListener] = []

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def status(self) -> Optional[InstallationStatus]:
        """Last accepted snapshot, or ``None`` before the first success."""
        return self._status

    @property
    def issued(self) -> int:
        return self._issued

    @property
    def accepted(self) -> int:
        return self._accepted

    @property
    def learned_name(self) -> Optional[str]:
        return self._learned_name

    def add_listener(self, callback: StatusListener) -> None:
        """Register *callback* to receive every accepted snapshot."""
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve_subject(self) -> str:
        """Return the name to query.

        Preference: the on-disk name learned from an earlier accepted
        status, then the selected variant's package name, then the identity.
        """
        if self._learned_name:
            return self._learned_name

        if self._context is not None:
            variants, selected = self._context()
            variant = find_variant(variants, selected)
            if variant is not None and variant.package_name:
                return variant.package_name

        return self.identity.name

    async def check_status(
        self, subject_name: Optional[str] = None
    ) -> Optional[InstallationStatus]:
        """Query the installation status and accept it if still current.

        Args:
            subject_name: Name to query; resolved via :meth:`resolve_subject`
                when omitted.

        Returns:
            The accepted snapshot, or ``None`` if the response was stale or
            the query failed.
        """
        self._issued += 1
        ticket = self._issued
        subject = subject_name or self.resolve_subject()
        logger.debug("Status query #%d for %s", ticket, subject)

        try:
            status = await self.state_source.query_installed(subject)
        except Exception as exc:
            if ticket != self._issued:
                logger.debug("Dropping failure of superseded query #%d: %s", ticket, exc)
                return None
            self.error_sink.report(
                f"Could not check installation status of {subject}: {exc}"
            )
            return None

        if ticket != self._issued:
            logger.debug(
                "Discarding stale status #%d for %s (latest is #%d)",
                ticket,
                subject,
                self._issued,
            )
            return None

        self._accept(ticket, status)
        return status

    def _accept(self, ticket: int, status: InstallationStatus) -> None:
        self._accepted = ticket
        self._status = status
        if status.installed and status.package_name:
            self._learned_name = status.package_name

        for listener in list(self._listeners):
            listener(status)

    # ------------------------------------------------------------------
    # External events
    # ------------------------------------------------------------------

    async def on_external_event(self, event: str) -> Optional[InstallationStatus]:
        """Re-check unconditionally when an operation has completed."""
        if event != OPERATION_COMPLETED:
            return None
        # The finished operation may have removed or replaced the package
        # under its learned name
        self._learned_name = None
        return await self.check_status()

    def subscribe(self, bus: EventBus) -> Subscription:
        """Subscribe to operation completion on *bus*."""

        async def _handler(_payload: Any) -> None:
            await self.on_external_event(OPERATION_COMPLETED)

        return bus.subscribe(OPERATION_COMPLETED, _handler)
