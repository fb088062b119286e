"""
Collaborator interfaces for the resolution engine.

The engine never talks to a package manager directly. It is handed objects
satisfying these protocols: something that lists variants, something that
reports what is installed, something that dispatches transactions, and a
sink for human-readable failure reports.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, runtime_checkable

from variantkeeper.models.source import Source
from variantkeeper.models.variant import Variant
from variantkeeper.utils.logger import get_logger
from variantkeeper.models.status import InstallationStatus


@runtime_checkable
class VariantSource(Protocol):
    async def list_variants(self, name: str) -> List[Variant]:
        """Return every variant of *name* the source knows about."""
        ...


@runtime_checkable
class InstallStateSource(Protocol):
    async def query_installed(self, name: str) -> InstallationStatus:
        """Return a fresh installation snapshot for *name*."""
        ...


@runtime_checkable
class OperationExecutor(Protocol):
    """Dispatches package transactions.

    Calls return once the request is accepted. Completion is announced
    separately through the event bus.
    """

    async def install(
        self, name: str, source: Source, repo_name: Optional[str] = None
    ) -> None: ...

    async def uninstall(self, name: str, source: Source) -> None: ...

    async def launch(self, name: str) -> None: ...


@runtime_checkable
class ErrorSink(Protocol):
    def report(self, message: str) -> None: ...


class LoggingErrorSink:
    """Error sink that writes reports to the variantkeeper log.

    Only the newest *max_reports* messages are kept in ``reports``; every
    message is logged.
    """

    def __init__(
        self, logger: Optional[logging.Logger] = None, max_reports: int = 100
    ) -> None:
        self.logger = logger or get_logger("errors")
        self.max_reports = max_reports
        self.reports: List[str] = []

    def report(self, message: str) -> None:
        self.reports.append(message)
        if len(self.reports) > self.max_reports:
            del self.reports[: len(self.reports) - self.max_reports]
        self.logger.error(message)
