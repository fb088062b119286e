"""
Resolution engine for variantkeeper.

Pure pieces (aggregation, selection, evaluation, priority) and the stateful
pieces built on them (status tracking, event bus, variant cache and the
per-package view).
"""

from __future__ import annotations

from variantkeeper.core.priority import DEFAULT_PRIORITY_TABLE, SourcePriorityTable
from variantkeeper.core.distro import HostDistro, detect_host_distro
from variantkeeper.core.aggregator import aggregate, choices
from variantkeeper.core.selector import select_default
from variantkeeper.core.evaluator import assess_risk, evaluate
from variantkeeper.core.events import EventBus, Subscription
from variantkeeper.core.cache import VariantCache
from variantkeeper.core.interfaces import (
    ErrorSink,
    InstallStateSource,
    LoggingErrorSink,
    OperationExecutor,
    VariantSource,
)
from variantkeeper.core.tracker import InstallationTracker
from variantkeeper.core.view import PackageView

__all__ = [
    "SourcePriorityTable",
    "DEFAULT_PRIORITY_TABLE",
    "HostDistro",
    "detect_host_distro",
    "aggregate",
    "choices",
    "select_default",
    "evaluate",
    "assess_risk",
    "EventBus",
    "Subscription",
    "VariantCache",
    "VariantSource",
    "InstallStateSource",
    "OperationExecutor",
    "ErrorSink",
    "LoggingErrorSink",
    "InstallationTracker",
    "PackageView",
]
