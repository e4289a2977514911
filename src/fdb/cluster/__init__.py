"""Cluster lifecycle against the orchestration plane."""

from fdb.cluster.lifecycle import (
    POLL_INTERVAL_SECONDS,
    TIMEOUT_SECONDS,
    ClusterLifecycle,
    is_confirmed,
)
from fdb.cluster.status import RUNNING, StatusParser, TabularStatusParser, parse_status

__all__ = [
    "ClusterLifecycle",
    "is_confirmed",
    "POLL_INTERVAL_SECONDS",
    "TIMEOUT_SECONDS",
    "RUNNING",
    "StatusParser",
    "TabularStatusParser",
    "parse_status",
]
