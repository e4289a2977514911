"""Data types passed between the provisioning components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from fdb.core.catalog import WorkloadKind


class ClusterState(StrEnum):
    """Lifecycle states of a cluster as seen by fdb."""

    REQUESTED = "requested"
    CREATING = "creating"
    WAITING = "waiting"
    RUNNING = "running"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    UNKNOWN = "unknown"
    DELETING = "deleting"
    DELETED = "deleted"


@dataclass(frozen=True)
class ClusterSpec:
    """Fully merged request for a new cluster.

    Sizing values are kept as the user wrote them (``"2Gi"``) and normalized
    only when the create command is built.
    """

    kind: WorkloadKind
    name: str
    kubeconfig: Path
    replicas: int
    storage: str
    cpu: str
    memory: str


@dataclass(frozen=True)
class ClusterHandle:
    """Reference to an existing cluster. Status is always queried live."""

    name: str
    kubeconfig: Path


@dataclass(frozen=True)
class Credential:
    username: str
    password: str


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Connection details printed after a successful create."""

    kind: WorkloadKind
    user: str
    password: str | None = None
    host: str | None = None
    port: int | None = None
    connection_string: str | None = None

    @property
    def is_degraded(self) -> bool:
        """True when the endpoint is unknown and only credentials are available."""
        return self.host is None or self.port is None


@dataclass
class ClusterListing:
    """Verbatim listing output from the orchestration plane."""

    lines: list[str] = field(default_factory=list)

    @property
    def data_rows(self) -> list[str]:
        return [line for line in self.lines[1:] if line.strip()]

    @property
    def is_empty(self) -> bool:
        return not self.data_rows
