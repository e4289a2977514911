"""
Create workflow: one ``create`` intent to a usable connection descriptor.

Steps: create -> wait until Running -> credentials -> host + exposure ->
assemble. The first failure halts the workflow, except that host and
exposure failures become warnings and yield a credentials-only descriptor.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from fdb.cluster.lifecycle import POLL_INTERVAL_SECONDS, TIMEOUT_SECONDS, ClusterLifecycle
from fdb.connection import ConnectionAssembler
from fdb.core.catalog import get_kind_config
from fdb.core.errors import FdbError
from fdb.credentials import CredentialResolver
from fdb.exposure import ExposureManager
from fdb.logging import bind_context
from fdb.models import ClusterSpec, ConnectionDescriptor


@dataclass
class ProvisionResult:
    """Outcome of a successful create workflow."""

    spec: ClusterSpec
    descriptor: ConnectionDescriptor
    warnings: list[str] = field(default_factory=list)


class ProvisionWorkflow:
    """Runs the create workflow over the injected components."""

    def __init__(
        self,
        lifecycle: ClusterLifecycle,
        credentials: CredentialResolver,
        exposure: ExposureManager,
        assembler: ConnectionAssembler | None = None,
        timeout: float = TIMEOUT_SECONDS,
        interval: float = POLL_INTERVAL_SECONDS,
    ):
        self.lifecycle = lifecycle
        self.credentials = credentials
        self.exposure = exposure
        self.assembler = assembler or ConnectionAssembler()
        self.timeout = timeout
        self.interval = interval

    def run(
        self,
        spec: ClusterSpec,
        cancel: threading.Event | None = None,
    ) -> ProvisionResult:
        log = bind_context(cluster=spec.name, kind=spec.kind.value)
        warnings: list[str] = []

        self.lifecycle.create(spec)
        self.lifecycle.wait_until_running(
            spec.name, timeout=self.timeout, interval=self.interval, cancel=cancel
        )
        log.info("cluster_running")

        credential = self.credentials.resolve(spec.kind, spec.name)
        user = credential.username if credential else get_kind_config(spec.kind).principal

        host: str | None = None
        port: int | None = None
        try:
            host = self.exposure.resolve_host()
        except FdbError as e:
            warnings.append(f"could not get server host from kubeconfig: {e.message}")
            log.info("host_unavailable", error=e.message)

        # The exposure service is still created when the host is unknown
        try:
            port = self.exposure.ensure_external_endpoint(spec.kind, spec.name)
        except FdbError as e:
            warnings.append(f"could not expose NodePort: {e.message}")
            log.info("exposure_unavailable", error=e.message)

        descriptor = self.assembler.assemble(spec.kind, user, credential, host, port)
        return ProvisionResult(spec=spec, descriptor=descriptor, warnings=warnings)
