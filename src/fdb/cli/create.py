"""
Create command.

Creates the cluster through kbcli, waits for it to be Running, then prints
the connection details.
"""

from __future__ import annotations

from datetime import datetime

from fdb.cli import ux
from fdb.cli.context import build_context
from fdb.cluster.lifecycle import TIMEOUT_SECONDS, ClusterLifecycle
from fdb.config.loader import build_cluster_spec
from fdb.core.catalog import parse_kind
from fdb.core.errors import ExitCode, main_with_error_handling
from fdb.core.quantity import normalize_quantity
from fdb.credentials import CredentialResolver
from fdb.exposure import ExposureManager
from fdb.models import ClusterSpec
from fdb.orchestration.provision import ProvisionResult, ProvisionWorkflow


@main_with_error_handling()
def create_command(
    kind: str,
    name: str,
    *,
    config_path: str | None = None,
    kubeconfig: str | None = None,
    replicas: int | None = None,
    storage: str | None = None,
    cpu: str | None = None,
    memory: str | None = None,
    timeout: float = TIMEOUT_SECONDS,
) -> int:
    workload = parse_kind(kind)
    ctx = build_context(config_path, kubeconfig)
    spec = build_cluster_spec(
        workload,
        name,
        ctx.config,
        kubeconfig=ctx.kubeconfig,
        replicas=replicas,
        storage=storage,
        cpu=cpu,
        memory=memory,
    )

    kbcli = ctx.kbcli()
    kubectl = ctx.kubectl()
    workflow = ProvisionWorkflow(
        lifecycle=ClusterLifecycle(kbcli, kubectl),
        credentials=CredentialResolver(kubectl),
        exposure=ExposureManager(kubectl),
        timeout=timeout,
    )

    _print_plan(spec)
    with ux.spinner("Waiting for cluster to be Running..."):
        result = workflow.run(spec)

    for message in result.warnings:
        ux.warning(message)
    print_connection_details(result)
    return ExitCode.SUCCESS


def _print_plan(spec: ClusterSpec) -> None:
    ux.line(
        f'Creating {spec.kind.value} cluster "{spec.name}" '
        f"(replicas={spec.replicas}, storage={normalize_quantity(spec.storage)} Gi, "
        f"cpu={normalize_quantity(spec.cpu)}, memory={normalize_quantity(spec.memory)} Gi)"
    )
    ux.line(f"  kubeconfig: {spec.kubeconfig}")
    ux.line(f"  started: {datetime.now():%Y-%m-%d %H:%M:%S}")
    ux.line()


def print_connection_details(result: ProvisionResult) -> None:
    descriptor = result.descriptor
    ux.line()
    ux.success(f'Cluster "{result.spec.name}" is running.')
    ux.line()

    details: dict[str, str] = {}
    if not descriptor.is_degraded:
        details["Host"] = str(descriptor.host)
        details["Port"] = str(descriptor.port)
    details["User"] = descriptor.user
    if descriptor.password is not None:
        details["Password"] = descriptor.password
    if descriptor.connection_string:
        details["Connection string"] = descriptor.connection_string

    ux.print_key_value(details, title="Connection details:")
    if descriptor.is_degraded:
        ux.line("  (Host/Port: enable NodePort or check kubeconfig)")
