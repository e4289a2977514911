"""Delete command."""

from __future__ import annotations

from fdb.cli import ux
from fdb.cli.context import build_context
from fdb.cluster.lifecycle import ClusterLifecycle
from fdb.core.errors import ExitCode, main_with_error_handling


@main_with_error_handling()
def delete_command(
    name: str,
    *,
    yes: bool = False,
    config_path: str | None = None,
    kubeconfig: str | None = None,
) -> int:
    """Delete a cluster, asking for confirmation unless ``yes`` is set."""
    ctx = build_context(config_path, kubeconfig)
    lifecycle = ClusterLifecycle(ctx.kbcli(), ctx.kubectl())

    lifecycle.delete(name, auto_approve=yes, prompt=ux.prompt)
    ux.success(f'Cluster "{name}" deleted.')
    return ExitCode.SUCCESS
