"""List command: passes the kbcli cluster table through unchanged."""

from __future__ import annotations

from fdb.cli import ux
from fdb.cli.context import build_context
from fdb.cluster.lifecycle import ClusterLifecycle
from fdb.core.errors import ExitCode, main_with_error_handling


@main_with_error_handling()
def list_command(
    *,
    config_path: str | None = None,
    kubeconfig: str | None = None,
) -> int:
    ctx = build_context(config_path, kubeconfig)
    lifecycle = ClusterLifecycle(ctx.kbcli(), ctx.kubectl())

    listing = lifecycle.list()
    if listing.is_empty:
        ux.line("No clusters found.")
        return ExitCode.SUCCESS

    for row in listing.lines:
        ux.line(row)
    return ExitCode.SUCCESS
