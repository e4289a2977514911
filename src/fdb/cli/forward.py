"""
Forward command.

Opens a local port to a cluster through ``kubectl port-forward`` and keeps
it open until interrupted.
"""

from __future__ import annotations

from fdb.cli import ux
from fdb.cli.context import build_context
from fdb.core.catalog import parse_kind
from fdb.core.errors import ExitCode, ExternalToolError, main_with_error_handling
from fdb.portforward import start_port_forward


@main_with_error_handling()
def forward_command(
    kind: str,
    name: str,
    *,
    config_path: str | None = None,
    kubeconfig: str | None = None,
) -> int:
    workload = parse_kind(kind)
    ctx = build_context(config_path, kubeconfig)

    forward = start_port_forward(ctx.kubectl(), workload, name)
    ux.success(
        f"Forwarding 127.0.0.1:{forward.local_port} -> svc/{forward.service}:{forward.remote_port}"
    )
    ux.info("Press Ctrl-C to stop.")

    try:
        returncode = forward.wait()
    except KeyboardInterrupt:
        ux.info("Stopped.")
        return ExitCode.SUCCESS
    finally:
        forward.stop()

    if returncode != 0:
        raise ExternalToolError(f"kubectl port-forward exited with status {returncode}")
    return ExitCode.SUCCESS
