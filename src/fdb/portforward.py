"""
Background ``kubectl port-forward`` to reach a cluster from localhost.

The forward process outlives the call that starts it: the caller owns the
returned ``PortForward`` and must ``stop()`` it.
"""

from __future__ import annotations

import os
import re
import subprocess
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

import structlog

from fdb.core.catalog import WorkloadKind, get_kind_config
from fdb.core.errors import ExternalToolError, ResourceNotReadyError
from fdb.tools.kubectl import Kubectl

logger = structlog.get_logger()

BANNER_READS = 50
BANNER_READ_DELAY_SECONDS = 0.05
BANNER_MAX_BYTES = 512

# "Forwarding from 127.0.0.1:12345 -> 5432"
_FORWARDING_RE = re.compile(r"127\.0\.0\.1:(\d+)")


def parse_forwarding_port(output: str) -> int | None:
    """Local port from kubectl's startup banner."""
    match = _FORWARDING_RE.search(output)
    if match is None:
        return None
    port = int(match.group(1))
    return port if 0 < port <= 65535 else None


@dataclass
class PortForward:
    """A running port-forward child process."""

    process: subprocess.Popen
    service: str
    local_port: int
    remote_port: int
    _drain: threading.Thread | None = field(default=None, repr=False)

    def wait(self) -> int:
        return self.process.wait()

    def stop(self, timeout: float = 5.0) -> None:
        if self.process.poll() is not None:
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.process.kill()
            self.process.wait()


def _drain_output(process: subprocess.Popen, service: str) -> None:
    # kubectl keeps logging per connection; an unread pipe would eventually block it
    for line in process.stdout:
        logger.debug(
            "port_forward_output", service=service, line=line.decode("utf-8", errors="replace").rstrip()
        )


def start_port_forward(
    kubectl: Kubectl,
    kind: WorkloadKind | str,
    cluster_name: str,
    *,
    reads: int = BANNER_READS,
    read_delay: float = BANNER_READ_DELAY_SECONDS,
    max_bytes: int = BANNER_MAX_BYTES,
    sleep: Callable[[float], None] = time.sleep,
) -> PortForward:
    """Start forwarding a random local port to the cluster's service port.

    Raises:
        ExternalToolError: If kubectl cannot be started
        ResourceNotReadyError: If no local port shows up in the banner
    """
    config = get_kind_config(kind)
    service = f"{cluster_name}-{config.kind.value}"
    argv = kubectl.command("port-forward", f"svc/{service}", f":{config.port}", "-n", kubectl.namespace)

    logger.debug("port_forward_start", args=argv)
    try:
        process = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        raise ExternalToolError(f"kubectl port-forward failed: {e}") from e

    fd = process.stdout.fileno()
    os.set_blocking(fd, False)
    banner = b""
    for _ in range(reads):
        sleep(read_delay)
        try:
            chunk = os.read(fd, 256)
        except BlockingIOError:
            continue
        if not chunk:
            if process.poll() is not None:
                break
            continue
        banner += chunk
        port = parse_forwarding_port(banner.decode("utf-8", errors="replace"))
        if port is not None:
            os.set_blocking(fd, True)
            forward = PortForward(
                process=process, service=service, local_port=port, remote_port=config.port
            )
            forward._drain = threading.Thread(
                target=_drain_output,
                args=(process, service),
                name=f"port-forward-{service}",
                daemon=True,
            )
            forward._drain.start()
            logger.info("port_forward_ready", service=service, local_port=port)
            return forward
        if len(banner) > max_bytes:
            break

    process.kill()
    process.wait()
    output = banner.decode("utf-8", errors="replace").strip()
    raise ResourceNotReadyError(
        "could not determine local port from kubectl port-forward output"
        + (f": {output}" if output else "")
    )
