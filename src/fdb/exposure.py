"""
External exposure of a running cluster.

KubeBlocks reverts patches to the Services it owns, so fdb creates its own
NodePort Service ``{cluster}-{kind}-external`` selecting the primary
replica. The name is deterministic, which lets ``delete`` find it again
without any local bookkeeping. Single writer per cluster name is assumed.

The nodePort is allocated asynchronously by the platform, and which
jsonpath query surfaces it is not stable across kubectl versions, so
discovery tries several query shapes over a few short-spaced attempts.
"""

from __future__ import annotations

import time
from typing import Any, Callable
from urllib.parse import urlsplit

import structlog
import yaml
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from fdb.core.catalog import KindConfig, WorkloadKind, exposure_name, get_kind_config
from fdb.core.errors import ConfigurationError, ExternalToolError, ResourceNotReadyError
from fdb.tools.kubectl import Kubectl

logger = structlog.get_logger()

DISCOVERY_ATTEMPTS = 3
DISCOVERY_DELAY_SECONDS = 0.5

MAX_PORT = 65535


class _PortNotAssigned(Exception):
    """No query shape returned a usable nodePort on this attempt."""


def port_queries(target_port: int) -> list[str]:
    """jsonpath shapes tried in order: exact target port, all ports, first port."""
    return [
        f"{{.spec.ports[?(@.port=={target_port})].nodePort}}",
        "{.spec.ports[*].nodePort}",
        "{.spec.ports[0].nodePort}",
    ]


def parse_port(output: str) -> int | None:
    """First whitespace token that is a valid non-zero port number."""
    for token in output.split():
        if not (token.isascii() and token.isdigit()):
            continue
        port = int(token)
        if 0 < port <= MAX_PORT:
            return port
    return None


def build_service_manifest(config: KindConfig, cluster_name: str, namespace: str) -> dict[str, Any]:
    """NodePort Service selecting the cluster's primary replica."""
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": exposure_name(config.kind, cluster_name),
            "namespace": namespace,
        },
        "spec": {
            "type": "NodePort",
            "selector": {
                "app.kubernetes.io/instance": cluster_name,
                "apps.kubeblocks.io/component-name": config.kind.value,
                "kubeblocks.io/role": "primary",
            },
            "ports": [
                {
                    "port": config.port,
                    "targetPort": config.port,
                    "protocol": "TCP",
                    "name": config.port_name,
                }
            ],
        },
    }


def parse_server_host(url: str) -> str | None:
    """Host part of an http(s) API server URL, bracketed if IPv6."""
    parts = urlsplit(url.strip())
    if parts.scheme not in ("http", "https"):
        return None
    try:
        host = parts.hostname
    except ValueError:
        return None
    if not host:
        return None
    if ":" in host:
        return f"[{host}]"
    return host


class ExposureManager:
    """Ensures a stable external endpoint for a running cluster."""

    def __init__(
        self,
        kubectl: Kubectl,
        attempts: int = DISCOVERY_ATTEMPTS,
        delay: float = DISCOVERY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.kubectl = kubectl
        self.attempts = attempts
        self.delay = delay
        self._sleep = sleep

    def exists(self, service: str) -> bool:
        result = self.kubectl.get_name("svc", service)
        return result.ok and "service/" in result.stdout

    def ensure_external_endpoint(self, kind: WorkloadKind | str, cluster_name: str) -> int:
        """Create the exposure Service if missing and return its nodePort.

        Raises:
            ExternalToolError: If the Service cannot be applied
            ResourceNotReadyError: If no nodePort becomes visible in time
        """
        config = get_kind_config(kind)
        service = exposure_name(config.kind, cluster_name)

        if self.exists(service):
            logger.debug("exposure_exists", service=service)
        else:
            manifest = build_service_manifest(config, cluster_name, self.kubectl.namespace)
            result = self.kubectl.apply(yaml.safe_dump(manifest, sort_keys=False))
            if not result.ok:
                raise ExternalToolError("kubectl apply -f - failed", result.stderr)
            logger.info("exposure_created", service=service, port=config.port)

        return self.discover_port(service, config.port)

    def discover_port(self, service: str, target_port: int) -> int:
        """Read the nodePort, retrying while the platform has not assigned it."""
        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(_PortNotAssigned),
            sleep=self._sleep,
        )
        try:
            port = retrying(self._query_port, service, target_port)
        except RetryError:
            raise ResourceNotReadyError(
                f"nodePort not assigned for service {service}. Run: "
                + " ".join(
                    ["kubectl", "get", "svc", service, "-n", self.kubectl.namespace, "-o", "yaml"]
                )
            ) from None
        logger.debug("exposure_port", service=service, node_port=port)
        return port

    def _query_port(self, service: str, target_port: int) -> int:
        for query in port_queries(target_port):
            result = self.kubectl.get_jsonpath("svc", service, query)
            if not result.ok:
                continue
            port = parse_port(result.stdout)
            if port is not None:
                return port
        raise _PortNotAssigned(service)

    def resolve_host(self) -> str:
        """Host of the current context's API server, used as the NodePort host.

        Raises:
            ExternalToolError: If kubectl config view fails
            ConfigurationError: If the server URL cannot be parsed
        """
        result = self.kubectl.server_url()
        if not result.ok:
            raise ExternalToolError("kubectl config view failed", result.stderr)
        url = result.stdout.strip()
        host = parse_server_host(url)
        if host is None:
            raise ConfigurationError(f"could not parse server URL: {url}")
        return host
