"""
Centralized workload kind definitions for fdb.

This module is the single source of truth for every supported managed
engine: its kbcli cluster definition name, default sizing, well-known port,
generated account secret and connection-string format.

Kinds:
- postgresql: relational database
- redis: key-value store
- rabbitmq: message broker
- qdrant: vector index (no authentication)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from fdb.core.errors import InvalidInputError


class WorkloadKind(StrEnum):
    """Supported workload kinds, valued by their kbcli cluster definition."""

    POSTGRESQL = "postgresql"
    REDIS = "redis"
    RABBITMQ = "rabbitmq"
    QDRANT = "qdrant"


@dataclass(frozen=True)
class Sizing:
    """Default resource request for a new cluster."""

    replicas: int
    storage: str
    cpu: str
    memory: str


@dataclass(frozen=True)
class KindConfig:
    """Configuration for a workload kind.

    Attributes:
        kind: The workload kind
        display_name: Human-readable engine name
        sizing: Default replicas/storage/cpu/memory
        port: Well-known service port inside the cluster
        port_name: Name of the port in generated Service manifests
        secret_template: Account secret name, formatted with ``cluster``
        principal: Default user for the connection descriptor
        has_credentials: Whether the engine generates a password secret
        scheme: URI scheme of the connection string
        aliases: Extra names accepted on the command line
    """

    kind: WorkloadKind
    display_name: str
    sizing: Sizing
    port: int
    port_name: str
    secret_template: str
    principal: str
    has_credentials: bool
    scheme: str
    aliases: tuple[str, ...] = ()


KIND_CONFIGS: dict[WorkloadKind, KindConfig] = {
    WorkloadKind.POSTGRESQL: KindConfig(
        kind=WorkloadKind.POSTGRESQL,
        display_name="PostgreSQL",
        sizing=Sizing(replicas=1, storage="2Gi", cpu="0.5", memory="0.8Gi"),
        port=5432,
        port_name="postgresql",
        secret_template="{cluster}-postgresql-account-postgres",
        principal="postgres",
        has_credentials=True,
        scheme="postgresql",
        aliases=("postgres", "pg"),
    ),
    WorkloadKind.REDIS: KindConfig(
        kind=WorkloadKind.REDIS,
        display_name="Redis",
        sizing=Sizing(replicas=1, storage="1Gi", cpu="0.5", memory="0.5Gi"),
        port=6379,
        port_name="redis",
        secret_template="{cluster}-redis-account-default",
        principal="default",
        has_credentials=True,
        scheme="redis",
    ),
    WorkloadKind.RABBITMQ: KindConfig(
        kind=WorkloadKind.RABBITMQ,
        display_name="RabbitMQ",
        sizing=Sizing(replicas=1, storage="2Gi", cpu="0.5", memory="1Gi"),
        port=5672,
        port_name="rabbitmq",
        secret_template="{cluster}-rabbitmq-account-root",
        principal="root",
        has_credentials=True,
        scheme="amqp",
        aliases=("rabbit",),
    ),
    WorkloadKind.QDRANT: KindConfig(
        kind=WorkloadKind.QDRANT,
        display_name="Qdrant",
        sizing=Sizing(replicas=1, storage="5Gi", cpu="0.5", memory="1Gi"),
        port=6333,
        port_name="qdrant",
        secret_template="{cluster}-qdrant-account-root",
        principal="root",
        has_credentials=False,
        scheme="http",
    ),
}

KIND_NAMES: tuple[str, ...] = tuple(kind.value for kind in WorkloadKind)

_KIND_ALIASES: dict[str, WorkloadKind] = {
    alias: config.kind for config in KIND_CONFIGS.values() for alias in config.aliases
}


def parse_kind(text: str) -> WorkloadKind:
    """Resolve a kind name or alias (case-insensitive).

    Raises:
        InvalidInputError: If the name matches no supported kind
    """
    name = text.strip().lower()
    if name in _KIND_ALIASES:
        return _KIND_ALIASES[name]
    try:
        return WorkloadKind(name)
    except ValueError:
        raise InvalidInputError(
            f"unknown service type: {text} (supported: {', '.join(KIND_NAMES)})"
        ) from None


def get_kind_config(kind: WorkloadKind | str) -> KindConfig:
    """Get configuration for a kind, accepting aliases."""
    if not isinstance(kind, WorkloadKind):
        kind = parse_kind(kind)
    return KIND_CONFIGS[kind]


def defaults(kind: WorkloadKind | str) -> tuple[int, str, str, str]:
    """Default (replicas, storage, cpu, memory) for a kind."""
    sizing = get_kind_config(kind).sizing
    return sizing.replicas, sizing.storage, sizing.cpu, sizing.memory


def secret_name(kind: WorkloadKind | str, cluster_name: str) -> str:
    """Name of the Kubernetes secret holding the kind's account password."""
    return get_kind_config(kind).secret_template.format(cluster=cluster_name)


def exposure_name(kind: WorkloadKind | str, cluster_name: str) -> str:
    """Name of the NodePort Service fdb creates for a cluster."""
    return f"{cluster_name}-{get_kind_config(kind).kind.value}-external"


def connection_string(
    kind: WorkloadKind | str,
    user: str,
    password: str | None,
    host: str,
    port: int,
) -> str:
    """Build the protocol-specific connection URI for display."""
    config = get_kind_config(kind)
    password = password or ""

    if config.kind is WorkloadKind.POSTGRESQL:
        return f"{config.scheme}://{user}:{password}@{host}:{port}/postgres"
    if config.kind is WorkloadKind.REDIS:
        if not password:
            return f"{config.scheme}://{host}:{port}"
        return f"{config.scheme}://:{password}@{host}:{port}"
    if config.kind is WorkloadKind.RABBITMQ:
        return f"{config.scheme}://{user}:{password}@{host}:{port}/"
    return f"{config.scheme}://{host}:{port}"
