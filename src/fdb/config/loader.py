"""
Configuration file loading and merging.

Search order:
1. Explicit path (--config flag)
2. fdb.yaml (current directory)
3. $FDB_HOME/fdb.yaml (default ~/.fdb/fdb.yaml)
4. Built-in defaults

Example fdb.yaml::

    kubernetes:
      kubeconfig: ~/.kube/dev-cluster
    postgresql:
      replicas: 3
      storage: 10Gi
      memory: 2Gi
    redis:
      cpu: 1
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from fdb.core.catalog import WorkloadKind, defaults, parse_kind
from fdb.core.errors import ConfigurationError, InvalidInputError
from fdb.core.quantity import validate_replicas
from fdb.models import ClusterSpec

logger = structlog.get_logger()

CONFIG_FILENAME = "fdb.yaml"
DEFAULT_KUBECONFIG = "~/.kube/config"

# Cluster names become Kubernetes object names (RFC 1123 label)
_CLUSTER_NAME_RE = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")
MAX_CLUSTER_NAME_LENGTH = 63


@dataclass
class KindOverrides:
    """Per-kind sizing from the config file; None means keep the default."""

    replicas: int | None = None
    storage: str | None = None
    cpu: str | None = None
    memory: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KindOverrides:
        replicas = data.get("replicas")
        return cls(
            replicas=validate_replicas(replicas) if replicas is not None else None,
            storage=_as_quantity(data.get("storage")),
            cpu=_as_quantity(data.get("cpu")),
            memory=_as_quantity(data.get("memory")),
        )


@dataclass
class FdbConfig:
    """Parsed fdb.yaml."""

    kubeconfig: str | None = None
    kinds: dict[WorkloadKind, KindOverrides] = field(default_factory=dict)
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> FdbConfig:
        kubernetes = data.get("kubernetes") or {}
        if not isinstance(kubernetes, dict):
            raise ConfigurationError(f"{source or 'config'}: 'kubernetes' must be a mapping")
        kinds: dict[WorkloadKind, KindOverrides] = {}
        for key, section in data.items():
            if key == "kubernetes" or not isinstance(section, dict):
                continue
            try:
                kind = parse_kind(str(key))
            except InvalidInputError:
                logger.warning("unknown_config_section", section=key, path=str(source))
                continue
            kinds[kind] = KindOverrides.from_dict(section)
        return cls(kubeconfig=kubernetes.get("kubeconfig"), kinds=kinds, source=source)

    def overrides_for(self, kind: WorkloadKind) -> KindOverrides:
        return self.kinds.get(kind, KindOverrides())


def _as_quantity(value: Any) -> str | None:
    # YAML gives 2 and 0.8 as numbers; kbcli quantities are handled as strings
    if value is None:
        return None
    return str(value)


def get_config_path(explicit_path: str | Path | None = None, home: Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    Raises:
        ConfigurationError: If an explicit path was given but does not exist
    """
    if explicit_path:
        path = Path(explicit_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"config file not found: {path}")
        return path

    cwd_config = Path.cwd() / CONFIG_FILENAME
    if cwd_config.is_file():
        return cwd_config

    if home is not None:
        home_config = home / CONFIG_FILENAME
        if home_config.is_file():
            return home_config

    return None


def load_config(path: str | Path | None = None, home: Path | None = None) -> FdbConfig:
    """
    Load fdb.yaml, or defaults when no file is found.

    Raises:
        ConfigurationError: If the file exists but is not valid YAML
    """
    config_path = get_config_path(path, home)
    if config_path is None:
        return FdbConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")

    logger.debug("loaded_config", path=str(config_path))
    return FdbConfig.from_dict(data, source=config_path)


def resolve_kubeconfig(config: FdbConfig, override: str | Path | None = None) -> Path:
    """Kubeconfig path: CLI override, then config file, then ~/.kube/config."""
    if override:
        return Path(override).expanduser()
    return Path(config.kubeconfig or DEFAULT_KUBECONFIG).expanduser()


def validate_cluster_name(name: str) -> str:
    if len(name) > MAX_CLUSTER_NAME_LENGTH or not _CLUSTER_NAME_RE.match(name):
        raise InvalidInputError(
            f"invalid cluster name: {name!r} (lowercase letters, digits and '-', "
            f"starting with a letter, at most {MAX_CLUSTER_NAME_LENGTH} characters)"
        )
    return name


def build_cluster_spec(
    kind: WorkloadKind,
    name: str,
    config: FdbConfig,
    *,
    kubeconfig: str | Path | None = None,
    replicas: int | None = None,
    storage: str | None = None,
    cpu: str | None = None,
    memory: str | None = None,
) -> ClusterSpec:
    """Merge catalog defaults, config-file overrides and CLI overrides (later wins)."""
    base_replicas, base_storage, base_cpu, base_memory = defaults(kind)
    file_overrides = config.overrides_for(kind)

    def pick(cli: Any, from_file: Any, default: Any) -> Any:
        if cli is not None:
            return cli
        if from_file is not None:
            return from_file
        return default

    return ClusterSpec(
        kind=kind,
        name=validate_cluster_name(name),
        kubeconfig=resolve_kubeconfig(config, kubeconfig),
        replicas=validate_replicas(pick(replicas, file_overrides.replicas, base_replicas)),
        storage=pick(storage, file_overrides.storage, base_storage),
        cpu=pick(cpu, file_overrides.cpu, base_cpu),
        memory=pick(memory, file_overrides.memory, base_memory),
    )
