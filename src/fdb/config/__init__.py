"""
fdb configuration.

Environment settings (FDB_*) plus the optional fdb.yaml file with
per-kind sizing overrides.
"""

from fdb.config.loader import (
    CONFIG_FILENAME,
    DEFAULT_KUBECONFIG,
    FdbConfig,
    KindOverrides,
    build_cluster_spec,
    get_config_path,
    load_config,
    resolve_kubeconfig,
    validate_cluster_name,
)
from fdb.config.settings import Settings, get_settings

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_KUBECONFIG",
    "FdbConfig",
    "KindOverrides",
    "build_cluster_spec",
    "get_config_path",
    "load_config",
    "resolve_kubeconfig",
    "validate_cluster_name",
    "Settings",
    "get_settings",
]
