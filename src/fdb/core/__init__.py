"""Core modules for fdb - centralized definitions and utilities."""

from fdb.core.catalog import (
    KIND_CONFIGS,
    KIND_NAMES,
    KindConfig,
    Sizing,
    WorkloadKind,
    connection_string,
    defaults,
    exposure_name,
    get_kind_config,
    parse_kind,
    secret_name,
)
from fdb.core.errors import (
    AbortedError,
    ConfigurationError,
    DecodeError,
    ExitCode,
    ExternalToolError,
    FdbError,
    InvalidInputError,
    ResourceNotReadyError,
    WaitTimeoutError,
    format_error_message,
    main_with_error_handling,
    report_error,
)
from fdb.core.quantity import normalize_quantity, validate_replicas

__all__ = [
    # Errors
    "ExitCode",
    "FdbError",
    "InvalidInputError",
    "ConfigurationError",
    "ExternalToolError",
    "WaitTimeoutError",
    "ResourceNotReadyError",
    "DecodeError",
    "AbortedError",
    "main_with_error_handling",
    "format_error_message",
    "report_error",
    # Catalog
    "WorkloadKind",
    "KindConfig",
    "Sizing",
    "KIND_CONFIGS",
    "KIND_NAMES",
    "parse_kind",
    "get_kind_config",
    "defaults",
    "secret_name",
    "exposure_name",
    "connection_string",
    # Quantities
    "normalize_quantity",
    "validate_replicas",
]
