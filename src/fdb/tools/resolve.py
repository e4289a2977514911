"""
Locate the kbcli and kubectl binaries.

Search order:
1. PATH
2. $FDB_HOME/bin (default ~/.fdb/bin)
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import structlog

from fdb.core.errors import ConfigurationError

logger = structlog.get_logger()

INSTALL_HINTS: dict[str, str] = {
    "kubectl": "https://kubernetes.io/docs/tasks/tools/",
    "kbcli": "https://github.com/apecloud/kbcli/releases",
}


def find_tool(name: str, bin_dir: Path | None = None) -> Path | None:
    """Return the path of an executable, or None when it is not installed."""
    found = shutil.which(name)
    if found:
        return Path(found)
    if bin_dir is not None:
        candidate = bin_dir / name
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    return None


def resolve_tool(name: str, bin_dir: Path | None = None) -> Path:
    """Return the path of a required executable.

    Raises:
        ConfigurationError: If it is neither on PATH nor in bin_dir
    """
    path = find_tool(name, bin_dir)
    if path is None:
        where = f"PATH or {bin_dir}" if bin_dir is not None else "PATH"
        hint = INSTALL_HINTS.get(name)
        message = f"{name} not found in {where}"
        if hint:
            message = f"{message}. Install it from {hint}"
        raise ConfigurationError(message)
    logger.debug("tool_resolved", tool=name, path=str(path))
    return path
