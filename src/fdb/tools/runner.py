"""
Blocking subprocess invocation for the external CLIs.

All interaction with kbcli and kubectl goes through ``ToolRunner.run`` so
the rest of fdb can be tested with a fake runner.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

import structlog

from fdb.core.errors import ExternalToolError

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class ToolResult:
    """Captured result of one CLI invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def run(self, args: Sequence[str], input: str | None = None) -> ToolResult: ...


class ToolRunner:
    """Run a command to completion and capture its output.

    A non-zero exit is returned, not raised; callers decide whether it is
    fatal. Failing to start the process at all raises ``ExternalToolError``.
    """

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT_SECONDS):
        self.timeout = timeout

    def run(self, args: Sequence[str], input: str | None = None) -> ToolResult:
        argv = tuple(str(a) for a in args)
        logger.debug("tool_invoke", args=list(argv), stdin=input is not None)
        try:
            proc = subprocess.run(
                argv,
                input=input,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise ExternalToolError(
                f"{_tool_name(argv)} timed out after {self.timeout:g} seconds"
            ) from None
        except OSError as e:
            raise ExternalToolError(f"{_tool_name(argv)} failed: {e}") from e

        logger.debug("tool_exit", tool=_tool_name(argv), returncode=proc.returncode)
        return ToolResult(
            args=argv,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )


def _tool_name(argv: Sequence[str]) -> str:
    if not argv:
        return "command"
    return argv[0].replace("\\", "/").rsplit("/", 1)[-1]
