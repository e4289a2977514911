"""
Unified error handling for fdb CLI commands.

Every failure the workflow surfaces is an ``FdbError`` subclass. The CLI
entry point converts them to an exit code and a one-line diagnostic on
stderr.

Exit Codes:
- 0: Success
- 1: Any surfaced error
- 130: Interrupted (Ctrl-C)
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    INTERRUPTED = 130


class FdbError(Exception):
    """Base exception for fdb errors with exit code support."""

    exit_code: ExitCode = ExitCode.ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInputError(FdbError):
    """Raised for unknown kinds, bad quantities and other malformed input."""


class ConfigurationError(FdbError):
    """Raised when the config file or tool installation is unusable."""


class ExternalToolError(FdbError):
    """Raised when kbcli/kubectl cannot be run or exits non-zero."""

    def __init__(
        self,
        message: str,
        stderr: str = "",
        details: dict[str, Any] | None = None,
    ):
        stderr = stderr.strip()
        super().__init__(f"{message}: {stderr}" if stderr else message, details)
        self.stderr = stderr


class WaitTimeoutError(FdbError):
    """Raised when a cluster does not reach the expected state in time."""


class ResourceNotReadyError(FdbError):
    """Raised when a platform-assigned value never became observable."""


class DecodeError(FdbError):
    """Raised when a secret payload is not valid base64 or not text."""


class AbortedError(FdbError):
    """Raised when the user declines a confirmation or cancels a wait."""


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - FdbError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130
        - Other exceptions: Returns 1
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except FdbError as e:
                if log_errors:
                    logger.debug(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                report_error(e)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return ExitCode.INTERRUPTED
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.ERROR),
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                print(f"fdb: {e}", file=sys.stderr)
                return ExitCode.ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: FdbError) -> str:
    """Format an error as the single diagnostic line shown to users."""
    msg = " ".join(error.message.split())
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return f"fdb: {msg}"


def report_error(error: FdbError) -> None:
    """Print the one-line diagnostic for an error to stderr."""
    print(format_error_message(error), file=sys.stderr)
