"""Root test configuration."""

from __future__ import annotations

import logging
from typing import Sequence

import pytest
import structlog

from fdb.tools.kbcli import Kbcli
from fdb.tools.kubectl import Kubectl
from fdb.tools.runner import ToolResult


def _configure_quiet_structlog():
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    _configure_quiet_structlog()


class FakeRunner:
    """Scripted stand-in for ToolRunner.

    Each rule matches when its fragment appears as a contiguous run of argv
    items. A rule holds a queue of responses; the last one repeats.
    Unmatched invocations succeed with empty output.
    """

    def __init__(self):
        self.calls: list[tuple[tuple[str, ...], str | None]] = []
        self._rules: list[tuple[tuple[str, ...], list[tuple[int, str, str]]]] = []

    def on(self, *fragment: str, returncode: int = 0, stdout: str = "", stderr: str = ""):
        return self.sequence(fragment, [(returncode, stdout, stderr)])

    def sequence(self, fragment: Sequence[str], responses: list[tuple[int, str, str]]):
        self._rules.append((tuple(fragment), list(responses)))
        return self

    def run(self, args, input=None):
        argv = tuple(str(a) for a in args)
        self.calls.append((argv, input))
        for fragment, queue in self._rules:
            if _contains(argv, fragment):
                returncode, stdout, stderr = queue[0] if len(queue) == 1 else queue.pop(0)
                return ToolResult(args=argv, returncode=returncode, stdout=stdout, stderr=stderr)
        return ToolResult(args=argv, returncode=0)

    def calls_matching(self, *fragment: str) -> list[tuple[str, ...]]:
        return [argv for argv, _ in self.calls if _contains(argv, fragment)]


def _contains(argv: tuple[str, ...], fragment: tuple[str, ...]) -> bool:
    if not fragment:
        return True
    size = len(fragment)
    return any(argv[i : i + size] == fragment for i in range(len(argv) - size + 1))


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kbcli(runner):
    return Kbcli("/usr/local/bin/kbcli", "/home/dev/.kube/config", runner=runner)


@pytest.fixture
def kubectl(runner):
    return Kubectl("/usr/local/bin/kubectl", "/home/dev/.kube/config", runner=runner)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep tests away from the developer's ~/.fdb and FDB_* environment."""
    from fdb.config.settings import get_settings

    for var in ("FDB_HOME", "FDB_NAMESPACE", "FDB_LOG_LEVEL", "FDB_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("FDB_HOME", str(tmp_path / "fdb-home"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cli_logging(capsys):
    """Route logs the way ``fdb`` does at its default WARNING level, into capsys."""
    from fdb.logging import configure_logging

    configure_logging("WARNING")
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    _configure_quiet_structlog()
