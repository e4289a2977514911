"""
Cluster lifecycle against the kbcli orchestration plane.

Create:  requested -> creating -> waiting -> running | timed_out | failed
Delete:  running | unknown -> deleting -> deleted | failed

No status is cached: every query goes back to kbcli.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

import structlog

from fdb.cluster.status import RUNNING, StatusParser, TabularStatusParser
from fdb.config.loader import validate_cluster_name
from fdb.core.catalog import WorkloadKind, exposure_name
from fdb.core.errors import AbortedError, ExternalToolError, WaitTimeoutError
from fdb.core.quantity import normalize_quantity, validate_replicas
from fdb.models import ClusterHandle, ClusterListing, ClusterSpec, ClusterState
from fdb.tools.kbcli import Kbcli
from fdb.tools.kubectl import Kubectl

logger = structlog.get_logger()

POLL_INTERVAL_SECONDS = 3.0
TIMEOUT_SECONDS = 300.0

_CONFIRM_ANSWERS = frozenset({"y", "yes"})


def is_confirmed(answer: str | None) -> bool:
    """Only 'y' or 'yes' (any case, surrounding whitespace ignored) confirm."""
    return (answer or "").strip().lower() in _CONFIRM_ANSWERS


class ClusterLifecycle:
    """Drives create, wait, delete and list for clusters.

    Args:
        kbcli: Orchestration plane commands
        kubectl: Resource commands, used for exposure cleanup on delete
        status_parser: Extracts the status from ``kbcli cluster list <name>``
        clock: Monotonic clock in seconds
        sleep: Blocking sleep, used when no cancel event is given
    """

    def __init__(
        self,
        kbcli: Kbcli,
        kubectl: Kubectl,
        status_parser: StatusParser | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.kbcli = kbcli
        self.kubectl = kubectl
        self.status_parser = status_parser or TabularStatusParser()
        self._clock = clock
        self._sleep = sleep
        self.state = ClusterState.UNKNOWN

    def _transition(self, state: ClusterState, name: str) -> None:
        logger.debug("cluster_state", cluster=name, previous=str(self.state), state=str(state))
        self.state = state

    def create(self, spec: ClusterSpec) -> ClusterHandle:
        """Ask kbcli to create the cluster. Returns as soon as kbcli accepts it."""
        self._transition(ClusterState.REQUESTED, spec.name)
        replicas = validate_replicas(spec.replicas)
        storage = normalize_quantity(spec.storage)
        cpu = normalize_quantity(spec.cpu)
        memory = normalize_quantity(spec.memory)

        self._transition(ClusterState.CREATING, spec.name)
        result = self.kbcli.create(
            spec.kind.value,
            spec.name,
            replicas=replicas,
            storage=storage,
            cpu=cpu,
            memory=memory,
        )
        if not result.ok:
            self._transition(ClusterState.FAILED, spec.name)
            raise ExternalToolError("kbcli cluster create failed", result.stderr)

        logger.info("cluster_create_accepted", cluster=spec.name, kind=spec.kind.value)
        return ClusterHandle(name=spec.name, kubeconfig=spec.kubeconfig)

    def current_status(self, name: str) -> str | None:
        """Query the plane once and return the parsed status."""
        result = self.kbcli.list(name)
        if not result.ok:
            # The cluster may not be listed yet right after create
            logger.debug("cluster_status_unavailable", cluster=name, stderr=result.stderr.strip())
        return self.status_parser.parse(result.stdout)

    def wait_until_running(
        self,
        name: str,
        timeout: float = TIMEOUT_SECONDS,
        interval: float = POLL_INTERVAL_SECONDS,
        cancel: threading.Event | None = None,
    ) -> None:
        """Poll until the cluster reports Running.

        Raises:
            WaitTimeoutError: If the timeout elapses first
            ExternalToolError: If kbcli cannot be invoked
            AbortedError: If ``cancel`` is set while waiting
        """
        self._transition(ClusterState.WAITING, name)
        deadline = self._clock() + timeout
        polls = 0

        while self._clock() < deadline:
            polls += 1
            try:
                status = self.current_status(name)
            except ExternalToolError:
                self._transition(ClusterState.FAILED, name)
                raise
            logger.debug("cluster_poll", cluster=name, status=status, poll=polls)
            if status == RUNNING:
                self._transition(ClusterState.RUNNING, name)
                return

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            pause = min(interval, remaining)
            if cancel is not None:
                if cancel.wait(pause):
                    self._transition(ClusterState.FAILED, name)
                    raise AbortedError(f"wait for cluster {name} cancelled")
            else:
                self._sleep(pause)

        self._transition(ClusterState.TIMED_OUT, name)
        raise WaitTimeoutError(
            f"cluster {name} did not become Running within {timeout:g} seconds",
            details={"polls": polls},
        )

    def delete(
        self,
        name: str,
        auto_approve: bool = False,
        prompt: Callable[[str], str] | None = None,
    ) -> list[str]:
        """Delete a cluster and the exposure services fdb created for it.

        Without ``auto_approve`` the ``prompt`` callable is asked for a raw
        answer; anything but y/yes aborts before any command runs. An invalid
        name is rejected before prompting.

        Returns:
            Names of exposure services the cleanup step attempted to remove
        """
        validate_cluster_name(name)
        if not auto_approve:
            answer = prompt(f'Delete cluster "{name}"? [y/N]: ') if prompt else ""
            if not is_confirmed(answer):
                raise AbortedError("aborted")

        self._transition(ClusterState.DELETING, name)
        result = self.kbcli.delete(name, auto_approve=True)
        if not result.ok:
            self._transition(ClusterState.FAILED, name)
            raise ExternalToolError("kbcli cluster delete failed", result.stderr)

        removed = self._cleanup_exposures(name)
        self._transition(ClusterState.DELETED, name)
        return removed

    def _cleanup_exposures(self, name: str) -> list[str]:
        attempted = []
        for kind in WorkloadKind:
            service = exposure_name(kind, name)
            attempted.append(service)
            try:
                result = self.kubectl.delete("svc", service)
            except ExternalToolError as e:
                logger.debug("exposure_cleanup_failed", service=service, error=e.message)
                continue
            if not result.ok:
                logger.debug(
                    "exposure_cleanup_failed", service=service, stderr=result.stderr.strip()
                )
        return attempted

    def list(self) -> ClusterListing:
        """Pass ``kbcli cluster list`` output through verbatim."""
        result = self.kbcli.list()
        if not result.ok:
            raise ExternalToolError("kbcli cluster list failed", result.stderr)
        return ClusterListing(lines=result.stdout.splitlines())
