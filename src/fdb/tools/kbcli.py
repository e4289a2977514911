"""Command builder for the kbcli orchestration plane."""

from __future__ import annotations

from pathlib import Path

from fdb.tools.runner import Runner, ToolResult, ToolRunner


class Kbcli:
    """Thin wrapper over ``kbcli cluster ...`` bound to one kubeconfig."""

    def __init__(self, path: Path | str, kubeconfig: Path | str, runner: Runner | None = None):
        self.path = Path(path)
        self.kubeconfig = Path(kubeconfig)
        self.runner = runner or ToolRunner()

    def _run(self, *args: str) -> ToolResult:
        return self.runner.run([str(self.path), "--kubeconfig", str(self.kubeconfig), *args])

    def create(
        self,
        definition: str,
        name: str,
        *,
        replicas: int,
        storage: str,
        cpu: str,
        memory: str,
    ) -> ToolResult:
        return self._run(
            "cluster",
            "create",
            definition,
            name,
            "--replicas",
            str(replicas),
            "--storage",
            storage,
            "--cpu",
            cpu,
            "--memory",
            memory,
        )

    def list(self, name: str | None = None) -> ToolResult:
        if name:
            return self._run("cluster", "list", name)
        return self._run("cluster", "list")

    def delete(self, name: str, auto_approve: bool = True) -> ToolResult:
        args = ["cluster", "delete", name]
        if auto_approve:
            args.append("--auto-approve")
        return self._run(*args)
