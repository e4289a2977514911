"""Command builder for kubectl resource operations."""

from __future__ import annotations

from pathlib import Path

from fdb.tools.runner import Runner, ToolResult, ToolRunner

DEFAULT_NAMESPACE = "default"


class Kubectl:
    """Thin wrapper over the kubectl verbs fdb needs, bound to one kubeconfig."""

    def __init__(
        self,
        path: Path | str,
        kubeconfig: Path | str,
        runner: Runner | None = None,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.path = Path(path)
        self.kubeconfig = Path(kubeconfig)
        self.runner = runner or ToolRunner()
        self.namespace = namespace

    def command(self, *args: str) -> list[str]:
        """Full argv for a kubectl invocation."""
        return [str(self.path), "--kubeconfig", str(self.kubeconfig), *args]

    def _run(self, *args: str, input: str | None = None) -> ToolResult:
        return self.runner.run(self.command(*args), input=input)

    def get_name(self, resource: str, name: str) -> ToolResult:
        """``kubectl get <resource> <name> -o name``: prints ``<resource>/<name>`` if it exists."""
        return self._run("get", resource, name, "-n", self.namespace, "-o", "name")

    def get_jsonpath(self, resource: str, name: str, jsonpath: str) -> ToolResult:
        return self._run(
            "get", resource, name, "-n", self.namespace, "-o", f"jsonpath={jsonpath}"
        )

    def apply(self, manifest: str) -> ToolResult:
        """Apply a declarative document passed on stdin."""
        return self._run("apply", "-f", "-", input=manifest)

    def delete(self, resource: str, name: str) -> ToolResult:
        return self._run(
            "delete", resource, name, "-n", self.namespace, "--ignore-not-found=true"
        )

    def server_url(self) -> ToolResult:
        """API server URL of the current context."""
        return self._run(
            "config", "view", "--minify", "-o", "jsonpath={.clusters[0].cluster.server}"
        )
