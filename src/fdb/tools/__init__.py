"""External CLI integration: tool resolution, subprocess runner and command builders."""

from fdb.tools.kbcli import Kbcli
from fdb.tools.kubectl import DEFAULT_NAMESPACE, Kubectl
from fdb.tools.resolve import find_tool, resolve_tool
from fdb.tools.runner import Runner, ToolResult, ToolRunner

__all__ = [
    "Kbcli",
    "Kubectl",
    "DEFAULT_NAMESPACE",
    "find_tool",
    "resolve_tool",
    "Runner",
    "ToolResult",
    "ToolRunner",
]
