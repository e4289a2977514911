"""Wiring shared by the CLI commands: settings, config file, resolved tools."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fdb.config.loader import FdbConfig, load_config, resolve_kubeconfig
from fdb.config.settings import Settings, get_settings
from fdb.tools.kbcli import Kbcli
from fdb.tools.kubectl import Kubectl
from fdb.tools.resolve import resolve_tool


@dataclass
class CommandContext:
    settings: Settings
    config: FdbConfig
    kubeconfig: Path

    def kbcli(self) -> Kbcli:
        return Kbcli(resolve_tool("kbcli", self.settings.bin_dir), self.kubeconfig)

    def kubectl(self) -> Kubectl:
        return Kubectl(
            resolve_tool("kubectl", self.settings.bin_dir),
            self.kubeconfig,
            namespace=self.settings.namespace,
        )


def build_context(
    config_path: str | Path | None = None,
    kubeconfig: str | Path | None = None,
    settings: Settings | None = None,
) -> CommandContext:
    settings = settings or get_settings()
    config = load_config(config_path, home=settings.home_dir)
    return CommandContext(
        settings=settings,
        config=config,
        kubeconfig=resolve_kubeconfig(config, kubeconfig),
    )
