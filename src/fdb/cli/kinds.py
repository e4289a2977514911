"""Kinds command: show supported workload kinds and their defaults."""

from __future__ import annotations

from fdb.cli import ux
from fdb.core.catalog import KIND_CONFIGS
from fdb.core.errors import ExitCode


def kinds_command() -> int:
    rows = []
    for config in KIND_CONFIGS.values():
        sizing = config.sizing
        rows.append(
            [
                config.kind.value,
                ", ".join(config.aliases) or "-",
                str(config.port),
                f"{sizing.replicas} / {sizing.storage} / {sizing.cpu} / {sizing.memory}",
                config.principal if config.has_credentials else "(no auth)",
            ]
        )

    ux.print_table(
        "Supported kinds",
        ["Kind", "Aliases", "Port", "Defaults", "User"],
        rows,
    )
    return ExitCode.SUCCESS
