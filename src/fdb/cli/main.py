"""
fdb - quick database cluster deployment via kbcli/kubectl.

Usage:
    fdb create <postgresql|redis|rabbitmq|qdrant> <name> [options]
    fdb delete <name> [-y|--yes] [--kubeconfig PATH]
    fdb list [--kubeconfig PATH]
    fdb forward <kind> <name> [--kubeconfig PATH]
    fdb kinds
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from fdb import __version__
from fdb.config.settings import get_settings
from fdb.core.catalog import KIND_NAMES
from fdb.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fdb", description="Quick database cluster deployment via kbcli/kubectl"
    )
    parser.add_argument("--version", action="version", version=f"fdb {__version__}")
    parser.add_argument("--config", dest="config_path", help="Path to fdb.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    kubeconfig_parent = argparse.ArgumentParser(add_help=False)
    kubeconfig_parent.add_argument("--kubeconfig", help="Path to kubeconfig (default ~/.kube/config)")

    create_parser = subparsers.add_parser(
        "create", parents=[kubeconfig_parent], help="Create a cluster and print connection details"
    )
    create_parser.add_argument("kind", help=f"Workload kind ({', '.join(KIND_NAMES)})")
    create_parser.add_argument("name", help="Cluster name")
    create_parser.add_argument("--replicas", type=int, help="Number of replicas")
    create_parser.add_argument("--storage", help="Storage size, e.g. 2Gi")
    create_parser.add_argument("--cpu", help="CPU cores, e.g. 0.5")
    create_parser.add_argument("--memory", help="Memory size, e.g. 1Gi")
    create_parser.add_argument(
        "--timeout", type=float, default=300.0, help="Seconds to wait for Running (default 300)"
    )

    delete_parser = subparsers.add_parser(
        "delete", parents=[kubeconfig_parent], help="Delete a cluster and its exposure services"
    )
    delete_parser.add_argument("name", help="Cluster name")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    subparsers.add_parser("list", parents=[kubeconfig_parent], help="List clusters")

    forward_parser = subparsers.add_parser(
        "forward", parents=[kubeconfig_parent], help="Forward a local port to a cluster"
    )
    forward_parser.add_argument("kind", help=f"Workload kind ({', '.join(KIND_NAMES)})")
    forward_parser.add_argument("name", help="Cluster name")

    subparsers.add_parser("kinds", help="List supported workload kinds")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    level = logging.DEBUG if args.verbose else settings.log_level
    configure_logging(level, settings.log_format)

    if args.command == "create":
        from fdb.cli.create import create_command

        sys.exit(
            create_command(
                args.kind,
                args.name,
                config_path=args.config_path,
                kubeconfig=args.kubeconfig,
                replicas=args.replicas,
                storage=args.storage,
                cpu=args.cpu,
                memory=args.memory,
                timeout=args.timeout,
            )
        )

    if args.command == "delete":
        from fdb.cli.delete import delete_command

        sys.exit(
            delete_command(
                args.name,
                yes=args.yes,
                config_path=args.config_path,
                kubeconfig=args.kubeconfig,
            )
        )

    if args.command == "list":
        from fdb.cli.list_clusters import list_command

        sys.exit(list_command(config_path=args.config_path, kubeconfig=args.kubeconfig))

    if args.command == "forward":
        from fdb.cli.forward import forward_command

        sys.exit(
            forward_command(
                args.kind,
                args.name,
                config_path=args.config_path,
                kubeconfig=args.kubeconfig,
            )
        )

    if args.command == "kinds":
        from fdb.cli.kinds import kinds_command

        sys.exit(kinds_command())

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
