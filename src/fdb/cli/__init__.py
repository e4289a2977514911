"""
CLI commands for fdb.
"""

from fdb.cli.create import create_command
from fdb.cli.delete import delete_command
from fdb.cli.forward import forward_command
from fdb.cli.kinds import kinds_command
from fdb.cli.list_clusters import list_command

__all__ = [
    "create_command",
    "delete_command",
    "forward_command",
    "kinds_command",
    "list_command",
]
