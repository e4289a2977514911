"""
Status extraction from ``kbcli cluster list`` output.

kbcli prints a human-oriented table with no guaranteed schema, e.g.::

    NAME   NAMESPACE   CLUSTER-DEFINITION   TERMINATION-POLICY   STATUS    CREATED-TIME
    pg1    default     postgresql           Delete               Running   Jan 01,2026 10:00 UTC

The lifecycle depends only on the ``StatusParser`` protocol so a structured
output mode can replace the positional parser without touching it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

RUNNING = "Running"


@runtime_checkable
class StatusParser(Protocol):
    """Extracts a cluster status from listing output."""

    def parse(self, stdout: str) -> str | None:
        """Return the status, or None when the output holds no data row."""
        ...


class TabularStatusParser:
    """Positional parser: whitespace-separated field of a fixed data row.

    Defaults to the STATUS column (5th field) of the first data row
    (line 2, line 1 being the header).
    """

    def __init__(self, column: int = 4, row: int = 1):
        self.column = column
        self.row = row

    def parse(self, stdout: str) -> str | None:
        lines = stdout.splitlines()
        if len(lines) <= self.row:
            return None
        fields = lines[self.row].split()
        if len(fields) <= self.column:
            return None
        return fields[self.column]


def parse_status(stdout: str) -> str | None:
    """Parse STATUS with the default tabular layout."""
    return TabularStatusParser().parse(stdout)
