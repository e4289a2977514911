"""
CLI UX utilities built on rich.

Environment handling:
- Automatically detects TTY vs pipe/CI
- Respects NO_COLOR and FORCE_COLOR environment variables
- Warnings and errors go to stderr, results to stdout
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.theme import Theme

# Nord color palette (https://www.nordtheme.com/)
FDB_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "highlight": "#B48EAD",
        "muted": "#D8DEE9",
    }
)


def _is_interactive() -> bool:
    """Check if we're in an interactive terminal environment."""
    ci_vars = ["CI", "GITHUB_ACTIONS", "JENKINS_URL", "GITLAB_CI", "CIRCLECI", "TRAVIS"]
    if any(os.environ.get(var) for var in ci_vars):
        return False
    return sys.stdout.isatty()


console = Console(
    theme=FDB_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
    highlight=False,
)

err_console = Console(
    theme=FDB_THEME,
    stderr=True,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
    highlight=False,
)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner while work is in progress (interactive terminals only)."""
    if not _is_interactive():
        console.print(escape(message))
        yield
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description=escape(message), total=None)
        yield


def line(text: str = "") -> None:
    """Print plain text verbatim (no markup)."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def success(message: str) -> None:
    console.print(f"[success]✓ {escape(message)}[/success]")


def warning(message: str) -> None:
    err_console.print(f"[warning]warning: {escape(message)}[/warning]", soft_wrap=True)


def info(message: str) -> None:
    console.print(f"[info]{escape(message)}[/info]")


def print_key_value(items: dict[str, str], title: str | None = None) -> None:
    """Print aligned key-value pairs."""
    if title:
        console.print(f"[bold]{escape(title)}[/bold]")

    width = max((len(key) for key in items), default=0) + 1
    for key, value in items.items():
        label = f"{key}:".ljust(width)
        console.print(f"  [cyan]{escape(label)}[/cyan] {escape(value)}", soft_wrap=True)


def print_table(
    title: str | None,
    columns: list[str],
    rows: list[list[str]],
    show_header: bool = True,
) -> None:
    """Print a formatted table."""
    table = Table(title=title, show_header=show_header)

    for col in columns:
        table.add_column(col)

    for row in rows:
        table.add_row(*row)

    console.print(table)


def prompt(message: str) -> str:
    """Read one line of user input; EOF counts as an empty answer."""
    try:
        return console.input(escape(message))
    except EOFError:
        return ""
