"""Output helpers for CLI commands.

user_output() is for messages meant for a person and goes to stderr. Tables
are data and go to stdout.
"""

from typing import Any

import click
from rich.console import Console
from rich.table import Table


def user_output(message: str = "", **kwargs: Any) -> None:
    click.echo(message, err=True, **kwargs)


def print_table(table: Table) -> None:
    """Render a rich table to stdout."""
    console = Console(width=200)
    console.print(table)
