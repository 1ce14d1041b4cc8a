"""Error boundary handling for CLI commands.

This module provides decorators to catch well-known exceptions at CLI entry points
and display clean error messages without stack traces.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any

import click

from dec.errors import DecError

logger = logging.getLogger(__name__)


def cli_error_boundary[T: Callable[..., Any]](func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - DecError: Not found, checksum, network, platform and batch failures
        - FileExistsError: File/directory conflicts
        - FileNotFoundError: Missing files/directories
        - ValueError: Invalid input or configuration
        - PermissionError: Permission denied errors

    All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @cli_error_boundary
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (DecError, FileExistsError, FileNotFoundError, ValueError, PermissionError) as e:
            logger.debug("Command failed", exc_info=True)
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
