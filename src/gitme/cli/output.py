"""Output helpers separating user-facing messages from machine-readable output."""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Progress and status messages for humans; written to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Results meant to be piped or parsed; written to stdout."""
    click.echo(message, nl=nl)
