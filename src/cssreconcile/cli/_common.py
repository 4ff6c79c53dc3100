"""Error reporting shared by the subcommands."""

from __future__ import annotations

import sys

import click

from cssreconcile.errors import MissingInputError
from cssreconcile.stylesheet import ParseError


def fail_missing(exc: MissingInputError) -> None:
    click.echo("ERROR: Missing required files:", err=True)
    for item in exc.missing:
        click.echo(f"  - {item}", err=True)
    if exc.hint:
        click.echo("", err=True)
        click.echo(exc.hint, err=True)
    sys.exit(1)


def fail_parse(exc: ParseError) -> None:
    location = f" ({exc.location})" if exc.location else ""
    click.echo(f"Parse error{location}: {exc}", err=True)
    sys.exit(1)
