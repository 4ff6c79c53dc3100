"""cssreconcile CLI entry point: Click group with subcommands."""

import logging

import click

from cssreconcile import __version__


@click.group()
@click.version_option(version=__version__, prog_name="cssreconcile")
@click.option("-v", "--verbose", is_flag=True, help="Log progress details to stderr.")
def cli(verbose: bool) -> None:
    """cssreconcile - separate theme customizations from library CSS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from cssreconcile.cli.extract import extract  # noqa: E402
from cssreconcile.cli.validate import validate  # noqa: E402
from cssreconcile.cli.reference import bundle, library_reference  # noqa: E402

cli.add_command(extract)
cli.add_command(validate)
cli.add_command(bundle)
cli.add_command(library_reference)
