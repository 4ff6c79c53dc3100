"""CLI commands that prepare reference stylesheets: bundle, library-reference."""

from __future__ import annotations

import click

from cssreconcile.cli._common import fail_missing, fail_parse
from cssreconcile.config import BundleConfig, LibraryReferenceConfig
from cssreconcile.errors import MissingInputError
from cssreconcile.pipeline import run_bundle, run_library_reference
from cssreconcile.report import format_size
from cssreconcile.stylesheet import ParseError

_BUNDLE = BundleConfig()
_LIBRARY = LibraryReferenceConfig()


def _parse_source(ctx, param, values: tuple[str, ...]) -> tuple[tuple[str, str], ...]:
    sources = []
    for value in values:
        label, sep, path = value.partition("=")
        if not sep or not label.strip() or not path.strip():
            raise click.BadParameter(f"expected LABEL=PATH, got {value!r}")
        sources.append((label.strip(), path.strip()))
    return tuple(sources)


@click.command()
@click.option(
    "--source",
    "sources",
    multiple=True,
    callback=_parse_source,
    metavar="LABEL=PATH",
    help="Library stylesheet to include (repeatable, in order).",
)
@click.option("--output", default=_BUNDLE.output, show_default=True, help="Combined reference file.")
def bundle(sources: tuple[tuple[str, str], ...], output: str) -> None:
    """Concatenate library stylesheets into a single reference file."""
    config = BundleConfig(sources=sources or _BUNDLE.sources, output=output)
    click.echo("Building reference libraries CSS...")
    try:
        result = run_bundle(config)
    except MissingInputError as exc:
        fail_missing(exc)
    click.echo(
        f"✓ Reference libraries built from {result.sources} source(s): "
        f"{result.output} ({format_size(result.size)})"
    )


@click.command("library-reference")
@click.option("--stylesheet", default=_LIBRARY.stylesheet, show_default=True, help="Compiled stylesheet.")
@click.option(
    "--exclude",
    multiple=True,
    help="Selector prefix marking theme-specific rules (repeatable).",
)
@click.option("--output", default=_LIBRARY.output, show_default=True, help="Reference file to write.")
@click.option("--title", default=_LIBRARY.title, help="Title line of the output header.")
def library_reference(stylesheet: str, exclude: tuple[str, ...], output: str, title: str) -> None:
    """Carve a static library reference out of a compiled theme stylesheet.

    Every rule with a selector carrying one of the excluded prefixes is
    dropped; what remains is saved as the reference for later extractions.
    """
    config = LibraryReferenceConfig(
        stylesheet=stylesheet,
        exclude=exclude or _LIBRARY.exclude,
        output=output,
        title=title,
    )
    click.echo(f"Extracting library reference from {config.stylesheet}...")
    try:
        result = run_library_reference(config)
    except MissingInputError as exc:
        fail_missing(exc)
    except ParseError as exc:
        fail_parse(exc)
    click.echo("✓ Library reference extracted")
    click.echo(f"  Library rules: {result.library_rules}")
    click.echo(f"  Custom rules skipped: {result.custom_rules}")
    click.echo(f"  Output: {result.output}")
    click.echo(f"  Size: {format_size(result.size)}")
