"""CLI command: cssreconcile extract -- keep only the customizations of a theme."""

from __future__ import annotations

import sys

import click

from cssreconcile.cli._common import fail_missing, fail_parse
from cssreconcile.config import ExtractConfig
from cssreconcile.errors import MissingInputError
from cssreconcile.patterns import PatternFileError
from cssreconcile.pipeline import run_extract
from cssreconcile.report import format_size
from cssreconcile.stylesheet import ParseError

_DEFAULTS = ExtractConfig()


@click.command()
@click.option(
    "--stylesheet",
    default=_DEFAULTS.stylesheet,
    show_default=True,
    help="Compiled stylesheet to extract customizations from.",
)
@click.option(
    "--reference",
    "references",
    multiple=True,
    default=_DEFAULTS.references,
    show_default=True,
    help="Library stylesheet whose rules count as known (repeatable).",
)
@click.option(
    "--variables",
    default=_DEFAULTS.variables,
    show_default=True,
    help="SCSS variables file used for color/font substitution.",
)
@click.option("--no-variables", is_flag=True, help="Skip color/font substitution.")
@click.option("--output", default=_DEFAULTS.output, show_default=True, help="Output file.")
@click.option(
    "--audit",
    default=_DEFAULTS.audit,
    show_default=True,
    help="File listing every removed rule.",
)
@click.option("--patterns", "patterns_file", default=None, help="Custom selector pattern file.")
@click.option("--no-patterns", is_flag=True, help="Only remove exact reference matches.")
@click.option("--strip-comments", is_flag=True, help="Drop all comments from the output.")
@click.option(
    "--keep-preserved/--strip-preserved",
    default=not _DEFAULTS.strip_preserved,
    help="Keep /*! comments in reference files when parsing them.",
)
@click.option("--title", default=_DEFAULTS.title, help="Title line of the output header.")
def extract(
    stylesheet: str,
    references: tuple[str, ...],
    variables: str | None,
    no_variables: bool,
    output: str,
    audit: str,
    patterns_file: str | None,
    no_patterns: bool,
    strip_comments: bool,
    keep_preserved: bool,
    title: str,
) -> None:
    """Remove library rules from a compiled stylesheet.

    Rules matching a reference stylesheet exactly, or whose every selector is
    a known library pattern, are removed and listed in the audit file.  The
    remaining rules get literal colors and fonts replaced by SCSS variables.
    """
    config = ExtractConfig(
        stylesheet=stylesheet,
        references=tuple(references),
        variables=None if no_variables else variables,
        output=output,
        audit=audit,
        patterns_file=patterns_file,
        use_patterns=not no_patterns,
        strip_comments=strip_comments,
        strip_preserved=not keep_preserved,
        title=title,
    )

    click.echo(f"Extracting customizations from {config.stylesheet}...")
    try:
        result = run_extract(config)
    except MissingInputError as exc:
        fail_missing(exc)
    except ParseError as exc:
        fail_parse(exc)
    except PatternFileError as exc:
        click.echo(f"Pattern file error in {config.patterns_file}: {exc}", err=True)
        sys.exit(1)

    c = result.classification
    click.echo(
        f"Removed {c.removed_count} library rules "
        f"({c.exact_count} exact, {c.pattern_count} pattern), "
        f"kept {c.kept_count} custom rules"
    )
    if c.pruned_at_rules:
        click.echo(f"Removed {c.pruned_at_rules} empty at-rules")
    if config.variables:
        click.echo(f"Replaced {result.replacements} color/font values with variables")
    click.echo(f"Removed rules saved to {result.audit}")
    click.echo("Extraction complete!")
    click.echo(f"  File:  {result.output}")
    click.echo(f"  Size:  {format_size(result.output_size)}")
    click.echo(f"  Lines: {result.lines:,}")
