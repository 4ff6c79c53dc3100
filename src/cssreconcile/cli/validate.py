"""CLI command: cssreconcile validate -- diff two snapshots of a stylesheet."""

from __future__ import annotations

import sys

import click

from cssreconcile.cli._common import fail_missing, fail_parse
from cssreconcile.config import ValidateConfig
from cssreconcile.errors import MissingInputError
from cssreconcile.model.diff import Verdict
from cssreconcile.pipeline import run_validate
from cssreconcile.stylesheet import ParseError

_DEFAULTS = ValidateConfig()
_RULE = "=" * 80


@click.command()
@click.option("--before", default=_DEFAULTS.before, show_default=True, help="Snapshot taken before extraction.")
@click.option("--after", default=_DEFAULTS.after, show_default=True, help="Snapshot taken after extraction.")
@click.option("--report", default=_DEFAULTS.report, show_default=True, help="Where to write the report.")
def validate(before: str, after: str, report: str) -> None:
    """Check that a stylesheet renders the same before and after extraction.

    Exits with code 0 if the files are identical or differ only in
    non-critical ways, or code 1 if critical differences are found.
    """
    config = ValidateConfig(before=before, after=after, report=report)

    click.echo("Validating CSS differences...")
    try:
        run = run_validate(config)
    except MissingInputError as exc:
        fail_missing(exc)
    except ParseError as exc:
        fail_parse(exc)

    result = run.report
    click.echo(f"Report saved to: {run.report_path}")
    click.echo(_RULE)
    if result.verdict is Verdict.IDENTICAL:
        click.echo("✓ VALIDATION PASSED - Files are identical")
    elif result.verdict is Verdict.PASS:
        click.echo("✓ VALIDATION PASSED - No critical differences")
        click.echo(f"  ({len(result.entries)} non-critical differences found)")
    else:
        click.echo("✗ VALIDATION FAILED - Critical differences detected")
        click.echo(f"  Total differences: {len(result.entries)}")
        click.echo(f"  Critical differences: {len(result.critical_entries)}")
        click.echo("")
        click.echo("These differences may affect visual rendering.")
        click.echo(f"See {run.report_path} for details.")
    click.echo(_RULE)
    sys.exit(result.exit_code)
