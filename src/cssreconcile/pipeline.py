"""End-to-end runs behind each CLI command.

Every run checks all of its inputs up front, reads them completely, does one
parse -> transform -> serialize pass, and overwrites its outputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from cssreconcile.classify import (
    Classification,
    classify,
    prune_empty_at_rules,
    render_audit,
)
from cssreconcile.config import (
    BundleConfig,
    ExtractConfig,
    LibraryReferenceConfig,
    ValidateConfig,
)
from cssreconcile.differ import diff
from cssreconcile.errors import InputFile, require_inputs
from cssreconcile.model.diff import DiffReport
from cssreconcile.patterns import DEFAULT_PATTERNS, PatternTable, load_patterns
from cssreconcile.reference import build_reference_set
from cssreconcile.report import render_report
from cssreconcile.stylesheet import parse_css
from cssreconcile.substitute import substitute
from cssreconcile.variables import parse_variables

__all__ = [
    "ExtractResult",
    "ValidationRun",
    "BundleResult",
    "LibraryReferenceResult",
    "run_extract",
    "run_validate",
    "run_bundle",
    "run_library_reference",
]

logger = logging.getLogger(__name__)

EXTRACT_HINT = "Run the theme build and `cssreconcile bundle` to generate reference files first."
VALIDATE_HINT = "Back up the compiled stylesheet before extraction to create the 'before' snapshot."


def _read(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def _write(path: str | Path, text: str) -> int:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    return target.stat().st_size


def _header(lines: list[str]) -> str:
    body = "\n".join(f" * {line}" if line else " *" for line in lines)
    return f"/**\n{body}\n */\n\n"


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtractResult:
    classification: Classification
    replacements: int
    output: Path
    output_size: int
    audit: Path
    lines: int


def run_extract(config: ExtractConfig, today: date | None = None) -> ExtractResult:
    """Strip library rules from a compiled stylesheet and write the remainder.

    Writes the customizations file and the audit file of removed rules.
    """
    today = today or date.today()
    inputs = [InputFile("Stylesheet", Path(config.stylesheet))]
    inputs += [InputFile("Reference CSS", Path(p)) for p in config.references]
    if config.variables:
        inputs.append(InputFile("Variables SCSS", Path(config.variables)))
    if config.patterns_file:
        inputs.append(InputFile("Pattern file", Path(config.patterns_file)))
    require_inputs(inputs, hint=EXTRACT_HINT)

    table = parse_variables(_read(config.variables)) if config.variables else None

    patterns: PatternTable | None = None
    if config.patterns_file:
        patterns = load_patterns(_read(config.patterns_file))
    elif config.use_patterns:
        patterns = DEFAULT_PATTERNS

    reference = build_reference_set(
        [_read(p) for p in config.references],
        strip_preserved=config.strip_preserved,
        names=list(config.references),
    )
    stylesheet = parse_css(_read(config.stylesheet), source_name=config.stylesheet)

    result = classify(stylesheet, reference, patterns)
    _write(config.audit, render_audit(result, source=config.stylesheet, generated=today))

    if config.strip_comments:
        stripped = stylesheet.strip_comments()
        logger.info("Removed %d comments", stripped)

    replacements = 0
    if table:
        replacements = substitute(stylesheet, table).replacements

    removed_what = "Library rules matching the reference stylesheets have been removed."
    if patterns:
        removed_what = (
            "Library rules matching the reference stylesheets or known library "
            "selector patterns have been removed."
        )
    header_lines = [
        config.title,
        f"Extracted from {config.stylesheet}",
        f"Auto-generated on {today.isoformat()}",
        "",
        removed_what,
    ]
    if table:
        header_lines.append("Colors and fonts have been replaced with SCSS variables where defined.")
    output = _header(header_lines) + stylesheet.to_css(strip_comments=config.strip_comments)
    size = _write(config.output, output)

    return ExtractResult(
        classification=result,
        replacements=replacements,
        output=Path(config.output),
        output_size=size,
        audit=Path(config.audit),
        lines=len(output.split("\n")),
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationRun:
    report: DiffReport
    text: str
    report_path: Path


def run_validate(config: ValidateConfig, now: datetime | None = None) -> ValidationRun:
    """Diff the before/after snapshots and write the report file."""
    before_path, after_path = Path(config.before), Path(config.after)
    require_inputs(
        [InputFile("Before snapshot", before_path), InputFile("After snapshot", after_path)],
        hint=VALIDATE_HINT,
    )
    report = diff(
        _read(before_path),
        _read(after_path),
        before_name=config.before,
        after_name=config.after,
    )
    text = render_report(
        report,
        before_path=config.before,
        before_size=before_path.stat().st_size,
        after_path=config.after,
        after_size=after_path.stat().st_size,
        generated=now,
    )
    _write(config.report, text)
    return ValidationRun(report=report, text=text, report_path=Path(config.report))


# ---------------------------------------------------------------------------
# bundle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BundleResult:
    output: Path
    size: int
    sources: int


def _banner(label: str) -> str:
    bar = "=" * 40
    return f"\n/* {bar}\n   {label}\n   {bar} */\n\n"


def run_bundle(config: BundleConfig) -> BundleResult:
    """Concatenate library stylesheets into one reference file, with banners."""
    require_inputs(InputFile(label, Path(path)) for label, path in config.sources)
    parts = []
    for label, path in config.sources:
        logger.info("Reading %s from %s", label, path)
        parts.append(_banner(label) + _read(path) + "\n\n")
    size = _write(config.output, "".join(parts))
    return BundleResult(output=Path(config.output), size=size, sources=len(config.sources))


# ---------------------------------------------------------------------------
# library-reference
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LibraryReferenceResult:
    library_rules: int
    custom_rules: int
    output: Path
    size: int


def _mentions_any(selector: str, prefixes: tuple[str, ...]) -> bool:
    # Any occurrence marks theme code, descendants and compounds included.
    return any(prefix in selector for prefix in prefixes)


def run_library_reference(
    config: LibraryReferenceConfig, today: date | None = None
) -> LibraryReferenceResult:
    """Keep only the rules of a compiled stylesheet that carry no custom prefix."""
    today = today or date.today()
    require_inputs([InputFile("Stylesheet", Path(config.stylesheet))], hint=EXTRACT_HINT)
    stylesheet = parse_css(_read(config.stylesheet), source_name=config.stylesheet)

    removed = stylesheet.remove_rules(lambda rule: _mentions_any(rule.selector, config.exclude))
    prune_empty_at_rules(stylesheet)

    output = _header([
        config.title,
        f"Extracted from {config.stylesheet} on {today.isoformat()}",
        "",
        "Static reference used for extraction comparisons.",
        "Rules carrying theme-specific selectors have been removed.",
    ]) + stylesheet.to_css()
    size = _write(config.output, output)
    logger.info("Library rules: %d, custom rules skipped: %d", stylesheet.rule_count, len(removed))
    return LibraryReferenceResult(
        library_rules=stylesheet.rule_count,
        custom_rules=len(removed),
        output=Path(config.output),
        size=size,
    )
