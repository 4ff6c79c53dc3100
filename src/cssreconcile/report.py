"""Human-readable rendering of a :class:`DiffReport`."""

from __future__ import annotations

from datetime import datetime, timezone

from cssreconcile.model.diff import DiffReport, Verdict

__all__ = ["render_report", "format_size", "DEFAULT_LIMIT"]

DEFAULT_LIMIT = 20
RULE = "=" * 80
THIN_RULE = "-" * 80


def format_size(size: int) -> str:
    return f"{size / 1024:.2f} KB"


def render_report(
    report: DiffReport,
    before_path: str,
    before_size: int,
    after_path: str,
    after_size: int,
    generated: datetime | None = None,
    limit: int = DEFAULT_LIMIT,
) -> str:
    """Render the validation report text.

    Failing reports list critical differences grouped by kind, showing the
    first *limit* of each kind and a count of the rest.
    """
    generated = generated or datetime.now(timezone.utc)
    lines = [
        RULE,
        "CSS VALIDATION REPORT",
        f"Generated: {generated.isoformat()}",
        RULE,
        "",
        "FILE INFORMATION:",
        f"  Before: {before_path} ({format_size(before_size)})",
        f"  After:  {after_path} ({format_size(after_size)})",
        "",
    ]

    verdict = report.verdict
    if verdict is Verdict.IDENTICAL:
        lines += [
            "✓ VALIDATION PASSED",
            "",
            "The CSS files are identical after hex color normalization.",
            "No visual changes detected.",
        ]
    else:
        lines += [
            "RULE COUNT:",
            f"  Before: {report.before_rules:,} rules",
            f"  After:  {report.after_rules:,} rules",
            "",
        ]
        critical = report.critical_entries
        if verdict is Verdict.PASS:
            lines += [
                "✓ NO CRITICAL DIFFERENCES",
                "",
                f"Found {len(report.entries)} non-critical differences.",
            ]
        else:
            lines += [
                "✗ CRITICAL DIFFERENCES FOUND",
                "",
                f"Total differences: {len(report.entries)}",
                f"Critical differences: {len(critical)}",
                "",
                THIN_RULE,
                "CRITICAL DIFFERENCES (affect visual rendering):",
                THIN_RULE,
                "",
            ]
            for kind, entries in report.by_kind(critical_only=True).items():
                lines.append(f"{kind.value}: {len(entries)} occurrences")
                lines.append("")
                for entry in entries[:limit]:
                    lines.append(f"  Selector: {entry.selector}")
                    if entry.property:
                        lines.append(f"  Property: {entry.property}")
                    if entry.old_value is not None:
                        lines.append(f"  Old: {entry.old_value}")
                    if entry.new_value is not None:
                        lines.append(f"  New: {entry.new_value}")
                    lines.append("")
                if len(entries) > limit:
                    lines.append(f"  ... and {len(entries) - limit} more")
                    lines.append("")

    lines.append(RULE)
    return "\n".join(lines) + "\n"
