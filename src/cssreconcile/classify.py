"""Rule classifier: split a stylesheet into kept (custom) and removed (library) rules.

A rule is removed when

1. its canonical key is in the reference set (``exact-match``), or
2. every member of its selector group is recognized by the pattern table
   (``pattern-match``).  One unrecognized member keeps the whole rule.

Removed rules are collected in source order for the audit file.  After
classification, at-rules left without rules are pruned until nothing changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from cssreconcile.canonical import canonicalize
from cssreconcile.patterns import Pattern, PatternTable
from cssreconcile.reference import ReferenceSet
from cssreconcile.stylesheet import AtRule, Node, StyleRule, Stylesheet

__all__ = [
    "RemovalReason",
    "RemovedRule",
    "Classification",
    "classify",
    "prune_empty_at_rules",
    "render_audit",
]

logger = logging.getLogger(__name__)


class RemovalReason(Enum):
    EXACT_MATCH = "exact-match"
    PATTERN_MATCH = "pattern-match"


@dataclass(frozen=True)
class RemovedRule:
    """A rule dropped from the target stylesheet and why.

    Attributes:
        rule: The rule as parsed; ``rule.raw`` is its verbatim source text.
        reason: Exact reference match or structural pattern match.
        context: Headers of the enclosing at-rules, outermost first.
        patterns: For pattern matches, the pattern that recognized each
            selector member.
    """

    rule: StyleRule
    reason: RemovalReason
    context: tuple[str, ...] = ()
    patterns: tuple[Pattern, ...] = ()

    def describe(self) -> str:
        parts = [self.reason.value]
        if self.patterns:
            unique = dict.fromkeys(str(p) for p in self.patterns)
            parts[0] += ": " + ", ".join(unique)
        if self.context:
            parts.append(" > ".join(self.context))
        return " | ".join(parts)


@dataclass
class Classification:
    """Outcome of :func:`classify`.  ``kept`` is the (mutated) input tree."""

    kept: Stylesheet
    removed: list[RemovedRule] = field(default_factory=list)
    original_count: int = 0
    pruned_at_rules: int = 0

    @property
    def kept_count(self) -> int:
        return self.kept.rule_count

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def exact_count(self) -> int:
        return sum(1 for r in self.removed if r.reason is RemovalReason.EXACT_MATCH)

    @property
    def pattern_count(self) -> int:
        return sum(1 for r in self.removed if r.reason is RemovalReason.PATTERN_MATCH)


def _verdict(
    rule: StyleRule, reference: ReferenceSet, patterns: PatternTable | None
) -> tuple[RemovalReason, tuple[Pattern, ...]] | None:
    if canonicalize(rule) in reference:
        return RemovalReason.EXACT_MATCH, ()
    if patterns:
        matched = patterns.match_group(rule.selector)
        if matched:
            return RemovalReason.PATTERN_MATCH, matched
    return None


def classify(
    stylesheet: Stylesheet,
    reference: ReferenceSet,
    patterns: PatternTable | None = None,
) -> Classification:
    """Remove library rules from *stylesheet* in place.

    Without *patterns* only exact reference matches are removed.
    """
    original = stylesheet.rule_count
    removed: list[RemovedRule] = []

    def visit(nodes: list[Node], context: tuple[str, ...]) -> list[Node]:
        kept: list[Node] = []
        for node in nodes:
            if isinstance(node, StyleRule):
                verdict = _verdict(node, reference, patterns)
                if verdict is None:
                    kept.append(node)
                    continue
                reason, matched = verdict
                removed.append(RemovedRule(node, reason, context, matched))
                continue
            if isinstance(node, AtRule) and node.rules is not None:
                node.rules = visit(node.rules, context + (node.header,))
            kept.append(node)
        return kept

    stylesheet.nodes = visit(stylesheet.nodes, ())
    pruned = prune_empty_at_rules(stylesheet)

    result = Classification(
        kept=stylesheet,
        removed=removed,
        original_count=original,
        pruned_at_rules=pruned,
    )
    logger.info(
        "Removed %d library rules (%d exact, %d pattern), kept %d custom rules",
        result.removed_count,
        result.exact_count,
        result.pattern_count,
        result.kept_count,
    )
    return result


def _prune_pass(nodes: list[Node]) -> int:
    removed = 0
    kept: list[Node] = []
    for node in nodes:
        if isinstance(node, AtRule) and node.rules is not None:
            if node.is_empty:
                removed += 1
                continue
            removed += _prune_pass(node.rules)
        kept.append(node)
    nodes[:] = kept
    return removed


def prune_empty_at_rules(stylesheet: Stylesheet) -> int:
    """Drop rule-list at-rules that contain no rules, repeating to a fixed point.

    Each pass removes the at-rules that are empty at that moment, which may
    empty their parents; the number of passes is bounded by the nesting depth.
    Returns the total number of at-rules removed.
    """
    total = 0
    for _ in range(stylesheet.depth() + 1):
        removed = _prune_pass(stylesheet.nodes)
        if not removed:
            break
        total += removed
    if total:
        logger.info("Pruned %d empty at-rules", total)
    return total


def render_audit(
    result: Classification, source: str = "", generated: date | None = None
) -> str:
    """Render the removed rules, verbatim and attributed, for human review."""
    generated = generated or date.today()
    header = [
        "/**",
        " * Library Rules Removed During Extraction",
    ]
    if source:
        header.append(f" * Source: {source}")
    header += [
        f" * Generated on {generated.isoformat()}",
        " *",
        f" * Total removed: {result.removed_count}"
        f" (exact-match: {result.exact_count}, pattern-match: {result.pattern_count})",
        f" * Kept: {result.kept_count} of {result.original_count} rules",
        " *",
        " * Review this file to ensure no customizations were accidentally removed.",
        " */",
    ]
    blocks = ["\n".join(header)]
    for item in result.removed:
        blocks.append(f"/* {item.describe()} */\n{item.rule.to_css()}")
    return "\n\n".join(blocks) + "\n"
