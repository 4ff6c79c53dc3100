"""Tests for the rule classifier, at-rule pruning and the audit file."""

from datetime import date
from pathlib import Path

import pytest

from cssreconcile.classify import (
    RemovalReason,
    RemovedRule,
    classify,
    prune_empty_at_rules,
    render_audit,
)
from cssreconcile.patterns import DEFAULT_PATTERNS, Pattern, PatternKind, PatternTable
from cssreconcile.reference import build_reference_set
from cssreconcile.stylesheet import AtRule, StyleRule, parse_css

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def fixture_result():
    reference = build_reference_set([(FIXTURES / "library.css").read_text()])
    stylesheet = parse_css((FIXTURES / "theme.css").read_text())
    return classify(stylesheet, reference, DEFAULT_PATTERNS)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassify:
    def test_fixture_counts(self, fixture_result):
        assert fixture_result.original_count == 9
        assert fixture_result.exact_count == 4
        assert fixture_result.pattern_count == 2
        assert fixture_result.kept_count == 3
        assert fixture_result.pruned_at_rules == 1

    def test_conservation(self, fixture_result):
        r = fixture_result
        assert r.kept_count + r.removed_count == r.original_count

    def test_kept_rules_in_source_order(self, fixture_result):
        selectors = [rule.selector for rule in fixture_result.kept.walk_rules()]
        assert selectors == [".hero-banner", ".grid-x, .hero-banner .title", ".site-nav a"]

    def test_removed_rules_in_source_order(self, fixture_result):
        selectors = [item.rule.selector for item in fixture_result.removed]
        assert selectors == ["html", "body", ".button", ".grid-x", ".small-6, .medium-4", ".callout"]

    def test_exact_match_checked_before_patterns(self, fixture_result):
        button = fixture_result.removed[2]
        assert button.rule.selector == ".button"
        assert button.reason is RemovalReason.EXACT_MATCH

    def test_pattern_match_records_patterns(self, fixture_result):
        group = fixture_result.removed[4]
        assert group.reason is RemovalReason.PATTERN_MATCH
        assert [str(p) for p in group.patterns] == [
            "numeric-suffix .small-",
            "numeric-suffix .medium-",
        ]

    def test_mixed_group_is_kept(self):
        ss = parse_css(".grid-x, .custom-widget { margin: 0; }")
        result = classify(ss, build_reference_set([]), DEFAULT_PATTERNS)
        assert result.kept_count == 1
        assert result.removed == []

    def test_theme_overrides_of_library_components_are_kept(self):
        css = """
        .du-carousel .slick-dots li { margin: 0 4px; }
        .reveal-custom-thing { width: 50%; }
        .du-card .grid-x { gap: 1rem; }
        .accordion-du { border: 0; }
        [data-whatinput=mouse] .du-button { outline: 0; }
        .du-hero .callout.primary { color: #fff; }
        .slick-dots li { margin: 0; }
        .reveal-overlay { display: none; }
        """
        result = classify(parse_css(css), build_reference_set([]), DEFAULT_PATTERNS)
        assert [rule.selector for rule in result.kept.walk_rules()] == [
            ".du-carousel .slick-dots li",
            ".reveal-custom-thing",
            ".du-card .grid-x",
            ".accordion-du",
            "[data-whatinput=mouse] .du-button",
            ".du-hero .callout.primary",
        ]
        assert [item.rule.selector for item in result.removed] == [
            ".slick-dots li",
            ".reveal-overlay",
        ]

    def test_without_patterns_only_exact_matches(self):
        ss = parse_css(".grid-x { display: flex; } .a { color: red; }")
        result = classify(ss, build_reference_set([".a{color:red}"]))
        assert [r.rule.selector for r in result.removed] == [".a"]
        assert result.kept_count == 1

    def test_changed_value_is_kept(self):
        ss = parse_css(".a { color: blue; }")
        result = classify(ss, build_reference_set([".a { color: red; }"]))
        assert result.kept_count == 1

    def test_context_of_nested_removal(self, fixture_result):
        callout = fixture_result.removed[-1]
        assert callout.context == ("@media print, screen and (min-width: 40em)",)

    def test_at_rule_context_ignored_for_matching(self):
        ss = parse_css("@media print { .a { color: red; } }")
        result = classify(ss, build_reference_set([".a { color: red; }"]))
        assert result.exact_count == 1

    def test_non_rule_at_rules_untouched(self):
        css = '@font-face { font-family: "X"; } @import url("a.css");'
        ss = parse_css(css)
        result = classify(ss, build_reference_set([]), DEFAULT_PATTERNS)
        assert len(result.kept.nodes) == 2
        assert result.pruned_at_rules == 0

    def test_empty_stylesheet(self):
        result = classify(parse_css(""), build_reference_set([]))
        assert result.original_count == 0
        assert result.removed == []


# ---------------------------------------------------------------------------
# Pruning
# ---------------------------------------------------------------------------


class TestPruneEmptyAtRules:
    def test_nested_chain_removed_completely(self):
        css = "@supports (gap: 1px) { @media print { @media (min-width: 1px) { .a { color: red; } } } }"
        ss = parse_css(css)
        result = classify(ss, build_reference_set([".a { color: red; }"]))
        assert result.pruned_at_rules == 3
        assert ss.nodes == []

    def test_parent_with_survivor_kept(self):
        css = "@media print { @media (min-width: 1px) { .a { color: red; } } .b { color: blue; } }"
        ss = parse_css(css)
        classify(ss, build_reference_set([".a { color: red; }"]))
        media = ss.nodes[0]
        assert isinstance(media, AtRule)
        assert [type(n) for n in media.rules] == [StyleRule]

    def test_comment_only_at_rule_is_empty(self):
        ss = parse_css("@media print { /* gone */ }")
        assert prune_empty_at_rules(ss) == 1
        assert ss.nodes == []

    def test_idempotent(self):
        ss = parse_css("@media print { @supports (x: y) { } } .a { color: red; }")
        assert prune_empty_at_rules(ss) == 2
        assert prune_empty_at_rules(ss) == 0
        assert ss.rule_count == 1

    def test_declaration_at_rules_not_pruned(self):
        ss = parse_css("@page { }")
        assert prune_empty_at_rules(ss) == 0
        assert len(ss.nodes) == 1


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------


class TestAudit:
    def test_header_and_counts(self, fixture_result):
        text = render_audit(fixture_result, source="dest/sparkle.css", generated=date(2024, 1, 2))
        assert " * Source: dest/sparkle.css" in text
        assert " * Generated on 2024-01-02" in text
        assert " * Total removed: 6 (exact-match: 4, pattern-match: 2)" in text
        assert " * Kept: 3 of 9 rules" in text

    def test_rules_listed_verbatim_with_reason(self, fixture_result):
        text = render_audit(fixture_result, generated=date(2024, 1, 2))
        assert "/* exact-match */\nbody {\n  margin: 0px;\n}" in text
        assert "/* pattern-match: prefix .grid- */\n.grid-x {" in text
        assert "/* exact-match | @media print, screen and (min-width: 40em) */\n.callout" in text

    def test_every_removed_rule_listed(self, fixture_result):
        text = render_audit(fixture_result, generated=date(2024, 1, 2))
        assert text.count("-match") == fixture_result.removed_count + 2

    def test_describe_deduplicates_patterns(self):
        pattern = Pattern(PatternKind.PREFIX, ".grid-")
        item = RemovedRule(
            StyleRule(".grid-x, .grid-y"),
            RemovalReason.PATTERN_MATCH,
            patterns=(pattern, pattern),
        )
        assert item.describe() == "pattern-match: prefix .grid-"

    def test_pattern_table_empty_means_no_patterns(self):
        ss = parse_css(".grid-x { display: flex; }")
        result = classify(ss, build_reference_set([]), PatternTable())
        assert result.kept_count == 1
