"""Tests for reference set construction."""

from pathlib import Path

import pytest

from cssreconcile.canonical import canonicalize
from cssreconcile.reference import ReferenceSet, build_reference_set, strip_preserved_comments
from cssreconcile.stylesheet import ParseError, parse_css

FIXTURES = Path(__file__).parent.parent / "fixtures"


def _key(css: str) -> str:
    return canonicalize(next(parse_css(css).walk_rules()))


class TestBuildReferenceSet:
    def test_fixture_library(self):
        reference = build_reference_set([(FIXTURES / "library.css").read_text()])
        assert len(reference) == 4
        assert _key("body { margin: 0px; }") in reference
        assert _key(".callout { padding: 1rem; }") in reference

    def test_nested_rules_included(self):
        reference = build_reference_set(["@supports (gap: 1px) { @media print { .a { color: red; } } }"])
        assert _key(".a { color: red; }") in reference

    def test_union_of_sources(self):
        reference = build_reference_set([".a { color: red; }", ".b { color: blue; }"])
        assert len(reference) == 2
        assert _key(".b{color:blue}") in reference

    def test_duplicates_collapse(self):
        reference = build_reference_set([".a { color: red; }", ".A { color: red }"])
        assert len(reference) == 1

    def test_empty_sources(self):
        assert len(build_reference_set([])) == 0
        assert len(build_reference_set([""])) == 0

    def test_parse_error_names_source(self):
        with pytest.raises(ParseError) as info:
            build_reference_set([".ok {}", ".a { 12px; }"], names=["one.css", "two.css"])
        assert info.value.source == "two.css"

    def test_iteration(self):
        reference = ReferenceSet(keys=frozenset({".a|color:red"}))
        assert list(reference) == [".a|color:red"]
        assert ".a|color:red" in reference


class TestPreservedComments:
    def test_strip_preserved_comments(self):
        text = "/*! license\n   text */\n.a { color: red; }\n/* plain */"
        assert strip_preserved_comments(text) == "\n.a { color: red; }\n/* plain */"

    def test_strip_preserved_option(self):
        reference = build_reference_set(
            ["/*! keep me */ .a { color: red; }"], strip_preserved=True
        )
        assert _key(".a { color: red; }") in reference
