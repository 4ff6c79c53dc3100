"""Structural selector patterns for recognizing library code.

A :class:`Pattern` is a tagged variant; each kind has its own expression
builder in ``_EXPRESSIONS``.  Patterns run against one member of a selector
group after :func:`~cssreconcile.canonical.normalize_selector`.

Kinds:
    prefix          ``.grid-`` matches class/id tokens starting with it
                    (``.grid-x``, ``.grid-container``).  A value that does not
                    end in ``-`` or ``.`` must match a whole token:
                    ``.reveal`` matches ``.reveal`` but not ``.reveal-custom``.
    numeric-suffix  ``.small-`` matches ``.small-12`` but not ``.small-print``.
    pseudo-element  ``-webkit-`` matches ``input::-webkit-input-placeholder``.
    attribute       ``data-whatinput`` matches ``[data-whatinput=mouse] a``.
    exact           ``.slick-slider`` matches that selector and nothing else.

A member is library code when an exact pattern equals it, or when some other
pattern matches it and every class/id token in it is covered by a prefix or
numeric-suffix match or is itself a single-token exact pattern.  So
``.grid-x .cell`` is library code while ``.du-card .grid-x`` is not.

Pattern file format, one pattern per line; lines starting with ``#`` are
comments::

    prefix .grid-
    numeric-suffix .small-
    exact .slick-slider
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable

from cssreconcile.canonical import normalize_selector, split_selector_group

__all__ = [
    "PatternKind",
    "Pattern",
    "PatternTable",
    "PatternFileError",
    "DEFAULT_PATTERNS",
    "load_patterns",
]


class PatternKind(Enum):
    PREFIX = "prefix"
    NUMERIC_SUFFIX = "numeric-suffix"
    PSEUDO_ELEMENT = "pseudo-element"
    ATTRIBUTE = "attribute"
    EXACT = "exact"


# Kinds whose matches claim the class/id tokens they overlap.
_TOKEN_KINDS = (PatternKind.PREFIX, PatternKind.NUMERIC_SUFFIX)

_TOKEN_RE = re.compile(r"[.#][\w-]+")


class PatternFileError(ValueError):
    """Raised when a pattern file contains an unknown kind or a blank value."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        super().__init__(message if line is None else f"line {line}: {message}")


@dataclass(frozen=True)
class Pattern:
    kind: PatternKind
    value: str

    def spans(self, member: str) -> list[tuple[int, int]]:
        """Where this pattern matches inside an already normalized member."""
        if self.kind is PatternKind.EXACT:
            return [(0, len(member))] if member == normalize_selector(self.value) else []
        expr = _compile(_EXPRESSIONS[self.kind](self.value.lower()))
        return [m.span() for m in expr.finditer(member)]

    def matches(self, member: str) -> bool:
        """True if this pattern occurs in the selector *member*."""
        return bool(self.spans(normalize_selector(member)))

    def __str__(self) -> str:
        return f"{self.kind.value} {self.value}"


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@lru_cache(maxsize=512)
def _compile(expr: str) -> re.Pattern[str]:
    return re.compile(expr)


def _boundary(value: str) -> str:
    # Tokens led by "." or "#" already start at a simple-selector boundary.
    if value[:1] in (".", "#"):
        return ""
    return r"(?<![\w-])"


def _prefix(value: str) -> str:
    expr = _boundary(value) + re.escape(value)
    if value[-1:] not in ("-", "."):
        expr += r"(?![\w-])"
    return expr


def _numeric_suffix(value: str) -> str:
    return _boundary(value) + re.escape(value) + r"\d+(?![\w-])"


def _pseudo_element(value: str) -> str:
    return r"::?" + re.escape(value.lstrip(":"))


def _attribute(value: str) -> str:
    return r"\[\s*" + re.escape(value.strip("[]")) + r"(?![\w-])"


_EXPRESSIONS: dict[PatternKind, Callable[[str], str]] = {
    PatternKind.PREFIX: _prefix,
    PatternKind.NUMERIC_SUFFIX: _numeric_suffix,
    PatternKind.PSEUDO_ELEMENT: _pseudo_element,
    PatternKind.ATTRIBUTE: _attribute,
}


def _class_tokens(member: str) -> list[tuple[int, int]]:
    """Spans of the class/id tokens of *member*, ignoring attribute values."""
    masked: list[str] = []
    depth = 0
    quote: str | None = None
    for ch in member:
        if quote:
            masked.append(" ")
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
            masked.append(" ")
        elif ch == "[":
            depth += 1
            masked.append(ch)
        elif ch == "]":
            depth = max(depth - 1, 0)
            masked.append(ch)
        else:
            masked.append(" " if depth else ch)
    return [m.span() for m in _TOKEN_RE.finditer("".join(masked))]


# ---------------------------------------------------------------------------
# Pattern table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternTable:
    """An ordered, immutable list of patterns."""

    patterns: tuple[Pattern, ...] = ()

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self):
        return iter(self.patterns)

    def _known_tokens(self) -> frozenset[str]:
        return frozenset(
            value
            for value in (
                normalize_selector(p.value)
                for p in self.patterns
                if p.kind is PatternKind.EXACT
            )
            if _TOKEN_RE.fullmatch(value)
        )

    def match(self, member: str) -> Pattern | None:
        """The pattern recognizing a single selector *member* as library code.

        Returns None when no pattern applies or when the member carries a
        class/id token no pattern accounts for.
        """
        member = normalize_selector(member)
        for pattern in self.patterns:
            if pattern.kind is PatternKind.EXACT and pattern.spans(member):
                return pattern

        found: Pattern | None = None
        claimed: list[tuple[int, int]] = []
        for pattern in self.patterns:
            if pattern.kind is PatternKind.EXACT:
                continue
            spans = pattern.spans(member)
            if spans and found is None:
                found = pattern
            if pattern.kind in _TOKEN_KINDS:
                claimed.extend(spans)
        if found is None:
            return None

        known = self._known_tokens()
        for start, end in _class_tokens(member):
            if member[start:end] in known:
                continue
            if not any(s < end and start < e for s, e in claimed):
                return None
        return found

    def match_group(self, selector: str) -> tuple[Pattern, ...] | None:
        """Match every member of a selector group.

        Returns the pattern that recognized each member, in member order, or
        None when at least one member is not recognized.
        """
        matched: list[Pattern] = []
        for member in split_selector_group(selector):
            pattern = self.match(member)
            if pattern is None:
                return None
            matched.append(pattern)
        return tuple(matched) or None


def _table(groups: dict[PatternKind, tuple[str, ...]]) -> PatternTable:
    return PatternTable(
        patterns=tuple(Pattern(kind, v) for kind, values in groups.items() for v in values)
    )


# Foundation for Sites grid/utilities/components, Slick carousel and Drupal tabs.
DEFAULT_PATTERNS = _table({
    PatternKind.EXACT: (
        ".row",
        ".column",
        ".columns",
        ".cell",
        ".clearfix",
        ".menu",
        ".button",
        ".callout",
        ".tabs",
        ".slick-slider",
        ".slick-list",
        ".slick-track",
        ".slick-slide",
    ),
    PatternKind.NUMERIC_SUFFIX: (
        ".small-",
        ".medium-",
        ".large-",
        ".xlarge-",
        ".xxlarge-",
        ".small-offset-",
        ".medium-offset-",
        ".large-offset-",
        ".small-up-",
        ".medium-up-",
        ".large-up-",
        ".small-order-",
        ".medium-order-",
        ".large-order-",
    ),
    PatternKind.PREFIX: (
        ".grid-",
        ".cell-block",
        ".cell-block-",
        ".small-cell-block",
        ".medium-cell-block",
        ".large-cell-block",
        ".show-for-",
        ".hide-for-",
        ".align-",
        ".flex-container",
        ".flex-child-",
        ".button-group",
        ".callout.primary",
        ".callout.secondary",
        ".callout.success",
        ".callout.warning",
        ".callout.alert",
        ".callout.small",
        ".callout.large",
        ".dropdown-pane",
        ".is-dropdown-",
        ".is-drilldown",
        ".is-drilldown-",
        ".is-accordion-submenu",
        ".is-accordion-submenu-",
        ".accordion",
        ".accordion-item",
        ".accordion-title",
        ".accordion-content",
        ".accordion-menu",
        ".off-canvas",
        ".off-canvas-wrapper",
        ".off-canvas-content",
        ".off-canvas-absolute",
        ".reveal",
        ".reveal-overlay",
        ".orbit",
        ".orbit-",
        ".top-bar",
        ".top-bar-left",
        ".top-bar-right",
        ".title-bar",
        ".title-bar-left",
        ".title-bar-right",
        ".title-bar-title",
        ".tabs-",
        ".slick-",
        ".tabs.primary",
        ".tabs.secondary",
    ),
    PatternKind.PSEUDO_ELEMENT: (
        "-webkit-",
        "-moz-",
        "-ms-",
    ),
    PatternKind.ATTRIBUTE: (
        "data-whatinput",
        "data-whatintent",
    ),
})


def load_patterns(source: str) -> PatternTable:
    """Parse a pattern file (``<kind> <value>`` per line) into a table."""
    patterns: list[Pattern] = []
    for lineno, line in enumerate(source.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        kind_text, _, value = line.partition(" ")
        try:
            kind = PatternKind(kind_text.lower())
        except ValueError:
            raise PatternFileError(f"unknown pattern kind {kind_text!r}", line=lineno) from None
        value = value.strip()
        if not value:
            raise PatternFileError(f"missing value for {kind.value} pattern", line=lineno)
        patterns.append(Pattern(kind, value))
    return PatternTable(patterns=tuple(patterns))
