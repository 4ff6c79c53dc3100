"""Canonical rule keys: normalized, order-independent rule identities.

Two rules with the same key are treated as the same rule when deciding what
is library code.  A key is a pure function of the selector and declarations;
source position and comments never enter it.

Key layout::

    <normalized selector>|<prop>:<value>|<prop>:<value>...

Declarations are stably sorted by property name, so reordering different
properties inside a block leaves the key unchanged while repeated
declarations of one property keep their source order (``color: red;
color: var(--c)`` and the reverse produce different keys).
"""

from __future__ import annotations

import re

from cssreconcile.stylesheet.model import Declaration, StyleRule

__all__ = [
    "CanonicalKey",
    "canonicalize",
    "canonical_declaration",
    "normalize_hex",
    "normalize_selector",
    "normalize_value",
    "split_selector_group",
]

CanonicalKey = str

KEY_DELIMITER = "|"

_WS_RE = re.compile(r"\s+")
_COMBINATOR_RE = re.compile(r"\s*([>+~])\s*")
_COMMA_RE = re.compile(r"\s*,\s*")
HEX_COLOR_RE = re.compile(r"#[0-9a-fA-F]{3,8}(?![0-9A-Za-z_-])")
_ZERO_LENGTH_RE = re.compile(
    r"(?<![\w.#-])0+(?:\.0+)?"
    r"(?:px|em|rem|ex|ch|vw|vh|vmin|vmax|cm|mm|in|pt|pc|q|%)"
    r"(?![\w%-])",
    re.IGNORECASE,
)
_RGB_RE = re.compile(r"\b(rgba?)\(([^()]*)\)", re.IGNORECASE)
_CALC_OPEN_RE = re.compile(r"\bcalc\(", re.IGNORECASE)
_CALC_MULDIV_RE = re.compile(r"\s*([*/])\s*")


def normalize_hex(hex_color: str) -> str:
    """Lower-case a hex color and expand the 3-digit short form to 6 digits."""
    hex_color = hex_color.lower()
    if len(hex_color) == 4:
        r, g, b = hex_color[1], hex_color[2], hex_color[3]
        hex_color = f"#{r}{r}{g}{g}{b}{b}"
    return hex_color


def normalize_hex_colors(text: str) -> str:
    """Apply :func:`normalize_hex` to every hex color literal in *text*."""
    return HEX_COLOR_RE.sub(lambda m: normalize_hex(m.group(0)), text)


def normalize_selector(selector: str) -> str:
    """Trim, collapse whitespace, tighten combinators and commas, lower-case."""
    selector = _WS_RE.sub(" ", selector.strip())
    selector = _COMBINATOR_RE.sub(r"\1", selector)
    selector = _COMMA_RE.sub(",", selector)
    return selector.lower()


def split_selector_group(selector: str) -> list[str]:
    """Split a selector group on top-level commas.

    Commas inside ``:is(...)``, attribute brackets or quoted strings do not
    split the group.
    """
    members: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    for i, ch in enumerate(selector):
        if quote:
            if ch == quote and selector[i - 1] != "\\":
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            members.append(selector[start:i].strip())
            start = i + 1
    members.append(selector[start:].strip())
    return [m for m in members if m]


def _normalize_rgb(match: re.Match[str]) -> str:
    name = match.group(1).lower()
    args = _COMMA_RE.sub(",", match.group(2).strip())
    return f"{name}({args})"


def _normalize_calc(value: str) -> str:
    out: list[str] = []
    pos = 0
    for match in _CALC_OPEN_RE.finditer(value):
        if match.start() < pos:
            continue  # nested calc() already handled with its parent
        depth = 1
        i = match.end()
        while i < len(value) and depth:
            if value[i] == "(":
                depth += 1
            elif value[i] == ")":
                depth -= 1
            i += 1
        inner = value[match.end():i - 1] if depth == 0 else value[match.end():]
        inner = _CALC_MULDIV_RE.sub(r" \1 ", inner)
        inner = re.sub(r"\(\s+", "(", inner)
        inner = re.sub(r"\s+\)", ")", inner)
        out.append(value[pos:match.start()])
        out.append("calc(" + inner.strip() + (")" if depth == 0 else ""))
        pos = i
    out.append(value[pos:])
    return "".join(out)


def normalize_value(value: str) -> str:
    """Normalize a declaration value for comparison.

    Collapses whitespace, lower-cases and widens hex colors, drops the unit
    from zero lengths, and tidies whitespace inside ``calc()`` and around the
    commas of ``rgb()``/``rgba()``.
    """
    value = _WS_RE.sub(" ", value.strip())
    value = normalize_hex_colors(value)
    value = _ZERO_LENGTH_RE.sub("0", value)
    value = _RGB_RE.sub(_normalize_rgb, value)
    if "calc(" in value.lower():
        value = _normalize_calc(value)
    return value


def canonical_declaration(decl: Declaration) -> str:
    # Custom property names are case-sensitive.
    prop = decl.prop if decl.prop.startswith("--") else decl.prop.lower()
    return f"{prop}:{normalize_value(decl.full_value)}"


def canonicalize(rule: StyleRule) -> CanonicalKey:
    """Return the canonical key of *rule*."""
    ordered = sorted(
        rule.declarations,
        key=lambda d: d.prop if d.prop.startswith("--") else d.prop.lower(),
    )
    parts = [canonical_declaration(d) for d in ordered]
    return normalize_selector(rule.selector) + KEY_DELIMITER + KEY_DELIMITER.join(parts)
