"""Value substitution: replace literal colors and fonts with SCSS variables.

Replacement is literal-by-literal on each declaration value.  The literal
patterns (hex digits, ``rgb(``/``rgba(`` calls, font names not preceded by
``$``) never match a ``$name`` token, so running the pass over its own output
finds nothing more to replace.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from cssreconcile.canonical import HEX_COLOR_RE
from cssreconcile.stylesheet import AtRule, Declaration, StyleRule, Stylesheet
from cssreconcile.variables import VariableTable

__all__ = ["Substitution", "substitute", "substitute_value"]

logger = logging.getLogger(__name__)

_RGB_CALL_RE = re.compile(r"\brgba?\([^()]*\)", re.IGNORECASE)
_QUOTED_VARIABLE_RE = re.compile(r"[\"'](\$[A-Za-z0-9_-]+)[\"']")
_FONT_PROPERTIES = frozenset({"font", "font-family"})


@dataclass
class Substitution:
    stylesheet: Stylesheet
    replacements: int = 0


def _font_pattern(literal: str) -> re.Pattern[str]:
    return re.compile(r"(?<![\w$-])" + re.escape(literal) + r"(?![\w-])")


def substitute_value(prop: str, value: str, table: VariableTable) -> tuple[str, int]:
    """Rewrite one declaration value; returns ``(new_value, replacements)``."""
    count = 0

    def color(match: re.Match[str]) -> str:
        nonlocal count
        name = table.resolve_color(match.group(0))
        if name is None:
            return match.group(0)
        count += 1
        return name

    value = HEX_COLOR_RE.sub(color, value)
    value = _RGB_CALL_RE.sub(color, value)

    if prop.lower() in _FONT_PROPERTIES:
        for literal, name in table.fonts_longest_first():
            value, n = _font_pattern(literal).subn(name, value)
            count += n
        value = _QUOTED_VARIABLE_RE.sub(r"\1", value)
    return value, count


def _rewrite(declarations: list[Declaration], table: VariableTable) -> int:
    total = 0
    for decl in declarations:
        new_value, count = substitute_value(decl.prop, decl.value, table)
        if new_value != decl.value:
            decl.value = new_value
        total += count
    return total


def substitute(stylesheet: Stylesheet, table: VariableTable) -> Substitution:
    """Replace known color/font literals in every declaration of *stylesheet*."""
    total = 0
    for node in stylesheet.walk():
        if isinstance(node, StyleRule):
            declarations = node.declarations
        elif isinstance(node, AtRule) and node.declarations is not None:
            declarations = node.declarations
        else:
            continue
        count = _rewrite(declarations, table)
        if count:
            node.modified = True
            total += count
    logger.info("Replaced %d color/font values with variables", total)
    return Substitution(stylesheet=stylesheet, replacements=total)
