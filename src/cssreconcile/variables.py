"""SCSS variable definitions -> color and font lookup tables.

Only two kinds of values are of interest:

- hex colors (``$brand-blue: #1a73e8;``), keyed by normalized 6-digit hex so
  that ``#1A73E8``, ``rgb(26, 115, 232)`` and ``rgba(26, 115, 232, 1)`` all
  resolve to ``$brand-blue``;
- font stacks (anything mentioning ``serif`` / ``sans-serif`` or holding a
  quoted family name), stored as written, with double quotes, and with
  quotes removed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from cssreconcile.canonical import normalize_hex

__all__ = ["VariableTable", "parse_variables", "color_key"]

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"(?<![\w$-])\$([A-Za-z0-9_-]+)\s*:\s*([^;]+);")
_FLAG_RE = re.compile(r"\s*!(?:default|global)\b", re.IGNORECASE)
_HEX_VALUE_RE = re.compile(r"^#[0-9a-fA-F]{3,8}$")
_QUOTED_RE = re.compile(r"[\"'][^\"']+[\"']")
_RGB_LITERAL_RE = re.compile(r"^(rgba?)\((.*)\)$", re.IGNORECASE | re.DOTALL)


def _is_opaque(alpha: str) -> bool:
    alpha = alpha.strip()
    if alpha.endswith("%"):
        alpha = alpha[:-1]
        scale = 100.0
    else:
        scale = 1.0
    try:
        return float(alpha) == scale
    except ValueError:
        return False


def color_key(literal: str) -> str | None:
    """Resolve a color literal to its canonical key (normalized 6-digit hex).

    Accepts hex colors, ``rgb()`` and ``rgba()`` with an alpha of 1.  Returns
    None for anything that cannot be expressed as an opaque 6-digit hex.
    """
    literal = literal.strip()
    if literal.startswith("#"):
        return normalize_hex(literal)
    match = _RGB_LITERAL_RE.match(literal)
    if match is None:
        return None
    args = [a for a in re.split(r"[\s,/]+", match.group(2).strip()) if a]
    if len(args) == 4:
        if not _is_opaque(args[3]):
            return None
        args = args[:3]
    if len(args) != 3:
        return None
    try:
        channels = [int(a) for a in args]
    except ValueError:
        return None
    if any(c < 0 or c > 255 for c in channels):
        return None
    return "#" + "".join(f"{c:02x}" for c in channels)


@dataclass(frozen=True)
class VariableTable:
    """Color and font lookup tables built from a variables file.

    Attributes:
        colors: Normalized hex (``#rrggbb``) -> symbolic name (``$name``).
        fonts: Font literal, quoted and unquoted -> symbolic name.
    """

    colors: dict[str, str] = field(default_factory=dict)
    fonts: dict[str, str] = field(default_factory=dict)

    def resolve_color(self, literal: str) -> str | None:
        """Symbolic name for any spelling of a known color, else None."""
        key = color_key(literal)
        if key is None:
            return None
        return self.colors.get(key)

    def fonts_longest_first(self) -> list[tuple[str, str]]:
        return sorted(self.fonts.items(), key=lambda item: len(item[0]), reverse=True)

    def __bool__(self) -> bool:
        return bool(self.colors or self.fonts)


def _is_font(value: str) -> bool:
    return "serif" in value or _QUOTED_RE.search(value) is not None


def parse_variables(source: str) -> VariableTable:
    """Parse ``$name: value;`` assignments into a :class:`VariableTable`.

    Several assignments may share a line.  Anything else, ``//`` comment
    lines included, is skipped.  A later definition of the same color or
    font replaces an earlier one.
    """
    colors: dict[str, str] = {}
    fonts: dict[str, str] = {}
    for lineno, line in enumerate(source.splitlines(), start=1):
        stripped = line.strip()
        if stripped.startswith("//"):
            continue
        matches = list(_VAR_RE.finditer(line))
        if not matches:
            if stripped.startswith("$"):
                logger.debug("Skipping malformed variable line %d: %r", lineno, line)
            continue
        for match in matches:
            name = f"${match.group(1)}"
            value = _FLAG_RE.sub("", match.group(2)).strip()
            if _HEX_VALUE_RE.match(value):
                colors[normalize_hex(value)] = name
            elif _is_font(value):
                fonts[re.sub(r"[\"']", "", value)] = name
                fonts[value] = name
                # Parsed stylesheets serialize every string with double quotes.
                fonts[value.replace("'", '"')] = name
    logger.info(
        "Loaded %d color mappings and %d font mappings", len(colors), len(fonts)
    )
    return VariableTable(colors=colors, fonts=fonts)
