"""Structural differ: compare two versions of a compiled stylesheet.

The only normalization applied is hex-color case and width; everything else,
whitespace included, must match for the fast path to report the texts as
identical.  Otherwise both texts are parsed and compared selector by selector
using the literal selector text, since the question here is whether
formatting survived, not whether two rules are equivalent library code.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from cssreconcile.canonical import normalize_hex_colors
from cssreconcile.model.diff import DiffEntry, DiffKind, DiffReport
from cssreconcile.stylesheet import Stylesheet, parse_css

__all__ = [
    "VISUAL_PROPERTIES",
    "diff",
    "flatten_rules",
    "is_critical_property",
]

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")

# Properties whose changes can alter rendering.
VISUAL_PROPERTIES = frozenset({
    # color and backgrounds
    "color", "background", "background-color", "background-image",
    "background-position", "background-size", "background-repeat",
    "opacity", "box-shadow", "text-shadow", "outline",
    # borders
    "border", "border-color", "border-width", "border-style", "border-radius",
    "border-top", "border-right", "border-bottom", "border-left",
    "border-top-color", "border-right-color", "border-bottom-color",
    "border-left-color",
    # box model
    "width", "height", "min-width", "max-width", "min-height", "max-height",
    "margin", "margin-top", "margin-right", "margin-bottom", "margin-left",
    "padding", "padding-top", "padding-right", "padding-bottom", "padding-left",
    # typography
    "font", "font-family", "font-size", "font-weight", "font-style",
    "line-height", "text-align", "text-decoration", "text-transform",
    "letter-spacing", "word-spacing",
    # layout and positioning
    "display", "visibility", "position", "top", "right", "bottom", "left",
    "float", "clear", "z-index", "overflow", "overflow-x", "overflow-y",
    "flex", "flex-direction", "flex-wrap", "justify-content", "align-items",
    "align-content", "grid", "grid-template", "grid-gap", "gap",
    # motion
    "transform", "transition", "animation",
    "cursor",
})

CUSTOM_PROPERTY_PREFIX = "--"


def is_critical_property(prop: str) -> bool:
    """True for visually significant properties and any custom property."""
    return prop.startswith(CUSTOM_PROPERTY_PREFIX) or prop.lower() in VISUAL_PROPERTIES


@dataclass(frozen=True)
class FlatRule:
    selector: str
    declarations: tuple[tuple[str, str], ...]


def flatten_rules(stylesheet: Stylesheet) -> list[FlatRule]:
    """List every style rule (nested ones included) with collapsed values."""
    return [
        FlatRule(
            selector=rule.selector,
            declarations=tuple(
                (d.prop, _WS_RE.sub(" ", d.full_value).strip())
                for d in rule.declarations
            ),
        )
        for rule in stylesheet.walk_rules()
    ]


def _group(rules: list[FlatRule]) -> dict[str, list[FlatRule]]:
    groups: dict[str, list[FlatRule]] = {}
    for rule in rules:
        groups.setdefault(rule.selector, []).append(rule)
    return groups


def _compare_blocks(selector: str, before: FlatRule, after: FlatRule) -> list[DiffEntry]:
    # Within one block the last declaration of a property wins.
    old = dict(before.declarations)
    new = dict(after.declarations)
    entries: list[DiffEntry] = []
    for prop, old_value in old.items():
        if prop not in new:
            entries.append(
                DiffEntry(
                    kind=DiffKind.REMOVED_PROPERTY,
                    selector=selector,
                    property=prop,
                    old_value=old_value,
                    critical=is_critical_property(prop),
                )
            )
        elif new[prop] != old_value:
            entries.append(
                DiffEntry(
                    kind=DiffKind.CHANGED_VALUE,
                    selector=selector,
                    property=prop,
                    old_value=old_value,
                    new_value=new[prop],
                    critical=is_critical_property(prop),
                )
            )
    for prop, new_value in new.items():
        if prop not in old:
            entries.append(
                DiffEntry(
                    kind=DiffKind.ADDED_PROPERTY,
                    selector=selector,
                    property=prop,
                    new_value=new_value,
                    critical=is_critical_property(prop),
                )
            )
    return entries


def diff(
    before_text: str,
    after_text: str,
    before_name: str | None = None,
    after_name: str | None = None,
) -> DiffReport:
    """Compare two stylesheet texts and classify every difference.

    The names only label parse errors.
    """
    before_norm = normalize_hex_colors(before_text)
    after_norm = normalize_hex_colors(after_text)
    if before_norm == after_norm:
        return DiffReport(identical=True)

    before_rules = flatten_rules(parse_css(before_norm, source_name=before_name))
    after_rules = flatten_rules(parse_css(after_norm, source_name=after_name))
    logger.info("Before: %d rules, after: %d rules", len(before_rules), len(after_rules))

    before_map = _group(before_rules)
    after_map = _group(after_rules)
    entries: list[DiffEntry] = []

    for selector, items in before_map.items():
        if selector not in after_map:
            entries.append(
                DiffEntry(
                    kind=DiffKind.REMOVED_SELECTOR,
                    selector=selector,
                    rule_count=len(items),
                    critical=True,
                )
            )
    for selector, items in after_map.items():
        if selector not in before_map:
            entries.append(
                DiffEntry(
                    kind=DiffKind.ADDED_SELECTOR,
                    selector=selector,
                    rule_count=len(items),
                    critical=True,
                )
            )
    for selector, items in before_map.items():
        others = after_map.get(selector)
        if not others:
            continue
        # Repeated blocks of the same selector are paired up in order.
        for before_rule, after_rule in zip(items, others):
            entries.extend(_compare_blocks(selector, before_rule, after_rule))

    return DiffReport(
        identical=False,
        entries=entries,
        before_rules=len(before_rules),
        after_rules=len(after_rules),
    )
