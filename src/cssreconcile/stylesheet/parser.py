"""CSS parser: builds the stylesheet model on top of tinycss2.

tinycss2 reports syntax problems as ``error`` nodes instead of raising.  Any
such node anywhere in the tree is turned into a :class:`ParseError`; a tree
with holes in it would silently corrupt the stylesheet written back out.
"""

from __future__ import annotations

import tinycss2

from cssreconcile.stylesheet.errors import ParseError
from cssreconcile.stylesheet.model import (
    AtRule,
    Comment,
    Declaration,
    Node,
    StyleRule,
    Stylesheet,
)

__all__ = ["parse_css", "RULE_LIST_AT_RULES"]

# At-rules whose block holds nested rules rather than declarations.
RULE_LIST_AT_RULES = frozenset({
    "media",
    "supports",
    "document",
    "-moz-document",
    "layer",
    "container",
    "scope",
    "starting-style",
    "keyframes",
    "-webkit-keyframes",
    "-moz-keyframes",
    "-o-keyframes",
})


def _error(node) -> ParseError:
    return ParseError(
        f"{node.kind}: {node.message}",
        line=getattr(node, "source_line", None),
        column=getattr(node, "source_column", None),
    )


def _check_tokens(tokens) -> None:
    """Raise on error tokens (bad strings, bad urls, stray brackets)."""
    for token in tokens or ():
        if token.type == "error":
            raise _error(token)
        if token.type == "function":
            _check_tokens(token.arguments)
        elif token.type in ("() block", "[] block", "{} block"):
            _check_tokens(token.content)


def _segments(content):
    """Split block content into ``;``-terminated runs of component values."""
    segment = []
    for token in content or ():
        segment.append(token)
        if token.type == "literal" and token.value == ";":
            yield segment
            segment = []
    if segment:
        yield segment


def _is_literal(token, value: str) -> bool:
    return token.type == "literal" and token.value == value


def _star_hack(segment) -> Declaration | None:
    """Build a declaration from an IE ``*prop: value`` hack, else None."""
    significant = [t for t in segment if t.type not in ("whitespace", "comment")]
    if (
        len(significant) < 3
        or not _is_literal(significant[0], "*")
        or significant[1].type != "ident"
        or not _is_literal(significant[2], ":")
    ):
        return None
    colon = next(i for i, t in enumerate(segment) if t is significant[2])
    value = [t for t in segment[colon + 1:] if not _is_literal(t, ";")]
    _check_tokens(value)

    important = False
    tail = [t for t in value if t.type not in ("whitespace", "comment")]
    if (
        len(tail) >= 2
        and _is_literal(tail[-2], "!")
        and tail[-1].type == "ident"
        and tail[-1].lower_value == "important"
    ):
        important = True
        cut = next(i for i in range(len(value) - 1, -1, -1) if value[i] is tail[-2])
        value = value[:cut]
    return Declaration(
        prop="*" + significant[1].value,
        value=tinycss2.serialize(value).strip(),
        important=important,
    )


def _parse_declarations(content, in_style_rule: bool) -> list[Declaration]:
    # tinycss2 reads "*zoom: 1" as a broken nested rule; pull such hacks out
    # first and parse the runs between them normally.
    declarations: list[Declaration] = []
    pending = []
    for segment in _segments(content):
        hack = _star_hack(segment)
        if hack is None:
            pending.extend(segment)
            continue
        declarations.extend(_parse_plain_declarations(pending, in_style_rule))
        declarations.append(hack)
        pending = []
    declarations.extend(_parse_plain_declarations(pending, in_style_rule))
    return declarations


def _parse_plain_declarations(content, in_style_rule: bool) -> list[Declaration]:
    declarations: list[Declaration] = []
    items = tinycss2.parse_blocks_contents(
        content, skip_comments=True, skip_whitespace=True
    )
    for item in items:
        if item.type == "error":
            raise _error(item)
        if item.type == "qualified-rule":
            raise ParseError(
                "nested rules are not supported",
                line=item.source_line,
                column=item.source_column,
            )
        if item.type == "at-rule":
            if in_style_rule:
                raise ParseError(
                    f"unexpected @{item.at_keyword} inside a style rule",
                    line=item.source_line,
                    column=item.source_column,
                )
            # Margin boxes inside @page and the like survive through ``raw``.
            continue
        _check_tokens(item.value)
        declarations.append(
            Declaration(
                prop=item.name,
                value=tinycss2.serialize(item.value).strip(),
                important=item.important,
            )
        )
    return declarations


def _convert_qualified(rule) -> StyleRule:
    _check_tokens(rule.prelude)
    selector = tinycss2.serialize(rule.prelude).strip()
    if not selector:
        raise ParseError(
            "rule without a selector",
            line=rule.source_line,
            column=rule.source_column,
        )
    return StyleRule(
        selector=selector,
        declarations=_parse_declarations(rule.content, in_style_rule=True),
        raw=rule.serialize(),
        line=rule.source_line,
    )


def _convert_at_rule(rule) -> AtRule:
    _check_tokens(rule.prelude)
    name = rule.lower_at_keyword
    at_rule = AtRule(
        name=name,
        prelude=" ".join(tinycss2.serialize(rule.prelude).split()),
        raw=rule.serialize(),
        line=rule.source_line,
    )
    if rule.content is None:
        return at_rule
    if name in RULE_LIST_AT_RULES:
        at_rule.rules = _convert_nodes(
            tinycss2.parse_rule_list(
                rule.content, skip_comments=False, skip_whitespace=True
            )
        )
    else:
        at_rule.declarations = _parse_declarations(rule.content, in_style_rule=False)
    return at_rule


def _convert_nodes(items) -> list[Node]:
    nodes: list[Node] = []
    for item in items:
        if item.type == "error":
            raise _error(item)
        if item.type == "whitespace":
            continue
        if item.type == "comment":
            nodes.append(Comment(text=f"/*{item.value}*/"))
        elif item.type == "qualified-rule":
            nodes.append(_convert_qualified(item))
        elif item.type == "at-rule":
            nodes.append(_convert_at_rule(item))
        else:
            raise ParseError(
                f"unexpected {item.type} token at rule level",
                line=getattr(item, "source_line", None),
                column=getattr(item, "source_column", None),
            )
    return nodes


def parse_css(source: str, source_name: str | None = None) -> Stylesheet:
    """Parse CSS text into a :class:`Stylesheet`.

    Rules nested in ``@media`` and friends are parsed recursively.  Raises
    :class:`ParseError` on the first syntax error found, tagged with
    *source_name* when given.
    """
    items = tinycss2.parse_stylesheet(
        source, skip_comments=False, skip_whitespace=True
    )
    try:
        return Stylesheet(nodes=_convert_nodes(items))
    except ParseError as exc:
        if exc.source is None:
            exc.source = source_name
        raise
