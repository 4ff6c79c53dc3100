"""Stylesheet model: Declaration, StyleRule, AtRule, Comment, and Stylesheet.

The tree is mutable: the classifier drops rules from it and the substitution
pass rewrites declaration values in place.  Each node keeps the raw text it
was parsed from so untouched rules serialize back verbatim.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field


@dataclass
class Declaration:
    """A single ``property: value`` pair inside a block."""

    prop: str
    value: str
    important: bool = False

    @property
    def full_value(self) -> str:
        """The value including a trailing ``!important`` flag, if any."""
        if self.important:
            return f"{self.value} !important"
        return self.value

    def to_css(self) -> str:
        return f"{self.prop}: {self.full_value};"


@dataclass
class StyleRule:
    """A selector (possibly a comma-separated group) and its declarations.

    Duplicate declarations of the same property are kept in source order.
    """

    selector: str
    declarations: list[Declaration] = field(default_factory=list)
    raw: str = ""
    line: int | None = None
    modified: bool = False

    def to_css(self) -> str:
        if self.raw and not self.modified:
            return self.raw
        return _block(self.selector, [d.to_css() for d in self.declarations])


@dataclass
class Comment:
    """A ``/* ... */`` comment between rules."""

    text: str

    def to_css(self) -> str:
        return self.text


@dataclass
class AtRule:
    """An at-rule in one of three shapes.

    - statement (``@import url(x);``): ``rules`` and ``declarations`` are None.
    - rule list (``@media``, ``@supports``, ``@keyframes``...): ``rules`` holds
      the nested nodes.
    - declaration block (``@font-face``, ``@page``): ``declarations`` holds
      the block contents.
    """

    name: str
    prelude: str = ""
    rules: list[Node] | None = None
    declarations: list[Declaration] | None = None
    raw: str = ""
    line: int | None = None
    modified: bool = False

    @property
    def header(self) -> str:
        if self.prelude:
            return f"@{self.name} {self.prelude}"
        return f"@{self.name}"

    @property
    def has_rule_list(self) -> bool:
        return self.rules is not None

    @property
    def is_empty(self) -> bool:
        """True for a rule-list at-rule holding no rules (comments don't count)."""
        if self.rules is None:
            return False
        return not any(isinstance(n, (StyleRule, AtRule)) for n in self.rules)

    def to_css(self, strip_comments: bool = False) -> str:
        if self.rules is not None:
            children = [
                _node_css(n, strip_comments)
                for n in self.rules
                if not (strip_comments and isinstance(n, Comment))
            ]
            body = "\n".join(_indent(c) for c in children)
            if not body:
                return f"{self.header} {{\n}}"
            return f"{self.header} {{\n{body}\n}}"
        if self.raw and not self.modified:
            return self.raw
        if self.declarations is not None:
            return _block(self.header, [d.to_css() for d in self.declarations])
        return f"{self.header};"


Node = StyleRule | AtRule | Comment


@dataclass
class Stylesheet:
    """An ordered list of top-level nodes parsed from one CSS source."""

    nodes: list[Node] = field(default_factory=list)

    def walk(self) -> Iterator[Node]:
        """Yield every node depth-first in source order."""
        yield from _walk(self.nodes)

    def walk_rules(self) -> Iterator[StyleRule]:
        """Yield every style rule, including rules nested inside at-rules."""
        for node in self.walk():
            if isinstance(node, StyleRule):
                yield node

    def walk_rules_with_context(self) -> Iterator[tuple[StyleRule, tuple[str, ...]]]:
        """Yield ``(rule, enclosing at-rule headers)`` pairs."""
        yield from _walk_context(self.nodes, ())

    @property
    def rule_count(self) -> int:
        return sum(1 for _ in self.walk_rules())

    def depth(self) -> int:
        """Maximum at-rule nesting depth (0 for a flat stylesheet)."""
        return _depth(self.nodes)

    def remove_rules(self, predicate: Callable[[StyleRule], bool]) -> list[StyleRule]:
        """Remove every style rule for which *predicate* is true; return them."""
        removed: list[StyleRule] = []
        _remove_rules(self.nodes, predicate, removed)
        return removed

    def strip_comments(self) -> int:
        """Remove every comment node from the tree; returns how many went."""
        return _strip_comments(self.nodes)

    def to_css(self, strip_comments: bool = False) -> str:
        parts = [
            _node_css(n, strip_comments)
            for n in self.nodes
            if not (strip_comments and isinstance(n, Comment))
        ]
        if not parts:
            return ""
        return "\n\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _block(header: str, lines: list[str]) -> str:
    if not lines:
        return f"{header} {{\n}}"
    body = "\n".join(f"  {line}" for line in lines)
    return f"{header} {{\n{body}\n}}"


def _indent(text: str) -> str:
    # Raw text of a nested rule carries its source indentation on every line
    # but the first; drop the common part so re-serializing never drifts.
    first, *rest = text.split("\n")
    margins = [len(line) - len(line.lstrip()) for line in rest if line.strip()]
    cut = min(margins, default=0)
    lines = [first] + [line[cut:] for line in rest]
    return "\n".join(f"  {line}" if line.strip() else "" for line in lines)


def _node_css(node: Node, strip_comments: bool) -> str:
    if isinstance(node, AtRule):
        return node.to_css(strip_comments=strip_comments)
    return node.to_css()


def _walk(nodes: list[Node]) -> Iterator[Node]:
    for node in nodes:
        yield node
        if isinstance(node, AtRule) and node.rules is not None:
            yield from _walk(node.rules)


def _walk_context(
    nodes: list[Node], context: tuple[str, ...]
) -> Iterator[tuple[StyleRule, tuple[str, ...]]]:
    for node in nodes:
        if isinstance(node, StyleRule):
            yield node, context
        elif isinstance(node, AtRule) and node.rules is not None:
            yield from _walk_context(node.rules, context + (node.header,))


def _depth(nodes: list[Node]) -> int:
    deepest = 0
    for node in nodes:
        if isinstance(node, AtRule) and node.rules is not None:
            deepest = max(deepest, 1 + _depth(node.rules))
    return deepest


def _remove_rules(
    nodes: list[Node], predicate: Callable[[StyleRule], bool], removed: list[StyleRule]
) -> None:
    kept: list[Node] = []
    for node in nodes:
        if isinstance(node, StyleRule) and predicate(node):
            removed.append(node)
            continue
        if isinstance(node, AtRule) and node.rules is not None:
            _remove_rules(node.rules, predicate, removed)
        kept.append(node)
    nodes[:] = kept


def _strip_comments(nodes: list[Node]) -> int:
    removed = 0
    kept: list[Node] = []
    for node in nodes:
        if isinstance(node, Comment):
            removed += 1
            continue
        if isinstance(node, AtRule) and node.rules is not None:
            removed += _strip_comments(node.rules)
        kept.append(node)
    nodes[:] = kept
    return removed
