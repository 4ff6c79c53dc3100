"""Reference sets: canonical keys of every rule in known library stylesheets."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from cssreconcile.canonical import CanonicalKey, canonicalize
from cssreconcile.stylesheet import Stylesheet, parse_css

__all__ = ["ReferenceSet", "build_reference_set", "strip_preserved_comments"]

logger = logging.getLogger(__name__)

_PRESERVED_COMMENT_RE = re.compile(r"/\*!.*?\*/", re.DOTALL)


def strip_preserved_comments(text: str) -> str:
    """Remove ``/*! ... */`` comment blocks from raw CSS text."""
    return _PRESERVED_COMMENT_RE.sub("", text)


@dataclass(frozen=True)
class ReferenceSet:
    """An immutable set of canonical keys for "already known" rules."""

    keys: frozenset[CanonicalKey] = frozenset()

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[CanonicalKey]:
        return iter(self.keys)

    @classmethod
    def from_stylesheets(cls, stylesheets: Iterable[Stylesheet]) -> ReferenceSet:
        keys: set[CanonicalKey] = set()
        for stylesheet in stylesheets:
            keys.update(canonicalize(rule) for rule in stylesheet.walk_rules())
        return cls(keys=frozenset(keys))


def build_reference_set(
    sources: Sequence[str],
    strip_preserved: bool = False,
    names: Sequence[str] | None = None,
) -> ReferenceSet:
    """Parse each CSS source and collect the canonical key of every rule.

    Rules nested in at-rules are included.  With *strip_preserved*, ``/*!``
    comment blocks are removed before parsing.  *names* (one per source) are
    attached to any :class:`ParseError` raised.
    """
    sheets = []
    for index, text in enumerate(sources):
        if strip_preserved:
            text = strip_preserved_comments(text)
        name = names[index] if names else None
        sheets.append(parse_css(text, source_name=name))
    reference = ReferenceSet.from_stylesheets(sheets)
    logger.info(
        "Built reference set with %d unique rules from %d source(s)",
        len(reference),
        len(sheets),
    )
    return reference
