from cssreconcile.stylesheet.errors import ParseError
from cssreconcile.stylesheet.model import (
    AtRule,
    Comment,
    Declaration,
    Node,
    StyleRule,
    Stylesheet,
)
from cssreconcile.stylesheet.parser import parse_css

__all__ = [
    "parse_css",
    "ParseError",
    "Stylesheet",
    "StyleRule",
    "AtRule",
    "Comment",
    "Declaration",
    "Node",
]
