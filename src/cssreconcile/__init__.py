"""cssreconcile: separate theme customizations from library CSS."""

from cssreconcile.canonical import canonicalize
from cssreconcile.classify import Classification, classify
from cssreconcile.differ import diff
from cssreconcile.model.diff import DiffReport, Verdict
from cssreconcile.patterns import DEFAULT_PATTERNS, Pattern, PatternKind, PatternTable
from cssreconcile.reference import ReferenceSet, build_reference_set
from cssreconcile.stylesheet import ParseError, Stylesheet, StyleRule, parse_css
from cssreconcile.substitute import substitute
from cssreconcile.variables import VariableTable, parse_variables

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "parse_css",
    "ParseError",
    "Stylesheet",
    "StyleRule",
    "canonicalize",
    "parse_variables",
    "VariableTable",
    "build_reference_set",
    "ReferenceSet",
    "Pattern",
    "PatternKind",
    "PatternTable",
    "DEFAULT_PATTERNS",
    "classify",
    "Classification",
    "substitute",
    "diff",
    "DiffReport",
    "Verdict",
]
