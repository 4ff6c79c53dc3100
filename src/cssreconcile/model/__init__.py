"""cssreconcile model layer -- public type re-exports."""

from cssreconcile.model.diff import DiffEntry, DiffKind, DiffReport, Verdict

__all__ = [
    "DiffKind",
    "DiffEntry",
    "DiffReport",
    "Verdict",
]
