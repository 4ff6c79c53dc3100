"""Input checking shared by every command."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InputFile:
    """A required input: a human name and the path it is expected at."""

    name: str
    path: Path

    def __str__(self) -> str:
        return f"{self.name}: {self.path}"


class MissingInputError(Exception):
    """Raised before any work starts when required input files are absent."""

    def __init__(self, missing: list[InputFile], hint: str | None = None) -> None:
        self.missing = missing
        self.hint = hint
        super().__init__(
            f"Missing {len(missing)} required file(s): "
            + "; ".join(str(m) for m in missing)
        )


def require_inputs(inputs: Iterable[InputFile], hint: str | None = None) -> None:
    """Raise :class:`MissingInputError` listing every input that does not exist."""
    missing = [item for item in inputs if not item.path.is_file()]
    if missing:
        raise MissingInputError(missing, hint=hint)
