"""Diff model: structured differences between two versions of a stylesheet."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DiffKind(Enum):
    """Kind of difference detected for a selector."""

    REMOVED_SELECTOR = "REMOVED_SELECTOR"
    ADDED_SELECTOR = "ADDED_SELECTOR"
    REMOVED_PROPERTY = "REMOVED_PROPERTY"
    ADDED_PROPERTY = "ADDED_PROPERTY"
    CHANGED_VALUE = "CHANGED_VALUE"


class Verdict(Enum):
    """Three-way outcome of a comparison."""

    IDENTICAL = "identical"
    PASS = "pass"
    FAIL = "fail"

    @property
    def exit_code(self) -> int:
        return 1 if self is Verdict.FAIL else 0


@dataclass(frozen=True)
class DiffEntry:
    """A single difference between the before and after stylesheets.

    Attributes:
        kind: What changed.
        selector: Literal selector text the difference belongs to.
        critical: Whether the change can alter rendering.
        property: The property involved, for property-level differences.
        old_value: Value in the before stylesheet, if any.
        new_value: Value in the after stylesheet, if any.
        rule_count: For selector-level differences, how many blocks used it.
    """

    kind: DiffKind
    selector: str
    critical: bool
    property: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    rule_count: int | None = None

    def __str__(self) -> str:
        text = f"{self.kind.value} [{self.selector}]"
        if self.property:
            text += f" {self.property}"
        if self.old_value is not None and self.new_value is not None:
            text += f": {self.old_value} -> {self.new_value}"
        elif self.old_value is not None:
            text += f": {self.old_value}"
        elif self.new_value is not None:
            text += f": {self.new_value}"
        return text


@dataclass(frozen=True)
class DiffReport:
    """Result of comparing two stylesheet texts."""

    identical: bool
    entries: list[DiffEntry] = field(default_factory=list)
    before_rules: int = 0
    after_rules: int = 0

    @property
    def critical_entries(self) -> list[DiffEntry]:
        return [e for e in self.entries if e.critical]

    @property
    def verdict(self) -> Verdict:
        if self.identical:
            return Verdict.IDENTICAL
        if self.critical_entries:
            return Verdict.FAIL
        return Verdict.PASS

    @property
    def exit_code(self) -> int:
        return self.verdict.exit_code

    def by_kind(self, critical_only: bool = False) -> dict[DiffKind, list[DiffEntry]]:
        """Group entries by kind, in order of first occurrence."""
        groups: dict[DiffKind, list[DiffEntry]] = {}
        for entry in self.entries:
            if critical_only and not entry.critical:
                continue
            groups.setdefault(entry.kind, []).append(entry)
        return groups
