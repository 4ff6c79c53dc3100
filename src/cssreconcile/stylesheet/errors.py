"""Parser error types."""


class ParseError(Exception):
    """Raised when CSS source cannot be parsed into a consistent tree."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        source: str | None = None,
    ):
        self.line = line
        self.column = column
        self.source = source
        super().__init__(message)

    @property
    def location(self) -> str:
        """``path, line N, column M`` with whatever parts are known."""
        parts = []
        if self.source:
            parts.append(self.source)
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.column is not None:
            parts.append(f"column {self.column}")
        return ", ".join(parts)
