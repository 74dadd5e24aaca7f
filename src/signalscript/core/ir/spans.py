"""Spans, identifiers and source locations.

A span never copies text: it records a half-open character range into the
script it was lexed from, and ``Span.slice`` re-extracts the text on demand.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_IDENTIFIER_CHARS = "-"


class SourceLocation(BaseModel):
    """Line/column position of a character offset.

    Attributes:
        offset: 0-indexed character offset
        line: 1-indexed line number
        column: 1-indexed column number
    """

    offset: int
    line: int
    column: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class Span(BaseModel):
    """Half-open character range ``[start, end)`` into a script."""

    start: int = Field(ge=0, description="First character offset")
    end: int = Field(ge=0, description="One past the last character offset")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> Span:
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")
        return self

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def slice(self, text: str) -> str:
        """Return the text this span covers."""
        if self.end > len(text):
            raise IndexError(f"span {self} is out of bounds for text of length {len(text)}")
        return text[self.start : self.end]

    def location(self, text: str) -> SourceLocation:
        """Return the line/column position of the span start."""
        line = text.count("\n", 0, self.start) + 1
        column = self.start - (text.rfind("\n", 0, self.start) + 1) + 1
        return SourceLocation(offset=self.start, line=line, column=column)

    def strip(self, text: str) -> Span:
        """Return the span narrowed to exclude surrounding whitespace."""
        content = self.slice(text)
        stripped = content.lstrip()
        start = self.start + len(content) - len(stripped)
        end = start + len(stripped.rstrip())
        return Span(start=start, end=end)


def is_identifier_start(char: str) -> bool:
    """Letters, digits and ``_`` may open an identifier."""
    return char.isalnum() or char == "_"


def is_identifier_char(char: str, extra: str = DEFAULT_IDENTIFIER_CHARS) -> bool:
    """Characters that may continue an identifier."""
    return char.isalnum() or char == "_" or char in extra


def is_identifier(value: str, extra: str = DEFAULT_IDENTIFIER_CHARS) -> bool:
    """Check that value is a complete, non-empty identifier."""
    if not value or not is_identifier_start(value[0]):
        return False
    return all(is_identifier_char(c, extra) for c in value[1:])
