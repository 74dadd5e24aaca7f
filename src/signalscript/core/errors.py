"""
Error types for SignalScript lexing, style resolution, and graph building.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ir.spans import Span


class SignalScriptError(Exception):
    """Base exception for all SignalScript errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message

    @property
    def offset(self) -> int | None:
        """Character offset into the parsed text, when known."""
        return self.context.offset if self.context else None


class ParseError(SignalScriptError):
    """
    Raised when a script cannot be turned into events or content items.

    Examples:
    - Unterminated parameter
    - Reserved prompt without its parameter
    - Unknown style character
    """

    pass


class GraphError(SignalScriptError):
    """
    Raised when bookmarks and choices do not form a consistent graph.

    Examples:
    - Bookmark declared twice
    - Choice targeting a bookmark that is never declared
    """

    pass


class ConfigError(SignalScriptError):
    """Raised when a configuration file holds values of the wrong type."""

    pass


class UnterminatedParameter(ParseError):
    """A `{` was opened without a closing `}` before the end of input."""

    pass


class MissingParameter(ParseError):
    """A reserved prompt was used without its required parameter."""

    prompt = ""

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(f"'@{self.prompt}' requires a {{...}} parameter", context)


class MissingBookmarkName(MissingParameter):
    prompt = "bookmark"


class MissingChoiceTarget(MissingParameter):
    prompt = "choice"


class MissingStyleFlags(MissingParameter):
    prompt = "style"


class InvalidIdentifier(ParseError):
    """A bookmark name or choice target is not a valid identifier."""

    def __init__(self, value: str, context: ErrorContext | None = None):
        self.value = value
        super().__init__(f"Invalid identifier {value!r}", context)


class UnknownStyleChar(ParseError):
    """A style parameter holds a character outside `pcqbis`."""

    def __init__(self, char: str, context: ErrorContext | None = None):
        self.char = char
        super().__init__(
            f"Unknown style character {char!r} (expected one of p, c, q, b, i, s)",
            context,
        )


class InputTooLarge(ParseError):
    """Input exceeds the configured maximum length."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Input of {length} characters exceeds the limit of {limit}")


class DuplicateBookmark(GraphError):
    """The same bookmark name was declared twice."""

    def __init__(self, name: str, first: Span, context: ErrorContext | None = None):
        self.name = name
        self.first = first
        super().__init__(
            f"Duplicate bookmark '{name}' (first declared at offset {first.start})",
            context,
        )


class UnknownBookmarkTarget(GraphError):
    """A choice targets a bookmark that is never declared."""

    def __init__(
        self,
        name: str,
        names: tuple[str, ...] = (),
        context: ErrorContext | None = None,
    ):
        self.name = name
        self.names = names or (name,)
        message = f"Choice targets unknown bookmark '{name}'"
        others = [n for n in self.names if n != name]
        if others:
            message += f" (also unresolved: {', '.join(others)})"
        super().__init__(message, context)


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        offset: Character offset into the parsed text (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional text showing the error location
        source_name: Optional label of the parsed script (e.g. a file name)
    """

    offset: int
    line: int
    column: int
    snippet: str | None = None
    source_name: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "intro.txt:10:5"
        """
        location = f"{self.source_name or '<script>'}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet shows up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_context(
    text: str,
    offset: int,
    source_name: str | None = None,
) -> ErrorContext:
    """
    Build an ErrorContext for a character offset in text.

    Args:
        text: The parsed script
        offset: Character offset of the error
        source_name: Optional script label

    Returns:
        ErrorContext with line, column and a snippet of up to 2 preceding lines
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    column = offset - line_start + 1

    lines = text.split("\n")
    first = max(0, line - 3)
    snippet = "\n".join(lines[first:line])

    return ErrorContext(
        offset=offset,
        line=line,
        column=column,
        snippet=snippet,
        source_name=source_name,
    )
