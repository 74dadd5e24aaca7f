"""
SignalScript intermediate representation (IR) types.

Spans and events come out of the lexer; documents and dialogue graphs come
out of the builder. All types are re-exported from this package.
"""

from .document import (
    ContentItem,
    Document,
    PlainText,
    Style,
    StyledText,
    StyleFlags,
    UnknownSignal,
    format_styles,
)
from .events import Event, Signal, SignalShape, TextRun
from .graph import ROOT, Bookmark, ChoiceEdge, DialogueGraph
from .spans import (
    DEFAULT_IDENTIFIER_CHARS,
    SourceLocation,
    Span,
    is_identifier,
    is_identifier_char,
    is_identifier_start,
)

__all__ = [
    # Spans
    "DEFAULT_IDENTIFIER_CHARS",
    "SourceLocation",
    "Span",
    "is_identifier",
    "is_identifier_char",
    "is_identifier_start",
    # Events
    "Event",
    "Signal",
    "SignalShape",
    "TextRun",
    # Document
    "ContentItem",
    "Document",
    "PlainText",
    "Style",
    "StyledText",
    "StyleFlags",
    "UnknownSignal",
    "format_styles",
    # Graph
    "ROOT",
    "Bookmark",
    "ChoiceEdge",
    "DialogueGraph",
]
