"""
SignalScript - a markup dialect for branching dialogue scripts.

Plain text is interleaved with ``@`` signals. ``@bookmark{name}`` and
``@choice{target}`` build a dialogue graph; ``@style{qb}@{text}`` styles the
text that follows.

Usage:
    from signalscript import parse

    document, graph = parse(script)
    graph.successors("greet")
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

from .core import ir
from .core.config import ParserConfig, load_config
from .core.errors import GraphError, ParseError, SignalScriptError
from .core.ir import (
    ROOT,
    Bookmark,
    ChoiceEdge,
    DialogueGraph,
    Document,
    PlainText,
    Signal,
    Span,
    Style,
    StyledText,
    TextRun,
    UnknownSignal,
)
from .core.lexer import Lexer, tokenize
from .core.parser import parse, parse_events

try:
    __version__ = _metadata_version("signalscript")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "ir",
    "parse",
    "parse_events",
    "Lexer",
    "tokenize",
    "ParserConfig",
    "load_config",
    "SignalScriptError",
    "ParseError",
    "GraphError",
    "ROOT",
    "Bookmark",
    "ChoiceEdge",
    "DialogueGraph",
    "Document",
    "PlainText",
    "Signal",
    "Span",
    "Style",
    "StyledText",
    "TextRun",
    "UnknownSignal",
]
