"""Core SignalScript functionality: IR, lexer, graph builder, parser, errors, configuration."""

from . import ir
from .builder import GraphBuilder, PromptKind, classify_prompt
from .config import ParserConfig, load_config
from .errors import (
    ConfigError,
    DuplicateBookmark,
    ErrorContext,
    GraphError,
    InputTooLarge,
    InvalidIdentifier,
    MissingBookmarkName,
    MissingChoiceTarget,
    MissingParameter,
    MissingStyleFlags,
    ParseError,
    SignalScriptError,
    UnknownBookmarkTarget,
    UnknownStyleChar,
    UnterminatedParameter,
)
from .lexer import Lexer, tokenize
from .parser import parse, parse_events

__all__ = [
    "ir",
    "Lexer",
    "tokenize",
    "GraphBuilder",
    "PromptKind",
    "classify_prompt",
    "parse",
    "parse_events",
    "ParserConfig",
    "load_config",
    "SignalScriptError",
    "ParseError",
    "GraphError",
    "ConfigError",
    "ErrorContext",
    "UnterminatedParameter",
    "MissingParameter",
    "MissingBookmarkName",
    "MissingChoiceTarget",
    "MissingStyleFlags",
    "InvalidIdentifier",
    "UnknownStyleChar",
    "InputTooLarge",
    "DuplicateBookmark",
    "UnknownBookmarkTarget",
]
