"""
Entry points: script text in, resolved document and dialogue graph out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .builder import build
from .config import ParserConfig
from .errors import InputTooLarge
from .ir.document import Document
from .ir.events import Event
from .ir.graph import DialogueGraph
from .lexer import Lexer

logger = logging.getLogger(__name__)


def parse(text: str, config: ParserConfig | None = None) -> tuple[Document, DialogueGraph]:
    """
    Parse a script into its document and dialogue graph.

    Lexing and graph building run in a single forward pass; choice targets
    are resolved once the whole script has been seen.

    Args:
        text: Script text
        config: Optional parser settings

    Returns:
        (Document, DialogueGraph) pair, both immutable

    Raises:
        ParseError: Malformed signal or reserved prompt
        GraphError: Duplicate bookmark or unknown choice target
    """
    config = config or ParserConfig()
    limit = config.max_input_length
    if limit is not None and len(text) > limit:
        raise InputTooLarge(len(text), limit)

    logger.debug("Parsing %s (%d chars)", config.source_name or "script", len(text))
    return build(text, Lexer(text, config), config)


def parse_events(
    text: str,
    events: Iterable[Event],
    config: ParserConfig | None = None,
) -> tuple[Document, DialogueGraph]:
    """
    Build the document and graph from events already lexed from text.

    Args:
        text: The script the events were lexed from
        events: Events in input order
        config: Optional parser settings

    Returns:
        (Document, DialogueGraph) pair
    """
    return build(text, events, config)
