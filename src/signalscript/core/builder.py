"""
Graph builder and style resolver.

Consumes lexer events in one forward pass and produces the resolved
``Document`` and ``DialogueGraph``. Three prompts are reserved:

- ``@bookmark{name}`` declares a graph node and makes it the active bookmark
- ``@choice{target}`` adds an edge from the active bookmark (or the root)
- ``@style{flags}`` arms a style for the next ``@{...}`` signal

A pending style only applies to the signal right after it. Any other event
discards it, and that event is then handled as usual.

Choice targets are checked once every bookmark is known, so a choice may
point at a bookmark declared further down.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .config import ParserConfig
from .errors import (
    DuplicateBookmark,
    ErrorContext,
    InvalidIdentifier,
    MissingBookmarkName,
    MissingChoiceTarget,
    MissingParameter,
    MissingStyleFlags,
    UnknownBookmarkTarget,
    UnknownStyleChar,
    make_context,
)
from .ir.document import (
    ContentItem,
    Document,
    PlainText,
    Style,
    StyledText,
    StyleFlags,
    UnknownSignal,
    format_styles,
)
from .ir.events import Event, Signal, TextRun
from .ir.graph import ROOT, Bookmark, ChoiceEdge, DialogueGraph
from .ir.spans import Span, is_identifier

logger = logging.getLogger(__name__)


class PromptKind(StrEnum):
    """Reserved prompts, plus OTHER for author-defined ones."""

    BOOKMARK = "bookmark"
    CHOICE = "choice"
    STYLE = "style"
    OTHER = "other"


_RESERVED = {
    PromptKind.BOOKMARK.value: PromptKind.BOOKMARK,
    PromptKind.CHOICE.value: PromptKind.CHOICE,
    PromptKind.STYLE.value: PromptKind.STYLE,
}


def classify_prompt(prompt: str) -> PromptKind:
    """Map a prompt name to its kind. Matching is case-sensitive."""
    return _RESERVED.get(prompt, PromptKind.OTHER)


# ---------------------------------------------------------------------------
# Style register states
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Idle:
    """No style pending."""


@dataclass(frozen=True)
class StyleArmed:
    """A ``@style{...}`` was resolved and waits for a ``@{...}`` signal."""

    styles: StyleFlags
    span: Span


BuilderState = Idle | StyleArmed

IDLE = Idle()


def parse_styles(text: str, span: Span, source_name: str | None = None) -> StyleFlags:
    """
    Parse the characters of a style parameter into a flag set.

    Args:
        text: Full script text
        span: Style parameter, already stripped of surrounding whitespace
        source_name: Optional label for error messages

    Returns:
        Set of styles; order and repetition of characters do not matter

    Raises:
        UnknownStyleChar: For any character outside ``pcqbis``
    """
    styles: set[Style] = set()
    for offset in range(span.start, span.end):
        char = text[offset]
        try:
            styles.add(Style(char))
        except ValueError:
            raise UnknownStyleChar(char, make_context(text, offset, source_name)) from None
    return frozenset(styles)


@dataclass
class _Section:
    """A bookmark or choice signal, and where the text it governs begins."""

    signal: Span
    bookmark: str | None = None
    choice: tuple[str, str] | None = None  # (source, target)


class GraphBuilder:
    """
    Single-pass builder over the events of one script.

    Feed every event in order, then call ``finish``. Any error aborts the
    build; no partial result is produced.
    """

    def __init__(self, text: str, config: ParserConfig | None = None):
        self.text = text
        self.config = config or ParserConfig()
        self.state: BuilderState = IDLE
        self.items: list[ContentItem] = []
        self.current_bookmark = ROOT
        self._bookmark_spans: dict[str, Span] = {}
        self._sections: list[_Section] = []

    # -- Event handling --

    def feed(self, event: Event) -> None:
        if event.span.end > len(self.text):
            raise ValueError(f"event span {event.span} is outside the script")

        if isinstance(self.state, StyleArmed):
            if isinstance(event, Signal) and event.is_promptless:
                assert event.parameter is not None
                self.items.append(StyledText(styles=self.state.styles, span=event.parameter))
                self.state = IDLE
                return
            self._discard_style(event)

        self._handle_idle(event)

    def _handle_idle(self, event: Event) -> None:
        if isinstance(event, TextRun):
            self.items.append(PlainText(span=event.span))
            return

        if event.prompt is None:
            if event.parameter is not None:
                self.items.append(PlainText(span=event.parameter, from_signal=True))
            # A bare `@` leaves nothing in the document
            return

        kind = classify_prompt(event.prompt)
        if kind is PromptKind.BOOKMARK:
            self._register_bookmark(event)
        elif kind is PromptKind.CHOICE:
            self._add_choice(event)
        elif kind is PromptKind.STYLE:
            self._arm_style(event)
        else:
            self.items.append(
                UnknownSignal(prompt=event.prompt, parameter=event.parameter, span=event.span)
            )

    def _register_bookmark(self, signal: Signal) -> None:
        name = self._identifier(signal, MissingBookmarkName)
        first = self._bookmark_spans.get(name)
        if first is not None:
            raise DuplicateBookmark(name, first, self._context(signal.span.start))

        self._bookmark_spans[name] = signal.span
        self._sections.append(_Section(signal=signal.span, bookmark=name))
        self.current_bookmark = name
        logger.debug("Registered bookmark '%s' at %s", name, signal.span)

    def _add_choice(self, signal: Signal) -> None:
        target = self._identifier(signal, MissingChoiceTarget)
        self._sections.append(
            _Section(signal=signal.span, choice=(self.current_bookmark, target))
        )

    def _arm_style(self, signal: Signal) -> None:
        flags = self._parameter(signal, MissingStyleFlags)
        self.state = StyleArmed(
            styles=parse_styles(self.text, flags, self.config.source_name),
            span=signal.span,
        )

    def _discard_style(self, reason: object) -> None:
        assert isinstance(self.state, StyleArmed)
        logger.debug(
            "Discarding pending style '%s' from %s, next: %s",
            format_styles(self.state.styles),
            self.state.span,
            reason,
        )
        self.state = IDLE

    # -- Parameter helpers --

    def _parameter(self, signal: Signal, missing: type[MissingParameter]) -> Span:
        """Stripped parameter of a reserved signal; empty counts as missing."""
        if signal.parameter is None:
            raise missing(self._context(signal.span.start))
        stripped = signal.parameter.strip(self.text)
        if stripped.is_empty:
            raise missing(self._context(signal.span.start))
        return stripped

    def _identifier(self, signal: Signal, missing: type[MissingParameter]) -> str:
        span = self._parameter(signal, missing)
        value = span.slice(self.text)
        if not is_identifier(value, self.config.identifier_chars):
            raise InvalidIdentifier(value, self._context(span.start))
        return value

    def _context(self, offset: int) -> ErrorContext:
        return make_context(self.text, offset, self.config.source_name)

    # -- Resolution --

    def finish(self) -> tuple[Document, DialogueGraph]:
        """
        Resolve choice targets and freeze the results.

        Raises:
            UnknownBookmarkTarget: When a choice names a bookmark that is
                never declared
        """
        if isinstance(self.state, StyleArmed):
            self._discard_style("end of input")

        unresolved = [
            (section.signal, section.choice[1])
            for section in self._sections
            if section.choice is not None and section.choice[1] not in self._bookmark_spans
        ]
        if unresolved:
            names = tuple(dict.fromkeys(target for _, target in unresolved))
            first_span, first_target = unresolved[0]
            raise UnknownBookmarkTarget(first_target, names, self._context(first_span.start))

        first_start = self._sections[0].signal.start if self._sections else len(self.text)
        bookmarks = {ROOT: Bookmark(name=ROOT, body=Span(start=0, end=first_start))}
        edges: list[ChoiceEdge] = []

        for section, body in zip(self._sections, self._section_bodies(), strict=True):
            if section.bookmark is not None:
                bookmarks[section.bookmark] = Bookmark(
                    name=section.bookmark, span=section.signal, body=body
                )
            elif section.choice is not None:
                source, target = section.choice
                edges.append(
                    ChoiceEdge(source=source, target=target, span=section.signal, label=body)
                )

        document = Document(source=self.text, items=tuple(self.items))
        graph = DialogueGraph(bookmarks=bookmarks, edges=tuple(edges))
        logger.debug(
            "Built script: %d items, %d bookmarks, %d choices",
            len(document),
            len(graph.names),
            len(graph.edges),
        )
        return document, graph

    def _section_bodies(self) -> list[Span]:
        """Text between each bookmark/choice signal and the next one."""
        bodies = []
        for i, section in enumerate(self._sections):
            if i + 1 < len(self._sections):
                end = self._sections[i + 1].signal.start
            else:
                end = len(self.text)
            bodies.append(Span(start=section.signal.end, end=end))
        return bodies


def build(
    text: str,
    events: Iterable[Event],
    config: ParserConfig | None = None,
) -> tuple[Document, DialogueGraph]:
    """Run a GraphBuilder over events lexed from text."""
    builder = GraphBuilder(text, config)
    for event in events:
        builder.feed(event)
    return builder.finish()
