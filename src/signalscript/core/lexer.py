"""
Signal lexer for SignalScript.

Converts raw script text into a lazy stream of events with source spans.

Grammar::

    document  := (text-run | signal)*
    signal    := '@' identifier? parameter?
    parameter := '{' raw-text '}'

An ``@`` is always a signal boundary, even when neither an identifier nor a
``{`` follows it. A parameter ends at the first ``}``; braces do not nest.
"""

from __future__ import annotations

from collections.abc import Iterator

from .config import ParserConfig
from .errors import UnterminatedParameter, make_context
from .ir.events import Event, Signal, TextRun
from .ir.spans import Span, is_identifier_char, is_identifier_start

SIGNAL_CHAR = "@"
PARAM_OPEN = "{"
PARAM_CLOSE = "}"


class Lexer:
    """
    Lexer for SignalScript.

    Iterating a Lexer scans the text from the start, so the same Lexer can be
    iterated any number of times and always yields equal events. Errors are
    raised when iteration reaches the offending signal.
    """

    def __init__(self, text: str, config: ParserConfig | None = None):
        """
        Initialize lexer.

        Args:
            text: Script text to scan
            config: Parser settings (identifier characters, source name)
        """
        self.text = text
        self.config = config or ParserConfig()

    def __iter__(self) -> Iterator[Event]:
        return self._scan()

    def _scan(self) -> Iterator[Event]:
        text = self.text
        n = len(text)
        pos = 0

        while pos < n:
            if text[pos] == SIGNAL_CHAR:
                signal = self.read_signal(pos)
                yield signal
                pos = signal.span.end
                continue

            end = text.find(SIGNAL_CHAR, pos)
            if end == -1:
                end = n
            yield TextRun(span=Span(start=pos, end=end))
            pos = end

    def read_signal(self, start: int) -> Signal:
        """Read the signal whose `@` is at offset start."""
        text = self.text
        n = len(text)
        pos = start + 1

        prompt: str | None = None
        prompt_span: Span | None = None
        if pos < n and is_identifier_start(text[pos]):
            name_start = pos
            pos += 1
            while pos < n and is_identifier_char(text[pos], self.config.identifier_chars):
                pos += 1
            prompt_span = Span(start=name_start, end=pos)
            prompt = text[name_start:pos]

        parameter: Span | None = None
        if pos < n and text[pos] == PARAM_OPEN:
            close = text.find(PARAM_CLOSE, pos + 1)
            if close == -1:
                raise UnterminatedParameter(
                    f"Unterminated parameter: '{PARAM_OPEN}' has no closing '{PARAM_CLOSE}'",
                    make_context(text, pos, self.config.source_name),
                )
            parameter = Span(start=pos + 1, end=close)
            pos = close + 1

        return Signal(
            span=Span(start=start, end=pos),
            prompt=prompt,
            prompt_span=prompt_span,
            parameter=parameter,
        )


def tokenize(text: str, config: ParserConfig | None = None) -> list[Event]:
    """
    Convenience function to lex a whole script.

    Args:
        text: Script text
        config: Optional parser settings

    Returns:
        List of events in input order
    """
    return list(Lexer(text, config))
