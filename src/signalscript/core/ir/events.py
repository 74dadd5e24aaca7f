"""
Lexer event types.

The lexer turns a script into a flat sequence of events:

- ``TextRun`` for a run of plain text
- ``Signal`` for an ``@``-introduced unit with an optional prompt and an
  optional ``{...}`` parameter

Every event records the ``span`` of the input it consumed, so concatenating
the spans of all events in order reconstructs the script exactly.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .spans import Span


class SignalShape(StrEnum):
    """Which optional parts a signal carries."""

    PING = "ping"  # just `@`
    PROMPT = "prompt"  # `@wave`
    PARAM = "param"  # `@{...}`
    CALL = "call"  # `@bookmark{intro}`


class TextRun(BaseModel):
    """A run of plain text between signals."""

    kind: Literal["text"] = "text"
    span: Span

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Text({self.span})"


class Signal(BaseModel):
    """
    An ``@`` signal.

    Examples:
        - ``@`` → prompt None, parameter None
        - ``@wave`` → prompt "wave", parameter None
        - ``@{ text }`` → prompt None, parameter covering " text "
        - ``@choice{bye}`` → prompt "choice", parameter covering "bye"
    """

    kind: Literal["signal"] = "signal"
    span: Span = Field(description="Whole signal, from `@` through the closing brace")
    prompt: str | None = Field(default=None, description="Prompt identifier")
    prompt_span: Span | None = None
    parameter: Span | None = Field(
        default=None, description="Text between the braces, braces excluded"
    )

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Signal({self.prompt!r}, {self.parameter})"

    @property
    def shape(self) -> SignalShape:
        if self.prompt is None:
            return SignalShape.PING if self.parameter is None else SignalShape.PARAM
        return SignalShape.PROMPT if self.parameter is None else SignalShape.CALL

    @property
    def is_bare(self) -> bool:
        return self.prompt is None and self.parameter is None

    @property
    def is_promptless(self) -> bool:
        """Parameter without a prompt: ``@{...}``."""
        return self.prompt is None and self.parameter is not None


Event = TextRun | Signal
