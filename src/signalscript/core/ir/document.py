"""
Resolved document content.

After style resolution a script becomes an ordered tuple of content items:

- ``PlainText`` - a text run, or a promptless parameter with no style pending
- ``StyledText`` - a promptless parameter that followed ``@style{...}``
- ``UnknownSignal`` - a signal whose prompt is not reserved, kept for consumers

Style characters map to a fixed set of categories. What a consumer draws for
each category is up to the consumer.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .spans import Span


class Style(StrEnum):
    """Text emphasis categories, keyed by their one-character code."""

    PANEL = "p"  # block panel
    CODE = "c"
    QUOTE = "q"
    BOLD = "b"
    ITALIC = "i"
    SCRATCH = "s"  # strike-through


StyleFlags = frozenset[Style]


def format_styles(styles: StyleFlags) -> str:
    """Render a flag set in canonical ``pcqbis`` order."""
    return "".join(style.value for style in Style if style in styles)


class PlainText(BaseModel):
    """Unstyled text."""

    kind: Literal["plain"] = "plain"
    span: Span
    from_signal: bool = Field(
        default=False, description="True when the text came from a `@{...}` parameter"
    )

    model_config = ConfigDict(frozen=True)


class StyledText(BaseModel):
    """Text from a promptless parameter with the styles armed before it."""

    kind: Literal["styled"] = "styled"
    styles: StyleFlags
    span: Span

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Styled[{format_styles(self.styles)}]({self.span})"


class UnknownSignal(BaseModel):
    """A signal with an author-defined prompt."""

    kind: Literal["unknown"] = "unknown"
    prompt: str
    parameter: Span | None = None
    span: Span = Field(description="Whole signal")

    model_config = ConfigDict(frozen=True)


ContentItem = PlainText | StyledText | UnknownSignal


class Document(BaseModel):
    """Ordered content items of one script, with the text they point into."""

    source: str = Field(repr=False)
    items: tuple[ContentItem, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ContentItem]:  # type: ignore[override]
        return iter(self.items)

    def text_of(self, item: ContentItem) -> str:
        """Text an item covers (the parameter text for unknown signals)."""
        if isinstance(item, UnknownSignal):
            return item.parameter.slice(self.source) if item.parameter else ""
        return item.span.slice(self.source)

    def plain_items(self) -> list[PlainText]:
        return [item for item in self.items if isinstance(item, PlainText)]

    def styled_items(self) -> list[StyledText]:
        return [item for item in self.items if isinstance(item, StyledText)]

    def unknown_signals(self) -> list[UnknownSignal]:
        return [item for item in self.items if isinstance(item, UnknownSignal)]
