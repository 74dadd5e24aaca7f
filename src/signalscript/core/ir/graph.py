"""
Dialogue graph types.

``@bookmark{name}`` declares a node and ``@choice{target}`` adds an edge from
the bookmark in effect at that point to ``target``. Choices that appear
before any bookmark leave from the implicit root node ``ROOT``.

Text spans recorded on nodes and edges:
    - ``Bookmark.body`` - text from the end of the declaring signal up to
      the next bookmark or choice signal
    - ``ChoiceEdge.label`` - text from the end of the choice signal up to
      the next bookmark or choice signal
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .spans import Span

# Not a valid identifier, so it never collides with a declared bookmark
ROOT = "<root>"


class Bookmark(BaseModel):
    """A named node of the dialogue graph."""

    name: str
    span: Span | None = Field(default=None, description="Declaring signal; None for the root")
    body: Span

    model_config = ConfigDict(frozen=True)

    @property
    def is_root(self) -> bool:
        return self.name == ROOT


class ChoiceEdge(BaseModel):
    """Directed edge from the active bookmark to a target bookmark."""

    source: str
    target: str
    span: Span = Field(description="Declaring `@choice{...}` signal")
    label: Span

    model_config = ConfigDict(frozen=True)

    @property
    def from_(self) -> str:
        return self.source

    @property
    def to(self) -> str:
        return self.target

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


class DialogueGraph(BaseModel):
    """
    Bookmarks (root first, then declaration order) and choice edges in
    document order.
    """

    bookmarks: dict[str, Bookmark]
    edges: tuple[ChoiceEdge, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __contains__(self, name: object) -> bool:
        return name in self.bookmarks

    def __getitem__(self, name: str) -> Bookmark:
        return self.bookmarks[name]

    @property
    def root(self) -> Bookmark:
        return self.bookmarks[ROOT]

    @property
    def names(self) -> list[str]:
        """Declared bookmark names, root excluded."""
        return [name for name in self.bookmarks if name != ROOT]

    def choices_from(self, name: str) -> list[ChoiceEdge]:
        """Edges leaving a bookmark, in document order."""
        return [edge for edge in self.edges if edge.source == name]

    def successors(self, name: str) -> list[str]:
        return [edge.target for edge in self.choices_from(name)]

    def predecessors(self, name: str) -> list[str]:
        return [edge.source for edge in self.edges if edge.target == name]
