"""Tests for the graph builder and style resolver."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from signalscript import ROOT, PlainText, Style, StyledText, UnknownSignal, parse, tokenize
from signalscript.core.builder import (
    IDLE,
    GraphBuilder,
    PromptKind,
    StyleArmed,
    classify_prompt,
    parse_styles,
)
from signalscript.core.errors import (
    DuplicateBookmark,
    InvalidIdentifier,
    MissingBookmarkName,
    MissingChoiceTarget,
    MissingParameter,
    MissingStyleFlags,
    UnknownBookmarkTarget,
    UnknownStyleChar,
)
from signalscript.core.ir import Span


def _texts(text: str) -> list[tuple[str, str]]:
    """Document items as (kind, covered text) pairs."""
    document, _ = parse(text)
    return [(item.kind, document.text_of(item)) for item in document]


# ============================================================================
# Prompt dispatch
# ============================================================================


class TestClassifyPrompt:
    def test_reserved(self) -> None:
        assert classify_prompt("bookmark") is PromptKind.BOOKMARK
        assert classify_prompt("choice") is PromptKind.CHOICE
        assert classify_prompt("style") is PromptKind.STYLE

    def test_case_sensitive(self) -> None:
        assert classify_prompt("Bookmark") is PromptKind.OTHER
        assert classify_prompt("wave") is PromptKind.OTHER


# ============================================================================
# Branching
# ============================================================================


class TestBranching:
    """Bookmarks and choices build the dialogue graph."""

    def test_branching_example(self, branching_script: str) -> None:
        document, graph = parse(branching_script)

        assert graph.names == ["greet", "bye"]
        assert [(e.source, e.target) for e in graph.edges] == [
            ("greet", "greet"),
            ("greet", "bye"),
        ]
        assert len(document.plain_items()) == 4
        assert document.styled_items() == []
        assert len(document) == 4

    def test_branching_text(self, branching_script: str) -> None:
        assert _texts(branching_script) == [
            ("plain", "\n– Hello, you!\n"),
            ("plain", "– Come again?\n"),
            ("plain", "– Hi!\n\n"),
            ("plain", "\n– Well, farewell..\n"),
        ]

    def test_bookmark_bodies_and_choice_labels(self, branching_script: str) -> None:
        _, graph = parse(branching_script)
        text = branching_script

        assert graph["greet"].body.slice(text) == "\n– Hello, you!\n"
        assert graph["bye"].body.slice(text) == "\n– Well, farewell..\n"
        assert [e.label.slice(text) for e in graph.edges] == ["– Come again?\n", "– Hi!\n\n"]
        assert graph["greet"].span.slice(text) == "@bookmark{greet}"
        assert graph.edges[1].span.slice(text) == "@choice{bye}"

    def test_graph_queries(self, branching_script: str) -> None:
        _, graph = parse(branching_script)

        assert graph.successors("greet") == ["greet", "bye"]
        assert graph.predecessors("bye") == ["greet"]
        assert graph.choices_from("bye") == []
        assert "greet" in graph
        assert "missing" not in graph
        assert str(graph.edges[1]) == "greet -> bye"
        assert graph.edges[1].from_ == "greet"
        assert graph.edges[1].to == "bye"

    def test_root_is_always_present(self) -> None:
        _, graph = parse("Just text.")
        assert list(graph.bookmarks) == [ROOT]
        assert graph.root.is_root
        assert graph.root.span is None
        assert graph.root.body == Span(start=0, end=10)
        assert graph.names == []
        assert graph.edges == ()

    def test_choice_before_any_bookmark_leaves_root(self) -> None:
        text = "Intro\n@choice{end}Go\n@bookmark{end}Done"
        _, graph = parse(text)

        assert list(graph.bookmarks) == [ROOT, "end"]
        assert graph.edges[0].source == ROOT
        assert graph.edges[0].label.slice(text) == "Go\n"
        assert graph.root.body.slice(text) == "Intro\n"

    def test_forward_reference(self) -> None:
        _, graph = parse("@bookmark{a}@choice{z}@bookmark{z}")
        assert graph.successors("a") == ["z"]

    def test_repeated_edges_keep_order(self) -> None:
        _, graph = parse("@bookmark{a}@choice{b}x@choice{a}y@choice{b}z@bookmark{b}")
        assert graph.successors("a") == ["b", "a", "b"]

    def test_reserved_parameters_are_stripped(self) -> None:
        _, graph = parse("@bookmark{ spaced }@choice{\tspaced\n}")
        assert graph.names == ["spaced"]
        assert graph.successors("spaced") == ["spaced"]

    def test_structural_signals_leave_no_items(self) -> None:
        document, _ = parse("@bookmark{a}@choice{a}")
        assert len(document) == 0

    def test_duplicate_bookmark(self) -> None:
        with pytest.raises(DuplicateBookmark) as exc_info:
            parse("@bookmark{x}a@bookmark{x}b")
        err = exc_info.value
        assert err.name == "x"
        assert err.first == Span(start=0, end=12)
        assert err.offset == 13

    def test_duplicate_bookmark_far_apart(self) -> None:
        text = "@bookmark{x}\n" + "line\n" * 50 + "@bookmark{y}\n@bookmark{x}"
        with pytest.raises(DuplicateBookmark) as exc_info:
            parse(text)
        assert exc_info.value.name == "x"
        assert exc_info.value.context.line == 53

    def test_unknown_target(self) -> None:
        text = "@bookmark{a}@choice{a}@choice{y}@choice{z}@choice{y}"
        with pytest.raises(UnknownBookmarkTarget) as exc_info:
            parse(text)
        err = exc_info.value
        assert err.name == "y"
        assert err.names == ("y", "z")
        assert err.offset == 22
        assert "also unresolved: z" in err.message

    def test_unknown_target_with_many_valid_edges(self, branching_script: str) -> None:
        with pytest.raises(UnknownBookmarkTarget) as exc_info:
            parse(branching_script + "@choice{nowhere}")
        assert exc_info.value.name == "nowhere"
        assert exc_info.value.names == ("nowhere",)

    def test_missing_bookmark_name(self) -> None:
        with pytest.raises(MissingBookmarkName):
            parse("@bookmark")
        with pytest.raises(MissingBookmarkName):
            parse("@bookmark{   }")

    def test_missing_choice_target(self) -> None:
        with pytest.raises(MissingChoiceTarget) as exc_info:
            parse("Hi @choice{}")
        assert exc_info.value.offset == 3
        assert isinstance(exc_info.value, MissingParameter)

    def test_invalid_identifier(self) -> None:
        with pytest.raises(InvalidIdentifier) as exc_info:
            parse("@bookmark{two words}")
        assert exc_info.value.value == "two words"
        assert exc_info.value.offset == 10

    def test_invalid_choice_target(self) -> None:
        with pytest.raises(InvalidIdentifier):
            parse("@choice{-dash}")


# ============================================================================
# Styling
# ============================================================================


class TestStyles:
    """Style flags apply to the promptless signal right after them."""

    def test_styled_example(self, styled_script: str) -> None:
        document, _ = parse(styled_script)

        assert len(document) == 1
        item = document.items[0]
        assert isinstance(item, StyledText)
        assert item.styles == {Style.QUOTE, Style.BOLD, Style.PANEL}
        assert document.text_of(item) == "- Hello, you!"
        assert str(item) == "Styled[pqb](13..26)"

    def test_order_independent(self) -> None:
        first, _ = parse("@style{qbp}@{A}")
        second, _ = parse("@style{pbq}@{A}")
        assert first.items == second.items

    def test_repeated_flags_collapse(self) -> None:
        document, _ = parse("@style{bbq}@{A}")
        assert document.items[0].styles == {Style.BOLD, Style.QUOTE}

    def test_all_flags(self) -> None:
        document, _ = parse("@style{pcqbis}@{A}")
        assert document.items[0].styles == set(Style)

    def test_text_after_styled_signal_is_plain(self) -> None:
        assert _texts("@style{bcqi}@{Hello}, world!") == [
            ("styled", "Hello"),
            ("plain", ", world!"),
        ]

    def test_unknown_style_char(self) -> None:
        with pytest.raises(UnknownStyleChar) as exc_info:
            parse("@style{qx}@{Hi}")
        assert exc_info.value.char == "x"
        assert exc_info.value.offset == 8

    def test_inner_whitespace_is_unknown(self) -> None:
        with pytest.raises(UnknownStyleChar) as exc_info:
            parse("@style{ q b }@{Hi}")
        assert exc_info.value.char == " "

    def test_missing_style_flags(self) -> None:
        with pytest.raises(MissingStyleFlags):
            parse("@style@{Hi}")
        with pytest.raises(MissingStyleFlags):
            parse("@style{}@{Hi}")

    def test_promptless_without_style_is_plain(self) -> None:
        document, _ = parse("@{i<4}")
        item = document.items[0]
        assert isinstance(item, PlainText)
        assert item.from_signal
        assert document.text_of(item) == "i<4"

    def test_discarded_by_text(self) -> None:
        assert _texts("@style{b}text@{A}") == [("plain", "text"), ("plain", "A")]

    def test_discarded_by_bookmark(self) -> None:
        document, graph = parse("@style{b}@bookmark{x}@{A}")
        assert graph.names == ["x"]
        assert document.styled_items() == []
        assert document.text_of(document.items[0]) == "A"

    def test_discarded_by_bare_signal(self) -> None:
        assert _texts("@style{b}@@{A}") == [("plain", "A")]

    def test_discarded_by_unknown_signal(self) -> None:
        assert _texts("@style{b}@wave@{A}") == [("unknown", ""), ("plain", "A")]

    def test_second_style_replaces_first(self) -> None:
        document, _ = parse("@style{b}@style{i}@{A}")
        assert document.items[0].styles == {Style.ITALIC}

    def test_pending_style_at_end_of_input(self) -> None:
        document, _ = parse("Hi @style{i}")
        assert _texts("Hi @style{i}") == [("plain", "Hi ")]
        assert document.styled_items() == []

    def test_discard_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="signalscript.core.builder"):
            parse("@style{b}text")
        assert "Discarding pending style 'b'" in caplog.text

    def test_parse_styles_helper(self) -> None:
        text = "pcqbis"
        assert parse_styles(text, Span(start=0, end=2)) == {Style.PANEL, Style.CODE}


# ============================================================================
# Other content
# ============================================================================


class TestContent:
    def test_unknown_signals_are_kept(self) -> None:
        text = "Hello! @wave and @color{red}"
        document, _ = parse(text)

        unknown = document.unknown_signals()
        assert [u.prompt for u in unknown] == ["wave", "color"]
        assert unknown[0].parameter is None
        assert document.text_of(unknown[1]) == "red"
        assert unknown[1].span.slice(text) == "@color{red}"
        assert _texts(text) == [
            ("plain", "Hello! "),
            ("unknown", ""),
            ("plain", " and "),
            ("unknown", "red"),
        ]

    def test_reserved_names_are_case_sensitive(self) -> None:
        document, graph = parse("@Bookmark{x}")
        assert graph.names == []
        assert isinstance(document.items[0], UnknownSignal)

    def test_bare_signal_is_not_an_item(self) -> None:
        assert _texts("Pay attention! @") == [("plain", "Pay attention! ")]

    def test_empty_script(self) -> None:
        document, graph = parse("")
        assert len(document) == 0
        assert graph.root.body == Span(start=0, end=0)


# ============================================================================
# Builder lifecycle
# ============================================================================


class TestGraphBuilder:
    def test_state_machine(self) -> None:
        text = "@style{b}@{A}"
        builder = GraphBuilder(text)
        style_signal, text_signal = tokenize(text)

        assert builder.state is IDLE
        builder.feed(style_signal)
        assert isinstance(builder.state, StyleArmed)
        assert builder.state.styles == {Style.BOLD}
        builder.feed(text_signal)
        assert builder.state is IDLE

    def test_rejects_foreign_spans(self) -> None:
        builder = GraphBuilder("short")
        with pytest.raises(ValueError):
            builder.feed(tokenize("a much longer script")[0])

    def test_results_are_frozen(self, branching_script: str) -> None:
        document, graph = parse(branching_script)
        with pytest.raises(ValidationError):
            document.items = ()
        with pytest.raises(ValidationError):
            graph.edges = ()

    def test_reparse_gives_equal_fresh_results(self, branching_script: str) -> None:
        first = parse(branching_script)
        second = parse(branching_script)
        assert first == second
        assert first[1] is not second[1]
