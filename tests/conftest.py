"""Shared pytest fixtures for SignalScript tests."""

import pytest

from signalscript import ParserConfig

BRANCHING_SCRIPT = """@bookmark{greet}
– Hello, you!
@choice{greet}– Come again?
@choice{bye}– Hi!

@bookmark{bye}
– Well, farewell..
"""


@pytest.fixture
def branching_script() -> str:
    """Two bookmarks, a self-loop choice and a forward choice."""
    return BRANCHING_SCRIPT


@pytest.fixture
def styled_script() -> str:
    """A style signal followed by the text it applies to."""
    return "@style{qbp}@{- Hello, you!}"


@pytest.fixture
def named_config() -> ParserConfig:
    """Config that labels errors with a file name."""
    return ParserConfig(source_name="intro.txt")
