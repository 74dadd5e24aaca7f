"""
Parser configuration.

Settings can be kept in a ``signalscript.toml`` file::

    [signalscript]
    identifier_chars = "-."
    max_input_length = 1_000_000

or in ``pyproject.toml`` under ``[tool.signalscript]``.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .ir.spans import DEFAULT_IDENTIFIER_CHARS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParserConfig:
    """Settings for one parse."""

    identifier_chars: str = DEFAULT_IDENTIFIER_CHARS  # allowed after the first char
    max_input_length: int | None = None  # None = unbounded
    source_name: str | None = None  # label used in error messages

    def __post_init__(self) -> None:
        if "{" in self.identifier_chars or "}" in self.identifier_chars:
            raise ConfigError("identifier_chars cannot contain braces")
        if "@" in self.identifier_chars:
            raise ConfigError("identifier_chars cannot contain '@'")
        if any(c.isspace() for c in self.identifier_chars):
            raise ConfigError("identifier_chars cannot contain whitespace")
        if self.max_input_length is not None and self.max_input_length < 0:
            raise ConfigError("max_input_length must be zero or positive")


_EXPECTED_TYPES: dict[str, tuple[type, ...]] = {
    "identifier_chars": (str,),
    "max_input_length": (int,),
    "source_name": (str,),
}


def config_from_dict(data: dict[str, Any]) -> ParserConfig:
    """Build a ParserConfig from a TOML table, ignoring unknown keys."""
    known = {f.name for f in fields(ParserConfig)}
    values: dict[str, Any] = {}

    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown signalscript config key: %s", key)
            continue
        expected = _EXPECTED_TYPES[key]
        # bool is an int subclass; TOML `true` is never a valid length
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(
                f"Config key '{key}' expects {expected[0].__name__}, "
                f"got {type(value).__name__}"
            )
        values[key] = value

    return ParserConfig(**values)


def load_config(path: Path) -> ParserConfig:
    """
    Load parser settings from a TOML file.

    Args:
        path: ``signalscript.toml`` (``[signalscript]`` table) or
            ``pyproject.toml`` (``[tool.signalscript]`` table)

    Returns:
        ParserConfig; defaults when the file or table is missing
    """
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return ParserConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    table = data.get("signalscript")
    if table is None:
        table = data.get("tool", {}).get("signalscript", {})

    return config_from_dict(table)
