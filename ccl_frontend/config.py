"""
TOML configuration for the lexer and the CLI.

    [logging]
    level = "WARNING"

    [lexer]
    max_decimal_places = 5
    trivia = ["WHITESPACE", "SINGLE_LINE_COMMENT", "MULTI_LINE_COMMENT"]

    [patterns]            # optional; replaces the default table
    IDENTIFIER = "[a-z]+" # file order is priority order

Every section and key is optional; missing values fall back to the
defaults in ccl_frontend.language. The CLI reads ./ccl_frontend.toml when
no --config is given and that file exists.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple

import toml

from .language import DEFAULT_PATTERNS, MAX_DECIMAL_PLACES, TRIVIA_KINDS, TokenKind

DEFAULT_CONFIG_FILE = "ccl_frontend.toml"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_RESERVED_KINDS = frozenset({TokenKind.EOF, TokenKind.UNKNOWN})


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class LexerConfig:
    log_level: str = "WARNING"
    max_decimal_places: int = MAX_DECIMAL_PLACES
    trivia: FrozenSet[TokenKind] = TRIVIA_KINDS
    patterns: List[Tuple[TokenKind, str]] = field(default_factory=lambda: list(DEFAULT_PATTERNS))

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def load_config(path: Optional[str] = None) -> LexerConfig:
    if path is None:
        return LexerConfig()
    try:
        data = toml.load(path)
    except toml.TomlDecodeError as ex:
        raise ConfigError(f"Invalid TOML in {path}: {ex}") from ex
    except UnicodeDecodeError as ex:
        raise ConfigError(f"{path} is not valid UTF-8: {ex}") from ex
    return config_from_mapping(data)


def default_config_path(directory: str = ".") -> Optional[str]:
    """DEFAULT_CONFIG_FILE inside directory, if there is one."""
    path = os.path.join(directory, DEFAULT_CONFIG_FILE)
    return path if os.path.isfile(path) else None


def config_from_mapping(data: Mapping[str, Any]) -> LexerConfig:
    log_cfg = _section(data, "logging")
    lexer_cfg = _section(data, "lexer")

    level = str(log_cfg.get("level", "WARNING")).upper()
    if level not in _LEVELS:
        raise ConfigError(f"Unknown log level {level!r}; expected one of {', '.join(_LEVELS)}")

    places = lexer_cfg.get("max_decimal_places", MAX_DECIMAL_PLACES)
    if not isinstance(places, int) or isinstance(places, bool) or places < 1:
        raise ConfigError(f"lexer.max_decimal_places must be a positive integer, got {places!r}")

    trivia = TRIVIA_KINDS
    if "trivia" in lexer_cfg:
        names = lexer_cfg["trivia"]
        if not isinstance(names, list):
            raise ConfigError("lexer.trivia must be a list of token kind names")
        trivia = frozenset(_kind(n, "lexer.trivia") for n in names)

    patterns = list(DEFAULT_PATTERNS)
    if "patterns" in data:
        table = _section(data, "patterns")
        patterns = []
        for name, rx in table.items():
            if not isinstance(rx, str):
                raise ConfigError(f"patterns.{name} must be a string")
            patterns.append((_kind(name, "patterns"), rx))

    return LexerConfig(log_level=level, max_decimal_places=places, trivia=trivia, patterns=patterns)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _kind(name: Any, where: str) -> TokenKind:
    try:
        kind = TokenKind[str(name)]
    except KeyError:
        raise ConfigError(f"Unknown token kind {name!r} in {where}") from None
    # The tokenizer emits these itself.
    if kind in _RESERVED_KINDS:
        raise ConfigError(f"Token kind {kind.name} cannot be used in {where}")
    return kind
