from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterator, List

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    PATTERN = "Pattern Syntax Error"
    LEXICAL = "Lexical Error"
    SEMANTIC = "Semantic Error"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Error types
# =============================================================================

class CompilerError(Exception):
    kind: ErrorKind = ErrorKind.SEMANTIC

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(kind=self.kind, message=self.message, line=self.line, column=self.column)


class PatternSyntaxError(CompilerError, ValueError):
    kind = ErrorKind.PATTERN

    def __init__(self, pattern: str, position: int, reason: str) -> None:
        super().__init__(f"{reason} at pos {position} in pattern {pattern!r}", 0, position + 1)
        self.pattern = pattern
        self.position = position
        self.reason = reason


class LexicalError(CompilerError):
    kind = ErrorKind.LEXICAL


class SemanticError(CompilerError):
    kind = ErrorKind.SEMANTIC


# =============================================================================
# Collector
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    kind: ErrorKind
    message: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.kind} at line {self.line}, column {self.column}: {self.message}"


class Diagnostics:
    """
    Error list owned by one compilation run.

    Everything the pattern compiler, tokenizer and symbol table reject ends up
    here instead of being raised, so a run always completes and the caller
    inspects the collected list afterwards.
    """

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    def record(self, error: CompilerError) -> CompilerError:
        self._append(error.to_diagnostic())
        return error

    def report(self, kind: ErrorKind, message: str, line: int = 0, column: int = 0) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, message=message, line=line, column=column)
        self._append(diagnostic)
        return diagnostic

    def _append(self, diagnostic: Diagnostic) -> None:
        logger.debug("diagnostic: %s", diagnostic)
        self._items.append(diagnostic)

    @property
    def has_errors(self) -> bool:
        return bool(self._items)

    def of_kind(self, kind: ErrorKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind is kind]

    def sorted(self) -> List[Diagnostic]:
        return sorted(self._items, key=lambda d: (d.line, d.column))

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
