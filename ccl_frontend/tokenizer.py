"""
DFA-driven, longest-match tokenizer.

Each registered token kind owns one DFA compiled from its pattern. At every
offset all DFAs are walked over the remaining input; the longest accepted
prefix wins and, on equal length, the kind registered first wins. A
character no DFA accepts becomes a LexicalError and is skipped, so a pass
always reaches the end of the input. Non-trivia tokens drive the
declaration state machine, which keeps the run's symbol table current.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .automata import DFA
from .config import LexerConfig
from .declarations import INITIAL_STATE, step
from .determinize import nfa_to_dfa
from .diagnostics import Diagnostic, Diagnostics, LexicalError, PatternSyntaxError
from .language import DEFAULT_PATTERNS, MAX_DECIMAL_PLACES, TRIVIA_KINDS, Token, TokenKind
from .regex_compiler import compile_pattern
from .symbol_table import SymbolTable

logger = logging.getLogger(__name__)


class Tokenizer:
    def __init__(self, trivia: Iterable[TokenKind] = TRIVIA_KINDS,
                 max_decimal_places: int = MAX_DECIMAL_PLACES) -> None:
        self._trivia = frozenset(trivia)
        self._max_decimal_places = max_decimal_places
        self._automata: List[Tuple[TokenKind, DFA]] = []
        # Errors raised while registering patterns; copied into every run's diagnostics.
        self.pattern_diagnostics = Diagnostics()
        self.symbols = SymbolTable(max_decimal_places=max_decimal_places)
        self.diagnostics = self.symbols.diagnostics

    @classmethod
    def default(cls) -> Tokenizer:
        tokenizer = cls()
        tokenizer.register_all(DEFAULT_PATTERNS)
        return tokenizer

    @classmethod
    def from_config(cls, config: LexerConfig) -> Tokenizer:
        tokenizer = cls(trivia=config.trivia, max_decimal_places=config.max_decimal_places)
        tokenizer.register_all(config.patterns)
        return tokenizer

    # ---------- registration ----------
    def register(self, kind: TokenKind, pattern: str) -> Optional[PatternSyntaxError]:
        try:
            dfa = nfa_to_dfa(compile_pattern(pattern))
        except PatternSyntaxError as ex:
            logger.warning("pattern for %s rejected: %s", kind.name, ex)
            self.pattern_diagnostics.record(ex)
            return ex
        self._automata.append((kind, dfa))
        logger.debug("registered %s (%d DFA states)", kind.name, len(dfa))
        return None

    def register_all(self, patterns: Iterable[Tuple[TokenKind, str]]) -> List[PatternSyntaxError]:
        failures: List[PatternSyntaxError] = []
        for kind, pattern in patterns:
            error = self.register(kind, pattern)
            if error is not None:
                failures.append(error)
        return failures

    @property
    def kinds(self) -> List[TokenKind]:
        return [kind for kind, _ in self._automata]

    def automaton(self, kind: TokenKind) -> Optional[DFA]:
        for k, dfa in self._automata:
            if k is kind:
                return dfa
        return None

    # ---------- scanning ----------
    def longest_match(self, text: str, offset: int) -> Tuple[Optional[TokenKind], int]:
        best_kind: Optional[TokenKind] = None
        best_len = 0
        for kind, dfa in self._automata:
            length = dfa.longest_match(text, offset)
            # Strict '>' keeps the earlier registration on ties.
            if length > best_len:
                best_kind, best_len = kind, length
        return best_kind, best_len

    def scan(self, text: str) -> Iterator[Token]:
        """
        Yield every consumed piece of text, trivia included. A character that
        no pattern accepts comes out as a one-character UNKNOWN token, so the
        lexemes always add up to the input. Ends with EOF.
        """
        offset = 0
        line = 1
        col = 1
        n = len(text)

        while offset < n:
            kind, length = self.longest_match(text, offset)
            if kind is None:
                kind, length = TokenKind.UNKNOWN, 1

            lexeme = text[offset:offset + length]
            yield Token(kind=kind, lexeme=lexeme, line=line, column=col)

            line, col = _advance_position(lexeme, line, col)
            offset += length

        yield Token(kind=TokenKind.EOF, lexeme="", line=line, column=col)

    def tokenize(self, text: str) -> Tuple[List[Token], List[Diagnostic]]:
        diagnostics = Diagnostics()
        for d in self.pattern_diagnostics:
            diagnostics.report(d.kind, d.message, d.line, d.column)
        self.symbols = SymbolTable(diagnostics, self._max_decimal_places)

        tokens: List[Token] = []
        state = INITIAL_STATE
        for tok in self.scan(text):
            if tok.kind is TokenKind.UNKNOWN:
                diagnostics.record(LexicalError(
                    f"Unexpected character {tok.lexeme!r}", tok.line, tok.column))
                continue
            if tok.kind in self._trivia:
                continue
            tokens.append(tok)
            if tok.kind is not TokenKind.EOF:
                state = step(state, tok, self.symbols)

        self.diagnostics = diagnostics
        return tokens, diagnostics.sorted()


def _advance_position(fragment: str, line: int, col: int) -> Tuple[int, int]:
    for c in fragment:
        if c == "\n":
            line += 1
            col = 1
        else:
            col += 1
    return line, col
