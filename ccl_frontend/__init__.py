from .automata import DFA, EPSILON, NFA, State
from .config import ConfigError, LexerConfig, load_config
from .declarations import DeclarationState, step
from .determinize import compile_dfa, nfa_to_dfa
from .diagnostics import (
    CompilerError,
    Diagnostic,
    Diagnostics,
    ErrorKind,
    LexicalError,
    PatternSyntaxError,
    SemanticError,
)
from .language import DEFAULT_PATTERNS, Token, TokenKind
from .regex_compiler import compile_pattern
from .symbol_table import Symbol, SymbolTable
from .tokenizer import Tokenizer

__all__ = [
    "DFA",
    "EPSILON",
    "NFA",
    "State",
    "ConfigError",
    "LexerConfig",
    "load_config",
    "DeclarationState",
    "step",
    "compile_dfa",
    "nfa_to_dfa",
    "CompilerError",
    "Diagnostic",
    "Diagnostics",
    "ErrorKind",
    "LexicalError",
    "PatternSyntaxError",
    "SemanticError",
    "DEFAULT_PATTERNS",
    "Token",
    "TokenKind",
    "compile_pattern",
    "Symbol",
    "SymbolTable",
    "Tokenizer",
]
