"""
The CCL toy language: token kinds, keyword/operator lists, the default
token pattern table and literal validation.

Pattern order is priority order: the tokenizer always takes the longest
match, and on equal length the pattern registered first wins. Keywords are
therefore listed ahead of IDENTIFIER, and DECIMAL_LITERAL ahead of
INTEGER_LITERAL.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

FILE_EXTENSION = ".ccl"
MAX_DECIMAL_PLACES = 5


class TokenKind(enum.Enum):
    # Keywords
    GLOBAL = "global"
    FUNCTION = "function"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    CHARACTER = "character"
    IF = "if"
    ELSE = "else"
    WHILE = "while"
    RETURN = "return"

    # Literals and names
    INTEGER_LITERAL = "integer literal"
    DECIMAL_LITERAL = "decimal literal"
    BOOLEAN_LITERAL = "boolean literal"
    CHARACTER_LITERAL = "character literal"
    IDENTIFIER = "identifier"

    # Operators
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULUS = "%"
    EXPONENT = "^"
    ASSIGN = "="
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS = "<"
    GREATER = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="

    # Delimiters
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    SEMICOLON = ";"
    COMMA = ","

    # Trivia
    WHITESPACE = "whitespace"
    SINGLE_LINE_COMMENT = "comment"
    MULTI_LINE_COMMENT = "block comment"

    # Special
    UNKNOWN = "unknown"
    EOF = "end of file"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    lexeme: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.kind.name} {self.lexeme!r} @ line {self.line}, col {self.column}"


KEYWORDS: Dict[str, TokenKind] = {
    k.value: k
    for k in (
        TokenKind.GLOBAL, TokenKind.FUNCTION,
        TokenKind.INTEGER, TokenKind.DECIMAL, TokenKind.BOOLEAN, TokenKind.CHARACTER,
        TokenKind.IF, TokenKind.ELSE, TokenKind.WHILE, TokenKind.RETURN,
    )
}

OPERATORS: Dict[str, TokenKind] = {
    k.value: k
    for k in (
        TokenKind.PLUS, TokenKind.MINUS, TokenKind.MULTIPLY, TokenKind.DIVIDE,
        TokenKind.MODULUS, TokenKind.EXPONENT, TokenKind.ASSIGN, TokenKind.EQUAL,
        TokenKind.NOT_EQUAL, TokenKind.LESS, TokenKind.GREATER,
        TokenKind.LESS_EQUAL, TokenKind.GREATER_EQUAL,
    )
}

DELIMITERS: Dict[str, TokenKind] = {
    k.value: k
    for k in (
        TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.LBRACE, TokenKind.RBRACE,
        TokenKind.SEMICOLON, TokenKind.COMMA,
    )
}

# Type keyword -> declared type name stored on symbols.
TYPE_KEYWORDS: Dict[TokenKind, str] = {
    TokenKind.INTEGER: "integer",
    TokenKind.DECIMAL: "decimal",
    TokenKind.BOOLEAN: "boolean",
    TokenKind.CHARACTER: "character",
}
FUNCTION_TYPE = "function"

LITERAL_KINDS: FrozenSet[TokenKind] = frozenset({
    TokenKind.INTEGER_LITERAL,
    TokenKind.DECIMAL_LITERAL,
    TokenKind.BOOLEAN_LITERAL,
    TokenKind.CHARACTER_LITERAL,
})

TRIVIA_KINDS: FrozenSet[TokenKind] = frozenset({
    TokenKind.WHITESPACE,
    TokenKind.SINGLE_LINE_COMMENT,
    TokenKind.MULTI_LINE_COMMENT,
})


def _escape_literal(text: str) -> str:
    # Every non-alphanumeric character is escaped; '\X' always means X.
    return "".join(ch if ch.isalnum() else "\\" + ch for ch in text)


def _default_patterns() -> List[Tuple[TokenKind, str]]:
    table: List[Tuple[TokenKind, str]] = [
        (TokenKind.WHITESPACE, r"[ \t\r\n]+"),
        (TokenKind.SINGLE_LINE_COMMENT, r"//[^\n]*"),
        (TokenKind.MULTI_LINE_COMMENT, r"/\*([^*]|\*+[^*/])*\*+/"),
    ]
    table += [(kind, _escape_literal(text)) for text, kind in KEYWORDS.items()]
    table += [
        (TokenKind.BOOLEAN_LITERAL, r"true|false"),
        (TokenKind.DECIMAL_LITERAL, r"[0-9]+\.[0-9]+"),
        (TokenKind.INTEGER_LITERAL, r"[0-9]+"),
        (TokenKind.CHARACTER_LITERAL, r"'[^'\\\n]'"),
        (TokenKind.IDENTIFIER, r"[a-zA-Z_][a-zA-Z0-9_]*"),
    ]
    table += [(kind, _escape_literal(text)) for text, kind in OPERATORS.items()]
    table += [(kind, _escape_literal(text)) for text, kind in DELIMITERS.items()]
    return table


DEFAULT_PATTERNS: List[Tuple[TokenKind, str]] = _default_patterns()


# =============================================================================
# Literal validation
# =============================================================================

_INTEGER_RE = re.compile(r"[0-9]+")
_DECIMAL_RE = re.compile(r"[0-9]+\.([0-9]+)")
_CHARACTER_RE = re.compile(r"'(.)'", re.DOTALL)

LiteralValue = Union[int, float, bool, str]


def validate_literal(type_name: str, text: str, max_decimal_places: int = MAX_DECIMAL_PLACES) -> Optional[str]:
    """Return an error message if text is not a valid literal of type_name, else None."""
    if type_name == "integer":
        if not _INTEGER_RE.fullmatch(text):
            return f"Invalid integer value: {text}"
    elif type_name == "decimal":
        m = _DECIMAL_RE.fullmatch(text)
        if not m:
            return f"Invalid decimal value: {text}"
        if len(m.group(1)) > max_decimal_places:
            return f"Too many decimal places (max {max_decimal_places}): {text}"
    elif type_name == "boolean":
        if text not in ("true", "false"):
            return f"Invalid boolean value: {text}"
    elif type_name == "character":
        if not _CHARACTER_RE.fullmatch(text):
            return f"Invalid character value: {text}"
    else:
        return f"Cannot assign a value to a {type_name}: {text}"
    return None


def convert_literal(type_name: str, text: str) -> LiteralValue:
    """Python value of an already validated literal."""
    if type_name == "integer":
        return int(text)
    if type_name == "decimal":
        return float(text)
    if type_name == "boolean":
        return text == "true"
    if type_name == "character":
        return text[1]
    raise ValueError(f"no literal form for type {type_name!r}")
