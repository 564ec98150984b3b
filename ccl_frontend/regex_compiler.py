r"""
Mini-regex to NFA compiler.

Supported syntax
----------------
    a           literal character (7-bit ASCII)
    .           any character except newline
    \n \t ...   control-character escapes (\n \t \r \f \v \0)
    \d \w \s    digit / word / space classes (\D \W \S negated)
    \X          any other escaped character stands for itself
    [a-z_]      character class with ranges; [^...] negates against ASCII
    ( ... )     grouping
    A|B         union
    AB          concatenation (implicit)
    A* A+ A?    postfix quantifiers

Pipeline: scan into atoms -> insert explicit concatenation atoms ->
shunting-yard to postfix -> Thompson's construction.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from .automata import ALPHABET, MAX_CHAR_CODE, NFA, NFABuilder
from .diagnostics import PatternSyntaxError

logger = logging.getLogger(__name__)


# =============================================================================
# Atoms
# =============================================================================

class AtomType(enum.Enum):
    LITERAL = "literal"
    CLASS = "class"
    UNION = "|"
    CONCAT = "·"
    STAR = "*"
    PLUS = "+"
    OPTIONAL = "?"
    LPAREN = "("
    RPAREN = ")"


@dataclass(frozen=True)
class Atom:
    type: AtomType
    pos: int
    chars: FrozenSet[str] = frozenset()
    text: str = ""

    def __str__(self) -> str:
        if self.type in (AtomType.LITERAL, AtomType.CLASS):
            return self.text
        return self.type.value


QUANTIFIERS = frozenset({AtomType.STAR, AtomType.PLUS, AtomType.OPTIONAL})
OPERANDS = frozenset({AtomType.LITERAL, AtomType.CLASS})

# Concatenation goes between an atom that closes an operand and one that opens one.
_ENDS_OPERAND = OPERANDS | QUANTIFIERS | {AtomType.RPAREN}
_STARTS_OPERAND = OPERANDS | {AtomType.LPAREN}

PRECEDENCE: Dict[AtomType, int] = {
    AtomType.UNION: 1,
    AtomType.CONCAT: 2,
    AtomType.STAR: 3,
    AtomType.PLUS: 3,
    AtomType.OPTIONAL: 3,
}

_SINGLE_CHAR_ATOMS = {
    "(": AtomType.LPAREN,
    ")": AtomType.RPAREN,
    "|": AtomType.UNION,
    "*": AtomType.STAR,
    "+": AtomType.PLUS,
    "?": AtomType.OPTIONAL,
}

_CONTROL_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "f": "\f", "v": "\v", "0": "\0"}

_DIGITS = frozenset("0123456789")
_WORD = _DIGITS | frozenset(chr(c) for c in range(ord("a"), ord("z") + 1)) \
    | frozenset(chr(c) for c in range(ord("A"), ord("Z") + 1)) | {"_"}
_SPACE = frozenset(" \t\n\r\f\v")

SHORTHAND_CLASSES: Dict[str, FrozenSet[str]] = {
    "d": _DIGITS,
    "w": _WORD,
    "s": _SPACE,
    "D": ALPHABET - _DIGITS,
    "W": ALPHABET - _WORD,
    "S": ALPHABET - _SPACE,
}


# =============================================================================
# Scanner
# =============================================================================

class PatternScanner:
    def __init__(self, pattern: str):
        self.pattern = pattern
        self.i = 0

    def scan(self) -> List[Atom]:
        atoms: List[Atom] = []
        while not self._eof():
            atoms.append(self._scan_atom())
        return atoms

    def _scan_atom(self) -> Atom:
        pos = self.i
        c = self.pattern[pos]

        if c in _SINGLE_CHAR_ATOMS:
            self.i += 1
            return Atom(_SINGLE_CHAR_ATOMS[c], pos, text=c)
        if c == "[":
            return self._scan_class()
        if c == "]":
            raise self._error(pos, "unbalanced ']'")
        if c == "\\":
            chars = self._scan_escape()
            text = self.pattern[pos:self.i]
            if len(chars) == 1:
                return Atom(AtomType.LITERAL, pos, chars, text)
            return Atom(AtomType.CLASS, pos, chars, text)
        if c == ".":
            self.i += 1
            return Atom(AtomType.CLASS, pos, ALPHABET - {"\n"}, ".")

        self._check_ascii(c, pos)
        self.i += 1
        return Atom(AtomType.LITERAL, pos, frozenset(c), c)

    def _scan_escape(self) -> FrozenSet[str]:
        start = self.i
        self.i += 1
        c = self._peek()
        if c is None:
            raise self._error(start, "dangling backslash")
        self.i += 1
        if c in SHORTHAND_CLASSES:
            return SHORTHAND_CLASSES[c]
        if c in _CONTROL_ESCAPES:
            return frozenset(_CONTROL_ESCAPES[c])
        self._check_ascii(c, start + 1)
        return frozenset(c)

    def _scan_class(self) -> Atom:
        start = self.i
        self.i += 1
        negated = False
        if self._peek() == "^":
            negated = True
            self.i += 1

        members: set = set()
        first = True
        while True:
            c = self._peek()
            if c is None:
                raise self._error(start, "unterminated character class")
            # A ']' right after '[' or '[^' is a literal member.
            if c == "]" and not first:
                self.i += 1
                break
            first = False
            members |= self._scan_class_item()

        chars = frozenset(members)
        if negated:
            chars = ALPHABET - chars
        if not chars:
            raise self._error(start, "empty character class")
        return Atom(AtomType.CLASS, start, chars, self.pattern[start:self.i])

    def _scan_class_item(self) -> FrozenSet[str]:
        item_pos = self.i
        if self._peek() == "\\":
            left = self._scan_escape()
        else:
            c = self.pattern[self.i]
            self._check_ascii(c, self.i)
            self.i += 1
            left = frozenset(c)

        # '-' before ']' (or at the very end) is a literal, not a range.
        if self._peek() != "-" or self._peek_ahead(1) in ("]", None):
            return left
        if len(left) != 1:
            raise self._error(item_pos, "range endpoint cannot be a class escape")

        self.i += 1
        right_pos = self.i
        if self._peek() == "\\":
            right = self._scan_escape()
            if len(right) != 1:
                raise self._error(right_pos, "range endpoint cannot be a class escape")
        else:
            c = self.pattern[self.i]
            self._check_ascii(c, self.i)
            self.i += 1
            right = frozenset(c)

        lo = ord(next(iter(left)))
        hi = ord(next(iter(right)))
        if lo > hi:
            raise self._error(item_pos, f"invalid range {chr(lo)!r}-{chr(hi)!r}")
        return frozenset(chr(code) for code in range(lo, hi + 1))

    def _check_ascii(self, c: str, pos: int) -> None:
        if ord(c) > MAX_CHAR_CODE:
            raise self._error(pos, f"non-ASCII character {c!r}")

    def _peek(self) -> Optional[str]:
        if self.i >= len(self.pattern):
            return None
        return self.pattern[self.i]

    def _peek_ahead(self, k: int) -> Optional[str]:
        j = self.i + k
        if j >= len(self.pattern):
            return None
        return self.pattern[j]

    def _eof(self) -> bool:
        return self.i >= len(self.pattern)

    def _error(self, pos: int, reason: str) -> PatternSyntaxError:
        return PatternSyntaxError(self.pattern, pos, reason)


# =============================================================================
# Preprocessing and infix -> postfix
# =============================================================================

def insert_concatenation(pattern: str, atoms: List[Atom]) -> List[Atom]:
    """Make concatenation explicit and reject operators that lack operands."""
    out: List[Atom] = []
    prev: Optional[Atom] = None
    for atom in atoms:
        if atom.type in QUANTIFIERS and (prev is None or prev.type not in _ENDS_OPERAND):
            raise PatternSyntaxError(pattern, atom.pos, f"operator '{atom.type.value}' missing operand")
        if atom.type is AtomType.UNION and (prev is None or prev.type in (AtomType.UNION, AtomType.LPAREN)):
            raise PatternSyntaxError(pattern, atom.pos, "empty alternative")
        if atom.type is AtomType.RPAREN and prev is not None:
            if prev.type is AtomType.LPAREN:
                raise PatternSyntaxError(pattern, prev.pos, "empty group")
            if prev.type is AtomType.UNION:
                raise PatternSyntaxError(pattern, prev.pos, "empty alternative")

        if prev is not None and prev.type in _ENDS_OPERAND and atom.type in _STARTS_OPERAND:
            out.append(Atom(AtomType.CONCAT, atom.pos))
        out.append(atom)
        prev = atom

    if prev is not None and prev.type is AtomType.UNION:
        raise PatternSyntaxError(pattern, prev.pos, "empty alternative")
    return out


def to_postfix(pattern: str, atoms: List[Atom]) -> List[Atom]:
    output: List[Atom] = []
    operators: List[Atom] = []

    for atom in atoms:
        if atom.type in OPERANDS:
            output.append(atom)
        elif atom.type is AtomType.LPAREN:
            operators.append(atom)
        elif atom.type is AtomType.RPAREN:
            while operators and operators[-1].type is not AtomType.LPAREN:
                output.append(operators.pop())
            if not operators:
                raise PatternSyntaxError(pattern, atom.pos, "unbalanced ')'")
            operators.pop()
        else:
            prec = PRECEDENCE[atom.type]
            while (operators and operators[-1].type is not AtomType.LPAREN
                   and PRECEDENCE[operators[-1].type] >= prec):
                output.append(operators.pop())
            operators.append(atom)

    while operators:
        op = operators.pop()
        if op.type is AtomType.LPAREN:
            raise PatternSyntaxError(pattern, op.pos, "unbalanced '('")
        output.append(op)
    return output


def parse_postfix(pattern: str) -> List[Atom]:
    if not pattern:
        raise PatternSyntaxError(pattern, 0, "empty pattern")
    atoms = PatternScanner(pattern).scan()
    return to_postfix(pattern, insert_concatenation(pattern, atoms))


def postfix_notation(pattern: str) -> str:
    return "".join(str(a) for a in parse_postfix(pattern))


# =============================================================================
# Thompson construction
# =============================================================================

@dataclass(frozen=True)
class Fragment:
    start: int
    accepts: FrozenSet[int]


class ThompsonBuilder:
    def __init__(self, pattern: str):
        self.pattern = pattern
        self.arena = NFABuilder()

    def build(self, postfix: List[Atom]) -> NFA:
        stack: List[Fragment] = []
        for atom in postfix:
            if atom.type in OPERANDS:
                stack.append(self._symbol_fragment(atom.chars))
            elif atom.type in QUANTIFIERS:
                inner = self._pop(stack, atom, 1)[0]
                if atom.type is AtomType.STAR:
                    stack.append(self._star(inner, allow_empty=True))
                elif atom.type is AtomType.PLUS:
                    stack.append(self._star(inner, allow_empty=False))
                else:
                    stack.append(self._union(inner, self._epsilon_fragment()))
            elif atom.type is AtomType.CONCAT:
                left, right = self._pop(stack, atom, 2)
                stack.append(self._concat(left, right))
            elif atom.type is AtomType.UNION:
                left, right = self._pop(stack, atom, 2)
                stack.append(self._union(left, right))
            else:
                raise PatternSyntaxError(self.pattern, atom.pos, f"unexpected {atom.type.value!r}")

        if len(stack) != 1:
            raise PatternSyntaxError(self.pattern, 0, "malformed expression")
        frag = stack[0]
        return self.arena.build(frag.start, frag.accepts)

    def _pop(self, stack: List[Fragment], atom: Atom, count: int) -> List[Fragment]:
        if len(stack) < count:
            raise PatternSyntaxError(self.pattern, atom.pos, f"operator '{atom.type.value}' missing operand")
        operands = stack[-count:]
        del stack[-count:]
        return operands

    def _epsilon_fragment(self) -> Fragment:
        s = self.arena.new_state()
        a = self.arena.new_state()
        self.arena.add_epsilon(s, a)
        return Fragment(s, frozenset({a}))

    def _symbol_fragment(self, chars: FrozenSet[str]) -> Fragment:
        s = self.arena.new_state()
        a = self.arena.new_state()
        for ch in sorted(chars):
            self.arena.add_transition(s, ch, a)
        return Fragment(s, frozenset({a}))

    def _concat(self, left: Fragment, right: Fragment) -> Fragment:
        for acc in left.accepts:
            self.arena.add_epsilon(acc, right.start)
        return Fragment(left.start, right.accepts)

    def _union(self, left: Fragment, right: Fragment) -> Fragment:
        s = self.arena.new_state()
        a = self.arena.new_state()
        self.arena.add_epsilon(s, left.start)
        self.arena.add_epsilon(s, right.start)
        for acc in left.accepts | right.accepts:
            self.arena.add_epsilon(acc, a)
        return Fragment(s, frozenset({a}))

    def _star(self, body: Fragment, allow_empty: bool) -> Fragment:
        s = self.arena.new_state()
        a = self.arena.new_state()
        if allow_empty:
            self.arena.add_epsilon(s, a)
        self.arena.add_epsilon(s, body.start)
        for acc in body.accepts:
            self.arena.add_epsilon(acc, body.start)
            self.arena.add_epsilon(acc, a)
        return Fragment(s, frozenset({a}))


def compile_pattern(pattern: str) -> NFA:
    """Compile a pattern into an NFA. Raises PatternSyntaxError on malformed input."""
    nfa = ThompsonBuilder(pattern).build(parse_postfix(pattern))
    logger.debug("compiled %r into NFA with %d states", pattern, len(nfa))
    return nfa
