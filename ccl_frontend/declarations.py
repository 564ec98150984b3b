"""
Declaration tracking while scanning.

The tokenizer threads one DeclarationState value through its loop and calls
step() for every non-trivia token. step() returns the next state and applies
the token's effect (declare, resolve, assign, enter/exit scope) to the
symbol table.

    global integer max = 100
    ^ Awaiting(None, global)
           ^ Awaiting(integer, global)
                   ^ declare max, Idle
                       ^ AwaitingValue(max)
                         ^ assign 100, Idle
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from .language import FUNCTION_TYPE, LITERAL_KINDS, TYPE_KEYWORDS, Token, TokenKind
from .symbol_table import SymbolTable


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingDeclIdentifier:
    type: Optional[str]
    is_global: bool = False


@dataclass(frozen=True)
class AwaitingValue:
    target: str


Phase = Union[Idle, AwaitingDeclIdentifier, AwaitingValue]

IDLE = Idle()


@dataclass(frozen=True)
class DeclarationState:
    phase: Phase = IDLE
    last_identifier: Optional[str] = None
    # Set by 'function' until the body's '{' is reached.
    function_pending: bool = False
    # The function scope was already entered at the parameter list '('.
    function_scope_open: bool = False


INITIAL_STATE = DeclarationState()


def _pending_global(phase: Phase) -> bool:
    return isinstance(phase, AwaitingDeclIdentifier) and phase.is_global


def step(state: DeclarationState, token: Token, symbols: SymbolTable) -> DeclarationState:
    kind = token.kind
    phase = state.phase

    if kind is TokenKind.GLOBAL:
        pending_type = phase.type if isinstance(phase, AwaitingDeclIdentifier) else None
        return replace(state, phase=AwaitingDeclIdentifier(pending_type, is_global=True))

    if kind in TYPE_KEYWORDS:
        return replace(state, phase=AwaitingDeclIdentifier(TYPE_KEYWORDS[kind], _pending_global(phase)))

    if kind is TokenKind.FUNCTION:
        return replace(
            state,
            phase=AwaitingDeclIdentifier(FUNCTION_TYPE, _pending_global(phase)),
            function_pending=True,
            function_scope_open=False,
        )

    if kind is TokenKind.IDENTIFIER:
        name = token.lexeme
        if isinstance(phase, AwaitingDeclIdentifier) and phase.type is not None:
            error = symbols.add(name, phase.type, is_global=phase.is_global,
                                line=token.line, column=token.column)
            # A rejected redeclaration must not become an assignment target.
            if error is not None:
                return replace(state, phase=IDLE, last_identifier=None)
        else:
            symbols.resolve(name, token.line, token.column)
        return replace(state, phase=IDLE, last_identifier=name)

    if kind is TokenKind.ASSIGN:
        target = state.last_identifier
        if target is not None and symbols.lookup(target) is not None:
            return replace(state, phase=AwaitingValue(target))
        return replace(state, phase=IDLE)

    if kind in LITERAL_KINDS:
        if isinstance(phase, AwaitingValue):
            symbols.set_value(phase.target, token.lexeme, token.line, token.column)
        return replace(state, phase=IDLE)

    if kind is TokenKind.LPAREN:
        if state.function_pending and not state.function_scope_open:
            symbols.enter_scope()
            return replace(state, phase=IDLE, function_scope_open=True)
        return replace(state, phase=IDLE)

    if kind is TokenKind.LBRACE:
        if not (state.function_pending and state.function_scope_open):
            symbols.enter_scope()
        return replace(state, phase=IDLE, function_pending=False, function_scope_open=False)

    if kind is TokenKind.RBRACE:
        symbols.exit_scope(token.line, token.column)
        return INITIAL_STATE

    if kind is TokenKind.SEMICOLON:
        # A function that ends without a body (`function f(integer a);`)
        # must not keep its parameter scope.
        if state.function_pending and state.function_scope_open:
            symbols.exit_scope(token.line, token.column)
        return INITIAL_STATE

    # Anything else abandons a pending declaration or assignment.
    if isinstance(phase, Idle):
        return state
    return replace(state, phase=IDLE)
