"""
Scoped symbol table.

Scopes form a stack of frames; frame 0 is the global scope and is never
popped. enter_scope() pushes id = top + 1, exit_scope() pops the top frame
and with it every symbol declared there. Lookup is static lexical scoping:
innermost frame outwards, ending with the global frame.

Rejected operations do not raise. They are recorded on the table's
Diagnostics and the error is returned to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .diagnostics import Diagnostics, SemanticError
from .language import MAX_DECIMAL_PLACES, LiteralValue, convert_literal, validate_literal

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = 0


@dataclass(slots=True)
class Symbol:
    name: str
    type: str
    is_global: bool
    scope: int
    value: Optional[LiteralValue] = None


class SymbolTable:
    def __init__(self, diagnostics: Optional[Diagnostics] = None,
                 max_decimal_places: int = MAX_DECIMAL_PLACES) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.max_decimal_places = max_decimal_places
        self._frames: List[Tuple[int, Dict[str, Symbol]]] = [(GLOBAL_SCOPE, {})]

    # ---------- scope management ----------
    def current_scope(self) -> int:
        return self._frames[-1][0]

    @property
    def depth(self) -> int:
        return len(self._frames) - 1

    def enter_scope(self) -> int:
        scope_id = self.current_scope() + 1
        self._frames.append((scope_id, {}))
        logger.debug("entered scope %d", scope_id)
        return scope_id

    def exit_scope(self, line: int = 0, column: int = 0) -> Optional[SemanticError]:
        if len(self._frames) == 1:
            return self._fail("unbalanced '}': no scope to exit", line, column)
        scope_id, frame = self._frames.pop()
        logger.debug("exited scope %d, discarding %d symbol(s)", scope_id, len(frame))
        return None

    # ---------- declarations ----------
    def add(self, name: str, type: str, is_global: bool = False,
            initial_value: Optional[str] = None,
            line: int = 0, column: int = 0) -> Optional[SemanticError]:
        """
        Declare name in the current scope, or in the global scope when
        is_global is set. initial_value is literal source text ("42", "'c'")
        and is validated against type before the symbol is created.
        """
        scope_id, frame = self._frames[0] if is_global else self._frames[-1]
        if name in frame:
            return self._fail(f"Symbol '{name}' already defined in scope {scope_id}", line, column)

        value: Optional[LiteralValue] = None
        if initial_value is not None:
            problem = validate_literal(type, initial_value, self.max_decimal_places)
            if problem is not None:
                return self._fail(problem, line, column)
            value = convert_literal(type, initial_value)

        frame[name] = Symbol(name=name, type=type, is_global=is_global, scope=scope_id, value=value)
        logger.debug("declared %s %s in scope %d", type, name, scope_id)
        return None

    # ---------- lookup ----------
    def lookup(self, name: str) -> Optional[Symbol]:
        for _, frame in reversed(self._frames):
            symbol = frame.get(name)
            if symbol is not None:
                return symbol
        return None

    def lookup_local(self, name: str) -> Optional[Symbol]:
        return self._frames[-1][1].get(name)

    def resolve(self, name: str, line: int = 0, column: int = 0) -> Optional[Symbol]:
        """Like lookup(), but records an "undefined symbol" error when the name is unknown."""
        symbol = self.lookup(name)
        if symbol is None:
            self._fail(f"Undefined symbol: {name}", line, column)
        return symbol

    # ---------- values ----------
    def set_value(self, name: str, value: str, line: int = 0, column: int = 0) -> Optional[SemanticError]:
        symbol = self.lookup(name)
        if symbol is None:
            return self._fail(f"Undefined symbol: {name}", line, column)
        problem = validate_literal(symbol.type, value, self.max_decimal_places)
        if problem is not None:
            return self._fail(f"{problem} (assigned to {symbol.type} '{name}')", line, column)
        symbol.value = convert_literal(symbol.type, value)
        return None

    # ---------- utility ----------
    def symbols(self) -> List[Symbol]:
        """All visible-or-shadowed symbols, outermost scope first."""
        return [s for _, frame in self._frames for s in frame.values()]

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def _fail(self, message: str, line: int, column: int) -> SemanticError:
        error = SemanticError(message, line, column)
        self.diagnostics.record(error)
        return error

    def __repr__(self) -> str:
        lines = []
        for scope_id, frame in self._frames:
            lines.append(f"Scope {scope_id}:")
            for name, info in frame.items():
                lines.append(f"  {name} -> {info}")
        return "\n".join(lines)
