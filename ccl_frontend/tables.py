from __future__ import annotations

from typing import Dict, Iterable, List, Set

from tabulate import tabulate

from .automata import DFA, EPSILON, NFA
from .diagnostics import Diagnostic
from .language import Token
from .symbol_table import Symbol

TABLE_FORMAT = "github"


# =============================================================================
# Symbol rendering
# =============================================================================

def _is_printable_ascii(code: int) -> bool:
    return 32 <= code <= 126


def _escape_char(ch: str) -> str:
    if ch == "\n":
        return r"\n"
    if ch == "\r":
        return r"\r"
    if ch == "\t":
        return r"\t"
    if ch == "\\":
        return r"\\"
    if ch == "'":
        return r"\'"
    if _is_printable_ascii(ord(ch)):
        return ch
    return f"\\x{ord(ch):02X}"


def symbols_to_ranges(symbols: Iterable[str]) -> List[str]:
    # Compress a symbol set into readable runs, e.g. ["'0'-'9'", "'_'"].
    codes = sorted(ord(s) for s in symbols)
    out: List[str] = []
    i = 0
    while i < len(codes):
        j = i
        while j + 1 < len(codes) and codes[j + 1] == codes[j] + 1:
            j += 1
        a = _escape_char(chr(codes[i]))
        if i == j:
            out.append(f"'{a}'")
        else:
            out.append(f"'{a}'-'{_escape_char(chr(codes[j]))}'")
        i = j + 1
    return out


def format_symbols_label(symbols: Iterable[str], max_chunks: int = 8) -> str:
    chunks = symbols_to_ranges(symbols)
    if not chunks:
        return "∅"
    if len(chunks) <= max_chunks:
        return ", ".join(chunks)
    head = ", ".join(chunks[:max_chunks])
    return f"{head}, ... (+{len(chunks) - max_chunks} more)"


def _markers(state: int, start: int, accepting: Iterable[int]) -> str:
    marks = []
    if state == start:
        marks.append("START")
    if state in accepting:
        marks.append("ACCEPT")
    return ",".join(marks)


# =============================================================================
# Automata tables
# =============================================================================

def format_nfa(nfa: NFA) -> str:
    # One row per (state, destination) with the symbols leading there grouped.
    rows: List[List[str]] = []
    for st in nfa.states:
        mark = _markers(st.id, nfa.start, nfa.accepting)
        eps = st.targets(EPSILON)
        eps_col = "{" + ",".join(str(x) for x in sorted(eps)) + "}" if eps else ""

        groups: Dict[int, Set[str]] = {}
        for sym, targets in st.transitions.items():
            if sym == EPSILON:
                continue
            for dst in targets:
                groups.setdefault(dst, set()).add(sym)

        if not groups:
            rows.append([str(st.id), mark, eps_col, "", ""])
            continue
        first = True
        for dst in sorted(groups):
            rows.append([
                str(st.id) if first else "",
                mark if first else "",
                eps_col if first else "",
                str(dst),
                format_symbols_label(groups[dst]),
            ])
            first = False

    return tabulate(rows, headers=["State", "Markers", "Eps", "Dest", "Symbols"], tablefmt=TABLE_FORMAT)


def format_dfa(dfa: DFA) -> str:
    rows: List[List[str]] = []
    for st in dfa.states:
        mark = _markers(st.id, dfa.start, dfa.accepting)
        subset = "{" + ",".join(str(x) for x in sorted(st.nfa_states)) + "}"

        groups: Dict[int, Set[str]] = {}
        for sym, dst in st.transitions.items():
            groups.setdefault(dst, set()).add(sym)

        if not groups:
            rows.append([str(st.id), mark, subset, "-", ""])
            continue
        first = True
        for dst in sorted(groups):
            rows.append([
                str(st.id) if first else "",
                mark if first else "",
                subset if first else "",
                str(dst),
                format_symbols_label(groups[dst]),
            ])
            first = False

    return tabulate(rows, headers=["State", "Markers", "NFA states", "Dest", "Symbols"], tablefmt=TABLE_FORMAT)


# =============================================================================
# Scan results
# =============================================================================

def format_tokens(tokens: Iterable[Token]) -> str:
    rows = [(t.kind.name, "".join(_escape_char(c) for c in t.lexeme), t.line, t.column) for t in tokens]
    return tabulate(rows, headers=["Kind", "Lexeme", "Line", "Col"], tablefmt=TABLE_FORMAT,
                    colalign=("left", "left", "right", "right"))


def format_symbols(symbols: Iterable[Symbol]) -> str:
    rows = [(s.name, s.type, s.scope, s.is_global, "" if s.value is None else s.value) for s in symbols]
    return tabulate(rows, headers=["Name", "Type", "Scope", "Global", "Value"], tablefmt=TABLE_FORMAT)


# Rendered in the order given; Tokenizer.tokenize already returns them by position.
def format_diagnostics(diagnostics: Iterable[Diagnostic]) -> str:
    items = list(diagnostics)
    if not items:
        return "No errors found."
    rows = [(str(d.kind), d.line, d.column, d.message) for d in items]
    return tabulate(rows, headers=["Kind", "Line", "Col", "Message"], tablefmt=TABLE_FORMAT)
