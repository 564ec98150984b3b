from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

# Reserved symbol for epsilon edges. No pattern literal is ever the empty string.
EPSILON = ""

# Alphabet: 7-bit ASCII.
MAX_CHAR_CODE = 127
ALPHABET: FrozenSet[str] = frozenset(chr(c) for c in range(MAX_CHAR_CODE + 1))


# =============================================================================
# NFA representation
# =============================================================================

@dataclass
class State:
    id: int
    accepting: bool = False
    transitions: Dict[str, Set[int]] = field(default_factory=dict)

    def add_transition(self, symbol: str, target: int) -> None:
        self.transitions.setdefault(symbol, set()).add(target)

    def targets(self, symbol: str) -> Set[int]:
        return self.transitions.get(symbol, set())


@dataclass(frozen=True)
class NFA:
    states: Tuple[State, ...]
    start: int
    accepting: FrozenSet[int]
    alphabet: FrozenSet[str]

    def __len__(self) -> int:
        return len(self.states)

    def epsilon_closure(self, state_ids: Iterable[int]) -> FrozenSet[int]:
        closure = set(state_ids)
        stack: List[int] = list(closure)
        while stack:
            s = stack.pop()
            for t in self.states[s].targets(EPSILON):
                if t not in closure:
                    closure.add(t)
                    stack.append(t)
        return frozenset(closure)

    def move(self, state_ids: Iterable[int], symbol: str) -> FrozenSet[int]:
        out: Set[int] = set()
        for s in state_ids:
            out |= self.states[s].targets(symbol)
        return frozenset(out)

    def fullmatch(self, text: str) -> bool:
        # Reference simulation, used to cross-check determinization.
        current = self.epsilon_closure({self.start})
        for ch in text:
            current = self.epsilon_closure(self.move(current, ch))
            if not current:
                return False
        return bool(current & self.accepting)


class NFABuilder:
    """Growable arena of NFA states; frozen into an NFA once construction is done."""

    def __init__(self) -> None:
        self.states: List[State] = []
        self.alphabet: Set[str] = set()

    def new_state(self) -> int:
        sid = len(self.states)
        self.states.append(State(sid))
        return sid

    def add_epsilon(self, src: int, dst: int) -> None:
        self.states[src].add_transition(EPSILON, dst)

    def add_transition(self, src: int, symbol: str, dst: int) -> None:
        self.states[src].add_transition(symbol, dst)
        self.alphabet.add(symbol)

    def build(self, start: int, accepting: Iterable[int]) -> NFA:
        accept_set = frozenset(accepting)
        for sid in accept_set:
            self.states[sid].accepting = True
        return NFA(
            states=tuple(self.states),
            start=start,
            accepting=accept_set,
            alphabet=frozenset(self.alphabet),
        )


# =============================================================================
# DFA representation
# =============================================================================

@dataclass
class DFAState:
    id: int
    nfa_states: FrozenSet[int]
    accepting: bool = False
    transitions: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class DFA:
    states: Tuple[DFAState, ...]
    start: int
    accepting: FrozenSet[int]
    alphabet: FrozenSet[str]

    def __len__(self) -> int:
        return len(self.states)

    def step(self, state: int, symbol: str) -> Optional[int]:
        return self.states[state].transitions.get(symbol)

    def fullmatch(self, text: str) -> bool:
        s: Optional[int] = self.start
        for ch in text:
            s = self.step(s, ch)
            if s is None:
                return False
        return s in self.accepting

    def longest_match(self, text: str, pos: int = 0) -> int:
        """
        Length of the longest nonempty prefix of text[pos:] this DFA accepts,
        or 0 if there is none. The walk stops at the first missing transition.
        """
        s = self.start
        best = 0
        i = pos
        n = len(text)
        while i < n:
            nxt = self.states[s].transitions.get(text[i])
            if nxt is None:
                break
            s = nxt
            i += 1
            if self.states[s].accepting:
                best = i - pos
        return best
