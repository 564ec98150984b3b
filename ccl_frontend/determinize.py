from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, FrozenSet, List

from .automata import DFA, DFAState, NFA
from .regex_compiler import compile_pattern

logger = logging.getLogger(__name__)


def nfa_to_dfa(nfa: NFA) -> DFA:
    """
    Subset construction.

    Every DFA state stands for one distinct epsilon-closed set of NFA states;
    only sets reachable from the start closure are ever created, and symbols
    that lead to the empty set get no transition.
    """
    closures: Dict[FrozenSet[int], FrozenSet[int]] = {}

    def closure_of(states: FrozenSet[int]) -> FrozenSet[int]:
        cached = closures.get(states)
        if cached is None:
            cached = nfa.epsilon_closure(states)
            closures[states] = cached
        return cached

    symbols = sorted(nfa.alphabet)

    def new_state(subset: FrozenSet[int]) -> int:
        sid = len(dfa_states)
        dfa_states.append(DFAState(sid, subset, accepting=bool(subset & nfa.accepting)))
        state_id[subset] = sid
        queue.append(sid)
        return sid

    dfa_states: List[DFAState] = []
    state_id: Dict[FrozenSet[int], int] = {}
    queue: Deque[int] = deque()

    start = new_state(closure_of(frozenset({nfa.start})))

    while queue:
        current = dfa_states[queue.popleft()]
        for sym in symbols:
            moved = nfa.move(current.nfa_states, sym)
            if not moved:
                continue
            nxt = closure_of(moved)
            target = state_id.get(nxt)
            if target is None:
                target = new_state(nxt)
            current.transitions[sym] = target

    dfa = DFA(
        states=tuple(dfa_states),
        start=start,
        accepting=frozenset(s.id for s in dfa_states if s.accepting),
        alphabet=nfa.alphabet,
    )
    logger.debug("determinized NFA (%d states) into DFA (%d states)", len(nfa), len(dfa))
    return dfa


def compile_dfa(pattern: str) -> DFA:
    return nfa_to_dfa(compile_pattern(pattern))
