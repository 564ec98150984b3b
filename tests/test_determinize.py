import itertools
import unittest
from collections import deque

from ccl_frontend.determinize import compile_dfa, nfa_to_dfa
from ccl_frontend.regex_compiler import compile_pattern

PATTERNS = [
    "a*",
    "a+b",
    "(a|b)*abb",
    "ab?a",
    "(ab|ba)+",
    "a(a|b)*|b",
    "((a|b)(a|b))*",
    "[ab]c*",
    "(a*b*)*c",
    "a?b?c?",
]


def strings_up_to(alphabet, max_len):
    for n in range(max_len + 1):
        for chars in itertools.product(alphabet, repeat=n):
            yield "".join(chars)


class TestSubsetConstruction(unittest.TestCase):
    def test_scenarios(self):
        star = compile_dfa("a*")
        self.assertTrue(star.fullmatch(""))
        self.assertTrue(star.fullmatch("aaa"))
        self.assertFalse(star.fullmatch("b"))

        abb = compile_dfa("(a|b)*abb")
        self.assertTrue(abb.fullmatch("aabb"))
        self.assertFalse(abb.fullmatch("ab"))

    def test_dfa_agrees_with_nfa_simulation(self):
        for pattern in PATTERNS:
            nfa = compile_pattern(pattern)
            dfa = nfa_to_dfa(nfa)
            for text in strings_up_to("abc", 5):
                with self.subTest(pattern=pattern, text=text):
                    self.assertEqual(dfa.fullmatch(text), nfa.fullmatch(text))

    def test_compiling_twice_gives_equivalent_dfas(self):
        for pattern in PATTERNS:
            first = compile_dfa(pattern)
            second = compile_dfa(pattern)
            for text in strings_up_to("abc", 4):
                self.assertEqual(first.fullmatch(text), second.fullmatch(text))

    def test_no_two_states_share_a_subset(self):
        for pattern in PATTERNS:
            dfa = compile_dfa(pattern)
            subsets = [s.nfa_states for s in dfa.states]
            self.assertEqual(len(subsets), len(set(subsets)))
            self.assertTrue(all(subsets))

    def test_every_state_is_reachable(self):
        for pattern in PATTERNS:
            dfa = compile_dfa(pattern)
            seen = {dfa.start}
            queue = deque([dfa.start])
            while queue:
                for nxt in dfa.states[queue.popleft()].transitions.values():
                    if nxt not in seen:
                        seen.add(nxt)
                        queue.append(nxt)
            self.assertEqual(seen, set(range(len(dfa))))

    def test_start_is_epsilon_closure_and_accepting_matches_subsets(self):
        nfa = compile_pattern("(a|b)*abb")
        dfa = nfa_to_dfa(nfa)
        self.assertEqual(dfa.states[dfa.start].nfa_states, nfa.epsilon_closure({nfa.start}))
        for st in dfa.states:
            self.assertEqual(st.accepting, bool(st.nfa_states & nfa.accepting))
            self.assertEqual(st.accepting, st.id in dfa.accepting)

    def test_transition_function_is_partial(self):
        dfa = compile_dfa("ab")
        self.assertIsNone(dfa.step(dfa.start, "b"))
        self.assertIsNotNone(dfa.step(dfa.start, "a"))
        self.assertFalse(dfa.fullmatch("z"))


class TestLongestMatch(unittest.TestCase):
    def test_longest_prefix(self):
        dfa = compile_dfa("a+")
        self.assertEqual(dfa.longest_match("aaab"), 3)
        self.assertEqual(dfa.longest_match("baa", 1), 2)
        self.assertEqual(dfa.longest_match("b"), 0)

    def test_empty_match_is_not_reported(self):
        self.assertEqual(compile_dfa("a*").longest_match("bbb"), 0)

    def test_keeps_last_accepting_position(self):
        # Scanning runs past "ab" to "abcd" before falling back.
        dfa = compile_dfa("ab|abcde")
        self.assertEqual(dfa.longest_match("abcdx"), 2)
        self.assertEqual(dfa.longest_match("abcde!"), 5)


if __name__ == "__main__":
    unittest.main()
