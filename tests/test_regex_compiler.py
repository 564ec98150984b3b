import unittest

from ccl_frontend.automata import EPSILON
from ccl_frontend.diagnostics import ErrorKind, PatternSyntaxError
from ccl_frontend import regex_compiler
from ccl_frontend.regex_compiler import compile_pattern, postfix_notation


class TestPostfix(unittest.TestCase):
    def test_syntax_summary_keeps_backslashes(self):
        self.assertIn(r"\d \w \s", regex_compiler.__doc__)
        self.assertIn(r"\n \t \r \f \v \0", regex_compiler.__doc__)

    def test_concatenation_binds_tighter_than_union(self):
        self.assertEqual(postfix_notation("ab|c"), "ab·c|")

    def test_quantifier_binds_tightest(self):
        self.assertEqual(postfix_notation("a*b"), "a*b·")
        self.assertEqual(postfix_notation("ab+"), "ab+·")

    def test_grouping(self):
        self.assertEqual(postfix_notation("(a|b)*abb"), "ab|*a·b·b·")

    def test_character_class_is_one_operand(self):
        self.assertEqual(postfix_notation("[a-z]+x"), "[a-z]+x·")

    def test_escape_kept_as_written(self):
        self.assertEqual(postfix_notation(r"a\*"), "a\\*·")


class TestThompsonConstruction(unittest.TestCase):
    def test_literal_fragment(self):
        nfa = compile_pattern("a")
        self.assertEqual(len(nfa), 2)
        self.assertEqual(nfa.alphabet, frozenset("a"))
        self.assertEqual(len(nfa.accepting), 1)
        self.assertEqual(nfa.states[nfa.start].targets("a"), set(nfa.accepting))

    def test_alphabet_excludes_epsilon(self):
        nfa = compile_pattern("(a|b)*c?")
        self.assertEqual(nfa.alphabet, frozenset("abc"))
        self.assertNotIn(EPSILON, nfa.alphabet)

    def test_star_has_zero_edge_and_plus_does_not(self):
        star = compile_pattern("a*")
        plus = compile_pattern("a+")
        self.assertTrue(star.fullmatch(""))
        self.assertFalse(plus.fullmatch(""))

    def test_every_referenced_state_exists(self):
        nfa = compile_pattern("(ab|cd)*[x-z]?e+")
        for st in nfa.states:
            for targets in st.transitions.values():
                for t in targets:
                    self.assertLess(t, len(nfa.states))

    def test_accepting_flag_matches_accept_set(self):
        nfa = compile_pattern("ab|c")
        flagged = {s.id for s in nfa.states if s.accepting}
        self.assertEqual(flagged, set(nfa.accepting))


class TestPatternSemantics(unittest.TestCase):
    CASES = [
        ("a*", "", True),
        ("a*", "aaa", True),
        ("a*", "b", False),
        ("a+", "", False),
        ("a+", "aaa", True),
        ("a?", "", True),
        ("a?", "a", True),
        ("a?", "aa", False),
        ("a|b", "b", True),
        ("a|b", "c", False),
        ("(a|b)*abb", "aabb", True),
        ("(a|b)*abb", "ab", False),
        ("(ab|cd)(xy|z)", "cdxy", True),
        ("(ab|cd)(xy|z)", "abxz", False),
        ("[a-c][0-9][x-z]", "b5y", True),
        ("[a-c][0-9][x-z]", "d0x", False),
        ("[^0-9]", "x", True),
        ("[^0-9]", "7", False),
        (r"\d+", "2024", True),
        (r"\w+", "max_1", True),
        (r"\s", "\t", True),
        (r"\D", "5", False),
        (".", "q", True),
        (".", "\n", False),
        (r"a\*", "a*", True),
        (r"a\*", "aa", False),
        (r"\n", "\n", True),
        ("[-a]", "-", True),
        ("[a-]", "-", True),
        ("[]a]", "]", True),
        (r"[\]]", "]", True),
        (r"'[^'\\\n]'", "'c'", True),
        (r"'[^'\\\n]'", "'''", False),
    ]

    def test_cases(self):
        for pattern, text, expected in self.CASES:
            with self.subTest(pattern=pattern, text=text):
                self.assertEqual(compile_pattern(pattern).fullmatch(text), expected)


class TestPatternErrors(unittest.TestCase):
    CASES = [
        ("", 0, "empty pattern"),
        ("(ab", 0, "unbalanced '('"),
        ("ab)", 2, "unbalanced ')'"),
        ("a]", 1, "unbalanced ']'"),
        ("[abc", 0, "unterminated character class"),
        ("x[^", 1, "unterminated character class"),
        ("*a", 0, "missing operand"),
        ("a|*", 2, "missing operand"),
        ("(+)", 1, "missing operand"),
        ("a|", 1, "empty alternative"),
        ("|a", 0, "empty alternative"),
        ("a||b", 2, "empty alternative"),
        ("(a|)", 2, "empty alternative"),
        ("()", 0, "empty group"),
        ("a\\", 1, "dangling backslash"),
        ("[z-a]", 1, "invalid range"),
        (r"[\d-z]", 1, "range endpoint"),
        ("café", 3, "non-ASCII"),
    ]

    def test_errors_name_pattern_and_position(self):
        for pattern, position, reason in self.CASES:
            with self.subTest(pattern=pattern):
                with self.assertRaises(PatternSyntaxError) as ctx:
                    compile_pattern(pattern)
                err = ctx.exception
                self.assertEqual(err.pattern, pattern)
                self.assertEqual(err.position, position)
                self.assertIn(reason, err.reason)
                self.assertIn(repr(pattern), str(err))

    def test_error_is_value_error_with_pattern_kind(self):
        with self.assertRaises(ValueError) as ctx:
            compile_pattern("(")
        self.assertIs(ctx.exception.kind, ErrorKind.PATTERN)
        self.assertIs(ctx.exception.to_diagnostic().kind, ErrorKind.PATTERN)


if __name__ == "__main__":
    unittest.main()
