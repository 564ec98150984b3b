import unittest

from ccl_frontend.diagnostics import Diagnostics, ErrorKind, SemanticError
from ccl_frontend.symbol_table import GLOBAL_SCOPE, SymbolTable


class TestScopes(unittest.TestCase):
    def setUp(self):
        self.table = SymbolTable()

    def test_starts_in_global_scope(self):
        self.assertEqual(self.table.current_scope(), GLOBAL_SCOPE)
        self.assertEqual(self.table.depth, 0)

    def test_enter_and_exit(self):
        self.assertEqual(self.table.enter_scope(), 1)
        self.assertEqual(self.table.enter_scope(), 2)
        self.assertEqual(self.table.depth, 2)
        self.assertIsNone(self.table.exit_scope())
        self.assertEqual(self.table.current_scope(), 1)
        self.assertEqual(self.table.enter_scope(), 2)

    def test_exit_drops_symbols(self):
        self.table.enter_scope()
        self.table.add("x", "integer")
        self.assertIn("x", self.table)
        self.table.exit_scope()
        self.assertNotIn("x", self.table)
        self.assertIsNone(self.table.lookup("x"))

    def test_global_scope_cannot_be_exited(self):
        error = self.table.exit_scope(4, 2)
        self.assertIsInstance(error, SemanticError)
        self.assertEqual((error.line, error.column), (4, 2))
        self.assertEqual(self.table.current_scope(), GLOBAL_SCOPE)
        self.assertEqual(len(self.table.diagnostics), 1)


class TestDeclarations(unittest.TestCase):
    def setUp(self):
        self.diagnostics = Diagnostics()
        self.table = SymbolTable(self.diagnostics)

    def test_add_in_current_scope(self):
        self.table.enter_scope()
        self.assertIsNone(self.table.add("x", "integer", line=1, column=9))
        symbol = self.table.lookup_local("x")
        self.assertEqual((symbol.name, symbol.type, symbol.scope, symbol.is_global), ("x", "integer", 1, False))

    def test_global_goes_to_scope_zero(self):
        self.table.enter_scope()
        self.table.enter_scope()
        self.table.add("g", "decimal", is_global=True)
        self.assertIsNone(self.table.lookup_local("g"))
        self.table.exit_scope()
        self.table.exit_scope()
        symbol = self.table.lookup("g")
        self.assertEqual((symbol.scope, symbol.is_global), (0, True))

    def test_duplicate_in_same_scope(self):
        self.table.add("x", "integer", initial_value="1")
        error = self.table.add("x", "boolean", line=2, column=9)
        self.assertIsInstance(error, SemanticError)
        self.assertEqual(str(error), "Symbol 'x' already defined in scope 0")
        self.assertEqual(self.table.lookup("x").type, "integer")
        self.assertEqual(self.table.lookup("x").value, 1)
        self.assertEqual(len(self.diagnostics.of_kind(ErrorKind.SEMANTIC)), 1)

    def test_shadowing(self):
        self.table.add("x", "integer", initial_value="1")
        self.table.enter_scope()
        self.assertIsNone(self.table.add("x", "character", initial_value="'c'"))
        self.assertEqual(self.table.lookup("x").value, "c")
        self.table.exit_scope()
        self.assertEqual(self.table.lookup("x").value, 1)
        self.assertFalse(self.diagnostics.has_errors)

    def test_invalid_initial_value(self):
        error = self.table.add("d", "decimal", initial_value="1.123456")
        self.assertIsNotNone(error)
        self.assertIn("Too many decimal places", error.message)
        self.assertIsNone(self.table.lookup("d"))

    def test_decimal_places_are_configurable(self):
        table = SymbolTable(max_decimal_places=2)
        self.assertIsNotNone(table.add("d", "decimal", initial_value="1.125"))
        self.assertIsNone(table.add("e", "decimal", initial_value="1.12"))


class TestLookupAndValues(unittest.TestCase):
    def setUp(self):
        self.table = SymbolTable()

    def test_lookup_walks_outwards(self):
        self.table.add("a", "integer")
        self.table.enter_scope()
        self.table.enter_scope()
        self.assertEqual(self.table.lookup("a").scope, 0)
        self.assertIsNone(self.table.lookup_local("a"))

    def test_resolve_records_undefined(self):
        self.assertIsNone(self.table.resolve("ghost", 3, 7))
        [diagnostic] = list(self.table.diagnostics)
        self.assertEqual(diagnostic.message, "Undefined symbol: ghost")
        self.assertEqual((diagnostic.line, diagnostic.column), (3, 7))

    def test_set_value_converts(self):
        self.table.add("n", "integer")
        self.table.add("b", "boolean")
        self.assertIsNone(self.table.set_value("n", "42"))
        self.assertIsNone(self.table.set_value("b", "false"))
        self.assertEqual(self.table.lookup("n").value, 42)
        self.assertIs(self.table.lookup("b").value, False)

    def test_set_value_rejects_wrong_type(self):
        self.table.add("n", "integer", initial_value="7")
        error = self.table.set_value("n", "'x'")
        self.assertIn("Invalid integer value", error.message)
        self.assertEqual(self.table.lookup("n").value, 7)

    def test_set_value_on_function(self):
        self.table.add("f", "function")
        error = self.table.set_value("f", "1")
        self.assertIn("Cannot assign a value to a function", error.message)

    def test_set_value_undefined(self):
        error = self.table.set_value("nope", "1")
        self.assertEqual(error.message, "Undefined symbol: nope")

    def test_symbols_outermost_first(self):
        self.table.add("a", "integer")
        self.table.enter_scope()
        self.table.add("b", "integer")
        self.assertEqual([s.name for s in self.table], ["a", "b"])
        self.assertIn("Scope 1:", repr(self.table))


if __name__ == "__main__":
    unittest.main()
