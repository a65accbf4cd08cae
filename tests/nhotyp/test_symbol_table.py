"""Tests for the function symbol table."""

import pytest

from nhotyp import NhotypDuplicateDefinitionError, NhotypLoadError, NhotypSymbolTable, NhotypTokenizer
from nhotyp.nhotyp_ast import NhotypExpression, NhotypFunction


def make_function(name, parameters=(), line=1):
    """Build a function that returns its first parameter, or 0."""
    token = NhotypTokenizer().classify(parameters[0] if parameters else "0", line)
    return NhotypFunction(name, tuple(parameters), (), NhotypExpression((token,), line), line)


class TestSymbolTable:
    """Test registration, lookup and freezing."""

    def test_register_and_lookup(self):
        """Test that registered functions can be found by name."""
        table = NhotypSymbolTable()
        square = make_function("square", ["n"])
        table.register(square)

        assert table.lookup("square") is square
        assert table.lookup("cube") is None
        assert "square" in table
        assert len(table) == 1

    def test_duplicate_name(self):
        """Test that a function name can only be registered once."""
        table = NhotypSymbolTable()
        table.register(make_function("f", line=1))

        with pytest.raises(NhotypDuplicateDefinitionError, match="already defined on line 1") as exc_info:
            table.register(make_function("f", ["x"], line=5))

        assert exc_info.value.name == "f"
        assert exc_info.value.line == 5

    @pytest.mark.parametrize("name", ["scan", "not", "and", "while", "print"])
    def test_reserved_names(self, name):
        """Test that keywords and operators cannot name functions."""
        with pytest.raises(NhotypDuplicateDefinitionError, match="Keywords and operators"):
            NhotypSymbolTable().register(make_function(name))

    def test_frozen_table_rejects_registration(self):
        """Test that no function can be added after freezing."""
        table = NhotypSymbolTable()
        table.freeze()

        assert table.is_frozen()
        with pytest.raises(NhotypLoadError, match="symbol table is frozen"):
            table.register(make_function("late"))

    def test_extend_leaves_table_untouched(self):
        """Test that extending builds a new frozen table."""
        table = NhotypSymbolTable()
        table.register(make_function("first"))
        table.freeze()

        extended = table.extend([make_function("second", ["x"])])

        assert extended.names() == ["first", "second"]
        assert extended.is_frozen()
        assert table.names() == ["first"]

        with pytest.raises(NhotypDuplicateDefinitionError):
            table.extend([make_function("first")])

    def test_token_arity(self):
        """Test how many operands each kind of token consumes."""
        table = NhotypSymbolTable()
        table.register(make_function("pair", ["a", "b"]))
        tokenizer = NhotypTokenizer()

        assert table.token_arity(tokenizer.classify("pair", 1)) == 2
        assert table.token_arity(tokenizer.classify("not", 1)) == 1
        assert table.token_arity(tokenizer.classify("+", 1)) == 2
        assert table.token_arity(tokenizer.classify("scan", 1)) == 0
        assert table.token_arity(tokenizer.classify("17", 1)) == 0
        assert table.token_arity(tokenizer.classify("unknown", 1)) == 0
