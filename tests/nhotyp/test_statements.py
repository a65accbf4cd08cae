"""Tests for statement execution and activation frames."""

import pytest

from nhotyp import NhotypUnboundVariableError, NhotypUnknownIdentifierError


class TestStatements:
    """Test assignment, conditionals, loops and print."""

    def test_assignment_overwrites(self, nhotyp, helpers):
        """Test that assigning again replaces a variable's value."""
        source = helpers.main_returning("x", "let x = 1\nlet x = + x 10\nlet x = * x x")
        assert nhotyp.run(source).value == 121

    def test_conditional_runs_body_when_nonzero(self, nhotyp, helpers):
        """Test that any nonzero guard runs the body once."""
        body = (
            "let hits = 0\n"
            "if -5 then\nlet hits = + hits 1\nend if\n"
            "if 0 then\nlet hits = + hits 100\nend if\n"
            "if > 3 2 then\nlet hits = + hits 10\nend if"
        )
        assert nhotyp.run(helpers.main_returning("hits", body)).value == 11

    def test_loop_counts(self, nhotyp, helpers):
        """Test that a loop re-evaluates its guard after each pass."""
        body = "let i = 0\nlet sum = 0\nwhile < i 10 do\nlet i = + i 1\nlet sum = + sum i\nend while"
        assert nhotyp.run(helpers.main_returning("sum", body)).value == 55

    def test_loop_with_false_guard_never_runs(self, nhotyp, helpers):
        """Test that a loop whose guard starts at zero does nothing."""
        body = "let n = 7\nwhile 0 do\nlet n = 0\nend while"
        assert nhotyp.run(helpers.main_returning("n", body)).value == 7

    def test_loop_variable_visible_after_loop(self, nhotyp, helpers):
        """Test that variables first assigned in a loop body outlive the loop."""
        body = "let i = 0\nwhile < i 3 do\nlet last = * i 10\nlet i = + i 1\nend while"
        assert nhotyp.run(helpers.main_returning("last", body)).value == 20

    def test_conditional_variable_visible_after_block(self, nhotyp, helpers):
        """Test that conditionals do not introduce a scope."""
        body = "if 1 then\nlet found = 42\nend if"
        assert nhotyp.run(helpers.main_returning("found", body)).value == 42

    def test_print_joins_values_with_spaces(self, nhotyp, helpers):
        """Test that print emits one line per statement."""
        body = "let a = 1\nlet b = -2\nlet c = 300\nprint a b c\nprint c\nprint a a"
        helpers.assert_prints(nhotyp, helpers.main_returning("0", body), ["1 -2 300", "300", "1 1"])

    def test_print_nothing_emits_empty_line(self, nhotyp, helpers):
        """Test that print with no variables still ends a line."""
        helpers.assert_prints(nhotyp, helpers.main_returning("0", "print"), [""])

    def test_print_sixteen_variables(self, nhotyp, helpers):
        """Test the largest print statement."""
        names = [chr(ord('a') + i) for i in range(16)]
        body = "\n".join(f"let {name} = {i}" for i, name in enumerate(names)) + "\nprint " + " ".join(names)
        helpers.assert_prints(nhotyp, helpers.main_returning("0", body), [" ".join(str(i) for i in range(16))])

    def test_statements_run_in_order(self, nhotyp, helpers):
        """Test that output follows source order across calls."""
        source = (
            "function show n as\n"
            "  print n\n"
            "  return n\n"
            "end function\n"
            "function main as\n"
            "  let a = + show 1 show 2\n"
            "  print a\n"
            "  return a\n"
            "end function\n"
        )
        result = helpers.assert_prints(nhotyp, source, ["1", "2", "3"])
        assert result.value == 3


class TestVariableErrors:
    """Test reading variables that are not bound."""

    def test_read_before_assignment(self, nhotyp, helpers):
        """Test reading a variable that is only assigned later."""
        body = "let y = + x 1\nlet x = 5"
        with pytest.raises(NhotypUnboundVariableError, match="Variable 'x' is not bound") as exc_info:
            nhotyp.run(helpers.main_returning("y", body))

        assert exc_info.value.name == "x"
        assert exc_info.value.line == 2

    def test_read_assigned_only_in_skipped_block(self, nhotyp, helpers):
        """Test a variable whose assignment never ran."""
        body = "if 0 then\nlet z = 1\nend if"
        with pytest.raises(NhotypUnboundVariableError):
            nhotyp.run(helpers.main_returning("z", body))

    def test_unknown_identifier(self, nhotyp, helpers):
        """Test reading a name that means nothing in the function."""
        with pytest.raises(NhotypUnknownIdentifierError, match="Unknown identifier 'nowhere'"):
            nhotyp.run(helpers.main_returning("nowhere"))

    def test_unknown_identifier_suggests_names(self, nhotyp, helpers):
        """Test that close variable names are suggested."""
        body = "let counter = 1"
        with pytest.raises(NhotypUnknownIdentifierError, match="Did you mean: counter"):
            nhotyp.run(helpers.main_returning("countr", body))

    def test_print_unbound_variable(self, nhotyp, helpers):
        """Test that print requires bound variables."""
        with pytest.raises(NhotypUnknownIdentifierError, match="'ghost'"):
            nhotyp.run(helpers.main_returning("0", "print ghost"))

    def test_caller_variables_not_visible(self, nhotyp):
        """Test that a callee cannot see its caller's variables."""
        source = (
            "function peek as\n"
            "  return secret\n"
            "end function\n"
            "function main as\n"
            "  let secret = 99\n"
            "  return peek\n"
            "end function\n"
        )
        with pytest.raises(NhotypUnknownIdentifierError, match="'secret'") as exc_info:
            nhotyp.run(source)

        assert exc_info.value.line == 2
