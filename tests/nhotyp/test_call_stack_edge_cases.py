"""Tests for Nhotyp call stack edge cases."""

import sys

import pytest

from nhotyp import NhotypCallStack, NhotypEnvironment, NhotypRecursionLimitError


COUNTDOWN = (
    "function down n as\n"
    "  let r = 0\n"
    "  if > n 0 then\n"
    "    let r = + 1 down - n 1\n"
    "  end if\n"
    "  return r\n"
    "end function\n"
    "function main as\n"
    "  return down {depth}\n"
    "end function\n"
)


class TestNhotypCallStackEdgeCases:
    """Test call stack edge cases and depth management."""

    def test_basic_call_stack_functionality(self):
        """Test push, peek and pop."""
        stack = NhotypCallStack(max_depth=4)
        assert stack.is_empty()
        assert stack.peek() is None
        assert stack.pop() is None

        stack.push("main", NhotypEnvironment(name="main"))
        stack.push("f", NhotypEnvironment(name="f", bindings={"x": 1}), line=3)

        assert stack.depth() == 2
        assert stack.peek().function_name == "f"
        assert stack.peek().line == 3

        frame = stack.pop()
        assert frame.function_name == "f"
        assert stack.depth() == 1

    def test_push_beyond_limit(self):
        """Test that the stack refuses frames beyond its bound."""
        stack = NhotypCallStack(max_depth=2)
        stack.push("main", NhotypEnvironment(name="main"))
        stack.push("f", NhotypEnvironment(name="f"))

        with pytest.raises(NhotypRecursionLimitError, match="max depth: 2") as exc_info:
            stack.push("g", NhotypEnvironment(name="g"), line=7)

        assert exc_info.value.max_depth == 2
        assert exc_info.value.line == 7
        assert stack.depth() == 2

    def test_format_stack_trace(self):
        """Test the trace shows frames with their bindings."""
        stack = NhotypCallStack(max_depth=20)
        assert stack.format_stack_trace() == "  (no function calls)"

        stack.push("main", NhotypEnvironment(name="main"))
        stack.push("f", NhotypEnvironment(name="f", bindings={"n": 3}))
        trace = stack.format_stack_trace()
        assert "main()" in trace
        assert "f(n=3)" in trace

        for i in range(12):
            stack.push("g", NhotypEnvironment(name="g", bindings={"i": i}))

        trace = stack.format_stack_trace(max_frames=5)
        assert "(9 more frames)" in trace
        assert "g(i=11)" in trace
        assert "main()" not in trace

    def test_recursion_depth_limits(self, nhotyp_custom):
        """Test recursion depth limits and stack overflow protection."""
        shallow = nhotyp_custom(max_call_depth=10)

        with pytest.raises(NhotypRecursionLimitError, match="Call stack too deep"):
            shallow.run(COUNTDOWN.format(depth=20))

        # main plus ten calls to down
        with pytest.raises(NhotypRecursionLimitError):
            shallow.run(COUNTDOWN.format(depth=9))

        assert shallow.run(COUNTDOWN.format(depth=8)).value == 8

        deep = nhotyp_custom(max_call_depth=50)
        assert deep.run(COUNTDOWN.format(depth=20)).value == 20

    def test_default_limit_allows_deep_recursion(self, nhotyp):
        """Test that recursion up to the default bound runs on the host stack."""
        assert nhotyp.run(COUNTDOWN.format(depth=250)).value == 250

        with pytest.raises(NhotypRecursionLimitError):
            nhotyp.run(COUNTDOWN.format(depth=300))

    def test_deeply_nested_expression(self, nhotyp_custom, helpers):
        """Test that host stack exhaustion in one expression is reported, not raised raw."""
        shallow = nhotyp_custom(max_call_depth=10)
        source = helpers.main_returning(helpers.build_nested_expression("+", 20000))

        with pytest.raises(NhotypRecursionLimitError, match="nested too deeply"):
            shallow.run(source)

    def test_host_recursion_limit_restored(self, nhotyp_custom):
        """Test that running a program leaves the host recursion limit unchanged."""
        before = sys.getrecursionlimit()
        interpreter = nhotyp_custom(max_call_depth=10)

        interpreter.run(COUNTDOWN.format(depth=5))
        with pytest.raises(NhotypRecursionLimitError):
            interpreter.run(COUNTDOWN.format(depth=50))

        assert sys.getrecursionlimit() == before

    def test_stack_trace_in_error(self, nhotyp_custom):
        """Test that recursion errors show the live call chain."""
        with pytest.raises(NhotypRecursionLimitError) as exc_info:
            nhotyp_custom(max_call_depth=3).run(COUNTDOWN.format(depth=5))

        assert "down(n=" in str(exc_info.value)
        assert "main()" in str(exc_info.value)
