"""Shared fixtures and utilities for Nhotyp tests."""

import pytest
from typing import Iterable, List

from nhotyp import Nhotyp, NhotypRunResult


@pytest.fixture
def nhotyp():
    """Create a fresh Nhotyp instance for each test."""
    return Nhotyp()


@pytest.fixture
def nhotyp_custom():
    """Factory for Nhotyp instances with custom configuration."""
    def _create_nhotyp(max_call_depth: int = 256) -> Nhotyp:
        return Nhotyp(max_call_depth=max_call_depth)
    return _create_nhotyp


class NhotypTestHelpers:
    """Helper utilities for Nhotyp testing."""

    @staticmethod
    def main_returning(expression: str, body: str = "") -> str:
        """Build a program whose main runs body and returns expression."""
        body_lines = f"{body}\n" if body else ""
        return f"function main as\n{body_lines}return {expression}\nend function\n"

    @staticmethod
    def assert_evaluates_to(nhotyp: Nhotyp, expression: str, expected: int) -> None:
        """Assert that an expression returned from main has the expected value."""
        result = nhotyp.run(NhotypTestHelpers.main_returning(expression))
        assert result.value == expected, f"Expected {expected} from '{expression}', got {result.value}"

    @staticmethod
    def assert_prints(
        nhotyp: Nhotyp,
        source: str,
        expected: List[str],
        input_values: Iterable[int | str] = ()
    ) -> NhotypRunResult:
        """Assert that a program prints exactly the expected lines."""
        result = nhotyp.run(source, input_values=list(input_values))
        assert result.output == expected, f"Expected output {expected!r}, got {result.output!r}"
        return result

    @staticmethod
    def build_nested_expression(operator: str, depth: int, base_value: str = "1") -> str:
        """Build a deeply nested prefix expression for recursion testing."""
        return f"{operator} {base_value} " * depth + base_value


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return NhotypTestHelpers
