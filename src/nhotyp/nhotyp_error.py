"""Exception classes for Nhotyp with detailed context."""

import difflib
from typing import Any, List


class NhotypError(Exception):
    """Base exception for Nhotyp errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: str | None = None,
        expected: str | None = None,
        received: str | None = None,
        suggestion: str | None = None,
        example: str | None = None,
        line: int | None = None,
        source: str | None = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            example: Example of correct usage
            line: Source line number (1-indexed)
            source: Source code for context display
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.line = line
        self.source = source

        super().__init__(self._format_detailed_message())

    def with_source(self, source: str) -> 'NhotypError':
        """
        Attach program source so the formatted message can show the offending line.

        Args:
            source: The full program text

        Returns:
            This error, for use in a raise statement
        """
        self.source = source
        self.args = (self._format_detailed_message(),)
        return self

    def source_line(self) -> str:
        """Return the stripped text of the offending line, or an empty string."""
        if self.source is None or self.line is None:
            return ""

        lines = self.source.split('\n')
        if 1 <= self.line <= len(lines):
            return lines[self.line - 1].strip()

        return ""

    def _format_context(self, source: str, line_num: int, before: int = 2, after: int = 1) -> str:
        """
        Format the lines around the error, marking the offending one.

        Args:
            source: The source code string
            line_num: Line number (1-indexed)
            before: Number of lines before to include
            after: Number of lines after to include

        Returns:
            Formatted context lines
        """
        lines = source.split('\n')
        start_line = max(1, line_num - before)
        end_line = min(len(lines), line_num + after)
        if start_line > end_line:
            return "(no context available)"

        width = len(str(end_line))
        result_lines = []
        for i in range(start_line, end_line + 1):
            indicator = ">" if i == line_num else " "
            result_lines.append(f"  {indicator} {i:>{width}}: {lines[i - 1]}")

        return "\n".join(result_lines)

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.line is not None:
            parts.append(f"Line: {self.line}")

            if self.source is not None:
                parts.append(f"\nSource Context:\n{self._format_context(self.source, self.line)}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        if self.example:
            parts.append(f"Example: {self.example}")

        return "\n".join(parts)


class NhotypLoadError(NhotypError):
    """Errors detected while loading a program, before anything executes."""


class NhotypTokenError(NhotypLoadError):
    """Tokenization errors with detailed context."""


class NhotypParseError(NhotypLoadError):
    """Statement and block structure errors with detailed context."""


class NhotypUnclosedBlockError(NhotypParseError):
    """Source ended while a block was still open."""


class NhotypDuplicateDefinitionError(NhotypLoadError):
    """A name was declared twice, or collides with a keyword or function."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        """
        Initialize duplicate definition error.

        Args:
            name: The conflicting name
            **kwargs: Additional error context
        """
        self.name = name
        kwargs.setdefault("message", f"Conflicting definition of '{name}'")
        super().__init__(**kwargs)


class NhotypEvalError(NhotypError):
    """Evaluation errors with detailed context."""


class NhotypUnboundVariableError(NhotypEvalError):
    """A variable was read before being assigned in the current frame."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        """
        Initialize unbound variable error.

        Args:
            name: The variable that was read
            **kwargs: Additional error context
        """
        self.name = name
        super().__init__(message=f"Variable '{name}' is not bound in this function", **kwargs)


class NhotypUnknownIdentifierError(NhotypEvalError):
    """A token is neither a keyword, a function, a literal nor a variable."""

    def __init__(self, name: str, **kwargs: Any) -> None:
        """
        Initialize unknown identifier error.

        Args:
            name: The unresolved token
            **kwargs: Additional error context
        """
        self.name = name
        super().__init__(message=f"Unknown identifier '{name}'", **kwargs)


class NhotypInputError(NhotypEvalError):
    """The input stream was exhausted or held something other than an integer."""


class NhotypRecursionLimitError(NhotypEvalError):
    """The call stack grew beyond its configured bound."""

    def __init__(self, max_depth: int, **kwargs: Any) -> None:
        """
        Initialize recursion limit error.

        Args:
            max_depth: The configured call stack bound
            **kwargs: Additional error context
        """
        self.max_depth = max_depth
        kwargs.setdefault("suggestion", "Reduce recursion depth or raise the max_call_depth limit")
        super().__init__(message=f"Call stack too deep (max depth: {max_depth})", **kwargs)


class ErrorMessageBuilder:
    """Helper class for building detailed error messages."""

    @staticmethod
    def suggest_similar_names(target: str, available_names: List[str], max_suggestions: int = 3) -> List[str]:
        """Suggest similar names using fuzzy matching."""
        if not target or not available_names:
            return []

        return difflib.get_close_matches(target, available_names, n=max_suggestions, cutoff=0.6)

    @staticmethod
    def create_statement_example(keyword: str) -> str:
        """Create a usage example for a statement keyword."""
        examples = {
            'let': "let total = + total 1",
            'if': "if > x 0 then ... end if",
            'while': "while < i n do ... end while",
            'print': "print x y",
            'return': "return * n 2",
            'function': "function square n as ... end function",
        }

        return examples.get(keyword, keyword)
