"""Input sources and output sinks for the Nhotyp scan and print primitives.

This module provides the standard implementations used by the command line
tool and by programmatic callers.
"""

from collections import deque
from typing import Deque, Iterable, List, Protocol, TextIO


class NhotypInput(Protocol):
    """Source of whitespace-delimited input tokens for scan."""

    def read_token(self) -> str | None:
        """Return the next token, or None when input is exhausted."""


class NhotypOutput(Protocol):
    """Sink for lines produced by print."""

    def write_line(self, line: str) -> None:
        """Emit one line; the sink adds the line terminator."""


class NhotypStreamInput:
    """Reads tokens from a text stream one line at a time."""

    def __init__(self, stream: TextIO, prompt: str | None = None, prompt_stream: TextIO | None = None):
        """
        Initialize stream input.

        Lines are only read when the buffered tokens run out, so the stream can
        be shared with an interactive session reading from the same source.

        Args:
            stream: Text stream to read from
            prompt: Optional text written before each line is read
            prompt_stream: Stream the prompt is written to
        """
        self._stream = stream
        self._prompt = prompt
        self._prompt_stream = prompt_stream
        self._pending: Deque[str] = deque()

    def read_token(self) -> str | None:
        """
        Return the next token from the stream.

        Returns:
            The next token, or None at end of stream
        """
        while not self._pending:
            if self._prompt is not None and self._prompt_stream is not None:
                self._prompt_stream.write(self._prompt)
                self._prompt_stream.flush()

            line = self._stream.readline()
            if not line:
                return None

            self._pending.extend(line.split())

        return self._pending.popleft()


class NhotypListInput:
    """Serves tokens from an in-memory sequence."""

    def __init__(self, values: Iterable[int | str]):
        """
        Initialize list input.

        Args:
            values: Integers or token strings, consumed in order
        """
        self._pending: Deque[str] = deque(str(value) for value in values)

    def read_token(self) -> str | None:
        """Return the next token, or None when none remain."""
        if not self._pending:
            return None

        return self._pending.popleft()

    def remaining(self) -> int:
        """Number of tokens not yet consumed."""
        return len(self._pending)


class NhotypStreamOutput:
    """Writes printed lines to a text stream."""

    def __init__(self, stream: TextIO):
        """
        Initialize stream output.

        Args:
            stream: Text stream to write to
        """
        self._stream = stream

    def write_line(self, line: str) -> None:
        """
        Write a line and flush it.

        Args:
            line: The line text, without terminator
        """
        self._stream.write(line + '\n')
        self._stream.flush()


class NhotypBufferingOutput:
    """Buffers printed lines for programmatic access."""

    def __init__(self) -> None:
        """Initialize buffering output."""
        self.lines: List[str] = []

    def write_line(self, line: str) -> None:
        """
        Buffer a line.

        Args:
            line: The line text, without terminator
        """
        self.lines.append(line)

    def get_lines(self) -> List[str]:
        """
        Get all buffered lines.

        Returns:
            List of printed lines
        """
        return self.lines.copy()

    def get_text(self) -> str:
        """Get the buffered lines as newline-terminated text."""
        return "".join(line + '\n' for line in self.lines)

    def clear(self) -> None:
        """Clear all buffered lines."""
        self.lines.clear()
