"""Call stack of live Nhotyp function invocations."""

import logging
from dataclasses import dataclass
from typing import List

from nhotyp.nhotyp_environment import NhotypEnvironment
from nhotyp.nhotyp_error import NhotypRecursionLimitError


DEFAULT_MAX_CALL_DEPTH = 256


class NhotypCallStack:
    """
    Bounded stack of activation frames, one per live invocation.

    The bound turns runaway recursion into a reportable error rather than a
    host stack overflow.
    """

    @dataclass
    class CallFrame:
        """Represents a single function invocation."""
        function_name: str
        environment: NhotypEnvironment
        line: int

    def __init__(self, max_depth: int) -> None:
        """
        Initialize empty call stack.

        Args:
            max_depth: Maximum number of simultaneously live invocations
        """
        self.max_depth = max_depth
        self.frames: List[NhotypCallStack.CallFrame] = []
        self._logger = logging.getLogger("NhotypCallStack")

    def push(self, function_name: str, environment: NhotypEnvironment, line: int = 0) -> None:
        """
        Push a new frame onto the stack.

        Args:
            function_name: Name of the function being invoked
            environment: The invocation's activation frame
            line: Line of the call site

        Raises:
            NhotypRecursionLimitError: If the stack is already at its maximum depth
        """
        if len(self.frames) >= self.max_depth:
            self._logger.warning("call stack limit %d reached calling '%s'", self.max_depth, function_name)
            raise NhotypRecursionLimitError(
                self.max_depth,
                received=f"Call to '{function_name}'",
                context=f"Call stack:\n{self.format_stack_trace()}",
                line=line
            )

        self.frames.append(NhotypCallStack.CallFrame(function_name, environment, line))

    def pop(self) -> 'NhotypCallStack.CallFrame | None':
        """
        Pop the top frame from the stack.

        Returns:
            The popped frame, or None if stack is empty
        """
        if self.frames:
            return self.frames.pop()

        return None

    def peek(self) -> 'NhotypCallStack.CallFrame | None':
        """
        Peek at the top frame without removing it.

        Returns:
            The top frame, or None if stack is empty
        """
        if self.frames:
            return self.frames[-1]

        return None

    def is_empty(self) -> bool:
        """Check if the call stack is empty."""
        return len(self.frames) == 0

    def depth(self) -> int:
        """Get the current call stack depth."""
        return len(self.frames)

    def format_stack_trace(self, max_frames: int = 10) -> str:
        """
        Format the call stack as a string for error messages.

        Args:
            max_frames: Maximum number of frames to include

        Returns:
            Formatted stack trace string
        """
        if not self.frames:
            return "  (no function calls)"

        lines = []
        frames_to_show = self.frames[-max_frames:]

        if len(self.frames) > max_frames:
            lines.append(f"  ... ({len(self.frames) - max_frames} more frames)")

        for i, frame in enumerate(frames_to_show):
            indent = "  " + "  " * i
            args_str = ", ".join(f"{k}={v}" for k, v in frame.environment.bindings.items())
            lines.append(f"{indent}{frame.function_name}({args_str})")

        return "\n".join(lines)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"NhotypCallStack(depth={len(self.frames)}, max_depth={self.max_depth})"
