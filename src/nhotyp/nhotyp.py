"""Main Nhotyp class."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, TextIO

from nhotyp.nhotyp_call_stack import DEFAULT_MAX_CALL_DEPTH
from nhotyp.nhotyp_error import NhotypError
from nhotyp.nhotyp_evaluator import NhotypEvaluator
from nhotyp.nhotyp_io import (
    NhotypBufferingOutput, NhotypInput, NhotypListInput, NhotypOutput, NhotypStreamInput, NhotypStreamOutput
)
from nhotyp.nhotyp_loader import NhotypLoader, NhotypProgram
from nhotyp.nhotyp_session import NhotypSession


@dataclass
class NhotypRunResult:
    """Outcome of running a program."""
    value: int
    output: List[str] = field(default_factory=list)


class Nhotyp:
    """
    Nhotyp interpreter.

    Programs are loaded in two phases (every function header, then every
    body) and then run by invoking `main`.  Every function call gets its own
    activation frame on a bounded call stack.
    """

    def __init__(self, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH):
        """
        Initialize the interpreter.

        Args:
            max_call_depth: Maximum number of live function invocations

        Raises:
            ValueError: If max_call_depth is less than 1
        """
        if max_call_depth < 1:
            raise ValueError(f"max_call_depth must be at least 1, got {max_call_depth}")

        self.max_call_depth = max_call_depth
        self._loader = NhotypLoader()
        self._logger = logging.getLogger("Nhotyp")

    def load(self, source: str) -> NhotypProgram:
        """
        Load and validate a program without running it.

        Args:
            source: Program text

        Returns:
            The loaded program

        Raises:
            NhotypLoadError: If the program is malformed
        """
        return self._loader.load(source)

    def check(self, source: str) -> NhotypError | None:
        """
        Check a program for load errors.

        Args:
            source: Program text

        Returns:
            The first load error found, or None if the program loads cleanly
        """
        try:
            self._loader.load(source)

        except NhotypError as e:
            self._logger.debug("check failed: %s", e.message)
            return e

        return None

    def run(
        self,
        source: str,
        input_values: Iterable[int | str] | None = None,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None
    ) -> NhotypRunResult:
        """
        Load and run a program.

        Args:
            source: Program text
            input_values: Values for scan, in order
            input_stream: Stream for scan, used when input_values is not given
            output_stream: Stream for print; when omitted, printed lines are
                returned in the result instead

        Returns:
            The value main returned and, when buffering, the printed lines

        Raises:
            NhotypError: If loading or evaluation fails
        """
        program = self.load(source)

        input_source: NhotypInput
        if input_values is not None:
            input_source = NhotypListInput(input_values)

        elif input_stream is not None:
            input_source = NhotypStreamInput(input_stream)

        else:
            input_source = NhotypListInput([])

        if output_stream is not None:
            value = self.run_program(program, input_source, NhotypStreamOutput(output_stream))
            return NhotypRunResult(value)

        buffer = NhotypBufferingOutput()
        value = self.run_program(program, input_source, buffer)
        return NhotypRunResult(value, buffer.get_lines())

    def run_program(self, program: NhotypProgram, input_source: NhotypInput, output: NhotypOutput) -> int:
        """
        Run a loaded program.

        Args:
            program: The loaded program
            input_source: Where scan reads integers from
            output: Where print writes lines to

        Returns:
            The value main returned

        Raises:
            NhotypEvalError: If evaluation fails; the error carries the program source
        """
        evaluator = NhotypEvaluator(program.functions, input_source, output, self.max_call_depth)
        try:
            value = evaluator.run_main(program.main)

        except NhotypError as e:
            raise e.with_source(program.source)

        self._logger.debug("main returned %d", value)
        return value

    def create_session(self, input_source: NhotypInput, output: NhotypOutput) -> NhotypSession:
        """
        Create an interactive session using this interpreter's limits.

        Args:
            input_source: Where scan reads integers from
            output: Where print writes lines to

        Returns:
            A new, empty session
        """
        return NhotypSession(input_source, output, self.max_call_depth)
