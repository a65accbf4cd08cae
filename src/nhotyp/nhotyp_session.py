"""Interactive Nhotyp session state.

A session accepts source one line at a time.  Lines accumulate until every
block they open is closed; the chunk is then loaded and run.  Function
definitions extend the session's symbol table and other statements run
immediately in a frame that persists for the whole session.
"""

import logging
from typing import List, Sequence

from nhotyp.nhotyp_ast import NhotypFunction, NhotypStatement, assigned_names
from nhotyp.nhotyp_call_stack import DEFAULT_MAX_CALL_DEPTH
from nhotyp.nhotyp_environment import NhotypEnvironment
from nhotyp.nhotyp_error import NhotypDuplicateDefinitionError, NhotypError, NhotypUnclosedBlockError
from nhotyp.nhotyp_evaluator import NhotypEvaluator
from nhotyp.nhotyp_io import NhotypInput, NhotypOutput
from nhotyp.nhotyp_loader import NhotypLoader, nesting_error
from nhotyp.nhotyp_parser import NhotypParser
from nhotyp.nhotyp_tokenizer import NhotypTokenizer


SESSION_FRAME = "<session>"


class NhotypSession:
    """Line-at-a-time interpreter state for interactive use."""

    def __init__(self, input_source: NhotypInput, output: NhotypOutput, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH):
        """
        Initialize an empty session.

        Args:
            input_source: Where scan reads integers from
            output: Where print writes lines to
            max_call_depth: Maximum number of live function invocations

        Raises:
            ValueError: If max_call_depth is less than 1
        """
        if max_call_depth < 1:
            raise ValueError(f"max_call_depth must be at least 1, got {max_call_depth}")

        self.input_source = input_source
        self.output = output
        self.max_call_depth = max_call_depth

        self._loader = NhotypLoader()
        self._tokenizer = NhotypTokenizer()
        self._pending: List[str] = []
        self._logger = logging.getLogger("NhotypSession")

        self.functions = self._loader.build_symbol_table([])
        self.environment = NhotypEnvironment(name=SESSION_FRAME)

    def is_pending(self) -> bool:
        """Check if earlier lines are waiting for a block to be closed."""
        return bool(self._pending)

    def feed(self, line: str) -> bool:
        """
        Add a line of source.

        Args:
            line: One line of input

        Returns:
            True if the accumulated chunk ran, False if more lines are needed

        Raises:
            NhotypError: If the chunk fails to load or run; the chunk is discarded
        """
        self._pending.append(line)
        source = "\n".join(self._pending)

        try:
            lines = self._tokenizer.tokenize(source)
            functions, statements = NhotypParser(lines).parse(allow_statements=True)

        except NhotypUnclosedBlockError:
            return False

        except NhotypError as e:
            self._pending = []
            raise e.with_source(source)

        except RecursionError as e:
            self._pending = []
            raise nesting_error().with_source(source) from e

        self._pending = []
        try:
            self.execute(functions, statements)

        except NhotypError as e:
            raise e.with_source(source)

        except RecursionError as e:
            raise nesting_error().with_source(source) from e

        return True

    def execute(self, functions: Sequence[NhotypFunction], statements: Sequence[NhotypStatement]) -> None:
        """
        Add definitions and run statements.

        Nothing is committed unless everything succeeds: the symbol table and
        the session frame keep their previous state on error.

        Args:
            functions: New function definitions
            statements: Statements to run in the session frame
        """
        for function in functions:
            if self.environment.has_binding(function.name):
                raise NhotypDuplicateDefinitionError(
                    function.name,
                    context=f"'{function.name}' is already a session variable",
                    line=function.line
                )

        table = self._loader.build_symbol_table(functions, base=self.functions)
        for function in functions:
            self._loader.validate_function(function, table)

        self._loader.validate_statements(statements, table)

        environment = self.environment.copy()
        environment.declare(assigned_names(statements))

        evaluator = NhotypEvaluator(table, self.input_source, self.output, self.max_call_depth)
        evaluator.execute_top_level(statements, environment)

        self.functions = table
        self.environment = environment
        if functions:
            self._logger.debug("session now defines %s", ", ".join(table.names()))

    def reset_pending(self) -> None:
        """Discard lines waiting for a block to be closed."""
        self._pending = []
