"""Evaluator for Nhotyp expressions and statements with detailed error messages."""

import logging
import re
import sys
from typing import Callable, Dict, FrozenSet, Iterable, List, Sequence, Tuple, TypeVar

from nhotyp.nhotyp_ast import (
    NhotypAssign, NhotypConditional, NhotypExpression, NhotypFunction, NhotypLoop,
    NhotypPrint, NhotypReturn, NhotypStatement
)
from nhotyp.nhotyp_call_stack import DEFAULT_MAX_CALL_DEPTH, NhotypCallStack
from nhotyp.nhotyp_environment import NhotypEnvironment
from nhotyp.nhotyp_error import (
    NhotypError, NhotypEvalError, NhotypInputError, NhotypRecursionLimitError
)
from nhotyp.nhotyp_io import NhotypInput, NhotypOutput
from nhotyp.nhotyp_math import MAX_INTEGER, MIN_INTEGER, NhotypMathFunctions, in_range
from nhotyp.nhotyp_symbol_table import NhotypSymbolTable
from nhotyp.nhotyp_token import NhotypToken, NhotypTokenType, OPERATOR_ARITIES


_INPUT_PATTERN = re.compile(r'[+-]?[0-9]+')

# Host interpreter frames one Nhotyp call can use, allowing for nested blocks and operands.
_HOST_FRAMES_PER_CALL = 16

T = TypeVar("T")


class NhotypEvaluator:
    """
    Evaluates Nhotyp programs directly from their flat prefix token sequences.

    There is no expression tree.  Each expression is consumed left to right
    with an explicit index: the first token decides how many sub-expressions
    follow, because operator arities are fixed and function arities come from
    the symbol table.
    """

    def __init__(
        self,
        functions: NhotypSymbolTable,
        input_source: NhotypInput,
        output: NhotypOutput,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    ):
        """
        Initialize evaluator.

        Args:
            functions: Frozen symbol table of the program
            input_source: Where scan reads integers from
            output: Where print writes lines to
            max_call_depth: Maximum number of live function invocations
        """
        self.functions = functions
        self.input_source = input_source
        self.output = output
        self.call_stack = NhotypCallStack(max_call_depth)
        self._operators = NhotypMathFunctions().get_functions()
        self._declared: Dict[str, FrozenSet[str]] = {}
        self._logger = logging.getLogger("NhotypEvaluator")

    def run_main(self, main: NhotypFunction) -> int:
        """
        Invoke a program's entry point.

        Args:
            main: The main function

        Returns:
            The value main returns

        Raises:
            NhotypEvalError: If evaluation fails
        """
        self._logger.debug("running '%s'", main.name)
        return self._run_guarded(lambda: self.call_function(main, [], main.line))

    def execute_top_level(self, statements: Sequence[NhotypStatement], environment: NhotypEnvironment) -> None:
        """
        Execute statements outside any function, in a caller-owned frame.

        Args:
            statements: Statements to execute
            environment: Frame that persists between calls
        """
        def execute() -> None:
            self.call_stack.push(environment.name, environment)
            try:
                self.execute_block(statements, environment)

            finally:
                self.call_stack.pop()

        self._run_guarded(execute)

    def _run_guarded(self, action: Callable[[], T]) -> T:
        """
        Run an action with enough host stack for the configured call depth.

        Host stack exhaustion is reported as a recursion limit error.
        """
        previous_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(previous_limit + self.call_stack.max_depth * _HOST_FRAMES_PER_CALL)
        try:
            return action()

        except RecursionError as e:
            self._logger.warning("host recursion limit reached at call depth %d", self.call_stack.depth())
            raise NhotypRecursionLimitError(
                self.call_stack.max_depth,
                context="Expressions or calls are nested too deeply for the host interpreter",
                suggestion="Reduce nesting depth or lower the max_call_depth limit"
            ) from e

        finally:
            sys.setrecursionlimit(previous_limit)

    def call_function(self, function: NhotypFunction, arguments: List[int], line: int) -> int:
        """
        Invoke a function in a fresh activation frame.

        Args:
            function: The function to call
            arguments: Already-evaluated argument values, in parameter order
            line: Line of the call site

        Returns:
            The function's return value
        """
        if len(arguments) != function.arity:
            raise NhotypEvalError(
                message=f"Function '{function.name}' expects {function.arity} arguments, got {len(arguments)}",
                line=line
            )

        declared = self._declared.get(function.name)
        if declared is None:
            declared = function.local_names()
            self._declared[function.name] = declared

        environment = NhotypEnvironment(name=function.name, declared=declared)
        for parameter, value in zip(function.parameters, arguments):
            environment.define(parameter, value)

        self.call_stack.push(function.name, environment, line)
        try:
            self.execute_block(function.body, environment)
            return self.evaluate(function.result, environment)

        except (NhotypError, RecursionError):
            # Re-raise Nhotyp errors and host stack exhaustion as-is
            raise

        except Exception as e:
            # Wrap other exceptions with context
            raise NhotypEvalError(
                message=f"Unexpected error during evaluation: {e}",
                context=f"Call stack:\n{self.call_stack.format_stack_trace()}",
                suggestion="This is an internal error - please report this issue",
                line=line
            ) from e

        finally:
            self.call_stack.pop()

    def execute_block(self, statements: Iterable[NhotypStatement], environment: NhotypEnvironment) -> None:
        """
        Execute statements in order against one frame.

        Args:
            statements: Statements to execute
            environment: The current invocation's frame
        """
        for statement in statements:
            if isinstance(statement, NhotypAssign):
                environment.define(statement.variable, self.evaluate(statement.expression, environment))

            elif isinstance(statement, NhotypConditional):
                if self.evaluate(statement.guard, environment) != 0:
                    self.execute_block(statement.body, environment)

            elif isinstance(statement, NhotypLoop):
                while self.evaluate(statement.guard, environment) != 0:
                    self.execute_block(statement.body, environment)

            elif isinstance(statement, NhotypPrint):
                values = [str(environment.lookup(name, statement.line)) for name in statement.variables]
                self.output.write_line(" ".join(values))

            elif isinstance(statement, NhotypReturn):
                raise NhotypEvalError(
                    message="Always return at end of function",
                    line=statement.line
                )

            else:
                raise NhotypEvalError(message=f"Unknown statement type: {type(statement).__name__}")

    def evaluate(self, expression: NhotypExpression, environment: NhotypEnvironment) -> int:
        """
        Evaluate one complete expression.

        Args:
            expression: The expression to evaluate
            environment: The current invocation's frame

        Returns:
            The expression's value

        Raises:
            NhotypEvalError: If evaluation fails or tokens are left over
        """
        value, index = self._evaluate_at(expression.tokens, 0, environment, expression.line)
        if index != len(expression.tokens):
            raise NhotypEvalError(
                message="Expression having misplaced tokens",
                received=f"Expression: {expression.describe()}",
                context=f"Unused tokens start at {expression.tokens[index].value!r}",
                line=expression.line
            )

        return value

    def _evaluate_at(
        self,
        tokens: Sequence[NhotypToken],
        index: int,
        environment: NhotypEnvironment,
        line: int
    ) -> Tuple[int, int]:
        """
        Evaluate the expression starting at tokens[index].

        Args:
            tokens: The expression's tokens
            index: Position of the first token of the sub-expression
            environment: The current invocation's frame
            line: Source line for error reporting

        Returns:
            The value and the index just past the sub-expression
        """
        if index >= len(tokens):
            raise NhotypEvalError(
                message="Expression is incomplete",
                received=f"Expression: {' '.join(token.value for token in tokens)}",
                line=line
            )

        token = tokens[index]
        index += 1

        if token.type == NhotypTokenType.INTEGER:
            return self._literal(token, line), index

        if token.type == NhotypTokenType.OPERATOR:
            if token.value == 'scan':
                return self._scan(line), index

            operands = []
            for _ in range(OPERATOR_ARITIES[token.value]):
                value, index = self._evaluate_at(tokens, index, environment, line)
                operands.append(value)

            return self._operators[token.value](*operands), index

        if token.type == NhotypTokenType.IDENTIFIER:
            function = self.functions.lookup(token.value)
            if function is not None:
                arguments = []
                for _ in range(function.arity):
                    value, index = self._evaluate_at(tokens, index, environment, line)
                    arguments.append(value)

                return self.call_function(function, arguments, line), index

            return environment.lookup(token.value, line), index

        raise NhotypEvalError(
            message=f"Keyword {token.value!r} cannot appear in an expression",
            line=line
        )

    def _literal(self, token: NhotypToken, line: int) -> int:
        """Convert an integer token, checking its range."""
        value = int(token.value)
        if not in_range(value):
            raise NhotypEvalError(
                message=f"Integer literal {token.value} out of range",
                expected=f"A value from {MIN_INTEGER} to {MAX_INTEGER}",
                line=line
            )

        return value

    def _scan(self, line: int) -> int:
        """Read one integer from the input source."""
        text = self.input_source.read_token()
        if text is None:
            self._logger.warning("scan on line %d found no more input", line)
            raise NhotypInputError(
                message="Input exhausted",
                expected="An integer for scan",
                line=line
            )

        if not _INPUT_PATTERN.fullmatch(text) or not in_range(int(text)):
            self._logger.warning("scan on line %d read invalid input %r", line, text)
            raise NhotypInputError(
                message=f"Invalid input {text!r}",
                expected=f"An integer from {MIN_INTEGER} to {MAX_INTEGER}",
                line=line
            )

        return int(text)
