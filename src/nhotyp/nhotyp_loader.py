"""Program loader for Nhotyp.

Loading runs in two phases.  Every function header is registered first, so
the arity of every function is known.  Only then are bodies checked: each
expression must be exactly one complete prefix expression given those
arities, every literal must be in range, and no variable may reuse the name
of a function.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from nhotyp.nhotyp_ast import (
    NhotypAssign, NhotypConditional, NhotypExpression, NhotypFunction, NhotypLoop, NhotypReturn,
    NhotypStatement
)
from nhotyp.nhotyp_error import (
    NhotypDuplicateDefinitionError, NhotypError, NhotypLoadError, NhotypParseError
)
from nhotyp.nhotyp_math import MAX_INTEGER, MIN_INTEGER, in_range
from nhotyp.nhotyp_parser import NhotypParser
from nhotyp.nhotyp_symbol_table import NhotypSymbolTable
from nhotyp.nhotyp_token import NhotypTokenType
from nhotyp.nhotyp_tokenizer import NhotypTokenizer


MAIN_FUNCTION = "main"


def nesting_error() -> NhotypParseError:
    """Create the error reported when blocks are too deep to load."""
    return NhotypParseError(
        message="Blocks are nested too deeply",
        context="Nested if and while blocks exhausted the host interpreter's stack",
        suggestion="Move inner blocks into separate functions"
    )


@dataclass
class NhotypProgram:
    """A loaded program: its frozen function table and the source it came from."""
    functions: NhotypSymbolTable
    source: str = ""

    @property
    def main(self) -> NhotypFunction:
        """The entry point."""
        function = self.functions.lookup(MAIN_FUNCTION)
        assert function is not None, "Loaded programs always have a main function"
        return function


class NhotypLoader:
    """Turns program source into a validated NhotypProgram."""

    def __init__(self) -> None:
        """Initialize the loader."""
        self._tokenizer = NhotypTokenizer()
        self._logger = logging.getLogger("NhotypLoader")

    def load(self, source: str) -> NhotypProgram:
        """
        Load a complete program.

        Args:
            source: Program text

        Returns:
            The loaded program

        Raises:
            NhotypLoadError: If the program cannot be loaded; the error carries the source
        """
        try:
            lines = self._tokenizer.tokenize(source)
            functions, _ = NhotypParser(lines).parse()
            self._logger.debug("parsed %d functions from %d lines", len(functions), len(lines))

            table = self.build_symbol_table(functions)
            self.require_main(table)

            for function in functions:
                self.validate_function(function, table)

        except NhotypError as e:
            raise e.with_source(source)

        except RecursionError as e:
            self._logger.warning("host recursion limit reached while loading")
            raise nesting_error().with_source(source) from e

        return NhotypProgram(table, source)

    def build_symbol_table(
        self,
        functions: Iterable[NhotypFunction],
        base: NhotypSymbolTable | None = None
    ) -> NhotypSymbolTable:
        """
        Register function headers into a new frozen table.

        Args:
            functions: Definitions to register
            base: Existing table whose functions the new one also holds

        Returns:
            The frozen table

        Raises:
            NhotypDuplicateDefinitionError: If a name is reserved or defined twice
        """
        if base is not None:
            return base.extend(functions)

        table = NhotypSymbolTable()
        for function in functions:
            table.register(function)

        table.freeze()
        return table

    def require_main(self, table: NhotypSymbolTable) -> None:
        """
        Check that the program has a usable entry point.

        Raises:
            NhotypLoadError: If main is missing or takes parameters
        """
        main = table.lookup(MAIN_FUNCTION)
        if main is None:
            raise NhotypLoadError(
                message="No 'main' function defined",
                suggestion="Every program needs an entry point",
                example="function main as ... return 0 end function"
            )

        if main.parameters:
            raise NhotypLoadError(
                message="Function 'main' must not take parameters",
                received=f"Parameters: {', '.join(main.parameters)}",
                line=main.line
            )

    def validate_function(self, function: NhotypFunction, table: NhotypSymbolTable) -> None:
        """
        Check a function body against the symbol table.

        Args:
            function: The definition to check
            table: The frozen symbol table
        """
        for parameter in function.parameters:
            if parameter in table:
                raise NhotypDuplicateDefinitionError(
                    parameter,
                    context=f"Parameter of '{function.name}' has the same name as a function",
                    line=function.line
                )

        self.validate_statements(function.body, table)
        self.validate_expression(function.result, table)

    def validate_statements(self, statements: Iterable[NhotypStatement], table: NhotypSymbolTable) -> None:
        """
        Check every expression and assignment target in a statement list.

        Args:
            statements: Statements to check, including nested blocks
            table: The frozen symbol table
        """
        for statement in statements:
            if isinstance(statement, NhotypAssign):
                if statement.variable in table:
                    raise NhotypDuplicateDefinitionError(
                        statement.variable,
                        context="A variable cannot have the same name as a function",
                        line=statement.line
                    )

                self.validate_expression(statement.expression, table)

            elif isinstance(statement, (NhotypConditional, NhotypLoop)):
                self.validate_expression(statement.guard, table)
                self.validate_statements(statement.body, table)

            elif isinstance(statement, NhotypReturn):
                self.validate_expression(statement.expression, table)

    def validate_expression(self, expression: NhotypExpression, table: NhotypSymbolTable) -> None:
        """
        Check that an expression is exactly one complete prefix expression.

        Args:
            expression: The expression to check
            table: The frozen symbol table supplying function arities

        Raises:
            NhotypParseError: If tokens are missing or left over
            NhotypLoadError: If a literal is out of range
        """
        pending = 1
        for index, token in enumerate(expression.tokens):
            if pending == 0:
                raise NhotypParseError(
                    message="Expression having misplaced tokens",
                    received=f"Expression: {expression.describe()}",
                    context=f"The expression is complete before {token.value!r} (token {index + 1})",
                    line=expression.line
                )

            pending -= 1
            if token.type == NhotypTokenType.INTEGER and not in_range(int(token.value)):
                raise NhotypLoadError(
                    message=f"Integer literal {token.value} out of range",
                    expected=f"A value from {MIN_INTEGER} to {MAX_INTEGER}",
                    line=expression.line
                )

            pending += table.token_arity(token)

        if pending > 0:
            raise NhotypParseError(
                message="Expression is incomplete",
                received=f"Expression: {expression.describe()}",
                context=f"{pending} more operand{'s' if pending != 1 else ''} expected",
                line=expression.line
            )
