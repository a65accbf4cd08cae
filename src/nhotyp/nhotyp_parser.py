"""Parser for Nhotyp statements and function definitions with detailed error messages."""

from typing import List, Sequence, Tuple

from nhotyp.nhotyp_ast import (
    NhotypAssign, NhotypConditional, NhotypExpression, NhotypFunction, NhotypLoop,
    NhotypPrint, NhotypReturn, NhotypStatement
)
from nhotyp.nhotyp_error import (
    ErrorMessageBuilder, NhotypDuplicateDefinitionError, NhotypParseError, NhotypUnclosedBlockError
)
from nhotyp.nhotyp_token import NhotypLine, NhotypToken, NhotypTokenType


MAX_PARAMETERS = 16
MAX_PRINT_VARIABLES = 16


class NhotypParser:
    """Parses tokenized lines into function definitions and statements."""

    def __init__(self, lines: List[NhotypLine]):
        """
        Initialize parser with tokenized lines.

        Args:
            lines: Non-blank source lines from the tokenizer
        """
        self.lines = lines
        self.pos = 0

    def parse(self, allow_statements: bool = False) -> Tuple[List[NhotypFunction], List[NhotypStatement]]:
        """
        Parse the whole source.

        Args:
            allow_statements: Accept statements outside functions (interactive sessions)

        Returns:
            Function definitions and top-level statements, in source order

        Raises:
            NhotypParseError: If the source is malformed
        """
        functions: List[NhotypFunction] = []
        statements: List[NhotypStatement] = []

        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            keyword = line.tokens[0].value

            if keyword == 'function':
                functions.append(self._parse_function())
                continue

            if keyword == 'end':
                raise NhotypParseError(
                    message="Illegal code block end",
                    received=f"Found: {' '.join(line.words())}",
                    context="There is no open block to close",
                    line=line.line
                )

            if not allow_statements:
                raise NhotypParseError(
                    message="Statements should appear in functions",
                    received=f"Found: {' '.join(line.words())}",
                    example="function main as ... end function",
                    line=line.line
                )

            statement = self._parse_statement()
            if isinstance(statement, NhotypReturn):
                raise NhotypParseError(
                    message="Return statements can only end a function",
                    line=statement.line
                )

            statements.append(statement)

        return functions, statements

    def _advance(self) -> NhotypLine:
        """Consume and return the current line."""
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def _parse_block(self, terminator: str, opened_at: int, allow_return: bool) -> List[NhotypStatement]:
        """
        Parse statements up to and including the matching 'end <terminator>'.

        Args:
            terminator: The keyword that must follow 'end'
            opened_at: Line that opened the block
            allow_return: Whether return statements may appear directly in this block

        Returns:
            The block's statements
        """
        statements: List[NhotypStatement] = []

        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            words = line.words()

            if words[0] == 'end':
                self.pos += 1
                if len(words) == 2 and words[1] == terminator:
                    return statements

                raise NhotypParseError(
                    message="Illegal code block end",
                    received=f"Found: {' '.join(words)}",
                    expected=f"end {terminator}",
                    context=f"Block opened on line {opened_at}",
                    line=line.line
                )

            if words[0] == 'function':
                raise NhotypParseError(
                    message="Function should not appear in functions",
                    received=f"Found: {' '.join(words)}",
                    suggestion="Define every function at the top level",
                    line=line.line
                )

            statement = self._parse_statement()
            if isinstance(statement, NhotypReturn) and not allow_return:
                raise NhotypParseError(
                    message="Always return at end of function",
                    context=f"Return inside the '{terminator}' block opened on line {opened_at}",
                    suggestion="Assign the result to a variable and return it as the last statement",
                    line=statement.line
                )

            statements.append(statement)

        raise NhotypUnclosedBlockError(
            message="Code block unclosed",
            expected=f"end {terminator}",
            context=f"Block opened on line {opened_at}",
            line=opened_at
        )

    def _parse_statement(self) -> NhotypStatement:
        """Parse one statement starting at the current line."""
        line = self.lines[self.pos]
        keyword = line.tokens[0].value

        if keyword == 'let':
            return self._parse_assign(self._advance())

        if keyword == 'if':
            return self._parse_conditional(self._advance())

        if keyword == 'while':
            return self._parse_loop(self._advance())

        if keyword == 'print':
            return self._parse_print(self._advance())

        if keyword == 'return':
            return self._parse_return(self._advance())

        raise NhotypParseError(
            message=f"Unexpected statement token {keyword!r}",
            expected="let, if, while, print, return or function",
            line=line.line
        )

    def _parse_assign(self, line: NhotypLine) -> NhotypAssign:
        """Parse 'let <variable> = <expression>'."""
        tokens = line.tokens
        if len(tokens) < 4 or tokens[2].value != '=' or not tokens[1].is_identifier():
            raise self._malformed('let', "Malformed assignment statement", line)

        return NhotypAssign(tokens[1].value, self._expression(tokens[3:], line), line.line)

    def _parse_conditional(self, line: NhotypLine) -> NhotypConditional:
        """Parse 'if <expression> then ... end if'."""
        tokens = line.tokens
        if len(tokens) < 3 or tokens[-1].value != 'then':
            raise self._malformed('if', "Malformed conditional statement", line)

        guard = self._expression(tokens[1:-1], line)
        body = self._parse_block('if', line.line, allow_return=False)
        return NhotypConditional(guard, tuple(body), line.line)

    def _parse_loop(self, line: NhotypLine) -> NhotypLoop:
        """Parse 'while <expression> do ... end while'."""
        tokens = line.tokens
        if len(tokens) < 3 or tokens[-1].value != 'do':
            raise self._malformed('while', "Malformed loop statement", line)

        guard = self._expression(tokens[1:-1], line)
        body = self._parse_block('while', line.line, allow_return=False)
        return NhotypLoop(guard, tuple(body), line.line)

    def _parse_print(self, line: NhotypLine) -> NhotypPrint:
        """Parse 'print <variable> ...'."""
        operands = line.tokens[1:]
        for token in operands:
            if not token.is_identifier():
                raise self._malformed('print', f"Cannot print {token.value!r}: only variables can be printed", line)

        if len(operands) > MAX_PRINT_VARIABLES:
            raise self._malformed(
                'print', f"Too many variables to print ({len(operands)} of {MAX_PRINT_VARIABLES})", line
            )

        return NhotypPrint(tuple(token.value for token in operands), line.line)

    def _parse_return(self, line: NhotypLine) -> NhotypReturn:
        """Parse 'return <expression>'."""
        if len(line.tokens) < 2:
            raise self._malformed('return', "Malformed return statement", line)

        return NhotypReturn(self._expression(line.tokens[1:], line), line.line)

    def _parse_function(self) -> NhotypFunction:
        """Parse 'function <name> <parameter> ... as ... end function'."""
        line = self._advance()
        tokens = line.tokens
        if len(tokens) < 3 or tokens[-1].value != 'as' or not tokens[1].is_identifier():
            raise self._malformed('function', "Bad function definition", line)

        name = tokens[1].value
        parameters: List[str] = []
        for token in tokens[2:-1]:
            if not token.is_identifier():
                raise self._malformed('function', f"Bad parameter name {token.value!r}", line)

            if token.value in parameters:
                raise NhotypDuplicateDefinitionError(
                    token.value,
                    context=f"Parameter '{token.value}' appears twice in '{name}'",
                    line=line.line
                )

            parameters.append(token.value)

        if len(parameters) > MAX_PARAMETERS:
            raise self._malformed(
                'function', f"Too many parameters ({len(parameters)} of {MAX_PARAMETERS})", line
            )

        body = self._parse_block('function', line.line, allow_return=True)
        if not body or not isinstance(body[-1], NhotypReturn):
            raise NhotypParseError(
                message=f"Function '{name}' must end with a return statement",
                example=ErrorMessageBuilder.create_statement_example('return'),
                line=line.line
            )

        for statement in body[:-1]:
            if isinstance(statement, NhotypReturn):
                raise NhotypParseError(
                    message="Always return at end of function",
                    context=f"Function '{name}' continues after this return",
                    line=statement.line
                )

        result = body[-1]
        assert isinstance(result, NhotypReturn)
        return NhotypFunction(name, tuple(parameters), tuple(body[:-1]), result.expression, line.line)

    def _expression(self, tokens: Sequence[NhotypToken], line: NhotypLine) -> NhotypExpression:
        """Build an expression record, rejecting statement keywords inside it."""
        if not tokens:
            raise NhotypParseError(message="Missing expression", line=line.line)

        for token in tokens:
            if token.type == NhotypTokenType.KEYWORD:
                raise NhotypParseError(
                    message=f"Keyword {token.value!r} cannot appear in an expression",
                    received=f"Found: {' '.join(line.words())}",
                    line=line.line
                )

        return NhotypExpression(tuple(tokens), line.line)

    def _malformed(self, keyword: str, message: str, line: NhotypLine) -> NhotypParseError:
        """Create a malformed-statement error for a line."""
        return NhotypParseError(
            message=message,
            received=f"Found: {' '.join(line.words())}",
            example=ErrorMessageBuilder.create_statement_example(keyword),
            line=line.line
        )
