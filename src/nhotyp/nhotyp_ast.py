"""Statement and function records for Nhotyp.

Expressions are not parsed into trees.  They keep their flat prefix token
sequence and are resolved by the evaluator, which knows each identifier's
arity from the symbol table.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Set, Tuple, Union

from nhotyp.nhotyp_token import NhotypToken


@dataclass(frozen=True)
class NhotypExpression:
    """A flat prefix expression."""
    tokens: Tuple[NhotypToken, ...]
    line: int

    def describe(self) -> str:
        """Return the expression as source text."""
        return " ".join(token.value for token in self.tokens)


@dataclass(frozen=True)
class NhotypAssign:
    """let <variable> = <expression>"""
    variable: str
    expression: NhotypExpression
    line: int


@dataclass(frozen=True)
class NhotypConditional:
    """if <expression> then <body> end if"""
    guard: NhotypExpression
    body: Tuple['NhotypStatement', ...]
    line: int


@dataclass(frozen=True)
class NhotypLoop:
    """while <expression> do <body> end while"""
    guard: NhotypExpression
    body: Tuple['NhotypStatement', ...]
    line: int


@dataclass(frozen=True)
class NhotypPrint:
    """print <variable> ..."""
    variables: Tuple[str, ...]
    line: int


@dataclass(frozen=True)
class NhotypReturn:
    """return <expression>"""
    expression: NhotypExpression
    line: int


NhotypStatement = Union[NhotypAssign, NhotypConditional, NhotypLoop, NhotypPrint, NhotypReturn]


@dataclass(frozen=True)
class NhotypFunction:
    """A function definition: header, body statements and the trailing return expression."""
    name: str
    parameters: Tuple[str, ...]
    body: Tuple[NhotypStatement, ...]
    result: NhotypExpression
    line: int

    @property
    def arity(self) -> int:
        """Number of argument expressions a call consumes."""
        return len(self.parameters)

    def local_names(self) -> FrozenSet[str]:
        """Names this function can bind: its parameters and every assignment target."""
        return frozenset(self.parameters) | assigned_names(self.body)


def assigned_names(statements: Iterable[NhotypStatement]) -> FrozenSet[str]:
    """Collect the target of every assignment in a statement list, including nested blocks."""
    names: Set[str] = set()
    for statement in statements:
        if isinstance(statement, NhotypAssign):
            names.add(statement.variable)

        elif isinstance(statement, (NhotypConditional, NhotypLoop)):
            names |= assigned_names(statement.body)

    return frozenset(names)
