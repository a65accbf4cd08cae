"""Token types and token representation for Nhotyp source lines."""

from dataclasses import dataclass
from enum import Enum
from typing import List


class NhotypTokenType(Enum):
    """Token types for Nhotyp source."""
    INTEGER = "INTEGER"
    OPERATOR = "OPERATOR"
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"


# Operators and their fixed arities.  `scan` reads input and takes no operands.
OPERATOR_ARITIES = {
    '+': 2, '-': 2, '*': 2, '/': 2, '%': 2,
    '==': 2, '!=': 2, '<': 2, '>': 2, '<=': 2, '>=': 2,
    'and': 2, 'or': 2, 'xor': 2, 'not': 1,
    'scan': 0,
}

STATEMENT_KEYWORDS = frozenset({
    'let', '=', 'if', 'then', 'while', 'do', 'print', 'return', 'function', 'as', 'end',
})

RESERVED_WORDS = STATEMENT_KEYWORDS | frozenset(OPERATOR_ARITIES)


@dataclass(frozen=True)
class NhotypToken:
    """Represents a single whitespace-delimited atom of a source line."""
    type: NhotypTokenType
    value: str
    line: int

    def is_identifier(self) -> bool:
        """Check if this token could name a function or variable."""
        return self.type == NhotypTokenType.IDENTIFIER

    def __repr__(self) -> str:
        return f"NhotypToken({self.type.name}, {self.value!r}, line={self.line})"


@dataclass(frozen=True)
class NhotypLine:
    """A non-blank source line with comments removed."""
    line: int
    tokens: List[NhotypToken]

    def words(self) -> List[str]:
        """Return the raw token text of this line."""
        return [token.value for token in self.tokens]
