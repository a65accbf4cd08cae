"""Symbol table for Nhotyp function definitions.

The table is filled from every function header before any body is checked or
evaluated.  The evaluator needs each function's arity to know how many
trailing expressions a call consumes, so registration must complete first.
Once loading finishes the table is frozen.
"""

import logging
from typing import Dict, Iterable, List, Optional

from nhotyp.nhotyp_ast import NhotypFunction
from nhotyp.nhotyp_error import NhotypDuplicateDefinitionError, NhotypLoadError
from nhotyp.nhotyp_token import NhotypToken, NhotypTokenType, OPERATOR_ARITIES, RESERVED_WORDS


class NhotypSymbolTable:
    """Maps function names to their definitions."""

    def __init__(self) -> None:
        """Initialize an empty, unfrozen table."""
        self._functions: Dict[str, NhotypFunction] = {}
        self._frozen = False
        self._logger = logging.getLogger("NhotypSymbolTable")

    def register(self, function: NhotypFunction) -> None:
        """
        Add a function definition.

        Args:
            function: The definition to add

        Raises:
            NhotypDuplicateDefinitionError: If the name is reserved or already registered
            NhotypLoadError: If the table has been frozen
        """
        if self._frozen:
            raise NhotypLoadError(
                message=f"Cannot register '{function.name}': symbol table is frozen",
                line=function.line
            )

        if function.name in RESERVED_WORDS:
            raise NhotypDuplicateDefinitionError(
                function.name,
                context="Keywords and operators cannot be used as function names",
                line=function.line
            )

        existing = self._functions.get(function.name)
        if existing is not None:
            raise NhotypDuplicateDefinitionError(
                function.name,
                context=f"Function '{function.name}' is already defined on line {existing.line}",
                suggestion="Rename one of the functions",
                line=function.line
            )

        self._functions[function.name] = function
        self._logger.debug("registered function '%s' with arity %d", function.name, function.arity)

    def freeze(self) -> None:
        """Prevent any further registration."""
        self._frozen = True

    def is_frozen(self) -> bool:
        """Check if the table accepts no more definitions."""
        return self._frozen

    def extend(self, functions: Iterable[NhotypFunction]) -> 'NhotypSymbolTable':
        """
        Build a new frozen table holding this table's functions plus new ones.

        This table is left untouched.

        Args:
            functions: Additional definitions

        Returns:
            The new frozen table

        Raises:
            NhotypDuplicateDefinitionError: If a new name collides with an existing one
        """
        table = NhotypSymbolTable()
        for function in self._functions.values():
            table.register(function)

        for function in functions:
            table.register(function)

        table.freeze()
        return table

    def lookup(self, name: str) -> Optional[NhotypFunction]:
        """
        Look up a function definition.

        Args:
            name: Function name

        Returns:
            The definition, or None if no function has this name
        """
        return self._functions.get(name)

    def token_arity(self, token: NhotypToken) -> int:
        """
        Number of sub-expressions that follow a token in prefix position.

        Operators come first, then known functions, and everything else
        (literals and variables) takes no operands.

        Args:
            token: An expression token

        Returns:
            The token's arity
        """
        if token.type == NhotypTokenType.OPERATOR:
            return OPERATOR_ARITIES[token.value]

        if token.type == NhotypTokenType.IDENTIFIER:
            function = self._functions.get(token.value)
            if function is not None:
                return function.arity

        return 0

    def names(self) -> List[str]:
        """Get all registered function names, sorted."""
        return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        """String representation for debugging."""
        state = "frozen" if self._frozen else "open"
        return f"NhotypSymbolTable({state}: {self.names()})"
