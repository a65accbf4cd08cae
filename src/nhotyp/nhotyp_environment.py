"""Activation frames for Nhotyp function invocations."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

from nhotyp.nhotyp_error import (
    ErrorMessageBuilder, NhotypUnboundVariableError, NhotypUnknownIdentifierError
)


@dataclass
class NhotypEnvironment:
    """
    Variable store for exactly one function invocation.

    There are no nested scopes: a variable assigned inside a conditional or
    loop body stays visible for the rest of the invocation.

    `declared` holds every name the function could bind (its parameters and
    assignment targets).  Reading one of those before it is assigned is an
    unbound variable; reading any other name is an unknown identifier.
    """
    name: str = "anonymous"
    declared: FrozenSet[str] = frozenset()
    bindings: Dict[str, int] = field(default_factory=dict)

    def define(self, name: str, value: int) -> None:
        """
        Bind or overwrite a variable.

        Args:
            name: Variable name
            value: Integer value
        """
        self.bindings[name] = value

    def lookup(self, name: str, line: int | None = None) -> int:
        """
        Look up a variable in this frame.

        Args:
            name: Variable name to look up
            line: Source line for error reporting

        Returns:
            Variable value

        Raises:
            NhotypUnboundVariableError: If the variable is declared but not yet assigned
            NhotypUnknownIdentifierError: If the name means nothing in this function
        """
        if name in self.bindings:
            return self.bindings[name]

        available = self.get_available_bindings()
        available_str = ", ".join(f"'{n}'" for n in available) if available else "(none)"

        if name in self.declared:
            raise NhotypUnboundVariableError(
                name,
                context=f"Bound variables in '{self.name}': {available_str}",
                suggestion=f"Assign '{name}' with a let statement before reading it",
                example=ErrorMessageBuilder.create_statement_example('let'),
                line=line
            )

        similar = ErrorMessageBuilder.suggest_similar_names(name, sorted(self.declared | set(self.bindings)))
        raise NhotypUnknownIdentifierError(
            name,
            context=f"Bound variables in '{self.name}': {available_str}",
            suggestion=f"Did you mean: {', '.join(similar)}?" if similar else "Check spelling",
            line=line
        )

    def has_binding(self, name: str) -> bool:
        """Check if a variable is bound in this frame."""
        return name in self.bindings

    def declare(self, names: FrozenSet[str]) -> None:
        """Add names this frame may later bind."""
        self.declared = self.declared | names

    def copy(self) -> 'NhotypEnvironment':
        """Return an independent copy of this frame."""
        return NhotypEnvironment(self.name, self.declared, dict(self.bindings))

    def get_local_bindings(self) -> Dict[str, int]:
        """Get a copy of the bindings in this frame."""
        return self.bindings.copy()

    def get_available_bindings(self) -> List[str]:
        """Get all bound names, sorted."""
        return sorted(self.bindings)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"NhotypEnvironment({self.name}: {self.get_available_bindings()})"
