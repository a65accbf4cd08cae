"""Arithmetic, comparison and boolean operators for Nhotyp.

Every value is a signed 48-bit integer.  Results wrap around modulo 2**48 and
are sign-extended back into range.  Python integers are unbounded, so the
exact result is always available before it is reduced.
"""

from typing import Callable, Dict


INTEGER_BITS = 48
MIN_INTEGER = -(1 << (INTEGER_BITS - 1))
MAX_INTEGER = (1 << (INTEGER_BITS - 1)) - 1

_MODULUS = 1 << INTEGER_BITS


def wrap(value: int) -> int:
    """Reduce an exact integer into the signed 48-bit range."""
    return ((value - MIN_INTEGER) % _MODULUS) + MIN_INTEGER


def in_range(value: int) -> bool:
    """Check if a value is representable without wrapping."""
    return MIN_INTEGER <= value <= MAX_INTEGER


class NhotypMathFunctions:
    """Operator implementations for Nhotyp."""

    @staticmethod
    def add(a: int, b: int) -> int:
        """Implement + operation."""
        return wrap(a + b)

    @staticmethod
    def sub(a: int, b: int) -> int:
        """Implement - operation."""
        return wrap(a - b)

    @staticmethod
    def mul(a: int, b: int) -> int:
        """Implement * operation."""
        return wrap(a * b)

    @staticmethod
    def rem(a: int, b: int) -> int:
        """
        Implement % operation.

        Returns the k in [0, |b|) with a = |b| * p + k.  A zero divisor gives 0.
        """
        divisor = abs(b)
        if divisor == 0:
            return 0

        return wrap(a % divisor)

    @staticmethod
    def div(a: int, b: int) -> int:
        """
        Implement / operation.

        Defined as (a - rem(a, b)) / |b|, so the remainder is never negative.
        A zero divisor gives 0.
        """
        divisor = abs(b)
        if divisor == 0:
            return 0

        return wrap((a - NhotypMathFunctions.rem(a, b)) // divisor)

    @staticmethod
    def eq(a: int, b: int) -> int:
        """Implement == operation."""
        return 1 if a == b else 0

    @staticmethod
    def ne(a: int, b: int) -> int:
        """Implement != operation."""
        return 1 if a != b else 0

    @staticmethod
    def lt(a: int, b: int) -> int:
        """Implement < operation."""
        return 1 if a < b else 0

    @staticmethod
    def gt(a: int, b: int) -> int:
        """Implement > operation."""
        return 1 if a > b else 0

    @staticmethod
    def le(a: int, b: int) -> int:
        """Implement <= operation."""
        return 1 if a <= b else 0

    @staticmethod
    def ge(a: int, b: int) -> int:
        """Implement >= operation."""
        return 1 if a >= b else 0

    @staticmethod
    def logical_and(a: int, b: int) -> int:
        """Implement and operation."""
        return 1 if a != 0 and b != 0 else 0

    @staticmethod
    def logical_or(a: int, b: int) -> int:
        """Implement or operation."""
        return 1 if a != 0 or b != 0 else 0

    @staticmethod
    def logical_xor(a: int, b: int) -> int:
        """Implement xor operation."""
        return 1 if (a != 0) != (b != 0) else 0

    @staticmethod
    def logical_not(a: int) -> int:
        """Implement not operation."""
        return 1 if a == 0 else 0

    def get_functions(self) -> Dict[str, Callable[..., int]]:
        """Return dictionary of operator implementations."""
        return {
            # Arithmetic
            '+': self.add,
            '-': self.sub,
            '*': self.mul,
            '/': self.div,
            '%': self.rem,

            # Comparison
            '==': self.eq,
            '!=': self.ne,
            '<': self.lt,
            '>': self.gt,
            '<=': self.le,
            '>=': self.ge,

            # Boolean
            'and': self.logical_and,
            'or': self.logical_or,
            'xor': self.logical_xor,
            'not': self.logical_not,
        }
