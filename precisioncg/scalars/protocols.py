"""Precision backend protocol."""

from typing import Protocol, Any


class PrecisionBackend(Protocol):
    """
    Protocol for the elementary arithmetic of one precision kind.
    Allows swapping between native, multiprecision and compiled kernels.

    Payloads are backend-private; callers only pass back what the backend
    produced. No method may raise on numeric edge conditions: undefined
    results are returned as non-finite payloads.
    """

    name: str

    def from_double(self, d: float) -> Any:
        """
        Convert a native double into a payload.

        Args:
            d: Native double value

        Returns:
            Payload representing exactly d
        """
        ...

    def add(self, a: Any, b: Any) -> Any:
        """Return a + b."""
        ...

    def sub(self, a: Any, b: Any) -> Any:
        """Return a - b."""
        ...

    def mul(self, a: Any, b: Any) -> Any:
        """Return a * b."""
        ...

    def div(self, a: Any, b: Any) -> Any:
        """Return a / b (non-finite on a zero divisor)."""
        ...

    def sqrt(self, a: Any) -> Any:
        """Return sqrt(a) (NaN for negative a)."""
        ...

    def stringify(self, a: Any, digits: int) -> str:
        """
        Decimal text of a payload.

        Args:
            a: Payload
            digits: Significant decimal digits

        Returns:
            Text parseable by float() for finite and non-finite values
        """
        ...

    def leading_limb(self, a: Any) -> float:
        """Most significant limb as a native double."""
        ...

    def is_finite(self, a: Any) -> bool:
        """True when a is neither infinite nor NaN."""
        ...

    def less(self, a: Any, b: Any) -> bool:
        """Exact a < b (False if either is NaN)."""
        ...
