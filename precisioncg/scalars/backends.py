"""Arithmetic backends for the supported precision kinds.

``DoubleBackend`` wraps numpy ``float64`` with floating-point error reporting
switched off, so division by zero and invalid operations quietly produce
IEEE inf/NaN. ``MultiprecisionBackend`` owns a private
``mpmath.MPContext`` at a fixed binary precision; the global ``mpmath.mp``
context is never consulted or modified.
"""

from typing import Any
import mpmath
import numpy as np

from precisioncg.core.precision import PrecisionKind, PrecisionSpec, precision_spec


class DoubleBackend:
    """Native binary64 arithmetic on numpy scalars."""

    def __init__(self, spec: PrecisionSpec):
        self.spec = spec
        self.name = spec.label

    def from_double(self, d: float) -> np.float64:
        return np.float64(d)

    def add(self, a: np.float64, b: np.float64) -> np.float64:
        with np.errstate(all="ignore"):
            return np.add(a, b)

    def sub(self, a: np.float64, b: np.float64) -> np.float64:
        with np.errstate(all="ignore"):
            return np.subtract(a, b)

    def mul(self, a: np.float64, b: np.float64) -> np.float64:
        with np.errstate(all="ignore"):
            return np.multiply(a, b)

    def div(self, a: np.float64, b: np.float64) -> np.float64:
        with np.errstate(all="ignore"):
            return np.divide(a, b)

    def sqrt(self, a: np.float64) -> np.float64:
        with np.errstate(all="ignore"):
            return np.sqrt(a)

    def stringify(self, a: np.float64, digits: int) -> str:
        return "%.*g" % (digits, a)

    def less(self, a: np.float64, b: np.float64) -> bool:
        with np.errstate(all="ignore"):
            return bool(a < b)

    def leading_limb(self, a: np.float64) -> float:
        return float(a)

    def is_finite(self, a: np.float64) -> bool:
        return bool(np.isfinite(a))


class MultiprecisionBackend:
    """
    Binary floating point at ``spec.precision_bits`` bits via mpmath.

    The context's precision is set once in ``__init__`` and never changed,
    so one backend instance can be shared between concurrent solves.
    """

    def __init__(self, spec: PrecisionSpec):
        self.spec = spec
        self.name = spec.label
        self._ctx = mpmath.MPContext()
        self._ctx.prec = spec.precision_bits

    @property
    def context(self) -> mpmath.MPContext:
        return self._ctx

    def from_double(self, d: float) -> Any:
        return self._ctx.mpf(float(d))

    def add(self, a: Any, b: Any) -> Any:
        return self._ctx.fadd(a, b)

    def sub(self, a: Any, b: Any) -> Any:
        return self._ctx.fsub(a, b)

    def mul(self, a: Any, b: Any) -> Any:
        return self._ctx.fmul(a, b)

    def div(self, a: Any, b: Any) -> Any:
        ctx = self._ctx
        if b == 0:
            # mpmath raises on a zero divisor; follow IEEE instead
            if ctx.isnan(a) or a == 0:
                return ctx.nan
            return ctx.inf if a > 0 else -ctx.inf
        return ctx.fdiv(a, b)

    def sqrt(self, a: Any) -> Any:
        ctx = self._ctx
        if a < 0:
            return ctx.nan
        return ctx.sqrt(a)

    def stringify(self, a: Any, digits: int) -> str:
        return self._ctx.nstr(a, digits)

    def less(self, a: Any, b: Any) -> bool:
        return bool(a < b)

    def leading_limb(self, a: Any) -> float:
        return float(a)

    def is_finite(self, a: Any) -> bool:
        return bool(self._ctx.isfinite(a))


def create_backend(kind: "str | PrecisionKind"):
    """
    Build the backend for a precision kind.

    Args:
        kind: PrecisionKind or its label

    Returns:
        DoubleBackend for double, MultiprecisionBackend otherwise
    """
    spec = precision_spec(kind)
    if spec.kind == PrecisionKind.DOUBLE:
        return DoubleBackend(spec)
    return MultiprecisionBackend(spec)
