"""Scalar number types, one per precision kind.

Each class binds a ``PrecisionBackend`` and presents the same operator
interface, so generic code (the CG solver, the sparse substrate) is written
once and runs at any precision. Values are immutable; every operator returns
a new instance and ``a += b`` simply rebinds ``a`` to ``a + b``.

Arithmetic never raises on numeric edge cases: dividing by zero or taking
the square root of a negative number yields inf/NaN like IEEE doubles.
"""

import logging
from numbers import Real
from typing import ClassVar, Any, Optional

from precisioncg.core.precision import (
    ABSOLUTE_FLOOR,
    PRECISION_SPECS,
    PrecisionKind,
    PrecisionSpec,
)
from precisioncg.scalars.backends import create_backend
from precisioncg.scalars.protocols import PrecisionBackend

logger = logging.getLogger(__name__)


class ScalarNumber:
    """Base class of the per-kind scalar types."""

    __slots__ = ("_payload",)

    spec: ClassVar[PrecisionSpec]
    backend: ClassVar[PrecisionBackend]

    def __init__(self, value: Any = 0.0):
        if isinstance(value, ScalarNumber):
            if type(value) is not type(self):
                raise TypeError(
                    f"Cannot build {type(self).__name__} from "
                    f"{type(value).__name__}; narrow explicitly with to_double()"
                )
            self._payload = value._payload
        else:
            self._payload = self.backend.from_double(float(value))

    @classmethod
    def _wrap(cls, payload: Any) -> "ScalarNumber":
        obj = cls.__new__(cls)
        obj._payload = payload
        return obj

    @classmethod
    def zero(cls) -> "ScalarNumber":
        return cls(0.0)

    @classmethod
    def one(cls) -> "ScalarNumber":
        return cls(1.0)

    @property
    def kind(self) -> PrecisionKind:
        return self.spec.kind

    # --- Arithmetic ---

    def _coerce(self, other: Any) -> Any:
        """Payload of a same-kind scalar or a native real, else NotImplemented."""
        if type(other) is type(self):
            return other._payload
        if isinstance(other, Real) and not isinstance(other, ScalarNumber):
            return self.backend.from_double(float(other))
        return NotImplemented

    def __add__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.add(self._payload, o))

    def __radd__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.add(o, self._payload))

    def __sub__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.sub(self._payload, o))

    def __rsub__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.sub(o, self._payload))

    def __mul__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.mul(self._payload, o))

    def __rmul__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.mul(o, self._payload))

    def __truediv__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.div(self._payload, o))

    def __rtruediv__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        return self._wrap(self.backend.div(o, self._payload))

    def __neg__(self):
        zero = self.backend.from_double(0.0)
        return self._wrap(self.backend.sub(zero, self._payload))

    def __pos__(self):
        return self

    def __abs__(self):
        zero = self.backend.from_double(0.0)
        if self.backend.less(self._payload, zero):
            return self._wrap(self.backend.sub(zero, self._payload))
        return self

    def sqrt(self) -> "ScalarNumber":
        """Square root; NaN for negative values."""
        return self._wrap(self.backend.sqrt(self._payload))

    def is_finite(self) -> bool:
        return self.backend.is_finite(self._payload)

    # --- Comparison ---

    def _magnitudes(self, other_payload: Any) -> tuple[Any, Any]:
        """|a - b| and max(|a|, |b|) as payloads."""
        backend = self.backend
        zero = backend.from_double(0.0)

        def _abs(p):
            return backend.sub(zero, p) if backend.less(p, zero) else p

        diff = _abs(backend.sub(self._payload, other_payload))
        abs_a = _abs(self._payload)
        abs_b = _abs(other_payload)
        scale = abs_b if backend.less(abs_a, abs_b) else abs_a
        return diff, scale

    def __eq__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        backend = self.backend
        diff, scale = self._magnitudes(o)
        if backend.leading_limb(scale) < ABSOLUTE_FLOOR:
            return backend.leading_limb(diff) < ABSOLUTE_FLOOR
        ratio = backend.div(diff, scale)
        return backend.leading_limb(ratio) < self.spec.epsilon

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        backend = self.backend
        _, scale = self._magnitudes(o)
        margin = backend.mul(backend.from_double(self.spec.epsilon), scale)
        return backend.less(margin, backend.sub(o, self._payload))

    def __gt__(self, other):
        o = self._coerce(other)
        if o is NotImplemented:
            return o
        backend = self.backend
        _, scale = self._magnitudes(o)
        margin = backend.mul(backend.from_double(self.spec.epsilon), scale)
        return backend.less(margin, backend.sub(self._payload, o))

    def __le__(self, other):
        lt = self.__lt__(other)
        if lt is NotImplemented:
            return lt
        return lt or self.__eq__(other)

    def __ge__(self, other):
        gt = self.__gt__(other)
        if gt is NotImplemented:
            return gt
        return gt or self.__eq__(other)

    # Tolerance-based equality is not transitive
    __hash__ = None

    # --- Conversion ---

    def to_string(self, digits: Optional[int] = None) -> str:
        """
        Decimal text of the value.

        Args:
            digits: Significant digits (defaults to the kind's digit count)

        Returns:
            Text representation
        """
        if digits is None:
            digits = self.spec.digits
        return self.backend.stringify(self._payload, digits)

    def to_double(self) -> float:
        """
        Narrow to a native double.

        Goes through the kind's decimal text rather than the payload's bits,
        since multi-limb layouts are not IEEE doubles. If the text does not
        parse, the leading limb is returned and the lower limbs are lost.
        """
        text = self.to_string()
        try:
            return float(text)
        except ValueError:
            logger.debug(
                "Could not parse %r as a double; using the leading limb", text
            )
            return self.backend.leading_limb(self._payload)

    def __float__(self) -> float:
        return self.to_double()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.to_string()}')"


class DoubleNumber(ScalarNumber):
    """Native double precision (~15 digits)."""

    __slots__ = ()
    spec = PRECISION_SPECS[PrecisionKind.DOUBLE]
    backend = create_backend(PrecisionKind.DOUBLE)


class DDNumber(ScalarNumber):
    """Double-double precision (~31 digits)."""

    __slots__ = ()
    spec = PRECISION_SPECS[PrecisionKind.DD]
    backend = create_backend(PrecisionKind.DD)


class DQNumber(ScalarNumber):
    """Double-quad precision (~64 digits)."""

    __slots__ = ()
    spec = PRECISION_SPECS[PrecisionKind.DQ]
    backend = create_backend(PrecisionKind.DQ)


class QXNumber(ScalarNumber):
    """Extended quad precision (~33 digits)."""

    __slots__ = ()
    spec = PRECISION_SPECS[PrecisionKind.QX]
    backend = create_backend(PrecisionKind.QX)


def sqrt(x: ScalarNumber) -> ScalarNumber:
    """Square root of a scalar number."""
    return x.sqrt()
