"""Scalar type dispatch."""

from precisioncg.core.precision import PrecisionKind
from precisioncg.scalars.number import (
    ScalarNumber,
    DoubleNumber,
    DDNumber,
    DQNumber,
    QXNumber,
)

_SCALAR_TYPES: dict[PrecisionKind, type[ScalarNumber]] = {
    PrecisionKind.DOUBLE: DoubleNumber,
    PrecisionKind.DD: DDNumber,
    PrecisionKind.DQ: DQNumber,
    PrecisionKind.QX: QXNumber,
}


def scalar_type(kind: "str | PrecisionKind") -> type[ScalarNumber]:
    """
    Select the scalar class for a precision kind.

    Args:
        kind: PrecisionKind or its label ("double", "dd", "dq", "qx")

    Returns:
        ScalarNumber subclass bound to that kind's backend

    Raises:
        ValueError: If the label names no known precision
    """
    return _SCALAR_TYPES[PrecisionKind.from_label(kind)]


def available_kinds() -> list[PrecisionKind]:
    """Kinds in increasing order of working precision."""
    return sorted(_SCALAR_TYPES, key=lambda k: _SCALAR_TYPES[k].spec.precision_bits)
