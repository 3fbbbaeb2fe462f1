"""Precision-abstracted scalar numbers."""

from precisioncg.scalars.protocols import PrecisionBackend
from precisioncg.scalars.backends import (
    DoubleBackend,
    MultiprecisionBackend,
    create_backend,
)
from precisioncg.scalars.number import (
    ScalarNumber,
    DoubleNumber,
    DDNumber,
    DQNumber,
    QXNumber,
    sqrt,
)
from precisioncg.scalars.factory import scalar_type, available_kinds

__all__ = [
    "PrecisionBackend",
    "DoubleBackend",
    "MultiprecisionBackend",
    "create_backend",
    "ScalarNumber",
    "DoubleNumber",
    "DDNumber",
    "DQNumber",
    "QXNumber",
    "sqrt",
    "scalar_type",
    "available_kinds",
]
