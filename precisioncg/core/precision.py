"""Precision kinds and their nominal parameters."""

from dataclasses import dataclass
from enum import Enum


class PrecisionKind(Enum):
    """Arithmetic precision a solve is carried out in."""
    DOUBLE = "double"   # native IEEE binary64
    DD = "dd"           # double-double
    DQ = "dq"           # double-quad
    QX = "qx"           # extended quad (binary128)

    @classmethod
    def from_label(cls, label: "str | PrecisionKind") -> "PrecisionKind":
        """Look up a kind by its lowercase label ("double", "dd", ...)."""
        if isinstance(label, cls):
            return label
        try:
            return cls(str(label).strip().lower())
        except ValueError:
            known = ", ".join(k.value for k in cls)
            raise ValueError(
                f"Unknown precision {label!r} (expected one of: {known})"
            ) from None


@dataclass(frozen=True)
class PrecisionSpec:
    """Nominal description of one precision kind."""

    kind: PrecisionKind
    limbs: int            # components in the nominal representation
    limb_bits: int        # significand bits per limb
    digits: int           # default stringify / narrowing digit count
    nominal_digits: int   # decimal digits the arithmetic layer advertises
    export_digits: int    # digit label written into exported metadata
    epsilon: float        # relative tolerance for equality and ordering

    @property
    def label(self) -> str:
        return self.kind.value

    @property
    def precision_bits(self) -> int:
        """Total significand bits carried by the backend."""
        return self.limbs * self.limb_bits


# Export labels (DD 30, DQ 66) disagree with the nominal digits (31, 64).
# Both are kept; consumers pick the one they mean.
PRECISION_SPECS: dict[PrecisionKind, PrecisionSpec] = {
    PrecisionKind.DOUBLE: PrecisionSpec(
        kind=PrecisionKind.DOUBLE,
        limbs=1,
        limb_bits=53,
        digits=15,
        nominal_digits=15,
        export_digits=15,
        epsilon=1e-15,
    ),
    PrecisionKind.DD: PrecisionSpec(
        kind=PrecisionKind.DD,
        limbs=2,
        limb_bits=53,
        digits=32,
        nominal_digits=31,
        export_digits=30,
        epsilon=1e-30,
    ),
    PrecisionKind.DQ: PrecisionSpec(
        kind=PrecisionKind.DQ,
        limbs=2,
        limb_bits=113,
        digits=64,
        nominal_digits=64,
        export_digits=66,
        epsilon=1e-62,
    ),
    PrecisionKind.QX: PrecisionSpec(
        kind=PrecisionKind.QX,
        limbs=1,
        limb_bits=113,
        digits=33,
        nominal_digits=33,
        export_digits=33,
        epsilon=1e-31,
    ),
}

# Below this magnitude equality switches to an absolute comparison.
ABSOLUTE_FLOOR = 1e-15


def precision_spec(kind: "str | PrecisionKind") -> PrecisionSpec:
    """Return the PrecisionSpec for a kind or its label."""
    return PRECISION_SPECS[PrecisionKind.from_label(kind)]
