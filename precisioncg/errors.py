"""Exception hierarchy.

Numeric edge conditions (division by zero, square roots of negative
values) are never raised; they come back as non-finite scalars.
"""


class PrecisioncgError(Exception):
    """Base class for all precisioncg errors."""


class MatrixMarketError(PrecisioncgError):
    """A Matrix Market file could not be read or is malformed."""


class ConfigError(PrecisioncgError, ValueError):
    """An experiment configuration is invalid."""
