"""
Exception hierarchy raised by the anomaly_forest package.

Every error derives from IsolationForestError, so callers can catch the whole
family at once. Input errors additionally derive from the matching builtin
(ValueError / IndexError) so they behave like numpy's own complaints.
"""


class IsolationForestError(Exception):
    """Base class for all anomaly_forest errors."""


class ShapeMismatch(IsolationForestError, ValueError):
    """Rows of inconsistent length, non 2-D input or zero columns."""


class EmptyInput(IsolationForestError, ValueError):
    """A matrix with zero rows was passed where data is required."""


class IndexOutOfRange(IsolationForestError, IndexError):
    """A row/column index, or a scored row length, does not fit the data."""


class BuildError(IsolationForestError):
    """Building the ensemble failed. The original error is chained as __cause__."""


class ScoreError(IsolationForestError):
    """Scoring a matrix failed. The original error is chained as __cause__."""


class ModelFormatError(IsolationForestError, ValueError):
    """A persisted forest record is malformed."""


class ConfigError(IsolationForestError, ValueError):
    """A forest configuration is missing fields or holds invalid values."""
