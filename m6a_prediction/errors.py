# errors.py
"""Exceptions raised while scoring candidate m6A sites."""


class M6APredictionError(Exception):
    """Base class for every error raised by this package."""


class SchemaError(M6APredictionError, ValueError):
    """Input table or feature schema does not match the training-time layout."""

    def __init__(self, message, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])


class ShapeError(M6APredictionError, ValueError):
    """Motif strings have inconsistent length or the wrong length for the model."""

    def __init__(self, message, rows=None):
        super().__init__(message)
        self.rows = list(rows or [])


class CategoryError(M6APredictionError, ValueError):
    """Categorical value outside the declared level set (strict mode only)."""

    def __init__(self, message, column=None, values=None):
        super().__init__(message)
        self.column = column
        self.values = list(values or [])


class ThresholdError(M6APredictionError, ValueError):
    pass


class ModelError(M6APredictionError, RuntimeError):
    """Classifier bundle is unusable or the classifier call failed."""


class UnrecognizedCategoryWarning(UserWarning):
    """Rows with unknown categories are still scored, but the scores are unreliable."""
