"""
Errors raised by the clustering and conversion routines.

Both are ``ValueError`` subclasses so callers that only care about bad
input can keep catching ``ValueError``.
"""


class InvalidParameterError(ValueError):
    """A parameter is out of range (bad k, empty dataset, negative tolerance...)."""


class DimensionMismatchError(ValueError):
    """Samples have inconsistent lengths or an array has the wrong shape."""
