"""
Exceptions raised by the grid summation engine.

All package errors derive from ``GridsumError``. Errors caused by bad caller
input also derive from ``ValueError`` so that callers catching the builtin
keep working.
"""


class GridsumError(Exception):
    """Base exception for gridsum."""


class InvalidGridError(GridsumError, ValueError):
    """Grid bounds or step counts are missing, malformed, or inconsistent."""


class IntegrandShapeError(GridsumError, ValueError):
    """A batched integrand returned values that do not match its grid slice."""
