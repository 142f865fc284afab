"""
Exception hierarchy for pymatrix.

All exceptions inherit from PyMatrixError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Shape checks run before any state is touched, so a raised
      DimensionError never leaves a half-updated matrix behind
"""


class PyMatrixError(Exception):
    """Base exception for all pymatrix errors."""
    pass


class ValidationError(PyMatrixError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix dimensions are incorrect or inconsistent.

    Raised when an operation's precondition on matching dimensions is
    violated: binary elementwise operations, dot, and subtract.

    Attributes:
        operation: Name of the operation that rejected its operands
        expected: The dimension (or shape) the operation required
        actual: The dimension (or shape) it was given
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        expected: object = None,
        actual: object = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.expected = expected
        self.actual = actual


class MatrixFormatError(ValidationError):
    """
    Serialized matrix text could not be parsed.

    Raised on a malformed or negative header, a non-numeric value token,
    truncated input, or stray tokens after the last value.

    Attributes:
        line: 1-based line number where parsing failed, if known
    """

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line
