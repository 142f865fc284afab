"""
Core infrastructure for pymatrix.

Key components:
    exceptions: Exception hierarchy
    validation: Input validators
    precision: Comparison tolerances
    config: Tuning defaults (dot method, transpose tile size)
"""

from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    MatrixFormatError,
)

__all__ = [
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "MatrixFormatError",
]
