"""
pymatrix: a dense, in-memory 2-D matrix primitive.

A small building block for numeric experiments (toy neural networks,
linear-algebra exercises): one Matrix type with flat row-major storage,
elementwise arithmetic, matrix multiplication, transpose, and a plain-text
serialization format.

Submodules:
    core: Exceptions, validators, precision and tuning defaults
    dense: The Matrix type, its kernels and text serialization
"""

__version__ = "0.1.0"

from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    MatrixFormatError,
)
from pymatrix.dense import Matrix, dumps, loads, load, save, iter_matrices

__all__ = [
    "__version__",
    "Matrix",
    "dumps",
    "loads",
    "load",
    "save",
    "iter_matrices",
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "MatrixFormatError",
]
