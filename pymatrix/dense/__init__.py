"""
Dense matrix module.

Public API:
    Matrix              - Row-major float64 matrix
    dumps(m) / loads(s) - Text serialization to and from a string
    save(m, p) / load(p) - Text serialization to and from a file
    write_matrix / read_matrix - Text serialization over open streams
    iter_matrices(f)    - Consecutive matrices stored in one stream
"""

from pymatrix.dense.matrix import Matrix
from pymatrix.dense.io import (
    dumps,
    loads,
    save,
    load,
    write_matrix,
    read_matrix,
    iter_matrices,
)

__all__ = [
    "Matrix",
    "dumps",
    "loads",
    "save",
    "load",
    "write_matrix",
    "read_matrix",
    "iter_matrices",
]
