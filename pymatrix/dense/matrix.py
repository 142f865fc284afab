"""
Dense 2-D matrix with flat row-major storage.

A Matrix owns one contiguous float64 buffer of length rows * cols plus the
column count it was built with. Entry (r, c) lives at flat index
``r * cols + c``; everything else (height, width, multiplication, transpose)
is index arithmetic over that buffer.

Dimension policy:
    Shape preconditions are always checked. Binary elementwise operations
    (apply with an operand, +, -, Hadamard *), dot and subtract raise
    DimensionError before allocating or mutating anything.

Mutation:
    Operations return new matrices, except subtract(), mul(), selfapply()
    and item assignment, which update the receiver in place.

Thread safety:
    No two Matrix instances share a buffer, so distinct instances can be
    used from different threads freely. Mutating the same instance from
    several threads is unsupported; callers must serialize such access.
"""

from __future__ import annotations

import numbers
import operator
from typing import Any, Callable, Iterator, TextIO

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.config import DEFAULT_BLOCK_SIZE, DEFAULT_DOT_METHOD, DotMethod
from pymatrix.core.exceptions import DimensionError, ValidationError
from pymatrix.core.precision import DEFAULT_ATOL, DEFAULT_RTOL, is_close
from pymatrix.core.validation import (
    check_2d,
    check_array,
    check_dimension,
    check_inner_dims,
    check_positive_int,
    check_same_shape,
    check_scalar,
)
from pymatrix.dense._kernels import get_dot_kernel, transpose_tiled

UnaryOp = Callable[[Any], Any]
BinaryOp = Callable[[Any, Any], Any]


def _is_scalar(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class Matrix:
    """
    Dense matrix of float64 values stored row-major in one flat buffer.

    Attributes are derived from the buffer length and the remembered
    column count:
        height() == 0 if cols == 0 else len(buffer) // cols
        width()  == cols if height() > 0 else 0

    A matrix with no entries (zero rows or zero columns) is a valid empty
    value; it reports shape (0, 0) and every operation on it is a no-op.

    Examples:
        >>> a = Matrix.from_rows([[1, 2], [3, 4]])
        >>> a.dot(Matrix.identity(2)) == a
        True
        >>> a.transpose().tolist()
        [[1.0, 3.0], [2.0, 4.0]]
    """

    __slots__ = ('_data', '_cols')

    # Mutable value type
    __hash__ = None  # type: ignore[assignment]

    # numpy scalars and arrays defer to our reflected operators
    __array_ufunc__ = None

    def __init__(self, rows: int = 0, cols: int = 0, init_val: float = 0.0):
        """
        Create a rows x cols matrix with every entry set to init_val.

        Args:
            rows: Number of rows (non-negative integer)
            cols: Number of columns (non-negative integer)
            init_val: Initial value of every entry

        Raises:
            ValidationError: If a dimension is not a non-negative integer
                or init_val is not a real number
        """
        rows = check_dimension(rows, 'rows')
        cols = check_dimension(cols, 'cols')
        value = check_scalar(init_val, 'init_val')
        self._data: NDArray[np.float64] = np.full(rows * cols, value, dtype=np.float64)
        self._cols = cols

    @classmethod
    def _wrap(cls, data: NDArray[np.float64], cols: int) -> Matrix:
        """Adopt an already-allocated flat buffer without copying."""
        obj = cls.__new__(cls)
        obj._data = data
        obj._cols = cols
        return obj

    # === Alternate constructors ===

    @classmethod
    def from_numpy(cls, array: ArrayLike) -> Matrix:
        """
        Build a matrix from a 2-D numeric array-like. The data is copied.

        Raises:
            ValidationError: If the input is not numeric
            DimensionError: If the input is not 2-D
        """
        values = check_array(array, 'array')
        check_2d(values, 'array')
        flat = np.array(values, dtype=np.float64, order='C').reshape(-1)
        return cls._wrap(flat, values.shape[1])

    @classmethod
    def from_rows(cls, rows: ArrayLike) -> Matrix:
        """
        Build a matrix from a nested sequence of rows.

        An empty sequence gives the empty matrix. Ragged rows are rejected.
        """
        values = check_array(rows, 'rows')
        if values.ndim == 1 and values.size == 0:
            return cls()
        return cls.from_numpy(values)

    @classmethod
    def identity(cls, n: int) -> Matrix:
        """Return the n x n identity matrix."""
        result = cls(n, n)
        result._data[::n + 1] = 1.0
        return result

    # === Shape ===

    def height(self) -> int:
        """Number of rows."""
        return 0 if self._cols == 0 else self._data.size // self._cols

    def width(self) -> int:
        """Number of columns, or 0 for an empty matrix."""
        return self._cols if self.height() > 0 else 0

    @property
    def shape(self) -> tuple[int, int]:
        """(height(), width())"""
        return (self.height(), self.width())

    @property
    def size(self) -> int:
        """Number of stored entries."""
        return int(self._data.size)

    @property
    def data(self) -> NDArray[np.float64]:
        """Read-only view of the flat row-major buffer."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    # === Element access ===

    def _offset(self, key: Any) -> int:
        """Map a flat index or a (row, col) pair to a buffer offset."""
        if isinstance(key, tuple):
            if len(key) != 2:
                raise IndexError(f"expected (row, col), got {len(key)} indices")
            row, col = operator.index(key[0]), operator.index(key[1])
            height, width = self.shape
            if not (0 <= row < height and 0 <= col < width):
                raise IndexError(
                    f"index ({row}, {col}) out of range for shape ({height}, {width})"
                )
            return row * self._cols + col
        index = operator.index(key)
        if not 0 <= index < self._data.size:
            raise IndexError(f"flat index {index} out of range for size {self._data.size}")
        return index

    def __getitem__(self, key: int | tuple[int, int]) -> float:
        return float(self._data[self._offset(key)])

    def __setitem__(self, key: int | tuple[int, int], value: float) -> None:
        self._data[self._offset(key)] = check_scalar(value, 'value')

    # === Copies and conversion ===

    def copy(self) -> Matrix:
        """Return an independent copy with its own buffer."""
        return Matrix._wrap(self._data.copy(), self._cols)

    def __copy__(self) -> Matrix:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Matrix:
        return self.copy()

    def to_numpy(self) -> NDArray[np.float64]:
        """Return a 2-D copy of the entries, shape (height(), width())."""
        return self._data.reshape(self.shape).copy()

    def tolist(self) -> list[list[float]]:
        """Return the entries as a list of rows."""
        return self.to_numpy().tolist()

    # === Comparison ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def allclose(
        self,
        other: Matrix,
        rtol: float = DEFAULT_RTOL,
        atol: float = DEFAULT_ATOL,
    ) -> bool:
        """
        Compare entries within a tolerance.

        Returns False when the shapes differ rather than raising.
        """
        if self.shape != other.shape:
            return False
        return bool(np.all(is_close(self._data, other._data, rtol=rtol, atol=atol)))

    # === Elementwise framework ===

    def apply(
        self,
        other_or_op: Matrix | UnaryOp,
        op: BinaryOp | None = None,
        *,
        vectorized: bool = False,
    ) -> Matrix:
        """
        Create a new matrix by applying an operation to every entry.

        Two forms:
            apply(op)        entry i of the result is op(self[i])
            apply(other, op) entry i of the result is op(self[i], other[i])

        By default op is called once per entry with Python floats. With
        vectorized=True (implied when op is a numpy ufunc) op is called once
        with the whole flat buffer(s) and must return an array of the same
        length; each entry must still depend only on the matching input
        entries.

        An empty receiver yields an empty copy without calling op. The
        binary form first requires equal heights, and for a non-empty
        receiver equal column counts.

        Args:
            other_or_op: Operand matrix (binary form) or the unary op
            op: The binary op, or None for the unary form
            vectorized: Call op on whole buffers instead of per entry

        Returns:
            A new Matrix of the receiver's shape

        Raises:
            DimensionError: If the binary operand's shape differs
        """
        if op is None:
            return self._apply_unary(other_or_op, vectorized)
        if not isinstance(other_or_op, Matrix):
            raise TypeError(
                f"apply: operand must be a Matrix, got {type(other_or_op).__name__}"
            )
        return self._apply_binary(other_or_op, op, vectorized, 'apply')

    def _apply_unary(self, op: UnaryOp, vectorized: bool) -> Matrix:
        if self._data.size == 0:
            return self.copy()
        return Matrix._wrap(self._map(op, vectorized), self._cols)

    def _apply_binary(
        self,
        other: Matrix,
        op: BinaryOp,
        vectorized: bool,
        operation: str,
    ) -> Matrix:
        empty = self._data.size == 0
        check_same_shape(
            self.height(), self._cols, other.height(), other._cols, operation, empty=empty
        )
        if empty:
            return self.copy()

        if vectorized or isinstance(op, np.ufunc):
            values = self._checked_result(op(self._data.copy(), other._data.copy()))
        else:
            pairs = zip(self._data.tolist(), other._data.tolist())
            values = np.fromiter(
                (op(a, b) for a, b in pairs), dtype=np.float64, count=self._data.size
            )
        return Matrix._wrap(values, self._cols)

    def selfapply(self, op: UnaryOp, *, vectorized: bool = False) -> None:
        """
        Apply a unary operation to every entry in place.

        All results are computed before the buffer is written, so an op
        that raises leaves the matrix untouched.
        """
        if self._data.size == 0:
            return
        self._data[:] = self._map(op, vectorized)

    def _map(self, op: UnaryOp, vectorized: bool) -> NDArray[np.float64]:
        if vectorized or isinstance(op, np.ufunc):
            return self._checked_result(op(self._data.copy()))
        return np.fromiter(
            (op(v) for v in self._data.tolist()), dtype=np.float64, count=self._data.size
        )

    def _checked_result(self, result: Any) -> NDArray[np.float64]:
        values = np.asarray(result, dtype=np.float64)
        if values.shape != self._data.shape:
            raise ValidationError(
                f"vectorized op returned shape {values.shape}, expected {self._data.shape}"
            )
        return values

    # === Operators ===

    def __add__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._apply_binary(other, np.add, True, '+')

    def __sub__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._apply_binary(other, np.subtract, True, '-')

    def __mul__(self, other: Any) -> Matrix:
        """Hadamard product with a Matrix, or scaling by a real number."""
        if isinstance(other, Matrix):
            return self._apply_binary(other, np.multiply, True, '*')
        if _is_scalar(other):
            factor = float(other)
            return self.apply(lambda v: v * factor, vectorized=True)
        return NotImplemented

    def __rmul__(self, other: Any) -> Matrix:
        if _is_scalar(other):
            return self * other
        return NotImplemented

    def __matmul__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.dot(other)

    def __neg__(self) -> Matrix:
        return self.apply(np.negative)

    def subtract(self, rhs: Matrix) -> None:
        """
        Subtract rhs from this matrix in place.

        Both operands must hold the same number of entries with the same
        column count. Two empty matrices always agree, whatever column
        count they were built with, and the call is a no-op.

        Raises:
            DimensionError: If the entry counts or column counts differ;
                the receiver is left unchanged
        """
        if not isinstance(rhs, Matrix):
            raise TypeError(f"subtract: operand must be a Matrix, got {type(rhs).__name__}")
        if self._data.size == 0 and rhs._data.size == 0:
            return
        if self._data.size != rhs._data.size or self._cols != rhs._cols:
            raise DimensionError(
                f"subtract: expected {self._data.size} entries with {self._cols} columns, "
                f"got {rhs._data.size} entries with {rhs._cols} columns",
                operation='subtract',
                expected=(self._data.size, self._cols),
                actual=(rhs._data.size, rhs._cols),
            )
        np.subtract(self._data, rhs._data, out=self._data)

    def mul(self, scalar: float) -> Matrix:
        """Multiply every entry by scalar in place and return self."""
        self._data *= check_scalar(scalar, 'scalar')
        return self

    # === Linear algebra ===

    def dot(self, rhs: Matrix, *, method: DotMethod = DEFAULT_DOT_METHOD) -> Matrix:
        """
        Matrix product of self (m x n) and rhs (n x p).

        Each result entry (row, k) is the sum over i of
        self[row, i] * rhs[i, k]. The default 'loop' method adds the
        products sequentially in index order in double precision, so the
        result carries ordinary floating-point rounding. 'blas' hands the
        product to numpy; shapes are identical, low-order bits may differ.

        Args:
            rhs: Right operand; its height must equal self.width()
            method: 'loop' or 'blas'

        Returns:
            New (m x p) matrix

        Raises:
            DimensionError: If self.width() != rhs.height()
            ValidationError: If method is unknown
        """
        if not isinstance(rhs, Matrix):
            raise TypeError(f"dot: operand must be a Matrix, got {type(rhs).__name__}")
        kernel = get_dot_kernel(method)
        height, inner = self.shape
        check_inner_dims(inner, rhs.height(), 'dot')
        width = rhs.width()
        return Matrix._wrap(kernel(self._data, rhs._data, height, inner, width), width)

    def transpose(self, *, block_size: int = DEFAULT_BLOCK_SIZE) -> Matrix:
        """
        Return the (width() x height()) transpose.

        The copy walks square tiles of block_size for locality; every input
        cell is written to exactly one output cell regardless of tile size.
        """
        block = check_positive_int(block_size, 'block_size')
        if self._data.size == 0:
            return self.copy()
        height, width = self.shape
        return Matrix._wrap(transpose_tiled(self._data, height, width, block), height)

    @property
    def T(self) -> Matrix:
        return self.transpose()

    # === Serialization ===

    def write(self, stream: TextIO) -> None:
        """Write this matrix to a text stream in the header-plus-rows format."""
        from pymatrix.dense.io import write_matrix
        write_matrix(self, stream)

    @classmethod
    def read(cls, stream: TextIO) -> Matrix:
        """Read the next matrix from a text stream, leaving the rest unread."""
        from pymatrix.dense.io import read_matrix
        return read_matrix(stream, cls=cls)

    def dumps(self) -> str:
        from pymatrix.dense.io import dumps
        return dumps(self)

    @classmethod
    def loads(cls, text: str) -> Matrix:
        from pymatrix.dense.io import loads
        return loads(text, cls=cls)

    def __str__(self) -> str:
        return self.dumps()

    def __repr__(self) -> str:
        height, width = self.shape
        return f"Matrix(rows={height}, cols={width})"
