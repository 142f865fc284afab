"""
Index-arithmetic kernels over flat row-major buffers.

Every kernel takes the flat float64 buffer(s) plus explicit dimensions and
returns a freshly allocated flat buffer. Element (r, c) of a buffer with
``cols`` columns always lives at ``r * cols + c``.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Iterator

import numpy as np
from numpy.typing import NDArray

from pymatrix.core.config import LOOP_DOT_WARN_THRESHOLD
from pymatrix.core.exceptions import ValidationError

Buffer = NDArray[np.float64]
DotKernel = Callable[[Buffer, Buffer, int, int, int], Buffer]


def dot_loop(lhs: Buffer, rhs: Buffer, height: int, inner: int, width: int) -> Buffer:
    """
    Reference triple-loop product of (height x inner) and (inner x width).

    Each output entry is accumulated in double precision by plain
    sequential addition, i = 0 .. inner-1, with no compensated summation.
    """
    n_ops = height * inner * width
    if n_ops > LOOP_DOT_WARN_THRESHOLD:
        warnings.warn(
            f"dot(method='loop') on a {height}x{inner} by {inner}x{width} product "
            f"needs {n_ops} multiply-adds and will be slow; consider method='blas'",
            RuntimeWarning,
            stacklevel=3,
        )

    # Python floats are IEEE doubles, same arithmetic as float64 scalars
    a = lhs.tolist()
    b = rhs.tolist()
    out = [0.0] * (height * width)
    for row in range(height):
        base = row * inner
        for k in range(width):
            total = 0.0
            for i in range(inner):
                total += a[base + i] * b[i * width + k]
            out[row * width + k] = total
    return np.array(out, dtype=np.float64)


def dot_blas(lhs: Buffer, rhs: Buffer, height: int, inner: int, width: int) -> Buffer:
    """
    Product delegated to numpy's matmul.

    Same shape semantics as dot_loop; summation order is up to the BLAS
    library, so results may differ from dot_loop in the last bits.
    """
    product = np.matmul(lhs.reshape(height, inner), rhs.reshape(inner, width))
    return np.ascontiguousarray(product, dtype=np.float64).reshape(-1)


_DOT_KERNELS: dict[str, DotKernel] = {
    'loop': dot_loop,
    'blas': dot_blas,
}

DOT_METHODS = frozenset(_DOT_KERNELS)


def get_dot_kernel(method: str) -> DotKernel:
    """Select the dot kernel for a method name."""
    kernel = _DOT_KERNELS.get(method)
    if kernel is not None:
        return kernel
    raise ValidationError(
        f"Unknown dot method: {method!r}, expected one of {sorted(DOT_METHODS)}"
    )


def tile_ranges(n: int, block: int) -> Iterator[range]:
    """
    Split [0, n) into consecutive ranges of at most ``block`` indices.

    The ranges are contiguous and disjoint, and together cover every index
    exactly once; the last range absorbs the remainder.

    Examples:
        >>> [list(r) for r in tile_ranges(5, 2)]
        [[0, 1], [2, 3], [4]]
    """
    if block < 1:
        raise ValidationError(f"block: must be positive, got {block}")
    for start in range(0, n, block):
        yield range(start, min(start + block, n))


def transpose_tiled(src: Buffer, height: int, width: int, block: int) -> Buffer:
    """
    Transpose a (height x width) buffer into a (width x height) buffer.

    Walks block x block tiles so reads and writes both stay within a small
    window. Input (r, c) at r * width + c goes to output (c, r) at
    c * height + r.
    """
    values: list[Any] = src.tolist()
    out = [0.0] * (height * width)
    for rows in tile_ranges(height, block):
        for cols in tile_ranges(width, block):
            for r in rows:
                base = r * width
                for c in cols:
                    out[c * height + r] = values[base + c]
    return np.array(out, dtype=np.float64)
