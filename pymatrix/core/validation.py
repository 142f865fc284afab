"""
Input validation utilities for pymatrix.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating ragged, mixed or non-numeric
    data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating ragged, mixed or non-numeric data"
        )

    if result.dtype == np.bool_ or not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex values are not supported")

    return result.astype(np.float64)


def check_2d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 2-dimensional.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not 2D
    """
    if array.ndim != 2:
        raise DimensionError(
            f"{name}: expected 2D array, got {array.ndim}D with shape {array.shape}",
            expected=2,
            actual=array.ndim,
        )


def check_dimension(value: Any, name: str) -> int:
    """
    Verify a row/column count is a non-negative integer.

    Args:
        value: Count to check
        name: Parameter name for error messages

    Returns:
        The count as a plain int

    Raises:
        ValidationError: If value is not a non-negative integer
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected a non-negative integer, got {type(value).__name__} {value!r}"
        )
    if value < 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")
    return int(value)


def check_scalar(value: Any, name: str) -> float:
    """
    Verify value is a real number (bools rejected).

    Raises:
        ValidationError: If value is not a real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real number, got {type(value).__name__} {value!r}"
        )
    return float(value)


def check_positive_int(value: Any, name: str) -> int:
    """Verify value is an integer >= 1."""
    count = check_dimension(value, name)
    if count == 0:
        raise ValidationError(f"{name}: must be positive, got 0")
    return count


def check_same_shape(
    height: int,
    cols: int,
    other_height: int,
    other_cols: int,
    operation: str,
    *,
    empty: bool = False,
) -> None:
    """
    Verify two matrices can be combined entry by entry.

    Heights are always compared. Column counts are compared only when the
    receiver is non-empty, since an empty receiver short-circuits the
    operation.

    Args:
        height, cols: Receiver height and remembered column count
        other_height, other_cols: Operand height and remembered column count
        operation: Operation name for error messages
        empty: Whether the receiver holds no entries

    Raises:
        DimensionError: If the shapes differ
    """
    if height != other_height:
        raise DimensionError(
            f"{operation}: row count mismatch, expected {height} rows, got {other_height}",
            operation=operation,
            expected=height,
            actual=other_height,
        )
    if not empty and cols != other_cols:
        raise DimensionError(
            f"{operation}: column count mismatch, expected {cols} columns, got {other_cols}",
            operation=operation,
            expected=cols,
            actual=other_cols,
        )


def check_inner_dims(width: int, other_height: int, operation: str) -> None:
    """
    Verify the inner dimensions of a matrix product agree.

    Raises:
        DimensionError: If receiver width differs from operand height
    """
    if width != other_height:
        raise DimensionError(
            f"{operation}: inner dimensions differ, left operand has width {width} "
            f"but right operand has height {other_height}",
            operation=operation,
            expected=width,
            actual=other_height,
        )
