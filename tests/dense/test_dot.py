"""
Tests for Matrix.dot: shape law, correctness against a reference triple
loop, summation order, dimension checks, and the 'blas' method.
"""

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pymatrix import Matrix, DimensionError, ValidationError
from pymatrix.dense import _kernels


def reference_dot(a, b):
    """Naive triple loop over nested lists."""
    n, m, p = len(a), len(b), len(b[0])
    out = [[0.0] * p for _ in range(n)]
    for i in range(n):
        for j in range(p):
            total = 0.0
            for k in range(m):
                total += a[i][k] * b[k][j]
            out[i][j] = total
    return out


# ═══════════════════════════════════════════════════════════════════════
# Shape and correctness
# ═══════════════════════════════════════════════════════════════════════


class TestDot:

    def test_identity(self, square):
        assert square.dot(Matrix.identity(2)) == square

    def test_identity_on_left(self, square):
        assert Matrix.identity(2).dot(square) == square

    def test_known_product(self):
        a = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
        b = Matrix.from_rows([[7, 8], [9, 10], [11, 12]])
        assert a.dot(b).tolist() == [[58, 64], [139, 154]]

    @pytest.mark.parametrize("m,n,p", [(2, 3, 2), (1, 4, 1), (4, 1, 3), (3, 3, 3), (5, 2, 7)])
    def test_shape_law(self, rng, m, n, p):
        a = Matrix.from_numpy(rng.standard_normal((m, n)))
        b = Matrix.from_numpy(rng.standard_normal((n, p)))
        assert a.dot(b).shape == (m, p)

    def test_matches_reference_loop_exactly(self, rng):
        """Sequential accumulation in index order gives bit-identical results."""
        for _ in range(10):
            a = rng.standard_normal((2, 3))
            b = rng.standard_normal((3, 2))
            result = Matrix.from_numpy(a).dot(Matrix.from_numpy(b))
            assert result.tolist() == reference_dot(a.tolist(), b.tolist())

    def test_sequential_summation_order(self):
        """(1e16 + 1) + -1e16 loses the 1; a different order would keep it."""
        a = Matrix.from_rows([[1e16, 1.0, -1e16]])
        b = Matrix.from_rows([[1.0], [1.0], [1.0]])
        assert a.dot(b)[0, 0] == 0.0

    def test_operands_unchanged(self, square):
        square.dot(square)
        assert square.tolist() == [[1, 2], [3, 4]]

    def test_outer_product(self):
        col = Matrix.from_rows([[1], [2]])
        row = Matrix.from_rows([[3, 4, 5]])
        assert col.dot(row).tolist() == [[3, 4, 5], [6, 8, 10]]

    def test_empty_product(self):
        assert Matrix().dot(Matrix()).shape == (0, 0)


# ═══════════════════════════════════════════════════════════════════════
# Dimension checks
# ═══════════════════════════════════════════════════════════════════════


class TestDotMismatch:

    def test_inner_mismatch_raises(self):
        a = Matrix(2, 3, 1.0)
        b = Matrix(2, 2, 1.0)
        with pytest.raises(DimensionError) as exc_info:
            a.dot(b)
        assert exc_info.value.operation == "dot"
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2

    def test_matmul_operator_raises(self):
        with pytest.raises(DimensionError):
            Matrix(2, 3) @ Matrix(2, 2)

    def test_empty_rhs_against_nonempty_lhs(self):
        with pytest.raises(DimensionError):
            Matrix(2, 3).dot(Matrix(3, 0))

    def test_non_matrix_rhs(self, square):
        with pytest.raises(TypeError):
            square.dot(np.eye(2))

    def test_unknown_method(self, square):
        with pytest.raises(ValidationError, match="Unknown dot method"):
            square.dot(square, method="strassen")

    def test_unknown_method_lists_choices(self, square):
        with pytest.raises(ValidationError, match=r"\['blas', 'loop'\]"):
            square.dot(square, method="")


# ═══════════════════════════════════════════════════════════════════════
# 'blas' method and slow-path warning
# ═══════════════════════════════════════════════════════════════════════


class TestDotMethods:

    def test_method_names(self):
        assert _kernels.DOT_METHODS == {"loop", "blas"}

    @pytest.mark.parametrize("method", sorted(_kernels.DOT_METHODS))
    def test_every_method_dispatches(self, method, square):
        assert square.dot(Matrix.identity(2), method=method) == square

    @pytest.mark.parametrize("method", sorted(_kernels.DOT_METHODS))
    def test_get_dot_kernel(self, method):
        assert callable(_kernels.get_dot_kernel(method))

    def test_blas_agrees_with_loop(self, rng):
        a = Matrix.from_numpy(rng.standard_normal((6, 9)))
        b = Matrix.from_numpy(rng.standard_normal((9, 4)))
        loop = a.dot(b, method="loop")
        blas = a.dot(b, method="blas")
        assert blas.shape == loop.shape
        assert blas.allclose(loop)

    def test_blas_matches_numpy(self, rng):
        a = rng.standard_normal((3, 5))
        b = rng.standard_normal((5, 2))
        result = Matrix.from_numpy(a).dot(Matrix.from_numpy(b), method="blas")
        assert_allclose(result.to_numpy(), a @ b, rtol=1e-12)

    def test_blas_empty(self):
        assert Matrix().dot(Matrix(), method="blas").shape == (0, 0)

    def test_blas_mismatch_raises(self):
        with pytest.raises(DimensionError):
            Matrix(2, 3).dot(Matrix(2, 2), method="blas")

    def test_loop_warns_above_threshold(self, monkeypatch, square):
        monkeypatch.setattr(_kernels, "LOOP_DOT_WARN_THRESHOLD", 4)
        with pytest.warns(RuntimeWarning, match="method='blas'"):
            square.dot(square)

    def test_loop_silent_below_threshold(self, square):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            square.dot(square)
