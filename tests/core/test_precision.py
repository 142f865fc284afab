"""
Tests for tolerance helpers in core/precision.py.
"""

import numpy as np

from pymatrix.core.precision import DEFAULT_ATOL, DEFAULT_RTOL, is_close


class TestIsClose:

    def test_identical(self):
        assert is_close(1.0, 1.0)

    def test_within_relative_tolerance(self):
        assert is_close(1.0 + 1e-13, 1.0)

    def test_outside_relative_tolerance(self):
        assert not is_close(1.0 + 1e-9, 1.0)

    def test_absolute_tolerance_near_zero(self):
        assert is_close(DEFAULT_ATOL / 2, 0.0)
        assert not is_close(DEFAULT_ATOL * 10, 0.0)

    def test_elementwise_on_arrays(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([1.0, 2.0 * (1 + DEFAULT_RTOL * 10), 3.0])
        assert is_close(a, b).tolist() == [True, False, True]

    def test_nan_never_close(self):
        assert not is_close(np.nan, np.nan)

    def test_custom_tolerances(self):
        assert is_close(1.1, 1.0, rtol=0.2, atol=0.0)
