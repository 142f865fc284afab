"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pymatrix import Matrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def square():
    """The 2x2 matrix [[1, 2], [3, 4]]."""
    return Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]])


@pytest.fixture
def random_pair(rng):
    """Two random 3x4 matrices with the same shape."""
    a = Matrix.from_numpy(rng.standard_normal((3, 4)))
    b = Matrix.from_numpy(rng.standard_normal((3, 4)))
    return a, b
