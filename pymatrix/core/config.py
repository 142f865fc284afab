"""
Tuning defaults for pymatrix.

Module-level constants, each overridable per call through the keyword
argument of the same meaning.
"""

from typing import Literal

DotMethod = Literal['loop', 'blas']

# Reference sequential triple loop; 'blas' hands the product to numpy
DEFAULT_DOT_METHOD: DotMethod = 'loop'

# Edge length of the square tiles used by Matrix.transpose()
DEFAULT_BLOCK_SIZE: int = 32

# Multiply-adds above which the 'loop' dot method warns that it will be slow
LOOP_DOT_WARN_THRESHOLD: int = 50_000_000

__all__ = [
    'DotMethod',
    'DEFAULT_DOT_METHOD',
    'DEFAULT_BLOCK_SIZE',
    'LOOP_DOT_WARN_THRESHOLD',
]
