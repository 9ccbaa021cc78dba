"""
Grid Summation Library

Compensated weighted summation of real or complex functions over regular
D-dimensional rectangular grids, for Riemann-sum approximations of integrals
with very many sample points.

This library provides:
- Validated grid descriptions with per-axis increments
- A weighted Kahan accumulator for real and complex values
- Point-wise and batched (torch) grid integration
- Grid averaging and an uncompensated reference sum
- A lookup-table memoizer for expensive integrands
"""

import logging

from .core import (
    DEFAULT_DTYPE,
    GridAxis,
    GridSpec,
    MeanAccumulator,
    WeightedKahanAccumulator,
    weighted_kahan_add,
)
from .algorithms import (
    expand_axes,
    grid_mean,
    grid_points,
    integrate,
    integrate_batched,
    naive_grid_sum,
)
from .exceptions import GridsumError, IntegrandShapeError, InvalidGridError
from .logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    set_level,
)
from .memoize import Memoizer, memoize

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__author__ = "Grid Summation Contributors"

__all__ = [
    "DEFAULT_DTYPE",
    "GridAxis",
    "GridSpec",
    "WeightedKahanAccumulator",
    "MeanAccumulator",
    "weighted_kahan_add",
    "expand_axes",
    "integrate",
    "integrate_batched",
    "grid_mean",
    "grid_points",
    "naive_grid_sum",
    "Memoizer",
    "memoize",
    "GridsumError",
    "InvalidGridError",
    "IntegrandShapeError",
    "enable_console_logging",
    "disable_logging",
    "set_level",
    "configure_from_env",
]
