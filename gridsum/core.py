"""
Core building blocks for weighted grid summation.

This module contains the grid description (per-axis bounds, step counts and
increments) and the accumulators that fold integrand values into a running
total: a weighted Kahan accumulator for integration and a plain mean
accumulator for grid averages.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
import torch

from .exceptions import InvalidGridError

logger = logging.getLogger(__name__)

DEFAULT_DTYPE = torch.float64

Number = Union[int, float, complex]
ArrayLike = Union[Sequence[Number], np.ndarray, torch.Tensor]


def real_dtype(dtype: torch.dtype) -> torch.dtype:
    """Floating point dtype used for grid coordinates of a given value dtype."""
    if dtype == torch.complex64:
        return torch.float32
    if dtype == torch.complex128:
        return torch.float64
    return dtype


def _invalid(message: str) -> InvalidGridError:
    logger.warning("Rejecting grid: %s", message)
    return InvalidGridError(message)


def _as_list(values: ArrayLike, name: str) -> list:
    """Flatten caller input into a list of Python scalars."""
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    try:
        array = np.asarray(values)
    except ValueError as exc:
        raise _invalid(f"{name} must be one-dimensional, got ragged input") from exc
    if array.ndim != 1:
        raise _invalid(f"{name} must be one-dimensional, got shape {array.shape}")
    return array.tolist()


@dataclass(frozen=True)
class GridAxis:
    """
    One axis of a rectangular grid.

    The axis is sampled at ``min + n * increment`` for ``n`` in
    ``range(count)``, with ``increment = (max - min) / count``. The upper bound
    itself is never sampled.
    """

    min: float
    max: float
    count: int

    @property
    def increment(self) -> float:
        return (self.max - self.min) / self.count

    def coordinate(self, n: int) -> float:
        return self.min + n * self.increment


@dataclass(frozen=True)
class GridSpec:
    """
    Immutable D-dimensional rectangular grid.

    Axis 0 is the innermost axis of a sweep and axis ``dim - 1`` the
    outermost. Build instances with ``GridSpec.from_bounds`` so that the
    inputs are validated.
    """

    axes: Tuple[GridAxis, ...]

    @classmethod
    def from_bounds(cls, mins: ArrayLike, maxs: ArrayLike, counts: ArrayLike) -> "GridSpec":
        """
        Validate per-axis bounds and step counts and build a grid.

        Args:
            mins: Lower bound of every axis
            maxs: Upper bound of every axis
            counts: Number of sample points on every axis (positive integers)

        Returns:
            The grid

        Raises:
            InvalidGridError: If the inputs cannot describe a grid
        """
        mins = _as_list(mins, "mins")
        maxs = _as_list(maxs, "maxs")
        counts = _as_list(counts, "counts")

        if not (len(mins) == len(maxs) == len(counts)):
            raise _invalid(
                f"mins, maxs and counts differ in length: "
                f"{len(mins)}, {len(maxs)}, {len(counts)}"
            )
        if len(counts) == 0:
            raise _invalid("a grid needs at least one axis")

        axes = []
        for d, (lo, hi, n) in enumerate(zip(mins, maxs, counts)):
            if isinstance(n, bool) or not isinstance(n, numbers.Integral):
                raise _invalid(f"count of axis {d} must be an integer, got {n!r}")
            if n <= 0:
                raise _invalid(f"count of axis {d} must be positive, got {n}")
            if not isinstance(lo, numbers.Real) or not isinstance(hi, numbers.Real):
                raise _invalid(f"bounds of axis {d} must be real numbers, got {lo!r}, {hi!r}")
            if not (math.isfinite(lo) and math.isfinite(hi)):
                raise _invalid(f"bounds of axis {d} must be finite, got {lo!r}, {hi!r}")
            axes.append(GridAxis(float(lo), float(hi), int(n)))

        return cls(tuple(axes))

    @property
    def dim(self) -> int:
        return len(self.axes)

    @property
    def mins(self) -> Tuple[float, ...]:
        return tuple(axis.min for axis in self.axes)

    @property
    def maxs(self) -> Tuple[float, ...]:
        return tuple(axis.max for axis in self.axes)

    @property
    def counts(self) -> Tuple[int, ...]:
        return tuple(axis.count for axis in self.axes)

    @property
    def increments(self) -> Tuple[float, ...]:
        return tuple(axis.increment for axis in self.axes)

    @property
    def total_points(self) -> int:
        return math.prod(self.counts)

    @property
    def volume_element(self) -> float:
        """Product of all increments, multiplied from axis 0 outward."""
        volume = 1.0
        for increment in self.increments:
            volume *= increment
        return volume

    def coordinate(self, axis: int, n: int) -> float:
        return self.axes[axis].coordinate(n)

    def axis_coordinates(self, axis: int, dtype: torch.dtype = DEFAULT_DTYPE,
                         device=None) -> torch.Tensor:
        """
        All sample coordinates of one axis.

        Uses the same ``min + n * increment`` formula as ``coordinate``, in
        double precision, before casting to ``dtype``.

        Args:
            axis: Axis index
            dtype: Real floating point dtype of the result
            device: Device to place the tensor on

        Returns:
            Tensor of shape ``(count,)``
        """
        grid_axis = self.axes[axis]
        steps = torch.arange(grid_axis.count, dtype=torch.float64, device=device)
        return (steps * grid_axis.increment + grid_axis.min).to(dtype)


class WeightedKahanAccumulator:
    """
    Compensated accumulator for weighted sums.

    Folds ``value * weight`` into a running sum with Kahan's compensated
    summation, so the rounding error of the result stays bounded instead of
    growing with the number of terms. ``value`` may be any type that supports
    addition, subtraction and multiplication by the weight; it is converted to
    a tensor of the accumulator's dtype, which may be real or complex.

    Attributes:
        sum: The accumulated sum
        c: The compensation term tracking lost low-order bits
    """

    def __init__(self, shape=(), dtype: torch.dtype = DEFAULT_DTYPE, device=None):
        """
        Initialize accumulator.

        Args:
            shape: Shape of the accumulated tensor, one lane per element
            dtype: Data type for the sum and the compensation
            device: Device to place the tensors on
        """
        self.shape = tuple(shape)
        self.dtype = dtype
        self.device = device or torch.device('cpu')
        self.sum = torch.zeros(self.shape, dtype=dtype, device=self.device)
        self.c = torch.zeros(self.shape, dtype=dtype, device=self.device)

    def accumulate(self, value: Union[Number, torch.Tensor], weight: float):
        """
        Add ``value * weight`` with Kahan compensation.

        Args:
            value: Value to add, broadcastable to the accumulator shape
            weight: Scalar weight applied to the value
        """
        value = torch.as_tensor(value, dtype=self.dtype, device=self.device)

        y = value * weight - self.c
        t = self.sum + y
        self.c = (t - self.sum) - y
        self.sum = t

    def extract(self) -> torch.Tensor:
        """Current compensated sum. Does not change the accumulator."""
        return self.sum

    def reset(self):
        """Reset the accumulator to zero."""
        self.sum = torch.zeros(self.shape, dtype=self.dtype, device=self.device)
        self.c = torch.zeros(self.shape, dtype=self.dtype, device=self.device)


def weighted_kahan_add(total: Number, value: Number, weight: float,
                       c: Number = 0.0) -> Tuple[Number, Number]:
    """
    Single weighted Kahan step on plain numbers.

    Args:
        total: Running sum
        value: Value to add
        weight: Weight applied to the value
        c: Current compensation term

    Returns:
        Tuple of (new_total, new_compensation)
    """
    y = value * weight - c
    t = total + y
    new_c = (t - total) - y
    return t, new_c


class MeanAccumulator:
    """
    Running arithmetic mean of unweighted samples.

    No compensation is applied; this is the plain sum divided by the number
    of samples.
    """

    def __init__(self):
        self.total = 0.0
        self.count = 0

    def add(self, value: Number):
        self.total += value
        self.count += 1

    def mean(self) -> Number:
        """Mean of all samples so far, NaN if there are none."""
        if self.count == 0:
            return float('nan')
        return self.total / self.count

    def reset(self):
        self.total = 0.0
        self.count = 0
