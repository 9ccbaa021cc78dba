"""
Grid sweeps for weighted summation and averaging.

This module provides the integration entry points. ``integrate`` walks the
grid one point at a time, axis ``D-1`` outermost and axis 0 innermost, and
folds the integrand values into one compensated accumulator per axis.
``integrate_batched`` performs the same summation with the outer axes
vectorized, for integrands written against torch tensors.

Both compute the weighted Riemann sum

    sum over grid points x of f(x) * prod_d increment[d]

where the inner sum over axis 0 is weighted by ``increment[0]``, and every
outer axis ``k`` sums the finished inner blocks weighted by ``increment[k]``.
"""

import itertools
import logging
from typing import Callable, Iterator, Tuple, Union

import torch

from .core import (
    DEFAULT_DTYPE,
    ArrayLike,
    GridSpec,
    MeanAccumulator,
    Number,
    WeightedKahanAccumulator,
    real_dtype,
)
from .exceptions import IntegrandShapeError

logger = logging.getLogger(__name__)

Point = Tuple[float, ...]
Integrand = Callable[[Point], Union[Number, torch.Tensor]]
BatchedIntegrand = Callable[[torch.Tensor], Union[Number, torch.Tensor]]


def _check_callable(integrand):
    if not callable(integrand):
        raise TypeError(f"integrand must be callable, got {type(integrand).__name__}")


def grid_points(grid: GridSpec) -> Iterator[Point]:
    """
    Enumerate every grid point in sweep order.

    Axis ``dim - 1`` varies slowest and axis 0 fastest.

    Args:
        grid: Grid to enumerate

    Yields:
        Coordinate tuples of length ``grid.dim``
    """
    ranges = [range(count) for count in reversed(grid.counts)]
    for index in itertools.product(*ranges):
        yield tuple(grid.coordinate(axis, n) for axis, n in enumerate(reversed(index)))


def expand_axes(integrand: Integrand, grid: GridSpec,
                dtype: torch.dtype = DEFAULT_DTYPE, device=None) -> torch.Tensor:
    """
    Sweep all axes of ``grid`` and return the weighted compensated sum.

    Axis 0 evaluates the integrand and accumulates ``(f(x), increment[0])``.
    Every outer axis ``k`` sweeps the inner axes with a fresh accumulator for
    each of its coordinates and accumulates ``(inner_sum, increment[k])``.
    The integrand is called exactly ``grid.total_points`` times.

    Args:
        integrand: Pure function of a coordinate tuple
        grid: Grid to sweep
        dtype: Accumulation dtype, real or complex
        device: Device holding the accumulators

    Returns:
        Zero-dimensional tensor holding the weighted sum
    """
    point = list(grid.mins)

    def sweep(axis: int) -> torch.Tensor:
        acc = WeightedKahanAccumulator(dtype=dtype, device=device)
        increment = grid.increments[axis]

        for n in range(grid.counts[axis]):
            point[axis] = grid.coordinate(axis, n)
            if axis == 0:
                value = integrand(tuple(point))
            else:
                value = sweep(axis - 1)
            acc.accumulate(value, increment)

        return acc.extract()

    return sweep(grid.dim - 1)


def integrate(integrand: Integrand, mins: ArrayLike, maxs: ArrayLike, counts: ArrayLike,
              dtype: torch.dtype = DEFAULT_DTYPE, device=None) -> Number:
    """
    Weighted Riemann sum of ``integrand`` over a rectangular grid.

    Args:
        integrand: Pure function taking a tuple of D coordinates
        mins: Lower bound of every axis
        maxs: Upper bound of every axis
        counts: Number of sample points on every axis
        dtype: Accumulation dtype (use a complex dtype for complex integrands)
        device: Device holding the accumulators

    Returns:
        The sum as a Python float, or complex for complex dtypes

    Raises:
        InvalidGridError: If the bounds or counts do not describe a grid
    """
    _check_callable(integrand)
    grid = GridSpec.from_bounds(mins, maxs, counts)

    logger.debug("Integrating over %d-d grid %s (%d evaluations)",
                 grid.dim, grid.counts, grid.total_points)
    result = expand_axes(integrand, grid, dtype=dtype, device=device).item()
    logger.debug("Integration result: %r", result)

    return result


def _reduce_outer_axes(partial: torch.Tensor, grid: GridSpec,
                       dtype: torch.dtype, device) -> torch.Tensor:
    """Sum the leading dimension of ``partial`` once per remaining axis."""
    for axis in range(1, grid.dim):
        acc = WeightedKahanAccumulator(shape=partial.shape[1:], dtype=dtype, device=device)
        increment = grid.increments[axis]
        for n in range(grid.counts[axis]):
            acc.accumulate(partial[n], increment)
        partial = acc.extract()
    return partial


def integrate_batched(integrand: BatchedIntegrand, mins: ArrayLike, maxs: ArrayLike,
                      counts: ArrayLike, dtype: torch.dtype = DEFAULT_DTYPE,
                      device=None) -> Number:
    """
    Weighted Riemann sum with the outer axes evaluated as one batch.

    For every step along axis 0 the integrand receives a tensor of shape
    ``(counts[1], ..., counts[D-1], D)`` holding all grid points with that
    axis-0 coordinate, and returns a tensor of shape
    ``(counts[1], ..., counts[D-1])``, or a scalar. Each element of the
    batch goes through the same sequence of Kahan steps as in
    ``integrate``, so the two agree up to differences in how the integrand
    itself is evaluated.

    Args:
        integrand: Pure function of a batch of points
        mins: Lower bound of every axis
        maxs: Upper bound of every axis
        counts: Number of sample points on every axis
        dtype: Accumulation dtype, real or complex
        device: Device for the grid and accumulators

    Returns:
        The sum as a Python float, or complex for complex dtypes

    Raises:
        InvalidGridError: If the bounds or counts do not describe a grid
        IntegrandShapeError: If the integrand returns a tensor of the wrong shape
    """
    _check_callable(integrand)
    grid = GridSpec.from_bounds(mins, maxs, counts)
    coord_dtype = real_dtype(dtype)

    coords = [grid.axis_coordinates(axis, dtype=coord_dtype, device=device)
              for axis in range(grid.dim)]
    outer_shape = tuple(grid.counts[1:])

    if grid.dim > 1:
        mesh = torch.meshgrid(*coords[1:], indexing="ij")
        points = torch.stack((torch.zeros_like(mesh[0]),) + tuple(mesh), dim=-1)
    else:
        points = torch.zeros(1, dtype=coord_dtype, device=device)

    logger.debug("Integrating over %d-d grid %s in %d batches of %d points",
                 grid.dim, grid.counts, grid.counts[0], grid.total_points // grid.counts[0])

    acc = WeightedKahanAccumulator(shape=outer_shape, dtype=dtype, device=device)
    increment = grid.increments[0]

    for n in range(grid.counts[0]):
        points[..., 0] = coords[0][n]
        values = torch.as_tensor(integrand(points.clone()), dtype=dtype, device=device)
        if values.shape != outer_shape:
            if values.dim() != 0:
                raise IntegrandShapeError(
                    f"integrand returned shape {tuple(values.shape)}, expected {outer_shape}"
                )
            values = values.expand(outer_shape)
        acc.accumulate(values, increment)

    result = _reduce_outer_axes(acc.extract(), grid, dtype, device).item()
    logger.debug("Integration result: %r", result)

    return result


def grid_mean(integrand: Integrand, mins: ArrayLike, maxs: ArrayLike,
              counts: ArrayLike) -> Number:
    """
    Arithmetic mean of ``integrand`` over all grid points.

    No weighting and no compensation: the plain sum of the values divided by
    the number of points.

    Args:
        integrand: Pure function taking a tuple of D coordinates
        mins: Lower bound of every axis
        maxs: Upper bound of every axis
        counts: Number of sample points on every axis

    Returns:
        Mean of the integrand values
    """
    _check_callable(integrand)
    grid = GridSpec.from_bounds(mins, maxs, counts)

    logger.debug("Averaging over %d-d grid %s", grid.dim, grid.counts)
    acc = MeanAccumulator()
    for point in grid_points(grid):
        acc.add(integrand(point))

    return acc.mean()


def naive_grid_sum(integrand: Integrand, mins: ArrayLike, maxs: ArrayLike,
                   counts: ArrayLike) -> Number:
    """
    Uncompensated weighted sum, for comparison with ``integrate``.

    Every value is multiplied by the full volume element and added to a
    plain Python running total in sweep order.
    """
    _check_callable(integrand)
    grid = GridSpec.from_bounds(mins, maxs, counts)

    volume = grid.volume_element
    total = 0.0
    for point in grid_points(grid):
        total += integrand(point) * volume

    return total
