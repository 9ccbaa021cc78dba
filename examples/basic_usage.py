#!/usr/bin/env python3
"""
Basic usage examples for the Grid Summation Library.

This script integrates a few functions over rectangular grids and compares
compensated and naive summation.
"""

import math

import numpy as np
import torch

from gridsum import (
    enable_console_logging,
    grid_mean,
    integrate,
    integrate_batched,
    memoize,
    naive_grid_sum,
)


def demonstrate_one_dimension():
    """Riemann sum of f(x) = x over [0, 4]."""
    print("=" * 60)
    print("DEMONSTRATION: 1-d Riemann Sum")
    print("=" * 60)

    n = 10000
    result = integrate(lambda x: x[0], [0.0], [4.0], [n])
    increment = 4.0 / n

    print(f"Grid points:          {n}")
    print(f"Weighted Kahan sum:   {result:.12f}")
    print(f"Analytic integral:    {8.0:.12f}")
    print(f"Left-sum bias:        {4.0 * increment / 2:.2e}")
    print()


def demonstrate_two_dimensions():
    """sin(x0) * x1 over [0, 4] x [0, 9], point-wise and batched."""
    print("=" * 60)
    print("DEMONSTRATION: 2-d Riemann Sum")
    print("=" * 60)

    mins, maxs = [0.0, 0.0], [4.0, 9.0]

    pointwise = integrate(lambda x: math.sin(x[0]) * x[1], mins, maxs, [300, 300])
    batched = integrate_batched(lambda x: torch.sin(x[..., 0]) * x[..., 1],
                                mins, maxs, [10000, 10000])
    analytic = (1.0 - math.cos(4.0)) * 81.0 / 2.0

    print(f"Point-wise, 300 x 300:     {pointwise:.10f}")
    print(f"Batched, 10000 x 10000:    {batched:.10f}")
    print(f"Analytic integral:         {analytic:.10f}")
    print()


def demonstrate_precision():
    """Compensated versus naive summation in single precision."""
    print("=" * 60)
    print("DEMONSTRATION: Compensation in float32")
    print("=" * 60)

    n = 100000
    term = np.float32(1.0 / n)
    reference = float(term) * n

    naive = np.float32(0.0)
    for _ in range(n):
        naive = np.float32(naive + term)

    compensated = integrate(lambda x: 1.0, [0.0], [1.0], [n], dtype=torch.float32)

    print(f"Reference:      {reference:.10f}")
    print(f"Naive float32:  {float(naive):.10f}  error {abs(float(naive) - reference):.2e}")
    print(f"Kahan float32:  {compensated:.10f}  error {abs(compensated - reference):.2e}")
    print(f"Naive float64:  {naive_grid_sum(lambda x: 1.0, [0.0], [1.0], [n]):.10f}")
    print()


def demonstrate_complex_and_memoization():
    """Complex integrand cached across repeated sweeps."""
    print("=" * 60)
    print("DEMONSTRATION: Complex Integrand with Memoization")
    print("=" * 60)

    @memoize
    def phase(x):
        return complex(math.cos(x[0]), math.sin(x[0])) * math.exp(-x[1])

    args = ([0.0, 0.0], [math.pi, 2.0], [200, 100])
    first = integrate(phase, *args, dtype=torch.complex128)
    second = integrate(phase, *args, dtype=torch.complex128)

    print(f"Integral:        {first:.10f}")
    print(f"Repeated sweep:  {second:.10f}")
    print(f"Cache:           {phase.cache_info()}")
    print(f"Grid mean:       {grid_mean(phase, *args):.10f}")
    print()


if __name__ == "__main__":
    enable_console_logging(level="INFO")
    demonstrate_one_dimension()
    demonstrate_two_dimensions()
    demonstrate_precision()
    demonstrate_complex_and_memoization()
