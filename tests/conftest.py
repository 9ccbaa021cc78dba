#!/usr/bin/env python3
"""
Pytest configuration and fixtures for grid summation tests.

This file contains shared test fixtures, configuration, and utilities
used across the test suite.
"""

import logging
import math

import numpy as np
import pytest
import torch

from gridsum.logging_config import LOGGER_NAME, disable_logging


@pytest.fixture(params=[torch.float32, torch.float64])
def dtype(request):
    """Parameterized fixture for real accumulation dtypes."""
    return request.param


@pytest.fixture(params=[torch.complex64, torch.complex128])
def complex_dtype(request):
    """Parameterized fixture for complex accumulation dtypes."""
    return request.param


@pytest.fixture(params=["cpu"] + (["cuda"] if torch.cuda.is_available() else []))
def device(request):
    """Parameterized fixture for different devices."""
    return torch.device(request.param)


@pytest.fixture
def unit_square():
    """Bounds and counts of a small 2-d grid over [0, 1] x [0, 1]."""
    return [0.0, 0.0], [1.0, 1.0], [40, 30]


@pytest.fixture
def alternating_terms():
    """Terms of similar magnitude and alternating sign, hard for naive summation.

    The running sum grows by 0.1 per pair, so every addition of 1.1 rounds
    the same way within a binade and the naive error grows linearly.
    """
    n = 20000
    data = np.zeros(n, dtype=np.float32)
    data[::2] = 1.1
    data[1::2] = -1.0
    return data


class AccuracyChecker:
    """Utility class for checking numerical accuracy."""

    @staticmethod
    def relative_error(computed, reference) -> float:
        """Calculate relative error."""
        if reference == 0:
            return abs(computed)
        return abs(computed - reference) / abs(reference)

    def assert_close(self, computed, reference, max_relative_error):
        """Assert that relative error is within bounds."""
        error = self.relative_error(computed, reference)
        assert error <= max_relative_error, (
            f"Relative error {error} exceeds {max_relative_error}: "
            f"computed {computed}, reference {reference}"
        )

    @staticmethod
    def riemann_sum(f, mins, maxs, counts) -> float:
        """Weighted sum over a grid, summed exactly with math.fsum."""
        increments = [(hi - lo) / n for lo, hi, n in zip(mins, maxs, counts)]
        volume = math.prod(increments)
        axes = [[lo + k * inc for k in range(n)] for lo, inc, n in zip(mins, increments, counts)]
        values = [f(point) for point in _product(axes)]
        return math.fsum(values) * volume


def _product(axes):
    """Cartesian product of per-axis coordinates, axis 0 varying fastest."""
    points = [()]
    for coords in axes:
        points = [point + (x,) for x in coords for point in points]
    return points


@pytest.fixture
def accuracy_checker():
    """Fixture providing accuracy checking utilities."""
    return AccuracyChecker()


@pytest.fixture
def clean_logging():
    """Restore the silent logging default after a test."""
    yield logging.getLogger(LOGGER_NAME)
    disable_logging()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark tests that take long time as slow
        if "large" in item.name or "full_resolution" in item.name:
            item.add_marker(pytest.mark.slow)
