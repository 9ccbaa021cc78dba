"""
Test suite for the Grid Summation Library.

Test Structure:
- test_core.py: Tests for the grid description and accumulators
- test_algorithms.py: Tests for grid sweeps and integration entry points
- test_memoize.py: Tests for the memoization cache
- test_logging_config.py: Tests for the logging helpers
- conftest.py: Shared fixtures and configuration

Usage:
    # Run all tests
    pytest

    # Run tests with coverage
    pytest --cov=gridsum

    # Skip the full-resolution scenarios
    pytest -m "not slow"
"""
