"""
Lookup-table memoization for pure functions.

Grid sweeps often evaluate expensive integrands at repeated arguments (the
same coordinates across several integrations, or a factor of the integrand
that only depends on one axis). ``memoize`` puts such a function behind a
table keyed by its argument tuple.
"""

import functools
import logging
from collections import namedtuple
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)

CacheInfo = namedtuple("CacheInfo", ["hits", "misses", "maxsize", "currsize"])

_KWARGS_MARK = object()


class Memoizer:
    """
    Callable wrapper that stores results of a pure function.

    Results are keyed by the positional argument tuple; keyword arguments are
    appended to the key in sorted order. With ``maxsize=0`` the table grows
    without bound. Once a bounded table is full, results for new arguments
    are computed and returned but not stored, and existing entries stay.

    Attributes:
        func: The wrapped function
        maxsize: Maximum number of stored results, 0 for unbounded
        hits: Number of calls answered from the table
        misses: Number of calls that invoked ``func``
    """

    def __init__(self, func: Callable, maxsize: int = 0):
        """
        Wrap a function.

        Args:
            func: Pure function with hashable arguments
            maxsize: Maximum number of stored results, 0 for unbounded
        """
        if maxsize < 0:
            raise ValueError(f"maxsize must be non-negative, got {maxsize}")

        self.func = func
        self.maxsize = maxsize
        self._table: Dict[Hashable, Any] = {}
        self.hits = 0
        self.misses = 0
        functools.update_wrapper(self, func)

    @staticmethod
    def _make_key(args: tuple, kwargs: dict) -> Hashable:
        if not kwargs:
            return args
        return args + (_KWARGS_MARK,) + tuple(sorted(kwargs.items()))

    def __call__(self, *args, **kwargs):
        key = self._make_key(args, kwargs)
        if key in self._table:
            self.hits += 1
            return self._table[key]

        self.misses += 1
        result = self.func(*args, **kwargs)
        if not self.maxsize or len(self._table) < self.maxsize:
            self._table[key] = result
        return result

    def __get__(self, obj, objtype=None):
        # Bound methods share one table, with the instance as first key element
        if obj is None:
            return self
        return functools.partial(self, obj)

    def cache_info(self) -> CacheInfo:
        return CacheInfo(self.hits, self.misses, self.maxsize, len(self._table))

    def cache_clear(self):
        """Drop all stored results and reset the statistics."""
        logger.debug("Clearing %d memoized results of %s",
                     len(self._table), getattr(self.func, "__name__", self.func))
        self._table.clear()
        self.hits = 0
        self.misses = 0


def memoize(func: Optional[Callable] = None, *, maxsize: int = 0):
    """
    Return a memoizing wrapper of ``func``.

    Works as a plain call, ``memoize(f)``, and as a decorator with or
    without arguments, ``@memoize`` or ``@memoize(maxsize=1000)``.

    Args:
        func: Pure function to wrap
        maxsize: Maximum number of stored results, 0 for unbounded

    Returns:
        A ``Memoizer``, or a decorator producing one when ``func`` is omitted
    """
    if func is None:
        return functools.partial(Memoizer, maxsize=maxsize)
    return Memoizer(func, maxsize=maxsize)
