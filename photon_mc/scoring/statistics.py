"""
Online mean and variance (Welford's algorithm).

One pass, O(1) memory, numerically stable. Works with any quantity that
supports subtraction, addition, division by an int and multiplication
with itself: floats, NumPy arrays (element-wise statistics) or unit-
carrying types whose square is a different type.

References:
    - Welford, Technometrics 4, 419 (1962)
    - Knuth, TAOCP Vol. 2, 3rd ed., p. 232
"""

import numpy as np
from typing import Iterable, Optional


class Statistics:
    """
    Running count, mean and sum of squared deviations.

    Usage:
        stats = Statistics.from_samples([1.0, 2.0, 4.0])
        stats.mean()            # 2.333...
        stats.error_of_mean()   # sqrt(variance / n)
        stats.push(3.0)
    """

    def __init__(self, zero=0.0):
        """
        Initialize empty accumulator.

        Parameters:
            zero: Zero element of the quantity type (e.g. np.zeros(3) for
                per-component statistics of 3-vectors)
        """
        self._count = 0
        self._mean = zero
        self._sum_of_squares = zero * zero

    @classmethod
    def from_samples(cls, samples: Iterable, zero=0.0) -> "Statistics":
        """Build statistics from an iterable of samples."""
        stats = cls(zero)
        stats.extend(samples)
        return stats

    def push(self, x):
        """
        Add one sample.

        The second deviation is taken against the updated mean; this
        ordering is what keeps the update numerically stable.
        """
        self._count += 1
        delta = x - self._mean
        self._mean = self._mean + delta / self._count
        delta2 = x - self._mean
        self._sum_of_squares = self._sum_of_squares + delta * delta2

    def extend(self, samples: Iterable):
        """Add every sample of an iterable."""
        for x in samples:
            self.push(x)

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def mean(self):
        """Arithmetic mean (the zero element while empty)."""
        return self._mean

    def variance(self) -> Optional[object]:
        """Unbiased sample variance, None for fewer than 2 samples."""
        if self._count < 2:
            return None
        return self._sum_of_squares / (self._count - 1)

    def standard_deviation(self) -> Optional[object]:
        """Sample standard deviation, None for fewer than 2 samples."""
        variance = self.variance()
        if variance is None:
            return None
        return np.sqrt(variance)

    def error_of_mean(self) -> Optional[object]:
        """Standard error of the mean, None for fewer than 2 samples."""
        variance = self.variance()
        if variance is None:
            return None
        return np.sqrt(variance / self._count)

    def __str__(self) -> str:
        if self._count < 2:
            return f"n = {self._count}, mean = {self._mean}"
        return (f"n = {self._count}, mean = {self._mean} "
                f"± {self.error_of_mean()} (std = {self.standard_deviation()})")

    def __repr__(self) -> str:
        return f"Statistics(count={self._count}, mean={self._mean!r})"
