"""
Monte Carlo integration of one-dimensional functions.

The integral of f over [a, b) is the mean of f(x)·(b - a) for uniform
x; Statistics gives both the estimate and its standard error.
"""

import numpy as np
from typing import Callable, Optional, Tuple

from photon_mc.core.rng import RandomSource
from photon_mc.scoring.statistics import Statistics

# Uniform draws are taken from the generator in blocks of this size
_CHUNK_SIZE = 65536


def _check_interval(interval: Tuple[float, float]) -> Tuple[float, float]:
    a, b = float(interval[0]), float(interval[1])
    if not b > a:
        raise ValueError(f"Empty integration interval [{a}, {b})")
    return a, b


class Integrator:
    """
    Endless stream of integral estimates f(x)·(b - a), x ~ U(a, b).

    Exposed so a caller can watch the estimate converge; for a one-shot
    result use integrate().

    Usage:
        integrator = Integrator(np.sin, (0.0, np.pi), rng)
        stats = Statistics()
        for _ in range(1000):
            stats.push(integrator.sample())
    """

    def __init__(self, f: Callable[[float], float], interval: Tuple[float, float], rng):
        self.f = f
        self.low, self.high = _check_interval(interval)
        self.width = self.high - self.low
        self.rng = rng

    def sample(self) -> float:
        x = self.rng.uniform(self.low, self.high)
        return self.f(x) * self.width

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.sample()


def integrate(f: Callable[[float], float], interval: Tuple[float, float],
              sample_size: int, rng: Optional[RandomSource] = None) -> Statistics:
    """
    Integrate f over [a, b) by Monte Carlo.

    Parameters:
        f: Scalar function of one float
        interval: (a, b) with a < b
        sample_size: Number of function evaluations
        rng: RandomSource (a fresh unseeded one if None)

    Returns:
        Statistics whose mean() estimates the integral and whose
        error_of_mean() estimates its statistical uncertainty
    """
    a, b = _check_interval(interval)
    if sample_size < 0:
        raise ValueError(f"sample_size must be non-negative, got {sample_size}")
    if rng is None:
        rng = RandomSource()

    width = b - a
    stats = Statistics()
    remaining = int(sample_size)
    while remaining > 0:
        n = min(remaining, _CHUNK_SIZE)
        for x in rng.uniform(a, b, size=n):
            stats.push(f(float(x)) * width)
        remaining -= n
    return stats


def hit_or_miss_circle(sample_size: int, rng: Optional[RandomSource] = None) -> Statistics:
    """
    Estimate π by throwing points into the unit square.

    Each point scores 4 if it lies inside the quarter circle x² + y² < 1
    and 0 otherwise.

    Parameters:
        sample_size: Number of points
        rng: RandomSource (a fresh unseeded one if None)

    Returns:
        Statistics of the scores; mean() estimates π
    """
    if sample_size < 0:
        raise ValueError(f"sample_size must be non-negative, got {sample_size}")
    if rng is None:
        rng = RandomSource()

    stats = Statistics()
    remaining = int(sample_size)
    while remaining > 0:
        n = min(remaining, _CHUNK_SIZE)
        x = rng.uniform(0.0, 1.0, size=n)
        y = rng.uniform(0.0, 1.0, size=n)
        scores = np.where(x * x + y * y < 1.0, 4.0, 0.0)
        stats.extend(float(s) for s in scores)
        remaining -= n
    return stats


# ============================================================================
# Example Usage
# ============================================================================

if __name__ == "__main__":
    sample_size = 1_000_000
    rng = RandomSource(seed=1)

    print("\n" + "="*70)
    print("Monte Carlo Estimates of π")
    print("="*70)

    stats = integrate(lambda x: 4.0 * np.sqrt(1.0 - x * x), (0.0, 1.0), sample_size, rng)
    print(f"\nIntegration method:\n  {stats}")
    print(f"  Deviation: {abs(stats.mean() - np.pi) / stats.error_of_mean():.2f} σ")

    stats = hit_or_miss_circle(sample_size, rng)
    print(f"\nHit-or-miss method:\n  {stats}")
    print(f"  Deviation: {abs(stats.mean() - np.pi) / stats.error_of_mean():.2f} σ")
    print("\n" + "="*70 + "\n")
