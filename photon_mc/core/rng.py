"""
Random number source for all stochastic operations.

Every sampler, source and experiment receives one of these explicitly
instead of reaching for a global generator, so a whole simulation can be
reproduced from a single seed.
"""

import numpy as np
from typing import Optional


class RandomSource:
    """
    Thin wrapper around numpy's Generator.

    Usage:
        rng = RandomSource(seed=42)
        mu = rng.uniform(-1.0, 1.0)
        path = rng.exponential(2.5)
    """

    def __init__(self, seed: Optional[int] = None,
                 generator: Optional[np.random.Generator] = None):
        """
        Initialize random source.

        Parameters:
            seed: Seed for a new PCG64 generator (ignored if generator given)
            generator: Existing numpy Generator to draw from
        """
        self.seed = seed
        self.generator = generator if generator is not None else np.random.default_rng(seed)

    def uniform(self, low: float = 0.0, high: float = 1.0, size: Optional[int] = None):
        """
        Draw from the uniform distribution on [low, high).

        Returns a float, or an array of floats if size is given.
        """
        if size is None:
            return float(self.generator.uniform(low, high))
        return self.generator.uniform(low, high, size)

    def exponential(self, mean: float) -> float:
        """Draw from the exponential distribution with the given mean."""
        return float(self.generator.exponential(mean))

    def normal(self, mean: float = 0.0, sigma: float = 1.0) -> float:
        """Draw from the normal distribution."""
        return float(self.generator.normal(mean, sigma))

    def boolean(self) -> bool:
        """Fair coin flip."""
        return bool(self.generator.integers(0, 2))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"
