"""
Fixed-width histograms for scoring detected photons.
"""

import numpy as np
from typing import Optional


class Histogram:
    """
    Counts how often values fall into equal-width bins on [low, high].

    Values outside the range are ignored. The upper edge high belongs to
    the last bin.

    Usage:
        hist = Histogram(100, 0.0, 700.0)
        hist.fill(661.7)
        centers, counts = hist.bin_centers, hist.bin_contents
    """

    def __init__(self, n_bins: int, low: float, high: float):
        """
        Initialize empty histogram.

        Parameters:
            n_bins: Number of bins (>= 1)
            low: Lower edge of the first bin
            high: Upper edge of the last bin
        """
        if n_bins < 1:
            raise ValueError(f"Need at least one bin, got {n_bins}")
        if not high > low:
            raise ValueError(f"Empty histogram range [{low}, {high}]")

        self.low = float(low)
        self.high = float(high)
        self.edges = np.linspace(self.low, self.high, int(n_bins) + 1)
        self.weights = np.zeros(int(n_bins), dtype=np.int64)

    @property
    def range(self):
        return (self.low, self.high)

    @property
    def num_bins(self) -> int:
        return len(self.weights)

    @property
    def bin_width(self) -> float:
        return (self.high - self.low) / self.num_bins

    @property
    def bin_edges(self) -> np.ndarray:
        return self.edges

    @property
    def bin_low_edges(self) -> np.ndarray:
        return self.edges[:-1]

    @property
    def bin_high_edges(self) -> np.ndarray:
        return self.edges[1:]

    @property
    def bin_centers(self) -> np.ndarray:
        return (self.edges[:-1] + self.edges[1:]) / 2.0

    @property
    def bin_contents(self) -> np.ndarray:
        return self.weights

    @property
    def total(self) -> int:
        """Number of entries inside the range."""
        return int(np.sum(self.weights))

    def find_bin(self, x: float) -> Optional[int]:
        """Index of the bin containing x, None if x is out of range."""
        if not (self.low <= x <= self.high):
            return None
        index = int(np.searchsorted(self.edges, x, side='right')) - 1
        return min(index, self.num_bins - 1)

    def fill(self, x: float):
        """Increase the bin at x by one."""
        self.fill_by(x, 1)

    def fill_by(self, x: float, weight: int):
        """Increase the bin at x by weight (no-op outside the range)."""
        index = self.find_bin(x)
        if index is not None:
            self.weights[index] += weight

    def normalized(self) -> np.ndarray:
        """Bin contents as fractions of all entries (zeros if empty)."""
        total = self.total
        if total == 0:
            return np.zeros(self.num_bins)
        return self.weights / total

    def reset(self):
        self.weights[:] = 0

    def __repr__(self) -> str:
        return (f"Histogram(n_bins={self.num_bins}, range=[{self.low:.4g}, {self.high:.4g}], "
                f"entries={self.total})")
