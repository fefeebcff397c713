"""
Sampling from un-normalized densities.

RejectionSampler draws scattering cosines from any CrossSection using a
flat envelope at the cross-section's upper bound. choose_weighted picks
one of a few categories (e.g. interaction types) with probability
proportional to its weight.
"""

import numpy as np
from typing import Sequence, Tuple, TypeVar

from photon_mc.physics.cross_section import CrossSection

T = TypeVar("T")


class RejectionSampler:
    """
    Draws μ in [-1, 1) with density proportional to cross_section.eval(E, μ).

    Algorithm:
        M = cross_section.max(E)            (computed once)
        repeat:
            μ ~ U(-1, 1), u ~ U(0, M)
        until u < eval(E, μ)

    The expected number of proposals per sample is M divided by the mean
    of eval(E, ·) over [-1, 1]. The loop has no iteration cap; a density
    that is zero everywhere never returns.

    Usage:
        sampler = RejectionSampler(KleinNishinaCrossSection(), 661.7, rng)
        mu = sampler.sample()
        mus = sampler.samples(10000)
    """

    def __init__(self, cross_section: CrossSection, energy_keV: float, rng):
        """
        Initialize sampler.

        Parameters:
            cross_section: Density to sample from
            energy_keV: Photon energy [keV], fixed for this sampler
            rng: RandomSource
        """
        self.cross_section = cross_section
        self.energy = float(energy_keV)
        self.rng = rng
        self.bound = cross_section.max(self.energy)

        self.n_proposed = 0
        self.n_accepted = 0

    def sample(self) -> float:
        """Draw one μ."""
        while True:
            mu = self.rng.uniform(-1.0, 1.0)
            u = self.rng.uniform(0.0, self.bound)
            self.n_proposed += 1
            if u < self.cross_section.eval(self.energy, mu):
                self.n_accepted += 1
                return mu

    def samples(self, n: int) -> np.ndarray:
        """Draw n independent values of μ."""
        return np.array([self.sample() for _ in range(n)], dtype=np.float64)

    @property
    def efficiency(self) -> float:
        """Fraction of accepted proposals so far (0 before any sample)."""
        if self.n_proposed == 0:
            return 0.0
        return self.n_accepted / self.n_proposed

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.sample()

    def __repr__(self) -> str:
        return (f"RejectionSampler({self.cross_section!r}, E={self.energy:.1f} keV, "
                f"efficiency={self.efficiency:.3f})")


def choose_weighted(rng, items: Sequence[T], weights: Sequence[float]) -> T:
    """
    Pick one item with probability proportional to its weight.

    Draws u ~ U(0, Σw) and returns the first item whose cumulative
    weight exceeds u. O(len(items)).

    Parameters:
        rng: RandomSource
        items: Categories to choose from
        weights: Non-negative weights, same length as items

    Returns:
        The chosen item
    """
    if len(items) != len(weights) or len(items) == 0:
        raise ValueError(f"Need matching, non-empty items and weights "
                         f"(got {len(items)} and {len(weights)})")
    if any(w < 0.0 for w in weights):
        raise ValueError(f"Weights must be non-negative, got {list(weights)}")

    total = float(sum(weights))
    if not total > 0.0:
        raise ValueError("At least one weight must be positive")

    u = rng.uniform(0.0, total)
    cumulative = 0.0
    for item, weight in zip(items, weights):
        cumulative += weight
        if cumulative > u:
            return item

    # Round-off can leave u just above the last partial sum
    for item, weight in zip(reversed(items), reversed(weights)):
        if weight > 0.0:
            return item


def sample_scattering_angle(cross_section: CrossSection, energy_keV: float,
                            rng) -> Tuple[float, float]:
    """
    Sample a planar scattering angle.

    Draws μ from the cross-section, converts it to θ = arccos μ and flips
    the sign of θ with probability 1/2 (scattering to either side of the
    flight direction is equally likely in 2D).

    Returns:
        (angle, mu): signed angle [radians] and the sampled cosine
    """
    mu = RejectionSampler(cross_section, energy_keV, rng).sample()
    angle = float(np.arccos(mu))
    if rng.boolean():
        angle = -angle
    return angle, mu
