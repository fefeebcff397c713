"""
Photon sources.

All sources are monoenergetic point sources; they differ only in the
angular distribution of emitted photons.
"""

from abc import ABC, abstractmethod
import numpy as np

from photon_mc.core.geometry import Point, Direction
from photon_mc.core.particle import Photon


class Source(ABC):
    """Common interface of all photon sources."""

    def __init__(self, location: Point, energy_keV: float):
        """
        Parameters:
            location: Emission point [cm]
            energy_keV: Energy of emitted photons [keV]
        """
        if not energy_keV > 0.0:
            raise ValueError(f"Source energy must be positive, got {energy_keV}")
        self.location = location
        self.energy = float(energy_keV)

    @abstractmethod
    def emit_direction(self, rng) -> Direction:
        """Draw the direction of a new photon."""

    def emit_photon(self, rng) -> Photon:
        """Emit a fresh photon at the source location."""
        return Photon(self.location.copy(), self.emit_direction(rng), self.energy)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r}, E={self.energy:.1f} keV)"


class IsotropicSource(Source):
    """Point source emitting into all directions."""

    def emit_direction(self, rng) -> Direction:
        return Direction.random(rng)


class EastPointingSource(Source):
    """
    Point source emitting only into the +x hemisphere.

    dy is uniform on [-1, 1) and dx = sqrt(1 - dy²) >= 0, so no photon
    leaves towards -x.
    """

    def emit_direction(self, rng) -> Direction:
        dy = rng.uniform(-1.0, 1.0)
        dx = np.sqrt(1.0 - dy * dy)
        return Direction(dx, dy)
