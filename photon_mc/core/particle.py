"""
Photon state for single-history transport.

A Photon is created by a source for one trial, mutated in place while it
is transported, and either discarded (lost) or handed back (detected).
Detected photons are stored in NumPy structured arrays for scoring and
export.
"""

import numpy as np
from typing import Optional

from photon_mc.core.geometry import Point, Direction, WrongDirection


# Record layout for detected photons
PHOTON_DTYPE = np.dtype([
    ('position', np.float64, 2),      # x, y [cm]
    ('direction', np.float64, 2),     # unit vector
    ('energy', np.float64),           # keV
])


class Photon:
    """Single photon: location, direction and energy."""

    def __init__(self, location: Point, direction: Direction, energy_keV: float):
        """
        Initialize a photon.

        Parameters:
            location: Starting point [cm]
            direction: Unit direction of flight
            energy_keV: Photon energy [keV], must be positive
        """
        if not energy_keV > 0.0:
            raise ValueError(f"Photon energy must be positive, got {energy_keV}")
        self.location = location
        self.direction = direction
        self._energy = float(energy_keV)

    @property
    def energy(self) -> float:
        """Photon energy [keV]."""
        return self._energy

    @energy.setter
    def energy(self, energy_keV: float):
        if not energy_keV > 0.0:
            raise ValueError(f"Photon energy must be positive, got {energy_keV}")
        self._energy = float(energy_keV)

    def step(self, length: float):
        """
        Move forward along the current direction.

        Parameters:
            length: Distance [cm], must be strictly positive

        Raises:
            WrongDirection: If length <= 0; the location is left untouched
        """
        if not length > 0.0:
            raise WrongDirection(f"Cannot step by non-positive length {length}")
        self.location.step(self.direction, length)

    def go_to_x(self, x: float):
        """
        Fly forward until the x-coordinate equals x.

        A photon already at x stays where it is.

        Raises:
            WrongDirection: If x lies behind the photon or the photon
                moves parallel to the line x = const
        """
        distance = x - self.location.x
        if distance == 0.0:
            return
        if self.direction.dx == 0.0:
            raise WrongDirection(f"Photon flying parallel to x = {x}")
        self.step(distance / self.direction.dx)

    def go_to_y(self, y: float):
        """Fly forward until the y-coordinate equals y (see go_to_x)."""
        distance = y - self.location.y
        if distance == 0.0:
            return
        if self.direction.dy == 0.0:
            raise WrongDirection(f"Photon flying parallel to y = {y}")
        self.step(distance / self.direction.dy)

    def to_structured_array(self) -> np.ndarray:
        """Convert to a 1-element PHOTON_DTYPE array."""
        record = np.zeros(1, dtype=PHOTON_DTYPE)
        record['position'][0] = self.location.to_tuple()
        record['direction'][0] = self.direction.to_tuple()
        record['energy'][0] = self._energy
        return record

    def __repr__(self) -> str:
        return (f"Photon({self.location!r}, {self.direction!r}, "
                f"E={self._energy:.2f} keV)")


class PhotonArray:
    """Growable store of detected photons (PHOTON_DTYPE records)."""

    def __init__(self, capacity: int = 1024):
        """
        Initialize empty store.

        Parameters:
            capacity: Initial number of preallocated records
        """
        self._records = np.zeros(max(int(capacity), 1), dtype=PHOTON_DTYPE)
        self.n_photons = 0

    def append(self, photon: Photon):
        """Add a photon, doubling the buffer when full."""
        if self.n_photons == len(self._records):
            grown = np.zeros(2 * len(self._records), dtype=PHOTON_DTYPE)
            grown[:self.n_photons] = self._records
            self._records = grown
        self._records[self.n_photons] = photon.to_structured_array()[0]
        self.n_photons += 1

    @property
    def photons(self) -> np.ndarray:
        """View of the filled records."""
        return self._records[:self.n_photons]

    def get_statistics(self, energy_window: Optional[tuple] = None) -> dict:
        """
        Summary of stored photons.

        Parameters:
            energy_window: Optional (low, high) keV window for the
                full-energy fraction
        """
        energies = self.photons['energy']
        stats = {
            'n_total': self.n_photons,
            'mean_energy': float(np.mean(energies)) if len(energies) > 0 else 0.0,
            'max_energy': float(np.max(energies)) if len(energies) > 0 else 0.0,
            'min_energy': float(np.min(energies)) if len(energies) > 0 else 0.0,
        }
        if energy_window is not None and len(energies) > 0:
            low, high = energy_window
            inside = (energies >= low) & (energies <= high)
            stats['window_fraction'] = float(np.mean(inside))
        return stats

    def __len__(self) -> int:
        return self.n_photons

    def __repr__(self) -> str:
        stats = self.get_statistics()
        return (f"PhotonArray(n={stats['n_total']}, "
                f"<E>={stats['mean_energy']:.1f} keV)")
