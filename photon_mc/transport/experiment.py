"""
Experiment interface consumed by the transport engine.

An experiment describes everything the engine needs to know about a
setup: where photons come from, which material sits where, how far a
photon flies between interactions and what happens when it interacts.
The engine itself is written once against this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from photon_mc.core.geometry import Point
from photon_mc.core.rng import RandomSource
from photon_mc.core.source import Source


class Material(Enum):
    AIR = "air"
    ABSORBER = "absorber"
    DETECTOR = "detector"


class Event(Enum):
    NOTHING = "nothing"
    COHERENT_SCATTER = "coherent_scatter"
    INCOHERENT_SCATTER = "incoherent_scatter"
    ABSORBED = "absorbed"


class FreePath:
    """Law for the distance to the next interaction."""

    def draw(self, rng) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class Fixed(FreePath):
    """
    Deterministic step length [cm].

    A length of 0 means "interact here without moving", e.g. to resolve
    absorption in a detector immediately.
    """
    length: float

    def __post_init__(self):
        if not self.length >= 0.0:
            raise ValueError(f"Fixed free path must be >= 0, got {self.length}")

    def draw(self, rng) -> float:
        return self.length


@dataclass(frozen=True)
class Exponential(FreePath):
    """Exponentially distributed step length with the given mean [cm]."""
    mean: float

    def __post_init__(self):
        if not self.mean > 0.0:
            raise ValueError(f"Mean free path must be positive, got {self.mean}")

    def draw(self, rng) -> float:
        return rng.exponential(self.mean)


class Experiment(ABC):
    """
    Interface of a transport setup.

    Subclasses hold their geometry, cross-sections and tables; they must
    not change them while photons are transported. All random decisions
    draw from self.rng.
    """

    def __init__(self, rng: RandomSource = None):
        """
        Parameters:
            rng: RandomSource shared by the engine and this experiment
                (a fresh unseeded one if None)
        """
        self.rng = rng if rng is not None else RandomSource()

    @abstractmethod
    def source(self) -> Source:
        """Photon source."""

    @abstractmethod
    def x_start(self) -> float:
        """
        Entrance plane of the experiment [cm].

        Photons are moved onto it after emission; photons that cannot
        reach it, or that later fall back behind it, are lost.
        """

    @abstractmethod
    def material_at(self, location: Point) -> Material:
        """Material at a location."""

    @abstractmethod
    def free_path_law(self, material: Material, energy_keV: float) -> FreePath:
        """Distribution of the next step length in a material."""

    @abstractmethod
    def choose_event(self, material: Material, energy_keV: float) -> Event:
        """Draw the interaction at the end of a step."""

    @abstractmethod
    def coherent_scatter(self, material: Material, energy_keV: float) -> float:
        """Draw a signed coherent scattering angle [radians]."""

    @abstractmethod
    def incoherent_scatter(self, material: Material, energy_keV: float) -> Tuple[float, float]:
        """Draw a signed incoherent scattering angle [radians] and the new energy [keV]."""
