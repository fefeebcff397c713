"""Core module: Random source, geometry, photon state and sources."""

from photon_mc.core.rng import RandomSource
from photon_mc.core.geometry import Point, Direction, WrongDirection
from photon_mc.core.particle import Photon, PhotonArray
from photon_mc.core.source import Source, IsotropicSource, EastPointingSource

__all__ = [
    "RandomSource",
    "Point",
    "Direction",
    "WrongDirection",
    "Photon",
    "PhotonArray",
    "Source",
    "IsotropicSource",
    "EastPointingSource",
]
