"""
PHOTON_MC: 2D Photon Transport Monte Carlo

A Monte Carlo code for photon transport through piecewise-homogeneous
2D media, with a generic rejection sampler for scattering cross-sections
and online statistics for scoring and numerical integration.

Modules:
    core: Random source, geometry, photon state, sources
    physics: Tabulated data, cross-sections, rejection sampling
    transport: Experiment interface, transport engine, collimator setup
    scoring: Online statistics, histograms, Monte Carlo integration
    config: YAML configuration
"""

__version__ = "0.1.0"
__author__ = "William Comaskey"

from photon_mc.core.rng import RandomSource
from photon_mc.core.geometry import Point, Direction, WrongDirection
from photon_mc.core.particle import Photon
from photon_mc.physics.cross_section import CrossSection
from photon_mc.physics.sampling import RejectionSampler
from photon_mc.transport.engine import TransportEngine, simulate_one_photon
from photon_mc.scoring.statistics import Statistics
from photon_mc.scoring.integrate import integrate

__all__ = [
    "RandomSource",
    "Point",
    "Direction",
    "WrongDirection",
    "Photon",
    "CrossSection",
    "RejectionSampler",
    "TransportEngine",
    "simulate_one_photon",
    "Statistics",
    "integrate",
]
