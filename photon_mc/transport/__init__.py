"""Transport module: Experiment interface, transport engine and setups."""

from photon_mc.transport.experiment import (
    Experiment,
    Material,
    Event,
    FreePath,
    Fixed,
    Exponential,
)
from photon_mc.transport.engine import (
    TransportEngine,
    PhotonStatus,
    NoDetectionError,
    propagate,
    simulate_one_photon,
)
from photon_mc.transport.collimator import CollimatorExperiment

__all__ = [
    "Experiment",
    "Material",
    "Event",
    "FreePath",
    "Fixed",
    "Exponential",
    "TransportEngine",
    "PhotonStatus",
    "NoDetectionError",
    "propagate",
    "simulate_one_photon",
    "CollimatorExperiment",
]
