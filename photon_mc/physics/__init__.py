"""Physics module: Tabulated data, cross-sections and sampling."""

from photon_mc.physics.function import TabulatedFunction, DomainError
from photon_mc.physics.cross_section import (
    CrossSection,
    CoherentCrossSection,
    IncoherentCrossSection,
    KleinNishinaCrossSection,
    klein_nishina,
    compton_scatter,
    momentum_transfer,
)
from photon_mc.physics.sampling import RejectionSampler, choose_weighted, sample_scattering_angle

__all__ = [
    "TabulatedFunction",
    "DomainError",
    "CrossSection",
    "CoherentCrossSection",
    "IncoherentCrossSection",
    "KleinNishinaCrossSection",
    "klein_nishina",
    "compton_scatter",
    "momentum_transfer",
    "RejectionSampler",
    "choose_weighted",
    "sample_scattering_angle",
]
