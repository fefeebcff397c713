"""
Differential scattering cross-sections for photons.

Implements coherent (Rayleigh) and incoherent (Compton) scattering off
bound atomic electrons, plus the free-electron Klein-Nishina limit.

Every cross-section exposes two functions of the photon energy E [keV]
and the cosine of the scattering angle μ:
    eval(E, μ): dσ/dΩ [cm²/sr], an un-normalized density in μ
    max(E):     an upper bound of eval(E, ·) over μ in [-1, 1]

References:
    - Klein & Nishina, Z. Phys. 52, 853 (1929)
    - Hubbell et al., J. Phys. Chem. Ref. Data 4, 471 (1975)
      (atomic form factors and incoherent scattering functions)
"""

from abc import ABC, abstractmethod
import numpy as np
import numba
from scipy import constants

from photon_mc.physics.function import TabulatedFunction

# Electron rest energy m_e c² [keV]
ELECTRON_REST_ENERGY_KEV = constants.physical_constants['electron mass energy equivalent in MeV'][0] * 1e3

# Classical electron radius r_e [cm]
CLASSICAL_ELECTRON_RADIUS_CM = constants.physical_constants['classical electron radius'][0] * 1e2


@numba.njit(cache=True)
def momentum_transfer(energy_keV: float, mu: float) -> float:
    """
    Momentum transfer variable x = E sin(θ/2) [keV].

    This is the argument at which form factors and incoherent
    scattering functions are tabulated.

    Parameters:
        energy_keV: Photon energy [keV]
        mu: Cosine of the scattering angle

    Returns:
        x [keV]
    """
    theta = np.arccos(mu)
    return energy_keV * np.sin(theta / 2.0)


@numba.njit(cache=True)
def klein_nishina(energy_keV: float, mu: float) -> float:
    """
    Klein-Nishina differential cross-section for a free electron.

        dσ/dΩ = r_e²/2 · α² · (α + κ(1-μ) + μ²)

    where:
        κ = E / (m_e c²)
        α = 1 / (1 + κ(1-μ))   (ratio E'/E)

    Parameters:
        energy_keV: Incident photon energy [keV]
        mu: Cosine of the scattering angle

    Returns:
        dσ/dΩ [cm²/sr]
    """
    kappa = energy_keV / ELECTRON_REST_ENERGY_KEV
    kappa_antimu = kappa * (1.0 - mu)
    alpha = 1.0 / (1.0 + kappa_antimu)
    r_e2 = CLASSICAL_ELECTRON_RADIUS_CM * CLASSICAL_ELECTRON_RADIUS_CM
    return r_e2 / 2.0 * alpha * alpha * (alpha + kappa_antimu + mu * mu)


@numba.njit(cache=True)
def compton_scatter(energy_keV: float, mu: float) -> float:
    """
    Photon energy after Compton scattering.

        E' = E / (1 + κ(1-μ))

    Deterministic: the angle fixes the energy transfer. At μ = 1 the
    photon keeps its full energy.

    Parameters:
        energy_keV: Incident photon energy [keV]
        mu: Cosine of the scattering angle

    Returns:
        Scattered photon energy [keV]
    """
    kappa = energy_keV / ELECTRON_REST_ENERGY_KEV
    return energy_keV / (1.0 + kappa * (1.0 - mu))


class CrossSection(ABC):
    """
    Interface of all differential cross-sections.

    Instances are immutable and may be shared between samplers and
    experiments. A new cross-section only needs eval() and max(); the
    rejection sampler and transport engine work with any of them.
    """

    @abstractmethod
    def eval(self, energy_keV: float, mu: float) -> float:
        """Differential cross-section at (E, μ) [cm²/sr]."""

    @abstractmethod
    def max(self, energy_keV: float) -> float:
        """
        Upper bound of eval(energy_keV, μ) for μ in [-1, 1].

        Must be a true bound: a too small value silently biases
        rejection sampling and is not checked at runtime.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class KleinNishinaCrossSection(CrossSection):
    """Compton scattering off a free electron at rest."""

    def eval(self, energy_keV: float, mu: float) -> float:
        return klein_nishina(energy_keV, mu)

    def max(self, energy_keV: float) -> float:
        # Forward scattering dominates at every energy
        return klein_nishina(energy_keV, 1.0)


class CoherentCrossSection(CrossSection):
    """
    Coherent (Rayleigh) scattering off bound electrons.

        dσ/dΩ = r_e² · (1 + μ²)/2 · F(x)²

    with F the atomic form factor at x = E sin(θ/2).

    Usage:
        xs = CoherentCrossSection.from_file('data/AFF.dat')
        xs.eval(661.7, 0.5)
    """

    def __init__(self, form_factor: TabulatedFunction):
        """
        Parameters:
            form_factor: F(x), x in keV; its domain must cover
                [0, E] for every energy this cross-section is used at
        """
        self.form_factor = form_factor

    @classmethod
    def from_file(cls, path, delimiter=None, skip_header: int = 2) -> "CoherentCrossSection":
        """Load the form factor table from a two-column file."""
        return cls(TabulatedFunction.from_file(path, delimiter, skip_header))

    def eval(self, energy_keV: float, mu: float) -> float:
        f = self.form_factor(momentum_transfer(energy_keV, mu))
        r_e2 = CLASSICAL_ELECTRON_RADIUS_CM * CLASSICAL_ELECTRON_RADIUS_CM
        return r_e2 * (1.0 + mu * mu) / 2.0 * f * f

    def max(self, energy_keV: float) -> float:
        # Assumes eval increases monotonically towards μ = 1, which holds
        # for form factors falling with x but is not verified for
        # arbitrary tables.
        return self.eval(energy_keV, 1.0)

    def __repr__(self) -> str:
        return f"CoherentCrossSection({self.form_factor!r})"


class IncoherentCrossSection(CrossSection):
    """
    Incoherent (Compton) scattering off bound electrons.

        dσ/dΩ = KN(E, μ) · S(x)

    with S the incoherent scattering function at x = E sin(θ/2).
    """

    def __init__(self, scattering_function: TabulatedFunction):
        """
        Parameters:
            scattering_function: S(x), x in keV; its domain must cover
                [0, E] for every energy this cross-section is used at
        """
        self.scattering_function = scattering_function
        self._s_max = scattering_function.max()

    @classmethod
    def from_file(cls, path, delimiter=None, skip_header: int = 2) -> "IncoherentCrossSection":
        """Load the incoherent scattering function from a two-column file."""
        return cls(TabulatedFunction.from_file(path, delimiter, skip_header))

    def eval(self, energy_keV: float, mu: float) -> float:
        s = self.scattering_function(momentum_transfer(energy_keV, mu))
        return klein_nishina(energy_keV, mu) * s

    def max(self, energy_keV: float) -> float:
        # KN peaks at μ = 1 while S grows with x, so the two maxima sit at
        # opposite ends; their product is a safe, if loose, bound.
        return klein_nishina(energy_keV, 1.0) * self._s_max

    def __repr__(self) -> str:
        return f"IncoherentCrossSection({self.scattering_function!r})"


# ============================================================================
# Example Usage
# ============================================================================

if __name__ == "__main__":
    print("\n" + "="*70)
    print("Klein-Nishina Cross-Section Test")
    print("="*70)

    energy = 661.7  # keV (Cs-137)
    xs = KleinNishinaCrossSection()

    print(f"\nCompton scattering @ {energy} keV:")
    print(f"  {'angle':>8s} {'dσ/dΩ [cm²/sr]':>16s} {'E_out [keV]':>12s}")
    for angle_deg in [0, 30, 60, 90, 120, 150, 180]:
        mu = np.cos(np.radians(angle_deg))
        print(f"  {angle_deg:8d} {xs.eval(energy, mu):16.4e} "
              f"{compton_scatter(energy, mu):12.2f}")

    print(f"\n  Bound max(E): {xs.max(energy):.4e} cm²/sr")
    print("\n" + "="*70 + "\n")
