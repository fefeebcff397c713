"""
Scattering Angle Distributions

Samples cos θ from the coherent or incoherent cross-section of an
element with the rejection sampler and plots the normalized histogram
next to the exact density.

Elements and line energies:
    cerium   300.0 keV
    caesium  661.7 keV

Usage:
    python cross_sections.py coherent caesium 100 100000
    python cross_sections.py incoherent cerium 50 20000 --data-dir data
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt
from scipy import integrate

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from photon_mc.core.rng import RandomSource
from photon_mc.physics.cross_section import CoherentCrossSection, IncoherentCrossSection
from photon_mc.physics.sampling import RejectionSampler

ELEMENT_ENERGIES = {
    'cerium': 300.0,    # keV
    'caesium': 661.7,
}


def load_cross_section(scatter_type: str, data_dir: Path):
    if scatter_type == 'coherent':
        return CoherentCrossSection.from_file(data_dir / 'AFF.dat')
    if scatter_type == 'incoherent':
        return IncoherentCrossSection.from_file(data_dir / 'ISF.dat')
    raise ValueError(f"Unknown scatter type '{scatter_type}'")


def mu_histogram(sampler: RejectionSampler, n_bins: int, n_samples: int):
    """
    Histogram of sampled μ, normalized to a density on [-1, 1].

    Returns:
        centers, density
    """
    density, edges = np.histogram(sampler.samples(n_samples), bins=n_bins,
                                  range=(-1.0, 1.0), density=True)
    return (edges[:-1] + edges[1:]) / 2.0, density


def exact_density(cross_section, energy_keV: float, mu: np.ndarray) -> np.ndarray:
    """Cross-section on a μ grid, normalized by the trapezoidal rule."""
    values = np.array([cross_section.eval(energy_keV, m) for m in mu])
    return values / integrate.trapezoid(values, mu)


def plot_distribution(centers, density, mu, exact, title, save_path=None):
    plt.figure(figsize=(10, 6))

    width = centers[1] - centers[0]
    plt.bar(centers, density, width=width, color='steelblue', alpha=0.7,
            label='Rejection sampling')
    plt.plot(mu, exact, 'r-', linewidth=2, label='dσ/dΩ (normalized)')

    plt.xlabel('µ = cos θ', fontsize=14, fontweight='bold')
    plt.ylabel('Probability density', fontsize=14, fontweight='bold')
    plt.title(title, fontsize=16, fontweight='bold')
    plt.xlim(-1.0, 1.0)
    plt.ylim(bottom=0.0)
    plt.grid(True, alpha=0.3, linestyle='--')
    plt.legend(fontsize=12, loc='upper left')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return plt.gcf()


def parse_args():
    parser = argparse.ArgumentParser(description="Sample scattering angle distributions")
    parser.add_argument('scatter_type', choices=['coherent', 'incoherent'])
    parser.add_argument('element', choices=sorted(ELEMENT_ENERGIES))
    parser.add_argument('n_bins', type=int)
    parser.add_argument('n_samples', type=int)
    parser.add_argument('--data-dir', type=Path, default=Path('data'))
    parser.add_argument('--seed', type=int, default=None)
    return parser.parse_args()


# ============================================================================
# Main Execution
# ============================================================================

if __name__ == "__main__":
    args = parse_args()
    energy = ELEMENT_ENERGIES[args.element]

    cross_section = load_cross_section(args.scatter_type, args.data_dir)
    sampler = RejectionSampler(cross_section, energy, RandomSource(args.seed))

    start = time.time()
    centers, density = mu_histogram(sampler, args.n_bins, args.n_samples)
    elapsed = time.time() - start

    print(f"{args.element} {args.scatter_type} @ {energy} keV")
    print(f"  Samples: {args.n_samples:,} in {elapsed:.2f}s")
    print(f"  Acceptance: {sampler.efficiency:.4f}")

    mu = np.linspace(-1.0, 1.0, 401)
    exact = exact_density(cross_section, energy, mu)

    plot_distribution(centers, density, mu, exact,
                      f'{args.element.capitalize()} {args.scatter_type} @ {energy} keV',
                      save_path=f'{args.element}_{args.scatter_type}.png')
    plt.show()
