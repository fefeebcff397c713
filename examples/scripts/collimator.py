"""
Slit Collimator Simulation

Transports 661.7 keV photons (Cs-137) from a point source through a 1 cm
lead absorber with a 2 mm slit and records the energy and lateral
position |y| of every photon reaching the detector at x = 11.5 cm.

Produces:
    - Energy spectrum (full-energy peak + Compton continuum)
    - Radial profile behind the slit
    - HDF5 file with histograms and all detected photons

Data tables (x in keV, two header lines):
    data/AFF.dat   atomic form factor F(x)
    data/ISF.dat   incoherent scattering function S(x)
    data/MFWL.dat  E, λ_tot, λ_coh, λ_inc, λ_pho [cm]

Usage:
    python collimator.py 10000
    python collimator.py 10000 --config collimator.yaml --output results.h5
"""

import argparse
import sys
from pathlib import Path

import h5py
import numpy as np
import matplotlib.pyplot as plt

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from photon_mc.config import load_config, print_summary
from photon_mc.transport.collimator import CollimatorExperiment
from photon_mc.transport.engine import TransportEngine


def run_collimator(n_photons: int, config_path=None, seed=None):
    """
    Run the collimator experiment.

    Parameters:
        n_photons: Number of detected photons to collect
        config_path: YAML configuration (None = defaults)
        seed: Overrides the configured seed

    Returns:
        engine, results: Transport engine holding the tallies and the
            run statistics
    """
    overrides = {'seed': seed} if seed is not None else None
    config = load_config(config_path, overrides=overrides)
    scoring = config['scoring']

    print(f"\n{'='*70}")
    print(f"Slit Collimator")
    print(f"{'='*70}")
    print_summary(config)
    print(f"{'='*70}")

    experiment = CollimatorExperiment.from_config(config)
    engine = TransportEngine(experiment,
                             energy_bins=scoring['energy_bins'],
                             radius_bins=scoring['radius_bins'],
                             max_trials=scoring['max_trials'])
    results = engine.run(n_photons, verbose=True)

    source_energy = config['source']['energy_keV']
    stats = engine.detected.get_statistics(energy_window=(source_energy - 1.0, source_energy))

    print(f"\n{'='*70}")
    print(f"Results:")
    print(f"{'='*70}")
    print(f"  Energy: {engine.energy_stats}")
    print(f"  Radius: {engine.radius_stats}")
    print(f"  Full-energy fraction: {stats.get('window_fraction', 0.0):.3f}")
    print(f"  Rejected at entrance: {results['n_rejected']:,}")
    print(f"  Lost in transport: {results['n_lost']:,}")
    print(f"{'='*70}\n")

    return engine, results


def plot_histogram(centers, counts, xlabel, title, save_path=None, log=True):
    """
    Bar plot of a scoring histogram.

    Parameters:
        centers: Bin centers
        counts: Bin contents
        xlabel: Axis label
        title: Figure title
        save_path: Path to save figure (optional)
        log: Logarithmic y axis
    """
    plt.figure(figsize=(10, 6))

    width = centers[1] - centers[0] if len(centers) > 1 else 1.0
    plt.bar(centers, counts, width=width, color='steelblue', edgecolor='none')

    if log:
        plt.yscale('log')
        plt.ylim(bottom=0.8)

    plt.xlabel(xlabel, fontsize=14, fontweight='bold')
    plt.ylabel('Counts', fontsize=14, fontweight='bold')
    plt.title(title, fontsize=16, fontweight='bold')
    plt.grid(True, alpha=0.3, linestyle='--')
    plt.xlim(centers[0] - width / 2, centers[-1] + width / 2)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return plt.gcf()


def save_results(engine: TransportEngine, results: dict, path):
    """
    Write histograms, detected photons and run statistics to HDF5.

    Layout:
        /energy/{edges,counts}
        /radius/{edges,counts}
        /photons   structured array (position, direction, energy)
        attributes: run statistics
    """
    with h5py.File(path, 'w') as f:
        for name, hist in [('energy', engine.energy_hist), ('radius', engine.radius_hist)]:
            group = f.create_group(name)
            group.create_dataset('edges', data=hist.bin_edges)
            group.create_dataset('counts', data=hist.bin_contents)

        f.create_dataset('photons', data=engine.detected.photons, compression='gzip')

        for key, value in results.items():
            f.attrs[key] = value

    print(f"Results saved: {path}")


def parse_args():
    parser = argparse.ArgumentParser(description="Slit collimator photon transport")
    parser.add_argument('n_photons', type=int, help="number of detected photons")
    parser.add_argument('--config', type=Path, default=None, help="YAML configuration file")
    parser.add_argument('--seed', type=int, default=None, help="random seed")
    parser.add_argument('--output', type=Path, default=Path('collimator.h5'),
                        help="HDF5 output file")
    parser.add_argument('--no-plots', action='store_true', help="skip figures")
    return parser.parse_args()


# ============================================================================
# Main Execution
# ============================================================================

if __name__ == "__main__":
    args = parse_args()

    engine, results = run_collimator(args.n_photons, args.config, args.seed)
    save_results(engine, results, args.output)

    if not args.no_plots:
        energy, counts = engine.get_energy_spectrum()
        plot_histogram(energy, counts, 'Energy [keV]', 'Detected Energy Spectrum',
                       save_path='energy_hist.png')

        radius, counts = engine.get_radius_profile()
        plot_histogram(radius, counts, '|y| [cm]', 'Detected Radial Profile',
                       save_path='radius_hist.png')
        plt.show()
