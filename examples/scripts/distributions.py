"""
Sample Statistics of Standard Distributions

Computes mean, spread and uncertainty of the mean (99.73% confidence,
i.e. 3 standard errors) for large samples of uniform, exponential and
normal random numbers, each dressed up as a physical measurement:

    - Uniform: arrival phase of a photon within a 1 µs clock cycle
    - Exponential: free path of 661.7 keV photons in lead (λ ≈ 0.8 cm)
    - Normal: detector pulse height around a 661.7 keV line (σ = 20 keV)

Usage:
    python distributions.py
    python distributions.py --sample-size 100000000 --seed 1
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
from tqdm import tqdm

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from photon_mc.core.rng import RandomSource
from photon_mc.scoring.statistics import Statistics

# Draws per generator call
CHUNK_SIZE = 1_000_000


def sample_statistics(draw, sample_size: int, desc: str) -> Statistics:
    """
    Accumulate statistics of sample_size values drawn in chunks.

    Parameters:
        draw: Function n -> array of n random values
        sample_size: Total number of values
        desc: Progress bar label
    """
    stats = Statistics()
    remaining = sample_size
    with tqdm(total=sample_size, desc=desc, unit_scale=True) as progress:
        while remaining > 0:
            n = min(remaining, CHUNK_SIZE)
            stats.extend(draw(n).tolist())
            remaining -= n
            progress.update(n)
    return stats


def print_stats_and_time(name: str, unit: str, draw, sample_size: int, expected=None):
    """Sample, time and report one distribution."""
    print(f"\n{name}:")

    start = time.time()
    stats = sample_statistics(draw, sample_size, name)
    elapsed = time.time() - start

    print(f"  Mean: {stats.mean():.6f} ± {3.0 * stats.error_of_mean():.6f} {unit} (99.73%)")
    print(f"  Std:  {stats.standard_deviation():.6f} {unit}")
    if expected is not None:
        mean, std = expected
        print(f"  Expected: mean {mean:.6f}, std {std:.6f} {unit}")
    print(f"  Time: {elapsed:.2f}s")

    return stats


def parse_args():
    parser = argparse.ArgumentParser(description="Statistics of standard distributions")
    parser.add_argument('--sample-size', type=int, default=10_000_000)
    parser.add_argument('--seed', type=int, default=None)
    return parser.parse_args()


# ============================================================================
# Main Execution
# ============================================================================

if __name__ == "__main__":
    args = parse_args()
    generator = RandomSource(args.seed).generator

    print("="*70)
    print(f"Sample statistics, n = {args.sample_size:,}")
    print("="*70)

    print_stats_and_time('Uniform distribution (clock phase)', 'µs',
                         lambda n: generator.uniform(0.0, 1.0, n),
                         args.sample_size, expected=(0.5, 1.0 / np.sqrt(12.0)))

    print_stats_and_time('Exponential distribution (free path in Pb)', 'cm',
                         lambda n: generator.exponential(0.8, n),
                         args.sample_size, expected=(0.8, 0.8))

    print_stats_and_time('Normal distribution (pulse height)', 'keV',
                         lambda n: generator.normal(661.7, 20.0, n),
                         args.sample_size, expected=(661.7, 20.0))

    print("\n" + "="*70)
