"""
Monte Carlo Estimates of π

Compares two estimators with the same number of random points:
    - Integration: mean of 4·sqrt(1 - x²), x ~ U(0, 1)
    - Hit-or-miss: 4 × fraction of points (x, y) in the quarter circle

The integration estimator has the smaller variance. The convergence plot
shows its running estimate with the 1σ band.

Usage:
    python circle.py
    python circle.py --sample-size 100000 --seed 3
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from photon_mc.core.rng import RandomSource
from photon_mc.scoring.integrate import Integrator, integrate, hit_or_miss_circle
from photon_mc.scoring.statistics import Statistics


def quarter_circle(x: float) -> float:
    return 4.0 * np.sqrt(1.0 - x * x)


def running_estimate(samples, checkpoints):
    """Mean and standard error after each checkpoint sample count."""
    stats = Statistics()
    means, errors = [], []
    count = 0
    for n in checkpoints:
        while count < n:
            stats.push(next(samples))
            count += 1
        means.append(stats.mean())
        errors.append(stats.error_of_mean())
    return np.array(means), np.array(errors)


def plot_convergence(checkpoints, means, errors, save_path=None):
    plt.figure(figsize=(10, 6))

    plt.semilogx(checkpoints, means, 'b-', linewidth=2, label='Integration')
    plt.fill_between(checkpoints, means - errors, means + errors, color='b', alpha=0.2)
    plt.axhline(np.pi, color='k', linestyle='--', linewidth=1.5, label='π')

    plt.xlabel('Number of samples', fontsize=14, fontweight='bold')
    plt.ylabel('Estimate', fontsize=14, fontweight='bold')
    plt.title('Convergence of the Monte Carlo Integral', fontsize=16, fontweight='bold')
    plt.grid(True, alpha=0.3, linestyle='--')
    plt.legend(fontsize=12)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return plt.gcf()


def parse_args():
    parser = argparse.ArgumentParser(description="Monte Carlo estimates of π")
    parser.add_argument('--sample-size', type=int, default=1_000_000)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--no-plots', action='store_true')
    return parser.parse_args()


# ============================================================================
# Main Execution
# ============================================================================

if __name__ == "__main__":
    args = parse_args()
    rng = RandomSource(args.seed)

    print("="*70)
    print(f"Monte Carlo estimates of π, n = {args.sample_size:,}")
    print("="*70)

    for name, estimate in [
        ('Integration method', lambda: integrate(quarter_circle, (0.0, 1.0), args.sample_size, rng)),
        ('Rejection method', lambda: hit_or_miss_circle(args.sample_size, rng)),
    ]:
        start = time.time()
        stats = estimate()
        elapsed = time.time() - start
        deviation = abs(stats.mean() - np.pi) / stats.error_of_mean()
        print(f"\n{name}:")
        print(f"  {stats}")
        print(f"  Deviation from π: {deviation:.2f} σ")
        print(f"  Time: {elapsed:.2f}s")

    if not args.no_plots:
        checkpoints = np.unique(np.logspace(1, np.log10(args.sample_size), 50).astype(int))
        samples = Integrator(quarter_circle, (0.0, 1.0), rng)
        means, errors = running_estimate(samples, checkpoints)
        plot_convergence(checkpoints, means, errors, save_path='circle_convergence.png')
        plt.show()
