"""Scoring module: Online statistics, histograms and Monte Carlo integration."""

from photon_mc.scoring.statistics import Statistics
from photon_mc.scoring.histogram import Histogram
from photon_mc.scoring.integrate import Integrator, integrate, hit_or_miss_circle

__all__ = ["Statistics", "Histogram", "Integrator", "integrate", "hit_or_miss_circle"]
