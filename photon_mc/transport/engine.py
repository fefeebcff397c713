"""
Monte Carlo transport engine for photons in a 2D medium.

Each history:
    - Emits a photon and moves it onto the experiment's entrance plane
    - Alternates free flights and interactions (scatter / absorption)
    - Ends Lost (photon discarded, a new one emitted) or Detected

Only detected photons are returned, so simulate_one_photon() keeps
emitting until one is detected. There is no cap on the number of
attempts unless max_trials is given: an experiment in which detection
is impossible never returns.
"""

import time
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from tqdm import tqdm

from photon_mc.core.geometry import WrongDirection
from photon_mc.core.particle import Photon, PhotonArray
from photon_mc.scoring.histogram import Histogram
from photon_mc.scoring.statistics import Statistics
from photon_mc.transport.experiment import Experiment, Event, Material


class NoDetectionError(RuntimeError):
    """Raised when max_trials photons were emitted without a detection."""


class PhotonStatus(Enum):
    PROPAGATING = "propagating"
    LOST = "lost"
    DETECTED = "detected"


def propagate(experiment: Experiment, photon: Photon) -> PhotonStatus:
    """
    Advance a photon by one free flight and one interaction.

    Parameters:
        experiment: Setup providing materials, free paths and events
        photon: Photon to move; modified in place

    Returns:
        Status of the photon after the step

    Raises:
        WrongDirection: If the free-path law yields a negative length
    """
    rng = experiment.rng

    # Free flight
    material = experiment.material_at(photon.location)
    length = experiment.free_path_law(material, photon.energy).draw(rng)
    if length != 0.0:
        photon.step(length)
    if photon.location.x < experiment.x_start():
        return PhotonStatus.LOST

    # Interaction at the new location
    material = experiment.material_at(photon.location)
    event = experiment.choose_event(material, photon.energy)

    if event == Event.NOTHING:
        return PhotonStatus.PROPAGATING
    if event == Event.ABSORBED:
        if material == Material.DETECTOR:
            return PhotonStatus.DETECTED
        return PhotonStatus.LOST
    if event == Event.COHERENT_SCATTER:
        angle = experiment.coherent_scatter(material, photon.energy)
        photon.direction.rotate(angle)
        return PhotonStatus.PROPAGATING
    if event == Event.INCOHERENT_SCATTER:
        angle, energy = experiment.incoherent_scatter(material, photon.energy)
        photon.direction.rotate(angle)
        photon.energy = energy
        return PhotonStatus.PROPAGATING

    raise ValueError(f"Unknown event {event!r}")


class TransportEngine:
    """
    Main transport engine for Monte Carlo simulation.

    Handles:
        - Photon emission and entrance rejection
        - History-by-history transport
        - Bookkeeping of emitted / rejected / lost / detected photons
        - Scoring of detected energy and lateral position

    Example:
        engine = TransportEngine(CollimatorExperiment.from_config(config))
        results = engine.run(n_photons=10000)
        centers, counts = engine.energy_hist.bin_centers, engine.energy_hist.bin_contents
    """

    def __init__(self, experiment: Experiment,
                 energy_bins: Tuple[int, float, float] = (666, 0.0, 666.0),
                 radius_bins: Tuple[int, float, float] = (127, 0.0, 1.27),
                 max_trials: Optional[int] = None):
        """
        Initialize transport engine.

        Parameters:
            experiment: Setup to simulate
            energy_bins: (n_bins, low, high) of the detected energy histogram [keV]
            radius_bins: (n_bins, low, high) of the detected |y| histogram [cm]
            max_trials: Emitted photons allowed per detection (None = unlimited)
        """
        if max_trials is not None and max_trials < 1:
            raise ValueError(f"max_trials must be >= 1, got {max_trials}")

        self.experiment = experiment
        self.energy_bins = tuple(energy_bins)
        self.radius_bins = tuple(radius_bins)
        self.max_trials = max_trials

        self._initialize_scoring()

    def _initialize_scoring(self):
        """Initialize counters and tallies."""
        self.n_emitted = 0
        self.n_rejected = 0
        self.n_lost = 0
        self.n_detected = 0

        self.energy_hist = Histogram(*self.energy_bins)
        self.radius_hist = Histogram(*self.radius_bins)
        self.energy_stats = Statistics()
        self.radius_stats = Statistics()
        self.detected = PhotonArray()

    def simulate_one_photon(self) -> Photon:
        """
        Emit photons until one is detected.

        Photons that cannot reach the entrance plane are rejected before
        transport; photons that end Lost are discarded. Both are retried
        with a fresh photon from the source.

        Returns:
            The detected photon

        Raises:
            NoDetectionError: If max_trials photons were emitted without
                a detection
        """
        experiment = self.experiment
        source = experiment.source()
        trials = 0

        while True:
            if self.max_trials is not None and trials >= self.max_trials:
                raise NoDetectionError(
                    f"No photon detected after {trials} emitted photons"
                )
            trials += 1

            photon = source.emit_photon(experiment.rng)
            self.n_emitted += 1

            # Make sure it is headed towards the experiment
            try:
                photon.go_to_x(experiment.x_start())
            except WrongDirection:
                self.n_rejected += 1
                continue

            status = PhotonStatus.PROPAGATING
            while status == PhotonStatus.PROPAGATING:
                status = propagate(experiment, photon)

            if status == PhotonStatus.DETECTED:
                self.n_detected += 1
                return photon
            self.n_lost += 1

    def score(self, photon: Photon):
        """Add a detected photon to the tallies."""
        radius = abs(photon.location.y)
        self.energy_hist.fill(photon.energy)
        self.radius_hist.fill(radius)
        self.energy_stats.push(photon.energy)
        self.radius_stats.push(radius)
        self.detected.append(photon)

    @property
    def detection_efficiency(self) -> float:
        """Detected photons per emitted photon."""
        if self.n_emitted == 0:
            return 0.0
        return self.n_detected / self.n_emitted

    def run(self, n_photons: int, verbose: bool = True) -> dict:
        """
        Simulate until n_photons have been detected and score them.

        Parameters:
            n_photons: Number of detected photons to collect
            verbose: Print progress information

        Returns:
            Dictionary with simulation statistics
        """
        if n_photons < 0:
            raise ValueError(f"n_photons must be non-negative, got {n_photons}")

        emitted_before = self.n_emitted
        rejected_before = self.n_rejected
        lost_before = self.n_lost

        if verbose:
            source = self.experiment.source()
            print(f"\nSimulating {n_photons} detected photons...")
            print(f"  Experiment: {type(self.experiment).__name__}")
            print(f"  Source: {source!r}")
            print(f"  Entrance plane: x = {self.experiment.x_start()} cm")

        start_time = time.time()

        for _ in tqdm(range(n_photons), desc="Photons", unit="photon", disable=not verbose):
            photon = self.simulate_one_photon()
            self.score(photon)

        elapsed = time.time() - start_time
        n_emitted = self.n_emitted - emitted_before
        efficiency = n_photons / n_emitted if n_emitted > 0 else 0.0
        rate = n_photons / elapsed if elapsed > 0 else 0.0

        if verbose:
            print(f"\nTransport complete!")
            print(f"  Time: {elapsed:.1f}s")
            print(f"  Rate: {rate:.0f} detected photons/sec")
            print(f"  Emitted photons: {n_emitted:,}")
            print(f"  Detection efficiency: {efficiency:.4e}")
            if self.energy_stats.count > 0:
                print(f"  Mean detected energy: {self.energy_stats.mean():.2f} keV")

        return {
            'n_detected': n_photons,
            'n_emitted': n_emitted,
            'n_rejected': self.n_rejected - rejected_before,
            'n_lost': self.n_lost - lost_before,
            'detection_efficiency': efficiency,
            'elapsed_time': elapsed,
            'photons_per_sec': rate,
        }

    def get_energy_spectrum(self, normalize: bool = False) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get detected energy spectrum.

        Parameters:
            normalize: Return fractions of all scored photons instead of counts

        Returns:
            (energy, counts): Bin centers [keV] and contents
        """
        counts = self.energy_hist.normalized() if normalize else self.energy_hist.bin_contents
        return self.energy_hist.bin_centers, counts

    def get_radius_profile(self, normalize: bool = False) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get detected lateral profile.

        Returns:
            (radius, counts): Bin centers of |y| [cm] and contents
        """
        counts = self.radius_hist.normalized() if normalize else self.radius_hist.bin_contents
        return self.radius_hist.bin_centers, counts

    def reset_scoring(self):
        """Reset counters and tallies."""
        self._initialize_scoring()


def simulate_one_photon(experiment: Experiment, max_trials: Optional[int] = None) -> Photon:
    """
    Run histories until one photon is detected and return it.

    Parameters:
        experiment: Setup to simulate
        max_trials: Emitted photons allowed before giving up (None = unlimited)

    Raises:
        NoDetectionError: If max_trials is exhausted
    """
    return TransportEngine(experiment, max_trials=max_trials).simulate_one_photon()
