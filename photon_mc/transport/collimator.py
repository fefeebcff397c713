"""
Slit collimator experiment.

A point source emits photons towards a slab absorber (lead) with an open
slit around y = 0. Photons passing the absorber fly through air to a
detector that absorbs everything reaching it.

Geometry (cm):

        y
        ^    absorber         detector
        |    ########         |
        |    ########         |
    src *  - - - - - - - - - -|-->  x
        |    ########         |
        |    ########         |
             x0      x1       x_det

Photon physics in the absorber:
    - Free path: exponential with the total mean free path
    - Interaction: coherent / incoherent scattering or photo-absorption,
      chosen with weights 1/λ_coh, 1/λ_inc, 1/λ_pho
Air is treated as vacuum traversed in fixed steps.
"""

from typing import Optional, Sequence, Tuple

from photon_mc.core.geometry import Point
from photon_mc.core.rng import RandomSource
from photon_mc.core.source import Source, IsotropicSource, EastPointingSource
from photon_mc.physics.cross_section import (
    CoherentCrossSection,
    IncoherentCrossSection,
    compton_scatter,
)
from photon_mc.physics.function import TabulatedFunction
from photon_mc.physics.sampling import choose_weighted, sample_scattering_angle
from photon_mc.transport.experiment import (
    Experiment,
    Event,
    Exponential,
    Fixed,
    FreePath,
    Material,
)

SOURCE_TYPES = {
    'isotropic': IsotropicSource,
    'east': EastPointingSource,
}

_ABSORBER_EVENTS = (Event.COHERENT_SCATTER, Event.INCOHERENT_SCATTER, Event.ABSORBED)


class CollimatorExperiment(Experiment):
    """
    Point source, slit absorber and detector wall.

    Usage:
        config = load_config('collimator.yaml')
        experiment = CollimatorExperiment.from_config(config)
        photon = simulate_one_photon(experiment)
    """

    def __init__(self, coherent: CoherentCrossSection,
                 incoherent: IncoherentCrossSection,
                 mean_free_paths: Sequence[TabulatedFunction],
                 source: Optional[Source] = None,
                 rng: Optional[RandomSource] = None,
                 x_start: float = 0.5,
                 absorber_x: Tuple[float, float] = (0.5, 1.5),
                 slit_half_width: float = 0.1,
                 detector_x: float = 11.5,
                 air_step: float = 0.1):
        """
        Initialize collimator.

        Parameters:
            coherent: Coherent cross-section of the absorber
            incoherent: Incoherent cross-section of the absorber
            mean_free_paths: (total, coherent, incoherent, photo) mean free
                paths in the absorber [cm] as functions of energy [keV]
            source: Photon source (default: isotropic 661.7 keV at origin)
            rng: RandomSource
            x_start: Entrance plane [cm]
            absorber_x: (x0, x1) extent of the absorber slab [cm]
            slit_half_width: Half width of the open slit [cm]
            detector_x: Detector face [cm]
            air_step: Fixed step length in air [cm]
        """
        super().__init__(rng)

        if len(mean_free_paths) != 4:
            raise ValueError(f"Need total, coherent, incoherent and photo mean free paths, "
                             f"got {len(mean_free_paths)} tables")
        if not absorber_x[0] < absorber_x[1]:
            raise ValueError(f"Invalid absorber extent {absorber_x}")
        if not detector_x > x_start:
            raise ValueError(f"Detector (x = {detector_x}) must lie beyond the entrance "
                             f"plane (x = {x_start})")

        self.coherent = coherent
        self.incoherent = incoherent
        self.mfp_total, self.mfp_coherent, self.mfp_incoherent, self.mfp_photo = mean_free_paths

        self._source = source if source is not None else IsotropicSource(Point(0.0, 0.0), 661.7)
        self._x_start = float(x_start)
        self.absorber_x = (float(absorber_x[0]), float(absorber_x[1]))
        self.slit_half_width = float(slit_half_width)
        self.detector_x = float(detector_x)

        self._air_path = Fixed(air_step)
        self._detector_path = Fixed(0.0)

    @classmethod
    def from_config(cls, config: dict, rng: Optional[RandomSource] = None) -> "CollimatorExperiment":
        """
        Build the experiment from a configuration dict (see photon_mc.config).

        Parameters:
            config: Configuration with source, geometry and data sections
            rng: RandomSource (default: seeded from config['seed'])
        """
        source_cfg = config['source']
        geometry = config['geometry']
        data = config['data']

        source_type = source_cfg['type'].lower()
        if source_type not in SOURCE_TYPES:
            raise ValueError(f"Unknown source type '{source_cfg['type']}'. "
                             f"Available: {list(SOURCE_TYPES.keys())}")
        x, y = source_cfg['position']
        source = SOURCE_TYPES[source_type](Point(x, y), source_cfg['energy_keV'])

        delimiter = data['delimiter']
        skip_header = data['skip_header']
        coherent = CoherentCrossSection.from_file(data['form_factor'], delimiter, skip_header)
        incoherent = IncoherentCrossSection.from_file(data['scattering_function'],
                                                      delimiter, skip_header)
        mean_free_paths = TabulatedFunction.multiple_from_file(data['mean_free_paths'],
                                                              delimiter, skip_header)

        if rng is None:
            rng = RandomSource(config['seed'])

        return cls(coherent, incoherent, mean_free_paths,
                   source=source, rng=rng,
                   x_start=geometry['x_start'],
                   absorber_x=tuple(geometry['absorber_x']),
                   slit_half_width=geometry['slit_half_width'],
                   detector_x=geometry['detector_x'],
                   air_step=geometry['air_step'])

    def source(self) -> Source:
        return self._source

    def x_start(self) -> float:
        return self._x_start

    def material_at(self, location: Point) -> Material:
        x, y = location.x, location.y
        x0, x1 = self.absorber_x
        if x0 < x < x1 and abs(y) > self.slit_half_width:
            return Material.ABSORBER
        if x > self.detector_x:
            return Material.DETECTOR
        return Material.AIR

    def free_path_law(self, material: Material, energy_keV: float) -> FreePath:
        if material == Material.DETECTOR:
            return self._detector_path
        if material == Material.AIR:
            return self._air_path
        return Exponential(self.mfp_total(energy_keV))

    def interaction_weights(self, energy_keV: float) -> Tuple[float, float, float]:
        """Inverse mean free paths (coherent, incoherent, photo) [1/cm]."""
        return (1.0 / self.mfp_coherent(energy_keV),
                1.0 / self.mfp_incoherent(energy_keV),
                1.0 / self.mfp_photo(energy_keV))

    def choose_event(self, material: Material, energy_keV: float) -> Event:
        if material == Material.DETECTOR:
            return Event.ABSORBED
        if material == Material.AIR:
            return Event.NOTHING
        return choose_weighted(self.rng, _ABSORBER_EVENTS, self.interaction_weights(energy_keV))

    def coherent_scatter(self, material: Material, energy_keV: float) -> float:
        angle, _ = sample_scattering_angle(self.coherent, energy_keV, self.rng)
        return angle

    def incoherent_scatter(self, material: Material, energy_keV: float) -> Tuple[float, float]:
        angle, mu = sample_scattering_angle(self.incoherent, energy_keV, self.rng)
        return angle, compton_scatter(energy_keV, mu)

    def __repr__(self) -> str:
        return (f"CollimatorExperiment(absorber={self.absorber_x}, "
                f"slit=±{self.slit_half_width}, detector_x={self.detector_x})")
