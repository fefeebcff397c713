"""
Simulation configuration.

Defaults describe the Cs-137 collimator setup: a 661.7 keV point source,
a 1 cm lead absorber with a 2 mm slit and a detector 11.5 cm downstream.
All lengths in cm, energies in keV.

Usage:
    from photon_mc.config import load_config
    config = load_config('collimator.yaml')
    config['source']['energy_keV']

YAML files only need the keys they change:
    seed: 42
    source:
      energy_keV: 300.0
    data:
      form_factor: tables/AFF.dat
"""

import copy
from pathlib import Path
from typing import Optional

import yaml


DEFAULT_CONFIG = {
    'seed': None,
    'source': {
        'position': [0.0, 0.0],       # cm
        'energy_keV': 661.7,          # Cs-137 line
        'type': 'isotropic',          # 'isotropic' or 'east'
    },
    'geometry': {
        'x_start': 0.5,               # entrance plane [cm]
        'absorber_x': [0.5, 1.5],     # absorber slab [cm]
        'slit_half_width': 0.1,       # |y| below this is open [cm]
        'detector_x': 11.5,           # detector face [cm]
        'air_step': 0.1,              # fixed step length in air [cm]
    },
    'data': {
        'form_factor': 'data/AFF.dat',
        'scattering_function': 'data/ISF.dat',
        'mean_free_paths': 'data/MFWL.dat',   # E, total, coherent, incoherent, photo
        'delimiter': None,                    # None = any whitespace
        'skip_header': 2,
    },
    'scoring': {
        'n_photons': 10000,
        'energy_bins': [666, 0.0, 666.0],     # n_bins, low, high [keV]
        'radius_bins': [127, 0.0, 1.27],      # n_bins, low, high [cm]
        'max_trials': None,
    },
}

# Table entries that are file paths (resolved against the config file)
_PATH_KEYS = ('form_factor', 'scattering_function', 'mean_free_paths')


def _merge(base: dict, update: dict, prefix: str = '') -> dict:
    """Recursively merge update into a copy of base, rejecting unknown keys."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        name = f"{prefix}{key}"
        if key not in base:
            raise ValueError(f"Unknown configuration key '{name}'. "
                             f"Available: {list(base.keys())}")
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ValueError(f"Configuration key '{name}' must be a mapping")
            merged[key] = _merge(base[key], value, prefix=f"{name}.")
        else:
            merged[key] = value
    return merged


def load_config(path=None, overrides: Optional[dict] = None) -> dict:
    """
    Build a configuration from defaults, a YAML file and overrides.

    Relative table paths in a YAML file are taken relative to the file's
    directory.

    Parameters:
        path: YAML file (None = defaults only)
        overrides: Nested dict applied last (same structure as the file)

    Returns:
        Complete configuration dict
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")

        data = loaded.get('data') or {}
        for key in _PATH_KEYS:
            if key in data and data[key] is not None and not Path(data[key]).is_absolute():
                data[key] = str(path.parent / data[key])

        config = _merge(config, loaded)

    if overrides:
        config = _merge(config, overrides)

    return config


def save_config(config: dict, path):
    """Write a configuration to a YAML file."""
    with open(path, 'w') as f:
        yaml.safe_dump(config, f, sort_keys=False)


def print_summary(config: dict):
    """Print the main parameters of a configuration."""
    source = config['source']
    geometry = config['geometry']
    print(f"  Source: {source['type']} @ {tuple(source['position'])} cm, "
          f"{source['energy_keV']} keV")
    print(f"  Absorber: {geometry['absorber_x'][0]} < x < {geometry['absorber_x'][1]} cm, "
          f"slit |y| < {geometry['slit_half_width']} cm")
    print(f"  Detector: x > {geometry['detector_x']} cm")
    print(f"  Seed: {config['seed']}")
