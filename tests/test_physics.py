"""Tests for tabulated functions, cross-sections and rejection sampling."""

import numpy as np
import pytest
from scipy import integrate as scipy_integrate
from scipy import stats as scipy_stats

from photon_mc.core.rng import RandomSource
from photon_mc.physics import (
    TabulatedFunction,
    DomainError,
    CrossSection,
    CoherentCrossSection,
    IncoherentCrossSection,
    KleinNishinaCrossSection,
    klein_nishina,
    compton_scatter,
    momentum_transfer,
    RejectionSampler,
    choose_weighted,
    sample_scattering_angle,
)
from photon_mc.physics.cross_section import (
    ELECTRON_REST_ENERGY_KEV,
    CLASSICAL_ELECTRON_RADIUS_CM,
)


def falling_form_factor(z=82.0):
    """Smooth form factor, F(0) = Z, decreasing in x."""
    x = np.linspace(0.0, 2000.0, 401)
    return TabulatedFunction(x, z / (1.0 + (x / 50.0) ** 2))


def rising_scattering_function(z=82.0):
    """Smooth incoherent scattering function, S(0) = 0, S(∞) = Z."""
    x = np.linspace(0.0, 2000.0, 401)
    return TabulatedFunction(x, z * (1.0 - np.exp(-x / 100.0)))


class LinearDensity(CrossSection):
    """Density 1 + μ on [-1, 1], bound 2."""

    def eval(self, energy_keV, mu):
        return 1.0 + mu

    def max(self, energy_keV):
        return 2.0


class TestTabulatedFunction:
    """Tests for tabulated functions."""

    def test_interpolation(self):
        f = TabulatedFunction([0.0, 1.0, 3.0], [0.0, 2.0, 0.0])
        assert f(0.0) == 0.0
        assert f(0.5) == pytest.approx(1.0)
        assert f(1.0) == pytest.approx(2.0)
        assert f(2.0) == pytest.approx(1.0)

    def test_domain_is_half_open(self):
        f = TabulatedFunction([0.0, 1.0, 3.0], [0.0, 2.0, 0.0])
        assert f.domain() == (0.0, 3.0)
        with pytest.raises(DomainError):
            f(3.0)
        with pytest.raises(DomainError):
            f(-0.1)
        # DomainError is a ValueError
        with pytest.raises(ValueError):
            f(10.0)

    def test_rejects_unsorted(self):
        with pytest.raises(ValueError):
            TabulatedFunction([1.0, 0.0], [0.0, 1.0])

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError):
            TabulatedFunction([0.0, 1.0], [0.0, np.inf])

    def test_push_and_insert(self):
        f = TabulatedFunction()
        f.push((0.0, 0.0))
        f.push((2.0, 4.0))
        with pytest.raises(ValueError):
            f.push((1.0, 1.0))
        f.insert(1.0, 1.0)
        assert list(f.xdata) == [0.0, 1.0, 2.0]
        assert f(1.5) == pytest.approx(2.5)
        with pytest.raises(ValueError):
            f.insert(1.0, 5.0)

    def test_max(self):
        f = TabulatedFunction([0.0, 1.0, 3.0], [0.5, 2.0, -1.0])
        assert f.max() == 2.0

    def test_too_short_has_no_domain(self):
        with pytest.raises(DomainError):
            TabulatedFunction([0.0], [1.0])(0.0)

    def test_from_file(self, tmp_path):
        path = tmp_path / "AFF.dat"
        path.write_text("Form factor of Pb\nx[keV]\tF\n0.0\t82.0\n10.0\t80.0\n20.0\t70.0\n")
        f = TabulatedFunction.from_file(path, delimiter="\t", skip_header=2)
        assert len(f) == 3
        assert f(5.0) == pytest.approx(81.0)

    def test_multiple_from_file(self, tmp_path):
        path = tmp_path / "MFWL.dat"
        path.write_text("header\nheader\n"
                        "100 1.0 10.0 2.0 3.0\n"
                        "200 2.0 20.0 4.0 6.0\n")
        tables = TabulatedFunction.multiple_from_file(path)
        assert len(tables) == 4
        assert tables[0](150.0) == pytest.approx(1.5)
        assert tables[3](150.0) == pytest.approx(4.5)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TabulatedFunction.from_file(tmp_path / "missing.dat")


class TestCrossSections:
    """Tests for cross-section formulas."""

    def test_constants(self):
        assert ELECTRON_REST_ENERGY_KEV == pytest.approx(511.0, rel=1e-3)
        assert CLASSICAL_ELECTRON_RADIUS_CM == pytest.approx(2.818e-13, rel=1e-3)

    def test_compton_no_loss_forward(self):
        """Zero scattering angle transfers no energy."""
        for energy in [10.0, 300.0, 661.7, 1332.5]:
            assert compton_scatter(energy, 1.0) == energy

    def test_compton_backscatter(self):
        """Backscattered 661.7 keV photon keeps about 184 keV."""
        assert compton_scatter(661.7, -1.0) == pytest.approx(184.3, abs=0.5)

    def test_compton_monotonic(self):
        mus = np.linspace(-1.0, 1.0, 50)
        energies = [compton_scatter(661.7, mu) for mu in mus]
        assert np.all(np.diff(energies) > 0)

    def test_klein_nishina_thomson_limit(self):
        """At low energy KN approaches r_e² (1 + μ²)/2."""
        r2 = CLASSICAL_ELECTRON_RADIUS_CM ** 2
        for mu in [-1.0, 0.0, 0.5, 1.0]:
            assert klein_nishina(1e-6, mu) == pytest.approx(r2 * (1 + mu * mu) / 2, rel=1e-6)

    def test_klein_nishina_forward_peak(self):
        xs = KleinNishinaCrossSection()
        mus = np.linspace(-1.0, 1.0, 201)
        values = [xs.eval(661.7, mu) for mu in mus]
        assert max(values) <= xs.max(661.7) * (1 + 1e-12)
        assert xs.max(661.7) == pytest.approx(CLASSICAL_ELECTRON_RADIUS_CM ** 2)

    def test_momentum_transfer(self):
        assert momentum_transfer(100.0, 1.0) == 0.0
        assert momentum_transfer(100.0, -1.0) == pytest.approx(100.0)
        assert momentum_transfer(100.0, 0.0) == pytest.approx(100.0 * np.sin(np.pi / 4))

    def test_coherent(self):
        xs = CoherentCrossSection(falling_form_factor())
        r2 = CLASSICAL_ELECTRON_RADIUS_CM ** 2
        assert xs.eval(300.0, 1.0) == pytest.approx(r2 * 82.0 ** 2)
        assert xs.max(300.0) == xs.eval(300.0, 1.0)
        mus = np.linspace(-1.0, 1.0, 101)
        assert all(xs.eval(300.0, mu) <= xs.max(300.0) for mu in mus)

    def test_incoherent_bound(self):
        """Bound uses the global maximum of S and covers every μ."""
        s = rising_scattering_function()
        xs = IncoherentCrossSection(s)
        assert xs.max(661.7) == pytest.approx(klein_nishina(661.7, 1.0) * s.max())
        mus = np.linspace(-1.0, 1.0, 201)
        assert all(xs.eval(661.7, mu) <= xs.max(661.7) for mu in mus)
        assert xs.eval(661.7, 1.0) == 0.0

    def test_table_too_short_for_energy(self):
        """Energies beyond the table fail instead of extrapolating."""
        xs = CoherentCrossSection(falling_form_factor())
        with pytest.raises(DomainError):
            xs.eval(5000.0, -1.0)

    def test_from_file(self, tmp_path):
        path = tmp_path / "ISF.dat"
        path.write_text("h\nh\n0 0\n1000 82\n")
        xs = IncoherentCrossSection.from_file(path)
        assert xs.scattering_function.max() == 82.0


class TestRejectionSampler:
    """Tests for rejection sampling."""

    def test_range(self):
        sampler = RejectionSampler(KleinNishinaCrossSection(), 661.7, RandomSource(seed=1))
        mus = sampler.samples(2000)
        assert np.all(mus >= -1.0) and np.all(mus < 1.0)

    def test_linear_density_mean(self):
        """Density 1 + μ has mean 1/3."""
        sampler = RejectionSampler(LinearDensity(), 0.0, RandomSource(seed=2))
        mus = sampler.samples(20000)
        assert np.mean(mus) == pytest.approx(1.0 / 3.0, abs=0.02)
        # Envelope area 4, density area 2
        assert sampler.efficiency == pytest.approx(0.5, abs=0.02)

    def test_klein_nishina_chi_square(self):
        """Binned sample agrees with the normalized Klein-Nishina density."""
        energy = 661.7
        xs = KleinNishinaCrossSection()
        sampler = RejectionSampler(xs, energy, RandomSource(seed=12345))

        n_samples = 20000
        n_bins = 20
        edges = np.linspace(-1.0, 1.0, n_bins + 1)
        observed, _ = np.histogram(sampler.samples(n_samples), bins=edges)

        bin_integrals = np.array([
            scipy_integrate.quad(lambda mu: xs.eval(energy, mu), lo, hi)[0]
            for lo, hi in zip(edges[:-1], edges[1:])
        ])
        expected = n_samples * bin_integrals / bin_integrals.sum()

        _, p_value = scipy_stats.chisquare(observed, expected)
        assert p_value > 1e-3

    def test_incoherent_suppresses_forward(self):
        """S(x) → 0 at μ → 1 pushes samples away from forward scattering."""
        sampler = RejectionSampler(IncoherentCrossSection(rising_scattering_function()),
                                   661.7, RandomSource(seed=4))
        free = RejectionSampler(KleinNishinaCrossSection(), 661.7, RandomSource(seed=4))
        assert np.mean(sampler.samples(5000)) < np.mean(free.samples(5000))

    def test_iterator(self):
        sampler = RejectionSampler(LinearDensity(), 0.0, RandomSource(seed=5))
        values = [next(sampler) for _ in range(5)]
        assert len(values) == 5
        assert sampler.n_accepted == 5
        assert sampler.n_proposed >= 5

    def test_reproducible(self):
        a = RejectionSampler(LinearDensity(), 0.0, RandomSource(seed=6)).samples(100)
        b = RejectionSampler(LinearDensity(), 0.0, RandomSource(seed=6)).samples(100)
        np.testing.assert_array_equal(a, b)

    def test_scattering_angle_sign(self):
        """Angles are arccos μ with random sign."""
        rng = RandomSource(seed=7)
        angles = [sample_scattering_angle(LinearDensity(), 0.0, rng) for _ in range(500)]
        signs = [np.sign(angle) for angle, _ in angles]
        assert signs.count(1.0) > 150 and signs.count(-1.0) > 150
        for angle, mu in angles:
            assert abs(angle) == pytest.approx(np.arccos(mu))


class TestChooseWeighted:
    """Tests for categorical draws."""

    def test_frequencies(self):
        rng = RandomSource(seed=8)
        items = ['coh', 'inc', 'pho']
        weights = [1.0, 2.0, 7.0]
        draws = [choose_weighted(rng, items, weights) for _ in range(20000)]
        for item, weight in zip(items, weights):
            assert draws.count(item) / len(draws) == pytest.approx(weight / 10.0, abs=0.015)

    def test_zero_weight_never_chosen(self):
        rng = RandomSource(seed=9)
        draws = {choose_weighted(rng, 'abc', [0.0, 1.0, 0.0]) for _ in range(200)}
        assert draws == {'b'}

    def test_invalid(self):
        rng = RandomSource(seed=10)
        with pytest.raises(ValueError):
            choose_weighted(rng, ['a'], [0.0])
        with pytest.raises(ValueError):
            choose_weighted(rng, ['a', 'b'], [1.0])
        with pytest.raises(ValueError):
            choose_weighted(rng, ['a', 'b'], [1.0, -1.0])
