"""Tests for geometry, photons and sources."""

import numpy as np
import pytest

from photon_mc.core import (
    RandomSource,
    Point,
    Direction,
    WrongDirection,
    Photon,
    PhotonArray,
    IsotropicSource,
    EastPointingSource,
)


class TestDirection:
    """Tests for unit directions."""

    def test_normalized_on_construction(self):
        d = Direction(3.0, 4.0)
        assert d.dx == pytest.approx(0.6)
        assert d.dy == pytest.approx(0.8)

    def test_zero_vector_rejected(self):
        with pytest.raises(ValueError):
            Direction(0.0, 0.0)

    def test_from_angle(self):
        d = Direction.from_angle(np.pi / 2)
        assert d.dx == pytest.approx(0.0, abs=1e-15)
        assert d.dy == pytest.approx(1.0)
        assert d.angle == pytest.approx(np.pi / 2)

    def test_rotate_counter_clockwise(self):
        d = Direction(1.0, 0.0)
        d.rotate(np.pi / 2)
        assert d.dx == pytest.approx(0.0, abs=1e-12)
        assert d.dy == pytest.approx(1.0)

    def test_rotate_inverse(self):
        """rotate(θ) followed by rotate(-θ) restores the direction."""
        rng = np.random.default_rng(1)
        for _ in range(100):
            d = Direction.from_angle(rng.uniform(-np.pi, np.pi))
            original = d.to_tuple()
            theta = rng.uniform(-np.pi, np.pi)
            d.rotate(theta)
            d.rotate(-theta)
            assert d.dx == pytest.approx(original[0], abs=1e-12)
            assert d.dy == pytest.approx(original[1], abs=1e-12)

    def test_unit_norm_after_many_rotations(self):
        rng = np.random.default_rng(2)
        d = Direction(1.0, 0.0)
        for theta in rng.uniform(-np.pi, np.pi, size=10000):
            d.rotate(theta)
        assert d.dx ** 2 + d.dy ** 2 == pytest.approx(1.0, abs=1e-12)

    def test_random_is_unit(self):
        rng = RandomSource(seed=3)
        for _ in range(100):
            d = Direction.random(rng)
            assert d.dx ** 2 + d.dy ** 2 == pytest.approx(1.0)

    def test_random_covers_both_half_planes(self):
        rng = RandomSource(seed=4)
        dys = [Direction.random(rng).dy for _ in range(200)]
        assert min(dys) < 0.0 < max(dys)


class TestPoint:
    """Tests for locations."""

    def test_step(self):
        p = Point(1.0, 1.0)
        p.step(Direction.from_angle(0.0), 3.0)
        assert p.to_tuple() == pytest.approx((4.0, 1.0))

    def test_copy_is_independent(self):
        p = Point(1.0, 2.0)
        q = p.copy()
        q.step(Direction(0.0, 1.0), 1.0)
        assert p.to_tuple() == (1.0, 2.0)
        assert q.to_tuple() == (1.0, 3.0)


class TestPhoton:
    """Tests for photon motion."""

    def make_photon(self, dx=1.0, dy=0.0):
        return Photon(Point(0.0, 0.0), Direction(dx, dy), 661.7)

    def test_energy_must_be_positive(self):
        with pytest.raises(ValueError):
            Photon(Point(0.0, 0.0), Direction(1.0, 0.0), 0.0)
        photon = self.make_photon()
        with pytest.raises(ValueError):
            photon.energy = -1.0

    def test_step_forward(self):
        photon = self.make_photon(1.0, 1.0)
        photon.step(np.sqrt(2.0))
        assert photon.location.x == pytest.approx(1.0)
        assert photon.location.y == pytest.approx(1.0)

    @pytest.mark.parametrize("length", [0.0, -1.0, -1e-12, float('nan')])
    def test_step_non_positive_fails(self, length):
        """Non-positive steps raise and leave the location untouched."""
        photon = self.make_photon()
        with pytest.raises(WrongDirection):
            photon.step(length)
        assert photon.location.to_tuple() == (0.0, 0.0)

    def test_go_to_x(self):
        photon = self.make_photon(1.0, 1.0)
        photon.go_to_x(2.0)
        assert photon.location.x == pytest.approx(2.0)
        assert photon.location.y == pytest.approx(2.0)

    def test_go_to_x_behind(self):
        photon = self.make_photon(1.0, 0.0)
        with pytest.raises(WrongDirection):
            photon.go_to_x(-1.0)
        assert photon.location.to_tuple() == (0.0, 0.0)

    def test_go_to_x_parallel(self):
        photon = self.make_photon(0.0, 1.0)
        with pytest.raises(WrongDirection):
            photon.go_to_x(1.0)

    def test_go_to_x_already_there(self):
        photon = self.make_photon(-1.0, 0.0)
        photon.go_to_x(0.0)
        assert photon.location.to_tuple() == (0.0, 0.0)

    def test_go_to_y(self):
        photon = self.make_photon(1.0, -1.0)
        photon.go_to_y(-3.0)
        assert photon.location.x == pytest.approx(3.0)
        with pytest.raises(WrongDirection):
            photon.go_to_y(0.0)

    def test_structured_array(self):
        photon = self.make_photon()
        record = photon.to_structured_array()
        assert record['energy'][0] == 661.7
        np.testing.assert_allclose(record['direction'][0], [1.0, 0.0])


class TestPhotonArray:
    """Tests for detected photon storage."""

    def test_grows(self):
        store = PhotonArray(capacity=2)
        for energy in [100.0, 200.0, 300.0, 400.0, 500.0]:
            store.append(Photon(Point(1.0, 0.0), Direction(1.0, 0.0), energy))
        assert len(store) == 5
        np.testing.assert_allclose(store.photons['energy'], [100, 200, 300, 400, 500])

    def test_statistics(self):
        store = PhotonArray()
        assert store.get_statistics()['mean_energy'] == 0.0
        store.append(Photon(Point(1.0, 0.0), Direction(1.0, 0.0), 100.0))
        store.append(Photon(Point(1.0, 0.0), Direction(1.0, 0.0), 300.0))
        stats = store.get_statistics(energy_window=(250.0, 350.0))
        assert stats['mean_energy'] == pytest.approx(200.0)
        assert stats['window_fraction'] == pytest.approx(0.5)


class TestSources:
    """Tests for photon sources."""

    def test_isotropic_source(self):
        rng = RandomSource(seed=10)
        source = IsotropicSource(Point(1.0, 2.0), 300.0)
        photons = [source.emit_photon(rng) for _ in range(200)]
        assert all(p.energy == 300.0 for p in photons)
        assert all(p.location.to_tuple() == (1.0, 2.0) for p in photons)
        dxs = [p.direction.dx for p in photons]
        assert min(dxs) < 0.0 < max(dxs)

    def test_photons_do_not_share_location(self):
        rng = RandomSource(seed=10)
        source = IsotropicSource(Point(0.0, 0.0), 300.0)
        photon = source.emit_photon(rng)
        photon.location.step(photon.direction, 1.0)
        assert source.location.to_tuple() == (0.0, 0.0)

    def test_east_pointing_source(self):
        rng = RandomSource(seed=11)
        source = EastPointingSource(Point(0.0, 0.0), 661.7)
        for _ in range(500):
            assert source.emit_photon(rng).direction.dx >= 0.0

    def test_invalid_energy(self):
        with pytest.raises(ValueError):
            IsotropicSource(Point(0.0, 0.0), 0.0)
