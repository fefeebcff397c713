"""Tests for scoring histograms."""

import numpy as np
import pytest

from photon_mc.scoring import Histogram


def test_binning():
    hist = Histogram(4, 0.0, 4.0)
    assert hist.num_bins == 4
    assert hist.bin_width == 1.0
    np.testing.assert_allclose(hist.bin_edges, [0, 1, 2, 3, 4])
    np.testing.assert_allclose(hist.bin_centers, [0.5, 1.5, 2.5, 3.5])
    np.testing.assert_allclose(hist.bin_low_edges, [0, 1, 2, 3])
    np.testing.assert_allclose(hist.bin_high_edges, [1, 2, 3, 4])


def test_find_bin_edges():
    hist = Histogram(4, 0.0, 4.0)
    assert hist.find_bin(0.0) == 0
    assert hist.find_bin(1.0) == 1
    assert hist.find_bin(3.999) == 3
    assert hist.find_bin(4.0) == 3
    assert hist.find_bin(-0.1) is None
    assert hist.find_bin(4.1) is None


def test_fill_ignores_out_of_range():
    hist = Histogram(2, 0.0, 2.0)
    for x in [0.5, 1.5, 1.5, 5.0, -1.0]:
        hist.fill(x)
    hist.fill_by(0.1, 3)
    assert list(hist.bin_contents) == [4, 2]
    assert hist.total == 6


def test_normalized_and_reset():
    hist = Histogram(2, 0.0, 2.0)
    np.testing.assert_allclose(hist.normalized(), [0.0, 0.0])
    hist.fill(0.5)
    hist.fill(1.5)
    hist.fill(1.5)
    hist.fill(1.5)
    np.testing.assert_allclose(hist.normalized(), [0.25, 0.75])
    hist.reset()
    assert hist.total == 0


@pytest.mark.parametrize("n_bins, low, high", [(0, 0.0, 1.0), (5, 1.0, 1.0), (5, 2.0, 1.0)])
def test_invalid(n_bins, low, high):
    with pytest.raises(ValueError):
        Histogram(n_bins, low, high)
