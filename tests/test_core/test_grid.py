#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the rectangular grid geometry.
"""

import numpy as np
import pytest

from stellarpdf.core import Rect


class TestRectConstruction:
    """Building grids and validating their bounds."""

    def test_from_bounds(self):
        rect = Rect.from_bounds((-0.2, 7.2, 3.75, 19.25, 740, 124))
        assert rect.shape == (740, 124)
        np.testing.assert_allclose(rect.dx, [0.01, 0.125])

    def test_centers_and_edges(self):
        rect = Rect((0.0, 0.0), (4.0, 20.0), (5, 5))
        np.testing.assert_allclose(rect.centers(0), [0.4, 1.2, 2.0, 2.8, 3.6])
        np.testing.assert_allclose(rect.centers(1), [2.0, 6.0, 10.0, 14.0, 18.0])
        np.testing.assert_allclose(rect.edges(1), [0.0, 4.0, 8.0, 12.0, 16.0, 20.0])

    @pytest.mark.parametrize(
        "bounds",
        [
            (1.0, 1.0, 0.0, 1.0, 5, 5),
            (0.0, 1.0, 2.0, 1.0, 5, 5),
            (0.0, 1.0, 0.0, 1.0, 0, 5),
            (0.0, np.inf, 0.0, 1.0, 5, 5),
        ],
    )
    def test_invalid_bounds(self, bounds):
        with pytest.raises(ValueError):
            Rect.from_bounds(bounds)

    def test_malformed_bounds(self):
        with pytest.raises(ValueError):
            Rect.from_bounds((0.0, 1.0, 0.0, 1.0))

    def test_equality(self):
        a = Rect((0.0, 0.0), (1.0, 2.0), (10, 20))
        b = Rect.from_bounds((0.0, 1.0, 0.0, 2.0, 10, 20))
        c = Rect((0.0, 0.0), (1.0, 2.0), (10, 21))
        assert a == b
        assert a != c


class TestRectLookup:
    """Bin and interpolant lookup."""

    def setup_method(self):
        self.rect = Rect((0.0, 0.0), (4.0, 20.0), (5, 5))

    def test_get_index(self):
        assert self.rect.get_index(2.1, 10.5) == (2, 2, True)
        assert self.rect.get_index(0.0, 0.0) == (0, 0, True)
        assert self.rect.get_index(4.0, 10.0)[2] is False
        assert self.rect.get_index(-0.01, 10.0)[2] is False

    def test_interpolant_at_bin_center(self):
        i0, i1, a0, a1, ok = self.rect.get_interpolant(2.0, 10.0)
        assert ok
        assert (i0, i1) == (2, 2)
        np.testing.assert_allclose([a0, a1], [0.0, 0.0], atol=1e-12)

    def test_interpolant_fractions(self):
        i0, i1, a0, a1, ok = self.rect.get_interpolant(2.2, 11.0)
        assert ok
        assert (i0, i1) == (2, 2)
        np.testing.assert_allclose([a0, a1], [0.25, 0.25])

    def test_interpolant_requires_all_neighbours(self):
        # Inside the grid but outside the outermost bin centres
        assert not self.rect.get_interpolant(0.2, 10.0)[4]
        assert not self.rect.get_interpolant(2.0, 19.0)[4]
        # Last usable point lies just below the final bin centre
        assert self.rect.get_interpolant(3.59, 17.9)[4]
        assert not self.rect.get_interpolant(3.61, 10.0)[4]

    def test_interpolant_nan(self):
        assert not self.rect.get_interpolant(np.nan, 10.0)[4]


class TestRectCrop:
    """Cropping to a sub-range."""

    def test_crop_default_range(self):
        rect = Rect.from_bounds((-0.2, 7.2, 3.75, 19.25, 740, 124))
        cropped, (s0, s1) = rect.crop(0.0, 7.0, 4.0, 19.0)
        assert cropped.shape == (700, 120)
        np.testing.assert_allclose(cropped.min, [0.0, 4.0], atol=1e-9)
        np.testing.assert_allclose(cropped.max, [7.0, 19.0], atol=1e-9)
        np.testing.assert_allclose(cropped.dx, rect.dx)
        assert (s0.start, s0.stop) == (20, 720)
        assert (s1.start, s1.stop) == (2, 122)

    def test_crop_clips_to_grid(self):
        rect = Rect((0.0, 0.0), (1.0, 1.0), (10, 10))
        cropped, _ = rect.crop(-5.0, 5.0, 0.5, 5.0)
        assert cropped.shape == (10, 5)

    def test_crop_empty(self):
        rect = Rect((0.0, 0.0), (1.0, 1.0), (10, 10))
        with pytest.raises(ValueError):
            rect.crop(0.5, 0.5, 0.0, 1.0)
