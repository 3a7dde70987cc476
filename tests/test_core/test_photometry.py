#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the observed-photometry containers.
"""

import numpy as np
import pytest

from stellarpdf.core import (
    MISSING_ERR,
    NBANDS,
    StarMagnitudes,
    StellarData,
    file_dtype,
)


class TestStarMagnitudes:
    """Per-star photometric record."""

    def test_basic_fields(self):
        star = StarMagnitudes(
            [15.0, 14.5, 14.2, 14.0, 13.9],
            [0.02, 0.02, 0.03, 0.03, 0.05],
            pi=0.001,
            pierr=0.0002,
            obj_id=7,
            l=120.0,
            b=-5.0,
        )
        assert star.nbands == NBANDS
        assert star.n_passbands() == 5
        assert star.obj_id == 7
        assert star.has_parallax()
        np.testing.assert_array_equal(star.N_det, np.ones(5, dtype=int))

    def test_missing_bands(self):
        star = StarMagnitudes(
            [15.0, 14.5, 0.0, 14.0, 0.0],
            [0.02, 0.02, MISSING_ERR, 0.03, np.inf],
        )
        assert star.n_passbands() == 3
        np.testing.assert_array_equal(
            star.band_mask, [True, True, False, True, False]
        )
        np.testing.assert_array_equal(star.N_det, [1, 1, 0, 1, 0])

    def test_missing_threshold(self):
        star = StarMagnitudes([1.0, 1.0], [0.999e9, 1.0e9])
        np.testing.assert_array_equal(star.band_mask, [True, False])

    def test_lnL_norm(self):
        err = np.array([0.02, 0.05, MISSING_ERR])
        star = StarMagnitudes([1.0, 2.0, 3.0], err)
        expected = np.sum(0.9189385332 + np.log(err[:2]))
        np.testing.assert_allclose(star.lnL_norm, expected)

    def test_read_only(self):
        star = StarMagnitudes([1.0, 2.0], [0.1, 0.1])
        with pytest.raises(ValueError):
            star.m[0] = 5.0
        with pytest.raises(ValueError):
            star.err[0] = 5.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            StarMagnitudes([1.0, 2.0, 3.0], [0.1, 0.1])

    def test_no_parallax(self):
        star = StarMagnitudes([1.0], [0.1])
        assert not star.has_parallax()
        star = StarMagnitudes([1.0], [0.1], pi=0.001, pierr=0.0)
        assert not star.has_parallax()


class TestRecords:
    """Conversion to and from photometry-file records."""

    def test_dtype_layout(self):
        dt = file_dtype(3)
        assert dt["mag"].shape == (3,)
        assert dt["N_det"].shape == (3,)
        assert dt["obj_id"] == np.dtype("u8")

    def test_from_record_error_floor(self):
        rec = np.zeros(1, dtype=file_dtype(3))[0]
        rec["mag"] = [15.0, 14.0, 13.0]
        rec["err"] = [0.0, 0.03, MISSING_ERR]
        rec["N_det"] = [2, 3, 0]
        rec["obj_id"] = 11
        rec["pi"], rec["pierr"] = np.nan, np.nan
        star = StarMagnitudes.from_record(rec, err_floor=0.04)

        np.testing.assert_allclose(star.err[:2], [0.04, 0.05], rtol=1e-6)
        assert star.n_passbands() == 2
        np.testing.assert_array_equal(star.N_det, [2, 3, 0])
        assert star.obj_id == 11

    def test_record_round_trip(self):
        star = StarMagnitudes(
            [15.0, 14.0], [0.02, 0.03], pi=0.002, pierr=0.0005, EBV=0.3, obj_id=5
        )
        back = StarMagnitudes.from_record(star.to_record(), err_floor=0.0)
        np.testing.assert_allclose(back.m, star.m, rtol=1e-6)
        np.testing.assert_allclose(back.err, star.err, rtol=1e-6)
        assert back.pi == star.pi
        assert back.obj_id == star.obj_id


class TestStellarData:
    """Per-pixel star container."""

    def test_container(self):
        stars = [StarMagnitudes([1.0], [0.1], obj_id=i) for i in range(3)]
        data = StellarData(stars, pix_name="pixel 9", nside=128)
        assert len(data) == 3
        assert data[1].obj_id == 1
        assert [s.obj_id for s in data] == [0, 1, 2]
        assert data.nside == 128

        data.append(StarMagnitudes([1.0], [0.1], obj_id=3))
        assert len(data) == 4
        data.clear()
        assert len(data) == 0

    def test_defaults(self):
        data = StellarData()
        assert len(data) == 0
        assert data.nested
        assert data.EBV == 5.0
