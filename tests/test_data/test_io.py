#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for HDF5 persistence of photometry and surfaces.
"""

import h5py
import numpy as np
import pytest

from stellarpdf.core import MISSING_ERR, Rect, StarMagnitudes, StellarData, file_dtype
from stellarpdf.data import (
    ImgWriteBuffer,
    list_pixels,
    load_stellar_data,
    load_surfaces,
    save_stellar_data,
)
from stellarpdf.dust import lb2pix


@pytest.fixture
def pixel():
    stars = [
        StarMagnitudes(
            [15.0, 14.5, 14.2],
            [0.02, 0.03, MISSING_ERR],
            pi=0.001,
            pierr=0.0003,
            obj_id=100 + i,
            l=30.0,
            b=5.0,
        )
        for i in range(4)
    ]
    return StellarData(
        stars, pix_name="pixel 77", healpix_index=77, nside=32, l=30.0, b=5.0, EBV=1.2
    )


class TestStellarDataIO:
    """Photometry round trips."""

    def test_round_trip(self, tmp_path, pixel):
        fname = str(tmp_path / "phot.h5")
        save_stellar_data(fname, pixel)
        loaded = load_stellar_data(fname, "pixel 77", err_floor=0.0)

        assert len(loaded) == 4
        assert loaded.healpix_index == 77
        assert loaded.nside == 32
        assert loaded.EBV == pytest.approx(1.2)
        assert [s.obj_id for s in loaded] == [100, 101, 102, 103]
        np.testing.assert_allclose(loaded[0].m, pixel[0].m, rtol=1e-6)
        np.testing.assert_allclose(loaded[0].err[:2], pixel[0].err[:2], rtol=1e-6)
        assert loaded[0].n_passbands() == 2
        assert loaded[0].pi == pytest.approx(0.001)

    def test_error_floor_applied(self, tmp_path, pixel):
        fname = str(tmp_path / "phot.h5")
        save_stellar_data(fname, pixel)
        loaded = load_stellar_data(fname, "pixel 77", err_floor=0.02)
        np.testing.assert_allclose(
            loaded[0].err[:2], np.sqrt(np.array([0.02, 0.03]) ** 2 + 0.02**2), rtol=1e-6
        )
        assert loaded[0].n_passbands() == 2

    def test_several_pixels(self, tmp_path, pixel):
        fname = str(tmp_path / "phot.h5")
        save_stellar_data(fname, pixel)
        other = StellarData(pixel.star[:2], pix_name="pixel 78")
        save_stellar_data(fname, other)
        assert list_pixels(fname) == ["pixel 77", "pixel 78"]
        # Overwriting replaces the dataset
        save_stellar_data(fname, other)
        assert len(load_stellar_data(fname, "pixel 78")) == 2

    def test_healpix_index_from_coordinates(self, tmp_path):
        fname = str(tmp_path / "phot.h5")
        records = np.zeros(2, dtype=file_dtype(2))
        records["mag"] = 15.0
        records["err"] = 0.05
        with h5py.File(fname, "w") as f:
            dset = f.create_group("photometry").create_dataset("pixel 1", data=records)
            dset.attrs["nside"] = 16
            dset.attrs["l"] = 200.0
            dset.attrs["b"] = -40.0

        loaded = load_stellar_data(fname, "pixel 1")
        assert loaded.healpix_index == lb2pix(16, 200.0, -40.0)
        assert loaded.EBV == 5.0
        assert loaded[1].n_passbands() == 2

    def test_missing_pixel(self, tmp_path, pixel):
        fname = str(tmp_path / "phot.h5")
        save_stellar_data(fname, pixel)
        with pytest.raises(KeyError):
            load_stellar_data(fname, "pixel 0")


class TestImgWriteBuffer:
    """Writing surfaces."""

    def setup_method(self):
        self.rect = Rect((0.0, 4.0), (7.0, 19.0), (14, 6))

    def test_write_and_load(self, tmp_path):
        np.random.seed(4)
        imgs = np.random.random((3, 14, 6))
        buf = ImgWriteBuffer(self.rect, 3)
        for img in imgs:
            buf.add(img)
        assert len(buf) == 3

        fname = str(tmp_path / "out.h5")
        buf.write(fname, "/pixel 5", "stellar pdfs")

        with h5py.File(fname, "r") as f:
            dset = f["/pixel 5"]["stellar pdfs"]
            assert dset.dtype == np.float32
            assert dset.compression == "gzip"
            np.testing.assert_allclose(dset.attrs["min"], [0.0, 4.0])
            np.testing.assert_allclose(dset.attrs["max"], [7.0, 19.0])
            np.testing.assert_array_equal(dset.attrs["nPix"], [14, 6])

        surfaces, rect = load_surfaces(fname, "pixel 5")
        np.testing.assert_allclose(surfaces, imgs, rtol=1e-6)
        assert rect == self.rect

    def test_buffer_grows(self, tmp_path):
        buf = ImgWriteBuffer(self.rect)
        for k in range(5):
            buf.add(np.full((14, 6), float(k)))
        fname = str(tmp_path / "out.h5")
        buf.write(fname, "/pix")
        surfaces, _ = load_surfaces(fname, "/pix")
        assert surfaces.shape == (5, 14, 6)
        np.testing.assert_array_equal(surfaces[:, 0, 0], np.arange(5.0))

    def test_shape_mismatch(self):
        buf = ImgWriteBuffer(self.rect, 1)
        with pytest.raises(ValueError):
            buf.add(np.zeros((6, 14)))
