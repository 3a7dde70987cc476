#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
HDF5 input and output.

Stellar photometry is stored one pixel per dataset, as a table of records
with the layout of `~stellarpdf.core.photometry.file_dtype` and the pixel
metadata as attributes. Output surfaces are stored one pixel per group, as
a single `(Nstars, N_E, N_mu)` dataset whose attributes describe the grid.

Functions
---------
load_stellar_data : Read the photometry of one pixel
save_stellar_data : Write the photometry of one pixel
list_pixels : Names of the pixel datasets in a photometry file
load_surfaces : Read the surfaces written for one pixel

Classes
-------
ImgWriteBuffer : Accumulate surfaces and write them out in one dataset
"""

import h5py
import numpy as np

from ..core.grid import Rect
from ..core.photometry import StarMagnitudes, StellarData, file_dtype
from ..dust.extinction import lb2pix

__all__ = [
    "load_stellar_data",
    "save_stellar_data",
    "list_pixels",
    "ImgWriteBuffer",
    "load_surfaces",
]


def list_pixels(fname, group="photometry"):
    """
    Names of the pixel datasets in a photometry file.

    Parameters
    ----------
    fname : str
        Path to the HDF5 file.

    group : str, optional
        Group holding one dataset per pixel. Default is `'photometry'`.

    Returns
    -------
    pix_names : list of str
    """
    with h5py.File(fname, "r") as f:
        return sorted(f[group].keys())


def load_stellar_data(fname, pix_name, group="photometry", err_floor=0.02,
                      default_EBV=5.0):
    """
    Read the photometry of a single pixel.

    Parameters
    ----------
    fname : str
        Path to the HDF5 file.

    pix_name : str
        Name of the pixel dataset.

    group : str, optional
        Group holding one dataset per pixel. Default is `'photometry'`.

    err_floor : float, optional
        Error floor (mag) added in quadrature to every band.
        Default is `0.02`.

    default_EBV : float, optional
        Pixel reddening used when the dataset carries no `EBV` attribute.
        Default is `5.`.

    Returns
    -------
    stellar_data : `~stellarpdf.core.photometry.StellarData`
    """
    with h5py.File(fname, "r") as f:
        dset = f[group][pix_name]
        records = dset[:]
        attrs = dict(dset.attrs)

    nside = int(attrs.get("nside", 512))
    nested = bool(attrs.get("nested", True))
    l = float(attrs.get("l", 0.0))
    b = float(attrs.get("b", 0.0))
    if "healpix_index" in attrs:
        healpix_index = int(attrs["healpix_index"])
    else:
        healpix_index = lb2pix(nside, l, b, nest=nested)

    stars = [StarMagnitudes.from_record(rec, err_floor=err_floor) for rec in records]

    return StellarData(
        stars,
        pix_name=pix_name,
        healpix_index=healpix_index,
        nside=nside,
        nested=nested,
        l=l,
        b=b,
        EBV=float(attrs.get("EBV", default_EBV)),
    )


def save_stellar_data(fname, stellar_data, group="photometry", compression=9):
    """
    Write the photometry of a pixel, appending to `fname` if it exists.

    Errors are written as stored on the stars, i.e. including any error
    floor applied when they were loaded.
    """
    nbands = stellar_data[0].nbands if len(stellar_data) else 0
    records = np.zeros(len(stellar_data), dtype=file_dtype(nbands))
    for i, star in enumerate(stellar_data):
        records[i] = star.to_record(nbands)

    with h5py.File(fname, "a") as f:
        g = f.require_group(group)
        if stellar_data.pix_name in g:
            del g[stellar_data.pix_name]
        dset = g.create_dataset(
            stellar_data.pix_name,
            data=records,
            compression="gzip",
            compression_opts=compression,
        )
        dset.attrs["healpix_index"] = stellar_data.healpix_index
        dset.attrs["nside"] = stellar_data.nside
        dset.attrs["nested"] = stellar_data.nested
        dset.attrs["l"] = stellar_data.l
        dset.attrs["b"] = stellar_data.b
        dset.attrs["EBV"] = stellar_data.EBV


class ImgWriteBuffer(object):
    """
    Collect surfaces on a common grid and write them as one dataset.

    Parameters
    ----------
    rect : `~stellarpdf.core.grid.Rect`
        Grid of the surfaces.

    N_images : int, optional
        Expected number of surfaces, used to preallocate the buffer.
        Default is `0`.
    """

    def __init__(self, rect, N_images=0):
        self.rect = rect
        self._buf = np.zeros((max(int(N_images), 0),) + rect.shape, dtype=np.float32)
        self.length = 0

    def add(self, img):
        """Append one surface."""
        img = np.asarray(img)
        if img.shape != self.rect.shape:
            raise ValueError(
                f"Surface shape {img.shape} does not match grid {self.rect.shape}."
            )
        if self.length >= len(self._buf):
            grow = max(1, len(self._buf))
            self._buf = np.concatenate(
                [self._buf, np.zeros((grow,) + self.rect.shape, dtype=np.float32)]
            )
        self._buf[self.length] = img
        self.length += 1

    def write(self, fname, group, img=None, compression=9):
        """
        Write the buffered surfaces to `fname[group][img]`.

        Parameters
        ----------
        fname : str
            Output HDF5 file (opened in append mode).

        group : str
            Group name, typically `'/<pixel name>'`.

        img : str, optional
            Dataset name. Default is `'stellar pdfs'`.

        compression : int, optional
            gzip level. Default is `9`.
        """
        if img is None:
            img = "stellar pdfs"
        with h5py.File(fname, "a") as f:
            g = f.require_group(group)
            if img in g:
                del g[img]
            dset = g.create_dataset(
                img,
                data=self._buf[: self.length],
                compression="gzip",
                compression_opts=compression,
                chunks=True if self.length > 0 else None,
            )
            dset.attrs["min"] = self.rect.min
            dset.attrs["max"] = self.rect.max
            dset.attrs["nPix"] = self.rect.N_bins

    def __len__(self):
        return self.length


def load_surfaces(fname, pix_name, img="stellar pdfs"):
    """
    Read the surfaces written for one pixel.

    Returns
    -------
    surfaces : `~numpy.ndarray` of shape `(Nstars, N0, N1)`
        The surfaces.

    rect : `~stellarpdf.core.grid.Rect`
        Their grid.
    """
    group = pix_name if pix_name.startswith("/") else "/" + pix_name
    with h5py.File(fname, "r") as f:
        dset = f[group][img]
        surfaces = dset[:]
        rect = Rect(dset.attrs["min"], dset.attrs["max"], dset.attrs["nPix"])

    return surfaces, rect
