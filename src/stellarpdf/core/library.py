#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Empirical stellar-type library.

The library tabulates absolute magnitudes on a regular grid of absolute
r-band magnitude `Mr` and metallicity `[Fe/H]`, along with a luminosity
function in `Mr`. Not every grid cell needs to hold a stellar type.

Classes
-------
StellarModel : Grid of stellar SEDs with a luminosity function
SEDTable : Flattened list of the SEDs present in a library

Functions
---------
tabulate_seds : Sweep a library into an `SEDTable`
load_stellar_model : Read a `StellarModel` from HDF5
"""

import warnings
from collections import namedtuple

import h5py
import numpy as np
from scipy.interpolate import interp1d

__all__ = ["StellarModel", "SEDTable", "tabulate_seds", "load_stellar_model"]


SEDTable = namedtuple("SEDTable", ["absmag", "Mr", "FeH", "log_lf", "index"])
SEDTable.__doc__ = """
Every stellar type present in a library, flattened in library order.

absmag : `~numpy.ndarray` of shape `(Nsed, Nbands)`
Mr, FeH, log_lf : `~numpy.ndarray` of shape `(Nsed,)`
index : `~numpy.ndarray` of shape `(Nsed, 2)` with `(Mr_idx, FeH_idx)`
"""


class StellarModel(object):
    """
    Grid of stellar SEDs indexed by `(Mr, [Fe/H])`.

    Parameters
    ----------
    Mr : array_like of shape `(N_Mr,)`
        Absolute r-band magnitude grid.

    FeH : array_like of shape `(N_FeH,)`
        Metallicity grid.

    absmag : array_like of shape `(N_Mr, N_FeH, Nbands)`
        Absolute magnitudes of each stellar type.

    valid : array_like of shape `(N_Mr, N_FeH)`, optional
        Which cells hold a stellar type. Defaults to every cell whose
        magnitudes are all finite.

    lf_Mr, lf_lnp : array_like, optional
        Luminosity function, tabulated as `ln p(Mr)` at `lf_Mr`. If not
        provided, the luminosity function is flat.
    """

    def __init__(self, Mr, FeH, absmag, valid=None, lf_Mr=None, lf_lnp=None):
        self.Mr = np.asarray(Mr, dtype=float)
        self.FeH = np.asarray(FeH, dtype=float)
        self.absmag = np.asarray(absmag, dtype=float)
        expected = (len(self.Mr), len(self.FeH))
        if self.absmag.ndim != 3 or self.absmag.shape[:2] != expected:
            raise ValueError(
                "absmag must have shape (N_Mr, N_FeH, Nbands) = {0} + (Nbands,), "
                "got {1}.".format(expected, self.absmag.shape)
            )
        if valid is None:
            valid = np.all(np.isfinite(self.absmag), axis=-1)
        self.valid = np.asarray(valid, dtype=bool)
        if self.valid.shape != expected:
            raise ValueError(f"valid must have shape {expected}, got {self.valid.shape}")
        self.nbands = self.absmag.shape[2]

        if lf_Mr is not None and lf_lnp is not None:
            self.lf_Mr = np.asarray(lf_Mr, dtype=float)
            self.lf_lnp = np.asarray(lf_lnp, dtype=float)
            self._lf_interpolator = interp1d(
                self.lf_Mr, self.lf_lnp, kind="linear", fill_value="extrapolate"
            )
        else:
            self.lf_Mr = self.lf_lnp = None
            self._lf_interpolator = None

    def get_N_Mr(self):
        return len(self.Mr)

    def get_N_FeH(self):
        return len(self.FeH)

    def get_sed(self, Mr_idx, FeH_idx):
        """
        Look up the stellar type in one grid cell.

        Returns
        -------
        sed : tuple or None
            `(absmag, Mr, FeH)`, or `None` if the cell is empty.
        """
        if not self.valid[Mr_idx, FeH_idx]:
            return None
        return (
            self.absmag[Mr_idx, FeH_idx].copy(),
            self.Mr[Mr_idx],
            self.FeH[FeH_idx],
        )

    def get_log_lf(self, Mr):
        """Log-luminosity function evaluated at `Mr`."""
        if self._lf_interpolator is None:
            return np.zeros_like(np.asarray(Mr, dtype=float))
        return self._lf_interpolator(Mr)

    def __repr__(self):
        return (
            f"StellarModel(N_Mr={self.get_N_Mr()}, N_FeH={self.get_N_FeH()}, "
            f"nbands={self.nbands}, nvalid={int(self.valid.sum())})"
        )


def tabulate_seds(stellar_model):
    """
    Collect every stellar type present in a library.

    Any object exposing `get_N_Mr`, `get_N_FeH`, `get_sed` and
    `get_log_lf` can be swept. Empty cells are skipped with a warning.

    Parameters
    ----------
    stellar_model : `StellarModel`
        The stellar-type library.

    Returns
    -------
    table : `SEDTable`
    """
    N_Mr, N_FeH = stellar_model.get_N_Mr(), stellar_model.get_N_FeH()

    absmag, Mr, FeH, index = [], [], [], []
    missing = []
    for Mr_idx in range(N_Mr):
        for FeH_idx in range(N_FeH):
            sed = stellar_model.get_sed(Mr_idx, FeH_idx)
            if sed is None:
                missing.append((Mr_idx, FeH_idx))
                continue
            absmag.append(sed[0])
            Mr.append(sed[1])
            FeH.append(sed[2])
            index.append((Mr_idx, FeH_idx))

    if missing:
        warnings.warn(
            "{0} of {1} SEDs not in library (first: {2}); skipping.".format(
                len(missing), N_Mr * N_FeH, missing[0]
            )
        )

    Mr = np.array(Mr, dtype=float)
    if len(absmag) > 0:
        absmag = np.array(absmag, dtype=float)
        log_lf = np.asarray(stellar_model.get_log_lf(Mr), dtype=float)
    else:
        absmag = np.zeros((0, 0))
        log_lf = np.zeros(0)

    return SEDTable(
        absmag=absmag,
        Mr=Mr,
        FeH=np.array(FeH, dtype=float),
        log_lf=log_lf,
        index=np.array(index, dtype=int).reshape(-1, 2),
    )


def load_stellar_model(fname, group="/"):
    """
    Read a stellar-type library from HDF5.

    The group must contain datasets `Mr`, `FeH` and `absmag`, and may
    contain `valid` and a luminosity function `lf` of shape `(2, N)`
    holding `(Mr, ln p)`.

    Parameters
    ----------
    fname : str
        Path to the HDF5 file.

    group : str, optional
        Group holding the library. Default is the file root.

    Returns
    -------
    model : `StellarModel`
    """
    with h5py.File(fname, "r") as f:
        g = f[group]
        Mr = g["Mr"][:]
        FeH = g["FeH"][:]
        absmag = g["absmag"][:]
        valid = g["valid"][:] if "valid" in g else None
        if "lf" in g:
            lf_Mr, lf_lnp = g["lf"][:]
        else:
            lf_Mr = lf_lnp = None

    return StellarModel(Mr, FeH, absmag, valid=valid, lf_Mr=lf_Mr, lf_lnp=lf_lnp)
