#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Extinction coefficients and HEALPix coordinate utilities.

This module provides the reddening -> extinction mapping used by the
photometric fits and the coordinate helpers used to place a pixel on the
sky.
"""

import numpy as np
import healpy as hp  # type: ignore
from scipy.interpolate import interp1d

__all__ = ["ExtinctionModel", "lb2pix", "pix2lb"]


class ExtinctionModel(object):
    """
    Extinction per unit reddening in each passband as a function of R(V).

    Parameters
    ----------
    RV : array_like of shape `(NRV,)`
        Grid of R(V) values. Must be strictly increasing.

    A : array_like of shape `(NRV, Nbands)`
        Extinction `A_i / E` in each band at each R(V).

    Notes
    -----
    Coefficients are interpolated linearly in R(V) and extrapolated
    linearly beyond the tabulated range. A table with a single R(V) row is
    treated as independent of R(V).

    Examples
    --------
    >>> ext = ExtinctionModel([2.5, 3.3, 4.1],
    ...                       [[3.4, 2.6, 2.0, 1.6, 1.3],
    ...                        [3.2, 2.3, 1.7, 1.3, 1.1],
    ...                        [3.0, 2.1, 1.5, 1.2, 1.0]])
    >>> A_r = ext.get_A(3.3, 1)
    """

    def __init__(self, RV, A):
        RV = np.atleast_1d(np.asarray(RV, dtype=float))
        A = np.atleast_2d(np.asarray(A, dtype=float))
        if A.shape[0] != len(RV):
            raise ValueError(
                "Extinction table has {0} rows but {1} R(V) values were "
                "provided.".format(A.shape[0], len(RV))
            )
        if len(RV) > 1 and np.any(np.diff(RV) <= 0):
            raise ValueError("R(V) grid must be strictly increasing.")

        self.RV = RV
        self.A = A
        self.nbands = A.shape[1]
        if len(RV) > 1:
            self._interp = interp1d(
                RV, A, axis=0, kind="linear", fill_value="extrapolate"
            )
        else:
            self._interp = None

    @classmethod
    def constant(cls, A):
        """Extinction coefficients that do not depend on R(V)."""
        return cls([3.3], [np.asarray(A, dtype=float)])

    @classmethod
    def from_file(cls, fname):
        """
        Load a whitespace-separated table with columns
        `RV A_0 A_1 ... A_{Nbands-1}`. Lines starting with `#` are ignored.
        """
        table = np.atleast_2d(np.loadtxt(fname))
        return cls(table[:, 0], table[:, 1:])

    def get_A_vector(self, RV):
        """
        Extinction coefficients in every band at a given R(V).

        Returns
        -------
        A : `~numpy.ndarray` of shape `(Nbands,)`
        """
        if self._interp is None:
            return self.A[0].copy()
        return np.asarray(self._interp(RV), dtype=float)

    def get_A(self, RV, band):
        """Extinction coefficient of a single band at a given R(V)."""
        return float(self.get_A_vector(RV)[band])

    def __repr__(self):
        return f"ExtinctionModel(nbands={self.nbands}, nRV={len(self.RV)})"


def lb2pix(nside, l, b, nest=True):
    """
    Convert Galactic (l, b) coordinates to HEALPix pixel indices.

    Parameters
    ----------
    nside : int
        The HEALPix nside parameter. Must be a power of 2.
    l : float or array_like
        Galactic longitude in degrees.
    b : float or array_like
        Galactic latitude in degrees.
    nest : bool, optional
        Whether to use nested pixel ordering instead of ring ordering.
        Default is True.

    Returns
    -------
    pix_ids : int or ndarray
        HEALPix pixel indices corresponding to the input (l, b) coordinates.
        Invalid coordinates (absolute b > 90 deg) return -1.
    """
    theta = np.radians(90.0 - np.asarray(b, dtype=float))
    phi = np.radians(np.asarray(l, dtype=float))

    # Handle scalar inputs
    if not hasattr(l, "__len__") and not hasattr(b, "__len__"):
        if (b < -90.0) or (b > 90.0):
            return -1
        return int(hp.pixelfunc.ang2pix(nside, theta, phi, nest=nest))

    theta, phi = np.broadcast_arrays(theta, phi)
    pix_idx = np.full(theta.shape, -1, dtype="i8")
    valid_idx = (theta >= 0.0) & (theta <= np.pi)
    pix_idx[valid_idx] = hp.pixelfunc.ang2pix(
        nside, theta[valid_idx], phi[valid_idx], nest=nest
    )

    return pix_idx


def pix2lb(nside, pix, nest=True):
    """
    Galactic (l, b) coordinates in degrees of HEALPix pixel centres.
    """
    theta, phi = hp.pixelfunc.pix2ang(nside, pix, nest=nest)
    return np.degrees(phi), 90.0 - np.degrees(theta)
