#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Observed photometry containers.

This module defines the per-star photometric record consumed by the
fitting code and the per-pixel collection of such records.

Classes
-------
StarMagnitudes : Observed magnitudes, errors and astrometry of one star
StellarData : All stars observed in one sky pixel, plus pixel metadata

Notes
-----
A band is *missing* when its error is non-finite or at least
`MISSING_THRESH` (files conventionally store `MISSING_ERR = 1e10`). Missing
bands are masked out of every sum over bands.
"""

import numpy as np

__all__ = [
    "NBANDS",
    "MISSING_ERR",
    "MISSING_THRESH",
    "file_dtype",
    "StarMagnitudes",
    "StellarData",
]

# Default number of passbands (PS1 grizy).
NBANDS = 5

# Sentinel error for a band without a measurement, and the detection cut.
MISSING_ERR = 1.0e10
MISSING_THRESH = 1.0e9

# log(sqrt(2 pi))
_LN_SQRT_2PI = 0.9189385332


def file_dtype(nbands=NBANDS):
    """
    Structured dtype of one star in a stellar photometry file.

    Parameters
    ----------
    nbands : int, optional
        Number of passbands. Default is `NBANDS`.

    Returns
    -------
    dtype : `~numpy.dtype`
        Record layout `(obj_id, l, b, pi, pierr, mag, err, maglimit,
        N_det, EBV)`.
    """
    return np.dtype(
        [
            ("obj_id", "u8"),
            ("l", "f8"),
            ("b", "f8"),
            ("pi", "f8"),
            ("pierr", "f8"),
            ("mag", "f4", (nbands,)),
            ("err", "f4", (nbands,)),
            ("maglimit", "f4", (nbands,)),
            ("N_det", "u4", (nbands,)),
            ("EBV", "f4"),
        ]
    )


def _frozen(arr, dtype=float):
    arr = np.array(arr, dtype=dtype)
    arr.setflags(write=False)
    return arr


class StarMagnitudes(object):
    """
    Photometry of a single star.

    Parameters
    ----------
    m : array_like of shape `(Nbands,)`
        Observed apparent magnitudes.

    err : array_like of shape `(Nbands,)`
        Magnitude errors. Errors `>= MISSING_THRESH` (or non-finite) flag a
        band as missing.

    maglimit : array_like of shape `(Nbands,)`, optional
        Limiting magnitude in each band. Default is `23.` in every band.

    N_det : array_like of shape `(Nbands,)`, optional
        Number of detections in each band. Default is `1` for every
        non-missing band and `0` otherwise.

    pi : float, optional
        Parallax in arcseconds. Default is `nan` (no measurement).

    pierr : float, optional
        Parallax error in arcseconds. Default is `nan`.

    EBV : float, optional
        Reddening estimate along the sightline. Default is `1.`.

    obj_id : int, optional
        Object identifier. Default is `0`.

    l, b : float, optional
        Galactic coordinates in degrees. Default is `0.`.

    Notes
    -----
    Arrays are stored read-only: a record is never modified after it is
    built.
    """

    def __init__(
        self,
        m,
        err,
        maglimit=None,
        N_det=None,
        pi=np.nan,
        pierr=np.nan,
        EBV=1.0,
        obj_id=0,
        l=0.0,
        b=0.0,
    ):
        m = np.atleast_1d(np.asarray(m, dtype=float))
        err = np.atleast_1d(np.asarray(err, dtype=float))
        if m.ndim != 1 or m.shape != err.shape:
            raise ValueError(
                "Magnitudes and errors must be 1-D arrays of the same "
                "length (got {0} and {1}).".format(m.shape, err.shape)
            )
        nbands = len(m)

        self.m = _frozen(m)
        self.err = _frozen(err)
        if maglimit is None:
            maglimit = np.full(nbands, 23.0)
        self.maglimit = _frozen(maglimit)
        mask = self._mask(self.err)
        if N_det is None:
            N_det = mask.astype(int)
        self.N_det = _frozen(N_det, dtype=int)
        self.band_mask = _frozen(mask, dtype=bool)

        self.pi = float(pi)
        self.pierr = float(pierr)
        self.EBV = float(EBV)
        self.obj_id = int(obj_id)
        self.l = float(l)
        self.b = float(b)

        # Gaussian normalization of the likelihood over detected bands
        self.lnL_norm = float(np.sum(_LN_SQRT_2PI + np.log(self.err[mask])))

    @staticmethod
    def _mask(err):
        with np.errstate(invalid="ignore"):
            return np.isfinite(err) & (err < MISSING_THRESH)

    @classmethod
    def from_record(cls, rec, err_floor=0.02):
        """
        Build a star from one row of a photometry file.

        The error floor is added in quadrature to every band, so missing
        bands (stored with `MISSING_ERR`) remain missing.

        Parameters
        ----------
        rec : `~numpy.void`
            A record with the layout returned by `file_dtype`.

        err_floor : float, optional
            Error floor in magnitudes. Default is `0.02`.

        Returns
        -------
        star : `StarMagnitudes`
        """
        err = np.asarray(rec["err"], dtype=float)
        err = np.sqrt(err * err + err_floor * err_floor)
        return cls(
            rec["mag"],
            err,
            maglimit=rec["maglimit"],
            N_det=rec["N_det"],
            pi=rec["pi"],
            pierr=rec["pierr"],
            EBV=rec["EBV"],
            obj_id=rec["obj_id"],
            l=rec["l"],
            b=rec["b"],
        )

    @property
    def nbands(self):
        """Number of bands in the record (including missing ones)."""
        return len(self.m)

    def n_passbands(self):
        """Number of non-missing bands."""
        return int(np.sum(self.band_mask))

    def has_parallax(self):
        """Whether the record carries a usable parallax measurement."""
        return bool(
            np.isfinite(self.pi) and np.isfinite(self.pierr) and self.pierr > 0
        )

    def to_record(self, nbands=None):
        """Pack the star into a record with the `file_dtype` layout."""
        rec = np.zeros(1, dtype=file_dtype(nbands or self.nbands))[0]
        rec["obj_id"] = self.obj_id
        rec["l"], rec["b"] = self.l, self.b
        rec["pi"], rec["pierr"] = self.pi, self.pierr
        rec["mag"] = self.m
        rec["err"] = self.err
        rec["maglimit"] = self.maglimit
        rec["N_det"] = self.N_det
        rec["EBV"] = self.EBV
        return rec

    def __repr__(self):
        return (
            f"StarMagnitudes(obj_id={self.obj_id}, "
            f"nbands={self.nbands}, "
            f"n_passbands={self.n_passbands()})"
        )


class StellarData(object):
    """
    Photometry of every star in one sky pixel.

    Parameters
    ----------
    stars : iterable of `StarMagnitudes`, optional
        The stars in the pixel.

    pix_name : str, optional
        Name of the pixel, used as the output group name.
        Default is `'pixel 0'`.

    healpix_index : int, optional
        HEALPix index of the pixel. Default is `0`.

    nside : int, optional
        HEALPix `nside` of the pixel, which sets its angular scale.
        Default is `512`.

    nested : bool, optional
        Whether `healpix_index` uses nested ordering. Default is `True`.

    l, b : float, optional
        Galactic coordinates of the pixel centre in degrees.

    EBV : float, optional
        Reddening estimate for the pixel. Default is `5.`.
    """

    def __init__(
        self,
        stars=None,
        pix_name="pixel 0",
        healpix_index=0,
        nside=512,
        nested=True,
        l=0.0,
        b=0.0,
        EBV=5.0,
    ):
        self.star = list(stars) if stars is not None else []
        self.pix_name = pix_name
        self.healpix_index = int(healpix_index)
        self.nside = int(nside)
        self.nested = bool(nested)
        self.l = float(l)
        self.b = float(b)
        self.EBV = float(EBV)

    def __getitem__(self, index):
        return self.star[index]

    def __len__(self):
        return len(self.star)

    def __iter__(self):
        return iter(self.star)

    def append(self, star):
        """Add a star to the pixel."""
        self.star.append(star)

    def clear(self):
        """Remove every star from the pixel."""
        self.star.clear()

    def __repr__(self):
        return (
            f"StellarData(pix_name={self.pix_name!r}, "
            f"nside={self.nside}, nstars={len(self)})"
        )
