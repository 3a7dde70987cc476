#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Reddening-dependent smoothing of stellar surfaces.

Stars in a pixel sample a finite solid angle, so two stars at the same
distance can sit behind slightly different amounts of dust. This module
models that angular scatter as a fractional smoothing of E(B-V) which
grows linearly with E(B-V) and with the angular size of the pixel.
"""

import numpy as np
import healpy as hp  # type: ignore

__all__ = ["EBVSmoothing"]


class EBVSmoothing(object):
    """
    Fractional E(B-V) smoothing as a function of pixel scale and E(B-V).

    Parameters
    ----------
    alpha_coeff : 2-tuple of floats
        `(slope, intercept)` of the constant term in arcminutes:
        `alpha = alpha_coeff[0] * arcmin + alpha_coeff[1]`.

    beta_coeff : 2-tuple of floats
        `(slope, intercept)` of the term linear in E(B-V):
        `beta = beta_coeff[0] * arcmin + beta_coeff[1]`.

    pct_smoothing_min : float, optional
        Floor on the fractional smoothing. Default is `0.`.

    pct_smoothing_max : float, optional
        Ceiling on the fractional smoothing. A value `<= 0` disables the
        smoothing pass altogether. Default is `0.`.

    Notes
    -----
    The fractional smoothing at reddening `E` is::

        pct(E) = clip(alpha + beta * E, pct_smoothing_min, pct_smoothing_max)

    where the pixel scale is the HEALPix resolution at the pixel's `nside`.
    """

    def __init__(
        self, alpha_coeff, beta_coeff, pct_smoothing_min=0.0, pct_smoothing_max=0.0
    ):
        self.alpha_coeff = tuple(float(c) for c in alpha_coeff)
        self.beta_coeff = tuple(float(c) for c in beta_coeff)
        if len(self.alpha_coeff) != 2 or len(self.beta_coeff) != 2:
            raise ValueError("Smoothing coefficients must be (slope, intercept) pairs.")
        if pct_smoothing_max > 0.0 and pct_smoothing_min > pct_smoothing_max:
            raise ValueError(
                "pct_smoothing_min ({0}) exceeds pct_smoothing_max "
                "({1}).".format(pct_smoothing_min, pct_smoothing_max)
            )
        self.pct_smoothing_min = float(pct_smoothing_min)
        self.pct_smoothing_max = float(pct_smoothing_max)

    def get_pct_smoothing_min(self):
        return self.pct_smoothing_min

    def get_pct_smoothing_max(self):
        return self.pct_smoothing_max

    @staticmethod
    def nside_2_arcmin(nside):
        """Approximate side length of a HEALPix pixel in arcminutes."""
        return hp.nside2resol(int(nside), arcmin=True)

    def calc_pct_smoothing(self, nside, EBV_min, EBV_max, n_samples):
        """
        Fractional smoothing evaluated on an evenly spaced reddening grid.

        Parameters
        ----------
        nside : int
            HEALPix `nside` of the pixel.

        EBV_min, EBV_max : float
            Reddening range spanned by the samples (inclusive).

        n_samples : int
            Number of reddening samples.

        Returns
        -------
        sigma_pct : `~numpy.ndarray` of shape `(n_samples,)`
            Fractional smoothing at each sample.
        """
        arcmin = self.nside_2_arcmin(nside)
        alpha = self.alpha_coeff[0] * arcmin + self.alpha_coeff[1]
        beta = self.beta_coeff[0] * arcmin + self.beta_coeff[1]

        EBV = np.linspace(EBV_min, EBV_max, int(n_samples))
        pct = alpha + beta * EBV

        return np.clip(pct, self.pct_smoothing_min, self.pct_smoothing_max)

    def __repr__(self):
        return (
            f"EBVSmoothing(alpha_coeff={self.alpha_coeff}, "
            f"beta_coeff={self.beta_coeff}, "
            f"pct_smoothing=({self.pct_smoothing_min}, {self.pct_smoothing_max}))"
        )
