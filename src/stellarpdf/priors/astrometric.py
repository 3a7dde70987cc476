#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Astrometric priors.

The parallax constraint compares the parallax implied by a distance
modulus with the measured one. Parallaxes are in arcseconds throughout, so
that `parallax = 10**(-(mu + 5) / 5)`.
"""

import numpy as np

__all__ = ["parallax_from_mu", "logp_parallax"]


def parallax_from_mu(mu):
    """
    Parallax in arcseconds of a star at distance modulus `mu`.
    """
    return 10.0 ** (-(np.asarray(mu, dtype=float) + 5.0) / 5.0)


def logp_parallax(parallaxes, p_meas, p_err):
    r"""
    Log-likelihood of model parallaxes given a Gaussian measurement.

    Parameters
    ----------
    parallaxes : array_like
        Model parallax values.
    p_meas : float
        Measured parallax (same units as `parallaxes`).
    p_err : float
        Parallax measurement uncertainty.

    Returns
    -------
    logp : array_like
        Log-probability for the input parallax values. Returns 0 (uniform
        prior) if the measurement is invalid.

    Notes
    -----
    Only the :math:`-\frac{1}{2}\chi^2` term is returned; the Gaussian
    normalization is constant for a given star and cancels when the
    weights of a star's stellar types are normalized.
    """
    parallaxes = np.asarray(parallaxes, dtype=float)

    if np.isfinite(p_meas) and np.isfinite(p_err) and p_err > 0:
        chi2 = (parallaxes - p_meas) ** 2 / p_err**2
        logp = -0.5 * chi2
    else:
        logp = np.zeros_like(parallaxes, dtype=float)

    return logp
