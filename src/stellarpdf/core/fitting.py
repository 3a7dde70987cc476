#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Closed-form linear fits of distance modulus and reddening.

For a fixed stellar type with absolute magnitudes `M_i`, the observed
magnitudes are modelled as::

    m_i = M_i + mu + E * A_i + noise_i,    noise_i ~ N(0, sigma_i^2)

which is linear in `(mu, E)`. The maximum-likelihood solution therefore
follows from the 2x2 normal equations, solved here explicitly rather than
through a general linear solver.

Functions
---------
star_covariance : Inverse covariance of the ML `(mu, E)`
    Depends only on the errors and extinction coefficients
star_max_likelihood : ML `(mu, E)` and chi^2 for one or many SEDs
calc_star_chi2 : chi^2 at an arbitrary `(mu, E)`
linear_fit : ML fit packaged as a `LinearFitParams`

Notes
-----
Writing `w_i = 1 / sigma_i^2`, the inverse covariance of `(mu, E)` is::

    [[ sum(w_i),      sum(A_i w_i)   ],
     [ sum(A_i w_i),  sum(A_i^2 w_i) ]]

The ML solution is obtained by applying the inverse of this matrix to
`(sum(dm_i w_i), sum(dm_i A_i w_i))`. The determinant is regularized by
`DET_REG`, so a star whose bands cannot separate `mu` from `E` (a single
band, or identical `A_i`) still gets a finite, if arbitrary, solution.

Bands flagged as missing are excluded from every sum.
"""

import numpy as np

from ..utils.math import DET_REG, det2

__all__ = [
    "LinearFitParams",
    "band_terms",
    "star_covariance",
    "star_max_likelihood",
    "calc_star_chi2",
    "linear_fit",
]


class LinearFitParams(object):
    """
    Result of a linear `(mu, E)` fit.

    Parameters
    ----------
    mean : array_like of shape `(2,)`
        ML `(mu, E)`.

    inv_cov : array_like of shape `(2, 2)`
        Inverse covariance of `(mu, E)`.

    chi2 : float
        chi^2 of the ML solution.
    """

    def __init__(self, mean, inv_cov, chi2):
        self.mean = np.array(mean, dtype=float)
        self.inv_cov = np.array(inv_cov, dtype=float)
        self.chi2 = float(chi2)

    @property
    def mu(self):
        return self.mean[0]

    @property
    def E(self):
        return self.mean[1]

    def __repr__(self):
        return (
            f"LinearFitParams(mu={self.mu:.4f}, E={self.E:.4f}, "
            f"chi2={self.chi2:.4f})"
        )


def band_terms(mags_obs, ext_model, RV=3.3):
    """
    Observed magnitudes, inverse variances and extinction coefficients of
    the non-missing bands of a star.

    Parameters
    ----------
    mags_obs : `~stellarpdf.core.photometry.StarMagnitudes`
        Observed photometry.

    ext_model : `~stellarpdf.dust.ExtinctionModel`
        Extinction model.

    RV : float, optional
        Extinction-law slope R(V). Default is `3.3`.

    Returns
    -------
    m, ivar, A : `~numpy.ndarray` of shape `(Nvalid,)`
        Magnitudes, `1 / err^2` and `A_i` of the valid bands.

    mask : `~numpy.ndarray` of shape `(Nbands,)`
        Which bands are valid.
    """
    A = ext_model.get_A_vector(RV)
    if len(A) != mags_obs.nbands:
        raise ValueError(
            "Star has {0} bands but the extinction model describes "
            "{1}.".format(mags_obs.nbands, len(A))
        )
    mask = mags_obs.band_mask
    err = mags_obs.err[mask]
    with np.errstate(divide="ignore"):
        ivar = 1.0 / (err * err)

    return mags_obs.m[mask], ivar, A[mask], mask


def star_covariance(mags_obs, ext_model, RV=3.3):
    """
    Inverse covariance of the ML `(mu, E)` for a star.

    This is independent of the candidate stellar type.

    Parameters
    ----------
    mags_obs : `~stellarpdf.core.photometry.StarMagnitudes`
        Observed photometry.

    ext_model : `~stellarpdf.dust.ExtinctionModel`
        Extinction model.

    RV : float, optional
        Extinction-law slope R(V). Default is `3.3`.

    Returns
    -------
    inv_cov_00, inv_cov_01, inv_cov_11 : float
        `sum(1/sigma^2)`, `sum(A/sigma^2)` and `sum(A^2/sigma^2)`.
    """
    _, ivar, A, _ = band_terms(mags_obs, ext_model, RV=RV)

    inv_sigma2 = np.sum(ivar)
    A_over_sigma2 = np.sum(A * ivar)
    A2_over_sigma2 = np.sum(A * A * ivar)

    return float(inv_sigma2), float(A_over_sigma2), float(A2_over_sigma2)


def star_max_likelihood(absmag, mags_obs, ext_model, inv_cov=None, RV=3.3):
    """
    Maximum-likelihood `(mu, E)` and chi^2 of one or more stellar types.

    Parameters
    ----------
    absmag : array_like of shape `(Nbands,)` or `(Nsed, Nbands)`
        Absolute magnitudes of the candidate stellar type(s).

    mags_obs : `~stellarpdf.core.photometry.StarMagnitudes`
        Observed photometry.

    ext_model : `~stellarpdf.dust.ExtinctionModel`
        Extinction model.

    inv_cov : 3-tuple of floats, optional
        Output of `star_covariance`. Recomputed if not provided.

    RV : float, optional
        Extinction-law slope R(V). Default is `3.3`.

    Returns
    -------
    mu, E, chi2 : float or `~numpy.ndarray` of shape `(Nsed,)`
        ML distance modulus, reddening and chi^2.
    """
    m, ivar, A, mask = band_terms(mags_obs, ext_model, RV=RV)
    if inv_cov is None:
        inv_cov_00 = np.sum(ivar)
        inv_cov_01 = np.sum(A * ivar)
        inv_cov_11 = np.sum(A * A * ivar)
    else:
        inv_cov_00, inv_cov_01, inv_cov_11 = np.asarray(inv_cov, dtype=float)

    absmag = np.asarray(absmag, dtype=float)
    dm = m - absmag[..., mask]

    # Regularized so that degenerate fits (one band, or equal A_i) stay finite
    det = det2(inv_cov_00, inv_cov_01, inv_cov_11, reg=DET_REG)

    with np.errstate(divide="ignore", invalid="ignore"):
        dm_over_sigma2 = np.sum(dm * ivar, axis=-1)
        dm_A_over_sigma2 = np.sum(dm * (A * ivar), axis=-1)

        mu = np.asarray(
            (inv_cov_11 * dm_over_sigma2 - inv_cov_01 * dm_A_over_sigma2) / det
        )
        E = np.asarray(
            (inv_cov_00 * dm_A_over_sigma2 - inv_cov_01 * dm_over_sigma2) / det
        )

        # chi^2 of the ML solution
        delta = dm - E[..., None] * A - mu[..., None]
        chi2 = np.sum(delta * delta * ivar, axis=-1)

    if absmag.ndim == 1:
        return float(mu), float(E), float(chi2)
    return mu, E, chi2


def calc_star_chi2(mags_obs, ext_model, absmag, mu, E, RV=3.3):
    """
    chi^2 of a stellar fit at a given `(mu, E)`.

    Parameters
    ----------
    mags_obs : `~stellarpdf.core.photometry.StarMagnitudes`
        Observed photometry.

    ext_model : `~stellarpdf.dust.ExtinctionModel`
        Extinction model.

    absmag : array_like of shape `(Nbands,)`
        Absolute magnitudes of the stellar type.

    mu, E : float
        Distance modulus and reddening.

    RV : float, optional
        Extinction-law slope R(V). Default is `3.3`.

    Returns
    -------
    chi2 : float
    """
    m, ivar, A, mask = band_terms(mags_obs, ext_model, RV=RV)
    dm = m - np.asarray(absmag, dtype=float)[mask]
    delta = dm - E * A - mu

    return float(np.sum(delta * delta * ivar))


def linear_fit(absmag, mags_obs, ext_model, RV=3.3):
    """
    Full ML fit of one stellar type, including its inverse covariance.

    Returns
    -------
    params : `LinearFitParams`
    """
    inv_cov = star_covariance(mags_obs, ext_model, RV=RV)
    mu, E, chi2 = star_max_likelihood(
        absmag, mags_obs, ext_model, inv_cov=inv_cov, RV=RV
    )
    inv_cov_00, inv_cov_01, inv_cov_11 = inv_cov

    return LinearFitParams(
        (mu, E), [[inv_cov_00, inv_cov_01], [inv_cov_01, inv_cov_11]], chi2
    )
