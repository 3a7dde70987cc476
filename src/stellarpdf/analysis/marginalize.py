#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Grid marginalization of a single star over stellar type.

For every stellar type in the library, the star's photometry is fit in
closed form for the ML `(mu, E)`. Each fit contributes a point mass at its
ML location, weighted by its likelihood and prior. The point masses are
deposited bilinearly onto the output grid and then smoothed by the
uncertainty of an individual fit.

Functions
---------
deposit_points : Bilinear (area-weighted) scatter of point masses
integrate_ml_solution : Build the `(E, mu)` surface of one star
"""

import sys
import warnings

import numpy as np
from numba import jit

from ..core.fitting import star_covariance, star_max_likelihood
from ..core.kernels import convolve_surface, gaussian_kernel
from ..core.library import tabulate_seds
from ..priors.astrometric import logp_parallax, parallax_from_mu

__all__ = ["deposit_points", "integrate_ml_solution"]


@jit(nopython=True, cache=True)
def _deposit_bilinear(img, x0, x1, weights, min0, min1, dx0, dx1):
    """
    Scatter weighted points onto `img`, splitting each over the four
    surrounding bin centres. Points whose four neighbours are not all on
    the grid, or whose weight is not finite, are dropped.

    The index and fraction rule is the one of `Rect.get_interpolant`,
    inlined for numba.
    """
    n0, n1 = img.shape
    for k in range(len(weights)):
        p = weights[k]
        if not np.isfinite(p):
            continue
        t0 = (x0[k] - min0) / dx0 - 0.5
        t1 = (x1[k] - min1) / dx1 - 0.5
        # NaN coordinates fail both comparisons
        if not (t0 >= 0.0 and t0 < n0 - 1 and t1 >= 0.0 and t1 < n1 - 1):
            continue
        i0 = int(np.floor(t0))
        i1 = int(np.floor(t1))
        a0 = t0 - i0
        a1 = t1 - i1
        img[i0, i1] += (1.0 - a0) * (1.0 - a1) * p
        img[i0 + 1, i1] += a0 * (1.0 - a1) * p
        img[i0, i1 + 1] += (1.0 - a0) * a1 * p
        img[i0 + 1, i1 + 1] += a0 * a1 * p
    return img


def _check_deposit_grid(rect):
    if np.any(rect.N_bins < 2):
        raise ValueError(
            "Bilinear deposit needs at least 2 bins per axis, got "
            f"{tuple(rect.N_bins)}."
        )


def deposit_points(img, rect, x0, x1, weights):
    """
    Add weighted point masses to a surface by reverse bilinear
    interpolation.

    Each point is split between the bins returned by
    `~stellarpdf.core.grid.Rect.get_interpolant`.

    Parameters
    ----------
    img : `~numpy.ndarray` of shape `rect.shape`
        Surface to add to (modified in place).

    rect : `~stellarpdf.core.grid.Rect`
        Geometry of the surface.

    x0, x1 : array_like of shape `(Npts,)`
        Coordinates of the points along axes 0 and 1.

    weights : array_like of shape `(Npts,)`
        Mass of each point.

    Returns
    -------
    img : `~numpy.ndarray`
        The updated surface.
    """
    _check_deposit_grid(rect)
    x0 = np.ascontiguousarray(x0, dtype=np.float64)
    x1 = np.ascontiguousarray(x1, dtype=np.float64)
    weights = np.ascontiguousarray(weights, dtype=np.float64)
    if not (x0.shape == x1.shape == weights.shape):
        raise ValueError("Point coordinates and weights must have the same shape.")

    return _deposit_bilinear(
        img,
        x0.ravel(),
        x1.ravel(),
        weights.ravel(),
        rect.min[0],
        rect.min[1],
        rect.dx[0],
        rect.dx[1],
    )


def integrate_ml_solution(
    stellar_model,
    los_model,
    mags_obs,
    ext_model,
    img_stack,
    img_idx,
    use_priors=True,
    use_gaia=False,
    RV=3.3,
    n_sigma=5.0,
    min_width=2,
    add_diagonal=1.0,
    subsample=5,
    sed_table=None,
    verbosity=0,
):
    """
    Compute the `(E, mu)` probability surface of one star.

    Parameters
    ----------
    stellar_model : `~stellarpdf.core.library.StellarModel`
        Stellar-type library. Only swept if `sed_table` is not provided.

    los_model : `~stellarpdf.priors.GalacticLOSModel`
        Line-of-sight prior, providing `log_prior(mu, Mr, FeH)`. Only used
        if `use_priors` is set.

    mags_obs : `~stellarpdf.core.photometry.StarMagnitudes`
        Observed photometry.

    ext_model : `~stellarpdf.dust.ExtinctionModel`
        Extinction model.

    img_stack : `~stellarpdf.core.imgstack.ImgStack`
        Stack holding the output surface. Its grid has axes `(E, mu)`.

    img_idx : int
        Index of the surface to fill.

    use_priors : bool, optional
        Weight each stellar type by the Galactic prior and the luminosity
        function. Default is `True`.

    use_gaia : bool, optional
        Weight each stellar type by the parallax likelihood.
        Default is `False`.

    RV : float, optional
        Extinction-law slope R(V). Default is `3.3`.

    n_sigma, min_width, add_diagonal, subsample : optional
        Smoothing kernel settings, passed to
        `~stellarpdf.core.kernels.gaussian_kernel`. Defaults are
        `5.`, `2`, `1.` and `5`.

    sed_table : `~stellarpdf.core.library.SEDTable`, optional
        Pre-tabulated library, to avoid sweeping it once per star.

    verbosity : int, optional
        Level of diagnostics written to `~sys.stderr`. Default is `0`.

    Returns
    -------
    chi2_passband : float
        Minimum chi^2 over stellar types divided by the number of
        non-missing bands.

    Raises
    ------
    ValueError
        If the star has no usable bands, the stack has no grid, or
        the grid has fewer than 2 bins along an axis.
    """
    n_passbands = mags_obs.n_passbands()
    if n_passbands == 0:
        raise ValueError(f"Star {mags_obs.obj_id} has no usable passbands.")

    # Calculate covariance of ML solution for (mu, E)
    inv_cov = star_covariance(mags_obs, ext_model, RV=RV)
    inv_cov_00, inv_cov_01, inv_cov_11 = inv_cov

    if not img_stack.initialize_to_zero(img_idx):
        raise ValueError("Image stack has no grid; call `set_rect` first.")
    rect = img_stack.rect
    _check_deposit_grid(rect)

    if sed_table is None:
        sed_table = tabulate_seds(stellar_model)
    if len(sed_table.Mr) == 0:
        warnings.warn("Stellar library is empty; surface left at zero.")
        return np.inf

    # Max. likelihood (mu, E) for every stellar type
    mu_ML, E_ML, chi2_ML = star_max_likelihood(
        sed_table.absmag, mags_obs, ext_model, inv_cov=inv_cov, RV=RV
    )

    prior_ML = np.zeros(len(mu_ML))
    if use_priors:
        prior_ML += los_model.log_prior(mu_ML, sed_table.Mr, sed_table.FeH)
        prior_ML += sed_table.log_lf
    if use_gaia:
        prior_ML += logp_parallax(parallax_from_mu(mu_ML), mags_obs.pi, mags_obs.pierr)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        prior_max = np.nanmax(prior_ML)
        chi2_min = np.nanmin(chi2_ML)

    if verbosity >= 2:
        sys.stderr.write(f"prior_max = {prior_max}\nchi2_min = {chi2_min}\n")

    # Normalize in log space, then add each solution to the image
    with np.errstate(invalid="ignore", over="ignore"):
        log_p = -0.5 * (chi2_ML - chi2_min) + (prior_ML - prior_max)
        p = np.exp(log_p)
    deposit_points(img_stack.img[img_idx], rect, E_ML, mu_ML, p)

    # Smooth PDF with covariance of the ML solution (axes are (E, mu)).
    # Half-width is capped at the surface size
    kernel = gaussian_kernel(
        inv_cov_11,
        inv_cov_01,
        inv_cov_00,
        rect.dx,
        n_sigma=n_sigma,
        min_width=min_width,
        add_diagonal=add_diagonal,
        subsample=subsample,
        max_width=rect.N_bins - 1,
        verbosity=verbosity,
    )
    img_stack.img[img_idx] = convolve_surface(img_stack.img[img_idx], kernel)

    if verbosity >= 2:
        sys.stderr.write(
            "# of passbands: {0}\nchi^2 / passband: {1}\n".format(
                n_passbands, chi2_min / n_passbands
            )
        )

    return float(chi2_min / n_passbands)
