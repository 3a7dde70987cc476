#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Evaluate the `(E, mu)` surfaces of every star in a pixel.

Functions
---------
grid_eval_stars : Fill an `ImgStack` with one surface per star
evaluate_pixel : Convenience wrapper returning plain arrays
"""

import sys
import time

import numpy as np

from ..core.grid import Rect
from ..core.imgstack import ImgStack
from ..core.library import tabulate_seds
from ..data.io import ImgWriteBuffer
from .marginalize import integrate_ml_solution

__all__ = ["DEFAULT_GRID", "DEFAULT_CROP", "grid_eval_stars", "evaluate_pixel"]

# (E_min, E_max, mu_min, mu_max, N_E, N_mu)
DEFAULT_GRID = (-0.2, 7.2, 3.75, 19.25, 740, 124)

# (E_min, E_max, mu_min, mu_max)
DEFAULT_CROP = (0.0, 7.0, 4.0, 19.0)


def grid_eval_stars(
    los_model,
    ext_model,
    stellar_model,
    stellar_data,
    EBV_smoothing=None,
    img_stack=None,
    save_surfs=False,
    out_fname=None,
    use_priors=True,
    use_gaia=False,
    RV=3.3,
    grid_bounds=DEFAULT_GRID,
    crop_bounds=DEFAULT_CROP,
    verbosity=0,
    **kernel_kwargs,
):
    """
    Compute the `(E, mu)` surface of every star in a pixel.

    Each star is marginalized over the stellar library independently. Once
    all surfaces exist, the stack is cropped and, if requested, smoothed
    along the reddening axis by an amount set by the pixel's angular scale.

    Parameters
    ----------
    los_model : `~stellarpdf.priors.GalacticLOSModel`
        Line-of-sight prior for the pixel.

    ext_model : `~stellarpdf.dust.ExtinctionModel`
        Extinction model.

    stellar_model : `~stellarpdf.core.library.StellarModel`
        Stellar-type library.

    stellar_data : `~stellarpdf.core.photometry.StellarData`
        Stars in the pixel.

    EBV_smoothing : `~stellarpdf.dust.EBVSmoothing`, optional
        Reddening smoothing model. The second smoothing pass only runs if
        this is given and its maximum fractional smoothing is positive.

    img_stack : `~stellarpdf.core.imgstack.ImgStack`, optional
        Stack to fill. It is resized to the number of stars and given the
        working grid. A new stack is created if not provided.

    save_surfs : bool, optional
        Write the final surfaces to `out_fname` under the group
        `'/<pix_name>'`. Default is `False`.

    out_fname : str, optional
        Output HDF5 file. Required if `save_surfs` is set.

    use_priors : bool, optional
        Apply the Galactic and luminosity-function priors. Default is `True`.

    use_gaia : bool, optional
        Apply the parallax likelihood. Default is `False`.

    RV : float, optional
        Extinction-law slope R(V). Default is `3.3`.

    grid_bounds : 6-tuple, optional
        Working grid `(E_min, E_max, mu_min, mu_max, N_E, N_mu)`.
        Default is `DEFAULT_GRID`.

    crop_bounds : 4-tuple or None, optional
        Final `(E_min, E_max, mu_min, mu_max)` range. `None` keeps the
        working grid. Default is `DEFAULT_CROP`.

    verbosity : int, optional
        Level of diagnostics written to `~sys.stderr`. Default is `0`.

    **kernel_kwargs
        `n_sigma`, `min_width`, `add_diagonal` and `subsample`, passed on
        to `~stellarpdf.analysis.marginalize.integrate_ml_solution`.

    Returns
    -------
    img_stack : `~stellarpdf.core.imgstack.ImgStack`
        One surface per star, on the (cropped) grid.

    chi2 : `~numpy.ndarray` of shape `(Nstars,)`
        Minimum chi^2 per passband of each star.
    """
    if save_surfs and not out_fname:
        raise ValueError("`out_fname` is required when `save_surfs` is set.")

    t_start = time.perf_counter()

    # Set up image stack for stellar PDFs
    rect = Rect.from_bounds(grid_bounds)
    n_stars = len(stellar_data)
    if img_stack is None:
        img_stack = ImgStack(n_stars)
    else:
        img_stack.resize(n_stars)
    img_stack.set_rect(rect)

    # Library is identical for every star
    sed_table = tabulate_seds(stellar_model)

    chi2 = np.empty(n_stars)
    for i, star in enumerate(stellar_data):
        if verbosity >= 2:
            sys.stderr.write(f"Star {i + 1} of {n_stars}\n")
        chi2[i] = integrate_ml_solution(
            stellar_model,
            los_model,
            star,
            ext_model,
            img_stack,
            i,
            use_priors=use_priors,
            use_gaia=use_gaia,
            RV=RV,
            sed_table=sed_table,
            verbosity=verbosity,
            **kernel_kwargs,
        )

    if crop_bounds is not None:
        img_stack.crop(*crop_bounds)

    # Smooth along E, with a width that grows with E
    t_smooth = time.perf_counter()

    if EBV_smoothing is not None and EBV_smoothing.get_pct_smoothing_max() > 0.0:
        if verbosity >= 1:
            sys.stderr.write("Smoothing images along reddening axis.\n")
        sigma_pix = EBV_smoothing.calc_pct_smoothing(
            stellar_data.nside,
            img_stack.rect.min[0],
            img_stack.rect.max[0],
            img_stack.rect.N_bins[0],
        )
        sigma_pix = sigma_pix * np.arange(len(sigma_pix))
        img_stack.smooth(sigma_pix)

    t_write = time.perf_counter()

    if save_surfs:
        img_buffer = ImgWriteBuffer(img_stack.rect, n_stars)
        for img in img_stack.img:
            img_buffer.add(img)
        img_buffer.write(out_fname, "/" + stellar_data.pix_name, "stellar pdfs")

    t_end = time.perf_counter()

    if verbosity >= 1:
        per_star = 1000.0 / max(n_stars, 1)
        sys.stderr.write(
            "Done with grid evaluation for all stars.\n\n"
            "Time elapsed / star:\n"
            "  * sample: {0:.3f} ms\n"
            "  * smooth: {1:.3f} ms\n"
            "  *  write: {2:.3f} ms\n"
            "  *  total: {3:.3f} ms\n\n".format(
                (t_smooth - t_start) * per_star,
                (t_write - t_smooth) * per_star,
                (t_end - t_write) * per_star,
                (t_end - t_start) * per_star,
            )
        )

    return img_stack, chi2


def evaluate_pixel(
    stellar_model,
    los_model,
    ext_model,
    stellar_data,
    use_galactic_prior=True,
    use_parallax_constraint=False,
    extinction_law_slope=3.3,
    grid_bounds=DEFAULT_GRID,
    crop_bounds=DEFAULT_CROP,
    persist_surfaces=False,
    out_fname=None,
    EBV_smoothing=None,
    verbosity=0,
    **kernel_kwargs,
):
    """
    Evaluate every star in a pixel and return the surfaces as arrays.

    Thin wrapper around `grid_eval_stars`; see there for the parameters.

    Returns
    -------
    surfaces : `~numpy.ndarray` of shape `(Nstars, N_E, N_mu)`
        Per-star probability surfaces.

    chi2 : `~numpy.ndarray` of shape `(Nstars,)`
        Minimum chi^2 per passband of each star.
    """
    img_stack, chi2 = grid_eval_stars(
        los_model,
        ext_model,
        stellar_model,
        stellar_data,
        EBV_smoothing=EBV_smoothing,
        save_surfs=persist_surfaces,
        out_fname=out_fname,
        use_priors=use_galactic_prior,
        use_gaia=use_parallax_constraint,
        RV=extinction_law_slope,
        grid_bounds=grid_bounds,
        crop_bounds=crop_bounds,
        verbosity=verbosity,
        **kernel_kwargs,
    )

    return img_stack.as_array(), chi2
