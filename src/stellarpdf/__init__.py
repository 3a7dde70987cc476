#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
stellarpdf: per-star (E, mu) probability surfaces from photometry

For every star in a sky pixel, the photometry is fit in closed form for
distance modulus and reddening once per stellar type in a library. The fits
are weighted by their likelihood and an optional Galactic / parallax prior,
deposited onto a regular `(E, mu)` grid and smoothed by the uncertainty of
an individual fit.

Usage
-----
Evaluating one pixel::

    from stellarpdf import evaluate_pixel, load_stellar_data
    from stellarpdf.core import load_stellar_model
    from stellarpdf.dust import ExtinctionModel
    from stellarpdf.priors import GalacticLOSModel

    stars = load_stellar_data('photometry.h5', 'pixel 1024')
    lib = load_stellar_model('stellar_lib.h5')
    ext = ExtinctionModel.from_file('extinction.dat')
    los = GalacticLOSModel(stars.l, stars.b)
    surfaces, chi2 = evaluate_pixel(lib, los, ext, stars)
"""

__version__ = "0.1.0"

from .analysis import evaluate_pixel, grid_eval_stars, integrate_ml_solution
from .core import (
    ImgStack,
    Rect,
    StarMagnitudes,
    StellarData,
    StellarModel,
    gaussian_kernel,
    star_covariance,
    star_max_likelihood,
)
from .data import load_stellar_data, load_surfaces, save_stellar_data
from .dust import EBVSmoothing, ExtinctionModel
from .priors import GalacticLOSModel

__all__ = [
    "__version__",
    "evaluate_pixel",
    "grid_eval_stars",
    "integrate_ml_solution",
    "ImgStack",
    "Rect",
    "StarMagnitudes",
    "StellarData",
    "StellarModel",
    "gaussian_kernel",
    "star_covariance",
    "star_max_likelihood",
    "load_stellar_data",
    "save_stellar_data",
    "load_surfaces",
    "EBVSmoothing",
    "ExtinctionModel",
    "GalacticLOSModel",
]
