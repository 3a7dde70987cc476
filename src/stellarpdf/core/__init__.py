#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
stellarpdf core module: photometric records, grid geometry, linear fits
and smoothing kernels.
"""

from .fitting import (
    LinearFitParams,
    calc_star_chi2,
    linear_fit,
    star_covariance,
    star_max_likelihood,
)
from .grid import Rect
from .imgstack import ImgStack
from .kernels import convolve_surface, gaussian_kernel, kernel_from_fit
from .library import SEDTable, StellarModel, load_stellar_model, tabulate_seds
from .photometry import (
    MISSING_ERR,
    MISSING_THRESH,
    NBANDS,
    StarMagnitudes,
    StellarData,
    file_dtype,
)

__all__ = [
    "NBANDS",
    "MISSING_ERR",
    "MISSING_THRESH",
    "file_dtype",
    "StarMagnitudes",
    "StellarData",
    "Rect",
    "ImgStack",
    "LinearFitParams",
    "star_covariance",
    "star_max_likelihood",
    "calc_star_chi2",
    "linear_fit",
    "gaussian_kernel",
    "kernel_from_fit",
    "convolve_surface",
    "StellarModel",
    "SEDTable",
    "tabulate_seds",
    "load_stellar_model",
]
