#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Mathematical utility functions for stellarpdf.

This module contains the small linear-algebra and image helpers shared by
the fitting and smoothing code. Everything here works on symmetric 2x2
matrices stored as their three independent terms `(a00, a01, a11)`, which
is how the (mu, E) inverse covariances are passed around.

Functions
---------
det2 : Determinant
    Determinant of a symmetric 2x2 matrix, with optional regularization
inverse2 : Matrix inversion
    Closed-form inverse of a symmetric 2x2 matrix
sigma_from_inv_cov : Marginal widths
    Per-axis standard deviations implied by an inverse covariance
isPSD : Matrix check
    Check if matrix is positive semi-definite
downsample_area : Image decimation
    Average non-overlapping blocks of a supersampled image

Notes
-----
All inversion-derived widths use a regularized determinant
(`det + DET_REG`) so that near-singular inverse covariances (e.g. a star
observed in bands with identical extinction coefficients) give large but
finite widths rather than NaNs.

Examples
--------
>>> from stellarpdf.utils.math import inverse2, sigma_from_inv_cov
>>> cov_00, cov_01, cov_11 = inverse2(4.0, 1.0, 2.0)
>>> sigma = sigma_from_inv_cov(4.0, 1.0, 2.0)
"""

import numpy as np
from numba import jit

__all__ = [
    "DET_REG",
    "det2",
    "inverse2",
    "sigma_from_inv_cov",
    "isPSD",
    "downsample_area",
]

# Regularization added to inverse-covariance determinants.
DET_REG = 1.0e-5


def det2(a00, a01, a11, reg=0.0):
    """
    Determinant of the symmetric matrix `[[a00, a01], [a01, a11]]`.

    Parameters
    ----------
    a00, a01, a11 : float or `~numpy.ndarray`
        Independent terms of the symmetric matrix.

    reg : float, optional
        Constant added to the determinant. Default is `0.`.

    Returns
    -------
    det : float or `~numpy.ndarray`
        The (regularized) determinant.
    """
    return a00 * a11 - a01 * a01 + reg


def inverse2(a00, a01, a11, reg=0.0):
    """
    Invert a symmetric 2x2 matrix using the adjugate formula.

    Parameters
    ----------
    a00, a01, a11 : float or `~numpy.ndarray`
        Independent terms of the symmetric matrix.

    reg : float, optional
        Constant added to the determinant before dividing. Default is `0.`.

    Returns
    -------
    b00, b01, b11 : float or `~numpy.ndarray`
        Independent terms of the inverse.
    """
    det = det2(a00, a01, a11, reg=reg)
    with np.errstate(divide="ignore", invalid="ignore"):
        return a11 / det, -a01 / det, a00 / det


def sigma_from_inv_cov(inv_cov_00, inv_cov_01, inv_cov_11, reg=DET_REG):
    """
    Standard deviations along each axis implied by an inverse covariance.

    Parameters
    ----------
    inv_cov_00, inv_cov_01, inv_cov_11 : float
        Independent terms of the inverse covariance.

    reg : float, optional
        Regularization added to the determinant. Default is `DET_REG`.

    Returns
    -------
    sigma : `~numpy.ndarray` of shape `(2,)`
        `sqrt(C_00)` and `sqrt(C_11)` of the regularized covariance `C`.
    """
    det = det2(inv_cov_00, inv_cov_01, inv_cov_11, reg=reg)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.sqrt(np.array([inv_cov_11 / det, inv_cov_00 / det]))


def isPSD(A):
    """
    Check if `A` is a positive semidefinite matrix.

    A matrix is positive semidefinite if all its eigenvalues are non-negative.

    Parameters
    ----------
    A : `~numpy.ndarray` of shape `(N, N)`
        Square matrix to test.

    Returns
    -------
    is_psd : bool
        True if the matrix is positive semidefinite, False otherwise.
    """
    A = np.asarray(A, dtype=float)

    # Check if matrix is symmetric (within numerical precision)
    if not np.allclose(A, A.T, rtol=1e-10, atol=1e-10):
        return False

    # Relative tolerance since inverse variances span many decades
    eigenvals = np.linalg.eigvalsh(A)
    tol = 1e-10 * max(1.0, np.max(np.abs(eigenvals)))
    return bool(np.all(eigenvals >= -tol))


@jit(nopython=True, cache=True)
def _block_mean(img, factor, out):
    """Average `factor` x `factor` blocks of `img` into `out`."""
    nrow, ncol = out.shape
    norm = 1.0 / (factor * factor)
    for i in range(nrow):
        for j in range(ncol):
            tot = 0.0
            for k in range(factor * i, factor * (i + 1)):
                for m in range(factor * j, factor * (j + 1)):
                    tot += img[k, m]
            out[i, j] = tot * norm
    return out


def downsample_area(img, factor):
    """
    Decimate a supersampled image by averaging over `factor` x `factor`
    blocks (area interpolation).

    Parameters
    ----------
    img : `~numpy.ndarray` of shape `(factor * N0, factor * N1)`
        Supersampled image.

    factor : int
        Integer decimation factor.

    Returns
    -------
    out : `~numpy.ndarray` of shape `(N0, N1)`
        Block-averaged image.
    """
    factor = int(factor)
    if factor < 1:
        raise ValueError(f"Decimation factor must be >= 1, got {factor}")
    img = np.ascontiguousarray(img, dtype=np.float64)
    if img.shape[0] % factor or img.shape[1] % factor:
        raise ValueError(
            "Image shape {0} is not divisible by the decimation "
            "factor {1}.".format(img.shape, factor)
        )
    if factor == 1:
        return img.copy()
    out = np.zeros((img.shape[0] // factor, img.shape[1] // factor))

    return _block_mean(img, factor, out)
