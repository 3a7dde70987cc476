#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Anisotropic Gaussian smoothing kernels.

Each star's point-mass surface is smoothed by a Gaussian whose shape is the
uncertainty of its ML `(E, mu)` estimate. Kernels are often only a few
bins across, so they are evaluated on a finer grid and then averaged back
down to the output resolution instead of being point-sampled at bin
centres.

Functions
---------
gaussian_kernel : Build a kernel from an inverse covariance
kernel_from_fit : Build a kernel from a `LinearFitParams`
convolve_surface : Apply a kernel to a surface
"""

import sys

import numpy as np
from scipy.ndimage import correlate
from scipy.signal import fftconvolve

from ..utils.math import DET_REG, downsample_area, inverse2, sigma_from_inv_cov

__all__ = ["gaussian_kernel", "kernel_from_fit", "convolve_surface"]

# Kernel size above which surfaces are smoothed by FFT
FFT_MIN_SIZE = 4096


def gaussian_kernel(
    inv_cov_00,
    inv_cov_01,
    inv_cov_11,
    dx,
    n_sigma=5.0,
    min_width=2,
    add_diagonal=-1.0,
    subsample=5,
    max_width=None,
    verbosity=0,
):
    """
    Build a normalized anisotropic Gaussian kernel on a regular grid.

    Parameters
    ----------
    inv_cov_00, inv_cov_01, inv_cov_11 : float
        Inverse covariance of the Gaussian, in the axis order of the grid.

    dx : 2-tuple of floats
        Bin widths along each axis.

    n_sigma : float, optional
        Half-width of the kernel in standard deviations. Default is `5.`.

    min_width : int, optional
        Minimum half-width of the kernel in bins. Default is `2`.

    add_diagonal : float, optional
        If positive, the covariance is broadened by
        `(add_diagonal * dx[k])^2` along each axis `k` before the kernel is
        evaluated. Default is `-1.` (no broadening).

    subsample : int, optional
        Supersampling factor used to evaluate the kernel. Default is `5`.

    max_width : 2-tuple of ints, optional
        Upper limit on the half-width along each axis, in bins. Takes
        precedence over `min_width`. Typically the number of bins of the
        surface minus one, beyond which extra taps only reflect off the
        borders. Default is `None` (no limit).

    verbosity : int, optional
        Print the kernel widths if `>= 2`. Default is `0`.

    Returns
    -------
    kernel : `~numpy.ndarray` of shape `(2*w0+1, 2*w1+1)`
        Kernel values, scaled so that the central bin equals `1`.

    Notes
    -----
    The kernel is normalized to unit value at its centre, not to unit sum,
    so smoothing a surface with it does not preserve total mass.

    The half-width along axis `k` is
    `max(min_width, ceil(n_sigma * sigma_k / dx[k]))`, capped at
    `max_width[k]`, with `sigma_k` computed from the inverse covariance
    using a regularized determinant.
    """
    dx = np.asarray(dx, dtype=float)
    subsample = int(subsample)
    if subsample < 1:
        raise ValueError(f"subsample must be >= 1, got {subsample}")
    if min_width < 0:
        raise ValueError(f"min_width must be non-negative, got {min_width}")
    if n_sigma <= 0:
        raise ValueError(f"n_sigma must be positive, got {n_sigma}")

    # Add extra smoothing along each axis
    if add_diagonal > 0.0:
        diag = add_diagonal * dx
        cov_00, cov_01, cov_11 = inverse2(
            inv_cov_00, inv_cov_01, inv_cov_11, reg=DET_REG
        )
        cov_00 += diag[0] * diag[0]
        cov_11 += diag[1] * diag[1]
        inv_cov_00, inv_cov_01, inv_cov_11 = inverse2(cov_00, cov_01, cov_11)

    # Determine sigma along each axis
    sigma = sigma_from_inv_cov(inv_cov_00, inv_cov_01, inv_cov_11, reg=DET_REG)
    if not np.all(np.isfinite(sigma)):
        raise ValueError(
            "Inverse covariance ({0}, {1}, {2}) does not define a finite "
            "kernel.".format(inv_cov_00, inv_cov_01, inv_cov_11)
        )

    # Determine dimensions of filter
    width = np.maximum(float(min_width), np.ceil(n_sigma * sigma / dx))
    if max_width is not None:
        if np.any(np.asarray(max_width) < 0):
            raise ValueError(f"max_width must be non-negative, got {max_width}")
        width = np.minimum(width, max_width)
    width = width.astype(int)

    if verbosity >= 2:
        sys.stderr.write(
            "sigma -> ({0}, {1})\nwidth = ({2}, {3})\n".format(
                sigma[0], sigma[1], width[0], width[1]
            )
        )

    w, h = 2 * width + 1
    w_sub, h_sub = subsample * w, subsample * h

    # Offsets from the centre of the sub-sampled image
    d0 = (np.arange(w_sub) - 0.5 * (w_sub - 1)) * dx[0] / subsample
    d1 = (np.arange(h_sub) - 0.5 * (h_sub - 1)) * dx[1] / subsample
    d0, d1 = d0[:, None], d1[None, :]

    # Evaluate filter at each point
    quad = inv_cov_00 * d0 * d0 + 2.0 * inv_cov_01 * d0 * d1 + inv_cov_11 * d1 * d1
    img_sub = np.exp(-0.5 * quad)

    # Area-average back down to the grid resolution
    img = downsample_area(img_sub, subsample)

    return img / img[width[0], width[1]]


def kernel_from_fit(params, dx, n_sigma=5.0, min_width=2, **kwargs):
    """
    Kernel from the inverse covariance of a `LinearFitParams`.

    The fit is in `(mu, E)` order while surfaces are binned in `(E, mu)`,
    so the inverse covariance is transposed before the kernel is built.
    """
    inv_cov = params.inv_cov
    return gaussian_kernel(
        inv_cov[1, 1],
        inv_cov[0, 1],
        inv_cov[0, 0],
        dx,
        n_sigma=n_sigma,
        min_width=min_width,
        **kwargs,
    )


def convolve_surface(img, kernel):
    """
    Smooth a surface with a kernel.

    The kernel is applied by correlation about its central bin with
    reflect-101 boundary handling (`scipy.ndimage` mode `'mirror'`).
    Kernels with more than `FFT_MIN_SIZE` entries that fit inside the
    reflected border are applied with an FFT on the padded surface
    instead, which gives the same result up to round-off.

    Parameters
    ----------
    img : `~numpy.ndarray` of shape `(N0, N1)`
        Surface to smooth.

    kernel : `~numpy.ndarray` of shape `(K0, K1)`
        Kernel with odd dimensions.

    Returns
    -------
    out : `~numpy.ndarray` of shape `(N0, N1)`
        Smoothed surface.
    """
    kernel = np.asarray(kernel, dtype=float)
    if kernel.ndim != 2 or kernel.shape[0] % 2 == 0 or kernel.shape[1] % 2 == 0:
        raise ValueError(f"Kernel must be 2-D with odd dimensions, got {kernel.shape}")

    img = np.asarray(img, dtype=float)
    w0, w1 = (kernel.shape[0] - 1) // 2, (kernel.shape[1] - 1) // 2
    if kernel.size <= FFT_MIN_SIZE or w0 >= img.shape[0] or w1 >= img.shape[1]:
        return correlate(img, kernel, mode="mirror")

    # numpy "reflect" padding is reflect-101
    padded = np.pad(img, ((w0, w0), (w1, w1)), mode="reflect")
    out = fftconvolve(padded, kernel[::-1, ::-1], mode="valid")

    # Round-off can leave tiny negative values
    if np.all(img >= 0.0) and np.all(kernel >= 0.0):
        out = np.clip(out, 0.0, None)
    return out
