#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Stack of per-star probability surfaces sharing one grid.
"""

import numpy as np
from numba import jit

from .grid import Rect

__all__ = ["ImgStack"]


@jit(nopython=True, cache=True)
def _smooth_rows(img, sigma, n_sigma, out):
    """
    Smooth along axis 0 with a Gaussian whose width depends on the
    receiving row. The kernel is renormalized over the rows that fall on
    the image.
    """
    N_rows, N_cols = img.shape
    for recv in range(N_rows):
        s = sigma[recv]
        if s <= 1e-5:
            for j in range(N_cols):
                out[recv, j] = img[recv, j]
            continue

        # Kernel half-width in rows
        w = int(np.ceil(n_sigma * s))
        if w > N_rows - 1:
            w = N_rows - 1
        a = -0.5 / (s * s)

        norm = 0.0
        for k in range(-w, w + 1):
            src = recv + k
            if src < 0 or src >= N_rows:
                continue
            norm += np.exp(a * k * k)

        for j in range(N_cols):
            out[recv, j] = 0.0
        for k in range(-w, w + 1):
            src = recv + k
            if src < 0 or src >= N_rows:
                continue
            wt = np.exp(a * k * k) / norm
            for j in range(N_cols):
                out[recv, j] += wt * img[src, j]
    return out


class ImgStack(object):
    """
    A collection of 2-D surfaces on a common `Rect`.

    Parameters
    ----------
    N_images : int
        Number of surfaces in the stack.

    rect : `~stellarpdf.core.grid.Rect`, optional
        Grid shared by every surface. Can be set later with `set_rect`.
    """

    def __init__(self, N_images, rect=None):
        self.N_images = int(N_images)
        self.rect = None
        self.img = [None] * self.N_images
        if rect is not None:
            self.set_rect(rect)

    def set_rect(self, rect):
        """Assign the grid and reset every surface to zeros."""
        if not isinstance(rect, Rect):
            rect = Rect(*rect)
        self.rect = rect
        self.img = [np.zeros(rect.shape) for _ in range(self.N_images)]

    def resize(self, N_images):
        """Change the number of surfaces, discarding their contents."""
        self.N_images = int(N_images)
        if self.rect is None:
            self.img = [None] * self.N_images
        else:
            self.set_rect(self.rect)

    def initialize_to_zero(self, img_idx):
        """
        Zero a single surface.

        Returns
        -------
        success : bool
            False if the stack has no grid yet.
        """
        if self.rect is None:
            return False
        self.img[img_idx] = np.zeros(self.rect.shape)
        return True

    def crop(self, x0_min, x0_max, x1_min, x1_max):
        """Crop every surface (and the grid) to the requested bounds."""
        rect, (s0, s1) = self.rect.crop(x0_min, x0_max, x1_min, x1_max)
        self.img = [np.ascontiguousarray(im[s0, s1]) for im in self.img]
        self.rect = rect

    def smooth(self, sigma, n_sigma=5.0):
        """
        Smooth every surface along axis 0.

        Parameters
        ----------
        sigma : array_like of shape `(N_bins[0],)`
            Gaussian width, in bins, applied to each row of the output.
            Rows with (near-)zero width are left untouched.

        n_sigma : float, optional
            Kernel half-width in units of `sigma`. Default is `5.`.
        """
        sigma = np.asarray(sigma, dtype=float)
        if sigma.shape != (self.rect.N_bins[0],):
            raise ValueError(
                "Expected {0} smoothing widths, got {1}.".format(
                    self.rect.N_bins[0], sigma.shape
                )
            )
        for i, im in enumerate(self.img):
            src = np.ascontiguousarray(im, dtype=np.float64)
            self.img[i] = _smooth_rows(src, sigma, float(n_sigma), np.empty_like(src))

    def as_array(self, dtype=np.float64):
        """Surfaces stacked into an array of shape `(N_images, N0, N1)`."""
        if self.N_images == 0:
            return np.zeros((0,) + self.rect.shape, dtype=dtype)
        return np.stack(self.img).astype(dtype)

    def __len__(self):
        return self.N_images

    def __repr__(self):
        return f"ImgStack(N_images={self.N_images}, rect={self.rect!r})"
