#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Rectangular 2-D grid geometry.

The output surfaces live on a regular grid over (E, mu): axis 0 is the
reddening and axis 1 the distance modulus. Bin `i` along an axis covers
`[min + i*dx, min + (i+1)*dx)` and is centred at `min + (i + 0.5)*dx`.
"""

import numpy as np

__all__ = ["Rect"]


class Rect(object):
    """
    Regular 2-D binning.

    Parameters
    ----------
    min : 2-tuple of floats
        Lower edges along each axis.

    max : 2-tuple of floats
        Upper edges along each axis.

    N_bins : 2-tuple of ints
        Number of bins along each axis.

    Raises
    ------
    ValueError
        If any axis has `max <= min` or fewer than one bin.
    """

    def __init__(self, min, max, N_bins):
        self.min = np.array(min, dtype=float)
        self.max = np.array(max, dtype=float)
        self.N_bins = np.array(N_bins, dtype=int)
        if self.min.shape != (2,) or self.max.shape != (2,) or self.N_bins.shape != (2,):
            raise ValueError("Rect requires exactly two axes.")
        if np.any(self.N_bins < 1):
            raise ValueError(f"Number of bins must be positive, got {self.N_bins}")
        if np.any(~np.isfinite(self.min)) or np.any(~np.isfinite(self.max)):
            raise ValueError("Grid bounds must be finite.")
        if np.any(self.max <= self.min):
            raise ValueError(
                f"Grid upper bounds {self.max} must exceed lower bounds {self.min}"
            )
        self.dx = (self.max - self.min) / self.N_bins

    @classmethod
    def from_bounds(cls, bounds):
        """
        Build a rect from `(x0_min, x0_max, x1_min, x1_max, N0, N1)`.
        """
        try:
            x0_min, x0_max, x1_min, x1_max, n0, n1 = bounds
        except (TypeError, ValueError) as e:
            raise ValueError(
                "Grid bounds must be (x0_min, x0_max, x1_min, x1_max, N0, N1)."
            ) from e
        return cls((x0_min, x1_min), (x0_max, x1_max), (n0, n1))

    @property
    def shape(self):
        return (int(self.N_bins[0]), int(self.N_bins[1]))

    def centers(self, axis):
        """Bin centres along `axis`."""
        return self.min[axis] + (np.arange(self.N_bins[axis]) + 0.5) * self.dx[axis]

    def edges(self, axis):
        """Bin edges along `axis`."""
        return np.linspace(self.min[axis], self.max[axis], self.N_bins[axis] + 1)

    def get_index(self, x0, x1):
        """
        Bin containing the point `(x0, x1)`.

        Returns
        -------
        idx0, idx1 : int
            Bin indices.

        in_bounds : bool
            Whether the point falls inside the grid.
        """
        t0 = (x0 - self.min[0]) / self.dx[0]
        t1 = (x1 - self.min[1]) / self.dx[1]
        if not (0.0 <= t0 < self.N_bins[0] and 0.0 <= t1 < self.N_bins[1]):
            return 0, 0, False
        return int(np.floor(t0)), int(np.floor(t1)), True

    def get_interpolant(self, x0, x1):
        """
        Lower-left neighbouring bin centre and fractional offsets of
        `(x0, x1)`, for bilinear interpolation or deposit.

        Returns
        -------
        idx0, idx1 : int
            Indices of the lower neighbouring bin along each axis.

        a0, a1 : float
            Fractional offsets in `[0, 1)` towards the upper neighbours.

        in_bounds : bool
            True only if all four neighbouring bins lie on the grid.
        """
        t0 = (x0 - self.min[0]) / self.dx[0] - 0.5
        t1 = (x1 - self.min[1]) / self.dx[1] - 0.5
        if not (
            0.0 <= t0 < self.N_bins[0] - 1 and 0.0 <= t1 < self.N_bins[1] - 1
        ):
            return 0, 0, 0.0, 0.0, False
        idx0, idx1 = int(np.floor(t0)), int(np.floor(t1))
        return idx0, idx1, t0 - idx0, t1 - idx1, True

    def crop(self, x0_min, x0_max, x1_min, x1_max):
        """
        Restrict the grid to the bins inside the requested bounds.

        Bounds are snapped to the nearest existing bin edge and clipped to
        the current grid.

        Returns
        -------
        rect : `Rect`
            The cropped grid.

        slices : 2-tuple of slices
            Index ranges of the kept bins along each axis.
        """
        lo = np.array([x0_min, x1_min], dtype=float)
        hi = np.array([x0_max, x1_max], dtype=float)
        i_lo = np.clip(np.round((lo - self.min) / self.dx), 0, self.N_bins).astype(int)
        i_hi = np.clip(np.round((hi - self.min) / self.dx), 0, self.N_bins).astype(int)
        if np.any(i_hi <= i_lo):
            raise ValueError(
                "Crop bounds ({0}, {1}, {2}, {3}) leave no bins on the "
                "grid.".format(x0_min, x0_max, x1_min, x1_max)
            )
        rect = Rect(self.min + i_lo * self.dx, self.min + i_hi * self.dx, i_hi - i_lo)
        slices = (slice(i_lo[0], i_hi[0]), slice(i_lo[1], i_hi[1]))
        return rect, slices

    def __eq__(self, other):
        if not isinstance(other, Rect):
            return NotImplemented
        return (
            np.allclose(self.min, other.min)
            and np.allclose(self.max, other.max)
            and np.array_equal(self.N_bins, other.N_bins)
        )

    def __repr__(self):
        return (
            f"Rect(min={tuple(self.min)}, max={tuple(self.max)}, "
            f"N_bins={tuple(self.N_bins)})"
        )
