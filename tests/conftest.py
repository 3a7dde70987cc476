#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test configuration and fixtures for the stellarpdf test suite.

This module provides small synthetic stellar libraries, extinction models
and stars with known ML solutions, so every test runs without external
data files.
"""

import os

import numpy as np
import pytest

# Configure numba for testing
# Use a writable cache directory, but keep JIT enabled due to scipy conflicts
os.environ.setdefault("NUMBA_CACHE_DIR", "/tmp/numba_cache")

# For coverage measurement, use run_coverage.py, which runs each suite
# separately:
#   python run_coverage.py              # Full coverage analysis
#   python run_coverage.py --core       # Core tests only


# Extinction per unit E in PS1 grizy at R(V) = 3.3
PS1_A = np.array([3.172, 2.271, 1.682, 1.322, 1.087])


@pytest.fixture
def ext_model_5band():
    """R(V)-dependent five-band extinction model."""
    from stellarpdf.dust import ExtinctionModel

    RV = np.array([2.5, 3.3, 4.1])
    A = np.array([PS1_A * 1.08, PS1_A, PS1_A * 0.94])
    return ExtinctionModel(RV, A)


@pytest.fixture
def ext_model_2band():
    """Two-band extinction model with A = (1, 0.5)."""
    from stellarpdf.dust import ExtinctionModel

    return ExtinctionModel.constant([1.0, 0.5])


@pytest.fixture
def stellar_model_5band():
    """
    4 x 3 five-band library with a linear color-magnitude relation.

    Neighbouring cells differ by color patterns that no `(mu, E)` shift can
    absorb, so a noiseless star is only well fit by its own cell.

    Returns
    -------
    model : `~stellarpdf.core.library.StellarModel`
    """
    from stellarpdf.core import StellarModel

    Mr = np.array([2.0, 4.0, 6.0, 8.0])
    FeH = np.array([-1.5, -0.75, 0.0])
    colors = np.array([0.6, 0.2, 0.0, -0.1, -0.15])
    feh_pattern = np.array([0.0, 1.0, -0.5, 1.0, 0.0])
    absmag = (
        Mr[:, None, None]
        + colors[None, None, :] * (1.0 + 0.5 * Mr[:, None, None])
        + 0.3 * FeH[None, :, None] * feh_pattern[None, None, :]
    )
    lf_Mr = np.linspace(-1.0, 12.0, 14)
    lf_lnp = -0.5 * ((lf_Mr - 6.0) / 3.0) ** 2
    return StellarModel(Mr, FeH, absmag, lf_Mr=lf_Mr, lf_lnp=lf_lnp)


@pytest.fixture
def stellar_model_2band():
    """
    3 x 3 two-band library in which only the central cell can land on the
    `(E, mu) = [0, 4] x [0, 20]` test grid for a star at `mu = 10, E = 2`.

    Shifting the row index moves `mu` by 10 mag; shifting the column index
    moves band 0 alone by 5 mag, i.e. `E` by 10 for `A = (1, 0.5)`.
    """
    from stellarpdf.core import StellarModel

    base = np.array([4.0, 3.0])
    absmag = np.empty((3, 3, 2))
    for i in range(3):
        for j in range(3):
            absmag[i, j] = base + 10.0 * (i - 1)
            absmag[i, j, 0] += 5.0 * (j - 1)
    return StellarModel([0.0, 1.0, 2.0], [-1.0, -0.5, 0.0], absmag)


@pytest.fixture
def unit_grid_bounds():
    """Working grid `E in [0, 4], mu in [0, 20]` with 5 x 5 bins."""
    return (0.0, 4.0, 0.0, 20.0, 5, 5)


def make_star(absmag, A, mu, E, err=0.02, **kwargs):
    """Noiseless star with the given SED at `(mu, E)`."""
    from stellarpdf.core import StarMagnitudes

    absmag = np.asarray(absmag, dtype=float)
    m = absmag + mu + E * np.asarray(A, dtype=float)
    return StarMagnitudes(m, np.full(len(m), err), **kwargs)


@pytest.fixture
def star_factory():
    """The `make_star` helper, for tests that build their own stars."""
    return make_star


@pytest.fixture
def exact_star_2band(stellar_model_2band):
    """Star matching the central cell of the two-band library."""
    sed = stellar_model_2band.get_sed(1, 1)[0]
    return make_star(sed, [1.0, 0.5], mu=10.0, E=2.0, err=0.01)


@pytest.fixture
def pixel_5band(stellar_model_5band):
    """Three noiseless stars drawn from the five-band library."""
    from stellarpdf.core import StellarData

    stars = [
        make_star(stellar_model_5band.absmag[1, 2], PS1_A, mu=9.0, E=0.5, obj_id=1),
        make_star(stellar_model_5band.absmag[2, 1], PS1_A, mu=12.0, E=1.5, obj_id=2),
        make_star(stellar_model_5band.absmag[0, 0], PS1_A, mu=14.5, E=0.2, obj_id=3),
    ]
    return StellarData(stars, pix_name="pixel 42", nside=64, l=90.0, b=10.0)


@pytest.fixture
def los_model():
    """Galactic prior along a mid-latitude sightline."""
    from stellarpdf.priors import GalacticLOSModel

    return GalacticLOSModel(90.0, 10.0, mu_min=0.0, mu_max=22.0, dmu=0.05)
