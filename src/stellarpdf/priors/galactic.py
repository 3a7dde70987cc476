#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Galactic structure priors along a line of sight.

This module provides number-density models for the thin disk, thick disk
and halo, Gaussian metallicity distributions for each component, and a
line-of-sight model that combines them into a prior over distance modulus
and metallicity.
"""

import numpy as np
from astropy import units
from astropy.coordinates import SkyCoord
from astropy.coordinates import CylindricalRepresentation as CylRep
from scipy.special import logsumexp

__all__ = [
    "logn_disk",
    "logn_halo",
    "logp_feh",
    "GalacticLOSModel",
]


def logn_disk(R, Z, R_solar=8.2, Z_solar=0.025, R_scale=2.6, Z_scale=0.3, R_smooth=2.0):
    """
    Log-number density for the Galactic disk stellar population.

    Implements an exponential disk model with separate radial and vertical
    scale lengths, smoothed near the Galactic center to avoid singularities.

    Parameters
    ----------
    R : array_like
        Galactocentric cylindrical radius in kpc.
    Z : array_like
        Height above the Galactic midplane in kpc.
    R_solar : float, optional
        Solar Galactocentric radius in kpc. Default is 8.2.
    Z_solar : float, optional
        Solar height above midplane in kpc. Default is 0.025.
    R_scale : float, optional
        Disk radial scale length in kpc. Default is 2.6.
    Z_scale : float, optional
        Disk vertical scale height in kpc. Default is 0.3.
    R_smooth : float, optional
        Smoothing radius to avoid central singularity in kpc. Default is 2.0.

    Returns
    -------
    logn : array_like
        Log-number density relative to the Solar neighborhood.
    """
    R = np.asarray(R)
    Z = np.asarray(Z)

    # Smoothed effective radius
    R_eff = np.sqrt(R**2 + R_smooth**2)

    radial_term = (R_eff - R_solar) / R_scale
    vertical_term = (np.abs(Z) - np.abs(Z_solar)) / Z_scale

    return -(radial_term + vertical_term)


def logn_halo(
    R,
    Z,
    R_solar=8.2,
    Z_solar=0.025,
    R_smooth=2.0,
    eta=4.2,
    q_ctr=0.2,
    q_inf=0.8,
    r_q=6.0,
):
    """
    Log-number density for the Galactic halo stellar population.

    A flattened power-law halo whose oblateness `q` relaxes from `q_ctr`
    near the centre to `q_inf` at large radii over a scale `r_q`.

    Parameters
    ----------
    R : array_like
        Galactocentric cylindrical radius in kpc.
    Z : array_like
        Height above the Galactic midplane in kpc.
    R_solar, Z_solar : float, optional
        Solar position in kpc. Defaults are 8.2 and 0.025.
    R_smooth : float, optional
        Smoothing radius to avoid central singularity in kpc. Default is 2.0.
    eta : float, optional
        Power-law index for halo density profile. Default is 4.2.
    q_ctr, q_inf : float, optional
        Central and asymptotic oblateness. Defaults are 0.2 and 0.8.
    r_q : float, optional
        Scale radius for oblateness transition in kpc. Default is 6.0.

    Returns
    -------
    logn : array_like
        Log-number density relative to the Solar neighborhood.
    """
    R = np.asarray(R)
    Z = np.asarray(Z)

    r = np.sqrt(R**2 + Z**2)
    r_prime = np.sqrt(r**2 + r_q**2)
    q = q_inf - (q_inf - q_ctr) * np.exp(1.0 - r_prime / r_q)
    R_eff = np.sqrt(R**2 + (Z / q) ** 2 + R_smooth**2)

    # Solar normalization values
    r_solar = np.sqrt(R_solar**2 + Z_solar**2)
    r_prime_solar = np.sqrt(r_solar**2 + r_q**2)
    q_solar = q_inf - (q_inf - q_ctr) * np.exp(1.0 - r_prime_solar / r_q)
    R_eff_solar = np.sqrt(R_solar**2 + (Z_solar / q_solar) ** 2 + R_smooth**2)

    return -eta * np.log(R_eff / R_eff_solar)


def logp_feh(feh, feh_mean=-0.2, feh_sigma=0.3):
    """
    Gaussian log-prior for stellar metallicity.

    Parameters
    ----------
    feh : array_like
        Stellar metallicity [Fe/H] in dex.
    feh_mean : float, optional
        Mean metallicity of the population in dex. Default is -0.2 (thin disk).
    feh_sigma : float, optional
        Metallicity dispersion in dex. Default is 0.3.

    Returns
    -------
    logp : array_like
        Normalized log-probability density for the input metallicities.
    """
    feh = np.asarray(feh)

    chi2 = (feh - feh_mean) ** 2 / feh_sigma**2
    log_norm = np.log(2.0 * np.pi * feh_sigma**2)

    return -0.5 * (chi2 + log_norm)


class GalacticLOSModel(object):
    """
    Thin disk + thick disk + halo prior along one line of sight.

    The number density of each component is tabulated once per unit
    distance modulus on a fine grid along the sightline and linearly
    interpolated afterwards, so `log_prior` can be evaluated cheaply for
    every stellar type of every star in a pixel.

    Parameters
    ----------
    l, b : float
        Galactic coordinates of the sightline in degrees.

    mu_min, mu_max : float, optional
        Range of the distance-modulus grid. Defaults are `-5.` and `25.`.

    dmu : float, optional
        Grid spacing in distance modulus. Default is `0.01`.

    R_solar, Z_solar : float, optional
        Solar position in kpc. Defaults are 8.2 and 0.025.

    R_thin, Z_thin, Rs_thin : float, optional
        Thin disk scale length, scale height and smoothing radius (kpc).

    R_thick, Z_thick, Rs_thick, f_thick : float, optional
        Thick disk scale length, scale height, smoothing radius (kpc) and
        relative normalization.

    Rs_halo, q_halo_ctr, q_halo_inf, r_q_halo, eta_halo, f_halo : float, optional
        Halo smoothing radius, oblateness profile, power-law index and
        relative normalization.

    feh_thin, feh_thin_sigma, feh_thick, feh_thick_sigma, feh_halo, feh_halo_sigma : float, optional
        Mean and dispersion of [Fe/H] in each component.

    Notes
    -----
    The prior on distance modulus includes the volume element
    `dV ∝ d^3 dmu`, i.e. `3 ln d` in log-space. The metallicity prior
    mixes the per-component Gaussians using each component's fractional
    contribution at that distance, so::

        log p(mu, FeH) = logsumexp_k [log n_k(mu) + 3 ln d + log p_k(FeH)]

    The absolute magnitude does not enter the spatial prior; the
    luminosity function is supplied by the stellar library.

    Examples
    --------
    >>> los = GalacticLOSModel(l=90., b=10.)
    >>> lnp = los.log_prior(mu=10., Mr=4.5, FeH=-0.3)
    """

    def __init__(
        self,
        l,
        b,
        mu_min=-5.0,
        mu_max=25.0,
        dmu=0.01,
        R_solar=8.2,
        Z_solar=0.025,
        R_thin=2.6,
        Z_thin=0.3,
        Rs_thin=2.0,
        R_thick=2.0,
        Z_thick=0.9,
        f_thick=0.04,
        Rs_thick=2.0,
        Rs_halo=2.0,
        q_halo_ctr=0.2,
        q_halo_inf=0.8,
        r_q_halo=6.0,
        eta_halo=4.2,
        f_halo=0.005,
        feh_thin=-0.2,
        feh_thin_sigma=0.3,
        feh_thick=-0.7,
        feh_thick_sigma=0.4,
        feh_halo=-1.6,
        feh_halo_sigma=0.5,
    ):
        if mu_max <= mu_min or dmu <= 0:
            raise ValueError(
                "Invalid distance-modulus grid ({0}, {1}, {2}).".format(
                    mu_min, mu_max, dmu
                )
            )
        self.l, self.b = float(l), float(b)
        self.feh_params = (
            (feh_thin, feh_thin_sigma),
            (feh_thick, feh_thick_sigma),
            (feh_halo, feh_halo_sigma),
        )

        n_mu = int(np.round((mu_max - mu_min) / dmu)) + 1
        self.mu_grid = np.linspace(mu_min, mu_max, n_mu)
        dists = 10.0 ** (self.mu_grid / 5.0 - 2.0)  # kpc

        # Convert to galactocentric cylindrical coordinates
        coords = SkyCoord(
            l=np.full_like(dists, self.l) * units.deg,
            b=np.full_like(dists, self.b) * units.deg,
            distance=dists * units.kpc,
            frame="galactic",
        )
        coords_cyl = coords.galactocentric.cartesian.represent_as(CylRep)
        R, Z = coords_cyl.rho.to_value(units.kpc), coords_cyl.z.to_value(units.kpc)

        # Volume element per unit distance modulus
        vol_factor = 3.0 * np.log(dists)

        logn_thin = logn_disk(
            R, Z, R_solar=R_solar, Z_solar=Z_solar,
            R_scale=R_thin, Z_scale=Z_thin, R_smooth=Rs_thin,
        )
        logn_thick = logn_disk(
            R, Z, R_solar=R_solar, Z_solar=Z_solar,
            R_scale=R_thick, Z_scale=Z_thick, R_smooth=Rs_thick,
        ) + np.log(f_thick)
        logn_h = logn_halo(
            R, Z, R_solar=R_solar, Z_solar=Z_solar, R_smooth=Rs_halo,
            eta=eta_halo, q_ctr=q_halo_ctr, q_inf=q_halo_inf, r_q=r_q_halo,
        ) + np.log(f_halo)

        # (3, n_mu)
        self.log_dNdmu_comp = np.array([logn_thin, logn_thick, logn_h]) + vol_factor
        self.log_dNdmu_tot = logsumexp(self.log_dNdmu_comp, axis=0)

    def _interp(self, table, mu):
        return np.interp(mu, self.mu_grid, table)

    def log_dNdmu(self, mu):
        """Log-number of stars per unit distance modulus."""
        return self._interp(self.log_dNdmu_tot, mu)

    def log_prior(self, mu, Mr, FeH):
        """
        Joint log-prior over distance modulus and metallicity.

        Parameters
        ----------
        mu : float or array_like
            Distance modulus.

        Mr : float or array_like
            Absolute r-band magnitude (unused by the spatial model).

        FeH : float or array_like
            Metallicity.

        Returns
        -------
        logp : float or `~numpy.ndarray`
        """
        mu, FeH = np.broadcast_arrays(
            np.asarray(mu, dtype=float), np.asarray(FeH, dtype=float)
        )
        terms = [
            self._interp(self.log_dNdmu_comp[k], mu)
            + logp_feh(FeH, feh_mean=fm, feh_sigma=fs)
            for k, (fm, fs) in enumerate(self.feh_params)
        ]
        logp = logsumexp(terms, axis=0)
        if logp.ndim == 0:
            return float(logp)
        return logp

    def __repr__(self):
        return f"GalacticLOSModel(l={self.l}, b={self.b})"
