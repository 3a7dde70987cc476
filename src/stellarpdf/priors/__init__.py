#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Prior probability distributions for the stellar surfaces.

All functions follow the naming convention logp_* for log-probability
densities and logn_* for log-number densities.
"""

# Astrometric priors
from .astrometric import logp_parallax, parallax_from_mu

# Galactic structure priors
from .galactic import GalacticLOSModel, logn_disk, logn_halo, logp_feh

__all__ = [
    # Astrometric priors
    "parallax_from_mu",
    "logp_parallax",
    # Galactic structure priors
    "GalacticLOSModel",
    "logn_disk",
    "logn_halo",
    "logp_feh",
]
