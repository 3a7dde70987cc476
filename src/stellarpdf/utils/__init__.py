#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
stellarpdf utilities module: small linear-algebra and image helpers.
"""

from .math import (
    DET_REG,
    det2,
    downsample_area,
    inverse2,
    isPSD,
    sigma_from_inv_cov,
)

__all__ = [
    "DET_REG",
    "det2",
    "inverse2",
    "sigma_from_inv_cov",
    "isPSD",
    "downsample_area",
]
