#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
stellarpdf dust module: extinction coefficients and reddening smoothing.
"""

from .extinction import ExtinctionModel, lb2pix, pix2lb
from .smoothing import EBVSmoothing

__all__ = ["ExtinctionModel", "EBVSmoothing", "lb2pix", "pix2lb"]
