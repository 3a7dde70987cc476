#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
stellarpdf analysis module: per-star marginalization and pixel-level
evaluation.
"""

from .grid_eval import DEFAULT_CROP, DEFAULT_GRID, evaluate_pixel, grid_eval_stars
from .marginalize import deposit_points, integrate_ml_solution

__all__ = [
    "deposit_points",
    "integrate_ml_solution",
    "grid_eval_stars",
    "evaluate_pixel",
    "DEFAULT_GRID",
    "DEFAULT_CROP",
]
