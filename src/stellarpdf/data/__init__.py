#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
stellarpdf data module: HDF5 persistence of photometry and surfaces.
"""

from .io import (
    ImgWriteBuffer,
    list_pixels,
    load_stellar_data,
    load_surfaces,
    save_stellar_data,
)

__all__ = [
    "load_stellar_data",
    "save_stellar_data",
    "list_pixels",
    "ImgWriteBuffer",
    "load_surfaces",
]
