#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the package layout and top-level exports.
"""

import importlib

import pytest


def test_version():
    import stellarpdf

    assert isinstance(stellarpdf.__version__, str)


@pytest.mark.parametrize(
    "module",
    [
        "stellarpdf.core",
        "stellarpdf.analysis",
        "stellarpdf.data",
        "stellarpdf.dust",
        "stellarpdf.priors",
        "stellarpdf.utils",
    ],
)
def test_subpackage_exports(module):
    mod = importlib.import_module(module)
    for name in mod.__all__:
        assert hasattr(mod, name), f"{module} is missing {name}"


def test_top_level_exports():
    import stellarpdf

    for name in stellarpdf.__all__:
        assert hasattr(stellarpdf, name)
    assert stellarpdf.evaluate_pixel is stellarpdf.analysis.evaluate_pixel
