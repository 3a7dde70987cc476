#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the 2x2 matrix and image helpers in stellarpdf.utils.math.
"""

import numpy as np
import pytest

from stellarpdf.utils.math import (
    DET_REG,
    det2,
    downsample_area,
    inverse2,
    isPSD,
    sigma_from_inv_cov,
)


class TestSymmetric2x2:
    """Determinant and inverse of symmetric 2x2 matrices."""

    def test_det2_matches_numpy(self):
        A = np.array([[4.0, 1.5], [1.5, 2.0]])
        np.testing.assert_allclose(det2(4.0, 1.5, 2.0), np.linalg.det(A))

    def test_det2_regularization(self):
        assert det2(1.0, 1.0, 1.0) == 0.0
        assert det2(1.0, 1.0, 1.0, reg=DET_REG) == DET_REG

    def test_inverse2_vs_numpy(self):
        np.random.seed(42)
        for _ in range(10):
            M = np.random.random((2, 2))
            A = M @ M.T + 0.5 * np.eye(2)
            b00, b01, b11 = inverse2(A[0, 0], A[0, 1], A[1, 1])
            np.testing.assert_allclose(
                [[b00, b01], [b01, b11]], np.linalg.inv(A), rtol=1e-12
            )

    def test_inverse2_singular_is_not_finite(self):
        b00, b01, b11 = inverse2(1.0, 1.0, 1.0)
        assert not np.isfinite(b00)

    def test_inverse2_arrays(self):
        a00 = np.array([2.0, 3.0])
        a01 = np.array([0.5, -1.0])
        a11 = np.array([1.0, 4.0])
        b00, b01, b11 = inverse2(a00, a01, a11)
        for k in range(2):
            A = np.array([[a00[k], a01[k]], [a01[k], a11[k]]])
            B = np.array([[b00[k], b01[k]], [b01[k], b11[k]]])
            np.testing.assert_allclose(A @ B, np.eye(2), atol=1e-12)

    def test_sigma_from_inv_cov(self):
        # Diagonal: sigma_k = 1 / sqrt(inv_cov_kk)
        sigma = sigma_from_inv_cov(4.0, 0.0, 25.0, reg=0.0)
        np.testing.assert_allclose(sigma, [0.5, 0.2])

    def test_sigma_from_singular_inv_cov_is_finite(self):
        sigma = sigma_from_inv_cov(1.0, 1.0, 1.0)
        assert np.all(np.isfinite(sigma))
        assert np.all(sigma > 100.0)


class TestIsPSD:
    """Positive semi-definiteness check."""

    def test_psd(self):
        assert isPSD(np.array([[2.0, 1.0], [1.0, 2.0]]))
        assert isPSD(np.array([[1.0, 1.0], [1.0, 1.0]]))

    def test_not_psd(self):
        assert not isPSD(np.array([[1.0, 2.0], [2.0, 1.0]]))

    def test_not_symmetric(self):
        assert not isPSD(np.array([[1.0, 0.5], [0.0, 1.0]]))

    def test_large_dynamic_range(self):
        A = np.array([[2.0e4, 1.5e4], [1.5e4, 1.125e4]])
        assert isPSD(A)


class TestDownsampleArea:
    """Block averaging of supersampled images."""

    def test_block_means(self):
        img = np.arange(36, dtype=float).reshape(6, 6)
        out = downsample_area(img, 3)
        assert out.shape == (2, 2)
        np.testing.assert_allclose(out[0, 0], img[:3, :3].mean())
        np.testing.assert_allclose(out[1, 0], img[3:, :3].mean())
        np.testing.assert_allclose(out[1, 1], img[3:, 3:].mean())

    def test_preserves_mean(self):
        np.random.seed(1)
        img = np.random.random((15, 10))
        out = downsample_area(img, 5)
        np.testing.assert_allclose(out.mean(), img.mean())

    def test_factor_one_is_copy(self):
        img = np.ones((3, 4))
        out = downsample_area(img, 1)
        np.testing.assert_array_equal(out, img)
        out[0, 0] = 5.0
        assert img[0, 0] == 1.0

    def test_bad_factor(self):
        with pytest.raises(ValueError):
            downsample_area(np.ones((4, 4)), 0)
        with pytest.raises(ValueError):
            downsample_area(np.ones((4, 5)), 2)
