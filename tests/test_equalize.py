"""Tests for luma histogram equalization."""

import numpy as np
import pytest

from face_forensics.processing.color import rgb_to_yuv
from face_forensics.processing.equalize import equalize_luma

from conftest import make_checkerboard, make_flat, make_random


def test_shape_and_alpha_preserved():
    pixels = make_random(6, 4)
    out = equalize_luma(pixels, 6, 4)
    assert out.shape == pixels.shape
    assert np.array_equal(out[..., 3], pixels[..., 3])


def test_flat_gray_maps_to_single_bin_floor():
    # One populated bin: cdf == cdf_min everywhere, so Y' = 0
    pixels = make_flat(5, 5, rgb=(128, 128, 128), alpha=200)
    out = equalize_luma(pixels, 5, 5)
    assert np.all(out[..., :3] == 0)
    assert np.all(out[..., 3] == 200)


def test_flat_image_stays_neutral():
    pixels = make_flat(4, 3, rgb=(90, 90, 90))
    out = equalize_luma(pixels, 4, 3)
    assert np.all(out[..., 0] == out[..., 1])
    assert np.all(out[..., 1] == out[..., 2])


def test_two_level_image_stretched_to_full_range():
    pixels = make_flat(6, 2, rgb=(100, 100, 100))
    pixels[:, 3:, :3] = 150
    out = equalize_luma(pixels, 6, 2)
    assert np.all(out[:, :3, :3] == 0)
    assert np.all(out[:, 3:, :3] == 255)


def test_black_and_white_checkerboard_unchanged():
    pixels = make_checkerboard()
    out = equalize_luma(pixels, 4, 4)
    assert np.array_equal(out, pixels)


def test_output_luma_spans_unit_range():
    levels = np.random.default_rng(3).integers(0, 256, size=(16, 16), dtype=np.uint8)
    pixels = make_flat(16, 16)
    pixels[..., :3] = levels[..., None]
    out = equalize_luma(pixels, 16, 16)
    y, _, _ = rgb_to_yuv(out)
    assert y.min() < 0.01
    assert y.max() > 0.99


def test_chrominance_preserved_for_mid_tone_pixel():
    pixels = make_flat(3, 1, rgb=(50, 50, 50))
    pixels[0, 1, :3] = (100, 120, 140)
    pixels[0, 2, :3] = (200, 200, 200)
    out = equalize_luma(pixels, 3, 1)
    # Ranks 0, 1, 2 of 3 -> Y' = 0, 0.5, 1
    assert out[0, 1, :3].tolist() == [111, 131, 151]
    _, u_in, v_in = rgb_to_yuv(pixels)
    _, u_out, v_out = rgb_to_yuv(out)
    assert u_out[0, 1] == pytest.approx(u_in[0, 1], abs=2 / 255)
    assert v_out[0, 1] == pytest.approx(v_in[0, 1], abs=2 / 255)
