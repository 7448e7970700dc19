import dataclasses

import numpy as np
import pytest

from face_forensics.config import load_config
from face_forensics.imaging import RGBAImage


def make_flat(width, height, rgb=(128, 128, 128), alpha=255):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = rgb
    pixels[..., 3] = alpha
    return pixels


def make_checkerboard(size=4, block=2):
    """Alternating black/white blocks, black in the top-left corner."""
    ys, xs = np.mgrid[0:size, 0:size]
    white = ((ys // block) + (xs // block)) % 2 == 1
    pixels = make_flat(size, size, rgb=(0, 0, 0))
    pixels[white, :3] = 255
    return pixels


def make_random(width, height, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)


@pytest.fixture
def config():
    return dataclasses.replace(
        load_config(),
        enable_face_detection=False,
        detector_backend="none",
    )


@pytest.fixture
def checkerboard_image():
    return RGBAImage.from_array(make_checkerboard())
