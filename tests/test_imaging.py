"""Tests for image loading, resizing and export."""

from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest
import requests

from face_forensics import imaging
from face_forensics.errors import InvalidInputError
from face_forensics.face_app import FaceBox
from face_forensics.imaging import (
    OVERLAY_COLOR,
    RGBAImage,
    decode_image,
    draw_face_boxes,
    encode_png,
    fetch_image,
    fit_within,
    load_image,
    save_png,
)

from conftest import make_flat, make_random


def test_png_export_preserves_rgba(tmp_path):
    image = RGBAImage.from_array(make_random(5, 4, seed=12))
    path = save_png(image, tmp_path / "nested" / "enhanced.png")
    loaded = load_image(path)
    assert (loaded.width, loaded.height) == (5, 4)
    assert np.array_equal(loaded.pixels, image.pixels)


def test_decode_grayscale_adds_opaque_alpha():
    gray = np.full((3, 2), 77, dtype=np.uint8)
    ok, buf = cv2.imencode(".png", gray)
    assert ok
    image = decode_image(buf.tobytes())
    assert image.pixels.shape == (3, 2, 4)
    assert np.all(image.pixels[..., :3] == 77)
    assert np.all(image.pixels[..., 3] == 255)


def test_decode_bgr_channel_order():
    bgr = np.zeros((8, 8, 3), dtype=np.uint8)
    bgr[..., 2] = 255  # red in OpenCV order
    _, buf = cv2.imencode(".png", bgr)
    image = decode_image(buf.tobytes())
    assert image.pixels[0, 0].tolist() == [255, 0, 0, 255]


def test_decode_rejects_garbage():
    with pytest.raises(InvalidInputError):
        decode_image(b"definitely not an image")
    with pytest.raises(InvalidInputError):
        decode_image(b"")


def test_fit_within_keeps_small_images():
    image = RGBAImage.from_array(make_flat(100, 50))
    assert fit_within(image, 1024) is image


def test_fit_within_preserves_aspect_ratio():
    image = RGBAImage.from_array(make_flat(3000, 1000))
    resized = fit_within(image, 1024)
    assert (resized.width, resized.height) == (1024, 341)


def test_fit_within_never_collapses_to_zero():
    image = RGBAImage.from_array(make_flat(1000, 3))
    resized = fit_within(image, 100)
    assert (resized.width, resized.height) == (100, 1)


def test_fetch_image_downloads_and_decodes(monkeypatch):
    png = encode_png(RGBAImage.from_array(make_flat(4, 2, rgb=(1, 2, 3))))
    response = MagicMock(content=png)
    get = MagicMock(return_value=response)
    monkeypatch.setattr(imaging.requests, "get", get)

    image = fetch_image("http://example.test/face.png", timeout=3)

    get.assert_called_once_with("http://example.test/face.png", timeout=3)
    response.raise_for_status.assert_called_once()
    assert image.pixels[0, 0].tolist() == [1, 2, 3, 255]


def test_fetch_image_propagates_http_errors(monkeypatch):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
    monkeypatch.setattr(imaging.requests, "get", MagicMock(return_value=response))
    with pytest.raises(requests.exceptions.HTTPError):
        fetch_image("http://example.test/missing.png")


def test_draw_face_boxes_on_copy():
    image = RGBAImage.from_array(make_flat(40, 40, rgb=(0, 0, 0)))
    annotated = draw_face_boxes(image, [FaceBox(5, 5, 20, 20)])
    assert annotated.pixels[5, 15].tolist() == list(OVERLAY_COLOR)
    assert np.all(image.pixels[..., :3] == 0)
    assert annotated.pixels[35, 35].tolist() == [0, 0, 0, 255]
