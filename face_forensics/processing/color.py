"""
Sampling and colour conversion module.

Fixed-coefficient transforms shared by the enhancement stages and the
metrics engine:
- RGBA buffer validation and (height, width, 4) views
- Luminance in [0, 255] (BT.601 weights)
- RGB <-> Y'UV on channels normalized to [0, 1]
"""

import numpy as np
from typing import Tuple, Union
from ..errors import InvalidInputError

CHANNELS = 4

LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Y'UV forward rows (U, V) and inverse coefficients
U_WEIGHTS = (-0.14713, -0.28886, 0.436)
V_WEIGHTS = (0.615, -0.51499, -0.10001)
R_FROM_V = 1.13983
G_FROM_U = 0.39465
G_FROM_V = 0.58060
B_FROM_U = 2.03211

Buffer = Union[np.ndarray, bytes, bytearray]


def as_pixels(buffer: Buffer, width: int, height: int) -> np.ndarray:
    """
    Validate an RGBA buffer and return it as a (height, width, 4) view.
    
    Args:
        buffer: Flat or (height, width, 4) uint8 buffer, or raw bytes
        width: Image width in pixels
        height: Image height in pixels
    
    Returns:
        uint8 array of shape (height, width, 4) sharing memory with buffer
    
    Raises:
        InvalidInputError: Zero dimension, wrong dtype or length mismatch
    """
    if width < 1 or height < 1:
        raise InvalidInputError(f'Image must be at least 1x1, got {width}x{height}')
    
    if isinstance(buffer, (bytes, bytearray)):
        arr = np.frombuffer(buffer, dtype=np.uint8)
    else:
        arr = np.asarray(buffer)
    
    if arr.dtype != np.uint8:
        raise InvalidInputError(f'Buffer must be uint8, got {arr.dtype}')
    
    expected = width * height * CHANNELS
    if arr.size != expected:
        raise InvalidInputError(
            f'Buffer length {arr.size} does not match {width}x{height}x{CHANNELS}={expected}'
        )
    
    return arr.reshape(height, width, CHANNELS)


def like_input(pixels: np.ndarray, buffer: Buffer) -> np.ndarray:
    """Reshape a stage result to the caller's buffer layout (bytes -> flat)."""
    if isinstance(buffer, np.ndarray):
        return pixels.reshape(buffer.shape)
    return pixels.reshape(-1)


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to nearest integer with ties toward +inf."""
    return np.floor(values + 0.5)


def to_channel_u8(values: np.ndarray) -> np.ndarray:
    """Round and saturate float channel values to uint8."""
    return np.clip(round_half_up(values), 0, 255).astype(np.uint8)


def luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Compute per-pixel luminance Y = 0.299R + 0.587G + 0.114B.
    
    Values stay in [0, 255]; samples are stored in single precision.
    
    Args:
        pixels: RGBA array of shape (height, width, 4)
    
    Returns:
        float32 array of shape (height, width)
    """
    rgb = pixels[..., :3].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    y = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return y.astype(np.float32)


def rgb_to_yuv(pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert RGBA pixels to Y'UV with channels normalized to [0, 1].
    
    Returns:
        Tuple of (Y, U, V) float64 arrays of shape (height, width)
    """
    r = pixels[..., 0] / 255.0
    g = pixels[..., 1] / 255.0
    b = pixels[..., 2] / 255.0
    
    y = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    u = U_WEIGHTS[0] * r + U_WEIGHTS[1] * g + U_WEIGHTS[2] * b
    v = V_WEIGHTS[0] * r + V_WEIGHTS[1] * g + V_WEIGHTS[2] * b
    return y, u, v


def yuv_to_rgb(y: np.ndarray, u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """
    Convert normalized Y'UV back to saturated 8-bit RGB.
    
    Returns:
        uint8 array of shape (height, width, 3)
    """
    y = y.astype(np.float64)
    u = u.astype(np.float64)
    v = v.astype(np.float64)
    
    r = y + R_FROM_V * v
    g = y - G_FROM_U * u - G_FROM_V * v
    b = y + B_FROM_U * u
    
    return np.stack([to_channel_u8(c * 255) for c in (r, g, b)], axis=-1)
