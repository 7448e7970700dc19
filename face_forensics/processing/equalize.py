"""
Luma histogram equalization.

Equalizes the Y' channel of a Y'UV decomposition through a CDF remap and
rebuilds RGB with the original chrominance, so only brightness
distribution changes.
"""

import numpy as np
from .color import Buffer, as_pixels, like_input, rgb_to_yuv, round_half_up, yuv_to_rgb

HISTOGRAM_BINS = 256


def equalize_luma(buffer: Buffer, width: int, height: int) -> np.ndarray:
    """
    Equalize luminance while preserving chrominance and alpha.
    
    Y is quantized to 256 bins and remapped with
    (cdf[bin] - cdf_min) / max(1, total - cdf_min), clamped to [0, 1].
    
    Args:
        buffer: RGBA uint8 buffer (flat or (height, width, 4))
        width: Image width
        height: Image height
    
    Returns:
        New buffer with the same shape as the input
    """
    pixels = as_pixels(buffer, width, height)
    
    y, u, v = rgb_to_yuv(pixels)
    u = u.astype(np.float32)
    v = v.astype(np.float32)
    bins = round_half_up(y * 255).astype(np.int64)
    
    hist = np.bincount(bins.ravel(), minlength=HISTOGRAM_BINS)
    cdf = np.cumsum(hist)
    populated = cdf[cdf > 0]
    cdf_min = int(populated[0]) if populated.size else 0
    total = width * height
    
    equalized = (cdf[bins] - cdf_min) / max(1, total - cdf_min)
    equalized = np.clip(equalized, 0.0, 1.0).astype(np.float32)
    
    out = np.empty_like(pixels)
    out[..., :3] = yuv_to_rgb(equalized, u, v)
    out[..., 3] = pixels[..., 3]
    return like_input(out, buffer)
