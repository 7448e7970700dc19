"""
Rank-order median filter (3x3).

Replaces R, G and B of every pixel with the median of its clamped 3x3
neighbourhood. Alpha is copied from the source pixel.
"""

import numpy as np
from .color import Buffer, as_pixels, like_input

# 0-based rank of the median among 9 samples
MEDIAN_RANK = 4


def median3x3(buffer: Buffer, width: int, height: int) -> np.ndarray:
    """
    Apply a 3x3 median filter to the colour channels of an RGBA buffer.
    
    Args:
        buffer: RGBA uint8 buffer (flat or (height, width, 4))
        width: Image width
        height: Image height
    
    Returns:
        New buffer with the same shape as the input
    """
    pixels = as_pixels(buffer, width, height)
    padded = np.pad(pixels[..., :3], ((1, 1), (1, 1), (0, 0)), mode='edge')
    
    samples = np.stack([
        padded[dy:dy + height, dx:dx + width]
        for dy in range(3)
        for dx in range(3)
    ])
    
    out = pixels.copy()
    out[..., :3] = np.partition(samples, MEDIAN_RANK, axis=0)[MEDIAN_RANK]
    return like_input(out, buffer)
