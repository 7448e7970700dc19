"""
Separable box blur.

Two-pass sliding-window mean (horizontal into a temporary buffer, then
vertical) with edge replication at the borders. Window sums come from
cumulative sums, so cost does not depend on the radius.
"""

import numpy as np
from .color import Buffer, as_pixels, like_input, to_channel_u8
from ..errors import InvalidInputError


def _sliding_mean(data: np.ndarray, radius: int, axis: int) -> np.ndarray:
    """Mean over a (2r+1) window along one axis, edges replicated."""
    pad = [(0, 0)] * data.ndim
    pad[axis] = (radius, radius)
    padded = np.pad(data.astype(np.int64), pad, mode='edge')
    
    # Leading zero so that window(x) = csum[x + 2r + 1] - csum[x]
    csum = np.cumsum(padded, axis=axis)
    zero_shape = list(csum.shape)
    zero_shape[axis] = 1
    csum = np.concatenate([np.zeros(zero_shape, dtype=np.int64), csum], axis=axis)
    
    size = data.shape[axis]
    span = 2 * radius + 1
    upper = np.take(csum, np.arange(span, span + size), axis=axis)
    lower = np.take(csum, np.arange(size), axis=axis)
    
    return to_channel_u8((upper - lower) * (1.0 / span))


def box_blur(buffer: Buffer, width: int, height: int, radius: int) -> np.ndarray:
    """
    Blur every channel (alpha included) of an RGBA buffer.
    
    Args:
        buffer: RGBA uint8 buffer (flat or (height, width, 4))
        width: Image width
        height: Image height
        radius: Window radius in pixels (0 = identity)
    
    Returns:
        New buffer with the same shape as the input
    """
    pixels = as_pixels(buffer, width, height)
    if radius < 0:
        raise InvalidInputError(f'Blur radius must be >= 0, got {radius}')
    
    if radius == 0:
        return like_input(pixels.copy(), buffer)
    
    tmp = _sliding_mean(pixels, radius, axis=1)
    out = _sliding_mean(tmp, radius, axis=0)
    return like_input(out, buffer)
