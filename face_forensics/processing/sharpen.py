"""
Unsharp mask sharpening.

out = src + amount * (src - blur(src, radius)), applied to R, G, B with
rounding and saturation; alpha passes through.
"""

import math
import numpy as np
from .blur import box_blur
from .color import Buffer, as_pixels, like_input, to_channel_u8
from ..errors import InvalidInputError

# radius: blur kernel radius in pixels
DEFAULT_UNSHARP_RADIUS = 1
# amount: sharpening gain (0 = no-op, >1 = aggressive)
DEFAULT_UNSHARP_AMOUNT = 0.8


def unsharp_mask(
    buffer: Buffer,
    width: int,
    height: int,
    radius: int = DEFAULT_UNSHARP_RADIUS,
    amount: float = DEFAULT_UNSHARP_AMOUNT
) -> np.ndarray:
    """
    Sharpen an RGBA buffer with an unsharp mask.
    
    Args:
        buffer: RGBA uint8 buffer (flat or (height, width, 4))
        width: Image width
        height: Image height
        radius: Box blur radius used for the mask
        amount: Gain applied to the high-frequency difference
    
    Returns:
        New buffer with the same shape as the input
    """
    pixels = as_pixels(buffer, width, height)
    if not math.isfinite(amount) or amount < 0:
        raise InvalidInputError(f'Sharpening amount must be a finite value >= 0, got {amount}')
    
    blurred = box_blur(pixels, width, height, radius)
    
    src = pixels[..., :3].astype(np.float64)
    diff = src - blurred[..., :3].astype(np.float64)
    
    out = np.empty_like(pixels)
    out[..., :3] = to_channel_u8(src + amount * diff)
    out[..., 3] = pixels[..., 3]
    return like_input(out, buffer)
