"""
Image enhancement module.

Applies the enhancement pipeline before metrics are computed:
1. Denoising (3x3 median)
2. Histogram equalization on the luminance channel
3. Unsharp mask (sharpening)

Stages run strictly in this order: equalization statistics must reflect
denoised data, and sharpening works on the equalized image.
"""

import time
import numpy as np
from .color import Buffer, as_pixels, like_input
from .equalize import equalize_luma
from .median import median3x3
from .sharpen import DEFAULT_UNSHARP_AMOUNT, DEFAULT_UNSHARP_RADIUS, unsharp_mask
from ..errors import FaceForensicsError
from ..logging_config import get_logger

logger = get_logger(__name__)


def _check_stage_output(stage: str, out: np.ndarray, src: np.ndarray) -> None:
    if out.shape != src.shape:
        raise FaceForensicsError(
            f'Stage {stage} changed image shape {src.shape} -> {out.shape}'
        )


def enhance_image(
    buffer: Buffer,
    width: int,
    height: int,
    radius: int = DEFAULT_UNSHARP_RADIUS,
    amount: float = DEFAULT_UNSHARP_AMOUNT
) -> np.ndarray:
    """
    Denoise, equalize and sharpen an RGBA buffer.
    
    Args:
        buffer: RGBA uint8 buffer (flat or (height, width, 4))
        width: Image width
        height: Image height
        radius: Unsharp mask blur radius
        amount: Unsharp mask gain
    
    Returns:
        Enhanced buffer with the same shape as the input
    """
    pixels = as_pixels(buffer, width, height)
    
    t0 = time.perf_counter()
    denoised = median3x3(pixels, width, height)
    _check_stage_output('median', denoised, pixels)
    
    t1 = time.perf_counter()
    equalized = equalize_luma(denoised, width, height)
    _check_stage_output('equalize', equalized, pixels)
    
    t2 = time.perf_counter()
    sharpened = unsharp_mask(equalized, width, height, radius=radius, amount=amount)
    _check_stage_output('unsharp', sharpened, pixels)
    t3 = time.perf_counter()
    
    logger.debug(
        f'Enhanced {width}x{height}: median={1000 * (t1 - t0):.1f}ms '
        f'equalize={1000 * (t2 - t1):.1f}ms unsharp={1000 * (t3 - t2):.1f}ms'
    )
    
    return like_input(sharpened, buffer)
