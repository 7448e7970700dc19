"""
Image processing package.

Contains modules for:
- Colour conversion (luminance, Y'UV)
- Separable box blur
- 3x3 median denoising
- Luma histogram equalization
- Unsharp mask sharpening
- Forensic metrics
- Enhancement pipeline
"""

from .blur import box_blur
from .median import median3x3
from .equalize import equalize_luma
from .sharpen import unsharp_mask, DEFAULT_UNSHARP_RADIUS, DEFAULT_UNSHARP_AMOUNT
from .metrics import ForensicMetrics, compute_metrics, compute_spoof_risk, risk_level
from .preprocessing import enhance_image

__all__ = [
    'box_blur',
    'median3x3',
    'equalize_luma',
    'unsharp_mask',
    'DEFAULT_UNSHARP_RADIUS',
    'DEFAULT_UNSHARP_AMOUNT',
    'ForensicMetrics',
    'compute_metrics',
    'compute_spoof_risk',
    'risk_level',
    'enhance_image',
]
