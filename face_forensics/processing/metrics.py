"""
Forensic quality metrics module.

Evaluates the final enhanced image based on:
- Sharpness (variance of the Laplacian)
- Edge energy (mean Sobel gradient magnitude)
- Left/right mirror symmetry
- Composite spoof (recapture) risk

All measures use luminance in [0, 255]. Laplacian and Sobel responses are
taken over interior pixels only; images narrower or shorter than 3 pixels
have no interior and report 0 for both.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict
from .color import Buffer, as_pixels, luminance

# Fixed legacy heuristic. Consumers compare against these exact values,
# so they are not exposed through Config.
BLUR_NORMALIZER = 2000.0
GRADIENT_NORMALIZER = 50.0
SPOOF_WEIGHTS = (0.6, 0.3, 0.1)  # (1 - blur), gradient, symmetry

# Display bands for spoof risk
RISK_MEDIUM_THRESHOLD = 0.33
RISK_HIGH_THRESHOLD = 0.66


@dataclass(frozen=True)
class ForensicMetrics:
    """
    Metrics computed once per pipeline run from the final image.
    
    Attributes:
        blur_variance: Laplacian variance (>= 0, higher = sharper)
        gradient_energy: Mean Sobel magnitude (>= 0)
        symmetry_score: Left/right similarity in [0, 1]
        spoof_risk: Composite recapture risk in [0, 1]
    """
    blur_variance: float
    gradient_energy: float
    symmetry_score: float
    spoof_risk: float
    
    @property
    def risk_level(self) -> str:
        return risk_level(self.spoof_risk)
    
    def to_dict(self) -> Dict[str, float]:
        """Flat key-value form used in exported reports."""
        return {
            'blurVariance': self.blur_variance,
            'gradientEnergy': self.gradient_energy,
            'symmetryScore': self.symmetry_score,
            'spoofRisk': self.spoof_risk,
        }


def _has_interior(gray: np.ndarray) -> bool:
    height, width = gray.shape
    return width >= 3 and height >= 3


def compute_blur_variance(gray: np.ndarray) -> float:
    """
    Compute population variance of the 4-neighbour Laplacian.
    
    Higher values indicate sharper images; near zero means heavy blur.
    
    Args:
        gray: Luminance array (height, width)
    
    Returns:
        Laplacian variance over interior pixels (0 if none)
    """
    if not _has_interior(gray):
        return 0.0
    
    g = gray.astype(np.float64)
    lap = (
        -g[1:-1, :-2] - g[1:-1, 2:]
        - g[:-2, 1:-1] - g[2:, 1:-1]
        + 4 * g[1:-1, 1:-1]
    )
    return float(lap.var())


def compute_gradient_energy(gray: np.ndarray) -> float:
    """
    Compute mean Sobel gradient magnitude over interior pixels.
    
    Args:
        gray: Luminance array (height, width)
    
    Returns:
        Mean of hypot(Gx, Gy) (0 if no interior)
    """
    if not _has_interior(gray):
        return 0.0
    
    g = gray.astype(np.float64)
    gx = (
        -g[:-2, :-2] - 2 * g[1:-1, :-2] - g[2:, :-2]
        + g[:-2, 2:] + 2 * g[1:-1, 2:] + g[2:, 2:]
    )
    gy = (
        -g[:-2, :-2] - 2 * g[:-2, 1:-1] - g[:-2, 2:]
        + g[2:, :-2] + 2 * g[2:, 1:-1] + g[2:, 2:]
    )
    count = gx.size
    return float(np.hypot(gx, gy).sum() / max(1, count))


def compute_symmetry_score(gray: np.ndarray) -> float:
    """
    Compare each row's left half against its mirrored right half.
    
    A 1-pixel-wide image has no column pairs and scores 0.0.
    
    Args:
        gray: Luminance array (height, width)
    
    Returns:
        Mean of 1 - min(1, |left - right| / 255), in [0, 1]
    """
    mid = gray.shape[1] // 2
    g = gray.astype(np.float64)
    left = g[:, :mid]
    right = g[:, ::-1][:, :mid]
    
    similarity = 1 - np.minimum(1.0, np.abs(left - right) / 255)
    return float(similarity.sum() / max(1, left.size))


def compute_spoof_risk(
    blur_variance: float,
    gradient_energy: float,
    symmetry_score: float
) -> float:
    """
    Combine the three measured signals into a recapture risk.
    
    Low Laplacian variance, strong gradient patterns and high symmetry
    each push the score up.
    
    Returns:
        Spoof risk in [0, 1]
    """
    blur_norm = min(1.0, blur_variance / BLUR_NORMALIZER)
    grad_norm = min(1.0, gradient_energy / GRADIENT_NORMALIZER)
    w_blur, w_grad, w_sym = SPOOF_WEIGHTS
    return min(1.0, w_blur * (1 - blur_norm) + w_grad * grad_norm + w_sym * symmetry_score)


def risk_level(spoof_risk: float) -> str:
    """Band a spoof risk as 'low', 'medium' or 'high'."""
    if spoof_risk > RISK_HIGH_THRESHOLD:
        return 'high'
    if spoof_risk > RISK_MEDIUM_THRESHOLD:
        return 'medium'
    return 'low'


def compute_metrics(buffer: Buffer, width: int, height: int) -> ForensicMetrics:
    """
    Compute the full metrics record for a processed RGBA buffer.
    
    Args:
        buffer: RGBA uint8 buffer (flat or (height, width, 4))
        width: Image width
        height: Image height
    
    Returns:
        ForensicMetrics
    """
    gray = luminance(as_pixels(buffer, width, height))
    
    blur_variance = compute_blur_variance(gray)
    gradient_energy = compute_gradient_energy(gray)
    symmetry_score = compute_symmetry_score(gray)
    
    return ForensicMetrics(
        blur_variance=blur_variance,
        gradient_energy=gradient_energy,
        symmetry_score=symmetry_score,
        spoof_risk=compute_spoof_risk(blur_variance, gradient_energy, symmetry_score),
    )
