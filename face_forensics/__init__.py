"""
Face Forensics Service - Image Enhancement and Recapture Metrics

Denoises, contrast-normalizes and sharpens a face image, then measures
blur, edge energy, left/right symmetry and a composite spoof risk.
Face detection is a pluggable external capability.
"""

__version__ = "1.0.0"
__author__ = "Face Forensics Team"
