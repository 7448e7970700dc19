"""
Error types for Face Forensics Service.

Only invalid input and detector failures are errors; degenerate geometry
(images smaller than 3x3) is handled by the metrics engine as zero-valued
interior metrics.
"""


class FaceForensicsError(Exception):
    """Base class for all service errors."""


class InvalidInputError(FaceForensicsError, ValueError):
    """Image has a zero dimension, a mismatched buffer, or bad parameters."""


class DetectorError(FaceForensicsError, RuntimeError):
    """Face detector backend is unavailable or failed on an image."""
