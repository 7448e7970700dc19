"""
Configuration module for Face Forensics Service.

Loads configuration from environment variables with sensible defaults.
All settings are immutable after initialization; per-run overrides are
made with dataclasses.replace().
"""

import os
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration for Face Forensics Service.
    
    Service Identity:
        service_name: Name of this service instance (log context)
        http_port: Port for Flask HTTP server
    
    Loading:
        max_dimension: Longest side after downscale-on-load (pixels)
        fetch_timeout: Timeout for downloading images by URL (seconds)
        max_upload_mb: Maximum accepted upload size (megabytes)
    
    Enhancement:
        unsharp_radius: Blur kernel radius of the unsharp mask (pixels)
        unsharp_amount: Sharpening gain (0 = no-op, >1 = aggressive)
    
    Face Detection:
        enable_face_detection: Run the external detector on results
        detector_backend: 'insightface' or 'none'
        detector_det_size: Detector input size (width, height)
        detector_score_threshold: Minimum detection confidence
    
    System:
        output_dir: Default directory for exported artifacts
        debug_mode: Enable debug logging
    """
    
    # Service
    service_name: str
    http_port: int
    
    # Loading
    max_dimension: int
    fetch_timeout: float
    max_upload_mb: int
    
    # Enhancement
    unsharp_radius: int
    unsharp_amount: float
    
    # Face detection
    enable_face_detection: bool
    detector_backend: str
    detector_det_size: Tuple[int, int]
    detector_score_threshold: float
    
    # System
    output_dir: str
    debug_mode: bool


def load_config() -> Config:
    """
    Load configuration from environment variables.
    
    Returns:
        Config: Immutable configuration object
    """
    det_size = int(os.getenv('DETECTOR_DET_SIZE', '320'))
    
    return Config(
        # Service
        service_name=os.getenv('SERVICE_NAME', 'face-forensics'),
        http_port=int(os.getenv('HTTP_PORT', '5001')),
        
        # Loading
        max_dimension=int(os.getenv('MAX_DIMENSION', '1024')),
        fetch_timeout=float(os.getenv('FETCH_TIMEOUT', '10')),
        max_upload_mb=int(os.getenv('MAX_UPLOAD_MB', '16')),
        
        # Enhancement
        unsharp_radius=int(os.getenv('UNSHARP_RADIUS', '1')),
        unsharp_amount=float(os.getenv('UNSHARP_AMOUNT', '0.8')),
        
        # Face detection
        enable_face_detection=os.getenv('ENABLE_FACE_DETECTION', 'true').lower() == 'true',
        detector_backend=os.getenv('DETECTOR_BACKEND', 'insightface').lower(),
        detector_det_size=(det_size, det_size),
        detector_score_threshold=float(os.getenv('DETECTOR_SCORE_THRESHOLD', '0.4')),
        
        # System
        output_dir=os.getenv('OUTPUT_DIR', 'outputs'),
        debug_mode=os.getenv('DEBUG', 'false').lower() == 'true',
    )
