"""
Pipeline orchestration.

Runs one analysis per request:
- Downscale-on-load to config.max_dimension
- Enhancement (median -> luma equalization -> unsharp mask)
- Metrics on the final image
- Optional face detection on the final image, for annotation only

Each call is independent; nothing is re-run implicitly.
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from .config import Config, load_config
from .face_app import FaceBox, FaceDetector
from .imaging import RGBAImage, fit_within
from .logging_config import get_logger
from .processing.metrics import ForensicMetrics, compute_metrics
from .processing.preprocessing import enhance_image
from .utils.timing import elapsed_ms

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """Enhanced image and the metrics computed from it."""
    enhanced: RGBAImage
    metrics: ForensicMetrics
    timing_ms: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """Pipeline output paired with detected faces and a timestamp."""
    enhanced: RGBAImage
    metrics: ForensicMetrics
    faces: List[FaceBox]
    timestamp: str
    timing_ms: Dict[str, int] = field(default_factory=dict)
    
    def to_report(self) -> Dict[str, Any]:
        """
        Build the exported analysis document.
        
        Returns:
            Dict with timestamp, faces, metrics and riskLevel
        """
        return {
            'timestamp': self.timestamp,
            'faces': [face.to_dict() for face in self.faces],
            'metrics': self.metrics.to_dict(),
            'riskLevel': self.metrics.risk_level,
        }


def run_pipeline(image: RGBAImage, config: Optional[Config] = None) -> PipelineResult:
    """
    Enhance an image and compute its metrics.
    
    Args:
        image: Decoded source image
        config: Service configuration (defaults to load_config())
    
    Returns:
        PipelineResult with the enhanced image and its metrics
    """
    config = config or load_config()
    timing: Dict[str, int] = {}
    
    t0 = time.perf_counter()
    image = fit_within(image, config.max_dimension)
    timing['load'] = elapsed_ms(t0)
    
    t0 = time.perf_counter()
    enhanced_pixels = enhance_image(
        image.pixels,
        image.width,
        image.height,
        radius=config.unsharp_radius,
        amount=config.unsharp_amount
    )
    enhanced = RGBAImage(width=image.width, height=image.height, pixels=enhanced_pixels)
    timing['enhance'] = elapsed_ms(t0)
    
    t0 = time.perf_counter()
    metrics = compute_metrics(enhanced.pixels, enhanced.width, enhanced.height)
    timing['metrics'] = elapsed_ms(t0)
    
    logger.info(
        f'Pipeline {enhanced.width}x{enhanced.height}: '
        f'blur={metrics.blur_variance:.1f} grad={metrics.gradient_energy:.1f} '
        f'sym={metrics.symmetry_score:.3f} spoof={metrics.spoof_risk:.2f}'
    )
    
    return PipelineResult(enhanced=enhanced, metrics=metrics, timing_ms=timing)


def annotate(image: RGBAImage, detector: Optional[FaceDetector]) -> List[FaceBox]:
    """
    Run the external face detector on an image.
    
    Detector failures are logged and yield no faces.
    
    Args:
        image: Final enhanced image
        detector: Face detector, or None to skip detection
    
    Returns:
        List of detected face boxes
    """
    if detector is None:
        return []
    
    try:
        faces = list(detector.detect(image))
    except Exception as e:
        logger.warning(f'Face detection failed ({getattr(detector, "backend", "unknown")}): {e}')
        return []
    
    logger.info(f'Detected {len(faces)} face(s)')
    return faces


def analyze(
    image: RGBAImage,
    config: Optional[Config] = None,
    detector: Optional[FaceDetector] = None
) -> AnalysisResult:
    """
    Full analysis: pipeline, metrics and face annotation.
    
    Args:
        image: Decoded source image
        config: Service configuration (defaults to load_config())
        detector: Face detector (None or disabled detection = no faces)
    
    Returns:
        AnalysisResult
    """
    config = config or load_config()
    start = time.perf_counter()
    
    result = run_pipeline(image, config)
    
    t0 = time.perf_counter()
    faces = annotate(result.enhanced, detector if config.enable_face_detection else None)
    timing = dict(result.timing_ms)
    timing['detect'] = elapsed_ms(t0)
    timing['total'] = elapsed_ms(start)
    
    return AnalysisResult(
        enhanced=result.enhanced,
        metrics=result.metrics,
        faces=faces,
        timestamp=datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        timing_ms=timing,
    )


def save_report(result: AnalysisResult, path: Union[str, Path]) -> Path:
    """
    Write the analysis report as indented JSON.
    
    Args:
        result: Analysis result
        path: Destination file
    
    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_report(), indent=2), encoding='utf-8')
    return path
