"""
Face detection module.

Face detection is an external capability: anything with
detect(image) -> list of FaceBox can be plugged in. Boxes are used for
annotation only; no metric depends on them.

Backends:
- InsightFaceDetector: InsightFace FaceAnalysis (detection model only)
- NullDetector: always reports no faces
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol
from .config import Config
from .errors import DetectorError
from .imaging import RGBAImage
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FaceBox:
    """Face bounding box in pixel coordinates of the analysed image."""
    x: float
    y: float
    width: float
    height: float
    score: Optional[float] = None
    
    @classmethod
    def from_corners(
        cls,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        canvas_width: int,
        canvas_height: int,
        score: Optional[float] = None
    ) -> 'FaceBox':
        """Build a box from [x1, y1, x2, y2], clipped to the canvas."""
        left = min(max(x1, 0.0), canvas_width)
        top = min(max(y1, 0.0), canvas_height)
        right = min(max(x2, left), canvas_width)
        bottom = min(max(y2, top), canvas_height)
        return cls(x=left, y=top, width=right - left, height=bottom - top, score=score)
    
    def to_dict(self) -> Dict[str, float]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
        }


class FaceDetector(Protocol):
    """Pluggable face detection capability."""
    
    backend: str
    
    def detect(self, image: RGBAImage) -> List[FaceBox]:
        ...


class NullDetector:
    """Detector used when detection is disabled or unavailable."""
    
    backend = 'none'
    
    def detect(self, image: RGBAImage) -> List[FaceBox]:
        return []


class InsightFaceDetector:
    """
    Face detector backed by an InsightFace FaceAnalysis instance.
    
    Faces below score_threshold are dropped; boxes are clipped to the
    image bounds.
    """
    
    backend = 'insightface'
    
    def __init__(self, face_app: Any, score_threshold: float = 0.4):
        self.face_app = face_app
        self.score_threshold = score_threshold
    
    def detect(self, image: RGBAImage) -> List[FaceBox]:
        try:
            faces = self.face_app.get(image.to_bgr())
        except Exception as e:
            raise DetectorError(f'InsightFace detection failed: {e}') from e
        
        boxes: List[FaceBox] = []
        for face in faces:
            score = float(getattr(face, 'det_score', 1.0))
            if score < self.score_threshold:
                continue
            
            x1, y1, x2, y2 = (float(v) for v in face.bbox[:4])
            boxes.append(FaceBox.from_corners(
                x1, y1, x2, y2, image.width, image.height, score=score
            ))
        
        return boxes


def initialize_face_app(config: Config) -> Any:
    """
    Initialize InsightFace FaceAnalysis with the detection model only.
    
    Args:
        config: Service configuration
    
    Returns:
        Initialized FaceAnalysis instance
    """
    logger.info('Initializing InsightFace detector...')
    
    # Model runtime is only loaded when this backend is selected
    from insightface.app import FaceAnalysis
    
    face_app = FaceAnalysis(
        providers=['CPUExecutionProvider'],
        allowed_modules=['detection']
    )
    face_app.prepare(
        ctx_id=0,
        det_thresh=config.detector_score_threshold,
        det_size=config.detector_det_size
    )
    
    logger.info(f'✅ InsightFace initialized (det_size={config.detector_det_size})')
    
    return face_app


def initialize_face_detector(config: Config) -> FaceDetector:
    """
    Create the configured face detector.
    
    Initialization failures are logged and yield a NullDetector, so the
    enhancement pipeline keeps working without face boxes.
    
    Args:
        config: Service configuration
    
    Returns:
        FaceDetector instance
    
    Raises:
        ValueError: If detector_backend is unknown
    """
    if not config.enable_face_detection or config.detector_backend == 'none':
        logger.info('Face detection disabled')
        return NullDetector()
    
    if config.detector_backend != 'insightface':
        raise ValueError(f'Unknown detector backend: {config.detector_backend}')
    
    try:
        face_app = initialize_face_app(config)
    except Exception as e:
        logger.warning(f'Face detector unavailable, continuing without it: {e}')
        return NullDetector()
    
    return InsightFaceDetector(face_app, config.detector_score_threshold)
