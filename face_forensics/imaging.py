"""
Image loading and export module.

Handles getting images into and out of the RGBA buffer representation:
- Decoding bytes, local files and HTTP URLs
- Downscale-on-load to a maximum dimension
- PNG encoding
- Face box overlay for annotated exports
"""

import cv2
import numpy as np
import requests
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Sequence, Union
from .errors import InvalidInputError
from .logging_config import get_logger
from .processing.color import as_pixels, round_half_up

if TYPE_CHECKING:
    from .face_app import FaceBox

logger = get_logger(__name__)

DEFAULT_MAX_DIMENSION = 1024

# #22c55e, RGBA order
OVERLAY_COLOR = (34, 197, 94, 255)


@dataclass(frozen=True, eq=False)
class RGBAImage:
    """
    Decoded raster image.
    
    Attributes:
        width: Width in pixels (>= 1)
        height: Height in pixels (>= 1)
        pixels: uint8 array of shape (height, width, 4), channels R, G, B, A
    """
    width: int
    height: int
    pixels: np.ndarray
    
    def __post_init__(self):
        object.__setattr__(self, 'pixels', as_pixels(self.pixels, self.width, self.height))
    
    @classmethod
    def from_array(cls, pixels: np.ndarray) -> 'RGBAImage':
        """Wrap a (height, width, 4) uint8 array."""
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidInputError(f'Expected (height, width, 4) array, got {pixels.shape}')
        return cls(width=pixels.shape[1], height=pixels.shape[0], pixels=pixels)
    
    def to_bgr(self) -> np.ndarray:
        """Convert to OpenCV's 3-channel BGR layout."""
        return cv2.cvtColor(self.pixels, cv2.COLOR_RGBA2BGR)


def decode_image(data: bytes) -> RGBAImage:
    """
    Decode encoded image bytes (PNG, JPEG, ...) into RGBA.
    
    Args:
        data: Encoded image file contents
    
    Returns:
        Decoded RGBAImage
    
    Raises:
        InvalidInputError: If data is empty or cannot be decoded
    """
    if not data:
        raise InvalidInputError('Empty image data')
    
    nparr = np.frombuffer(data, np.uint8)
    image = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    
    if image is None:
        raise InvalidInputError('Failed to decode image')
    
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise InvalidInputError(f'Unsupported image depth: {image.dtype}')
    
    if image.ndim == 2:
        rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    elif image.shape[2] == 3:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    elif image.shape[2] == 4:
        rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    else:
        raise InvalidInputError(f'Unsupported channel count: {image.shape[2]}')
    
    return RGBAImage.from_array(rgba)


def load_image(path: Union[str, Path]) -> RGBAImage:
    """Read and decode an image file."""
    path = Path(path)
    image = decode_image(path.read_bytes())
    logger.debug(f'Loaded {path.name} ({image.width}x{image.height})')
    return image


def fetch_image(url: str, timeout: float = 10.0) -> RGBAImage:
    """
    Download and decode an image over HTTP(S).
    
    Args:
        url: Image URL
        timeout: Request timeout in seconds
    
    Returns:
        Decoded RGBAImage
    
    Raises:
        requests.exceptions.RequestException: On network or HTTP errors
        InvalidInputError: If the response is not a decodable image
    """
    logger.info(f'Downloading image from {url}')
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return decode_image(response.content)


def fit_within(image: RGBAImage, max_dimension: int = DEFAULT_MAX_DIMENSION) -> RGBAImage:
    """
    Downscale so that max(width, height) <= max_dimension.
    
    Aspect ratio is preserved and area resampling is used. Images already
    within bounds are returned unchanged (never upscaled).
    """
    scale = min(1.0, max_dimension / max(image.width, image.height))
    if scale >= 1.0:
        return image
    
    width = max(1, int(round_half_up(image.width * scale)))
    height = max(1, int(round_half_up(image.height * scale)))
    resized = cv2.resize(image.pixels, (width, height), interpolation=cv2.INTER_AREA)
    
    logger.debug(f'Downscaled {image.width}x{image.height} -> {width}x{height}')
    return RGBAImage.from_array(resized)


def encode_png(image: RGBAImage) -> bytes:
    """Encode an RGBA image as PNG bytes."""
    ok, buffer = cv2.imencode('.png', cv2.cvtColor(image.pixels, cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise RuntimeError('PNG encoding failed')
    return buffer.tobytes()


def save_png(image: RGBAImage, path: Union[str, Path]) -> Path:
    """Write an RGBA image to a PNG file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(image))
    return path


def draw_face_boxes(image: RGBAImage, boxes: Sequence['FaceBox']) -> RGBAImage:
    """
    Draw face boxes with 'Face N' labels on a copy of the image.
    
    Args:
        image: Image to annotate
        boxes: Face boxes in pixel coordinates
    
    Returns:
        New annotated RGBAImage
    """
    canvas = image.pixels.copy()
    
    for i, box in enumerate(boxes):
        x1, y1 = int(round(box.x)), int(round(box.y))
        x2, y2 = int(round(box.x + box.width)), int(round(box.y + box.height))
        
        cv2.rectangle(canvas, (x1, y1), (x2, y2), OVERLAY_COLOR, 2)
        cv2.putText(canvas, f'Face {i + 1}', (x1 + 4, y1 + 14),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, OVERLAY_COLOR, 1)
    
    return RGBAImage.from_array(canvas)
