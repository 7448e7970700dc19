"""
Flask application for HTTP API.

Provides:
- GET /health: Service health check
- POST /analyze: Enhancement, metrics and face boxes as JSON
- POST /enhance: Enhanced image as PNG

Images are sent as multipart field 'image' or as the raw request body.
"""

import time
from typing import Optional
from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from .config import Config
from .errors import InvalidInputError
from .face_app import FaceDetector, initialize_face_detector
from .imaging import RGBAImage, decode_image, encode_png
from .logging_config import get_logger
from .pipeline import analyze, run_pipeline
from .utils.timing import format_uptime

logger = get_logger(__name__)


def _read_uploaded_image() -> RGBAImage:
    upload = request.files.get('image')
    data = upload.read() if upload is not None else request.get_data()
    if not data:
        raise InvalidInputError('No image provided')
    return decode_image(data)


def create_app(config: Config, detector: Optional[FaceDetector] = None) -> Flask:
    """
    Create and configure Flask application.
    
    Args:
        config: Service configuration
        detector: Face detector (created from config when omitted)
    
    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    CORS(app)
    app.config['MAX_CONTENT_LENGTH'] = config.max_upload_mb * 1024 * 1024
    
    if detector is None:
        detector = initialize_face_detector(config)
    started_at = time.time()
    
    @app.errorhandler(InvalidInputError)
    def invalid_input(error):
        logger.warning(f'Rejected request: {error}')
        return jsonify({'error': str(error)}), 400
    
    @app.route('/health')
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'ok',
            'service': config.service_name,
            'detector': detector.backend,
            'uptime': format_uptime(time.time() - started_at),
        })
    
    @app.route('/analyze', methods=['POST'])
    def analyze_image():
        """Run the full analysis and return the report."""
        image = _read_uploaded_image()
        result = analyze(image, config, detector)
        
        report = result.to_report()
        report['width'] = result.enhanced.width
        report['height'] = result.enhanced.height
        report['timingMs'] = result.timing_ms
        return jsonify(report)
    
    @app.route('/enhance', methods=['POST'])
    def enhance():
        """Return the enhanced image."""
        image = _read_uploaded_image()
        result = run_pipeline(image, config)
        return Response(encode_png(result.enhanced), mimetype='image/png')
    
    return app
