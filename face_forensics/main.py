"""
Face Forensics Service - Main Entry Point

Analyze an image from the command line, or serve the HTTP API.
"""

import os
import sys
import argparse
import dataclasses
from pathlib import Path
import requests
from .config import Config, load_config
from .errors import InvalidInputError
from .face_app import initialize_face_detector
from .imaging import RGBAImage, draw_face_boxes, fetch_image, load_image, save_png
from .logging_config import setup_logging, get_logger
from .pipeline import analyze, save_report

logger = get_logger(__name__)


def _load_local_env() -> None:
    """Load environment variables from face_forensics/.env if present."""
    env_path = Path(__file__).resolve().parent / '.env'
    if not env_path.exists():
        return
    
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        os.environ.setdefault(key.strip(), value.strip())


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Face Forensics - image enhancement and recapture metrics'
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    analyze_parser = subparsers.add_parser('analyze', help='Analyze an image file or URL')
    analyze_parser.add_argument('source', help='Image path or http(s) URL')
    analyze_parser.add_argument('--out', type=str, help='Output directory (or set OUTPUT_DIR)')
    analyze_parser.add_argument('--radius', type=int, help='Unsharp mask radius (or set UNSHARP_RADIUS)')
    analyze_parser.add_argument('--amount', type=float, help='Unsharp mask gain (or set UNSHARP_AMOUNT)')
    analyze_parser.add_argument('--no-detect', action='store_true', help='Skip face detection')
    analyze_parser.add_argument('--annotate', action='store_true', help='Also write annotated.png with face boxes')
    
    serve_parser = subparsers.add_parser('serve', help='Serve the HTTP API')
    serve_parser.add_argument('--port', type=int, help='HTTP port (or set HTTP_PORT)')
    
    return parser.parse_args(argv)


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    overrides = {}
    if args.debug:
        overrides['debug_mode'] = True
    if getattr(args, 'out', None):
        overrides['output_dir'] = args.out
    if getattr(args, 'radius', None) is not None:
        overrides['unsharp_radius'] = args.radius
    if getattr(args, 'amount', None) is not None:
        overrides['unsharp_amount'] = args.amount
    if getattr(args, 'no_detect', False):
        overrides['enable_face_detection'] = False
    if getattr(args, 'port', None) is not None:
        overrides['http_port'] = args.port
    return dataclasses.replace(config, **overrides)


def _load_source(source: str, config: Config) -> RGBAImage:
    if source.startswith(('http://', 'https://')):
        return fetch_image(source, timeout=config.fetch_timeout)
    return load_image(source)


def run_analyze(source: str, config: Config, annotate_output: bool = False) -> Path:
    """
    Analyze one image and write its artifacts.
    
    Writes enhanced.png and analysis.json (and annotated.png on request)
    into config.output_dir.
    
    Returns:
        Path of the written analysis.json
    """
    image = _load_source(source, config)
    detector = initialize_face_detector(config)
    result = analyze(image, config, detector)
    
    out_dir = Path(config.output_dir)
    save_png(result.enhanced, out_dir / 'enhanced.png')
    if annotate_output:
        save_png(draw_face_boxes(result.enhanced, result.faces), out_dir / 'annotated.png')
    report_path = save_report(result, out_dir / 'analysis.json')
    
    metrics = result.metrics
    logger.info(f'Blur variance:   {metrics.blur_variance:.1f}')
    logger.info(f'Gradient energy: {metrics.gradient_energy:.1f}')
    logger.info(f'Symmetry score:  {metrics.symmetry_score:.3f}')
    logger.info(f'Spoof risk:      {metrics.spoof_risk * 100:.0f}% ({metrics.risk_level})')
    logger.info(f'Faces detected:  {len(result.faces)}')
    
    return report_path


def run_server(config: Config) -> None:
    """Start the HTTP API."""
    from .app import create_app
    
    logger.info(f'Starting HTTP API on port {config.http_port}...')
    app = create_app(config)
    app.run(
        host='0.0.0.0',
        port=config.http_port,
        threaded=True,
        debug=False,
        use_reloader=False
    )


def main(argv=None) -> None:
    """Main entry point."""
    _load_local_env()
    args = parse_args(argv)
    config = _apply_overrides(load_config(), args)
    
    setup_logging(config.service_name, config.debug_mode)
    
    try:
        if args.command == 'analyze':
            report_path = run_analyze(args.source, config, annotate_output=args.annotate)
            print(report_path)
        else:
            run_server(config)
    
    except KeyboardInterrupt:
        logger.info('Received keyboard interrupt, shutting down...')
        sys.exit(0)
    except (InvalidInputError, FileNotFoundError, requests.exceptions.RequestException) as e:
        logger.error(f'Cannot analyze {getattr(args, "source", "")}: {e}')
        sys.exit(2)
    except Exception as e:
        logger.error(f'Fatal error: {e}', exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
