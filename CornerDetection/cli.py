"""
Corner detection - command line entry point

Usage:
    corner-detect image.png --metric harris --quality 0.01 --output corners.png
    corner-detect image.png --preset shi_tomasi --show-debug
    corner-detect --list-presets
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from .config import (
    PRESET_CONFIGS,
    create_detector_from_config,
    get_default_config,
    load_config,
    merge_configs,
    print_available_presets,
    print_config,
)
from .core_data_structures import CornerMetric, keypoints_to_serializable
from .logger import configure_logging, get_logger

logger = get_logger("cli")


def load_grayscale(image_path: Path) -> np.ndarray:
    """
    Read an image from disk as a float grey image scaled to [0, 1]

    Raises:
        FileNotFoundError: If the file is missing or cannot be decoded
    """
    image = cv2.imread(str(image_path), cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise FileNotFoundError(f"Could not read image: {image_path}")
    return image.astype(np.float64) / 255.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Structure-tensor corner detection")

    parser.add_argument('image', type=str, nargs='?', help='Path to input image')

    # Parameters
    parser.add_argument('--config', type=str, default=None,
                        help='JSON configuration file')
    parser.add_argument('--preset', type=str, default=None,
                        choices=sorted(PRESET_CONFIGS.keys()),
                        help='Parameter preset')
    parser.add_argument('--metric', type=str, default=None,
                        choices=[m.value for m in CornerMetric],
                        help='Cornerness metric')
    parser.add_argument('--quality', type=float, default=None,
                        help='Quality level in (0, 1]')
    parser.add_argument('--gradient-sigma', type=float, default=None,
                        help='Sigma of the gradient kernels')
    parser.add_argument('--window-sigma', type=float, default=None,
                        help='Sigma of the tensor window')
    parser.add_argument('--max-features', type=int, default=None,
                        help='Keep only the strongest N corners')
    parser.add_argument('--list-presets', action='store_true',
                        help='List the parameter presets and exit')
    parser.add_argument('--show-config', action='store_true',
                        help='Print the resolved configuration before detecting')

    # Output
    parser.add_argument('--output', type=str, default=None,
                        help='Write an image with the corners drawn')
    parser.add_argument('--json', type=str, default=None,
                        help='Write keypoints as JSON')
    parser.add_argument('--show-debug', action='store_true',
                        help='Display intermediate buffers')

    # Logging
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Log to file')
    parser.add_argument('--quiet', action='store_true',
                        help='No console logging (--log-file still receives records)')

    return parser


def resolve_config(args: argparse.Namespace) -> dict:
    """Combine defaults, config file, preset and explicit flags (in that order)"""
    config = get_default_config()
    if args.config:
        config = merge_configs(config, load_config(args.config))
    if args.preset:
        config = merge_configs(config, PRESET_CONFIGS[args.preset])

    flags = {
        'metric': args.metric,
        'quality_level': args.quality,
        'gradient_sigma': args.gradient_sigma,
        'window_sigma': args.window_sigma,
        'max_features': args.max_features,
    }
    config.update({key: value for key, value in flags.items() if value is not None})
    config['visualize'] = bool(args.show_debug)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_presets:
        print_available_presets()
        return 0
    if args.image is None:
        parser.error("an input image is required")

    configure_logging(level='DEBUG' if args.verbose else 'INFO',
                      log_file=args.log_file, console=not args.quiet)

    image_path = Path(args.image)
    try:
        image = load_grayscale(image_path)
        config = resolve_config(args)
        if args.show_config:
            print_config(config, title="Corner detection configuration")
        detector = create_detector_from_config(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"Detecting corners in {image_path} with {detector!r}")
    features = detector.detect_features(image)
    logger.info(f"Found {len(features)} corners in {features.detection_time:.3f}s")

    if args.output:
        from .visualization import draw_keypoints
        drawn = draw_keypoints(image, features.keypoints)
        cv2.imwrite(args.output, drawn)
        logger.info(f"Annotated image written to {args.output}")

    if args.json:
        with open(args.json, 'w') as f:
            json.dump(keypoints_to_serializable(features.keypoints), f, indent=2)
        logger.info(f"Keypoints written to {args.json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
