"""
Structure-Tensor Corner Detection

Detects corners in single-channel intensity images from the windowed
second-moment matrix of Gaussian-derivative gradients.

Main Components:
- Kernels: sampled Gaussian and Gaussian-derivative filters
- Filtering: gradients and structure tensor with replicate borders
- Metrics: Harris, Harmonic-Mean, Min-Eigen (Shi-Tomasi)
- Extraction: relative threshold and 3x3 non-maximum suppression
- Configuration presets, logging and matplotlib debug display

Quick Start:
    >>> import CornerDetection as cd
    >>> detector = cd.CornerDetector(metric='harris', quality_level=0.01)
    >>> keypoints = detector.detect(gray_image)
    >>> features = detector.detect_features(gray_image)   # cv2.KeyPoint container
"""

__version__ = "1.0.0"
__author__ = "Corner Detection Team"

# Core data structures
from .core_data_structures import (
    CornerMetric,
    Keypoint,
    StructureTensor,
    DebugBuffers,
    FeatureData,
    keypoints_to_serializable
)

# Pipeline stages
from .kernels import gaussian_kernel, gaussian_derivative_kernel
from .filtering import correlate_1d, estimate_gradients, build_structure_tensor
from .metrics import (
    HARRIS_ALPHA,
    harris_metric,
    harmonic_mean_metric,
    min_eigen_metric,
    eigenvalues_2x2,
    compute_response
)
from .extraction import local_maximum_mask, strong_local_maxima, extract_keypoints

# Detectors
from .base_classes import BaseFeatureDetector
from .corner_detector import CornerDetector, create_corner_detector, detect_corners

# Configuration management
from .config import (
    get_default_config,
    validate_config,
    create_config_from_preset,
    create_detector_from_config,
    load_config,
    save_config,
    print_available_presets
)

# Logging
from .logger import get_logger, configure_logging


__all__ = [
    # Core data structures
    'CornerMetric', 'Keypoint', 'StructureTensor', 'DebugBuffers', 'FeatureData',
    'keypoints_to_serializable',

    # Pipeline stages
    'gaussian_kernel', 'gaussian_derivative_kernel',
    'correlate_1d', 'estimate_gradients', 'build_structure_tensor',
    'HARRIS_ALPHA', 'harris_metric', 'harmonic_mean_metric', 'min_eigen_metric',
    'eigenvalues_2x2', 'compute_response',
    'local_maximum_mask', 'strong_local_maxima', 'extract_keypoints',

    # Detectors
    'BaseFeatureDetector', 'CornerDetector', 'create_corner_detector', 'detect_corners',

    # Configuration
    'get_default_config', 'validate_config', 'create_config_from_preset',
    'create_detector_from_config', 'load_config', 'save_config', 'print_available_presets',

    # Logging
    'get_logger', 'configure_logging'
]
