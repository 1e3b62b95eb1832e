"""
Structure-tensor corner detector (Harris, Harmonic-Mean, Min-Eigen).

The detector derives its three kernels once at construction and runs the
pipeline image -> gradients -> structure tensor -> response -> keypoints
on every call to detect().
"""

from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from .base_classes import BaseFeatureDetector
from .core_data_structures import CornerMetric, DebugBuffers, Keypoint
from .extraction import keypoints_from_mask, strong_local_maxima, validate_quality_level
from .filtering import build_structure_tensor, estimate_gradients
from .kernels import gaussian_derivative_kernel, gaussian_kernel, validate_sigma
from .logger import get_logger
from .metrics import compute_response

logger = get_logger("detector")


class CornerDetector(BaseFeatureDetector):
    """Corner detector built on the windowed structure tensor"""

    def __init__(self, metric: Union[CornerMetric, str] = CornerMetric.HARRIS,
                 visualize: bool = False, quality_level: float = 0.01,
                 gradient_sigma: float = 1.0, window_sigma: float = 2.0,
                 max_features: Optional[int] = None,
                 debug_sink: Optional[Callable[[DebugBuffers], None]] = None):
        """
        Initialize corner detector

        Args:
            metric: Cornerness metric (CornerMetric, or 'harris', 'harmonic_mean', 'min_eigen')
            visualize: Hand intermediate buffers to debug_sink after every detection
            quality_level: Fraction of the strongest response used as detection threshold
            gradient_sigma: Sigma of the gradient smoothing/derivative kernels
            window_sigma: Sigma of the Gaussian window over the gradient products
            max_features: Optional cap on keypoints returned by detect_features()
            debug_sink: Callable receiving DebugBuffers; defaults to a matplotlib display

        Raises:
            ValueError: On a non-positive sigma, quality_level outside (0, 1] or unknown metric
        """
        super().__init__(max_features)
        self.metric = CornerMetric.parse(metric)
        self.visualize = bool(visualize)
        self.quality_level = validate_quality_level(quality_level)
        self.gradient_sigma = validate_sigma(gradient_sigma, "gradient_sigma")
        self.window_sigma = validate_sigma(window_sigma, "window_sigma")
        self.debug_sink = debug_sink

        self.smoothing_kernel = gaussian_kernel(self.gradient_sigma)
        self.derivative_kernel = gaussian_derivative_kernel(self.gradient_sigma)
        self.window_kernel = gaussian_kernel(self.window_sigma)
        self.keypoint_size = 3.0 * self.window_sigma

        self.name = f"Corner-{self.metric.value}"
        logger.debug(f"{self.name}: gradient_sigma={self.gradient_sigma}, "
                     f"window_sigma={self.window_sigma}, quality_level={self.quality_level}")

    def __repr__(self):
        return (f"CornerDetector(metric={self.metric.value!r}, quality_level={self.quality_level}, "
                f"gradient_sigma={self.gradient_sigma}, window_sigma={self.window_sigma})")

    def detect(self, image: np.ndarray) -> List[Keypoint]:
        """
        Detect corners in an image

        Args:
            image: Single-channel intensity image (RGB is converted to grey)

        Returns:
            Keypoints in row-major order
        """
        keypoints, buffers = self.detect_with_buffers(image)

        if self.visualize:
            self._show(buffers)

        return keypoints

    def detect_with_buffers(self, image: np.ndarray) -> Tuple[List[Keypoint], DebugBuffers]:
        """
        Detect corners and also return every intermediate buffer

        Returns:
            Tuple of (keypoints, DebugBuffers)
        """
        gray = self.preprocess_image(image)

        Ix, Iy = estimate_gradients(gray, self.smoothing_kernel, self.derivative_kernel)
        tensor = build_structure_tensor(Ix, Iy, self.window_kernel)
        response = compute_response(self.metric, tensor)

        mask, max_val = strong_local_maxima(response, self.quality_level)
        keypoints = keypoints_from_mask(response, mask, self.keypoint_size)

        logger.debug(f"{self.name}: {gray.shape[1]}x{gray.shape[0]} image, "
                     f"max response {max_val:.6g}, {len(keypoints)} keypoints")

        buffers = DebugBuffers(
            Ix=Ix, Iy=Iy,
            A=tensor.A, B=tensor.B, C=tensor.C,
            response=response,
            local_max=mask,
            max_response=max_val
        )
        return keypoints, buffers

    def _show(self, buffers: DebugBuffers):
        sink = self.debug_sink
        if sink is None:
            from .visualization import show_debug_buffers
            sink = show_debug_buffers
        sink(buffers)


# Factory function for easy detector creation
def create_corner_detector(metric: Union[CornerMetric, str] = 'harris', **kwargs) -> CornerDetector:
    """
    Factory function to create corner detectors

    Args:
        metric: 'harris', 'harmonic_mean' or 'min_eigen' (or a CornerMetric)
        **kwargs: Additional parameters for CornerDetector

    Returns:
        Initialized detector instance

    Raises:
        ValueError: If the metric or a parameter is not supported
    """
    return CornerDetector(metric=metric, **kwargs)


def detect_corners(image: np.ndarray, metric: Union[CornerMetric, str] = 'harris',
                   **kwargs) -> List[Keypoint]:
    """
    Quick corner detection with a single metric

    Args:
        image: Input image (numpy array)
        metric: Cornerness metric
        **kwargs: Additional parameters for the detector

    Returns:
        Keypoints in row-major order
    """
    return create_corner_detector(metric, **kwargs).detect(image)
