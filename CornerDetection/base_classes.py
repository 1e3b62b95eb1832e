"""
Base classes and interfaces for corner detectors.

This module defines the abstract base class that detectors implement and
the shared input handling and FeatureData packaging.
"""

import time
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from .core_data_structures import FeatureData, Keypoint

# ITU-R BT.601 luma weights, the same ones cv2.COLOR_RGB2GRAY applies
RGB_TO_GRAY = np.array([0.299, 0.587, 0.114])


class BaseFeatureDetector(ABC):
    """Abstract base class for all corner detectors"""

    def __init__(self, max_features: Optional[int] = None, **kwargs):
        valid = isinstance(max_features, int) and not isinstance(max_features, bool) and max_features > 0
        if max_features is not None and not valid:
            raise ValueError(f"max_features must be a positive integer or None, got {max_features!r}")
        self.max_features = max_features
        self.name = self.__class__.__name__

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[Keypoint]:
        """
        Detect keypoints in an image

        Args:
            image: Input image (grayscale, or RGB which is converted)

        Returns:
            List of detected keypoints
        """
        pass

    def preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """
        Preprocess image for detection

        Args:
            image: Input image

        Returns:
            2-D float64 intensity image

        Raises:
            ValueError: If the image is empty, has an unsupported channel count,
                or is not 2-D after conversion
        """
        image = np.asarray(image)
        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        elif image.ndim == 3:
            if image.shape[2] not in (3, 4):
                raise ValueError(f"Expected 1, 3 or 4 channels, got {image.shape[2]}")
            # alpha is ignored; the weighted sum stays in float64
            image = image[:, :, :3].astype(np.float64) @ RGB_TO_GRAY

        if image.ndim != 2:
            raise ValueError(f"Expected a single-channel 2-D image, got shape {image.shape}")
        if image.size == 0:
            raise ValueError("Cannot detect corners in an empty image")

        return image.astype(np.float64)

    def postprocess_features(self, keypoints: List[Keypoint]) -> List[Keypoint]:
        """
        Keep only the max_features strongest keypoints, if limited

        Args:
            keypoints: Detected keypoints

        Returns:
            Keypoints sorted by decreasing response when truncated, otherwise unchanged
        """
        if self.max_features and len(keypoints) > self.max_features:
            keypoints = sorted(keypoints, key=lambda kp: kp.response, reverse=True)[:self.max_features]
        return keypoints

    def detect_features(self, image: np.ndarray) -> FeatureData:
        """
        Detect keypoints and package them as cv2.KeyPoint in a FeatureData

        Args:
            image: Input image (RGB or grayscale)

        Returns:
            FeatureData with keypoints and timing
        """
        start_time = time.time()
        keypoints = self.postprocess_features(self.detect(image))

        return FeatureData(
            keypoints=[kp.to_cv2() for kp in keypoints],
            method=self.name,
            detection_time=time.time() - start_time,
            raw_image=image
        )
