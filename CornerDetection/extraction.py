"""
Keypoint extraction: relative thresholding and 3x3 non-maximum suppression.
"""

from typing import List, Tuple

import cv2
import numpy as np

from .core_data_structures import Keypoint

# 3x3 neighbourhood, orthogonal and diagonal neighbours
NMS_KERNEL = np.ones((3, 3), dtype=np.uint8)


def validate_quality_level(quality_level: float) -> float:
    """
    Raises:
        ValueError: If quality_level is not in (0, 1]
    """
    try:
        value = float(quality_level)
    except (TypeError, ValueError):
        raise ValueError(f"quality_level must be a number, got {quality_level!r}")
    if not 0.0 < value <= 1.0:
        raise ValueError(f"quality_level must be in (0, 1], got {quality_level}")
    return value


def local_maximum_mask(response: np.ndarray) -> np.ndarray:
    """
    Mark pixels equal to the maximum of their 3x3 neighbourhood

    Grayscale dilation replaces every pixel by its neighbourhood maximum;
    pixels outside the image never take part. Plateaus of equal values are
    all marked.
    """
    response = np.ascontiguousarray(response, dtype=np.float64)
    dilated = cv2.dilate(response, NMS_KERNEL)
    return response == dilated


def strong_local_maxima(response: np.ndarray, quality_level: float) -> Tuple[np.ndarray, float]:
    """
    Select local maxima strictly above quality_level * max(response)

    Returns:
        Tuple of (boolean mask, maximum response value)
    """
    quality_level = validate_quality_level(quality_level)
    if response.size == 0:
        raise ValueError("Cannot extract keypoints from an empty response map")

    max_val = float(np.max(response))
    threshold = quality_level * max_val
    mask = (response > threshold) & local_maximum_mask(response)
    return mask, max_val


def extract_keypoints(response: np.ndarray, quality_level: float,
                      keypoint_size: float) -> List[Keypoint]:
    """
    Turn a response map into keypoints

    Args:
        response: Cornerness response map
        quality_level: Fraction of the maximum response used as threshold
        keypoint_size: Size assigned to every keypoint

    Returns:
        Keypoints in row-major order
    """
    mask, _ = strong_local_maxima(response, quality_level)
    return keypoints_from_mask(response, mask, keypoint_size)


def keypoints_from_mask(response: np.ndarray, mask: np.ndarray,
                        keypoint_size: float) -> List[Keypoint]:
    """Emit one keypoint per marked pixel, scanning rows top to bottom"""
    rows, cols = np.nonzero(mask)
    return [
        Keypoint(x=int(x), y=int(y), size=float(keypoint_size),
                 response=float(response[y, x]))
        for y, x in zip(rows, cols)
    ]
