"""
Core data structures and enums for the corner detection system.

This module contains the value types passed between the stages of the
corner detection pipeline and returned to callers.
"""

import cv2
import numpy as np
from typing import List, Dict, Optional, Union
from dataclasses import dataclass
from enum import Enum


class CornerMetric(Enum):
    """Enumeration of available cornerness metrics"""
    HARRIS = "harris"
    HARMONIC_MEAN = "harmonic_mean"
    MIN_EIGEN = "min_eigen"

    @classmethod
    def parse(cls, value: Union['CornerMetric', str]) -> 'CornerMetric':
        """
        Resolve a metric from the enum itself, its value or its name

        Raises:
            ValueError: If the metric is unknown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for metric in cls:
                if key.lower() == metric.value or key.upper() == metric.name:
                    return metric
        available = ', '.join(m.value for m in cls)
        raise ValueError(f"Unknown corner metric: {value}. Available: {available}")


@dataclass(frozen=True)
class Keypoint:
    """A detected corner"""
    x: int
    y: int
    size: float
    angle: float = -1.0     # orientation is not estimated
    response: float = 0.0

    @property
    def pt(self):
        """Location as an (x, y) tuple, like cv2.KeyPoint.pt"""
        return (self.x, self.y)

    def to_cv2(self) -> cv2.KeyPoint:
        """Convert to cv2.KeyPoint for drawing or descriptor extraction"""
        return cv2.KeyPoint(
            x=float(self.x),
            y=float(self.y),
            size=float(self.size),
            angle=float(self.angle),
            response=float(self.response)
        )


@dataclass(frozen=True)
class StructureTensor:
    """Windowed second-moment matrix [[A, B], [B, C]] for every pixel"""
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray

    @property
    def shape(self):
        return self.A.shape


@dataclass(frozen=True)
class DebugBuffers:
    """Intermediate buffers of one detection call, for display"""
    Ix: np.ndarray
    Iy: np.ndarray
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray
    response: np.ndarray
    local_max: np.ndarray
    max_response: float

    def as_dict(self) -> Dict[str, np.ndarray]:
        return {
            'Gradient Ix': self.Ix,
            'Gradient Iy': self.Iy,
            'Image A': self.A,
            'Image B': self.B,
            'Image C': self.C,
            'Response': self.response,
            'Local max': self.local_max,
        }


@dataclass
class FeatureData:
    """Container for feature detection results"""
    keypoints: List[cv2.KeyPoint]
    method: str
    detection_time: float = 0.0
    raw_image: Optional[np.ndarray] = None

    def __len__(self):
        return len(self.keypoints)

    def to_serializable(self) -> Dict:
        """Convert to serializable format"""
        return {
            'keypoints': keypoints_to_serializable(self.keypoints),
            'method': self.method,
            'detection_time': self.detection_time
            # Note: raw_image is not serialized to avoid large file sizes
        }


def keypoints_to_serializable(keypoints: List[Union[cv2.KeyPoint, Keypoint]]) -> List[Dict]:
    """Convert keypoints to serializable format"""
    return [
        {
            'pt': (float(kp.pt[0]), float(kp.pt[1])),
            'angle': float(kp.angle),
            'response': float(kp.response),
            'size': float(kp.size)
        }
        for kp in keypoints
    ]
