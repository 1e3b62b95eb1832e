"""
Sampled 1-D Gaussian and Gaussian-derivative kernels.

Kernels are odd-length arrays indexed symmetrically around the centre tap
and truncated at ceil(3 * sigma) taps on each side. They are built from
their positive half and mirrored, so the smoothing kernel is exactly
symmetric and the derivative kernel exactly antisymmetric.
"""

import math

import numpy as np

from .logger import get_logger

logger = get_logger("kernels")

TRUNCATE = 3.0


def validate_sigma(sigma: float, name: str = "sigma") -> float:
    """
    Check that a kernel width is usable

    Raises:
        ValueError: If sigma is not a finite, strictly positive number
    """
    try:
        value = float(sigma)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {sigma!r}")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive, got {sigma}")
    return value


def kernel_radius(sigma: float) -> int:
    """Number of taps on each side of the centre for a given sigma"""
    return max(1, int(math.ceil(TRUNCATE * validate_sigma(sigma))))


def _positive_half(sigma: float) -> np.ndarray:
    radius = kernel_radius(sigma)
    x = np.arange(0, radius + 1, dtype=np.float64)
    return np.exp(-(x * x) / (2.0 * sigma * sigma))


def gaussian_kernel(sigma: float) -> np.ndarray:
    """
    Build a normalised 1-D Gaussian smoothing kernel

    Args:
        sigma: Standard deviation in pixels

    Returns:
        Read-only float64 array of length 2 * radius + 1 that sums to 1
    """
    sigma = validate_sigma(sigma)
    half = _positive_half(sigma)
    taps = np.concatenate([half[:0:-1], half])
    kernel = taps / taps.sum()
    kernel.setflags(write=False)

    logger.debug(f"Gaussian kernel: sigma={sigma}, taps={len(kernel)}")
    return kernel


def gaussian_derivative_kernel(sigma: float) -> np.ndarray:
    """
    Build a 1-D derivative-of-Gaussian kernel

    Taps are proportional to x * g(x), the mirrored derivative of the
    Gaussian, and scaled so that correlating a unit ramp gives 1. The
    result of correlating with this kernel is d/dx, positive where
    intensity increases with the index.

    Args:
        sigma: Standard deviation in pixels

    Returns:
        Read-only float64 array of length 2 * radius + 1, centre tap 0
    """
    sigma = validate_sigma(sigma)
    half = _positive_half(sigma)
    x = np.arange(0, len(half), dtype=np.float64)

    positive = x * half
    positive = positive / (2.0 * np.sum(x * positive))
    kernel = np.concatenate([-positive[:0:-1], positive])
    kernel.setflags(write=False)

    logger.debug(f"Gaussian derivative kernel: sigma={sigma}, taps={len(kernel)}")
    return kernel
