"""
Cornerness metrics over the structure tensor.

Each metric is a plain function of the tensor components (A, B, C) that
returns a response map of the same shape. None of them mutates its inputs.
"""

from typing import Callable, Dict, Tuple

import numpy as np

from .core_data_structures import CornerMetric, StructureTensor

HARRIS_ALPHA = 0.06


def _check_components(A: np.ndarray, B: np.ndarray, C: np.ndarray):
    if not (A.shape == B.shape == C.shape):
        raise ValueError(f"Tensor component shapes differ: {A.shape}, {B.shape}, {C.shape}")


def harris_metric(A: np.ndarray, B: np.ndarray, C: np.ndarray) -> np.ndarray:
    """
    Harris response det(M) - alpha * trace(M)^2, clamped at zero

    Flat and edge regions give non-positive values before clamping.
    """
    _check_components(A, B, C)
    det_M = A * C - B * B
    trace_M = A + C
    response = det_M - HARRIS_ALPHA * trace_M * trace_M
    return np.maximum(response, 0.0)


def harmonic_mean_metric(A: np.ndarray, B: np.ndarray, C: np.ndarray) -> np.ndarray:
    """
    Harmonic-mean response A*C / (A + C)

    Pixels with A + C == 0 (no gradient in the window) get 0.
    """
    _check_components(A, B, C)
    denominator = A + C
    response = np.zeros(np.shape(A), dtype=np.float64)
    np.divide(A * C, denominator, out=response, where=denominator != 0)
    return response


def eigenvalues_2x2(A: np.ndarray, B: np.ndarray, C: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Closed-form eigenvalues of the symmetric matrices [[A, B], [B, C]]

    The discriminant trace^2 - 4 det is clamped at zero before the square
    root to absorb rounding.

    Returns:
        Tuple of (lambda_min, lambda_max), elementwise lambda_min <= lambda_max
    """
    _check_components(A, B, C)
    trace_M = A + C
    det_M = A * C - B * B
    discriminant = np.maximum(trace_M * trace_M - 4.0 * det_M, 0.0)
    root = np.sqrt(discriminant)
    return (trace_M - root) / 2.0, (trace_M + root) / 2.0


def min_eigen_metric(A: np.ndarray, B: np.ndarray, C: np.ndarray) -> np.ndarray:
    """Shi-Tomasi response: the smaller eigenvalue of the structure tensor"""
    lambda_min, _ = eigenvalues_2x2(A, B, C)
    return lambda_min


METRIC_FUNCTIONS: Dict[CornerMetric, Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]] = {
    CornerMetric.HARRIS: harris_metric,
    CornerMetric.HARMONIC_MEAN: harmonic_mean_metric,
    CornerMetric.MIN_EIGEN: min_eigen_metric,
}


def compute_response(metric, tensor: StructureTensor) -> np.ndarray:
    """
    Reduce a structure tensor to a response map with the selected metric

    Args:
        metric: CornerMetric or its name/value
        tensor: Windowed structure tensor

    Returns:
        Response map with the tensor's shape

    Raises:
        ValueError: If the metric is unknown
    """
    metric = CornerMetric.parse(metric)
    return METRIC_FUNCTIONS[metric](tensor.A, tensor.B, tensor.C)
