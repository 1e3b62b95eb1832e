import numpy as np
import pytest

from CornerDetection.core_data_structures import CornerMetric, StructureTensor
from CornerDetection.metrics import (
    HARRIS_ALPHA,
    METRIC_FUNCTIONS,
    compute_response,
    eigenvalues_2x2,
    harmonic_mean_metric,
    harris_metric,
    min_eigen_metric,
)


@pytest.fixture
def random_tensor():
    """Positive semi-definite 2x2 matrices on a 6x7 grid"""
    rng = np.random.default_rng(7)
    gx = rng.normal(size=(4, 6, 7))
    gy = rng.normal(size=(4, 6, 7))
    A = np.sum(gx * gx, axis=0)
    B = np.sum(gx * gy, axis=0)
    C = np.sum(gy * gy, axis=0)
    return StructureTensor(A=A, B=B, C=C)


def test_harris_values():
    A = np.array([[2.0, 1.0]])
    B = np.array([[0.5, 1.0]])
    C = np.array([[3.0, 1.0]])

    response = harris_metric(A, B, C)

    expected_corner = 2.0 * 3.0 - 0.25 - HARRIS_ALPHA * 25.0
    assert response[0, 0] == pytest.approx(expected_corner)
    # rank-one tensor (edge): det = 0, so the raw value is negative and clamped
    assert response[0, 1] == 0.0


def test_harris_is_non_negative(random_tensor):
    response = harris_metric(random_tensor.A, random_tensor.B, random_tensor.C)
    assert response.shape == random_tensor.shape
    assert np.all(response >= 0)


def test_harmonic_mean_values():
    A = np.array([[2.0, 0.0, 4.0]])
    B = np.zeros((1, 3))
    C = np.array([[2.0, 0.0, 0.0]])

    response = harmonic_mean_metric(A, B, C)

    assert response[0, 0] == pytest.approx(1.0)
    assert response[0, 1] == 0.0  # A + C == 0
    assert response[0, 2] == 0.0


def test_harmonic_mean_all_zero_is_finite():
    zeros = np.zeros((5, 5))
    with np.errstate(all='raise'):
        response = harmonic_mean_metric(zeros, zeros, zeros)
    assert np.all(np.isfinite(response))
    assert np.all(response == 0)


def test_min_eigen_matches_eigvalsh(random_tensor):
    A, B, C = random_tensor.A, random_tensor.B, random_tensor.C
    response = min_eigen_metric(A, B, C)

    matrices = np.stack([np.stack([A, B], -1), np.stack([B, C], -1)], -2)
    expected = np.linalg.eigvalsh(matrices)[..., 0]
    assert np.allclose(response, expected, atol=1e-10)


def test_eigenvalue_ordering(random_tensor):
    lambda_min, lambda_max = eigenvalues_2x2(random_tensor.A, random_tensor.B, random_tensor.C)
    assert np.all(lambda_min <= lambda_max)
    assert np.allclose(lambda_min + lambda_max, random_tensor.A + random_tensor.C)


def test_min_eigen_negative_discriminant_clamped():
    # nearly isotropic tensor: the discriminant rounds to about zero, possibly below it
    A = np.full((3, 3), 0.1)
    C = np.full((3, 3), 0.1)
    B = np.full((3, 3), 1e-9)
    with np.errstate(invalid='raise'):
        response = min_eigen_metric(A, B, C)
    assert np.all(np.isfinite(response))
    assert np.allclose(response, 0.1, atol=1e-8)


def test_metrics_do_not_modify_inputs(random_tensor):
    copies = [random_tensor.A.copy(), random_tensor.B.copy(), random_tensor.C.copy()]
    for metric in CornerMetric:
        compute_response(metric, random_tensor)
    assert np.array_equal(random_tensor.A, copies[0])
    assert np.array_equal(random_tensor.B, copies[1])
    assert np.array_equal(random_tensor.C, copies[2])


@pytest.mark.parametrize("metric", list(CornerMetric))
def test_compute_response_dispatch(metric, random_tensor):
    response = compute_response(metric, random_tensor)
    direct = METRIC_FUNCTIONS[metric](random_tensor.A, random_tensor.B, random_tensor.C)

    assert response.shape == random_tensor.shape
    assert np.array_equal(response, direct)
    assert np.array_equal(compute_response(metric.value, random_tensor), direct)


def test_compute_response_unknown_metric(random_tensor):
    with pytest.raises(ValueError, match="Unknown corner metric"):
        compute_response("fast", random_tensor)


@pytest.mark.parametrize("metric_fn", [harris_metric, harmonic_mean_metric, min_eigen_metric])
def test_shape_mismatch_rejected(metric_fn):
    with pytest.raises(ValueError):
        metric_fn(np.zeros((3, 3)), np.zeros((3, 3)), np.zeros((3, 4)))
