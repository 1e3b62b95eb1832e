import cv2
import numpy as np
import pytest

from CornerDetection import (
    CornerDetector,
    CornerMetric,
    DebugBuffers,
    FeatureData,
    create_corner_detector,
    detect_corners,
)

ALL_METRICS = list(CornerMetric)


def square_detector(**kwargs):
    params = dict(metric=CornerMetric.HARRIS, gradient_sigma=1.0,
                  window_sigma=1.5, quality_level=0.1)
    params.update(kwargs)
    return CornerDetector(**params)


def test_bright_square_gives_four_corners(square_image):
    keypoints = square_detector().detect(square_image)

    assert len(keypoints) == 4
    square_corners = [(1, 1), (7, 1), (1, 7), (7, 7)]
    for cx, cy in square_corners:
        near = [kp for kp in keypoints if abs(kp.x - cx) <= 1 and abs(kp.y - cy) <= 1]
        assert len(near) == 1, f"expected one keypoint near corner {(cx, cy)}"


def test_bright_square_keypoint_attributes(square_image):
    detector = square_detector()
    keypoints, buffers = detector.detect_with_buffers(square_image)

    for kp in keypoints:
        assert kp.size == pytest.approx(4.5)
        assert kp.angle == -1.0
        assert kp.response == buffers.response[kp.y, kp.x]
        assert kp.response > 0.1 * buffers.max_response


@pytest.mark.parametrize("metric", ALL_METRICS)
def test_buffers_share_image_shape(metric, noise_image):
    _, buffers = CornerDetector(metric=metric).detect_with_buffers(noise_image)

    for name, buffer in buffers.as_dict().items():
        assert buffer.shape == noise_image.shape, name


def test_harris_response_non_negative(noise_image):
    _, buffers = CornerDetector(metric='harris').detect_with_buffers(noise_image)
    assert np.all(buffers.response >= 0)


@pytest.mark.parametrize("metric", ALL_METRICS)
def test_constant_image_has_no_corners(metric):
    image = np.full((20, 24), 0.5)
    keypoints, buffers = CornerDetector(metric=metric).detect_with_buffers(image)

    assert np.allclose(buffers.Ix, 0)
    assert np.allclose(buffers.Iy, 0)
    assert np.all(np.isfinite(buffers.response))
    assert keypoints == []


@pytest.mark.parametrize("image", [np.zeros((16, 16)), np.full((16, 16), 200.0)])
def test_harmonic_mean_finite_on_flat_images(image):
    _, buffers = CornerDetector(metric='harmonic_mean').detect_with_buffers(image)
    assert np.all(np.isfinite(buffers.response))


@pytest.mark.parametrize("metric", ALL_METRICS)
def test_quality_level_one_only_global_maxima(metric, checkerboard_image):
    keypoints, buffers = CornerDetector(metric=metric, quality_level=1.0).detect_with_buffers(checkerboard_image)

    assert all(kp.response == buffers.max_response for kp in keypoints)
    # the threshold is strict, so nothing exceeds the maximum itself
    assert keypoints == []


@pytest.mark.parametrize("metric", ALL_METRICS)
def test_checkerboard_corners_found(metric, checkerboard_image):
    keypoints = CornerDetector(metric=metric, quality_level=0.3,
                               gradient_sigma=1.0, window_sigma=2.0).detect(checkerboard_image)

    # inner checker junctions sit between pixels 15/16, 31/32 and 47/48
    junctions = [(j, i) for i in (15.5, 31.5, 47.5) for j in (15.5, 31.5, 47.5)]
    for jx, jy in junctions:
        assert any(abs(kp.x - jx) <= 1.5 and abs(kp.y - jy) <= 1.5 for kp in keypoints)


@pytest.mark.parametrize("metric", ALL_METRICS)
def test_detect_is_idempotent(metric, noise_image):
    detector = CornerDetector(metric=metric, quality_level=0.05)
    first = detector.detect(noise_image)
    second = detector.detect(noise_image)

    assert first == second
    assert set(first) == set(second)


def test_detect_does_not_modify_image(noise_image):
    original = noise_image.copy()
    CornerDetector().detect(noise_image)
    assert np.array_equal(noise_image, original)


def test_kernels_built_once():
    detector = CornerDetector(gradient_sigma=1.0, window_sigma=2.0)
    kernels = (detector.smoothing_kernel, detector.derivative_kernel, detector.window_kernel)

    detector.detect(np.zeros((8, 8)))

    assert kernels[0] is detector.smoothing_kernel
    assert kernels[1] is detector.derivative_kernel
    assert kernels[2] is detector.window_kernel
    assert len(detector.window_kernel) == 13


def test_rgb_image_is_converted(square_image):
    rgb = np.repeat((square_image * 255).astype(np.uint8)[:, :, None], 3, axis=2)
    keypoints = square_detector().detect(rgb)
    assert len(keypoints) == 4


@pytest.mark.parametrize("image", [
    np.zeros((0, 5)),
    np.zeros((2, 3, 4, 5)),
    np.zeros((8, 8, 2)),
    np.zeros((0, 5, 3)),
])
def test_invalid_images_rejected(image):
    with pytest.raises(ValueError):
        CornerDetector().detect(image)


def test_float_colour_image_keeps_precision():
    rng = np.random.default_rng(7)
    rgb = 1.0 + rng.random((6, 5, 3)) * 1e-9

    gray = CornerDetector().preprocess_image(rgb)

    assert gray.dtype == np.float64
    expected = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    np.testing.assert_allclose(gray, expected, rtol=0, atol=1e-15)


def test_alpha_channel_is_ignored(square_image):
    rgba = np.dstack([square_image] * 3 + [np.zeros_like(square_image)])
    assert len(square_detector().detect(rgba)) == 4


@pytest.mark.parametrize("kwargs", [
    {'gradient_sigma': 0.0},
    {'gradient_sigma': -1.0},
    {'window_sigma': 0},
    {'quality_level': 0.0},
    {'quality_level': 1.5},
    {'metric': 'sobel'},
    {'max_features': 0},
    {'max_features': True},
])
def test_invalid_configuration_rejected(kwargs):
    with pytest.raises(ValueError):
        CornerDetector(**kwargs)


def test_visualize_hands_buffers_to_sink(square_image):
    received = []
    detector = square_detector(visualize=True, debug_sink=received.append)

    keypoints = detector.detect(square_image)

    assert len(received) == 1
    buffers = received[0]
    assert isinstance(buffers, DebugBuffers)
    assert buffers.local_max.dtype == bool
    assert int(buffers.local_max.sum()) == len(keypoints)


def test_sink_unused_without_visualize(square_image):
    received = []
    square_detector(visualize=False, debug_sink=received.append).detect(square_image)
    assert received == []


def test_detect_features_returns_cv2_keypoints(square_image):
    features = square_detector().detect_features(square_image)

    assert isinstance(features, FeatureData)
    assert len(features) == 4
    assert all(isinstance(kp, cv2.KeyPoint) for kp in features.keypoints)
    assert features.method == "Corner-harris"
    assert features.detection_time >= 0
    assert len({kp.pt for kp in features.keypoints}) == 4
    assert all(kp.size == pytest.approx(4.5) for kp in features.keypoints)
    serial = features.to_serializable()
    assert len(serial['keypoints']) == 4


def test_max_features_keeps_strongest(noise_image):
    detector = CornerDetector(quality_level=0.01)
    all_keypoints = detector.detect(noise_image)
    assert len(all_keypoints) > 3

    limited = CornerDetector(quality_level=0.01, max_features=3).detect_features(noise_image)
    strongest = sorted((kp.response for kp in all_keypoints), reverse=True)[:3]

    assert len(limited) == 3
    assert [kp.response for kp in limited.keypoints] == pytest.approx(strongest, rel=1e-6)


@pytest.mark.parametrize("name, metric", [
    ('harris', CornerMetric.HARRIS),
    ('HARMONIC_MEAN', CornerMetric.HARMONIC_MEAN),
    ('min_eigen', CornerMetric.MIN_EIGEN),
])
def test_factory_accepts_names(name, metric):
    detector = create_corner_detector(name, quality_level=0.2)
    assert detector.metric is metric
    assert detector.quality_level == 0.2


def test_detect_corners_convenience(square_image):
    keypoints = detect_corners(square_image, 'harris', gradient_sigma=1.0,
                               window_sigma=1.5, quality_level=0.1)
    assert keypoints == square_detector().detect(square_image)
