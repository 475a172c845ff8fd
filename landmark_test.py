import numpy as np
import pytest

from _landmark_utils import LandmarkError, as_points, check_landmark_counts, \
    normalize_landmarks, get_boundary_landmarks, add_boundary_landmarks, \
    interpolate_landmarks, reduce_to_68_landmarks, MEDIAPIPE_TO_68



def test_as_points_shapes():
    assert as_points([]).shape == (0, 2)
    assert as_points([(1, 2), (3, 4)]).dtype == np.float64

    with pytest.raises(LandmarkError):
        as_points([1, 2, 3])


def test_check_landmark_counts():
    points = np.zeros((68, 2))
    check_landmark_counts(points, points, expected_count=68)

    with pytest.raises(LandmarkError):
        check_landmark_counts(points, np.zeros((67, 2)))

    with pytest.raises(LandmarkError):
        check_landmark_counts(points, points, expected_count=70)


def test_normalize_landmarks_scales_axes_independently():
    landmarks = [(100, 50), (0, 0), (800, 200)]

    normalized = normalize_landmarks(landmarks, 800, 200, 400, 400)

    np.testing.assert_allclose(normalized, [[50, 100], [0, 0], [400, 400]])


def test_normalize_landmarks_pass_through():
    landmarks = np.array([[12.5, 300.25], [399, 0]])

    normalized = normalize_landmarks(landmarks, 400, 400, 400, 400)

    np.testing.assert_array_equal(normalized, landmarks)


def test_boundary_landmarks_are_fixed():
    boundary = get_boundary_landmarks(400, 400)

    assert boundary.shape == (8, 2)
    np.testing.assert_array_equal(boundary, [
        [0, 0], [200, 0], [399, 0], [399, 200],
        [399, 399], [200, 399], [0, 399], [0, 200]])

    np.testing.assert_array_equal(boundary, get_boundary_landmarks(400, 400))


def test_add_boundary_landmarks(face_landmarks):
    all_landmarks = add_boundary_landmarks(face_landmarks, 400, 400)

    assert all_landmarks.shape == (76, 2)
    np.testing.assert_array_equal(all_landmarks[:68], face_landmarks)
    np.testing.assert_array_equal(all_landmarks[68:], get_boundary_landmarks(400, 400))


def test_interpolation_endpoints_are_exact():
    rng = np.random.default_rng(3)
    points_1 = rng.uniform(0, 400, (76, 2))
    points_2 = rng.uniform(0, 400, (76, 2))

    np.testing.assert_array_equal(interpolate_landmarks(points_1, points_2, 0), points_1)
    np.testing.assert_array_equal(interpolate_landmarks(points_1, points_2, 1), points_2)


def test_interpolation_returns_new_array():
    points_1 = np.array([[1.0, 2.0]])
    points_2 = np.array([[3.0, 4.0]])

    result = interpolate_landmarks(points_1, points_2, 0)
    result[0, 0] = 100

    assert points_1[0, 0] == 1.0


def test_interpolation_midpoint_and_extrapolation():
    points_1 = [(0, 0), (10, 20)]
    points_2 = [(10, 10), (20, 40)]

    np.testing.assert_allclose(
        interpolate_landmarks(points_1, points_2, 0.5), [[5, 5], [15, 30]])

    # Not clamped.
    np.testing.assert_allclose(
        interpolate_landmarks(points_1, points_2, 2.0), [[20, 20], [30, 60]])


def test_interpolation_mismatched_lengths():
    with pytest.raises(LandmarkError):
        interpolate_landmarks([(0, 0)], [(0, 0), (1, 1)], 0.5)


def test_index_table():
    assert len(MEDIAPIPE_TO_68) == 68
    assert len(set(MEDIAPIPE_TO_68)) == 68
    assert all(0 <= i < 468 for i in MEDIAPIPE_TO_68)


def test_reduce_to_68_landmarks():
    mesh = [(float(i), float(2 * i)) for i in range(478)]

    landmarks = reduce_to_68_landmarks(mesh)

    assert len(landmarks) == 68
    assert landmarks[8] == (152.0, 304.0)
    assert landmarks[30] == (4.0, 8.0)


def test_reduce_needs_full_mesh():
    with pytest.raises(ValueError):
        reduce_to_68_landmarks([(0.0, 0.0)] * 100)
