import cv2
import numpy as np

from _affine_utils import AffineMap, get_affine_transform



def test_round_trip():
    source = [(10.0, 20.0), (150.5, 30.0), (60.0, 200.25)]
    destination = [(-5.0, 7.0), (300.0, 12.5), (80.0, 390.0)]

    affine_map = get_affine_transform(source, destination)

    for (x, y), (u, v) in zip(source, destination):
        mapped_x, mapped_y = affine_map.apply(x, y)
        assert abs(mapped_x - u) < 1e-6
        assert abs(mapped_y - v) < 1e-6


def test_same_triangle_is_identity():
    triangle = [(0, 0), (399, 0), (200, 250)]

    affine_map = get_affine_transform(triangle, triangle)

    np.testing.assert_allclose(
        affine_map.to_matrix(),
        AffineMap.identity().to_matrix(),
        atol=1e-12)


def test_collinear_source_gives_identity():
    affine_map = get_affine_transform(
        [(0, 0), (1, 1), (2, 2)],
        [(5, 5), (10, 3), (7, 9)])

    assert affine_map == AffineMap.identity()
    assert np.all(np.isfinite(affine_map.to_matrix()))


def test_matches_opencv():
    source = np.array([[10, 20], [150, 30], [60, 200]], dtype=np.float32)
    destination = np.array([[5, 7], [300, 12], [80, 390]], dtype=np.float32)

    affine_map = get_affine_transform(source, destination)

    np.testing.assert_allclose(
        affine_map.to_matrix(),
        cv2.getAffineTransform(source, destination),
        rtol=1e-4,
        atol=1e-3)


def test_apply_on_arrays():
    affine_map = AffineMap(2.0, 0.0, 1.0, 0.0, 3.0, -1.0)

    xs, ys = affine_map.apply(np.array([0.0, 1.0]), np.array([0.0, 2.0]))

    np.testing.assert_array_equal(xs, [1.0, 3.0])
    np.testing.assert_array_equal(ys, [-1.0, 5.0])
