import numpy as np
import pytest



@pytest.fixture
def face_landmarks() -> np.ndarray:
    """
    68 face-like landmarks on a 400x400 canvas: a jittered grid
    in the middle of the canvas, integer coordinates.
    """
    points = []
    for i in range(68):
        row, col = divmod(i, 9)
        x = 110 + col * 22 + (i * 7) % 5
        y = 110 + row * 25 + (i * 3) % 4
        points.append((x, y))

    return np.array(points, dtype=np.float64)


@pytest.fixture
def gradient_image() -> np.ndarray:
    """
    A 400x400 RGB image with a different colour at almost every pixel.
    """
    ys, xs = np.mgrid[0:400, 0:400]
    image = np.stack([
        xs * 255 // 399,
        ys * 255 // 399,
        (xs + ys) * 255 // 798], axis=-1)

    return image.astype(np.uint8)


def solid_image(colour, width=400, height=400) -> np.ndarray:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = colour
    return image


def random_landmarks(seed, low=1.0, high=398.0, near_edge=False) -> np.ndarray:
    """
    68 float landmarks on a 400x400 canvas. With `near_edge`, two points
    are moved within three pixels of each side of the canvas.
    """
    rng = np.random.default_rng(seed)
    points = rng.uniform(low, high, (68, 2))

    if near_edge:
        offsets = rng.uniform(0.01, 3.0, 8)
        points[0:2, 1] = offsets[0:2]
        points[2:4, 1] = 399 - offsets[2:4]
        points[4:6, 0] = offsets[4:6]
        points[6:8, 0] = 399 - offsets[6:8]

    return points
