import numpy as np
from typing import List, Sequence, Tuple



# Number of landmarks in a face (68-point convention).
NUM_FACE_LANDMARKS = 68

# Number of extra landmarks around the edges of the canvas.
NUM_BOUNDARY_LANDMARKS = 8


class LandmarkError(ValueError):
    """
    Raised when two landmark sets cannot be used together,
    e.g. they have different lengths or the wrong number of points.
    """


def as_points(landmarks : Sequence[Tuple[float, float]] | np.ndarray) -> np.ndarray:
    """
    Converts landmarks into a float array of shape (N, 2).

    Parameters
    ----------
    landmarks : Sequence[Tuple[float, float]] | np.ndarray
        A list of (x, y) coordinate pairs.

    Returns
    -------
    np.ndarray
        A float64 array of shape (N, 2).
    """
    points = np.asarray(landmarks, dtype=np.float64)

    # An empty list has shape (0,), give it the right number of columns.
    if points.size == 0:
        return points.reshape(0, 2)

    if points.ndim != 2 or points.shape[1] != 2:
        raise LandmarkError(f"Expected landmarks of shape (N, 2), got {points.shape}")

    return points


def check_landmark_counts(
    landmarks_1 : np.ndarray,
    landmarks_2 : np.ndarray,
    expected_count : int | None = None):
    """
    Checks that two landmark sets line up index by index.

    Parameters
    ----------
    landmarks_1 : np.ndarray
        First set of landmarks.
    landmarks_2 : np.ndarray
        Second set of landmarks.
    expected_count : int | None
        If given, both sets must contain exactly this many points.

    Raises
    ------
    LandmarkError
        If the counts differ from each other or from `expected_count`.
    """
    if len(landmarks_1) != len(landmarks_2):
        raise LandmarkError(
            f"Landmark counts differ: {len(landmarks_1)} != {len(landmarks_2)}")

    if expected_count is not None and len(landmarks_1) != expected_count:
        raise LandmarkError(
            f"Expected {expected_count} landmarks, got {len(landmarks_1)}")


def normalize_landmarks(
    landmarks : Sequence[Tuple[float, float]] | np.ndarray,
    source_width : float,
    source_height : float,
    output_width : int,
    output_height : int) -> np.ndarray:
    """
    Rescales landmarks from the pixel space of the source image
    into the pixel space of the output canvas. X and Y are scaled
    independently, so the aspect ratio is not preserved.

    Parameters
    ----------
    landmarks : Sequence[Tuple[float, float]] | np.ndarray
        Landmarks in source image pixels.
    source_width : float
        The width of the source image.
    source_height : float
        The height of the source image.
    output_width : int
        The width of the output canvas.
    output_height : int
        The height of the output canvas.

    Returns
    -------
    np.ndarray
        The rescaled landmarks, shape (N, 2).
    """
    points = as_points(landmarks)
    scale = np.array([output_width / source_width, output_height / source_height])

    return points * scale


def get_boundary_landmarks(
    output_width : int,
    output_height : int) -> np.ndarray:
    """
    Returns landmarks around the edges of the canvas: the four corners
    and the middle of every side. These make sure the triangulation
    covers the whole canvas and not just the face.

    The order is fixed: going clockwise from the top-left corner.

    Parameters
    ----------
    output_width : int
        The width of the canvas in pixels.
    output_height : int
        The height of the canvas in pixels.

    Returns
    -------
    np.ndarray
        An array of shape (8, 2).
    """
    w = output_width
    h = output_height

    return np.array([
        [0, 0],
        [w / 2, 0],
        [w - 1, 0],
        [w - 1, h / 2],
        [w - 1, h - 1],
        [w / 2, h - 1],
        [0, h - 1],
        [0, h / 2],
    ], dtype=np.float64)


def add_boundary_landmarks(
    landmarks : Sequence[Tuple[float, float]] | np.ndarray,
    output_width : int,
    output_height : int) -> np.ndarray:
    """
    Appends the boundary landmarks to a set of face landmarks.
    """
    return np.concatenate([
        as_points(landmarks),
        get_boundary_landmarks(output_width, output_height)])


def interpolate_landmarks(
    landmarks_1 : Sequence[Tuple[float, float]] | np.ndarray,
    landmarks_2 : Sequence[Tuple[float, float]] | np.ndarray,
    ratio : float) -> np.ndarray:
    """
    Linearly blends two sets of landmarks.

    Formula:
        intermediate = landmarks_1 * (1 - ratio) + landmarks_2 * ratio

    NOTE: `ratio` is not clamped. Values outside [0, 1] extrapolate.

    Parameters
    ----------
    landmarks_1 : Sequence[Tuple[float, float]] | np.ndarray
        First set of landmarks.
    landmarks_2 : Sequence[Tuple[float, float]] | np.ndarray
        Second set of landmarks. Must have the same length as `landmarks_1`.
    ratio : float
        Blending factor.
        - ratio=0.0 => result is exactly `landmarks_1`
        - ratio=1.0 => result is exactly `landmarks_2`

    Returns
    -------
    np.ndarray
        The blended landmarks, shape (N, 2).

    Raises
    ------
    LandmarkError
        If `landmarks_1` and `landmarks_2` are not the same length.
    """
    points_1 = as_points(landmarks_1)
    points_2 = as_points(landmarks_2)
    check_landmark_counts(points_1, points_2)

    # Return exact copies at the endpoints.
    if ratio == 0:
        return points_1.copy()
    if ratio == 1:
        return points_2.copy()

    return points_1 * (1 - ratio) + points_2 * ratio


# Indexes of the MediaPipe face mesh (468 points) that correspond
# to the 68-point landmark convention, in that convention's order.
MEDIAPIPE_TO_68 = [
    # Jawline 0-16
    162, 234, 93, 58, 172, 136, 149, 148, 152, 377, 378, 365, 397, 288, 323, 454, 389,
    # Right eyebrow 17-21
    71, 63, 105, 66, 107,
    # Left eyebrow 22-26
    336, 296, 334, 293, 301,
    # Nose bridge 27-30
    168, 197, 5, 4,
    # Nose bottom 31-35
    75, 97, 2, 326, 305,
    # Right eye 36-41
    33, 160, 158, 133, 153, 144,
    # Left eye 42-47
    362, 385, 387, 263, 373, 380,
    # Outer lip 48-59
    61, 39, 37, 0, 267, 269, 291, 405, 314, 17, 84, 181,
    # Inner lip 60-67
    78, 82, 13, 312, 308, 317, 14, 87,
]


def reduce_to_68_landmarks(
    mesh_landmarks : List[Tuple[float, float]]) -> List[Tuple[float, float]]:
    """
    Picks the 68 conventional landmarks out of a full face mesh.

    Parameters
    ----------
    mesh_landmarks : List[Tuple[float, float]]
        At least 468 face mesh landmarks (x, y).

    Returns
    -------
    List[Tuple[float, float]]
        The 68 landmarks.
    """
    if len(mesh_landmarks) < 468:
        raise ValueError(f"Face mesh requires at least 468 points, got {len(mesh_landmarks)}")

    return [tuple(mesh_landmarks[i]) for i in MEDIAPIPE_TO_68]
