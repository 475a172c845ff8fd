from dataclasses import dataclass
import logging
import cv2
import numpy as np
from typing import List, Optional, Sequence, Tuple

from _landmark_utils import NUM_FACE_LANDMARKS, as_points, check_landmark_counts, \
    normalize_landmarks, add_boundary_landmarks, interpolate_landmarks
from _delaunay_utils import get_delaunay_triangles
from _warp_utils import warp_triangle



# Data class for the morph canvas.
@dataclass(frozen=True)
class MorphConfig:
    # The width of the output canvas, in pixels.
    output_width: int = 400
    # The height of the output canvas, in pixels.
    output_height: int = 400
    # The number of face landmarks expected per image.
    num_landmarks: int = NUM_FACE_LANDMARKS


def _check_image(image : np.ndarray, config : MorphConfig):
    """
    Checks that an image fits the canvas and has colour channels.
    """
    expected = (config.output_height, config.output_width)

    if image.ndim != 3 or image.shape[2] < 3:
        raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) image, got {image.shape}")

    if image.shape[:2] != expected:
        raise ValueError(
            f"Image shape {image.shape[:2]} does not match the canvas {expected}")


def _prepare_landmarks(
    landmarks : Sequence[Tuple[float, float]] | np.ndarray,
    image_size : Optional[Tuple[int, int]],
    config : MorphConfig) -> np.ndarray:
    """
    Moves landmarks into canvas space and adds the boundary landmarks.
    """
    points = as_points(landmarks)

    if image_size is not None:
        source_width, source_height = image_size
        points = normalize_landmarks(
            points,
            source_width=source_width,
            source_height=source_height,
            output_width=config.output_width,
            output_height=config.output_height)

    return add_boundary_landmarks(
        points,
        output_width=config.output_width,
        output_height=config.output_height)


def morph(
    image_1 : np.ndarray,
    image_2 : np.ndarray,
    landmarks_1 : Sequence[Tuple[float, float]] | np.ndarray,
    landmarks_2 : Sequence[Tuple[float, float]] | np.ndarray,
    ratio : float,
    config : Optional[MorphConfig] = None,
    image_sizes : Optional[Tuple[Tuple[int, int], Tuple[int, int]]] = None) -> np.ndarray:
    """
    Morphs two faces together. The geometry of the faces and their
    colours are both interpolated by `ratio`.

    The landmarks of both faces are moved onto the canvas, extended with
    points around the edges, and blended into one intermediate set of
    landmarks. That set is split into Delaunay triangles and every triangle
    of both images is warped onto it and cross-faded.

    Parameters
    ----------
    image_1 : np.ndarray
        The first face, already resized to the canvas. (H, W, 3) or
        (H, W, 4), RGB(A).
    image_2 : np.ndarray
        The second face, same layout as `image_1`.
    landmarks_1 : Sequence[Tuple[float, float]] | np.ndarray
        The face landmarks of `image_1` (68 by default).
    landmarks_2 : Sequence[Tuple[float, float]] | np.ndarray
        The face landmarks of `image_2`, index-aligned with `landmarks_1`.
    ratio : float
        Blend ratio. 0.0 = face 1, 1.0 = face 2. Not clamped.
    config : Optional[MorphConfig]
        The canvas configuration. Defaults to a 400x400 canvas.
    image_sizes : Optional[Tuple[Tuple[int, int], Tuple[int, int]]]
        The (width, height) of the original images the landmarks were
        detected on. If None, the landmarks are already in canvas space.

    Returns
    -------
    np.ndarray
        The morphed face, (H, W, 4) uint8 RGBA.

    Raises
    ------
    LandmarkError
        If the landmark sets do not have the expected, equal lengths.
    ValueError
        If an image does not match the canvas.
    """
    if config is None:
        config = MorphConfig()

    # These must be equal!
    check_landmark_counts(
        as_points(landmarks_1),
        as_points(landmarks_2),
        expected_count=config.num_landmarks)

    _check_image(image_1, config)
    _check_image(image_2, config)

    size_1, size_2 = image_sizes if image_sizes is not None else (None, None)
    all_landmarks_1 = _prepare_landmarks(landmarks_1, size_1, config)
    all_landmarks_2 = _prepare_landmarks(landmarks_2, size_2, config)

    # The triangulation is computed on the intermediate landmarks.
    average_landmarks = interpolate_landmarks(all_landmarks_1, all_landmarks_2, ratio)
    triangles = get_delaunay_triangles(average_landmarks)

    # Leave space for final output.
    output = np.zeros((config.output_height, config.output_width, 4), dtype=np.uint8)

    # Main loop to morph triangles.
    pixels = 0
    for triangle in triangles:
        indexes = list(triangle)

        pixels += warp_triangle(
            image_1=image_1,
            triangle_1=all_landmarks_1[indexes],
            image_2=image_2,
            triangle_2=all_landmarks_2[indexes],
            output=output,
            destination_triangle=average_landmarks[indexes],
            ratio=ratio)

    logging.debug(f"Morphed {len(triangles)} triangles, {pixels} pixels written (ratio: {ratio})")

    return output


def generate_continuous_morphs(
    image_1 : np.ndarray,
    image_2 : np.ndarray,
    landmarks_1 : Sequence[Tuple[float, float]] | np.ndarray,
    landmarks_2 : Sequence[Tuple[float, float]] | np.ndarray,
    num_frames : int,
    config : Optional[MorphConfig] = None,
    image_sizes : Optional[Tuple[Tuple[int, int], Tuple[int, int]]] = None) -> List[np.ndarray]:
    """
    Creates a series of morphs going from `image_1` to `image_2`,
    with evenly spaced ratios from 0.0 to 1.0 (both included).

    Parameters
    ----------
    image_1 : np.ndarray
        The starting face.
    image_2 : np.ndarray
        The ending face.
    landmarks_1 : Sequence[Tuple[float, float]] | np.ndarray
        The landmarks of `image_1`.
    landmarks_2 : Sequence[Tuple[float, float]] | np.ndarray
        The landmarks of `image_2`.
    num_frames : int
        The number of images in the series.
    config : Optional[MorphConfig]
        The canvas configuration.
    image_sizes : Optional[Tuple[Tuple[int, int], Tuple[int, int]]]
        See `morph`.

    Returns
    -------
    List[np.ndarray]
        `num_frames` RGBA images.
    """
    if num_frames <= 0:
        raise ValueError(f"num_frames must be positive, got {num_frames}")

    # A single frame is the start of the series.
    ratios = np.linspace(0, 1, num_frames).tolist()

    frames = []
    for ratio in ratios:
        frames.append(morph(
            image_1,
            image_2,
            landmarks_1,
            landmarks_2,
            ratio,
            config=config,
            image_sizes=image_sizes))

    return frames


def draw_triangulation(
    image : np.ndarray,
    landmarks : Sequence[Tuple[float, float]] | np.ndarray,
    triangles : Sequence[Tuple[int, int, int]],
    colour : Tuple[int, ...] = (255, 0, 0)) -> np.ndarray:
    """
    Draws the triangle edges and the landmarks on a copy of an image.
    Useful to check landmark placement.

    Parameters
    ----------
    image : np.ndarray
        The image to draw on. It is not modified.
    landmarks : Sequence[Tuple[float, float]] | np.ndarray
        The landmarks the triangles index into.
    triangles : Sequence[Tuple[int, int, int]]
        The triangulation indexes.
    colour : Tuple[int, ...]
        Line colour, in the channel order of `image`.

    Returns
    -------
    np.ndarray
        A copy of `image` with the triangulation drawn on it.
    """
    points = as_points(landmarks)
    image_copy = np.ascontiguousarray(image).copy()

    # Match the number of channels of the image.
    if image_copy.ndim == 3 and image_copy.shape[2] == 4 and len(colour) == 3:
        colour = (*colour, 255)

    for triangle in triangles:
        pts = np.rint(points[list(triangle)]).astype(np.int32).reshape(3, 2)
        cv2.polylines(image_copy, [pts], isClosed=True, color=colour, thickness=1)

    for x, y in points:
        cv2.circle(image_copy, (int(round(x)), int(round(y))), radius=2, color=colour, thickness=-1)

    return image_copy
