import numpy as np
from typing import Optional, Sequence, Tuple

from _affine_utils import get_affine_transform



# Fully opaque alpha value.
OPAQUE = 255

# Relative slack of the inside test. Pixels exactly on an edge pick up
# rounding error in the barycentric numerators.
INSIDE_TOLERANCE = 1e-9


def _barycentric_numerators(triangle : np.ndarray, xs, ys):
    """
    Barycentric coordinates of (xs, ys) relative to `triangle`, using the
    dot-product formulation. Returns the numerators of (u, v) and their
    common denominator, so that u = num_u / denom and v = num_v / denom.

    Keeping the division out lets the inside test compare against
    a tolerance scaled by the denominator.
    """
    (ax, ay), (bx, by), (cx, cy) = triangle

    # v0 = c - a, v1 = b - a, v2 = p - a
    v0x, v0y = cx - ax, cy - ay
    v1x, v1y = bx - ax, by - ay
    v2x = xs - ax
    v2y = ys - ay

    dot00 = v0x * v0x + v0y * v0y
    dot01 = v0x * v1x + v0y * v1y
    dot02 = v0x * v2x + v0y * v2y
    dot11 = v1x * v1x + v1y * v1y
    dot12 = v1x * v2x + v1y * v2y

    denom = dot00 * dot11 - dot01 * dot01
    num_u = dot11 * dot02 - dot01 * dot12
    num_v = dot00 * dot12 - dot01 * dot02

    return num_u, num_v, denom


def _inside(num_u, num_v, denom):
    """
    Edge-inclusive inside test on barycentric numerators.
    """
    eps = INSIDE_TOLERANCE * denom

    return (num_u >= -eps) & (num_v >= -eps) & (num_u + num_v <= denom + eps)


def get_barycentric_coordinates(
    point : Sequence[float],
    triangle : Sequence[Tuple[float, float]] | np.ndarray) -> Optional[Tuple[float, float]]:
    """
    Computes the barycentric coordinates (u, v) of a point relative to a
    triangle (a, b, c), where u is the weight of c and v is the weight of b.
    The weight of a is 1 - u - v.

    Parameters
    ----------
    point : Sequence[float]
        The point (x, y).
    triangle : Sequence[Tuple[float, float]] | np.ndarray
        Three coordinate pairs.

    Returns
    -------
    Tuple[float, float]
        The (u, v) coordinates.
    None
        If the triangle is degenerate (zero area).
    """
    tri = np.asarray(triangle, dtype=np.float64)
    num_u, num_v, denom = _barycentric_numerators(tri, float(point[0]), float(point[1]))

    if denom <= 0:
        return None

    return float(num_u / denom), float(num_v / denom)


def point_in_triangle(
    point : Sequence[float],
    triangle : Sequence[Tuple[float, float]] | np.ndarray) -> bool:
    """
    Checks whether a point is inside a triangle. Points on the edges
    count as inside. Degenerate triangles contain no points.
    """
    tri = np.asarray(triangle, dtype=np.float64)
    num_u, num_v, denom = _barycentric_numerators(tri, float(point[0]), float(point[1]))

    if denom <= 0:
        return False

    return bool(_inside(num_u, num_v, denom))


def sample_bilinear_array(
    image : np.ndarray,
    xs : np.ndarray,
    ys : np.ndarray) -> np.ndarray:
    """
    Samples an image at fractional coordinates with bilinear
    interpolation. Coordinates are clamped into
    [0, width - 1.001] x [0, height - 1.001], so sampling never
    reads outside the image.

    Parameters
    ----------
    image : np.ndarray
        The source image, shape (H, W, C) with C >= 3.
    xs : np.ndarray
        X coordinates, any shape.
    ys : np.ndarray
        Y coordinates, same shape as `xs`.

    Returns
    -------
    np.ndarray
        The interpolated colours, shape xs.shape + (3,), float64.
        Only the first three channels are sampled.
    """
    height, width = image.shape[:2]

    # NaN becomes 0, infinities become huge and are clamped below.
    xs = np.nan_to_num(np.asarray(xs, dtype=np.float64), nan=0.0)
    ys = np.nan_to_num(np.asarray(ys, dtype=np.float64), nan=0.0)

    xs = np.clip(xs, 0, max(width - 1.001, 0))
    ys = np.clip(ys, 0, max(height - 1.001, 0))

    x0 = np.floor(xs).astype(np.intp)
    y0 = np.floor(ys).astype(np.intp)
    x1 = np.minimum(x0 + 1, width - 1)
    y1 = np.minimum(y0 + 1, height - 1)

    fx = (xs - x0)[..., np.newaxis]
    fy = (ys - y0)[..., np.newaxis]

    p00 = image[y0, x0, :3].astype(np.float64)
    p10 = image[y0, x1, :3].astype(np.float64)
    p01 = image[y1, x0, :3].astype(np.float64)
    p11 = image[y1, x1, :3].astype(np.float64)

    return (p00 * (1 - fx) + p10 * fx) * (1 - fy) + \
        (p01 * (1 - fx) + p11 * fx) * fy


def sample_bilinear(
    image : np.ndarray,
    x : float,
    y : float) -> Tuple[float, float, float]:
    """
    Samples a single pixel colour at fractional coordinates (x, y).
    See `sample_bilinear_array`.
    """
    colour = sample_bilinear_array(image, np.array([x]), np.array([y]))[0]

    return float(colour[0]), float(colour[1]), float(colour[2])


def warp_triangle(
    image_1 : np.ndarray,
    triangle_1 : Sequence[Tuple[float, float]] | np.ndarray,
    image_2 : np.ndarray,
    triangle_2 : Sequence[Tuple[float, float]] | np.ndarray,
    output : np.ndarray,
    destination_triangle : Sequence[Tuple[float, float]] | np.ndarray,
    ratio : float) -> int:
    """
    Warps the triangular regions `triangle_1` of `image_1` and
    `triangle_2` of `image_2` onto `destination_triangle` of `output`,
    cross-fading them by `ratio`.

    Every pixel of `output` inside the destination triangle is mapped
    back into both source images (inverse warp), so there are no gaps.
    Pixels on a shared edge are written by both triangles.

    Parameters
    ----------
    image_1 : np.ndarray
        The first source image, (H, W, C) with C >= 3.
    triangle_1 : Sequence[Tuple[float, float]] | np.ndarray
        The triangle in `image_1`.
    image_2 : np.ndarray
        The second source image, (H, W, C) with C >= 3.
    triangle_2 : Sequence[Tuple[float, float]] | np.ndarray
        The corresponding triangle in `image_2`.
    output : np.ndarray
        The RGBA output buffer, (H, W, 4) uint8. Modified in place.
    destination_triangle : Sequence[Tuple[float, float]] | np.ndarray
        The triangle in `output`.
    ratio : float
        0.0 = only `image_1`, 1.0 = only `image_2`.

    Returns
    -------
    int
        The number of pixels written.
    """
    tri = np.asarray(destination_triangle, dtype=np.float64)
    height, width = output.shape[:2]

    # Integer bounding box, clipped to the canvas.
    min_x = max(int(np.floor(tri[:, 0].min())), 0)
    max_x = min(int(np.ceil(tri[:, 0].max())), width - 1)
    min_y = max(int(np.floor(tri[:, 1].min())), 0)
    max_y = min(int(np.ceil(tri[:, 1].max())), height - 1)

    if min_x > max_x or min_y > max_y:
        return 0

    ys, xs = np.mgrid[min_y:max_y + 1, min_x:max_x + 1]

    # Keep only the pixels inside the triangle.
    num_u, num_v, denom = _barycentric_numerators(
        tri, xs.astype(np.float64), ys.astype(np.float64))

    if denom <= 0:
        return 0

    inside = _inside(num_u, num_v, denom)
    if not inside.any():
        return 0

    px = xs[inside]
    py = ys[inside]

    # Destination -> source maps.
    map_1 = get_affine_transform(tri, triangle_1)
    map_2 = get_affine_transform(tri, triangle_2)

    src_x1, src_y1 = map_1.apply(px.astype(np.float64), py.astype(np.float64))
    src_x2, src_y2 = map_2.apply(px.astype(np.float64), py.astype(np.float64))

    colour_1 = sample_bilinear_array(image_1, src_x1, src_y1)
    colour_2 = sample_bilinear_array(image_2, src_x2, src_y2)

    # Cross-fade.
    blended = colour_1 * (1 - ratio) + colour_2 * ratio

    output[py, px, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
    output[py, px, 3] = OPAQUE

    return int(px.size)
