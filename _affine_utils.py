from dataclasses import dataclass
import logging
import numpy as np
from typing import Sequence, Tuple



# Below this, the source triangle is treated as collinear.
DEGENERATE_DENOMINATOR = 1e-10


# Data class for an affine map:
#   (x, y) -> (a * x + b * y + c, d * x + e * y + f)
@dataclass(frozen=True)
class AffineMap:
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @classmethod
    def identity(cls) -> "AffineMap":
        return cls(1.0, 0.0, 0.0, 0.0, 1.0, 0.0)

    def apply(self, x, y):
        """
        Maps a point (or arrays of x and y coordinates) through
        the transform.

        Parameters
        ----------
        x : float | np.ndarray
            X coordinate(s).
        y : float | np.ndarray
            Y coordinate(s), same shape as `x`.

        Returns
        -------
        Tuple
            The mapped (x, y), with the same type as the inputs.
        """
        return (self.a * x + self.b * y + self.c,
                self.d * x + self.e * y + self.f)

    def to_matrix(self) -> np.ndarray:
        """
        Returns the 2x3 matrix form, as used by `cv2.warpAffine`.
        """
        return np.array([
            [self.a, self.b, self.c],
            [self.d, self.e, self.f],
        ], dtype=np.float64)


def get_affine_transform(
    source_triangle : Sequence[Tuple[float, float]] | np.ndarray,
    destination_triangle : Sequence[Tuple[float, float]] | np.ndarray) -> AffineMap:
    """
    Finds the affine map that takes the three vertices of
    `source_triangle` onto the three vertices of `destination_triangle`,
    solved with Cramer's rule.

    If the source triangle is (nearly) collinear there is no unique
    solution, so the identity map is returned instead.

    Parameters
    ----------
    source_triangle : Sequence[Tuple[float, float]] | np.ndarray
        Three coordinate pairs: [[x1, y1], [x2, y2], [x3, y3]].
    destination_triangle : Sequence[Tuple[float, float]] | np.ndarray
        Three corresponding coordinate pairs: [[u1, v1], [u2, v2], [u3, v3]].

    Returns
    -------
    AffineMap
        The affine map from source to destination.
    """
    (x1, y1), (x2, y2), (x3, y3) = source_triangle
    (u1, v1), (u2, v2), (u3, v3) = destination_triangle

    denom = (x1 - x3) * (y2 - y3) - (x2 - x3) * (y1 - y3)

    if abs(denom) < DEGENERATE_DENOMINATOR:
        logging.debug("Collinear source triangle, using the identity map")
        return AffineMap.identity()

    a = ((u1 - u3) * (y2 - y3) - (u2 - u3) * (y1 - y3)) / denom
    b = ((u2 - u3) * (x1 - x3) - (u1 - u3) * (x2 - x3)) / denom
    c = u3 - a * x3 - b * y3

    d = ((v1 - v3) * (y2 - y3) - (v2 - v3) * (y1 - y3)) / denom
    e = ((v2 - v3) * (x1 - x3) - (v1 - v3) * (x2 - x3)) / denom
    f = v3 - d * x3 - e * y3

    return AffineMap(float(a), float(b), float(c), float(d), float(e), float(f))
