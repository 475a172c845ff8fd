from collections import Counter
import logging
import numpy as np
from typing import List, Sequence, Tuple

from _landmark_utils import as_points



Triangle = Tuple[int, int, int]
Edge = Tuple[int, int]

# Size of the super-triangle relative to the bounding box of the points.
SUPER_TRIANGLE_MARGIN = 2000


def in_circumcircle(
    p : Sequence[float],
    a : Sequence[float],
    b : Sequence[float],
    c : Sequence[float]) -> bool:
    """
    Checks whether point `p` lies strictly inside the circumcircle
    of the triangle (a, b, c). Works for either winding order.

    Parameters
    ----------
    p : Sequence[float]
        The point being tested (x, y).
    a, b, c : Sequence[float]
        The vertices of the triangle.

    Returns
    -------
    bool
        True if `p` is strictly inside the circumcircle. Points on the
        circle and degenerate (collinear) triangles return False.
    """
    # Translate so that `p` is the origin.
    ax = a[0] - p[0]
    ay = a[1] - p[1]
    bx = b[0] - p[0]
    by = b[1] - p[1]
    cx = c[0] - p[0]
    cy = c[1] - p[1]

    det = (ax * ax + ay * ay) * (bx * cy - cx * by) \
        - (bx * bx + by * by) * (ax * cy - cx * ay) \
        + (cx * cx + cy * cy) * (ax * by - bx * ay)

    # The sign of `det` flips with the winding order of the triangle.
    orientation = (a[0] - c[0]) * (b[1] - c[1]) - (a[1] - c[1]) * (b[0] - c[0])

    if orientation > 0:
        return det > 0
    if orientation < 0:
        return det < 0

    return False


def _undirected(u : int, v : int) -> Edge:
    return (u, v) if u < v else (v, u)


def _edges(triangle : Triangle) -> List[Edge]:
    i, j, k = triangle
    return [(i, j), (j, k), (k, i)]


def _orientation(a : Sequence[float], b : Sequence[float], c : Sequence[float]) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def _fill_hull_pockets(
    points : List[Tuple[float, float]],
    triangles : List[Triangle]) -> List[Triangle]:
    """
    Closes the concave pockets left on the boundary of the triangulation
    when a hull triangle was lost to the super-triangle. Every reflex
    boundary vertex is cut off with one triangle until the boundary
    is convex.
    """
    # Wind every triangle the same way so the interior is on the left
    # of each directed edge.
    directed = set()
    for i, j, k in triangles:
        if _orientation(points[i], points[j], points[k]) < 0:
            j, k = k, j
        directed.update(_edges((i, j, k)))

    next_vertex = {}
    for u, v in directed:
        if (v, u) in directed:
            continue
        if u in next_vertex:
            # The boundary touches itself, leave it alone.
            return triangles
        next_vertex[u] = v

    previous_vertex = {v: u for u, v in next_vertex.items()}
    if len(previous_vertex) != len(next_vertex):
        return triangles

    filled = list(triangles)
    changed = True

    while changed and len(next_vertex) > 3:
        changed = False

        for b in list(next_vertex):
            a = previous_vertex[b]
            c = next_vertex[b]

            if _orientation(points[a], points[b], points[c]) >= 0:
                continue

            # The new triangle (a, c, b) must not cover another boundary vertex.
            if any(_orientation(points[a], points[c], points[v]) >= 0
                   and _orientation(points[c], points[b], points[v]) >= 0
                   and _orientation(points[b], points[a], points[v]) >= 0
                   for v in next_vertex if v not in (a, b, c)):
                continue

            logging.debug(f"Filling hull pocket at point {b} with ({a}, {c}, {b})")
            filled.append((a, c, b))

            next_vertex[a] = c
            previous_vertex[c] = a
            del next_vertex[b]
            del previous_vertex[b]

            changed = True
            break

    return filled


class _Triangulation:
    """
    The working set of triangles for a single Bowyer-Watson run.

    Points are added one at a time with `insert`. Each insertion depends
    on the triangles left by the previous one, so insertion is strictly
    sequential.
    """

    def __init__(self, points : np.ndarray):
        self.num_points = len(points)

        # Build a super-triangle that contains every point.
        min_x, min_y = points.min(axis=0)
        max_x, max_y = points.max(axis=0)
        dx = max_x - min_x
        dy = max_y - min_y
        delta = max(dx, dy) * SUPER_TRIANGLE_MARGIN

        # All points are identical, the super-triangle still needs a size.
        if delta == 0:
            delta = 1.0

        super_vertices = np.array([
            [min_x - delta, min_y - delta],
            [min_x + delta * 2, min_y - delta],
            [min_x + dx / 2, max_y + delta * 2],
        ])

        # The super-triangle uses indices N, N + 1, N + 2.
        self.points = [(float(x), float(y)) for x, y in np.concatenate([points, super_vertices])]
        n = self.num_points
        self.triangles : List[Triangle] = [(n, n + 1, n + 2)]

        # Coordinates already inserted, used to merge duplicates.
        self._inserted = set()

    def insert(self, index : int):
        """
        Inserts the point at `index`, re-triangulating the cavity
        made by every triangle whose circumcircle contains it.
        """
        point = self.points[index]

        if point in self._inserted:
            logging.debug(f"Skipping duplicate point {index} at {point}")
            return
        self._inserted.add(point)

        # Find the triangles whose circumcircle contains the point.
        bad_triangles = [
            triangle for triangle in self.triangles
            if in_circumcircle(
                point,
                self.points[triangle[0]],
                self.points[triangle[1]],
                self.points[triangle[2]])]

        if not bad_triangles:
            return

        # An edge is on the boundary of the cavity if no other
        # bad triangle shares it.
        edge_counts = Counter(
            _undirected(u, v)
            for triangle in bad_triangles
            for (u, v) in _edges(triangle))

        polygon = [
            (u, v)
            for triangle in bad_triangles
            for (u, v) in _edges(triangle)
            if edge_counts[_undirected(u, v)] == 1]

        # Remove the bad triangles.
        bad = set(bad_triangles)
        self.triangles = [t for t in self.triangles if t not in bad]

        # Connect every boundary edge to the new point.
        for u, v in polygon:
            self.triangles.append((u, v, index))

    def result(self) -> List[Triangle]:
        """
        Returns the triangles that do not touch the super-triangle,
        with any pockets along the convex hull filled in.
        """
        n = self.num_points
        triangles = [t for t in self.triangles if t[0] < n and t[1] < n and t[2] < n]

        return _fill_hull_pockets(self.points, triangles)


def get_delaunay_triangles(
    landmarks : Sequence[Tuple[float, float]] | np.ndarray) -> List[Triangle]:
    """
    Connects together all the landmarks into Delaunay triangles using
    the Bowyer-Watson algorithm.

    NOTE: degenerate inputs (collinear or duplicate points) do not raise.
    They produce an empty or partial triangulation. A point that exactly
    duplicates an earlier point is skipped and belongs to no triangle.

    Parameters
    ----------
    landmarks : Sequence[Tuple[float, float]] | np.ndarray
        A list of coordinate pairs for every landmark.

    Returns
    -------
    List[Tuple[int, int, int]]
        The triangulation indexes. A list containing triplets:
        [(12, 45, 3), (45, 12, 70), ... ]
    """
    points = as_points(landmarks)

    if len(points) < 3:
        return []

    triangulation = _Triangulation(points)

    for index in range(len(points)):
        triangulation.insert(index)

    triangles = triangulation.result()
    logging.debug(f"Triangulated {len(points)} points into {len(triangles)} triangles")

    return triangles
