import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import LineString, Point, Polygon
from shapely.ops import split

Coordinate = Tuple[float, float]


class Edge(NamedTuple):
    """Directed edge of an exterior ring (start -> end in ring order)."""
    start: Coordinate
    end: Coordinate

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    def point_along(self, fraction: float) -> Coordinate:
        """Point at `fraction` of the way from start to end (exact at 0 and 1)."""
        if fraction == 0.0:
            return self.start
        if fraction == 1.0:
            return self.end
        return (self.start[0] + fraction * (self.end[0] - self.start[0]),
                self.start[1] + fraction * (self.end[1] - self.start[1]))

    def parameter_of(self, point: Sequence[float]) -> float:
        """Parameter t of the orthogonal projection of `point` on the supporting line."""
        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        return ((point[0] - self.start[0]) * dx + (point[1] - self.start[1]) * dy) / (dx * dx + dy * dy)


def cross_2d(u, v) -> float:
    # Cross product 2D: (x1*y2 - x2*y1)
    return u[0] * v[1] - u[1] * v[0]


def ring_coords(polygon: Polygon, tolerance: float = 0.0) -> List[Coordinate]:
    """
    Exterior ring vertices without the closing point.
    Consecutive vertices closer than `tolerance` are merged (micro-segments left
    behind by boolean operations).
    """
    coords = [(float(x), float(y)) for x, y, *_ in polygon.exterior.coords]
    if coords and coords[0] == coords[-1]:
        coords = coords[:-1]

    cleaned: List[Coordinate] = []
    for c in coords:
        if cleaned and math.dist(cleaned[-1], c) <= tolerance:
            continue
        cleaned.append(c)
    while len(cleaned) > 1 and math.dist(cleaned[0], cleaned[-1]) <= tolerance:
        cleaned.pop()
    return cleaned


def ring_edges(polygon: Polygon, tolerance: float = 0.0) -> List[Edge]:
    """Directed edges of the exterior ring, in ring order."""
    coords = ring_coords(polygon, tolerance)
    n = len(coords)
    return [Edge(coords[k], coords[(k + 1) % n]) for k in range(n)]


def line_intersection(edge_a: Edge, edge_b: Edge, parallel_epsilon: float = 1e-12) -> Optional[np.ndarray]:
    """
    Intersection of the infinite lines supporting both edges.
    Returns None when the lines are parallel (or collinear).
    """
    p = np.array(edge_a.start, dtype=float)
    r = np.array(edge_a.end, dtype=float) - p
    q = np.array(edge_b.start, dtype=float)
    s = np.array(edge_b.end, dtype=float) - q

    denom = cross_2d(r, s)
    if abs(denom) <= parallel_epsilon * np.linalg.norm(r) * np.linalg.norm(s):
        return None

    t = cross_2d(q - p, s) / denom
    return p + t * r


def signed_area(points: Sequence[Sequence[float]]) -> float:
    """Shoelace formula (positive for counter-clockwise rings)."""
    total = 0.0
    n = len(points)
    for k in range(n):
        x1, y1 = points[k]
        x2, y2 = points[(k + 1) % n]
        total += x1 * y2 - x2 * y1
    return total / 2.0


def make_polygon(*points: Coordinate) -> Optional[Polygon]:
    """
    Polygon from corner points, dropping repeated consecutive corners.
    Returns None when fewer than 3 distinct corners remain (degenerate region).
    """
    corners: List[Coordinate] = []
    for p in points:
        p = (float(p[0]), float(p[1]))
        if corners and corners[-1] == p:
            continue
        corners.append(p)
    if len(corners) > 1 and corners[0] == corners[-1]:
        corners.pop()
    if len(corners) < 3:
        return None
    return Polygon(corners)


def slice_polygon(polygon: Polygon, p: Coordinate, q: Coordinate, extension: float = 0.0) -> List[Polygon]:
    """
    Cuts the polygon along the straight line p-q.

    :param extension: Relative length added on both ends of the line so that a
                      cut whose end points lie (numerically) on the boundary
                      still crosses it.
    :return: Polygon pieces (a single piece when the line does not cut).
    """
    p_arr = np.array(p, dtype=float)
    q_arr = np.array(q, dtype=float)
    if extension > 0.0:
        delta = (q_arr - p_arr) * extension
        p_arr, q_arr = p_arr - delta, q_arr + delta

    cut_line = LineString([tuple(p_arr), tuple(q_arr)])
    try:
        result_collection = split(polygon, cut_line)
    except (GEOSException, ValueError):
        return [polygon]

    return [geom for geom in result_collection.geoms if isinstance(geom, Polygon) and not geom.is_empty]


def piece_towards(pieces: Sequence[Polygon], p: Coordinate, q: Coordinate,
                  toward: Sequence[float], offset: float = 1e-6) -> Optional[Polygon]:
    """
    Piece lying on the same side of the cut p-q as the point `toward`.

    The pieces are tested against a point just off the middle of the cut
    (`offset` relative to the cut length), not against their area or overlap.
    Returns None when `toward` lies on the cut line.
    """
    p_arr = np.array(p, dtype=float)
    q_arr = np.array(q, dtype=float)
    direction = q_arr - p_arr
    length = np.linalg.norm(direction)
    if length == 0.0:
        return None

    normal = np.array([-direction[1], direction[0]]) / length
    middle = (p_arr + q_arr) / 2.0
    side = float(np.dot(np.array(toward, dtype=float) - middle, normal))
    if side == 0.0:
        return None

    marker = Point(middle + math.copysign(offset * length, side) * normal)
    return min(pieces, key=lambda piece: piece.distance(marker))


def is_interior_chord(polygon: Polygon, p: Coordinate, q: Coordinate, trim: float = 1e-7) -> bool:
    """
    True when the segment p-q runs through the interior of the polygon and
    only touches its boundary at the end points.
    The segment is trimmed by `trim` (relative) at both ends so that end points
    computed on an edge do not count as boundary crossings.
    """
    p_arr = np.array(p, dtype=float)
    q_arr = np.array(q, dtype=float)
    if np.array_equal(p_arr, q_arr):
        return False

    delta = (q_arr - p_arr) * trim
    inner = LineString([tuple(p_arr + delta), tuple(q_arr - delta)])
    return polygon.contains(inner)


def bounding_diagonal_sq(polygon: Polygon) -> float:
    min_x, min_y, max_x, max_y = polygon.bounds
    return (max_x - min_x) ** 2 + (max_y - min_y) ** 2
