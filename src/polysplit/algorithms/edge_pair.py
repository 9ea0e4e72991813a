import logging
import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import LineString, Polygon
from shapely.ops import unary_union

from ..config import SplitterConfig
from ..errors import NumericalFailureError
from .cut import CutCandidate
from .geometry_utils import (
    Coordinate, Edge, is_interior_chord, line_intersection, make_polygon,
    piece_towards, signed_area, slice_polygon,
)

logger = logging.getLogger(__name__)

# A cut is stored as (point on edge A side, point on edge B side)
CutEnds = Tuple[Coordinate, Coordinate]

# Slices within REFINE_RATIO * area_tolerance of the target are accepted as is
REFINE_RATIO = 1e-3
MAX_REFINE_STEPS = 50


class SlicedCut(NamedTuple):
    """Polygon sliced along one cut: the piece on the sweep side and the rest."""
    removed: Polygon
    remainder: Polygon
    point_a: Coordinate
    point_b: Coordinate


@dataclass(frozen=True)
class ProjectedPoint:
    """
    Image of an edge end point on the opposite edge.

    :param point: Projected coordinate (snapped onto the edge when valid).
    :param source_edge: Edge the point was projected onto.
    :param parameter: Position along `source_edge` (0 = start, 1 = end).
    :param valid: True when the parameter lies in [0, 1].
    """
    point: Coordinate
    source_edge: Edge
    parameter: float
    valid: bool

    def is_on(self, edge: Edge) -> bool:
        return self.valid and self.source_edge == edge


@dataclass(frozen=True)
class RegionDecomposition:
    """Up to three polygons covering the area directly between two ring edges."""
    leading_triangle: Optional[Polygon]
    trapezoid: Polygon
    trailing_triangle: Optional[Polygon]

    @property
    def leading_area(self) -> float:
        return self.leading_triangle.area if self.leading_triangle is not None else 0.0

    @property
    def trapezoid_area(self) -> float:
        return self.trapezoid.area

    @property
    def trailing_area(self) -> float:
        return self.trailing_triangle.area if self.trailing_triangle is not None else 0.0

    @property
    def total_area(self) -> float:
        return self.leading_area + self.trapezoid_area + self.trailing_area

    @property
    def regions(self) -> List[Optional[Polygon]]:
        return [self.leading_triangle, self.trapezoid, self.trailing_triangle]

    @property
    def is_usable(self) -> bool:
        """False for bow-tie or collinear configurations that cannot hold a cut."""
        if self.trapezoid.is_empty or self.total_area <= 0.0:
            return False
        return all(r.is_valid for r in self.regions if r is not None)


class EdgePairAnalyzer:
    """
    Analyzes the area between two edges of the same exterior ring and locates
    cuts of a requested area inside it.

    Ring order is edge_a.start -> edge_a.end -> (arc between) -> edge_b.start ->
    edge_b.end -> (arc outside) -> edge_a.start::

                      edge_a
        a.start ._______________. a.end
               /|               |\\
              / |               | \\
      outside  T2|   trapezoid   |T1  between
            /   |               |   \\
           .____._______________.____.
        b.end                       b.start
                      edge_b

    The triangles only exist when the end point of one edge can be projected
    onto the other one. Projection rotates the point around the pivot (the
    intersection of both supporting lines), so every cut across the trapezoid
    is parallel to the triangle bases. Parallel edges have no pivot and only
    the trapezoid remains.
    """

    def __init__(self, edge_a: Edge, edge_b: Edge, config: Optional[SplitterConfig] = None):
        self.edge_a = edge_a
        self.edge_b = edge_b
        self.config = config or SplitterConfig()

        self.pivot = self._compute_pivot()

        # At most 2 projected points, one per side
        self.projected_end = self._first_valid(
            self._project(edge_a.end, edge_a, edge_b),
            self._project(edge_b.start, edge_b, edge_a),
        )
        self.projected_start = self._first_valid(
            self._project(edge_a.start, edge_a, edge_b),
            self._project(edge_b.end, edge_b, edge_a),
        )

        self.decomposition = self._decompose()

    # ------------------------------------------------------------------
    # Pivot and projections
    # ------------------------------------------------------------------

    def _compute_pivot(self) -> Optional[np.ndarray]:
        a, b = self.edge_a, self.edge_b

        # Adjacent edges meet exactly at their shared vertex
        if a.end == b.start:
            return np.array(a.end, dtype=float)
        if b.end == a.start:
            return np.array(a.start, dtype=float)

        pivot = line_intersection(a, b, self.config.parallel_epsilon)
        if pivot is not None and not np.all(np.isfinite(pivot)):
            raise NumericalFailureError(f"Non-finite pivot for {self!r}")
        return pivot

    def _ray_direction(self, edge: Edge) -> Optional[np.ndarray]:
        """Unit vector from the pivot towards the farther end point of `edge`."""
        start = np.array(edge.start, dtype=float)
        end = np.array(edge.end, dtype=float)
        far = start if np.linalg.norm(start - self.pivot) >= np.linalg.norm(end - self.pivot) else end
        vec = far - self.pivot
        norm = np.linalg.norm(vec)
        if norm == 0.0:
            return None
        return vec / norm

    def _project(self, point: Coordinate, from_edge: Edge, onto_edge: Edge) -> Optional[ProjectedPoint]:
        if self.pivot is None:
            return None

        u_from = self._ray_direction(from_edge)
        u_onto = self._ray_direction(onto_edge)
        if u_from is None or u_onto is None:
            return None

        # Same distance from the pivot, measured along the other ray
        distance = float(np.dot(np.array(point, dtype=float) - self.pivot, u_from))
        image = self.pivot + distance * u_onto
        t = onto_edge.parameter_of(image)

        slack = self.config.projection_slack
        valid = -slack <= t <= 1.0 + slack
        if valid:
            if t <= slack:
                t = 0.0
            elif t >= 1.0 - slack:
                t = 1.0
            image = onto_edge.point_along(t)

        return ProjectedPoint(point=(float(image[0]), float(image[1])),
                              source_edge=onto_edge, parameter=t, valid=valid)

    @staticmethod
    def _first_valid(*candidates: Optional[ProjectedPoint]) -> Optional[ProjectedPoint]:
        for candidate in candidates:
            if candidate is not None and candidate.valid:
                return candidate
        return None

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------

    @staticmethod
    def _corner(projected: Optional[ProjectedPoint], edge: Edge, fallback: Coordinate) -> Coordinate:
        return projected.point if projected is not None and projected.is_on(edge) else fallback

    def _trapezoid_corners(self) -> Tuple[Coordinate, Coordinate, Coordinate, Coordinate]:
        a, b = self.edge_a, self.edge_b
        return (
            self._corner(self.projected_start, a, a.start),
            self._corner(self.projected_end, a, a.end),
            self._corner(self.projected_end, b, b.start),
            self._corner(self.projected_start, b, b.end),
        )

    def _decompose(self) -> RegionDecomposition:
        a, b = self.edge_a, self.edge_b

        leading = None
        if self.projected_end is not None:
            leading = make_polygon(a.end, self.projected_end.point, b.start)
        trailing = None
        if self.projected_start is not None:
            trailing = make_polygon(a.start, self.projected_start.point, b.end)

        trapezoid = make_polygon(*self._trapezoid_corners()) or Polygon()

        return RegionDecomposition(
            leading_triangle=leading if leading is not None and leading.area > 0.0 else None,
            trapezoid=trapezoid,
            trailing_triangle=trailing if trailing is not None and trailing.area > 0.0 else None,
        )

    def _cut_chain(self) -> List[CutEnds]:
        """
        The four cuts bounding the regions, from the arc between the edges to
        the arc outside them: chord, leading/trapezoid border,
        trapezoid/trailing border, chord.
        """
        a, b = self.edge_a, self.edge_b
        c1, c2, c3, c4 = self._trapezoid_corners()
        return [(a.end, b.start), (c2, c3), (c1, c4), (a.start, b.end)]

    def _sweep_regions(self, direction: int) -> List[Tuple[Optional[Polygon], CutEnds, CutEnds]]:
        chain = self._cut_chain()
        regions = self.decomposition.regions
        forward = [(regions[k], chain[k], chain[k + 1]) for k in range(3)]
        if direction == 1:
            return forward
        return [(region, end, start) for region, start, end in reversed(forward)]

    @property
    def total_area(self) -> float:
        return self.decomposition.total_area

    # ------------------------------------------------------------------
    # Cuts
    # ------------------------------------------------------------------

    def get_cuts(self, polygon: Polygon, target_area: float,
                 segments_between: int, segments_outside: int) -> List[CutCandidate]:
        """
        Produces the possible cuts of `target_area` located between the two edges.

        :param polygon: Polygon the area is cut away from (ring holding both edges).
        :param target_area: Area to cut away.
        :param segments_between: Ring edges strictly between edge_a and edge_b.
        :param segments_outside: Ring edges strictly between edge_b and edge_a.
        :return: 0, 1 or 2 candidates, at most one per sweep direction.
        """
        if not self.decomposition.is_usable:
            return []

        tolerance = self.config.area_tolerance * target_area
        chain = self._cut_chain()
        cuts = []

        for direction, arc_segments, chord in ((1, segments_between, chain[0]),
                                               (2, segments_outside, chain[-1])):
            sliced, outside = self._outside_piece(polygon, chord, arc_segments)
            if not sliced:
                continue

            outside_area = outside.area if outside is not None else 0.0
            # Cuts at the chord itself are produced by a different edge pair
            if outside_area >= target_area:
                continue
            if outside_area + self.total_area < target_area - tolerance:
                continue

            cut = self._locate_cut(polygon, target_area, outside, direction)
            if cut is not None:
                cuts.append(cut)

        return cuts

    @staticmethod
    def _outside_piece(polygon: Polygon, chord: CutEnds, arc_segments: int) -> Tuple[bool, Optional[Polygon]]:
        """
        Extra area bounded by the arc and the chord joining its end points.
        Returns (False, None) when the chord does not slice the polygon in two.
        """
        if arc_segments <= 1:
            # The arc is empty or a single edge lying on the chord
            return True, None

        pieces = slice_polygon(polygon, chord[0], chord[1])
        if len(pieces) != 2:
            return False, None
        return True, min(pieces, key=lambda p: p.area)

    def _locate_cut(self, polygon: Polygon, target_area: float,
                    outside: Optional[Polygon], direction: int) -> Optional[CutCandidate]:
        tolerance = self.config.area_tolerance * target_area
        cumulative = outside.area if outside is not None else 0.0
        included = [outside] if outside is not None else []

        for region, (start_a, start_b), (end_a, end_b) in self._sweep_regions(direction):
            area = region.area if region is not None else 0.0
            if area <= 0.0:
                continue

            if cumulative + area >= target_area - tolerance:
                needed = min(max(target_area - cumulative, 0.0), area)
                fraction = self._sweep_fraction(start_a, start_b, end_a, end_b, needed)
                if fraction is None:
                    return None

                sweep = (Edge(start_a, end_a), Edge(start_b, end_b))
                partial = make_polygon(start_a, sweep[0].point_along(fraction),
                                       sweep[1].point_along(fraction), start_b)
                pieces = included + ([partial] if partial is not None else [])
                return self._build_candidate(polygon, target_area, sweep, fraction, needed, pieces, direction)

            cumulative += area
            included.append(region)

        return None

    def _sweep_fraction(self, start_a: Coordinate, start_b: Coordinate,
                        end_a: Coordinate, end_b: Coordinate, needed: float) -> Optional[float]:
        """
        Sweep parameter u at which the region swept from the start cut holds
        `needed` area.

        The swept area is a polynomial of degree <= 2 in u (linear for the
        triangles, quadratic for the trapezoid); it is fitted from u = 0.5 and
        u = 1 and solved in closed form.
        """
        mid_a = Edge(start_a, end_a).point_along(0.5)
        mid_b = Edge(start_b, end_b).point_along(0.5)
        s_half = signed_area([start_a, mid_a, mid_b, start_b])
        s_one = signed_area([start_a, end_a, end_b, start_b])
        if s_one == 0.0:
            return None

        sign = 1.0 if s_one > 0.0 else -1.0
        quad = sign * (2.0 * s_one - 4.0 * s_half)
        lin = sign * s_one - quad

        disc = lin * lin + 4.0 * quad * needed
        denom = lin + math.sqrt(max(disc, 0.0))
        if denom <= 0.0:
            fraction = needed / abs(s_one)
        else:
            fraction = 2.0 * needed / denom

        if not math.isfinite(fraction):
            raise NumericalFailureError(f"Non-finite sweep fraction for {self!r}")

        slack = self.config.projection_slack
        if fraction < -slack or fraction > 1.0 + slack:
            logger.debug("Sweep fraction %.6g out of range for %r", fraction, self)
            return None
        return min(max(fraction, 0.0), 1.0)

    def _build_candidate(self, polygon: Polygon, target_area: float, sweep: Tuple[Edge, Edge],
                         fraction: float, needed: float, pieces: Sequence[Polygon],
                         direction: int) -> Optional[CutCandidate]:
        """
        Turns the interpolated sweep position into a candidate.

        The union of the swept regions is only an estimate of the removed
        piece: in concave rings the regions can reach past the boundary. The
        candidate is therefore built from the polygon actually sliced along the
        cut, and the fraction is refined on that area when the estimate leaks
        out of the polygon or misses the target.
        """
        tolerance = self.config.area_tolerance * target_area
        try:
            estimate = unary_union(list(pieces))
            leak = estimate.difference(polygon).area
        except GEOSException as e:
            logger.debug("Union of cut regions failed for %r: %s", self, e)
            return None

        # The removed piece is on the side the sweep started from
        origin = tuple((np.array(sweep[0].start) + np.array(sweep[1].start)) / 2.0)

        sliced = self._slice_at(polygon, sweep, fraction, origin)
        if sliced is None:
            return None

        error = sliced.removed.area - target_area
        if leak > tolerance or abs(error) > REFINE_RATIO * tolerance:
            logger.debug("Estimate off by %.3g (leak %.3g) for %r, refining", error, leak, self)
            sliced = self._refine(polygon, target_area, sweep, fraction, needed, sliced, origin)
            if sliced is None:
                return None

        removed = sliced.removed
        if abs(removed.area - target_area) > tolerance or not removed.is_valid:
            logger.debug("Cut area %.6g misses target %.6g for %r", removed.area, target_area, self)
            return None

        cut_line = LineString([sliced.point_a, sliced.point_b])
        return CutCandidate(cut_length=cut_line.length, removed_polygon=removed,
                            cut_line=cut_line, direction=direction, remainder=sliced.remainder)

    def _slice_at(self, polygon: Polygon, sweep: Tuple[Edge, Edge], fraction: float,
                  origin: Coordinate) -> Optional["SlicedCut"]:
        """Slices `polygon` along the cut at `fraction` of the sweep, or None."""
        point_a = sweep[0].point_along(fraction)
        point_b = sweep[1].point_along(fraction)

        # Cut lines must be interior chords of the ring
        if not is_interior_chord(polygon, point_a, point_b):
            logger.debug("Cut %s-%s leaves the polygon, discarded", point_a, point_b)
            return None

        pieces = slice_polygon(polygon, point_a, point_b, extension=self.config.cut_extension)
        if len(pieces) != 2:
            return None

        removed = piece_towards(pieces, point_a, point_b, origin)
        if removed is None:
            return None
        remainder = pieces[1] if removed is pieces[0] else pieces[0]
        return SlicedCut(removed, remainder, point_a, point_b)

    def _refine(self, polygon: Polygon, target_area: float, sweep: Tuple[Edge, Edge],
                fraction: float, needed: float, sliced: "SlicedCut",
                origin: Coordinate) -> Optional["SlicedCut"]:
        """
        Illinois (modified regula falsi) search for the fraction whose slice
        removes `target_area`, bracketed inside the current region.
        """
        strict = REFINE_RATIO * self.config.area_tolerance * target_area
        error = sliced.removed.area - target_area

        if error < 0.0:
            upper = self._slice_at(polygon, sweep, 1.0, origin)
            if upper is None:
                return None
            upper_error = upper.removed.area - target_area
            if upper_error < -strict:
                # Target lies beyond this region
                return None
            if upper_error <= strict:
                return upper
            a, fa, b, fb = fraction, error, 1.0, upper_error
        else:
            # At the start of the region the slice removes target - needed
            a, fa, b, fb = 0.0, -max(needed, strict), fraction, error

        side = 0
        for _ in range(MAX_REFINE_STEPS):
            if fb == fa:
                break
            c = (a * fb - b * fa) / (fb - fa)
            sliced = self._slice_at(polygon, sweep, c, origin)
            if sliced is None:
                return None

            fc = sliced.removed.area - target_area
            if abs(fc) <= strict:
                return sliced
            if fc > 0.0:
                b, fb = c, fc
                if side == 1:
                    fa /= 2.0
                side = 1
            else:
                a, fa = c, fc
                if side == -1:
                    fb /= 2.0
                side = -1

        return sliced

    def __repr__(self):
        return f"EdgePairAnalyzer(edge_a={tuple(self.edge_a)}, edge_b={tuple(self.edge_b)})"
