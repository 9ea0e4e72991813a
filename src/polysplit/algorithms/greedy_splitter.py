import logging
import math
import numbers
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional, Tuple

from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.validation import explain_validity

from ..config import SplitterConfig
from ..errors import InfeasibleSplitError, InvalidArgumentError, NumericalFailureError
from .cut import CutCandidate
from .edge_pair import EdgePairAnalyzer
from .geometry_utils import Edge, bounding_diagonal_sq, ring_edges, slice_polygon

logger = logging.getLogger(__name__)

# (i, j, edge_a, edge_b, segments_between, segments_outside)
PairTask = Tuple[int, int, Edge, Edge, int, int]


class GreedySplitter:
    """
    Splits a polygon into parts of equal area with straight cuts.

    At every step the shortest cut removing `remaining_area / parts_left` is
    chosen among all edge pairs of the current remainder. This greedily
    minimizes the new boundary per step; it is not a global optimum over all
    cuts.
    """

    def __init__(self, config: Optional[SplitterConfig] = None):
        self.config = config or SplitterConfig()

    def split(self, polygon: Polygon, parts: int) -> List[Polygon]:
        """
        Splits `polygon` into `parts` polygons of equal area.

        :param polygon: Simple shapely Polygon without holes.
        :param parts: Number of parts (>= 1).
        :return: List of `parts` polygons; the last one is the final remainder.
        """
        self.validate(polygon, parts)
        if parts == 1:
            return [polygon]

        original_area = polygon.area
        result: List[Polygon] = []
        remainder = polygon

        logger.info("Splitting polygon (area %.6g, %d vertices) into %d parts",
                    original_area, len(polygon.exterior.coords) - 1, parts)

        for step in range(parts - 1):
            parts_left = parts - step
            target_area = remainder.area / parts_left

            cut = self.find_best_cut(remainder, target_area)
            if cut is None:
                raise InfeasibleSplitError(
                    f"No cut of area {target_area:.6g} found at step {step + 1}/{parts - 1}")

            part, remainder = self._apply_cut(remainder, cut, target_area, original_area)
            result.append(part)
            self._check_area_balance(original_area, result, remainder)

            logger.info("Step %d/%d: cut length %.6g, part area %.6g (target %.6g), edge pair %s",
                        step + 1, parts - 1, cut.cut_length, part.area, target_area, cut.edge_pair)

        result.append(remainder)
        return result

    def validate(self, polygon: Polygon, parts: int) -> None:
        """Raises InvalidArgumentError when the request cannot be served."""
        if isinstance(parts, bool) or not isinstance(parts, numbers.Integral):
            raise InvalidArgumentError(f"Number of parts must be an integer, got {parts!r}")
        if parts < 1:
            raise InvalidArgumentError(f"Number of parts must be at least 1, got {parts}")

        if not isinstance(polygon, Polygon):
            raise InvalidArgumentError(f"Expected a shapely Polygon, got {type(polygon).__name__}")
        if polygon.is_empty:
            raise InvalidArgumentError("Polygon is empty.")
        if polygon.has_z:
            raise InvalidArgumentError("3-D polygons are not supported.")
        if len(polygon.interiors) > 0:
            raise InvalidArgumentError("Polygons with holes are not supported.")
        if not polygon.is_valid:
            raise InvalidArgumentError(f"Polygon is not simple: {explain_validity(polygon)}")

        area = polygon.area
        floor = self.config.degenerate_ratio * bounding_diagonal_sq(polygon)
        if not math.isfinite(area) or area <= floor:
            raise InvalidArgumentError(f"Polygon is degenerate (area {area:.6g}).")
        if area / parts <= floor:
            raise InvalidArgumentError(
                f"Polygon of area {area:.6g} cannot be split into {parts} non-degenerate parts.")

    # ------------------------------------------------------------------
    # Cut search
    # ------------------------------------------------------------------

    def _pair_tasks(self, polygon: Polygon) -> List[PairTask]:
        """Every pair of distinct ring edges, in ring order."""
        tolerance = 1e-12 * math.sqrt(bounding_diagonal_sq(polygon))
        edges = ring_edges(polygon, tolerance)
        n = len(edges)

        tasks = []
        for i in range(n - 1):
            for j in range(i + 1, n):
                segments_between = j - i - 1
                segments_outside = n - (j - i + 1)
                tasks.append((i, j, edges[i], edges[j], segments_between, segments_outside))
        return tasks

    def _evaluate_pair(self, task: PairTask, polygon: Polygon, target_area: float) -> List[CutCandidate]:
        i, j, edge_a, edge_b, segments_between, segments_outside = task
        analyzer = EdgePairAnalyzer(edge_a, edge_b, self.config)

        # Without outside arcs the reachable area is the decomposition itself
        if segments_between <= 1 and segments_outside <= 1 and analyzer.total_area < target_area:
            return []

        cuts = analyzer.get_cuts(polygon, target_area, segments_between, segments_outside)
        return [replace(c, edge_pair=(i, j)) for c in cuts]

    def find_best_cut(self, polygon: Polygon, target_area: float) -> Optional[CutCandidate]:
        """
        Shortest cut removing `target_area` from `polygon`, or None.
        Ties go to the first candidate in enumeration order.
        """
        tasks = self._pair_tasks(polygon)

        if self.config.parallel and len(tasks) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                results = list(executor.map(lambda t: self._evaluate_pair(t, polygon, target_area), tasks))
        else:
            results = [self._evaluate_pair(t, polygon, target_area) for t in tasks]

        best = None
        candidates = 0
        for cuts in results:
            for cut in cuts:
                candidates += 1
                if best is None or cut.cut_length < best.cut_length:
                    best = cut

        logger.debug("Evaluated %d edge pairs, %d candidate cuts, best %r", len(tasks), candidates, best)
        return best

    # ------------------------------------------------------------------
    # Applying a cut
    # ------------------------------------------------------------------

    def _apply_cut(self, polygon: Polygon, cut: CutCandidate,
                   target_area: float, original_area: float) -> Tuple[Polygon, Polygon]:
        """
        Removes the cut piece from `polygon`.
        Returns (part, remainder).

        The part must hold `target_area`; a part off by more than the area
        tolerance raises NumericalFailureError.
        """
        part, remainder = cut.removed_polygon, cut.remainder
        if remainder is None:
            remainder = self._remainder_of(polygon, cut, original_area)

        error = abs(part.area - target_area)
        if error > self.config.area_tolerance * target_area:
            raise NumericalFailureError(
                f"Part area {part.area:.6g} misses target {target_area:.6g} for {cut!r}.")
        return part, remainder

    def _remainder_of(self, polygon: Polygon, cut: CutCandidate, original_area: float) -> Polygon:
        p, q = cut.cut_line.coords[0], cut.cut_line.coords[-1]
        pieces = slice_polygon(polygon, p, q, extension=self.config.cut_extension)

        if len(pieces) == 2:
            # Piece holding the removed polygon is the part
            inside = cut.removed_polygon.representative_point()
            return pieces[1] if pieces[0].contains(inside) else pieces[0]

        logger.debug("Slicing along %r gave %d pieces, using difference", cut, len(pieces))
        try:
            difference = polygon.difference(cut.removed_polygon)
        except GEOSException as e:
            raise NumericalFailureError(f"Difference failed for {cut!r}: {e}") from e

        return self._largest_polygon(difference, original_area)

    def _largest_polygon(self, geometry, original_area: float) -> Polygon:
        if isinstance(geometry, Polygon):
            polygons = [geometry]
        else:
            polygons = [g for g in getattr(geometry, "geoms", []) if isinstance(g, Polygon)]
        polygons = [g for g in polygons if not g.is_empty]
        if not polygons:
            raise NumericalFailureError("Cut left an empty remainder.")

        polygons.sort(key=lambda g: g.area, reverse=True)
        residue = sum(g.area for g in polygons[1:])
        if residue > self.config.area_tolerance * original_area:
            raise NumericalFailureError(
                f"Cut left a disconnected remainder ({len(polygons)} pieces, residue {residue:.6g}).")
        return polygons[0]

    def _check_area_balance(self, original_area: float, parts: List[Polygon], remainder: Polygon) -> None:
        total = sum(p.area for p in parts) + remainder.area
        error = abs(total - original_area) / original_area
        if error > self.config.area_tolerance:
            raise NumericalFailureError(
                f"Area balance off by {error:.3g} (relative) after {len(parts)} cuts.")


def split(polygon: Polygon, parts: int, config: Optional[SplitterConfig] = None) -> List[Polygon]:
    """Convenience wrapper around GreedySplitter.split()."""
    return GreedySplitter(config).split(polygon, parts)
