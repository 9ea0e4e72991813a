from dataclasses import dataclass
from typing import Optional, Tuple

from shapely.geometry import LineString, Polygon


@dataclass(frozen=True)
class CutCandidate:
    """
    A straight cut line and the piece of the polygon it removes.

    :param cut_length: Length of the new boundary introduced by the cut.
    :param removed_polygon: Piece cut away; its area matches the requested target.
    :param cut_line: The cut itself, end points on the polygon boundary.
    :param edge_pair: Ring indices (i, j) of the edge pair that produced it.
    :param direction: 1 = swept from the arc between the edges, 2 = from the arc outside.
    :param remainder: The other piece of the sliced polygon, when known.
    """
    cut_length: float
    removed_polygon: Polygon
    cut_line: LineString
    edge_pair: Tuple[int, int] = (-1, -1)
    direction: int = 1
    remainder: Optional[Polygon] = None

    @property
    def removed_area(self) -> float:
        return self.removed_polygon.area

    def __repr__(self):
        return (f"CutCandidate(length={self.cut_length:.6g}, area={self.removed_area:.6g}, "
                f"edge_pair={self.edge_pair}, direction={self.direction})")
