import logging
from typing import Optional

from shapely.geometry import Polygon

from ..algorithms.greedy_splitter import GreedySplitter
from ..config import SplitterConfig
from ..data.polygon_io import PolygonIO

logger = logging.getLogger(__name__)


class SplitController:
    """
    Controller responsible for orchestrating a split.
    Handles input normalization, runs the splitter and collects metrics.
    """

    def __init__(self, config: Optional[SplitterConfig] = None):
        self.splitter = GreedySplitter(config)
        self.last_result = None

    def run(self, polygon_or_points, parts: int) -> dict:
        """
        Executes the full split workflow.

        Args:
            polygon_or_points: shapely Polygon, WKT string or list of (x, y) tuples.
            parts (int): Number of equal-area parts.

        Returns:
            dict: {"polygon", "parts", "metrics"}.
        """
        # 1. Input normalization
        if isinstance(polygon_or_points, Polygon):
            polygon = polygon_or_points
        elif isinstance(polygon_or_points, str):
            polygon = PolygonIO.load_wkt(polygon_or_points)
        else:
            polygon = PolygonIO.from_coords(polygon_or_points)

        # 2. Split
        result_parts = self.splitter.split(polygon, parts)

        # 3. Metrics
        metrics = self.compute_metrics(polygon, result_parts)
        logger.info("Split into %d parts, max deviation %.3g, total cut length %.6g",
                    len(result_parts), metrics["max_relative_deviation"], metrics["total_cut_length"])

        self.last_result = {
            "polygon": polygon,
            "parts": result_parts,
            "metrics": metrics,
        }
        return self.last_result

    @staticmethod
    def compute_metrics(polygon: Polygon, parts) -> dict:
        target = polygon.area / len(parts)
        areas = [p.area for p in parts]
        deviation = max(abs(a - target) for a in areas) / target

        # Every cut adds its length to the perimeter of both sides
        cut_length = (sum(p.length for p in parts) - polygon.length) / 2.0

        return {
            "part_count": len(parts),
            "target_area": target,
            "part_areas": areas,
            "max_relative_deviation": deviation,
            "total_cut_length": max(cut_length, 0.0),
        }
