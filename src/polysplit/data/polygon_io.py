import json
import logging
import os
from typing import Iterable, List, Optional, Sequence

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import Polygon

from ..errors import InvalidArgumentError, JobSourceError

logger = logging.getLogger(__name__)


class PolygonIO:
    """
    Reads and writes polygons as WKT text or as plain coordinate lists in JSON.
    """

    @staticmethod
    def load_wkt(text: str) -> Polygon:
        """Parses a WKT POLYGON."""
        try:
            geometry = wkt.loads(text)
        except (ShapelyError, ValueError, TypeError) as e:
            raise InvalidArgumentError(f"Invalid WKT: {e}") from e

        if not isinstance(geometry, Polygon):
            raise InvalidArgumentError(f"Expected a POLYGON, got {geometry.geom_type}")
        return geometry

    @staticmethod
    def dump_wkt(polygon: Polygon, rounding_precision: Optional[int] = None) -> str:
        if rounding_precision is None:
            return polygon.wkt
        return wkt.dumps(polygon, rounding_precision=rounding_precision)

    @staticmethod
    def from_coords(coords: Sequence[Sequence[float]]) -> Polygon:
        """Polygon from a list of (x, y) points (closing point optional)."""
        points = [tuple(p) for p in coords]
        if len(points) < 3:
            raise InvalidArgumentError("Polygon must have at least 3 points.")
        if any(len(p) != 2 for p in points):
            raise InvalidArgumentError("Polygon points must be (x, y) pairs.")
        return Polygon(points)

    @staticmethod
    def save_parts(parts: Iterable[Polygon], filename: str, metadata: Optional[dict] = None):
        """Saves the split result to a JSON file."""
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)

        data = {
            "type": "PolygonSplit",
            "metadata": metadata or {},
            "parts": [
                {
                    "index": i,
                    "area": part.area,
                    "wkt": part.wkt,
                    "coordinates": [list(c) for c in part.exterior.coords],
                }
                for i, part in enumerate(parts)
            ],
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=4)
        logger.info("Split result saved to: %s", filename)

    @staticmethod
    def load_parts(filename: str) -> List[Polygon]:
        """Loads the parts written by save_parts()."""
        if not os.path.exists(filename):
            raise JobSourceError(f"File not found: {filename}")

        with open(filename, 'r') as f:
            data = json.load(f)

        if data.get("type") != "PolygonSplit":
            raise InvalidArgumentError(f"{filename} is not a split result file.")
        return [PolygonIO.load_wkt(item["wkt"]) for item in data.get("parts", [])]
