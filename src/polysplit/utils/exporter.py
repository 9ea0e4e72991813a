import json
import logging
import os
from typing import Optional, Sequence

from shapely.geometry import Polygon, mapping

logger = logging.getLogger(__name__)


class GeoJSONExporter:
    """
    Exports split results to a GeoJSON FeatureCollection (one Feature per part).
    """

    @staticmethod
    def to_feature_collection(parts: Sequence[Polygon], properties: Optional[dict] = None) -> dict:
        """
        :param parts: Split parts, in cut order.
        :param properties: Extra properties copied onto the collection.
        """
        features = []
        for i, part in enumerate(parts):
            features.append({
                "type": "Feature",
                "geometry": mapping(part),
                "properties": {
                    "index": i,
                    "area": part.area,
                },
            })

        collection = {
            "type": "FeatureCollection",
            "features": features,
        }
        if properties:
            collection["properties"] = dict(properties)
        return collection

    @staticmethod
    def save(filename: str, parts: Sequence[Polygon], properties: Optional[dict] = None):
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(filename, 'w') as f:
            json.dump(GeoJSONExporter.to_feature_collection(parts, properties), f, indent=4)
        logger.info("Parts exported to GeoJSON: %s", filename)
