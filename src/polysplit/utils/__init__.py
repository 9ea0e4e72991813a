from .exporter import GeoJSONExporter
