"""Tests for polygon and split result IO."""

import json

import pytest
from shapely.geometry import Polygon

from polysplit.data.polygon_io import PolygonIO
from polysplit.errors import InvalidArgumentError, JobSourceError
from polysplit.utils.exporter import GeoJSONExporter

from .conftest import TRAPEZOID_WKT


def test_load_wkt():
    polygon = PolygonIO.load_wkt(TRAPEZOID_WKT)
    assert isinstance(polygon, Polygon)
    assert polygon.area == pytest.approx(4500.0)


@pytest.mark.parametrize("text", ["not wkt", "POINT (1 1)", "LINESTRING (0 0, 1 1)"])
def test_load_wkt_rejects(text):
    with pytest.raises(InvalidArgumentError):
        PolygonIO.load_wkt(text)


def test_dump_wkt_rounding(unit_square):
    assert PolygonIO.load_wkt(PolygonIO.dump_wkt(unit_square)).equals(unit_square)
    rounded = PolygonIO.dump_wkt(Polygon([(0, 0), (1.23456, 0), (0, 1)]), rounding_precision=2)
    assert PolygonIO.load_wkt(rounded).exterior.coords[1] == (1.23, 0.0)


def test_from_coords():
    polygon = PolygonIO.from_coords([[0, 0], [2, 0], [2, 2], [0, 2]])
    assert polygon.area == pytest.approx(4.0)

    with pytest.raises(InvalidArgumentError):
        PolygonIO.from_coords([[0, 0], [1, 1]])
    with pytest.raises(InvalidArgumentError):
        PolygonIO.from_coords([[0, 0, 0], [1, 0, 0], [1, 1, 0]])


def test_save_and_load_parts(tmp_path, unit_square, triangle):
    filename = str(tmp_path / "out" / "parts.json")
    PolygonIO.save_parts([unit_square, triangle], filename, {"source": "test"})

    with open(filename) as f:
        data = json.load(f)
    assert data["type"] == "PolygonSplit"
    assert data["metadata"] == {"source": "test"}
    assert [p["index"] for p in data["parts"]] == [0, 1]

    loaded = PolygonIO.load_parts(filename)
    assert len(loaded) == 2
    assert loaded[1].equals(triangle)


def test_load_parts_errors(tmp_path):
    with pytest.raises(JobSourceError):
        PolygonIO.load_parts(str(tmp_path / "missing.json"))

    other = tmp_path / "other.json"
    other.write_text(json.dumps({"type": "Something"}))
    with pytest.raises(InvalidArgumentError):
        PolygonIO.load_parts(str(other))


def test_geojson_export(tmp_path, unit_square, triangle):
    collection = GeoJSONExporter.to_feature_collection([unit_square, triangle], {"target_area": 1.0})

    assert collection["type"] == "FeatureCollection"
    assert collection["properties"] == {"target_area": 1.0}
    assert [f["properties"]["index"] for f in collection["features"]] == [0, 1]
    assert collection["features"][0]["geometry"]["type"] == "Polygon"

    filename = tmp_path / "parts.geojson"
    GeoJSONExporter.save(str(filename), [unit_square])
    assert json.loads(filename.read_text())["features"][0]["properties"]["area"] == pytest.approx(1.0)
