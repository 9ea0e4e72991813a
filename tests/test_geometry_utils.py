"""Tests for the low level geometry helpers."""

import pytest
from shapely.geometry import Polygon

from polysplit.algorithms.geometry_utils import (
    Edge, is_interior_chord, line_intersection, make_polygon, piece_towards,
    ring_coords, ring_edges, signed_area, slice_polygon,
)


def test_ring_coords_drops_closing_point(unit_square):
    assert ring_coords(unit_square) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_ring_coords_merges_micro_segments():
    poly = Polygon([(0, 0), (1, 0), (1 + 1e-13, 0), (1, 1), (0, 1)])
    assert len(ring_coords(poly, tolerance=1e-9)) == 4


def test_ring_edges_follow_ring_order(triangle):
    edges = ring_edges(triangle)
    assert len(edges) == 3
    for k, edge in enumerate(edges):
        assert edge.end == edges[(k + 1) % 3].start


def test_edge_point_along_is_exact_at_ends():
    edge = Edge((0.1, 0.7), (3.3, 9.1))
    assert edge.point_along(0.0) == (0.1, 0.7)
    assert edge.point_along(1.0) == (3.3, 9.1)
    assert edge.point_along(0.5) == pytest.approx((1.7, 4.9))
    assert edge.length == pytest.approx((3.2 ** 2 + 8.4 ** 2) ** 0.5)


def test_line_intersection():
    pivot = line_intersection(Edge((1, 0), (4, 0)), Edge((0, 3), (0, 1)))
    assert tuple(pivot) == pytest.approx((0.0, 0.0))


def test_line_intersection_parallel_is_none():
    assert line_intersection(Edge((0, 0), (10, 0)), Edge((10, 5), (0, 5))) is None


def test_signed_area_orientation():
    assert signed_area([(0, 0), (1, 0), (1, 1), (0, 1)]) == pytest.approx(1.0)
    assert signed_area([(0, 1), (1, 1), (1, 0), (0, 0)]) == pytest.approx(-1.0)


def test_make_polygon_degenerate():
    assert make_polygon((0, 0), (1, 0), (1, 0)) is None
    assert make_polygon((0, 0), (1, 0), (1, 1), (0, 0)).area == pytest.approx(0.5)


def test_slice_polygon(unit_square):
    pieces = slice_polygon(unit_square, (0.5, 0.0), (0.5, 1.0), extension=1e-7)
    assert len(pieces) == 2
    assert sorted(p.area for p in pieces) == pytest.approx([0.5, 0.5])


def test_slice_polygon_missing_line(unit_square):
    pieces = slice_polygon(unit_square, (2.0, 0.0), (2.0, 1.0))
    assert len(pieces) == 1


def test_piece_towards_picks_by_side():
    rectangle = Polygon([(0, 0), (3, 0), (3, 1), (0, 1)])
    pieces = slice_polygon(rectangle, (1.0, 0.0), (1.0, 1.0), extension=1e-7)

    left = piece_towards(pieces, (1.0, 0.0), (1.0, 1.0), (0.0, 0.5))
    right = piece_towards(pieces, (1.0, 0.0), (1.0, 1.0), (2.5, 0.2))
    assert left.area == pytest.approx(1.0)
    assert right.area == pytest.approx(2.0)
    assert left.bounds[0] == pytest.approx(0.0)


def test_piece_towards_point_on_cut(unit_square):
    pieces = slice_polygon(unit_square, (0.5, 0.0), (0.5, 1.0), extension=1e-7)
    assert piece_towards(pieces, (0.5, 0.0), (0.5, 1.0), (0.5, 3.0)) is None
    assert piece_towards(pieces, (0.5, 0.0), (0.5, 0.0), (0.0, 0.0)) is None


def test_is_interior_chord(l_shape):
    assert is_interior_chord(l_shape, (0.0, 0.0), (1.0, 1.0))
    # Crosses the notch of the L
    assert not is_interior_chord(l_shape, (2.0, 0.5), (0.5, 2.0))
    assert not is_interior_chord(l_shape, (0.5, 0.5), (0.5, 0.5))
