"""Tests for the edge pair decomposition and cut location."""

import math

import pytest

from polysplit.algorithms.edge_pair import EdgePairAnalyzer, ProjectedPoint
from polysplit.algorithms.geometry_utils import Edge, ring_edges
from polysplit.errors import NumericalFailureError


def test_parallel_edges_only_have_a_trapezoid():
    analyzer = EdgePairAnalyzer(Edge((0, 0), (10, 0)), Edge((10, 5), (0, 5)))

    assert analyzer.pivot is None
    assert analyzer.projected_end is None
    assert analyzer.projected_start is None
    assert analyzer.decomposition.leading_triangle is None
    assert analyzer.decomposition.trailing_triangle is None
    assert analyzer.total_area == pytest.approx(50.0)


def test_converging_edges_decomposition(wedge):
    edges = ring_edges(wedge)
    analyzer = EdgePairAnalyzer(edges[0], edges[2])

    assert tuple(analyzer.pivot) == pytest.approx((0.0, 0.0))

    # (4, 0) cannot be rotated onto the y axis edge, so (0, 3) is rotated onto the x axis
    assert isinstance(analyzer.projected_end, ProjectedPoint)
    assert analyzer.projected_end.point == pytest.approx((3.0, 0.0))
    assert analyzer.projected_end.is_on(edges[0])
    assert analyzer.projected_start.point == pytest.approx((0.0, 1.0))

    decomposition = analyzer.decomposition
    assert decomposition.leading_area == pytest.approx(1.5)
    assert decomposition.trapezoid_area == pytest.approx(4.0)
    assert decomposition.trailing_triangle is None
    assert analyzer.total_area == pytest.approx(wedge.area)


def test_cuts_are_parallel_to_triangle_bases(wedge):
    edges = ring_edges(wedge)
    analyzer = EdgePairAnalyzer(edges[0], edges[2])

    cuts = analyzer.get_cuts(wedge, 2.0, segments_between=1, segments_outside=1)

    assert [c.direction for c in cuts] == [1, 2]
    for cut in cuts:
        (x1, y1), (x2, y2) = cut.cut_line.coords
        assert x1 + y1 == pytest.approx(x2 + y2)
        assert cut.removed_area == pytest.approx(2.0, rel=1e-6)
        assert cut.cut_length == pytest.approx(cut.cut_line.length)

    lengths = sorted(c.cut_length for c in cuts)
    assert lengths == pytest.approx([math.sqrt(10.0), 4.0])


def test_no_cut_when_target_is_unreachable(wedge):
    edges = ring_edges(wedge)
    analyzer = EdgePairAnalyzer(edges[0], edges[2])

    assert analyzer.get_cuts(wedge, 6.0, segments_between=1, segments_outside=1) == []


def test_adjacent_edges_pivot_on_shared_vertex(triangle):
    edges = ring_edges(triangle)
    analyzer = EdgePairAnalyzer(edges[0], edges[1])

    assert tuple(analyzer.pivot) == (4.0, 0.0)
    assert analyzer.total_area == pytest.approx(triangle.area)


def test_trapezoid_between_parallel_bases(trapezoid):
    edges = ring_edges(trapezoid)
    analyzer = EdgePairAnalyzer(edges[0], edges[2])

    cuts = analyzer.get_cuts(trapezoid, 2250.0, segments_between=1, segments_outside=1)

    assert len(cuts) == 2
    for cut in cuts:
        (x1, y1), (x2, y2) = cut.cut_line.coords
        assert (x1, y1) == pytest.approx((50.0, 0.0))
        assert (x2, y2) == pytest.approx((50.0, 50.0))
        assert cut.cut_length == pytest.approx(50.0)


def test_concave_candidates_stay_inside(l_shape):
    edges = ring_edges(l_shape)
    n = len(edges)
    found = 0

    for i in range(n - 1):
        for j in range(i + 1, n):
            analyzer = EdgePairAnalyzer(edges[i], edges[j])
            for cut in analyzer.get_cuts(l_shape, 1.0, j - i - 1, n - (j - i + 1)):
                found += 1
                assert l_shape.buffer(1e-9).covers(cut.cut_line)
                assert l_shape.buffer(1e-9).covers(cut.removed_polygon)
                assert cut.removed_area == pytest.approx(1.0, rel=1e-5)
                assert cut.removed_polygon.is_valid

    assert found > 0


@pytest.mark.parametrize("target_share", [0.1, 0.25, 0.4])
def test_star_candidates_are_pieces_of_the_star(star, target_share):
    # Swept regions of a star reach across its notches
    target = star.area * target_share
    edges = ring_edges(star)
    n = len(edges)
    found = 0

    for i in range(n - 1):
        for j in range(i + 1, n):
            analyzer = EdgePairAnalyzer(edges[i], edges[j])
            for cut in analyzer.get_cuts(star, target, j - i - 1, n - (j - i + 1)):
                found += 1
                assert cut.removed_polygon.difference(star).area <= 1e-9 * star.area
                assert cut.removed_area == pytest.approx(target, rel=1e-5)
                assert cut.remainder.area == pytest.approx(star.area - target, rel=1e-5)
                assert cut.removed_polygon.intersection(cut.remainder).area == pytest.approx(0.0, abs=1e-12)

    assert found > 0


def test_candidate_carries_both_pieces(wedge):
    edges = ring_edges(wedge)
    analyzer = EdgePairAnalyzer(edges[0], edges[2])

    for cut in analyzer.get_cuts(wedge, 2.0, segments_between=1, segments_outside=1):
        assert cut.remainder is not None
        assert cut.remainder.area == pytest.approx(wedge.area - 2.0, rel=1e-6)
        assert cut.removed_polygon.union(cut.remainder).symmetric_difference(wedge).area < 1e-9


def test_non_finite_pivot_raises():
    with pytest.raises(NumericalFailureError):
        EdgePairAnalyzer(Edge((0.0, 0.0), (1.0, 0.0)), Edge((0.0, 1.0), (math.nan, 2.0)))


def test_non_finite_sweep_fraction_raises(unit_square):
    edges = ring_edges(unit_square)
    analyzer = EdgePairAnalyzer(edges[0], edges[2])

    with pytest.raises(NumericalFailureError):
        analyzer._sweep_fraction((0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0), math.inf)
