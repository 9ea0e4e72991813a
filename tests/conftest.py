"""Shared test fixtures."""

import math

import pytest
from shapely.geometry import Polygon

# Isosceles trapezoid, area 4500
TRAPEZOID_COORDS = [(0, 0), (100, 0), (90, 50), (10, 50)]

UNIT_SQUARE_COORDS = [(0, 0), (1, 0), (1, 1), (0, 1)]

# Right triangle, area 8
TRIANGLE_COORDS = [(0, 0), (4, 0), (0, 4)]

# Concave "L", area 3
L_SHAPE_COORDS = [(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)]

# Irregular convex hexagon
HEXAGON_COORDS = [(0, 0), (6, -1), (10, 3), (9, 8), (3, 9), (-2, 4)]

# Quadrilateral whose two sides lie on the x and y axes (pivot at the origin)
WEDGE_COORDS = [(1, 0), (4, 0), (0, 3), (0, 1)]

# Concave "U", area 7
U_SHAPE_COORDS = [(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]

# Five pointed star, outer radius 1, inner radius 0.5
STAR_COORDS = [
    (round((1.0 if k % 2 == 0 else 0.5) * math.cos(math.radians(90 + 36 * k)), 12),
     round((1.0 if k % 2 == 0 else 0.5) * math.sin(math.radians(90 + 36 * k)), 12))
    for k in range(10)
]

# Irregular concave octagon (three reflex corners)
OCTAGON_COORDS = [(0, 0), (5, 1), (8, -1), (9, 4), (6, 3), (7, 8), (2, 6), (-1, 7)]

TRAPEZOID_WKT = "POLYGON ((0 0, 100 0, 90 50, 10 50, 0 0))"


@pytest.fixture
def trapezoid() -> Polygon:
    return Polygon(TRAPEZOID_COORDS)


@pytest.fixture
def unit_square() -> Polygon:
    return Polygon(UNIT_SQUARE_COORDS)


@pytest.fixture
def triangle() -> Polygon:
    return Polygon(TRIANGLE_COORDS)


@pytest.fixture
def l_shape() -> Polygon:
    return Polygon(L_SHAPE_COORDS)


@pytest.fixture
def hexagon() -> Polygon:
    return Polygon(HEXAGON_COORDS)


@pytest.fixture
def wedge() -> Polygon:
    return Polygon(WEDGE_COORDS)


@pytest.fixture
def star() -> Polygon:
    return Polygon(STAR_COORDS)
