"""
Tests for roof outline geometry
"""

import math

import pytest
from pyproj import Geod
from shapely.geometry import Polygon

from roofquote.geometry import (
    bounding_box, build_roof_polygons, close_ring, compute_area, compute_centroid,
    generate_label, signed_area, total_area
)
from roofquote.models.roof import RoofArea, SlopeType

WHITE_HOUSE_ROOF = [
    [-77.0365, 38.8977],
    [-77.0364, 38.8977],
    [-77.0364, 38.8976],
    [-77.0365, 38.8976],
]

L_SHAPED_ROOF = [
    [-122.41940, 37.77490],
    [-122.41910, 37.77490],
    [-122.41910, 37.77470],
    [-122.41925, 37.77470],
    [-122.41925, 37.77455],
    [-122.41940, 37.77455],
]


def test_square_feet_derived_from_square_meters():
    for ring in (WHITE_HOUSE_ROOF, L_SHAPED_ROOF):
        area = compute_area(ring)
        assert area.square_meters > 0
        assert area.square_feet == pytest.approx(area.square_meters * 10.7639)
        assert area.formatted == f"{area.square_feet:.2f}"


def test_area_matches_geodetic_area_within_one_percent():
    geod = Geod(ellps="WGS84")
    for ring in (WHITE_HOUSE_ROOF, L_SHAPED_ROOF):
        geodetic_m2, _ = geod.geometry_area_perimeter(Polygon(ring))
        assert compute_area(ring).square_meters == pytest.approx(abs(geodetic_m2), rel=0.01)


def test_white_house_square_is_roof_sized():
    area = compute_area(WHITE_HOUSE_ROOF)
    # ~11.1 m north-south by ~8.7 m east-west
    assert 90 < area.square_meters < 100
    assert 950 < area.square_feet < 1080


def test_closing_ring_does_not_change_area():
    closed = WHITE_HOUSE_ROOF + [WHITE_HOUSE_ROOF[0]]
    assert compute_area(closed) == compute_area(WHITE_HOUSE_ROOF)


def test_area_invariant_under_rotation_and_reversal():
    expected = compute_area(L_SHAPED_ROOF).square_meters
    for shift in range(1, len(L_SHAPED_ROOF)):
        rotated = L_SHAPED_ROOF[shift:] + L_SHAPED_ROOF[:shift]
        assert compute_area(rotated).square_meters == pytest.approx(expected, rel=1e-6)

    reversed_ring = list(reversed(L_SHAPED_ROOF))
    assert compute_area(reversed_ring).square_meters == pytest.approx(expected, rel=1e-6)


def test_reversal_flips_signed_area():
    forward = signed_area(WHITE_HOUSE_ROOF)
    backward = signed_area(list(reversed(WHITE_HOUSE_ROOF)))
    assert forward != 0
    assert backward == pytest.approx(-forward)


def test_short_ring_has_zero_area():
    assert compute_area([]) == RoofArea.zero()
    assert compute_area([[-77.0, 38.0], [-77.1, 38.1]]).square_meters == 0
    # Two points plus closing duplicate is still not a polygon
    assert compute_area([[-77.0, 38.0], [-77.1, 38.1], [-77.0, 38.0]]).square_feet == 0


def test_unit_square_area_at_equator():
    ring = [[0, 0], [0.001, 0], [0.001, 0.001], [0, 0.001]]
    side = 6371000 * math.pi / 180 * 0.001
    assert compute_area(ring).square_meters == pytest.approx(side * side, rel=1e-9)


def test_centroid_of_square():
    lng, lat = compute_centroid(WHITE_HOUSE_ROOF)
    assert lng == pytest.approx(-77.03645, abs=1e-9)
    assert lat == pytest.approx(38.89765, abs=1e-9)


def test_centroid_is_area_weighted():
    # Triangle centroid is the vertex average, trapezoid is not
    triangle = [[0, 0], [3, 0], [0, 3]]
    assert compute_centroid(triangle) == pytest.approx((1.0, 1.0))

    trapezoid = [[0, 0], [4, 0], [2, 2], [0, 2]]
    lng, lat = compute_centroid(trapezoid)
    assert lng == pytest.approx(14 / 9)
    assert lat == pytest.approx(8 / 9)


def test_centroid_falls_back_to_vertex_mean():
    assert compute_centroid([[0, 0], [1, 1], [2, 2]]) == (1.0, 1.0)
    assert compute_centroid([[5, 5], [7, 9]]) == (6.0, 7.0)
    assert compute_centroid([[3, 4]]) == (3.0, 4.0)
    assert compute_centroid([]) == (0.0, 0.0)


def test_generate_label():
    assert generate_label(0) == "Main Roof"
    assert generate_label(1) == "Second Roof"
    assert generate_label(2) == "Third Roof"
    assert generate_label(3) == "4th Roof"
    assert generate_label(20) == "21th Roof"


def test_close_ring_copies_input():
    ring = [[0, 0], [1, 0], [1, 1]]
    closed = close_ring(ring)
    assert closed == [(0, 0), (1, 0), (1, 1), (0, 0)]
    assert len(ring) == 3
    assert close_ring(closed) == closed
    assert close_ring([]) == []


def test_build_roof_polygons():
    rings = [WHITE_HOUSE_ROOF, L_SHAPED_ROOF]
    polygons = build_roof_polygons(rings)

    assert [p.id for p in polygons] == ["roof-0", "roof-1"]
    assert [p.label for p in polygons] == ["Main Roof", "Second Roof"]
    assert polygons[0].coordinates[0] == polygons[0].coordinates[-1]
    assert len(polygons[0].coordinates) == 5
    assert polygons[0].area == compute_area(WHITE_HOUSE_ROOF)
    assert polygons[1].center_point == pytest.approx(compute_centroid(L_SHAPED_ROOF))
    assert all(p.slope is None and p.included for p in polygons)
    # Input untouched
    assert len(rings[0]) == 4


def test_build_roof_polygons_keeps_going_after_bad_ring():
    polygons = build_roof_polygons([
        [[0, 0], [1, 1]],
        [["a", "b"], [None, 1], [2, 2]],
        WHITE_HOUSE_ROOF,
    ])

    assert len(polygons) == 3
    assert polygons[0].area.square_meters == 0
    assert polygons[0].center_point == (0.5, 0.5)
    assert polygons[1].area == RoofArea.zero()
    assert polygons[1].coordinates == []
    assert polygons[2].label == "Third Roof"
    assert polygons[2].area.square_meters > 0


def test_total_area_skips_excluded_sections():
    polygons = build_roof_polygons([WHITE_HOUSE_ROOF, L_SHAPED_ROOF])
    combined = polygons[0].area.square_feet + polygons[1].area.square_feet

    assert total_area(polygons).square_feet == pytest.approx(combined)

    polygons[1].included = False
    polygons[1].slope = SlopeType.STEEP
    assert total_area(polygons).square_feet == pytest.approx(polygons[0].area.square_feet)
    assert total_area(polygons, included_only=False).square_feet == pytest.approx(combined)
    assert total_area(polygons).square_meters == pytest.approx(polygons[0].area.square_meters)


def test_bounding_box():
    assert bounding_box(L_SHAPED_ROOF) == (-122.41940, 37.77455, -122.41910, 37.77490)
    with pytest.raises(ValueError):
        bounding_box([])
