"""
Tests for building selection from candidate footprints
"""

import pytest

from roofquote.building_detection import building_rings, distance_km, select_building


def footprint(feature_id, min_lng, min_lat, size=0.0001):
    ring = [
        [min_lng, min_lat],
        [min_lng + size, min_lat],
        [min_lng + size, min_lat + size],
        [min_lng, min_lat + size],
        [min_lng, min_lat],
    ]
    return {
        "type": "Feature",
        "id": feature_id,
        "properties": {},
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


HOUSE = footprint("house", -77.0365, 38.8976)
GARAGE = footprint("garage", -77.0368, 38.8976, size=0.00005)
ROAD = {
    "type": "Feature",
    "id": "road",
    "properties": {},
    "geometry": {"type": "LineString", "coordinates": [[-77.0366, 38.8975], [-77.0360, 38.8975]]},
}


def test_selects_building_containing_point():
    features = [GARAGE, ROAD, HOUSE]
    assert select_building(features, (-77.03645, 38.89765)) is HOUSE


def test_accepts_feature_collection():
    collection = {"type": "FeatureCollection", "features": [GARAGE, HOUSE]}
    assert select_building(collection, (-77.03678, 38.89762))["id"] == "garage"


def test_falls_back_to_nearest_building_within_range():
    # ~20 m east of the house, outside both footprints
    point = (-77.0362, 38.89765)
    assert select_building([GARAGE, HOUSE], point)["id"] == "house"


def test_returns_none_when_nothing_near():
    far_point = (-77.0300, 38.8976)
    assert select_building([GARAGE, HOUSE], far_point) is None
    assert select_building([], (-77.0365, 38.8976)) is None
    assert select_building([ROAD], (-77.0365, 38.8975)) is None


def test_max_distance_is_configurable():
    point = (-77.0362, 38.89765)
    assert select_building([HOUSE], point, max_distance_km=0.01) is None


def test_distance_km():
    # One thousandth of a degree of latitude is about 111 m
    assert distance_km((-77.0, 38.0), (-77.0, 38.001)) == pytest.approx(0.111, rel=0.01)


def test_building_rings_skips_non_polygons():
    rings = building_rings([HOUSE, ROAD, GARAGE])
    assert len(rings) == 2
    assert rings[0][0] == (-77.0365, 38.8976)
    assert rings[0][0] == rings[0][-1]
