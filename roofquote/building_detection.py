"""
Building Selection
Picks the building outline the customer clicked on from candidate footprints
"""

import logging
from typing import Dict, List, Optional, Sequence, Union

from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import Point, shape

from roofquote.models.roof import Coordinate, Ring

logger = logging.getLogger(__name__)

MAX_DISTANCE_KM = 0.15

geod = Geod(ellps="WGS84")

FeatureInput = Union[Dict, Sequence[Dict]]


def _polygon_features(features: FeatureInput) -> List[Dict]:
    if isinstance(features, dict):
        features = features.get("features", [])
    return [
        feature for feature in features
        if (feature.get("geometry") or {}).get("type") == "Polygon"
    ]


def _vertex_mean(ring: Sequence[Sequence[float]]) -> Coordinate:
    return (
        sum(point[0] for point in ring) / len(ring),
        sum(point[1] for point in ring) / len(ring)
    )


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Ellipsoidal distance between two (lng, lat) points in kilometers"""
    _, _, meters = geod.inv(a[0], a[1], b[0], b[1])
    return meters / 1000


def select_building(features: FeatureInput, point: Coordinate,
                    max_distance_km: float = MAX_DISTANCE_KM) -> Optional[Dict]:
    """
    Find the building at a clicked location

    Prefers a footprint that contains the point. Otherwise returns the
    footprint whose center is nearest, if it lies within max_distance_km.
    """
    candidates = _polygon_features(features)
    if not candidates:
        return None

    target = Point(point[0], point[1])

    for feature in candidates:
        try:
            if shape(feature["geometry"]).covers(target):
                return feature
        except (GEOSException, ValueError, TypeError, KeyError) as e:
            logger.warning("Skipping malformed building %s: %s", feature.get("id"), e)

    nearest = None
    min_distance = float("inf")

    for feature in candidates:
        outer = feature["geometry"].get("coordinates") or [[]]
        if not outer or not outer[0]:
            continue
        dist = distance_km(point, _vertex_mean(outer[0]))
        if dist < min_distance and dist <= max_distance_km:
            min_distance = dist
            nearest = feature

    if nearest is None:
        logger.info("No building within %.3f km of %s", max_distance_km, point)

    return nearest


def building_rings(features: FeatureInput) -> List[Ring]:
    """Outer rings of every Polygon footprint, ready for build_roof_polygons"""
    rings = []
    for feature in _polygon_features(features):
        coordinates = feature["geometry"].get("coordinates") or []
        if coordinates:
            rings.append([(float(lng), float(lat)) for lng, lat, *_ in coordinates[0]])
    return rings
