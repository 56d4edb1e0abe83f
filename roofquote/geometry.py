"""
Roof Outline Geometry
Measures drawn or detected roof outlines: area, centroid and display label
"""

import logging
import math
from typing import Iterable, List, Sequence, Tuple

from roofquote.models.roof import Coordinate, Ring, RoofArea, RoofPolygon

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000.0
METERS_PER_DEGREE_LAT = EARTH_RADIUS_M * math.pi / 180

ROOF_LABELS = ["Main Roof", "Second Roof", "Third Roof"]


def _as_points(ring: Iterable[Sequence[float]]) -> Ring:
    return [(float(point[0]), float(point[1])) for point in ring]


def _open_vertices(ring: Sequence[Sequence[float]]) -> Ring:
    """Vertices of the ring without the closing duplicate"""
    points = _as_points(ring)
    if len(points) > 1 and points[0] == points[-1]:
        return points[:-1]
    return points


def close_ring(ring: Sequence[Sequence[float]]) -> Ring:
    """
    Return a closed copy of the ring (first point repeated at the end)
    The input is left untouched
    """
    points = _as_points(ring)
    if points and points[-1] != points[0]:
        points.append(points[0])
    return points


def signed_area(ring: Sequence[Sequence[float]]) -> float:
    """
    Shoelace signed area in square degrees
    Positive for counter-clockwise rings, negative for clockwise ones
    """
    points = _open_vertices(ring)
    n = len(points)
    if n < 3:
        return 0.0

    # Measured relative to the first vertex to avoid cancellation
    origin_lng, origin_lat = points[0]
    total = 0.0
    for i in range(n):
        lng1, lat1 = points[i]
        lng2, lat2 = points[(i + 1) % n]
        total += ((lng1 - origin_lng) * (lat2 - origin_lat)
                  - (lng2 - origin_lng) * (lat1 - origin_lat))
    return total / 2


def compute_area(ring: Sequence[Sequence[float]]) -> RoofArea:
    """
    Calculate roof area for a lon/lat ring

    Treats the degrees as planar coordinates and scales them with a local
    meters-per-degree approximation at the ring's mean latitude. Only
    valid for roof-sized outlines, not for large regions.
    """
    points = _open_vertices(ring)
    if len(points) < 3:
        return RoofArea.zero()

    area_deg = abs(signed_area(points))

    avg_lat = sum(lat for _, lat in points) / len(points)
    meters_per_degree_lng = METERS_PER_DEGREE_LAT * math.cos(math.radians(avg_lat))

    return RoofArea.from_square_meters(area_deg * METERS_PER_DEGREE_LAT * meters_per_degree_lng)


def compute_centroid(ring: Sequence[Sequence[float]]) -> Coordinate:
    """
    Calculate the area-weighted centroid of a ring
    Falls back to the vertex average when the ring has no area
    """
    closed = close_ring(ring)
    if not closed:
        return (0.0, 0.0)

    origin_lng, origin_lat = closed[0]
    local = [(lng - origin_lng, lat - origin_lat) for lng, lat in closed]

    total_lng = 0.0
    total_lat = 0.0
    cross_sum = 0.0

    for (lng1, lat1), (lng2, lat2) in zip(local, local[1:]):
        cross = lng1 * lat2 - lng2 * lat1
        cross_sum += cross
        total_lng += (lng1 + lng2) * cross
        total_lat += (lat1 + lat2) * cross

    if cross_sum == 0:
        # Collinear, duplicate or too few points
        points = _open_vertices(closed)
        return (
            sum(lng for lng, _ in points) / len(points),
            sum(lat for _, lat in points) / len(points)
        )

    # 6 * signed area == 3 * cross_sum
    return (
        origin_lng + total_lng / (3 * cross_sum),
        origin_lat + total_lat / (3 * cross_sum)
    )


def generate_label(index: int) -> str:
    """
    Display label for the roof section at the given position
    Everything past the third section gets a plain "th" suffix
    """
    if 0 <= index < len(ROOF_LABELS):
        return ROOF_LABELS[index]
    return f"{index + 1}th Roof"


def build_roof_polygons(rings: Iterable[Sequence[Sequence[float]]]) -> List[RoofPolygon]:
    """
    Turn outline rings into labelled, measured roof sections

    A ring that cannot be measured becomes an empty zero-area section so
    that the rest of the batch is still returned.
    """
    polygons = []

    for index, ring in enumerate(rings):
        try:
            coordinates = close_ring(ring)
            area = compute_area(coordinates)
            center_point = compute_centroid(coordinates)
        except (TypeError, ValueError, IndexError) as e:
            logger.warning("Could not measure ring %d: %s", index, e)
            coordinates = []
            area = RoofArea.zero()
            center_point = (0.0, 0.0)

        polygons.append(RoofPolygon(
            id=f"roof-{index}",
            coordinates=coordinates,
            area=area,
            label=generate_label(index),
            center_point=center_point
        ))

    return polygons


def total_area(polygons: Iterable[RoofPolygon], included_only: bool = True) -> RoofArea:
    """Sum section areas (in square feet) into one RoofArea"""
    square_feet = sum(
        polygon.area.square_feet
        for polygon in polygons
        if polygon.included or not included_only
    )
    return RoofArea.from_square_feet(square_feet)


def bounding_box(ring: Sequence[Sequence[float]]) -> Tuple[float, float, float, float]:
    """Return (min_lng, min_lat, max_lng, max_lat) for a non-empty ring"""
    points = _as_points(ring)
    if not points:
        raise ValueError("Cannot compute bounding box of an empty ring")

    lngs = [lng for lng, _ in points]
    lats = [lat for _, lat in points]
    return (min(lngs), min(lats), max(lngs), max(lats))
