"""
Utility functions for payload validation and display formatting
"""

import math
from numbers import Real
from typing import List

from roofquote.models.roof import QuoteStatus, normalize_slope

POLYGON_FIELDS = ('id', 'label', 'coordinates')


def is_number(value) -> bool:
    """True for finite real numbers (bools, NaN and infinities are rejected)"""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_rings(rings) -> List[str]:
    """
    Validate outline rings from a request and return list of errors
    Rings with fewer than 3 points are allowed (still being drawn)
    """
    errors = []

    if not isinstance(rings, list):
        return ["rings must be a list of coordinate lists"]

    for i, ring in enumerate(rings):
        if not isinstance(ring, list):
            errors.append(f"ring {i} must be a list of [lng, lat] pairs")
            continue
        for j, point in enumerate(ring):
            if not isinstance(point, (list, tuple)) or len(point) < 2:
                errors.append(f"ring {i} point {j} must be a [lng, lat] pair")
            elif not (is_number(point[0]) and is_number(point[1])):
                errors.append(f"ring {i} point {j} must contain numbers")

    return errors


def validate_polygons(polygons) -> List[str]:
    """
    Validate already measured roof sections and return list of errors
    """
    if not isinstance(polygons, list):
        return ["polygons must be a list of roof sections"]

    errors = []

    for i, polygon in enumerate(polygons):
        if not isinstance(polygon, dict):
            errors.append(f"polygon {i} must be an object")
            continue

        missing = [field for field in POLYGON_FIELDS if field not in polygon]
        for field in missing:
            errors.append(f"polygon {i} missing required field: {field}")

        if 'coordinates' in polygon:
            errors.extend(
                error.replace("ring 0", f"polygon {i} coordinates", 1)
                for error in validate_rings([polygon['coordinates']])
            )

        if not isinstance(polygon.get('included', True), bool):
            errors.append(f"polygon {i} included must be true or false")

    return errors


def validate_quote_payload(payload) -> List[str]:
    """
    Validate quote request data and return list of errors
    """
    if not isinstance(payload, dict):
        return ["Request body must be a JSON object"]

    errors = []

    if "polygons" in payload:
        errors.extend(validate_polygons(payload["polygons"]))
    elif "rings" in payload:
        errors.extend(validate_rings(payload["rings"]))
    else:
        errors.append("Missing required field: rings or polygons")

    if "material_cost_per_unit" not in payload:
        errors.append("Missing required field: material_cost_per_unit")
    elif not is_number(payload["material_cost_per_unit"]):
        errors.append("material_cost_per_unit must be a valid number")

    slopes = payload.get("slopes", [])
    if not isinstance(slopes, list):
        errors.append("slopes must be a list")

    status = payload.get("status")
    if status is not None and status not in {s.value for s in QuoteStatus}:
        errors.append(f"Unknown status: {status}")

    return errors


def format_currency(amount: float) -> str:
    """
    Format currency amount for display
    """
    return f"${amount:,.2f}"


def get_slope_display_name(slope) -> str:
    """
    Get display-friendly name for a slope value
    """
    normalized = normalize_slope(slope)
    return normalized.display_name if normalized else "Unspecified"
