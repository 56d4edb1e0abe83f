"""
Core Quote Engine Algorithm
Prices measured roof sections using slope difficulty multipliers
"""

import logging
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple, Union

from roofquote.geometry import build_roof_polygons, total_area
from roofquote.models.roof import (
    PriceCalculationData, Quote, QuoteStatus, RoofPolygon, SlopeType, normalize_slope
)

logger = logging.getLogger(__name__)

SlopeLike = Union[SlopeType, str, None]

SLOPE_MULTIPLIERS: Dict[SlopeType, float] = {
    SlopeType.FLAT: 0.4,
    SlopeType.SHALLOW: 0.6,
    SlopeType.MEDIUM: 0.8,
    SlopeType.STEEP: 1.0,
}

# Unknown or missing slope: assume average difficulty
DEFAULT_SLOPE_MULTIPLIER = 0.7

# Pitch allowance used for material takeoff only, not for pricing
SLOPE_AREA_FACTORS: Dict[SlopeType, float] = {
    SlopeType.FLAT: 1.0,
    SlopeType.SHALLOW: 1.2,
    SlopeType.MEDIUM: 1.4,
    SlopeType.STEEP: 1.6,
}

SQUARE_FEET_PER_SQUARE = 100


def slope_multiplier(slope: SlopeLike) -> float:
    """
    Get slope difficulty multiplier, case-insensitive
    Falls back to DEFAULT_SLOPE_MULTIPLIER rather than failing
    """
    normalized = normalize_slope(slope)
    if normalized is None:
        return DEFAULT_SLOPE_MULTIPLIER
    return SLOPE_MULTIPLIERS[normalized]


def calculate_quote_price(roof_area: float, slope: SlopeLike, material_cost_per_unit: float) -> float:
    """
    Price one roof area: area * slope multiplier * material cost per unit
    Not rounded, rounding happens where the price is stored or shown
    """
    return roof_area * slope_multiplier(slope) * material_cost_per_unit


def price_from_data(data: PriceCalculationData) -> float:
    return calculate_quote_price(data.roof_area, data.slope, data.material_cost_per_unit)


def calculate_total_price_from_pairs(pairs: Iterable[Tuple[float, SlopeLike]],
                                     material_cost_per_unit: float) -> float:
    """Sum of per-section prices for (area, slope) pairs"""
    return sum(
        calculate_quote_price(area, slope, material_cost_per_unit)
        for area, slope in pairs
    )


def calculate_total_price(polygons: Iterable[RoofPolygon], material_cost_per_unit: float) -> float:
    """
    Price a multi-section roof
    Each included section is priced with its own slope, in square feet
    """
    return calculate_total_price_from_pairs(
        ((polygon.area.square_feet, polygon.slope) for polygon in polygons if polygon.included),
        material_cost_per_unit
    )


def estimate_squares(polygons: Iterable[RoofPolygon]) -> int:
    """
    Estimate roofing squares (100 sqft units) needed for the included sections
    Steeper sections need more material than their footprint
    """
    adjusted_area = 0.0

    for polygon in polygons:
        if not polygon.included:
            continue
        slope = normalize_slope(polygon.slope) or SlopeType.MEDIUM
        adjusted_area += polygon.area.square_feet * SLOPE_AREA_FACTORS[slope]

    return math.floor(adjusted_area / SQUARE_FEET_PER_SQUARE)


def generate_quote_number(year: int, sequence_in_year: int) -> str:
    """
    Format a quote number such as QTE-2025-007
    The caller supplies the sequence (quotes already created this year + 1)
    """
    return f"QTE-{year}-{sequence_in_year:03d}"


def build_quote(polygons: List[RoofPolygon], material_cost_per_unit: float, quote_number: str,
                status: QuoteStatus = QuoteStatus.DRAFT,
                customer_name: Optional[str] = None,
                address: Optional[str] = None,
                created_at: Optional[datetime] = None) -> Quote:
    """
    Main quote assembly function
    Sums areas and prices across the included sections
    """
    total = calculate_total_price(polygons, material_cost_per_unit)

    return Quote(
        quote_number=quote_number,
        roof_polygons=polygons,
        material_cost_per_unit=material_cost_per_unit,
        total_area=total_area(polygons),
        total_price=round(total, 2),
        status=status,
        customer_name=customer_name,
        address=address,
        created_at=created_at or datetime.now()
    )


def polygons_from_payload(payload: Dict) -> List[RoofPolygon]:
    """
    Read roof sections from a request payload
    Accepts already measured "polygons" or raw "rings" plus optional "slopes"
    """
    if "polygons" in payload:
        return [RoofPolygon.from_dict(item) for item in payload["polygons"]]

    polygons = build_roof_polygons(payload.get("rings", []))
    for polygon, slope in zip(polygons, payload.get("slopes", [])):
        polygon.slope = normalize_slope(slope)
    return polygons


def process_quote_requests(payloads: List[Dict]) -> List[Dict]:
    """
    Price a batch of quote payloads
    Payloads that fail are logged and skipped
    """
    results = []

    for index, payload in enumerate(payloads):
        try:
            polygons = polygons_from_payload(payload)
            material_cost = float(payload["material_cost_per_unit"])
            results.append({
                "total_area": total_area(polygons).to_dict(),
                "total_price": round(calculate_total_price(polygons, material_cost), 2),
                "squares": estimate_squares(polygons),
                "polygon_count": len(polygons)
            })
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Error processing quote request %d: %s", index, e)
            continue

    return results
