from roofquote.models.roof import (
    Coordinate,
    PriceCalculationData,
    Quote,
    QuoteStatus,
    Ring,
    RoofArea,
    RoofPolygon,
    SlopeType,
    normalize_slope,
)

__all__ = [
    "Coordinate",
    "PriceCalculationData",
    "Quote",
    "QuoteStatus",
    "Ring",
    "RoofArea",
    "RoofPolygon",
    "SlopeType",
    "normalize_slope",
]
