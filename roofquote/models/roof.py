"""
Roof and Quote Data Models
Defines the measured roof sections and the quote records built from them
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

Coordinate = Tuple[float, float]  # (longitude, latitude)
Ring = List[Coordinate]

SQUARE_FEET_PER_SQUARE_METER = 10.7639


class SlopeType(Enum):
    FLAT = "flat"
    SHALLOW = "shallow"
    MEDIUM = "medium"
    STEEP = "steep"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class QuoteStatus(Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def normalize_slope(slope: Union[SlopeType, str, None]) -> Optional[SlopeType]:
    """
    Map a slope in any casing ("Flat", "flat", " STEEP ") onto SlopeType
    Returns None for anything unrecognised
    """
    if isinstance(slope, SlopeType):
        return slope
    if not isinstance(slope, str):
        return None
    try:
        return SlopeType(slope.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class RoofArea:
    """Measured area of one roof section, always derived from a single value"""
    square_meters: float
    square_feet: float
    formatted: str

    @classmethod
    def from_square_meters(cls, square_meters: float) -> 'RoofArea':
        square_feet = square_meters * SQUARE_FEET_PER_SQUARE_METER
        return cls(
            square_meters=square_meters,
            square_feet=square_feet,
            formatted=f"{square_feet:.2f}"
        )

    @classmethod
    def from_square_feet(cls, square_feet: float) -> 'RoofArea':
        return cls(
            square_meters=square_feet / SQUARE_FEET_PER_SQUARE_METER,
            square_feet=square_feet,
            formatted=f"{square_feet:.2f}"
        )

    @classmethod
    def zero(cls) -> 'RoofArea':
        return cls.from_square_meters(0.0)

    def to_dict(self) -> Dict:
        return {
            "square_meters": self.square_meters,
            "square_feet": self.square_feet,
            "formatted": self.formatted
        }


@dataclass
class RoofPolygon:
    """One detected or drawn roof section"""
    id: str
    coordinates: Ring
    area: RoofArea
    label: str
    center_point: Coordinate
    slope: Optional[SlopeType] = None  # set by the caller after detection
    included: bool = True

    def to_dict(self) -> Dict:
        """Convert section to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "coordinates": [list(point) for point in self.coordinates],
            "area": self.area.to_dict(),
            "label": self.label,
            "center_point": list(self.center_point),
            "slope": self.slope.value if self.slope else None,
            "included": self.included
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'RoofPolygon':
        """
        Create section from dictionary
        Area and center point are always measured from the coordinates;
        any client-supplied values are ignored
        """
        from roofquote.geometry import close_ring, compute_area, compute_centroid

        coordinates = close_ring(data["coordinates"])
        return cls(
            id=data["id"],
            coordinates=coordinates,
            area=compute_area(coordinates),
            label=data["label"],
            center_point=compute_centroid(coordinates),
            slope=normalize_slope(data.get("slope")),
            included=data.get("included", True)
        )


@dataclass
class PriceCalculationData:
    """Inputs for pricing a single roof area"""
    roof_area: float
    slope: Union[SlopeType, str, None]
    material_cost_per_unit: float


@dataclass
class Quote:
    """A priced, numbered quote for one or more roof sections"""
    quote_number: str
    roof_polygons: List[RoofPolygon]
    material_cost_per_unit: float
    total_area: RoofArea
    total_price: float
    status: QuoteStatus = QuoteStatus.DRAFT
    customer_name: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def year(self) -> int:
        return self.created_at.year

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return {
            "quote_number": self.quote_number,
            "status": self.status.value,
            "customer_name": self.customer_name,
            "address": self.address,
            "material_cost_per_unit": self.material_cost_per_unit,
            "total_area": self.total_area.to_dict(),
            "total_price": self.total_price,
            "roof_polygons": [polygon.to_dict() for polygon in self.roof_polygons],
            "created_at": self.created_at.isoformat()
        }
