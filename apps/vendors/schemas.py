"""Request-scoped search query for vendor discovery"""

import math
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from apps.core.config import settings
from apps.vendors.services.geo import GeoCoordinate

# Parameters with a dedicated field; everything else is treated as a facet
CATEGORY_PARAMS = ("category", "vendorType", "type")
RESERVED_PARAMS = {
    *CATEGORY_PARAMS, "city", "lat", "lon", "radius", "minPrice", "maxPrice",
    "capacity", "amenities", "limit", "offset",
}


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def split_csv(value: Any) -> List[str]:
    """'AC, Parking,' -> ['AC', 'Parking']"""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        parts = [p for item in value for p in str(item).split(",")]
    else:
        parts = str(value).split(",")
    return [p.strip() for p in parts if p.strip()]


class SearchQuery(BaseModel):
    """Parsed search request. Unparseable numbers mean "no constraint"."""

    category: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    radius_km: float = Field(default_factory=lambda: settings.search_default_radius_km)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    capacity: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    facets: Dict[str, List[str]] = Field(default_factory=dict)
    limit: Optional[int] = None
    offset: int = 0

    @field_validator("lat", "lon", "min_price", "max_price", mode="before")
    @classmethod
    def _lenient_float(cls, value: Any) -> Optional[float]:
        return _to_float(value)

    @field_validator("radius_km", mode="before")
    @classmethod
    def _radius_or_default(cls, value: Any) -> float:
        radius = _to_float(value)
        if radius is None or radius <= 0:
            return settings.search_default_radius_km
        return radius

    @field_validator("category", "city", "capacity", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("limit", mode="before")
    @classmethod
    def _positive_limit(cls, value: Any) -> Optional[int]:
        number = _to_int(value)
        return number if number is not None and number > 0 else None

    @field_validator("offset", mode="before")
    @classmethod
    def _non_negative_offset(cls, value: Any) -> int:
        number = _to_int(value)
        return number if number is not None and number > 0 else 0

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenity_list(cls, value: Any) -> List[str]:
        return split_csv(value)

    @property
    def origin(self) -> Optional[GeoCoordinate]:
        """Origin for geo mode; None when either half is missing or out of range."""
        if self.lat is None or self.lon is None:
            return None
        if not GeoCoordinate.in_range(self.lat, self.lon):
            return None
        return GeoCoordinate(self.lat, self.lon)

    @property
    def category_filter(self) -> Optional[str]:
        if not self.category or self.category.lower() == "all":
            return None
        return self.category

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SearchQuery":
        """Build from raw query-string parameters."""
        category = next((params[name] for name in CATEGORY_PARAMS if params.get(name)), None)
        facets = {
            name: split_csv(value)
            for name, value in params.items()
            if name not in RESERVED_PARAMS and split_csv(value)
        }
        return cls(
            category=category,
            city=params.get("city"),
            lat=params.get("lat"),
            lon=params.get("lon"),
            radius_km=params.get("radius"),
            min_price=params.get("minPrice"),
            max_price=params.get("maxPrice"),
            capacity=params.get("capacity"),
            amenities=params.get("amenities"),
            facets=facets,
            limit=params.get("limit"),
            offset=params.get("offset"),
        )


class SearchResponse(BaseModel):
    """Response schema for vendor search"""
    success: bool = True
    count: int
    data: List[Dict[str, Any]]


class LocationUpdate(BaseModel):
    """Profile location update"""
    mapsLink: Optional[str] = Field(None, max_length=2048, description="Third-party map link")
    details: Optional[Dict[str, Any]] = Field(None, description="Category attributes to merge")


class LocationResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
