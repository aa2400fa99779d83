"""Great-circle distance between vendor and client coordinates"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoCoordinate:
    lat: float
    lon: float

    @staticmethod
    def in_range(lat: float, lon: float) -> bool:
        return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0

    @classmethod
    def from_mapping(cls, value: Any) -> Optional["GeoCoordinate"]:
        """Build from a stored {lat, lon} mapping; None unless both are finite and in range"""
        if not isinstance(value, Mapping):
            return None
        lat, lon = value.get("lat"), value.get("lon")
        if isinstance(lat, bool) or isinstance(lon, bool):
            return None
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            return None
        if not (math.isfinite(lat) and math.isfinite(lon)) or not cls.in_range(lat, lon):
            return None
        return cls(float(lat), float(lon))


def haversine_km(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Haversine distance in kilometers. NaN inputs propagate."""
    p1, p2 = math.radians(a.lat), math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlmb = math.radians(b.lon - a.lon)
    h = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dlmb / 2) ** 2
    root = math.sqrt(h)
    if root > 1.0:
        # float error near antipodes
        root = 1.0
    return 2 * EARTH_RADIUS_KM * math.asin(root)


def round_distance(km: float) -> float:
    """Presentation rounding only; compare on the raw value."""
    return round(km, 1)
