import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, JSON, Text
from sqlalchemy.sql import func

from apps.core.db import Base


class VendorCategory(Enum):
    """Fixed vendor categories"""
    MANDAP = "mandap"
    VENUE = "venue"
    CATERING = "catering"
    DECOR = "decor"
    PHOTOGRAPHY = "photography"
    ENTERTAINMENT = "entertainment"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["VendorCategory"]:
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Never leave the API
SENSITIVE_FIELDS = ("password", "fcmTokens")


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)

    # Contact and credentials
    full_name = Column(Text)
    email = Column(Text, unique=True)
    phone = Column(Text, nullable=True)
    password = Column(Text, nullable=True)
    fcm_tokens = Column(JSON, nullable=True)

    # Identity
    business_name = Column(Text, nullable=True)
    vendor_type = Column(Text, nullable=True, index=True)
    is_verified = Column(Boolean, default=False, nullable=False, index=True)
    onboarding_completed = Column(Boolean, default=False, nullable=False)

    # Location (free text, not normalized)
    address_line1 = Column(Text, nullable=True)
    address_line2 = Column(Text, nullable=True)
    village = Column(Text, nullable=True)
    mandal = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    pincode = Column(Text, nullable=True)
    maps_link = Column(Text, nullable=True)
    latitude = Column(Float, CheckConstraint("latitude IS NULL OR (latitude >= -90 AND latitude <= 90)"), nullable=True)
    longitude = Column(Float, CheckConstraint("longitude IS NULL OR (longitude >= -180 AND longitude <= 180)"), nullable=True)

    # Pricing (root level, indexed) and the category attribute bag
    min_price = Column(Float, nullable=True, index=True)
    max_price = Column(Float, nullable=True)
    details = Column(JSON, nullable=True, default=dict)

    # Ranking inputs
    priority = Column(Integer, default=0, nullable=False)
    is_sponsored = Column(Boolean, default=False, nullable=False)
    promoted_until = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def has_coordinates(self) -> bool:
        """True when both coordinates are stored and finite"""
        if self.latitude is None or self.longitude is None:
            return False
        return not (math.isnan(self.latitude) or math.isnan(self.longitude) or
                    math.isinf(self.latitude) or math.isinf(self.longitude))

    def to_record(self) -> Dict[str, Any]:
        """Wire-shaped record; `coordinates` is omitted when unknown."""
        record: Dict[str, Any] = {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "password": self.password,
            "fcmTokens": self.fcm_tokens,
            "businessName": self.business_name,
            "vendorType": self.vendor_type,
            "isVerified": bool(self.is_verified),
            "onboardingCompleted": bool(self.onboarding_completed),
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "village": self.village,
            "mandal": self.mandal,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "mapsLink": self.maps_link,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "details": dict(self.details or {}),
            "priority": self.priority or 0,
            "isSponsored": bool(self.is_sponsored),
            "promotedUntil": _iso(self.promoted_until),
            "createdAt": _iso(self.created_at),
        }
        if self.has_coordinates():
            record["coordinates"] = {"lat": self.latitude, "lon": self.longitude}
        return record


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None
