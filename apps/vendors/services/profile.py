#!/usr/bin/env python3
"""Profile-side writer for vendor location and category attributes"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from apps.vendors.models import Vendor, VendorCategory
from apps.vendors.services.coordinates import LinkExtractor, extract_coordinates
from apps.vendors.store import VendorStoreUnavailable
from config.vendor_fields import CATEGORY_DETAIL_FIELDS, COMMON_DETAIL_FIELDS

logger = logging.getLogger(__name__)


def allowed_detail_fields(vendor_type: Optional[str]) -> set:
    category = VendorCategory.parse(vendor_type)
    specific = CATEGORY_DETAIL_FIELDS.get(category.value, set()) if category else set()
    return COMMON_DETAIL_FIELDS | specific


def sanitize_details(vendor_type: Optional[str], details: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys outside the common and per-category allow-lists."""
    allowed = allowed_detail_fields(vendor_type)
    kept = {k: v for k, v in details.items() if k in allowed}
    dropped = sorted(set(details) - set(kept))
    if dropped:
        logger.info("Dropped details keys not allowed for %s: %s", vendor_type or "unknown category", dropped)
    return kept


class ProfileLocationService:
    """Keeps a vendor's stored coordinates in sync with its map link"""

    def __init__(self, db: Session, extractor: LinkExtractor = extract_coordinates):
        self.db = db
        self.extractor = extractor

    def apply_maps_link(self, vendor: Vendor, maps_link: Optional[str]) -> bool:
        """
        Store a new map link. Coordinates are recomputed only when the link
        actually changed; an unparseable link clears them.

        Returns True when the link changed.
        """
        new_link = (maps_link or "").strip() or None
        if new_link == vendor.maps_link:
            return False

        vendor.maps_link = new_link
        coord = self.extractor(new_link)
        if coord is None:
            if new_link:
                logger.warning("Could not extract coordinates from map link", extra={"vendor_id": vendor.id})
            vendor.latitude = None
            vendor.longitude = None
        else:
            vendor.latitude = coord.lat
            vendor.longitude = coord.lon
        return True

    def merge_details(self, vendor: Vendor, details: Dict[str, Any]) -> None:
        merged = dict(vendor.details or {})
        merged.update(sanitize_details(vendor.vendor_type, details))
        vendor.details = merged

    def update_location(
        self,
        vendor: Vendor,
        maps_link: Optional[str],
        details: Optional[Dict[str, Any]] = None,
    ) -> Vendor:
        # None leaves the stored link alone; "" clears it
        changed = self.apply_maps_link(vendor, maps_link) if maps_link is not None else False
        if details:
            self.merge_details(vendor, details)
        if changed or details:
            vendor_id = vendor.id
            try:
                self.db.commit()
                self.db.refresh(vendor)
            except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
                self.db.rollback()
                logger.error("Vendor location update failed: %s", exc, extra={"vendor_id": vendor_id})
                raise VendorStoreUnavailable(str(exc)) from exc
        return vendor
