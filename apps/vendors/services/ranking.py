#!/usr/bin/env python3
"""Ranking for vendor search: priority first, then distance or recency"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from apps.vendors.services.geo import GeoCoordinate, haversine_km, round_distance

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    # Naive timestamps are stored in UTC
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _priority(record: Dict[str, Any]) -> int:
    value = record.get("priority")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def _recency_key(record: Dict[str, Any]) -> Tuple[int, float]:
    """Sort key for createdAt descending; missing dates last."""
    created = _parse_timestamp(record.get("createdAt"))
    if created is None:
        return (1, 0.0)
    return (0, -created.timestamp())


def is_promoted(record: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    """Sponsored and inside the promotion window (open-ended when promotedUntil is unset)."""
    if not record.get("isSponsored"):
        return False
    until = _parse_timestamp(record.get("promotedUntil"))
    if until is None:
        return True
    return until > (now or datetime.now(timezone.utc))


def is_demo(record: Dict[str, Any]) -> bool:
    return "demo" in str(record.get("businessName") or "").lower()


class RankingService:
    """Geo mode (origin given) or non-geo mode ordering of search candidates"""

    def rank(
        self,
        candidates: List[Dict[str, Any]],
        origin: Optional[GeoCoordinate] = None,
        radius_km: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        if origin is not None:
            return self.rank_by_distance(candidates, origin, radius_km)
        return self.rank_by_priority(candidates)

    def rank_by_distance(
        self,
        candidates: List[Dict[str, Any]],
        origin: GeoCoordinate,
        radius_km: Optional[float],
    ) -> List[Dict[str, Any]]:
        """
        Annotate with distance, drop known-distance vendors beyond the radius,
        and sort by priority, then known-before-unknown, then distance.

        Vendors without coordinates are kept and get ``distance = None``.
        """
        scored: List[Tuple[Dict[str, Any], Optional[float]]] = []
        dropped = 0
        for record in candidates:
            coord = GeoCoordinate.from_mapping(record.get("coordinates"))
            distance = haversine_km(origin, coord) if coord is not None else None
            if distance is not None and math.isnan(distance):
                distance = None
            if distance is not None and radius_km is not None and distance > radius_km:
                dropped += 1
                continue
            scored.append((record, distance))

        scored.sort(key=lambda item: (
            -_priority(item[0]),
            item[1] is None,
            item[1] if item[1] is not None else 0.0,
            _recency_key(item[0]),
        ))
        logger.debug("Geo ranking kept %d, dropped %d beyond %.1f km", len(scored), dropped, radius_km or 0.0)

        ranked = []
        for record, distance in scored:
            result = dict(record)
            result["distance"] = round_distance(distance) if distance is not None else None
            result["isPromoted"] = is_promoted(record)
            ranked.append(result)
        return ranked

    def rank_by_priority(self, candidates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Priority descending, ties newest first."""
        ordered = sorted(candidates, key=lambda r: (-_priority(r), _recency_key(r)))
        ranked = []
        for record in ordered:
            result = dict(record)
            result["isPromoted"] = is_promoted(record)
            ranked.append(result)
        return ranked

    @staticmethod
    def exclude_demo(results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [r for r in results if not is_demo(r)]
