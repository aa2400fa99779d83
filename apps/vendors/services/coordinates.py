#!/usr/bin/env python3
"""Coordinate extraction from vendor map links"""

import logging
import re
from typing import Callable, List, Optional, Tuple
from urllib.parse import unquote

from apps.vendors.services.geo import GeoCoordinate

logger = logging.getLogger(__name__)

_NUM = r"([-+]?\d+(?:\.\d+)?)"

# Order matters: the first strategy whose match validates wins.
AT_SEGMENT = re.compile(r"@" + _NUM + r"," + _NUM)
QUERY_PARAM = re.compile(r"[?&](?:q|ll)=" + _NUM + r"\s*,\s*" + _NUM)
DATA_MARKERS = re.compile(r"!3d" + _NUM + r"!4d" + _NUM)
PLACE_SEGMENT = re.compile(r"/place/[^/]+/@" + _NUM + r"," + _NUM)

STRATEGIES: List[Tuple[str, re.Pattern]] = [
    ("at_segment", AT_SEGMENT),
    ("query_param", QUERY_PARAM),
    ("data_markers", DATA_MARKERS),
    ("place_segment", PLACE_SEGMENT),
]


def validate_pair(lat: float, lon: float) -> Optional[GeoCoordinate]:
    """
    Accept (lat, lon) when in range; otherwise try the transposed pair.

    The swap covers a known upstream bug that stores lon/lat in the wrong
    order. It is a heuristic: a broken link that happens to swap into range
    is accepted too.
    """
    if GeoCoordinate.in_range(lat, lon):
        return GeoCoordinate(lat, lon)
    if GeoCoordinate.in_range(lon, lat):
        return GeoCoordinate(lon, lat)
    return None


def extract_coordinates(link: Optional[str]) -> Optional[GeoCoordinate]:
    """Parse a map link into a coordinate. Never raises; returns None when nothing valid is found."""
    if not link or not isinstance(link, str):
        return None

    text = unquote(link.strip())
    for name, pattern in STRATEGIES:
        match = pattern.search(text)
        if not match:
            continue
        try:
            lat, lon = float(match.group(1)), float(match.group(2))
        except ValueError:
            continue
        coord = validate_pair(lat, lon)
        if coord is None:
            logger.debug("Map link strategy %s matched out-of-range pair %s,%s", name, lat, lon)
            continue
        if (coord.lat, coord.lon) != (lat, lon):
            logger.info("Swapped transposed coordinates from map link", extra={"link": link, "strategy": name})
        return coord

    return None


LinkExtractor = Callable[[Optional[str]], Optional[GeoCoordinate]]
