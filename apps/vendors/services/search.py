#!/usr/bin/env python3
"""Vendor discovery search: predicate -> store -> ranking -> response"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from apps.vendors.models import SENSITIVE_FIELDS
from apps.vendors.schemas import SearchQuery
from apps.vendors.services.filter_compiler import FilterCompiler
from apps.vendors.services.ranking import RankingService
from apps.vendors.store import VendorStore, VendorStoreUnavailable

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    results: List[Dict[str, Any]] = field(default_factory=list)
    degraded: bool = False

    @property
    def count(self) -> int:
        return len(self.results)


def strip_sensitive(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k not in SENSITIVE_FIELDS}


class VendorSearchService:
    """Single entry point for vendor discovery"""

    def __init__(
        self,
        store: VendorStore,
        compiler: Optional[FilterCompiler] = None,
        ranking: Optional[RankingService] = None,
    ):
        self.store = store
        self.compiler = compiler or FilterCompiler()
        self.ranking = ranking or RankingService()

    def search(self, query: SearchQuery) -> SearchOutcome:
        predicate = self.compiler.compile(query)
        logger.debug("Vendor search predicate: %s", predicate.describe())

        try:
            candidates = self.store.find(predicate)
        except VendorStoreUnavailable as exc:
            # Outage is an empty success, not an error
            logger.warning("Vendor store unavailable, returning degraded result: %s", exc)
            return SearchOutcome(degraded=True)

        origin = query.origin
        ranked = self.ranking.rank(candidates, origin=origin, radius_km=query.radius_km)
        results = [strip_sensitive(r) for r in ranked]
        results = self.ranking.exclude_demo(results)
        results = self._paginate(results, query)

        logger.info(
            "Vendor search done",
            extra={
                "candidates": len(candidates),
                "returned": len(results),
                "geo_mode": origin is not None,
                "category": query.category_filter,
            },
        )
        return SearchOutcome(results=results)

    @staticmethod
    def _paginate(results: List[Dict[str, Any]], query: SearchQuery) -> List[Dict[str, Any]]:
        if query.offset:
            results = results[query.offset:]
        if query.limit is not None:
            results = results[:query.limit]
        return results


def create_search_service(db: Session) -> VendorSearchService:
    return VendorSearchService(VendorStore(db))
