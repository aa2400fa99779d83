#!/usr/bin/env python3
"""Compile a SearchQuery into a structured predicate over vendor records"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from apps.core.config import settings
from apps.core.config_cache import load_yaml_cached
from apps.vendors.schemas import SearchQuery
from apps.vendors.services.attributes import VendorAttributes
from config.vendor_fields import AMENITY_PATHS

logger = logging.getLogger(__name__)


class Op(str, Enum):
    EQ = "eq"                                  # any stored value == value
    EQ_ICASE = "eq_icase"                      # case-insensitive string equality
    PRESENT = "present"                        # not null, not blank
    TRUTHY = "truthy"                          # tri-state flag coerces to True
    GTE = "gte"
    LTE = "lte"
    CONTAINS_ICASE = "contains_icase"          # value is a substring of the stored text
    ANY_OF = "any_of"                          # any stored value in value
    ANY_OF_CONTAINS_ICASE = "any_of_contains"  # any query term is a substring of any stored value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Condition:
    path: str
    op: Op
    value: Any = None

    def matches(self, attrs: VendorAttributes) -> bool:
        op = self.op
        if op is Op.TRUTHY:
            return attrs.flag(self.path) is True
        if op is Op.PRESENT:
            stored = attrs.get(self.path)
            return stored is not None and (not isinstance(stored, str) or bool(stored.strip()))
        if op in (Op.GTE, Op.LTE):
            stored = attrs.get(self.path)
            if not _is_number(stored):
                return False
            return stored >= self.value if op is Op.GTE else stored <= self.value

        stored_values = attrs.values(self.path)
        if op is Op.EQ:
            return any(v == self.value for v in stored_values)
        if op is Op.EQ_ICASE:
            wanted = str(self.value).lower()
            return any(isinstance(v, str) and v.lower() == wanted for v in stored_values)
        if op is Op.CONTAINS_ICASE:
            wanted = str(self.value).lower()
            return any(wanted in str(v).lower() for v in stored_values)
        if op is Op.ANY_OF:
            return any(v == w for v in stored_values for w in self.value)
        if op is Op.ANY_OF_CONTAINS_ICASE:
            terms = [str(w).lower() for w in self.value]
            return any(t in str(v).lower() for v in stored_values for t in terms)
        raise ValueError(f"Unsupported operator: {op}")

    def describe(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"path": self.path, "op": self.op.value, "value": value}


@dataclass(frozen=True)
class AnyOf:
    """OR group of conditions"""
    conditions: Tuple[Condition, ...]

    def matches(self, attrs: VendorAttributes) -> bool:
        return any(c.matches(attrs) for c in self.conditions)

    def describe(self) -> Dict[str, Any]:
        return {"any_of": [c.describe() for c in self.conditions]}


Clause = Union[Condition, AnyOf]


@dataclass
class VendorPredicate:
    """AND of clauses"""
    clauses: List[Clause] = field(default_factory=list)

    def add(self, clause: Clause) -> None:
        self.clauses.append(clause)

    def matches(self, record: Mapping[str, Any]) -> bool:
        attrs = VendorAttributes(record)
        return all(c.matches(attrs) for c in self.clauses)

    def describe(self) -> List[Dict[str, Any]]:
        return [c.describe() for c in self.clauses]


@dataclass(frozen=True)
class FacetSpec:
    path: str
    op: Op


# Query parameter -> attribute path. Values inside one facet are OR-ed,
# separate facets are AND-ed. Parameters missing here are ignored.
FACETS: Dict[str, FacetSpec] = {
    "venueType":         FacetSpec("details.venueType", Op.ANY_OF),
    "foodPolicy":        FacetSpec("details.cateringPolicy", Op.ANY_OF),
    "decorPolicy":       FacetSpec("details.decorPolicy", Op.ANY_OF),
    "cuisines":          FacetSpec("details.cuisines", Op.ANY_OF_CONTAINS_ICASE),
    "dietaryOptions":    FacetSpec("details.dietaryOptions", Op.ANY_OF),
    "decorThemes":       FacetSpec("details.decorThemes", Op.ANY_OF),
    "photographyStyles": FacetSpec("details.photographyStyles", Op.ANY_OF),
    "equipment":         FacetSpec("details.equipment", Op.ANY_OF),
}

LOCATION_PATHS = ("city", "village", "mandal", "addressLine1")


def get_amenity_paths() -> Dict[str, str]:
    """Built-in amenity table merged with config/amenities.yml."""
    paths = dict(AMENITY_PATHS)
    extra = load_yaml_cached(settings.amenities_config_path).get("amenities") or {}
    if isinstance(extra, Mapping):
        for name, path in extra.items():
            if isinstance(path, str) and path.startswith("details."):
                paths[str(name)] = path
            else:
                logger.warning("Ignoring amenity %r with invalid path %r", name, path)
    return paths


class FilterCompiler:
    """Translate a SearchQuery into a VendorPredicate"""

    def __init__(self, amenity_paths: Optional[Dict[str, str]] = None):
        self.amenity_paths = amenity_paths if amenity_paths is not None else get_amenity_paths()

    def compile(self, query: SearchQuery) -> VendorPredicate:
        predicate = VendorPredicate()
        self._base(predicate, query)
        self._price(predicate, query)
        self._capacity(predicate, query)
        self._amenities(predicate, query)
        self._facets(predicate, query)
        self._location(predicate, query)
        return predicate

    def _base(self, predicate: VendorPredicate, query: SearchQuery) -> None:
        predicate.add(Condition("isVerified", Op.EQ, True))
        predicate.add(Condition("businessName", Op.PRESENT))
        if settings.search_require_onboarding:
            predicate.add(Condition("onboardingCompleted", Op.EQ, True))
        if query.category_filter:
            predicate.add(Condition("vendorType", Op.EQ_ICASE, query.category_filter))

    def _price(self, predicate: VendorPredicate, query: SearchQuery) -> None:
        # A min of 0 or below is no lower bound
        min_price = query.min_price if query.min_price is not None and query.min_price > 0 else 0
        if min_price == 0 and query.max_price is None:
            return
        predicate.add(Condition("minPrice", Op.GTE, min_price))
        # A max at or above the ceiling means "X onwards": no upper bound
        if query.max_price is not None and query.max_price < settings.price_sentinel_ceiling:
            predicate.add(Condition("minPrice", Op.LTE, query.max_price))

    def _capacity(self, predicate: VendorPredicate, query: SearchQuery) -> None:
        # Textual containment, not a numeric >= check
        if query.capacity:
            predicate.add(Condition("details.capacity", Op.CONTAINS_ICASE, query.capacity))

    def _amenities(self, predicate: VendorPredicate, query: SearchQuery) -> None:
        for amenity in query.amenities:
            path = self.amenity_paths.get(amenity)
            if path is None:
                logger.debug("Ignoring unknown amenity %r", amenity)
                continue
            predicate.add(Condition(path, Op.TRUTHY))

    def _facets(self, predicate: VendorPredicate, query: SearchQuery) -> None:
        for name, values in query.facets.items():
            spec = FACETS.get(name)
            if spec is None or not values:
                continue
            predicate.add(Condition(spec.path, spec.op, tuple(values)))

    def _location(self, predicate: VendorPredicate, query: SearchQuery) -> None:
        if query.city:
            predicate.add(AnyOf(tuple(
                Condition(path, Op.CONTAINS_ICASE, query.city) for path in LOCATION_PATHS
            )))
