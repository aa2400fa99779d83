#!/usr/bin/env python3
"""Read-only vendor store over SQLAlchemy"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from apps.vendors.models import Vendor
from apps.vendors.services.filter_compiler import AnyOf, Clause, Condition, Op, VendorPredicate

logger = logging.getLogger(__name__)


class VendorStoreUnavailable(Exception):
    """The backing database could not be reached."""


# Record keys backed by a real column; details.* lives in the JSON bag
COLUMN_PATHS = {
    "isVerified": Vendor.is_verified,
    "onboardingCompleted": Vendor.onboarding_completed,
    "businessName": Vendor.business_name,
    "vendorType": Vendor.vendor_type,
    "minPrice": Vendor.min_price,
    "city": Vendor.city,
    "village": Vendor.village,
    "mandal": Vendor.mandal,
    "addressLine1": Vendor.address_line1,
}


def condition_to_sql(condition: Condition):
    """SQL expression for a root-column condition, or None if it has to run in memory."""
    column = COLUMN_PATHS.get(condition.path)
    if column is None:
        return None
    op, value = condition.op, condition.value
    if op is Op.EQ:
        return column == value
    if op is Op.EQ_ICASE:
        return func.lower(column) == str(value).lower()
    if op is Op.PRESENT:
        return and_(column.isnot(None), func.trim(column) != "")
    if op is Op.GTE:
        return column >= value
    if op is Op.LTE:
        return column <= value
    if op is Op.CONTAINS_ICASE:
        return func.lower(column).contains(str(value).lower(), autoescape=True)
    return None


def clause_to_sql(clause: Clause):
    if isinstance(clause, AnyOf):
        parts = [condition_to_sql(c) for c in clause.conditions]
        if any(p is None for p in parts):
            return None
        return or_(*parts)
    return condition_to_sql(clause)


def split_predicate(predicate: VendorPredicate) -> Tuple[List[Any], VendorPredicate]:
    """Split into (SQL expressions, in-memory remainder)."""
    sql_parts: List[Any] = []
    remainder = VendorPredicate()
    for clause in predicate.clauses:
        expression = clause_to_sql(clause)
        if expression is None:
            remainder.add(clause)
        else:
            sql_parts.append(expression)
    return sql_parts, remainder


class VendorStore:
    """Loads vendor records matching a predicate"""

    def __init__(self, db: Session):
        self.db = db

    def find(self, predicate: VendorPredicate) -> List[Dict[str, Any]]:
        sql_parts, remainder = split_predicate(predicate)
        stmt = select(Vendor)
        if sql_parts:
            stmt = stmt.where(and_(*sql_parts))

        try:
            vendors = self.db.execute(stmt).scalars().all()
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            raise VendorStoreUnavailable(str(exc)) from exc

        records = [v.to_record() for v in vendors]
        if remainder.clauses:
            records = [r for r in records if remainder.matches(r)]
        logger.debug(
            "Vendor store: %d rows from SQL, %d after in-memory clauses",
            len(vendors), len(records),
        )
        return records

    def get(self, vendor_id: int) -> Optional[Vendor]:
        try:
            return self.db.get(Vendor, vendor_id)
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            raise VendorStoreUnavailable(str(exc)) from exc
