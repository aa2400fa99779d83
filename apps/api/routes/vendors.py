import logging
import time
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from apps.core.db import get_db
from apps.vendors.schemas import LocationResponse, LocationUpdate, SearchQuery, SearchResponse
from apps.vendors.services.profile import ProfileLocationService
from apps.vendors.services.search import create_search_service
from apps.vendors.store import VendorStore, VendorStoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/vendors/search", response_model=SearchResponse)
def search_vendors(
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """Geo-ranked vendor discovery.

    Category facets are open-ended query parameters, so they are read from the
    raw query string rather than declared one by one.
    """
    start_time = time.time()
    params = {key: ",".join(request.query_params.getlist(key)) for key in request.query_params.keys()}

    try:
        query = SearchQuery.from_params(params)
        outcome = create_search_service(db).search(query)
    except Exception:
        logger.exception("Vendor search failed")
        return JSONResponse(status_code=500, content={"success": False, "error": "Search failed"})

    processing_time = round((time.time() - start_time) * 1000, 2)  # ms
    response.headers["X-Search-Debug"] = f"took={processing_time}ms, results={outcome.count}"
    if outcome.degraded:
        response.headers["X-Search-Degraded"] = "1"

    return SearchResponse(success=True, count=outcome.count, data=outcome.results)


@router.patch("/vendors/{vendor_id}/location", response_model=LocationResponse)
def update_vendor_location(
    vendor_id: int,
    payload: LocationUpdate,
    db: Session = Depends(get_db)
):
    """Update a vendor's map link and re-derive its coordinates"""
    try:
        vendor = VendorStore(db).get(vendor_id)
        if not vendor:
            raise HTTPException(status_code=404, detail="Vendor not found")
        vendor = ProfileLocationService(db).update_location(vendor, payload.mapsLink, payload.details)
    except VendorStoreUnavailable:
        logger.exception("Vendor store unavailable for location update")
        raise HTTPException(status_code=503, detail="Vendor store unavailable")

    record = vendor.to_record()
    return LocationResponse(data={
        "id": record["id"],
        "mapsLink": record["mapsLink"],
        "coordinates": record.get("coordinates"),
        "details": record["details"],
    })
