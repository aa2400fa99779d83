import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from apps.vendors.services.geo import GeoCoordinate
from apps.vendors.services.profile import ProfileLocationService, sanitize_details
from apps.vendors.store import VendorStoreUnavailable


def test_sanitize_details_uses_category_allow_list():
    details = {"cuisines": ["Andhra"], "capacity": 500, "photos": [], "hackerField": 1}
    assert sanitize_details("catering", details) == {"cuisines": ["Andhra"], "photos": []}
    assert sanitize_details("Mandap", details) == {"capacity": 500, "photos": []}
    assert sanitize_details(None, details) == {"photos": []}


def test_new_link_sets_coordinates(db_session, add_vendor):
    vendor = add_vendor()
    service = ProfileLocationService(db_session)
    service.update_location(vendor, "https://maps.example/@16.3067,80.4365")
    assert (vendor.latitude, vendor.longitude) == (16.3067, 80.4365)
    assert vendor.to_record()["coordinates"] == {"lat": 16.3067, "lon": 80.4365}


def test_unchanged_link_does_not_recompute(db_session, add_vendor):
    vendor = add_vendor(maps_link="https://maps.example/@16.3,80.4", latitude=16.3, longitude=80.4)
    calls = []

    def extractor(link):
        calls.append(link)
        return GeoCoordinate(1.0, 1.0)

    service = ProfileLocationService(db_session, extractor=extractor)
    assert service.apply_maps_link(vendor, "https://maps.example/@16.3,80.4") is False
    assert calls == []
    assert (vendor.latitude, vendor.longitude) == (16.3, 80.4)


def test_unparseable_link_clears_coordinates(db_session, add_vendor):
    vendor = add_vendor(maps_link="https://maps.example/@16.3,80.4", latitude=16.3, longitude=80.4)
    ProfileLocationService(db_session).update_location(vendor, "https://maps.app.goo.gl/short")
    assert vendor.latitude is None and vendor.longitude is None
    assert "coordinates" not in vendor.to_record()


def test_location_route(client, add_vendor):
    vendor = add_vendor(vendor_type="decor")
    resp = client.patch(f"/api/vendors/{vendor.id}/location", json={
        "mapsLink": "https://www.google.com/maps/place/X/data=!3d16.2991!4d80.4575",
        "details": {"decorThemes": ["Floral"], "capacity": 100},
    })
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["coordinates"] == {"lat": 16.2991, "lon": 80.4575}
    assert data["details"] == {"decorThemes": ["Floral"]}

    found = client.get("/api/vendors/search", params={"lat": 16.30, "lon": 80.46, "radius": 5}).json()
    assert found["count"] == 1
    assert found["data"][0]["distance"] is not None


def test_location_route_unknown_vendor(client):
    resp = client.patch("/api/vendors/999/location", json={"mapsLink": "https://maps.example/@1,2"})
    assert resp.status_code == 404


def _failing_commit(self):
    raise OperationalError("COMMIT", {}, Exception("server closed the connection"))


def test_commit_failure_raises_store_unavailable(db_session, add_vendor, monkeypatch):
    vendor = add_vendor()
    monkeypatch.setattr(Session, "commit", _failing_commit)
    with pytest.raises(VendorStoreUnavailable):
        ProfileLocationService(db_session).update_location(vendor, "https://maps.example/@16.3,80.4")


def test_location_route_commit_failure_is_503(client, add_vendor, monkeypatch):
    vendor = add_vendor()
    monkeypatch.setattr(Session, "commit", _failing_commit)
    resp = client.patch(f"/api/vendors/{vendor.id}/location", json={"mapsLink": "https://maps.example/@16.3,80.4"})
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Vendor store unavailable"}
