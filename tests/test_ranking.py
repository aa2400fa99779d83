from datetime import datetime, timedelta, timezone

from apps.vendors.services.geo import GeoCoordinate
from apps.vendors.services.ranking import RankingService, is_demo, is_promoted

from conftest import ORIGIN, lat_offset, record

ranking = RankingService()
origin = GeoCoordinate(*ORIGIN)


def at_km(km, **fields):
    return record(coordinates={"lat": lat_offset(km), "lon": ORIGIN[1]}, **fields)


def ids(results):
    return [r["id"] for r in results]


def test_radius_keeps_near_and_unknown_drops_far():
    candidates = [
        at_km(5, id=1),
        at_km(15, id=2),
        record(id=3),
    ]
    results = ranking.rank(candidates, origin=origin, radius_km=10)
    assert ids(results) == [1, 3]
    assert results[0]["distance"] == 5.0
    assert results[1]["distance"] is None


def test_priority_beats_distance():
    candidates = [at_km(1, id=1, priority=0), at_km(8, id=2, priority=5)]
    assert ids(ranking.rank(candidates, origin=origin, radius_km=50)) == [2, 1]


def test_within_priority_distance_is_non_decreasing_and_unknown_last():
    candidates = [
        record(id=1, priority=1),
        at_km(9, id=2, priority=1),
        at_km(2, id=3, priority=1),
        at_km(4, id=4, priority=1),
    ]
    results = ranking.rank(candidates, origin=origin, radius_km=50)
    assert ids(results) == [3, 4, 2, 1]
    known = [r["distance"] for r in results if r["distance"] is not None]
    assert known == sorted(known)


def test_unknown_distance_still_ranks_by_priority_first():
    candidates = [at_km(1, id=1, priority=0), record(id=2, priority=3)]
    assert ids(ranking.rank(candidates, origin=origin, radius_km=50)) == [2, 1]


def test_radius_boundary_uses_unrounded_distance():
    # 10.04 km would round to 10.0 but is still beyond a 10 km radius
    candidates = [at_km(10.04, id=1), at_km(9.96, id=2)]
    results = ranking.rank(candidates, origin=origin, radius_km=10)
    assert ids(results) == [2]
    assert results[0]["distance"] == 10.0


def test_invalid_stored_coordinates_count_as_unknown():
    candidates = [record(id=1, coordinates={"lat": "x", "lon": None})]
    results = ranking.rank(candidates, origin=origin, radius_km=1)
    assert ids(results) == [1]
    assert results[0]["distance"] is None


def test_non_geo_mode_priority_then_newest_first():
    candidates = [
        record(id=1, priority=0, createdAt="2024-03-01T00:00:00"),
        record(id=2, priority=2, createdAt="2024-01-01T00:00:00"),
        record(id=3, priority=0, createdAt="2024-05-01T00:00:00"),
        record(id=4, priority=0, createdAt=None),
    ]
    results = ranking.rank(candidates)
    assert ids(results) == [2, 3, 1, 4]
    assert "distance" not in results[0]


def test_ranking_does_not_mutate_candidates():
    candidate = at_km(1, id=1)
    ranking.rank([candidate], origin=origin, radius_km=5)
    assert "distance" not in candidate


def test_demo_exclusion_is_case_insensitive():
    results = [
        record(id=1, businessName="Royal Palace"),
        record(id=2, businessName="DEMO Caterers"),
        record(id=3, businessName="Studio Demonstration"),
    ]
    assert ids(RankingService.exclude_demo(results)) == [1]
    assert is_demo({"businessName": "my demo"})
    assert not is_demo({"businessName": None})


def test_promotion_window():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert not is_promoted(record(isSponsored=False), now)
    assert is_promoted(record(isSponsored=True, promotedUntil=None), now)
    assert is_promoted(record(isSponsored=True, promotedUntil=(now + timedelta(days=1)).isoformat()), now)
    assert not is_promoted(record(isSponsored=True, promotedUntil="2024-05-01T00:00:00"), now)
