import pytest

from fitkeeper import db
from fitkeeper.models import ClubInfo, SportsFacility

# Seoul City Hall
CENTER = (37.5665, 126.9780)


@pytest.fixture
def directory(app):
    with app.app_context():
        db.session.add_all(
            [
                ClubInfo(club_name="Mapo Runners", sido_name="Seoul", sigungu_name="Mapo-gu", item_name="Running"),
                ClubInfo(club_name="Han River Swim", sido_name="Seoul", sigungu_name="Yongsan-gu", item_name="Swimming"),
                ClubInfo(club_name="Busan Trail", sido_name="Busan", sigungu_name="Haeundae-gu", item_name="Running"),
                ClubInfo(club_name="Suwon Badminton", sido_name="Gyeonggi", sigungu_name="Suwon-si", item_name="Badminton"),
            ]
        )
        db.session.add_all(
            [
                # ~0.5 km north
                SportsFacility(facility_name="City Gym", facility_type="Gym", sido_name="Seoul",
                               latitude=37.5710, longitude=126.9780, deleted="N"),
                # ~3.9 km
                SportsFacility(facility_name="Yongsan Pool", facility_type="Swimming pool", sido_name="Seoul",
                               latitude=37.5320, longitude=126.9900, deleted="N"),
                # ~325 km, Busan
                SportsFacility(facility_name="Haeundae Gym", facility_type="Gym", sido_name="Busan",
                               latitude=35.1631, longitude=129.1635, deleted="N"),
                SportsFacility(facility_name="Closed Gym", facility_type="Gym", sido_name="Seoul",
                               latitude=37.5670, longitude=126.9785, deleted="Y"),
                SportsFacility(facility_name="Unmapped Court", facility_type="Tennis", sido_name="Seoul"),
            ]
        )
        db.session.commit()


def test_clubs_keyword_and_category(client, directory):
    seoul = client.get("/api/clubs?keyword=Seoul").get_json()
    running = client.get("/api/clubs?category=Running").get_json()
    paged = client.get("/api/clubs?limit=3&page=2").get_json()

    assert seoul["totalCount"] == 2
    assert {c["clubName"] for c in running["data"]} == {"Mapo Runners", "Busan Trail"}
    assert paged["count"] == 1
    assert paged["totalPages"] == 2
    assert paged["hasNextPage"] is False


def test_club_stats(client, directory):
    stats = client.get("/api/clubs/stats").get_json()["data"]

    assert stats["totalCount"] == 4
    assert stats["byCategory"][0] == {"itemName": "Running", "count": 2}
    assert stats["byRegion"][0] == {"sidoName": "Seoul", "count": 2}
    assert len(stats["byRegion"]) == 3


def test_facilities_exclude_deleted_and_filter(client, directory):
    body = client.get("/api/sports-facilities").get_json()
    gyms = client.get("/api/sports-facilities?category=Gym").get_json()

    names = [f["facilityName"] for f in body["data"]]
    assert "Closed Gym" not in names
    assert body["totalCount"] == 4
    assert {f["facilityName"] for f in gyms["data"]} == {"City Gym", "Haeundae Gym"}
    assert "distance" not in body["data"][0]


def test_facilities_with_location_are_sorted_by_distance(client, directory):
    lat, lng = CENTER
    body = client.get(f"/api/sports-facilities?keyword=Gym&lat={lat}&lng={lng}").get_json()

    assert [f["facilityName"] for f in body["data"]] == ["City Gym", "Haeundae Gym"]
    assert body["data"][0]["distance"] == pytest.approx(0.5, abs=0.05)


def test_nearby_within_radius(client, directory):
    lat, lng = CENTER
    default_radius = client.get(f"/api/sports-facilities/nearby?lat={lat}&lng={lng}").get_json()
    small_radius = client.get(f"/api/sports-facilities/nearby?lat={lat}&lng={lng}&radius=1").get_json()
    by_type = client.get(
        f"/api/sports-facilities/nearby?lat={lat}&lng={lng}&facilityType=Swimming"
    ).get_json()

    assert [f["facilityName"] for f in default_radius["data"]] == ["City Gym", "Yongsan Pool"]
    assert default_radius["meta"] == {"centerLat": lat, "centerLng": lng, "radius": 5.0}
    assert default_radius["data"][0]["distance"] <= default_radius["data"][1]["distance"]
    assert [f["facilityName"] for f in small_radius["data"]] == ["City Gym"]
    assert [f["facilityName"] for f in by_type["data"]] == ["Yongsan Pool"]


def test_nearby_requires_coordinates(client):
    resp = client.get("/api/sports-facilities/nearby?lat=37.5")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
