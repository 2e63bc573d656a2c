from datetime import datetime, timedelta

from fitkeeper import db
from fitkeeper.models import Recipe

from conftest import auth_headers, expired_headers, make_user, seed_cards


def _recipe(user_id, title, created_at, **cards):
    recipe = Recipe(
        user_id=user_id,
        recipe_title=title,
        recipe_intro="intro",
        difficulty="beginner",
        duration_min=10,
        fitness_grade="C",
        fitness_score=40,
        created_at=created_at,
    )
    for phase in ("warm_up", "main", "cool_down"):
        recipe.set_card_ids(phase, cards.get(phase, []))
    return recipe


def _seed_recipes(app):
    seed_cards(app)
    alice = make_user(app, provider_id="alice")
    bob = make_user(app, provider_id="bob")
    now = datetime(2025, 5, 1, 9, 0)
    with app.app_context():
        db.session.add_all(
            [
                _recipe(alice, "Leg Day", now, warm_up=[1, 2], main=[3, 3, 4], cool_down=[5]),
                _recipe(bob, "Core Blast", now + timedelta(hours=1), main=[4]),
                _recipe(alice, "Leg Recovery", now + timedelta(hours=2), cool_down=[5, 7]),
            ]
        )
        db.session.commit()
        ids = {r.recipe_title: r.id for r in Recipe.query.all()}
    return alice, bob, ids


def test_list_is_newest_first_with_meta(app, client):
    _seed_recipes(app)
    body = client.get("/api/recipes?limit=2").get_json()

    assert [r["recipe_title"] for r in body["data"]] == ["Leg Recovery", "Core Blast"]
    assert body["count"] == 2
    assert body["totalCount"] == 3
    assert body["totalPages"] == 2
    assert body["hasNextPage"] is True


def test_list_title_filter_and_card_count(app, client):
    _seed_recipes(app)
    body = client.get("/api/recipes?recipe_title=Leg").get_json()

    counts = {r["recipe_title"]: r["card_count"] for r in body["data"]}
    # duplicate 3 in "main" is counted once
    assert counts == {"Leg Recovery": 2, "Leg Day": 5}


def test_for_me_requires_token(app, client):
    alice, _bob, _ids = _seed_recipes(app)

    anonymous = client.get("/api/recipes?for_me=Y")
    expired = client.get("/api/recipes?for_me=Y", headers=expired_headers(app, alice))
    mine = client.get("/api/recipes?for_me=Y", headers=auth_headers(app, alice)).get_json()

    assert anonymous.status_code == 401
    assert expired.status_code == 401
    assert mine["totalCount"] == 2
    assert {r["recipe_title"] for r in mine["data"]} == {"Leg Day", "Leg Recovery"}


def test_detail_has_raw_seconds_and_phase_totals(app, client):
    _alice, _bob, ids = _seed_recipes(app)
    body = client.get(f"/api/recipes/{ids['Leg Day']}").get_json()["data"]

    assert [c["id"] for c in body["main_card_list"]] == [3, 4]
    assert body["main_card_list"][0]["video_duration_seconds"] == 1650
    assert "video_duration" not in body["main_card_list"][0]
    assert body["warm_up_duration_sec"] == 105
    assert body["main_duration_sec"] == 1770
    assert body["cool_down_duration_sec"] == 90


def test_detail_empty_phases_and_unknown_id(app, client):
    _alice, _bob, ids = _seed_recipes(app)
    body = client.get(f"/api/recipes/{ids['Core Blast']}").get_json()["data"]

    assert body["warm_up_card_list"] == []
    assert body["cool_down_card_list"] == []
    assert body["warm_up_duration_sec"] == 0

    missing = client.get("/api/recipes/9999")
    assert missing.status_code == 404
    assert missing.get_json()["success"] is False


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Route not found"}


def test_health_and_index(client):
    assert client.get("/").get_json()["status"] == "running"
    health = client.get("/api/health").get_json()
    assert health["status"] == "ok"
    assert health["uptime"] >= 0


def test_detail_keeps_stored_card_order(app, client):
    seed_cards(app)
    owner = make_user(app)
    with app.app_context():
        recipe = _recipe(owner, "Reversed", datetime(2025, 5, 2), main=[4, 3], cool_down=[5, 1])
        db.session.add(recipe)
        db.session.commit()
        recipe_id = recipe.id

    body = client.get(f"/api/recipes/{recipe_id}").get_json()["data"]

    assert [c["id"] for c in body["main_card_list"]] == [4, 3]
    assert [c["id"] for c in body["cool_down_card_list"]] == [5, 1]
