from parallax import db
from tests.factories import create_expedition, create_item, create_player, create_rift, give_item, login, team


def test_healthz_is_public(client):
    rv = client.get("/healthz")
    assert rv.status_code == 200
    assert rv.get_json() == {"status": "ok"}


def test_api_requires_login(client):
    rv = client.get("/api/teams")
    assert rv.status_code == 401
    assert rv.get_json()["error"] == "unauthorized"


def test_list_and_get_teams(auth_client, player):
    rv = auth_client.get("/api/teams")
    assert rv.status_code == 200
    data = rv.get_json()
    assert len(data) == 5
    t1_id = data[0]["id"]
    rv = auth_client.get(f"/api/teams/{t1_id}")
    assert rv.status_code == 200
    assert rv.get_json()["team_number"] == 1


def test_foreign_team_is_forbidden(auth_client):
    other = create_player("mallory")
    rv = auth_client.get(f"/api/teams/{team(other, 1).id}")
    assert rv.status_code == 403
    body = rv.get_json()
    assert body["error"] == "not_owner"
    assert "message" in body and "details" in body


def test_missing_team_is_not_found(auth_client):
    rv = auth_client.get("/api/teams/98765")
    assert rv.status_code == 404
    assert rv.get_json()["error"] == "not_found"


def test_equip_unequip_consume_unlock_flow(auth_client, player):
    t1 = team(player, 1)
    sword = give_item(player, create_item("Sword", slot="weapon", power=4))
    tonic = give_item(player, create_item("Tonic", speed=2.0))

    rv = auth_client.post("/api/teams/equip", json={"team_id": t1.id, "slot": "weapon", "inventory_id": sword.id})
    assert rv.status_code == 200
    assert rv.get_json()["total_stats"]["power"] == 4

    rv = auth_client.post("/api/teams/equip", json={"team_id": t1.id, "slot": "armor", "inventory_id": sword.id})
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "slot_mismatch"

    rv = auth_client.post("/api/teams/unequip", json={"team_id": t1.id, "slot": "weapon"})
    assert rv.status_code == 200
    assert rv.get_json()["equipped"]["weapon"]["inventory_id"] is None

    rv = auth_client.post("/api/teams/consume", json={"team_id": t1.id, "inventory_id": tonic.id})
    assert rv.status_code == 200
    assert rv.get_json()["base_stats"]["speed"] == 2.0

    rv = auth_client.post(f"/api/teams/{team(player, 2).id}/unlock")
    assert rv.status_code == 200
    assert rv.get_json()["is_unlocked"] is True


def test_malformed_bodies_are_bad_request(auth_client, player):
    t1 = team(player, 1)
    cases = [
        ("/api/teams/equip", {"team_id": t1.id, "slot": "weapon"}),
        ("/api/teams/equip", {"team_id": "abc", "slot": "weapon", "inventory_id": 1}),
        ("/api/teams/unequip", {"team_id": t1.id}),
        ("/api/teams/consume", {"inventory_id": 1}),
        ("/api/expeditions/start", {"team_id": t1.id}),
        ("/api/expeditions/start", {"team_id": True, "rift_id": 1}),
        ("/api/expeditions/start", {"team_id": 1.9, "rift_id": 1}),
        ("/api/teams/consume", {"team_id": t1.id, "inventory_id": 2.5}),
    ]
    for url, body in cases:
        rv = auth_client.post(url, json=body)
        assert rv.status_code == 400, (url, body)
        assert rv.get_json()["error"] == "bad_request"
    rv = auth_client.post("/api/expeditions/start", data="not json", content_type="text/plain")
    assert rv.status_code == 400


def test_start_and_list_expeditions(auth_client, player):
    rift = create_rift(duration_minutes=45)
    rv = auth_client.post("/api/expeditions/start", json={"team_id": team(player, 1).id, "rift_id": rift.id})
    assert rv.status_code == 201
    started = rv.get_json()
    assert started["duration_minutes"] == 45
    assert started["start_time"].endswith("Z")

    rv = auth_client.get("/api/expeditions/active")
    assert [e["id"] for e in rv.get_json()] == [started["id"]]

    rv = auth_client.post("/api/expeditions/start", json={"team_id": team(player, 2).id, "rift_id": rift.id})
    assert rv.status_code == 409
    assert rv.get_json()["error"] == "team_locked"


def test_claim_endpoint_and_history(auth_client, player):
    rift = create_rift(drops=[("common", 100.0, 1, 1)])
    create_item("Coin", rarity="common")
    running = create_expedition(player, team(player, 1), rift, duration_minutes=60, started_minutes_ago=5)
    done = create_expedition(player, team(player, 1), rift, duration_minutes=10, started_minutes_ago=30)

    rv = auth_client.post(f"/api/expeditions/{running.id}/claim")
    assert rv.status_code == 409
    assert rv.get_json()["error"] == "not_yet_complete"

    rv = auth_client.post(f"/api/expeditions/{done.id}/claim")
    assert rv.status_code == 200
    body = rv.get_json()
    assert body["expedition_id"] == done.id
    assert [i["name"] for i in body["loot"]] == ["Coin"]

    rv = auth_client.post(f"/api/expeditions/{done.id}/claim")
    assert rv.status_code == 409
    assert rv.get_json()["error"] == "already_claimed"

    for query in ("", "?limit=abc", "?limit=-3", "?limit=5"):
        rv = auth_client.get(f"/api/expeditions/history{query}")
        assert rv.status_code == 200
        assert [h["id"] for h in rv.get_json()] == [done.id]


def test_rifts_and_inventory_endpoints(auth_client, player):
    easy = create_rift(name="Easy", difficulty="easy", drops=[("common", 50.0, 1, 2)])
    hard = create_rift(name="Hard", difficulty="hard")
    sword = give_item(player, create_item("Sword", slot="weapon"))
    give_item(player, create_item("Tonic"), quantity=3)
    team(player, 1).equipped_weapon_id = sword.id
    db.session.commit()

    rv = auth_client.get("/api/rifts")
    rifts = {r["name"]: r for r in rv.get_json()}
    assert rifts["Easy"]["is_unlocked"] is True
    assert rifts["Hard"]["is_unlocked"] is False
    assert rifts["Easy"]["drop_table"][0]["max_quantity"] == 2

    rv = auth_client.get(f"/api/rifts/{hard.id}")
    assert rv.get_json()["difficulty"] == "hard"
    assert auth_client.get("/api/rifts/99999").status_code == 404
    assert easy.id != hard.id

    rv = auth_client.get("/api/inventory")
    inv = rv.get_json()
    assert inv["equipment"][0]["is_equipped"] is True
    assert inv["equipment"][0]["equipped_by_team_number"] == 1
    assert inv["consumables"][0]["quantity"] == 3
    assert inv["consumables"][0]["is_equipped"] is False


def test_login_helper_switches_identity(client):
    bob = create_player("bob")
    login(client, bob)
    assert len(client.get("/api/teams").get_json()) == 5
