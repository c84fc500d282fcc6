from skillsync.models.device_token import DeviceToken

from conftest import ALICE, BOB, auth


def _register(client, user, token, platform="android"):
    return client.post("/devices", headers=auth(user), json={"token": token, "platform": platform})


def test_register_is_an_upsert(client, db):
    first = _register(client, ALICE, "fcm-token-1")
    second = _register(client, ALICE, "fcm-token-1", "ios")

    assert first.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["platform"] == "ios"
    assert db.query(DeviceToken).count() == 1


def test_same_token_for_different_users(client, db):
    _register(client, ALICE, "shared")
    _register(client, BOB, "shared")
    assert db.query(DeviceToken).count() == 2


def test_register_validation(client):
    assert _register(client, ALICE, "tok", "blackberry").status_code == 400
    assert _register(client, ALICE, "  ").status_code == 400


def test_list_and_unregister(client):
    _register(client, ALICE, "phone")
    _register(client, ALICE, "tablet", "ios")
    _register(client, BOB, "bob-phone")

    mine = client.get("/devices", headers=auth(ALICE)).json()
    assert sorted(d["token"] for d in mine) == ["phone", "tablet"]

    one = client.delete("/devices", params={"token": "phone"}, headers=auth(ALICE))
    assert one.json() == {"removed": 1}

    rest = client.delete("/devices", headers=auth(ALICE))
    assert rest.json() == {"removed": 1}

    assert client.get("/devices", headers=auth(ALICE)).json() == []
    assert len(client.get("/devices", headers=auth(BOB)).json()) == 1
