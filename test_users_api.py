from conftest import auth_headers, log_payload


def test_my_profile(client, alice, bob):
    client.post(f"/follows/{alice.id}", headers=auth_headers(bob))
    client.post("/logs", json=log_payload(), headers=auth_headers(alice))

    body = client.get("/users/me", headers=auth_headers(alice)).json()
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@learninglog.app"
    assert body["stats"] == {"followers": 1, "following": 0, "logs": 1}
    assert body["streak"] == 1


def test_update_username(client, alice):
    response = client.patch("/users/me", json={"username": "alice_reads"}, headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["username"] == "alice_reads"


def test_username_taken(client, alice, bob):
    response = client.patch("/users/me", json={"username": "BOB"}, headers=auth_headers(alice))
    assert response.status_code == 400


def test_reserved_username(client, alice):
    response = client.patch("/users/me", json={"username": "search"}, headers=auth_headers(alice))
    assert response.status_code == 422


def test_check_username(client, alice, bob):
    taken = client.get("/users/check-username?username=bob", headers=auth_headers(alice)).json()
    assert taken["available"] is False
    own = client.get("/users/check-username?username=alice", headers=auth_headers(alice)).json()
    assert own["available"] is True


def test_search_users(client, alice, bob, carol):
    client.post(f"/follows/{bob.id}", headers=auth_headers(alice))

    body = client.get("/users/search?q=O", headers=auth_headers(alice)).json()
    results = {u["username"]: u for u in body["users"]}
    assert set(results) == {"bob", "carol"}
    assert results["bob"]["is_following"] is True
    assert results["carol"]["is_following"] is False


def test_search_excludes_caller(client, alice):
    body = client.get("/users/search?q=ali", headers=auth_headers(alice)).json()
    assert body["users"] == []


def test_blank_search(client, alice):
    assert client.get("/users/search?q=%20", headers=auth_headers(alice)).status_code == 400


def test_public_profile(client, alice, bob):
    client.post("/logs", json=log_payload(title="Shared"), headers=auth_headers(bob))
    client.post("/logs", json=log_payload(title="Private", is_shared=False), headers=auth_headers(bob))
    client.post(f"/follows/{bob.id}", headers=auth_headers(alice))

    body = client.get("/users/Bob", headers=auth_headers(alice)).json()
    assert body["user"]["username"] == "bob"
    assert "email" not in body["user"]
    assert body["is_following"] is True
    assert body["stats"]["logs"] == 2
    assert [log["title"] for log in body["logs"]] == ["Shared"]
    # Two logs created moments apart chain into a streak of two
    assert body["streak"] == 2


def test_public_profile_anonymous(client, bob):
    response = client.get("/users/bob")
    assert response.status_code == 200
    assert response.json()["is_following"] is False


def test_unknown_profile(client):
    assert client.get("/users/nobody").status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
