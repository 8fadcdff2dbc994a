from conftest import auth_headers, log_payload


def shared_log(client, user, **overrides):
    response = client.post("/logs", json=log_payload(**overrides), headers=auth_headers(user))
    assert response.status_code == 201
    return response.json()["id"]


def test_like_and_unlike(client, alice, bob):
    log_id = shared_log(client, alice)

    liked = client.post(f"/logs/{log_id}/like", headers=auth_headers(bob))
    assert liked.status_code == 200
    assert liked.json() == {"log_id": log_id, "like_count": 1, "has_liked": True}

    summary = client.get(f"/logs/{log_id}/likes", headers=auth_headers(alice)).json()
    assert summary["like_count"] == 1
    assert summary["has_liked"] is False

    unliked = client.delete(f"/logs/{log_id}/like", headers=auth_headers(bob))
    assert unliked.json()["like_count"] == 0


def test_like_twice_counts_once(client, alice, bob):
    log_id = shared_log(client, alice)
    client.post(f"/logs/{log_id}/like", headers=auth_headers(bob))
    second = client.post(f"/logs/{log_id}/like", headers=auth_headers(bob))
    assert second.json()["like_count"] == 1


def test_unlike_without_like(client, alice, bob):
    log_id = shared_log(client, alice)
    assert client.delete(f"/logs/{log_id}/like", headers=auth_headers(bob)).status_code == 404


def test_cannot_like_someone_elses_private_log(client, alice, bob):
    log_id = shared_log(client, alice, is_shared=False)
    assert client.post(f"/logs/{log_id}/like", headers=auth_headers(bob)).status_code == 404


def test_anonymous_like_summary(client, alice):
    log_id = shared_log(client, alice)
    response = client.get(f"/logs/{log_id}/likes")
    assert response.status_code == 200
    assert response.json()["has_liked"] is False


def test_comment_flow(client, alice, bob):
    log_id = shared_log(client, alice)

    created = client.post(
        f"/logs/{log_id}/comments", json={"content": "  Loved this one  "}, headers=auth_headers(bob)
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["content"] == "Loved this one"
    assert comment["username"] == "bob"

    listed = client.get(f"/logs/{log_id}/comments").json()
    assert listed["total_count"] == 1
    assert listed["comments"][0]["username"] == "bob"


def test_blank_comment_is_rejected(client, alice, bob):
    log_id = shared_log(client, alice)
    response = client.post(f"/logs/{log_id}/comments", json={"content": "   "}, headers=auth_headers(bob))
    assert response.status_code == 422


def test_only_author_deletes_comment(client, alice, bob):
    log_id = shared_log(client, alice)
    comment_id = client.post(
        f"/logs/{log_id}/comments", json={"content": "Nice"}, headers=auth_headers(bob)
    ).json()["id"]

    assert client.delete(f"/comments/{comment_id}", headers=auth_headers(alice)).status_code == 404
    assert client.delete(f"/comments/{comment_id}", headers=auth_headers(bob)).status_code == 200
    assert client.get(f"/logs/{log_id}/comments").json()["total_count"] == 0


def test_comments_on_private_log_are_hidden(client, alice, bob):
    log_id = shared_log(client, alice, is_shared=False)
    assert client.get(f"/logs/{log_id}/comments", headers=auth_headers(bob)).status_code == 404
    assert client.get(f"/logs/{log_id}/comments", headers=auth_headers(alice)).status_code == 200


def test_deleting_log_removes_likes_and_comments(client, db_session, alice, bob):
    from app.models import Comment, Reaction

    log_id = shared_log(client, alice)
    client.post(f"/logs/{log_id}/like", headers=auth_headers(bob))
    client.post(f"/logs/{log_id}/comments", json={"content": "Nice"}, headers=auth_headers(bob))

    client.delete(f"/logs/{log_id}", headers=auth_headers(alice))
    assert db_session.query(Reaction).count() == 0
    assert db_session.query(Comment).count() == 0
