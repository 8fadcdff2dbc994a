from datetime import datetime, timedelta, timezone

import pytest
import pytz
from sqlalchemy.exc import OperationalError

from app.crud.activity import fetch_activity_records
from app.exceptions import ActivityReadError
from app.models import Log
from app.schemas import CurrentUser
from app.services import streak_service
from app.services.streak_calculator import StreakPolicy
from conftest import auth_headers, log_payload


def utc_now_naive():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_log(db, user, created_at, updated_at=None, title="Atomic Habits"):
    log = Log(
        user_id=user.id,
        title=title,
        consumed_date=created_at.date(),
        key_points="k",
        practical_application="p",
        summary="s",
        created_at=created_at,
        updated_at=updated_at,
    )
    db.add(log)
    db.commit()
    return log


def test_fetch_activity_records_newest_first(db_session, alice):
    now = utc_now_naive()
    add_log(db_session, alice, now - timedelta(days=2))
    newest = add_log(db_session, alice, now - timedelta(hours=1))

    found = fetch_activity_records(db_session, alice.id)
    assert len(found) == 2
    assert found[0].log_id == newest.id


def test_fetch_activity_records_empty_for_user_without_logs(db_session, alice):
    assert fetch_activity_records(db_session, alice.id) == []


def test_read_failure_raises_activity_read_error(db_session, alice, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "query", broken_query)
    with pytest.raises(ActivityReadError) as exc_info:
        streak_service.get_streak(db_session, alice.id)
    assert exc_info.value.user_id == alice.id


def test_streak_from_stored_logs(db_session, alice):
    now = utc_now_naive()
    add_log(db_session, alice, now - timedelta(hours=2))
    add_log(db_session, alice, now - timedelta(hours=26))
    add_log(db_session, alice, now - timedelta(hours=50))

    assert streak_service.get_streak(db_session, alice.id) == 3


def test_streak_policy_override(db_session, alice):
    now = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
    add_log(db_session, alice, datetime(2024, 3, 10, 11, 0))
    add_log(db_session, alice, datetime(2024, 3, 10, 9, 0))

    rolling = streak_service.get_streak(db_session, alice.id, now=now)
    calendar = streak_service.get_streak(db_session, alice.id, now=now, policy=StreakPolicy.CALENDAR_DAY)
    assert rolling == 2
    assert calendar == 1


def test_current_user_streak_is_zero_when_signed_out(db_session):
    assert streak_service.get_current_user_streak(db_session, None) == 0


def test_current_user_streak_for_signed_in_user(db_session, alice):
    add_log(db_session, alice, utc_now_naive() - timedelta(hours=1))
    user = CurrentUser(id=alice.id, username=alice.username)
    assert streak_service.get_current_user_streak(db_session, user) == 1


def test_my_streak_anonymous(client):
    response = client.get("/streaks/me")
    assert response.status_code == 200
    body = response.json()
    assert body["streak"] == 0
    assert body["status"] == "no_activity"
    assert body["policy"] == "rolling_window"


def test_my_streak_after_creating_a_log(client, alice):
    response = client.get("/streaks/me", headers=auth_headers(alice))
    assert response.json()["status"] == "no_activity"

    created = client.post("/logs", json=log_payload(), headers=auth_headers(alice))
    assert created.status_code == 201

    body = client.get("/streaks/me", headers=auth_headers(alice)).json()
    assert body["user_id"] == alice.id
    assert body["streak"] == 1
    assert body["status"] == "active"
    assert body["last_activity_at"] is not None


def test_lapsed_streak_is_reported(client, db_session, alice):
    add_log(db_session, alice, utc_now_naive() - timedelta(days=3))
    body = client.get("/streaks/me", headers=auth_headers(alice)).json()
    assert body["streak"] == 0
    assert body["status"] == "lapsed"


def test_other_users_streak(client, db_session, alice, bob):
    add_log(db_session, bob, utc_now_naive() - timedelta(hours=3))
    response = client.get(f"/streaks/{bob.id}", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.json()["streak"] == 1


def test_other_users_streak_requires_auth(client, bob):
    assert client.get(f"/streaks/{bob.id}").status_code == 401


def test_unknown_user_streak(client, alice):
    response = client.get("/streaks/uid-nobody", headers=auth_headers(alice))
    assert response.status_code == 404


def test_read_failure_is_not_a_zero_streak(client, alice, monkeypatch):
    def failing_fetch(db, user_id):
        raise ActivityReadError(user_id, Exception("connection reset"))

    monkeypatch.setattr(streak_service, "fetch_activity_records", failing_fetch)
    response = client.get("/streaks/me", headers=auth_headers(alice))
    assert response.status_code == 503
    body = response.json()
    assert "streak" not in body
    assert body["request_id"]


def test_profile_streak_surfaces_read_failure(client, alice, monkeypatch):
    def failing_fetch(db, user_id):
        raise ActivityReadError(user_id)

    monkeypatch.setattr(streak_service, "fetch_activity_records", failing_fetch)
    assert client.get("/users/alice", headers=auth_headers(alice)).status_code == 503
    assert client.get("/users/me", headers=auth_headers(alice)).status_code == 503


def test_malformed_stored_timestamp_is_a_server_error(client, alice, monkeypatch):
    from app.services.streak_calculator import ActivityRecord

    def corrupt_fetch(db, user_id):
        return [ActivityRecord(created_at="31/02/2024", log_id="log-broken")]

    monkeypatch.setattr(streak_service, "fetch_activity_records", corrupt_fetch)
    response = client.get("/streaks/me", headers=auth_headers(alice))
    assert response.status_code == 500
    assert "log-broken" in response.json()["detail"]


def test_timestamps_are_stored_and_read_as_utc(db_session, alice):
    new_york = pytz.timezone("America/New_York")
    log_id = add_log(db_session, alice, new_york.localize(datetime(2024, 3, 10, 20, 0))).id
    db_session.expire_all()

    stored = db_session.query(Log).filter(Log.id == log_id).one()
    assert stored.created_at.utcoffset() == timedelta(0)
    assert stored.created_at == datetime(2024, 3, 11, 0, 0, tzinfo=timezone.utc)


def test_streak_uses_true_instant_of_non_utc_timestamps(db_session, alice):
    # 20:00 EDT is 00:00 UTC the next day; 30h later the log is still inside the window
    new_york = pytz.timezone("America/New_York")
    add_log(db_session, alice, new_york.localize(datetime(2024, 3, 10, 20, 0)))

    now = datetime(2024, 3, 12, 6, 0, tzinfo=timezone.utc)
    assert streak_service.get_streak(db_session, alice.id, now=now) == 1

