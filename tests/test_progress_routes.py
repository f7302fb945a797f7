from datetime import datetime, timedelta, timezone
from uuid import uuid4

from app.progress.models import ProgressLog


def _parse(timestamp):
    value = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def test_log_progress_defaults_date_to_now(client, auth, register, create_goal):
    token = register()
    goal = create_goal(token)
    before = datetime.now(timezone.utc) - timedelta(seconds=5)

    resp = client.post(f"/api/goals/{goal['id']}/progress", json={"value": 3}, headers=auth(token))

    assert resp.status_code == 201
    progress = resp.json()["progress"]
    assert progress["goalId"] == goal["id"]
    assert progress["userId"] == goal["userId"]
    assert progress["value"] == 3
    assert progress["notes"] is None
    assert before <= _parse(progress["date"]) <= datetime.now(timezone.utc) + timedelta(seconds=5)


def test_log_progress_without_body(client, auth, register, create_goal):
    token = register()
    goal = create_goal(token)

    resp = client.post(f"/api/goals/{goal['id']}/progress", headers=auth(token))

    assert resp.status_code == 201
    assert resp.json()["progress"]["value"] is None


def test_log_progress_with_notes_and_date(client, auth, register, create_goal):
    token = register()
    goal = create_goal(token)
    payload = {"date": "2024-03-01T07:30:00+02:00", "notes": "  felt strong  ", "value": 12.5}

    resp = client.post(f"/api/goals/{goal['id']}/progress", json=payload, headers=auth(token))

    assert resp.status_code == 201
    progress = resp.json()["progress"]
    assert progress["notes"] == "felt strong"
    assert progress["value"] == 12.5
    assert _parse(progress["date"]) == datetime(2024, 3, 1, 5, 30, tzinfo=timezone.utc)


def test_log_progress_validation(client, auth, register, create_goal):
    token = register()
    goal = create_goal(token)

    long_notes = client.post(
        f"/api/goals/{goal['id']}/progress", json={"notes": "n" * 501}, headers=auth(token)
    )
    bad_value = client.post(
        f"/api/goals/{goal['id']}/progress", json={"value": "lots"}, headers=auth(token)
    )

    assert long_notes.status_code == 400
    assert long_notes.json() == {
        "message": "Validation Failed: Progress notes cannot exceed 500 characters"
    }
    assert bad_value.status_code == 400
    assert bad_value.json()["message"].startswith("Validation Failed: value:")


def test_log_progress_on_unknown_goal(client, auth, register):
    resp = client.post(f"/api/goals/{uuid4()}/progress", json={"value": 1}, headers=auth(register()))

    assert resp.status_code == 404
    assert resp.json() == {"message": "Target goal not found."}


def test_list_progress_ordering(client, auth, register, create_goal):
    token = register()
    goal = create_goal(token)
    url = f"/api/goals/{goal['id']}/progress"
    client.post(url, json={"date": "2024-01-01T00:00:00Z", "value": 1}, headers=auth(token))
    client.post(url, json={"date": "2024-02-01T00:00:00Z", "value": 2}, headers=auth(token))
    client.post(url, json={"date": "2024-02-01T00:00:00Z", "value": 3}, headers=auth(token))

    resp = client.get(url, headers=auth(token))

    assert resp.status_code == 200
    assert [p["value"] for p in resp.json()["progressLogs"]] == [3, 2, 1]


def test_list_progress_only_for_requested_goal(client, auth, register, create_goal):
    token = register()
    run = create_goal(token, title="Run")
    lift = create_goal(token, title="Lift")
    client.post(f"/api/goals/{run['id']}/progress", json={"value": 5}, headers=auth(token))
    client.post(f"/api/goals/{lift['id']}/progress", json={"value": 80}, headers=auth(token))

    resp = client.get(f"/api/goals/{lift['id']}/progress", headers=auth(token))

    assert [p["value"] for p in resp.json()["progressLogs"]] == [80]


def test_other_account_cannot_touch_progress(client, auth, register, create_goal):
    alice = register(email="alice@runmail.io")
    bob = register(email="bob@runmail.io")
    goal = create_goal(alice)
    url = f"/api/goals/{goal['id']}/progress"
    client.post(url, json={"value": 7}, headers=auth(alice))

    log = client.post(url, json={"value": 1}, headers=auth(bob))
    listing = client.get(url, headers=auth(bob))

    for resp in (log, listing):
        assert resp.status_code == 404
        assert resp.json() == {"message": "Target goal not found."}

    own = client.get(url, headers=auth(alice)).json()["progressLogs"]
    assert [p["value"] for p in own] == [7]


def test_delete_goal_cascades_to_progress(client, db, auth, register, create_goal):
    token = register()
    doomed = create_goal(token, title="Doomed")
    kept = create_goal(token, title="Kept")
    for value in (1, 2):
        client.post(f"/api/goals/{doomed['id']}/progress", json={"value": value}, headers=auth(token))
    client.post(f"/api/goals/{kept['id']}/progress", json={"value": 9}, headers=auth(token))

    assert client.delete(f"/api/goals/{doomed['id']}", headers=auth(token)).status_code == 204

    remaining = db.query(ProgressLog).all()
    assert [str(p.goal_id) for p in remaining] == [kept["id"]]


def test_register_goal_progress_scenario(client, auth):
    registered = client.post("/api/auth/register", json={"email": "a@x.com", "password": "password1"})
    assert registered.status_code == 201
    token = registered.json()["token"]

    created = client.post("/api/goals", json={"title": "Run 5k"}, headers=auth(token))
    assert created.status_code == 201
    goal = created.json()["goal"]
    assert goal["status"] == "active"
    url = f"/api/goals/{goal['id']}/progress"

    logged = client.post(url, json={"value": 3}, headers=auth(token))
    assert logged.status_code == 201
    assert logged.json()["progress"]["date"]

    listed = client.get(url, headers=auth(token))
    assert listed.status_code == 200
    assert [p["value"] for p in listed.json()["progressLogs"]] == [3]

    deleted = client.delete(f"/api/goals/{goal['id']}", headers=auth(token))
    assert deleted.status_code == 204

    after = client.get(url, headers=auth(token))
    assert after.status_code == 404
