from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

from app.auth.models import User
from app.auth.schemas import LoginRequest


def test_register_returns_token(client, app):
    resp = client.post("/api/auth/register", json={"email": "a@x.com", "password": "password1"})

    assert resp.status_code == 201
    token = resp.json()["token"]
    assert app.state.token_service.verify(token)


def test_register_then_login(client, app, register):
    register(email="runner@runmail.io", password="password1")

    resp = client.post(
        "/api/auth/login", json={"email": "runner@runmail.io", "password": "password1"}
    )

    assert resp.status_code == 200
    assert app.state.token_service.verify(resp.json()["token"])


def test_email_is_case_insensitive(client, register):
    register(email="Runner@RunMail.io")

    duplicate = client.post(
        "/api/auth/register", json={"email": "runner@runmail.IO", "password": "password1"}
    )
    assert duplicate.status_code == 409
    assert duplicate.json() == {"message": "Email already in use."}

    login = client.post(
        "/api/auth/login", json={"email": "RUNNER@RUNMAIL.IO", "password": "password1"}
    )
    assert login.status_code == 200


def test_register_requires_both_fields(client):
    resp = client.post("/api/auth/register", json={"email": "a@x.com"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Email and password are required."}


def test_register_aggregates_field_errors(client):
    resp = client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})

    assert resp.status_code == 400
    assert resp.json() == {
        "message": "Validation Failed: Please provide a valid email address, "
        "Password must be at least 8 characters long"
    }


def test_register_without_body(client):
    resp = client.post("/api/auth/register")

    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Validation Failed")


def test_password_is_stored_hashed(client, db):
    client.post("/api/auth/register", json={"email": "a@x.com", "password": "password1"})

    user = db.query(User).filter(User.email == "a@x.com").one()
    assert user.password != "password1"
    assert user.password.startswith("$2b$")


def test_wrong_password_and_unknown_email_look_identical(client, register):
    register(email="runner@runmail.io", password="password1")

    wrong_password = client.post(
        "/api/auth/login", json={"email": "runner@runmail.io", "password": "password2"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@runmail.io", "password": "password1"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials."}


def test_login_requires_both_fields(client):
    resp = client.post("/api/auth/login", json={"password": "password1"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Email and password are required."}


def test_protected_route_without_token(client):
    resp = client.get("/api/goals")

    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authorized, no token"}
    assert resp.headers["www-authenticate"] == "Bearer"


def test_protected_route_with_other_scheme(client):
    resp = client.get("/api/goals", headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authorized, no token"}


def test_protected_route_with_garbage_token(client, auth):
    resp = client.get("/api/goals", headers=auth("not-a-token"))

    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authorized, token failed"}


def test_expired_token_rejected_on_every_protected_route(client, app, auth, register, create_goal):
    token = register()
    goal_id = create_goal(token)["id"]
    user_id = app.state.token_service.verify(token)
    expired = app.state.token_service.issue(user_id, expires_delta=timedelta(seconds=-30))
    headers = auth(expired)

    calls = [
        client.post("/api/goals", json={"title": "x"}, headers=headers),
        client.get("/api/goals", headers=headers),
        client.get(f"/api/goals/{goal_id}", headers=headers),
        client.put(f"/api/goals/{goal_id}", json={"status": "completed"}, headers=headers),
        client.delete(f"/api/goals/{goal_id}", headers=headers),
        client.post(f"/api/goals/{goal_id}/progress", json={"value": 1}, headers=headers),
        client.get(f"/api/goals/{goal_id}/progress", headers=headers),
    ]

    for resp in calls:
        assert resp.status_code == 401
        assert resp.json() == {"message": "Not authorized, token failed"}


def test_token_for_missing_account_rejected(client, app, auth):
    token = app.state.token_service.issue(uuid4())

    resp = client.get("/api/goals", headers=auth(token))

    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authorized, token failed"}


def test_malformed_body_without_token_is_unauthorized(client, register, create_goal):
    goal_id = create_goal(register())["id"]
    broken = {"content": b"{not json", "headers": {"Content-Type": "application/json"}}

    calls = [
        client.post("/api/goals", **broken),
        client.put(f"/api/goals/{goal_id}", **broken),
        client.post(f"/api/goals/{goal_id}/progress", **broken),
    ]

    for resp in calls:
        assert resp.status_code == 401
        assert resp.json() == {"message": "Not authorized, no token"}
        assert resp.headers["www-authenticate"] == "Bearer"


def test_malformed_body_with_bad_token_is_unauthorized(client, auth):
    headers = {**auth("not-a-token"), "Content-Type": "application/json"}

    resp = client.post("/api/goals", content=b"{not json", headers=headers)

    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authorized, token failed"}


def test_malformed_body_with_valid_token_is_bad_request(client, auth, register):
    headers = {**auth(register()), "Content-Type": "application/json"}

    resp = client.post("/api/goals", content=b"{not json", headers=headers)

    assert resp.status_code == 400
    assert resp.json() == {"message": "Validation Failed: Malformed JSON body."}


def test_malformed_body_on_public_route_is_bad_request(client):
    resp = client.post(
        "/api/auth/register", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert resp.status_code == 400
    assert resp.json() == {"message": "Validation Failed: Malformed JSON body."}


def test_login_request_reads_from_attributes():
    req = LoginRequest.model_validate(SimpleNamespace(email="runner@runmail.io", password="password1"))

    assert req.email == "runner@runmail.io"
    assert req.password == "password1"
