import pytest
from fastapi.testclient import TestClient

from app.core.config import load_settings
from app.core.database import init_models
from app.server import create_app

TEST_ENV = {
    "DATABASE_URL": "sqlite://",
    "SECRET_KEY": "test-secret-key",
    "BCRYPT_ROUNDS": "4",
    "ENVIRONMENT": "test",
}


@pytest.fixture
def settings():
    return load_settings(TEST_ENV)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    init_models(app.state.engine)
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def auth():
    def _auth(token):
        return {"Authorization": f"Bearer {token}"}

    return _auth


@pytest.fixture
def register(client):
    def _register(email="runner@runmail.io", password="password1"):
        resp = client.post("/api/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        return resp.json()["token"]

    return _register


@pytest.fixture
def create_goal(client, auth):
    def _create_goal(token, **fields):
        fields.setdefault("title", "Run 5k")
        resp = client.post("/api/goals", json=fields, headers=auth(token))
        assert resp.status_code == 201, resp.text
        return resp.json()["goal"]

    return _create_goal
