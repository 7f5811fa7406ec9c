"""Shared fixtures: a testing app on in-memory SQLite and authenticated clients."""

import pytest

from sentinel import create_app
from sentinel.config import TestingConfig, config
from sentinel.extensions import db

NORMAL_HEALTH = {
    "heartRate": 72,
    "spO2": 98,
    "systolicBP": 110,
    "diastolicBP": 70,
    "skinTemp": 36.8,
    "respiratoryRate": 16,
}

NORMAL_SYSTEM = {
    "cabinCO2": 3,
    "cabinO2": 21,
    "cabinPressure": 101,
    "cabinTemp": 22,
    "cabinHumidity": 45,
    "powerConsumption": 1500,
    "waterReclamationLevel": 60,
    "wasteManagementLevel": 40,
}


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_app(monkeypatch):
    """Build a testing app with extra settings, e.g. make_app(RATELIMIT_ENABLED=True)."""
    contexts = []

    def _make_app(**settings):
        monkeypatch.setitem(config, "custom", type("CustomTestingConfig", (TestingConfig,), settings))
        custom_app = create_app("custom")
        ctx = custom_app.app_context()
        ctx.push()
        db.create_all()
        contexts.append(ctx)
        return custom_app

    yield _make_app

    for ctx in reversed(contexts):
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture
def signup(app):
    """Sign up through a throwaway client so `client` carries no JWT cookie."""
    def _signup(email="crew@example.com", name="Crew Member", password="password123", role=None):
        payload = {"email": email, "name": name, "password": password}
        if role:
            payload["role"] = role
        response = app.test_client().post("/api/auth/signup", json=payload)
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return {
            "user": body["user"],
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }
    return _signup


@pytest.fixture
def crew(signup):
    return signup()


@pytest.fixture
def auth_headers(crew):
    return crew["headers"]


@pytest.fixture
def health_payload():
    def _payload(**overrides):
        return dict(NORMAL_HEALTH, **overrides)
    return _payload


@pytest.fixture
def system_payload():
    def _payload(**overrides):
        return dict(NORMAL_SYSTEM, **overrides)
    return _payload
