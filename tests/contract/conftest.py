"""Fixtures for API contract tests."""

import pytest
from fastapi.testclient import TestClient

from roomledger.api.app import app
from roomledger.services import get_db


@pytest.fixture
def client(db_session):
    """Provide a FastAPI test client bound to the test database session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def room(client):
    response = client.post("/api/rooms", json={"name": "A-101", "rent": 8000})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def tenant(client, room):
    response = client.post(
        "/api/tenants",
        json={
            "name": "Asha Rao",
            "phone": "9876500001",
            "room_id": room["id"],
            "join_date": "2024-01-05",
            "uses_mess": True,
            "deposit_amount": 5000,
        },
    )
    assert response.status_code == 201
    return response.json()
