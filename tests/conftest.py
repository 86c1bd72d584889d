import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["MONGODB_TIMEOUT_MS"] = "200"

import mongomock
import pytest
from fastapi.testclient import TestClient

from experience_portal.db.mongodb import get_mongo_db, init_mongo_indexes
from experience_portal.db.postgres import engine, metadata, init_sql_schema
from experience_portal.main import app
from experience_portal.services.user_service import provision_admin

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def sql_db():
    init_sql_schema()
    yield
    with engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def mongo_db():
    db = mongomock.MongoClient()["portal_test"]
    init_mongo_indexes(db)
    app.dependency_overrides[get_mongo_db] = lambda: db
    yield db
    app.dependency_overrides.pop(get_mongo_db, None)


@pytest.fixture
def client(mongo_db):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user through the API; returns (auth headers, user json)."""

    def _register(username="alice_01", name="Alice", **extra):
        payload = {
            "name": name,
            "username": username,
            "email": f"{username}@marwadiuniversity.ac.in",
            "password": DEFAULT_PASSWORD,
            **extra,
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register


@pytest.fixture
def user_headers(register):
    headers, _ = register()
    return headers


@pytest.fixture
def admin_headers(client):
    provision_admin("Placement Cell", "admin", "admin@marwadiuniversity.ac.in", "adminpass")
    response = client.post("/api/auth/login", json={"identifier": "admin", "password": "adminpass"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def make_experience(**overrides):
    payload = {
        "company": "Google",
        "role": "Software Engineer",
        "branch": "Computer Science",
        "year": 2024,
        "rounds": [
            {
                "roundNumber": 1,
                "roundName": "Online Assessment",
                "questions": ["Find the maximum subarray sum", "Design a rate limiter"],
                "feedback": "Focus on edge cases",
                "difficulty": "Medium",
            },
            {
                "roundNumber": 2,
                "roundName": "Technical Interview",
                "questions": ["Explain how HashMap works internally"],
                "feedback": "Friendly interviewer",
                "difficulty": "Hard",
            },
        ],
        "package": "35 LPA",
        "tips": "Practice system design",
        "offerStatus": "Selected",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def experience_payload():
    return make_experience


@pytest.fixture
def post_experience(client, admin_headers):
    """Submit an experience and optionally approve it; returns the created json."""

    def _post(headers=None, approve=True, **overrides):
        payload = make_experience(**overrides)
        if headers is None:
            payload.setdefault("authorName", "Anonymous Senior")
        response = client.post("/api/experiences", json=payload, headers=headers or {})
        assert response.status_code == 201, response.text
        created = response.json()
        if approve:
            approved = client.put(f"/api/admin/experiences/{created['id']}/approve", json={}, headers=admin_headers)
            assert approved.status_code == 200, approved.text
            created = approved.json()
        return created

    return _post
