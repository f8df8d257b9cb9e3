from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from quickquiz.db.session import get_db
from quickquiz.main import create_app
from quickquiz.models.user import CmsUser


def test_users_empty(client):
    r = client.get("/users")
    assert r.status_code == 200
    assert r.json() == []


def test_users_lists_public_fields_only(client, db):
    db.add_all(
        [
            CmsUser(id=2, username="bob", email="bob@example.com", confirmed=True),
            CmsUser(id=1, username="alice", email="alice@example.com", blocked=True),
            CmsUser(id=3, username=None, email=None),
        ]
    )
    db.commit()

    r = client.get("/users")
    assert r.status_code == 200
    assert r.json() == [
        {"id": 1, "username": "alice", "email": "alice@example.com"},
        {"id": 2, "username": "bob", "email": "bob@example.com"},
        {"id": 3, "username": None, "email": None},
    ]


def test_users_request_id_is_echoed(client):
    r = client.get("/users", headers={"X-Request-ID": "rid-123"})
    assert r.headers["X-Request-ID"] == "rid-123"
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_users_query_failure_returns_error_envelope():
    class _BrokenSession:
        def execute(self, *args, **kwargs):
            raise OperationalError("SELECT id FROM up_users", {}, Exception("relation does not exist"))

    app = create_app()
    app.dependency_overrides[get_db] = lambda: _BrokenSession()
    client = TestClient(app)

    r = client.get("/users", headers={"X-Request-ID": "rid-500"})
    assert r.status_code == 500
    assert r.json() == {
        "ok": False,
        "error_code": "internal_error",
        "error_message": "failed to fetch users",
        "request_id": "rid-500",
    }


def test_users_is_read_only(client):
    r = client.post("/users", json={"username": "mallory"})
    assert r.status_code == 405
