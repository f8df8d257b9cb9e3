import sys
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

backend_dir = Path(__file__).resolve().parents[1]
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from quickquiz.db.base import Base
from quickquiz.db import session as session_module
from quickquiz.main import create_app
from quickquiz.services.content_store import ContentStoreError, EntityKind, SqlContentStore

# Import models so that they are registered in Base.metadata before create_all.
from quickquiz.models.question import Question, QuestionTag, QuestionTopic  # noqa: F401
from quickquiz.models.user import CmsUser  # noqa: F401


class FakeContentStore:
    """In-memory content store that records every call."""

    def __init__(self):
        self.records: dict[EntityKind, list[dict[str, Any]]] = {k: [] for k in EntityKind}
        self.find_calls: list[tuple[EntityKind, dict[str, Any]]] = []
        self.create_calls: list[tuple[EntityKind, dict[str, Any]]] = []
        self.fail_on: set[str] = set()
        self.closed = False
        self._seq = 0

    def seed(self, kind: EntityKind, **fields: Any) -> dict[str, Any]:
        self._seq += 1
        rec = {"document_id": f"{kind.value}-{self._seq}", **fields}
        self.records[kind].append(rec)
        return rec

    def find(self, kind: EntityKind, filters: dict[str, Any]) -> list[dict[str, Any]]:
        self.find_calls.append((kind, dict(filters)))
        return [r for r in self.records[kind] if all(r.get(k) == v for k, v in filters.items())]

    def find_published(self, kind: EntityKind) -> list[dict[str, Any]]:
        return list(self.records[kind])

    def create(self, kind: EntityKind, data: dict[str, Any]) -> dict[str, Any]:
        self.create_calls.append((kind, data))
        key = data.get("code") or data.get("name")
        if key in self.fail_on:
            raise ContentStoreError(f"rejected {key}")
        return self.seed(kind, **data)

    def close(self) -> None:
        self.closed = True

    def created(self, kind: EntityKind) -> list[dict[str, Any]]:
        return [data for k, data in self.create_calls if k == kind]


# Configure test DB (SQLite in-memory) at import time so everything using
# quickquiz.db.session.SessionLocal gets the patched version.
_engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
Base.metadata.create_all(bind=_engine)
session_module.engine = _engine
session_module.SessionLocal = session_module.sessionmaker(autocommit=False, autoflush=False, bind=_engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with _engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    with session_module.SessionLocal() as session:
        yield session


@pytest.fixture()
def client():
    app = create_app()

    def _get_db_override():
        db = session_module.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session_module.get_db] = _get_db_override
    return TestClient(app)


@pytest.fixture()
def fake_store():
    return FakeContentStore()


@pytest.fixture()
def sql_store():
    store = SqlContentStore(session_module.SessionLocal())
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def write_json(tmp_path):
    import json

    def _write(payload: Any, name: str = "data.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
