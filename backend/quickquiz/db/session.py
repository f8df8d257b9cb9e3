from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from quickquiz.core.config import settings


engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    pool_size=int(settings.db_pool_size),
    pool_recycle=int(settings.db_pool_recycle_seconds),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
