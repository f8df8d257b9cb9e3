from __future__ import annotations

import enum
import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickquiz.core.config import settings
from quickquiz.db import session as db_session
from quickquiz.models.question import Difficulty, Question, QuestionTag, QuestionTopic, QuestionType


log = logging.getLogger(__name__)


class EntityKind(str, enum.Enum):
    topic = "question-topic"
    tag = "question-tag"
    question = "question"

    @property
    def plural(self) -> str:
        return f"{self.value}s"


class ContentStoreError(RuntimeError):
    pass


class ContentStore(Protocol):
    def find(self, kind: EntityKind, filters: dict[str, Any]) -> list[dict[str, Any]]: ...

    def find_published(self, kind: EntityKind) -> list[dict[str, Any]]: ...

    def create(self, kind: EntityKind, data: dict[str, Any]) -> dict[str, Any]: ...

    def close(self) -> None: ...


_MODELS: dict[EntityKind, type] = {
    EntityKind.topic: QuestionTopic,
    EntityKind.tag: QuestionTag,
    EntityKind.question: Question,
}

_FILTERABLE: dict[EntityKind, set[str]] = {
    EntityKind.topic: {"name", "document_id"},
    EntityKind.tag: {"name", "slug", "document_id"},
    EntityKind.question: {"code", "document_id"},
}


def _to_record(kind: EntityKind, row: Any) -> dict[str, Any]:
    if kind == EntityKind.topic:
        return {
            "document_id": row.document_id,
            "name": row.name,
            "description": row.description,
        }
    if kind == EntityKind.tag:
        return {
            "document_id": row.document_id,
            "name": row.name,
            "slug": row.slug,
        }
    return {
        "document_id": row.document_id,
        "code": row.code,
        "question": row.question,
        "type": row.type.value if row.type is not None else None,
        "answers": row.answers,
        "correct_answer": row.correct_answer,
        "explanation": row.explanation,
        "difficulty": row.difficulty.value if row.difficulty is not None else None,
        "source": row.source,
        "version": row.version,
        "question_topic": row.topic.document_id if row.topic is not None else None,
        "question_tags": [t.document_id for t in row.tags],
    }


class SqlContentStore:
    """Question bank kept in our own database.

    Every create is committed right away so existence checks later in the same
    import run see it.
    """

    def __init__(self, db: Session):
        self.db = db

    def find(self, kind: EntityKind, filters: dict[str, Any]) -> list[dict[str, Any]]:
        model = _MODELS[kind]
        stmt = select(model)
        for field, value in filters.items():
            if field not in _FILTERABLE[kind]:
                raise ContentStoreError(f"cannot filter {kind.value} by {field}")
            stmt = stmt.where(getattr(model, field) == value)
        try:
            rows = self.db.scalars(stmt.order_by(model.id)).all()
        except SQLAlchemyError as e:
            raise ContentStoreError(f"find {kind.value} failed: {e}") from e
        return [_to_record(kind, r) for r in rows]

    def find_published(self, kind: EntityKind) -> list[dict[str, Any]]:
        model = _MODELS[kind]
        try:
            rows = self.db.scalars(select(model).where(model.published_at.is_not(None)).order_by(model.id)).all()
        except SQLAlchemyError as e:
            raise ContentStoreError(f"find {kind.value} failed: {e}") from e
        return [_to_record(kind, r) for r in rows]

    def create(self, kind: EntityKind, data: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        try:
            if kind == EntityKind.topic:
                row = QuestionTopic(name=data["name"], description=data.get("description"), published_at=now)
            elif kind == EntityKind.tag:
                row = QuestionTag(name=data["name"], slug=data["slug"], published_at=now)
            else:
                row = self._build_question(data, now=now)
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ContentStoreError(f"create {kind.value} failed: {e}") from e
        except (KeyError, ValueError) as e:
            self.db.rollback()
            raise ContentStoreError(f"create {kind.value} failed: invalid data {e}") from e

        self.db.refresh(row)
        log.debug("content_store: created %s document_id=%s", kind.value, row.document_id)
        return _to_record(kind, row)

    def _build_question(self, data: dict[str, Any], *, now: datetime) -> Question:
        topic = None
        topic_id = data.get("question_topic")
        if topic_id:
            topic = self.db.scalar(select(QuestionTopic).where(QuestionTopic.document_id == topic_id))
            if topic is None:
                raise ContentStoreError(f"unknown question-topic {topic_id}")

        tag_ids = list(data.get("question_tags") or [])
        tags: list[QuestionTag] = []
        if tag_ids:
            tags = list(self.db.scalars(select(QuestionTag).where(QuestionTag.document_id.in_(tag_ids))))
            if len(tags) != len(set(tag_ids)):
                raise ContentStoreError("unknown question-tag in question_tags")

        return Question(
            code=data.get("code"),
            question=data["question"],
            type=QuestionType(data.get("type") or "single"),
            answers=data["answers"],
            correct_answer=data["correct_answer"],
            explanation=data.get("explanation"),
            difficulty=Difficulty(data.get("difficulty") or "easy"),
            source=data.get("source"),
            version=int(data.get("version") or 1),
            topic=topic,
            tags=tags,
            published_at=now,
        )

    def close(self) -> None:
        self.db.close()


def get_content_store() -> ContentStore:
    kind = (settings.content_store or "db").strip().lower()
    if kind == "cms":
        from quickquiz.services.cms_client import CmsContentStore

        return CmsContentStore.from_settings()
    if kind != "db":
        raise ValueError(f"unknown CONTENT_STORE: {settings.content_store}")
    return SqlContentStore(db_session.SessionLocal())
