import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickquiz.db.base import Base


class QuestionType(str, enum.Enum):
    single = "single"
    multiple = "multiple"
    essay = "essay"


class Difficulty(str, enum.Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


def _document_id() -> str:
    return uuid.uuid4().hex


question_tag_links = Table(
    "question_tag_links",
    Base.metadata,
    Column("question_id", Integer, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("question_tags.id", ondelete="CASCADE"), primary_key=True),
)


class QuestionTopic(Base):
    __tablename__ = "question_topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=_document_id)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class QuestionTag(Base):
    __tablename__ = "question_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=_document_id)
    name: Mapped[str] = mapped_column(String(255), index=True)
    slug: Mapped[str] = mapped_column(String(255), index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, default=_document_id)
    code: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    question: Mapped[list[dict[str, Any]]] = mapped_column(JSON)
    type: Mapped[QuestionType] = mapped_column(Enum(QuestionType), default=QuestionType.single)
    answers: Mapped[list[dict[str, Any]]] = mapped_column(JSON)
    correct_answer: Mapped[list[str | int]] = mapped_column(JSON)
    explanation: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    difficulty: Mapped[Difficulty] = mapped_column(Enum(Difficulty), default=Difficulty.easy, index=True)
    source: Mapped[str | None] = mapped_column(String(500), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1)

    topic_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("question_topics.id", ondelete="SET NULL"), nullable=True, index=True
    )
    topic: Mapped[QuestionTopic | None] = relationship()
    tags: Mapped[list[QuestionTag]] = relationship(secondary=question_tag_links)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
