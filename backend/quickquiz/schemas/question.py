from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from quickquiz.models.question import Difficulty, QuestionType
from quickquiz.schemas.blocks import blocks_adapter


def _check_rich_text(value: Any) -> Any:
    # Structured input is validated but kept exactly as given.
    if isinstance(value, list):
        blocks_adapter.validate_python(value)
    return value


class AnswerOption(BaseModel):
    # Answers are stored as given; only the id is required.
    model_config = ConfigDict(extra="allow")

    id: str | int
    content: str | None = None


class TopicRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    description: str | list[dict[str, Any]] | None = None

    @field_validator("description")
    @classmethod
    def _description_blocks(cls, v: Any) -> Any:
        return _check_rich_text(v)


class TagRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    slug: str | None = None

    @field_validator("slug", mode="before")
    @classmethod
    def _empty_slug(cls, v: Any) -> Any:
        return v or None


_QUESTION_DEFAULTS: dict[str, Any] = {
    "type": QuestionType.single,
    "difficulty": Difficulty.easy,
    "version": 1,
}


class QuestionRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: str | None = None
    question: str | list[dict[str, Any]]
    type: QuestionType = QuestionType.single
    answers: list[AnswerOption] = Field(min_length=1)
    correct_answer: list[str | int] = Field(alias="correctAnswer", min_length=1)
    explanation: str | list[dict[str, Any]] | None = None
    difficulty: Difficulty = Difficulty.easy
    source: str | None = None
    version: int = 1
    topic: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("code", "source", "topic", mode="before")
    @classmethod
    def _empty_as_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("explanation", mode="before")
    @classmethod
    def _empty_text_as_none(cls, v: Any) -> Any:
        # An empty block list is structured content and is kept.
        return None if v == "" else v

    @field_validator("type", "difficulty", "version", mode="before")
    @classmethod
    def _falsy_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        return v or _QUESTION_DEFAULTS[info.field_name]

    @field_validator("question", mode="before")
    @classmethod
    def _question_required(cls, v: Any) -> Any:
        if v is None or v == "":
            raise ValueError("missing question text")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

    @field_validator("question", "explanation")
    @classmethod
    def _rich_text_blocks(cls, v: Any) -> Any:
        return _check_rich_text(v)
