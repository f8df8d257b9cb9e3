from __future__ import annotations

import logging
import random
import string
import time
from dataclasses import dataclass
from typing import Any

from quickquiz.importers.base import BulkImporter, ImportResult, emit
from quickquiz.importers.references import ReferenceCache, resolve_references
from quickquiz.schemas.blocks import blocks_to_text, to_blocks
from quickquiz.schemas.question import QuestionRecord
from quickquiz.services.content_store import EntityKind


log = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n <= 0:
        return "0"
    out: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_code(index: int, *, now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """Question code for records that came without one: Q-<time>-<random>-<input index>."""
    ts = int(time.time() * 1000) if now_ms is None else int(now_ms)
    r = rng or random
    suffix = "".join(r.choice(_BASE36) for _ in range(4))
    return f"Q-{_base36(ts)}-{suffix}-{index}"


@dataclass(frozen=True)
class QuestionRunContext:
    topics: ReferenceCache
    tags: ReferenceCache


def _add_unique(target: list[str], name: str) -> None:
    if name not in target:
        target.append(name)


class QuestionImporter(BulkImporter[QuestionRecord]):
    kind = EntityKind.question
    noun = "questions"
    record_model = QuestionRecord

    def prepare(self) -> QuestionRunContext:
        topics = ReferenceCache.load(self.store, EntityKind.topic)
        emit(f"Loaded {len(topics)} topic(s) into cache")
        tags = ReferenceCache.load(self.store, EntityKind.tag)
        emit(f"Loaded {len(tags)} tag(s) into cache")
        return QuestionRunContext(topics=topics, tags=tags)

    def label(self, index: int, raw: Any) -> str:
        if isinstance(raw, dict) and raw.get("code"):
            return repr(raw["code"])
        return f"at index {index}"

    def exists(self, record: QuestionRecord) -> bool:
        # Only a supplied code is a natural key; generated codes are new by construction.
        if not record.code:
            return False
        return bool(self.store.find(self.kind, {"code": record.code}))

    def build_entry(
        self, index: int, record: QuestionRecord, context: QuestionRunContext, result: ImportResult
    ) -> dict[str, Any]:
        refs = resolve_references(
            topic=record.topic,
            tags=record.tags,
            topics=context.topics,
            tag_cache=context.tags,
        )
        if refs.missing_topic:
            _add_unique(result.missing_topics, refs.missing_topic)
        for name in refs.missing_tags:
            _add_unique(result.missing_tags, name)

        return {
            "code": record.code or generate_code(index),
            "question": to_blocks(record.question),
            "type": record.type.value,
            "answers": [a.model_dump(exclude_unset=True) for a in record.answers],
            "correct_answer": list(record.correct_answer),
            "explanation": to_blocks(record.explanation),
            "difficulty": record.difficulty.value,
            "source": record.source,
            "version": record.version,
            "question_topic": refs.topic_id,
            "question_tags": refs.tag_ids,
        }

    def entry_label(self, entry: dict[str, Any]) -> str:
        return repr(entry["code"])

    def dry_run_line(self, entry: dict[str, Any], record: QuestionRecord) -> str:
        text = blocks_to_text(entry["question"])
        if len(text) > 60:
            text = text[:57] + "..."
        return (
            f"~ would create question: {entry['code']!r} {text!r} "
            f"(topic: {record.topic or 'none'}, tags: {', '.join(record.tags) or 'none'})"
        )

    def finish(self, result: ImportResult) -> None:
        if result.missing_topics:
            emit()
            emit(f"Missing topics (not linked): {', '.join(result.missing_topics)}")
            log.warning("unresolved topics: %s", result.missing_topics)
        if result.missing_tags:
            emit(f"Missing tags (not linked): {', '.join(result.missing_tags)}")
            log.warning("unresolved tags: %s", result.missing_tags)
