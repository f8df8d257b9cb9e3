from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from quickquiz.services.content_store import ContentStore, EntityKind


@dataclass(frozen=True)
class ReferenceCache:
    """Lowercased entity name -> document id, built once per import run."""

    kind: EntityKind
    ids: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_records(cls, kind: EntityKind, records: Iterable[dict[str, Any]]) -> ReferenceCache:
        ids: dict[str, str] = {}
        for rec in records:
            name = rec.get("name")
            doc_id = rec.get("document_id")
            if not isinstance(name, str) or not doc_id:
                continue
            ids[name.lower()] = str(doc_id)
        return cls(kind=kind, ids=MappingProxyType(ids))

    @classmethod
    def load(cls, store: ContentStore, kind: EntityKind) -> ReferenceCache:
        return cls.from_records(kind, store.find_published(kind))

    def __len__(self) -> int:
        return len(self.ids)

    def resolve(self, name: str | None) -> str | None:
        if not name:
            return None
        return self.ids.get(name.lower())


@dataclass(frozen=True)
class ResolvedReferences:
    topic_id: str | None
    tag_ids: list[str]
    missing_topic: str | None
    missing_tags: list[str]


def resolve_references(
    *,
    topic: str | None,
    tags: list[str],
    topics: ReferenceCache,
    tag_cache: ReferenceCache,
) -> ResolvedReferences:
    topic_id = topics.resolve(topic)
    missing_topic = topic if topic and topic_id is None else None

    tag_ids: list[str] = []
    missing_tags: list[str] = []
    for name in tags:
        doc_id = tag_cache.resolve(name)
        if doc_id is None:
            missing_tags.append(name)
        elif doc_id not in tag_ids:
            tag_ids.append(doc_id)

    return ResolvedReferences(
        topic_id=topic_id,
        tag_ids=tag_ids,
        missing_topic=missing_topic,
        missing_tags=missing_tags,
    )
