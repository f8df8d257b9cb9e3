from __future__ import annotations

from typing import Any

from quickquiz.importers.base import BulkImporter, ImportResult
from quickquiz.schemas.blocks import to_blocks
from quickquiz.schemas.question import TopicRecord
from quickquiz.services.content_store import EntityKind


class TopicImporter(BulkImporter[TopicRecord]):
    kind = EntityKind.topic
    noun = "question topics"
    record_model = TopicRecord
    example = """
[
  { "name": "Topic Name", "description": "Topic description" },
  { "name": "Another Topic", "description": "Another description" }
]
"""

    def exists(self, record: TopicRecord) -> bool:
        return bool(self.store.find(self.kind, {"name": record.name}))

    def build_entry(self, index: int, record: TopicRecord, context: Any, result: ImportResult) -> dict[str, Any]:
        return {
            "name": record.name,
            "description": to_blocks(record.description),
        }

    def entry_label(self, entry: dict[str, Any]) -> str:
        return repr(entry["name"])
