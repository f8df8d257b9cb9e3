from __future__ import annotations

import re
from typing import Any

from quickquiz.importers.base import BulkImporter, ImportResult
from quickquiz.schemas.question import TagRecord
from quickquiz.services.content_store import EntityKind


def generate_slug(value: str) -> str:
    s = (value or "").lower().strip()
    s = re.sub(r"[^\w\s-]", "", s)
    s = re.sub(r"[\s_-]+", "-", s)
    return s.strip("-")


class TagImporter(BulkImporter[TagRecord]):
    kind = EntityKind.tag
    noun = "question tags"
    record_model = TagRecord
    example = """
[
  { "name": "Tag Name" },
  { "name": "Another Tag", "slug": "custom-slug" }
]
"""

    @staticmethod
    def slug_for(record: TagRecord) -> str:
        return record.slug or generate_slug(record.name)

    def exists(self, record: TagRecord) -> bool:
        # A tag counts as existing when either its name or its slug is taken.
        if self.store.find(self.kind, {"name": record.name}):
            return True
        return bool(self.store.find(self.kind, {"slug": self.slug_for(record)}))

    def build_entry(self, index: int, record: TagRecord, context: Any, result: ImportResult) -> dict[str, Any]:
        return {"name": record.name, "slug": self.slug_for(record)}

    def entry_label(self, entry: dict[str, Any]) -> str:
        return f"{entry['name']!r} (slug: {entry['slug']})"
