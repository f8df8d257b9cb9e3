from __future__ import annotations

import json
import logging
import pathlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from quickquiz.services.content_store import ContentStore, ContentStoreError, EntityKind


log = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass(frozen=True)
class ImportOptions:
    skip_existing: bool = True
    dry_run: bool = False


@dataclass
class ImportResult:
    created: int = 0
    skipped: int = 0
    failed: int = 0
    missing_topics: list[str] = field(default_factory=list)
    missing_tags: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, int]:
        return {"created": self.created, "skipped": self.skipped, "failed": self.failed}


def emit(line: str = "") -> None:
    print(line, flush=True)


def load_records(data_file: pathlib.Path, *, noun: str, example: str | None = None) -> list[Any] | None:
    """Read the JSON array to import. Returns None (after logging why) when the run cannot start."""
    if not data_file.is_file():
        log.error("data file not found: %s", data_file)
        if example:
            emit("Please create a JSON file with the following format:")
            emit(example)
        return None

    try:
        records = json.loads(data_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        log.error("failed to parse JSON file %s: %s", data_file, e)
        return None

    if not isinstance(records, list):
        log.error("JSON file must contain an array of %s", noun)
        return None
    return records


def describe_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc") or ()) or "record"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


class BulkImporter(ABC, Generic[RecordT]):
    """Read -> validate -> check existence -> transform -> create, one record at a time.

    Subclasses describe one entity kind. Records are processed strictly in
    input order; a bad record never aborts the run.
    """

    kind: EntityKind
    noun: str
    record_model: type[RecordT]
    example: str | None = None

    def __init__(self, store: ContentStore):
        self.store = store

    def prepare(self) -> Any:
        """Per-run context handed to build_entry (reference caches for questions)."""
        return None

    def label(self, index: int, raw: Any) -> str:
        if isinstance(raw, dict) and raw.get("name"):
            return repr(raw["name"])
        return f"at index {index}"

    @abstractmethod
    def exists(self, record: RecordT) -> bool: ...

    @abstractmethod
    def build_entry(self, index: int, record: RecordT, context: Any, result: ImportResult) -> dict[str, Any]: ...

    @abstractmethod
    def entry_label(self, entry: dict[str, Any]) -> str: ...

    def dry_run_line(self, entry: dict[str, Any], record: RecordT) -> str:
        return f"~ would create {self.kind.value}: {self.entry_label(entry)}"

    def finish(self, result: ImportResult) -> None:
        return None

    def run(self, data_file: pathlib.Path, options: ImportOptions | None = None) -> ImportResult:
        opts = options or ImportOptions()
        result = ImportResult()

        records = load_records(pathlib.Path(data_file), noun=self.noun, example=self.example)
        if records is None:
            return result

        context = self.prepare()

        emit()
        emit(f"Found {len(records)} {self.kind.value}(s) to import")
        if opts.dry_run:
            emit("(dry run: no changes will be made)")
        emit()

        for index, raw in enumerate(records):
            try:
                record = self.record_model.model_validate(raw)
            except ValidationError as e:
                log.warning("skipping %s %s: %s", self.kind.value, self.label(index, raw), describe_validation_error(e))
                emit(f"! invalid {self.kind.value} {self.label(index, raw)}")
                result.failed += 1
                continue

            if opts.skip_existing:
                try:
                    found = self.exists(record)
                except ContentStoreError as e:
                    log.warning("existence check failed for %s %s: %s", self.kind.value, self.label(index, raw), e)
                    result.failed += 1
                    continue
                if found:
                    emit(f"= skipping existing {self.kind.value}: {self.label(index, raw)}")
                    result.skipped += 1
                    continue

            entry = self.build_entry(index, record, context, result)

            if opts.dry_run:
                emit(self.dry_run_line(entry, record))
                result.created += 1
                continue

            try:
                self.store.create(self.kind, entry)
            except ContentStoreError as e:
                log.error("failed to create %s %s: %s", self.kind.value, self.entry_label(entry), e)
                emit(f"! failed to create {self.kind.value}: {self.entry_label(entry)}")
                result.failed += 1
                continue

            emit(f"+ created {self.kind.value}: {self.entry_label(entry)}")
            result.created += 1

        self.finish(result)
        log.info(
            "import finished kind=%s created=%s skipped=%s failed=%s",
            self.kind.value,
            result.created,
            result.skipped,
            result.failed,
        )
        return result
