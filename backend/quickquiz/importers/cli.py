from __future__ import annotations

import argparse
import logging
import pathlib

from quickquiz.core.config import settings
from quickquiz.importers.base import BulkImporter, ImportOptions, ImportResult, emit
from quickquiz.importers.questions import QuestionImporter
from quickquiz.importers.tags import TagImporter
from quickquiz.importers.topics import TopicImporter
from quickquiz.services.content_store import EntityKind, get_content_store


log = logging.getLogger(__name__)

IMPORTERS: dict[EntityKind, type[BulkImporter]] = {
    EntityKind.topic: TopicImporter,
    EntityKind.tag: TagImporter,
    EntityKind.question: QuestionImporter,
}

DEFAULT_FILES: dict[EntityKind, str] = {
    EntityKind.topic: "question-topics.json",
    EntityKind.tag: "question-tags.json",
    EntityKind.question: "questions.json",
}

TITLES: dict[EntityKind, str] = {
    EntityKind.topic: "Question Topics Import",
    EntityKind.tag: "Question Tags Import",
    EntityKind.question: "Questions Import",
}


# Relative IMPORT_DATA_DIR values are resolved against backend/.
BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[2]


def default_data_file(kind: EntityKind) -> pathlib.Path:
    data_dir = pathlib.Path(settings.import_data_dir)
    if not data_dir.is_absolute():
        data_dir = BACKEND_ROOT / data_dir
    return data_dir / DEFAULT_FILES[kind]


def build_parser(kind: EntityKind) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=f"Import {kind.value} records from a JSON file")
    p.add_argument("data_file", nargs="?", default=None, help=f"Path to JSON file (default: {default_data_file(kind)})")
    p.add_argument("--dry-run", action="store_true", help="Show what would be created without writing anything")
    p.add_argument("--force", action="store_true", help="Do not skip records that already exist")
    return p


def print_summary(result: ImportResult) -> None:
    emit()
    emit("=" * 50)
    emit("Import Summary:")
    emit(f"  Created: {result.created}")
    emit(f"  Skipped: {result.skipped}")
    emit(f"  Failed:  {result.failed}")
    emit("=" * 50)


def run_import(kind: EntityKind, *, data_file: pathlib.Path, options: ImportOptions) -> ImportResult:
    store = get_content_store()
    try:
        return IMPORTERS[kind](store).run(data_file, options)
    finally:
        store.close()


def main(kind: EntityKind, argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)

    args = build_parser(kind).parse_args(argv)
    data_file = pathlib.Path(args.data_file) if args.data_file else default_data_file(kind)

    emit("=" * 50)
    emit(TITLES[kind])
    emit("=" * 50)
    emit(f"Data file: {data_file}")
    emit(f"Content store: {settings.content_store}")

    try:
        result = run_import(
            kind,
            data_file=data_file,
            options=ImportOptions(skip_existing=not args.force, dry_run=bool(args.dry_run)),
        )
    except Exception as e:
        log.exception("import failed")
        emit(f"\nImport failed: {e}")
        return 1

    print_summary(result)
    return 0
