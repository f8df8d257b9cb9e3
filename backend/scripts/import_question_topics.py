"""Import question topics from a JSON file.

    python scripts/import_question_topics.py [data/question-topics.json] [--dry-run] [--force]

Each element needs a "name"; "description" may be a plain string (stored as a
single paragraph) or a list of rich-text blocks.
"""
from __future__ import annotations

import os
import pathlib
import sys

# Ensure imports work when running from any CWD and in Docker (/app)
_HERE = pathlib.Path(__file__).resolve()
_BACKEND_ROOT = _HERE.parents[1]
sys.path.insert(0, str(_BACKEND_ROOT))
sys.path.insert(0, "/app")
sys.path.insert(0, os.getcwd())

from quickquiz.importers.cli import main
from quickquiz.services.content_store import EntityKind


if __name__ == "__main__":
    sys.exit(main(EntityKind.topic))
