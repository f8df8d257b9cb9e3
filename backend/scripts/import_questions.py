"""Import questions from a JSON file.

    python scripts/import_questions.py [data/questions.json] [--dry-run] [--force]

Run the topic and tag imports first: "topic" and "tags" are matched by name
(case-insensitive) against what is already published. Unknown names are
reported at the end and the question is created without that link.
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
    sys.exit(main(EntityKind.question))
