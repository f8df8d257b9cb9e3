from quickquiz.importers.base import BulkImporter, ImportOptions, ImportResult
from quickquiz.importers.questions import QuestionImporter
from quickquiz.importers.references import ReferenceCache
from quickquiz.importers.tags import TagImporter
from quickquiz.importers.topics import TopicImporter

__all__ = [
    "BulkImporter",
    "ImportOptions",
    "ImportResult",
    "QuestionImporter",
    "ReferenceCache",
    "TagImporter",
    "TopicImporter",
]
