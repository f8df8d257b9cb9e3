from quickquiz.models.question import Difficulty, Question, QuestionTag, QuestionTopic, QuestionType
from quickquiz.models.user import CmsUser

__all__ = [
    "CmsUser",
    "Difficulty",
    "Question",
    "QuestionTag",
    "QuestionTopic",
    "QuestionType",
]
