from app.models.answer_mapping import ExamAnswerMapping
from app.models.base import Base, get_db
from app.models.question import Question, QuestionType
from app.models.test_code import TestCode, TestCodeStatus
from app.models.test_result import TestResult

__all__ = [
    "Base",
    "TestCode",
    "TestCodeStatus",
    "Question",
    "QuestionType",
    "TestResult",
    "ExamAnswerMapping",
    "get_db",
]
