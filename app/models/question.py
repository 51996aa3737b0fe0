import enum

from sqlalchemy import Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin

OPTION_LETTERS = ("A", "B", "C", "D")


class QuestionType(str, enum.Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"


class Question(Base, TimestampMixin):
    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_pool", "subject_id", "class_level", "term_id", "session_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    subject_id: Mapped[int] = mapped_column(Integer, nullable=False)
    class_level: Mapped[str] = mapped_column(String(20), nullable=False)
    term_id: Mapped[int] = mapped_column(Integer, nullable=False)
    session_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # NULL is read as the default bucket (settings.default_question_assignment)
    question_assignment: Mapped[str | None] = mapped_column(String(50), default=None)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    option_a: Mapped[str | None] = mapped_column(Text, default=None)
    option_b: Mapped[str | None] = mapped_column(Text, default=None)
    option_c: Mapped[str | None] = mapped_column(Text, default=None)
    option_d: Mapped[str | None] = mapped_column(Text, default=None)
    correct_answer: Mapped[str] = mapped_column(String(1), nullable=False)
    question_type: Mapped[QuestionType] = mapped_column(
        Enum(
            QuestionType,
            name="question_type",
            native_enum=False,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=QuestionType.MULTIPLE_CHOICE,
    )
    created_by: Mapped[int | None] = mapped_column(Integer, default=None)

    def option_for(self, letter: str) -> str | None:
        """Option text stored under the given letter"""
        return getattr(self, f"option_{letter.lower()}", None)
