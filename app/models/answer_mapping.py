from sqlalchemy import JSON, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


class ExamAnswerMapping(Base, TimestampMixin):
    """Private grading key of a delivered paper: {question_id: correct label after shuffle}"""

    __tablename__ = "exam_answer_mappings"
    __table_args__ = (
        UniqueConstraint("test_code_id", "student_id", name="uq_exam_answer_mappings_code_student"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    test_code_id: Mapped[int] = mapped_column(
        ForeignKey("test_codes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id: Mapped[int] = mapped_column(Integer, nullable=False)
    mapping: Mapped[dict[str, str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
