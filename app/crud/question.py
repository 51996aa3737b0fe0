from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.question import Question


@dataclass(frozen=True)
class QuestionPoolFilter:
    """Eligibility filter for one exam paper

    ``buckets`` lists the accepted question assignments; a NULL assignment
    counts as ``default_bucket``.
    """
    subject_id: int
    class_level: str
    term_id: int
    session_id: int
    buckets: tuple[str, ...]
    default_bucket: str

    def conditions(self) -> list:
        return [
            Question.subject_id == self.subject_id,
            Question.class_level == self.class_level,
            Question.term_id == self.term_id,
            Question.session_id == self.session_id,
            func.coalesce(Question.question_assignment, self.default_bucket).in_(self.buckets),
        ]


async def count_eligible_questions(session: AsyncSession, pool: QuestionPoolFilter) -> int:
    """Number of questions a paper can be drawn from"""
    count_stmt = select(func.count(Question.id)).where(*pool.conditions())
    total_count = await session.scalar(count_stmt)
    return total_count or 0


async def fetch_eligible_questions(
    session: AsyncSession,
    pool: QuestionPoolFilter,
    limit: int,
) -> Sequence[Question]:
    """Random sample of eligible questions (DB-level ORDER BY RANDOM())"""
    stmt = (
        select(Question)
        .where(*pool.conditions())
        .order_by(func.random())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return result.scalars().all()
