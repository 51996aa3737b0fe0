from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.answer_mapping import ExamAnswerMapping


def _insert_for(session: AsyncSession):
    """Dialect-specific INSERT supporting ON CONFLICT"""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert
    return postgresql.insert


async def put_answer_mapping(
    session: AsyncSession,
    test_code_id: int,
    student_id: int,
    mapping: dict[int, str],
) -> None:
    """Store the grading key, replacing any previous one for the same (test, student)"""
    payload = {str(question_id): label for question_id, label in mapping.items()}
    insert = _insert_for(session)
    stmt = insert(ExamAnswerMapping).values(
        test_code_id=test_code_id,
        student_id=student_id,
        mapping=payload,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[ExamAnswerMapping.test_code_id, ExamAnswerMapping.student_id],
        set_={"mapping": stmt.excluded.mapping, "updated_at": func.now()},
    )
    await session.execute(stmt)


async def get_answer_mapping(
    session: AsyncSession,
    test_code_id: int,
    student_id: int,
) -> dict[int, str] | None:
    """Grading key of the most recently delivered paper, or None"""
    stmt = select(ExamAnswerMapping.mapping).where(
        ExamAnswerMapping.test_code_id == test_code_id,
        ExamAnswerMapping.student_id == student_id,
    )
    mapping = await session.scalar(stmt)
    if mapping is None:
        return None
    return {int(question_id): label for question_id, label in mapping.items()}


async def delete_answer_mapping(
    session: AsyncSession,
    test_code_id: int,
    student_id: int,
) -> bool:
    """Drop the grading key (caller commits)"""
    stmt = delete(ExamAnswerMapping).where(
        ExamAnswerMapping.test_code_id == test_code_id,
        ExamAnswerMapping.student_id == student_id,
    )
    result = await session.execute(stmt)
    return result.rowcount > 0
