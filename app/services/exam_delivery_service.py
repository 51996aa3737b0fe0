import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import answer_mapping as answer_mapping_crud
from app.crud import question as question_crud
from app.crud import test_code as test_code_crud
from app.crud import test_result as test_result_crud
from app.exceptions import (
    ForbiddenError,
    InsufficientQuestionsError,
    InvalidQuestionDataError,
    TestCodeConsumedError,
    TestCodeInvalidStateError,
    TestCodeNotFoundError,
)
from app.models.test_code import TestCodeStatus
from app.schemas import exam as exam_schema
from app.services import exam_assembler
from app.services.test_code_service import clean_code

logger = logging.getLogger(__name__)


async def _release_code(session: AsyncSession, test_code_id: int, student_id: int) -> None:
    """Compensating action: put a redeemed code back to active after a failed delivery"""
    await session.rollback()
    try:
        reverted = await test_code_crud.revert_redemption(session, test_code_id, student_id)
        await answer_mapping_crud.delete_answer_mapping(session, test_code_id, student_id)
        await session.commit()
    except Exception as e:
        logger.error(
            f"Compensating revert failed: test_code_id={test_code_id}, student_id={student_id}, error={e}",
            exc_info=True,
        )
        await session.rollback()
        raise
    logger.warning(
        f"Delivery failed, code released: test_code_id={test_code_id}, "
        f"student_id={student_id}, reverted={reverted}"
    )


async def take_test(
    session: AsyncSession,
    code: str,
    student_id: int,
) -> exam_schema.TakeTestResponse:
    """Deliver the randomized paper for a code the student has redeemed

    Re-delivery re-shuffles and overwrites the stored answer mapping, so the
    mapping always matches the last paper committed. With overlapping requests
    the last commit wins and only that response is gradable; clients keep the
    latest paper. If the paper cannot be assembled the code goes back to active.
    """
    code = clean_code(code)

    test_code = await test_code_crud.get_test_code_by_code(session, code)
    if not test_code:
        raise TestCodeNotFoundError(code)

    if test_code.used_by is not None and test_code.used_by != student_id:
        logger.warning(
            f"Delivery rejected: code={code} redeemed by student_id={test_code.used_by}, "
            f"requested by student_id={student_id}"
        )
        raise ForbiddenError("This test code was redeemed by another student")

    status = TestCodeStatus(test_code.status)
    if status == TestCodeStatus.ACTIVE:
        raise TestCodeInvalidStateError("Test code has not been redeemed. Validate the code before starting the test")
    if status == TestCodeStatus.USED:
        raise TestCodeConsumedError()
    if not test_code.is_active or not test_code.is_activated:
        logger.warning(f"Delivery rejected: code={code} was deactivated after redemption, student_id={student_id}")
        raise TestCodeInvalidStateError("Test code has been deactivated")

    if await test_result_crud.has_result_for_code(session, test_code.id, student_id):
        raise TestCodeConsumedError("You have already completed this test")

    test_code_id = test_code.id
    requested = test_code.total_questions
    paper_header = {
        "id": test_code_id,
        "title": test_code.title,
        "subject_id": test_code.subject_id,
        "class_level": test_code.class_level,
        "test_type": test_code.test_type,
        "duration_minutes": test_code.duration_minutes,
    }

    pool = exam_assembler.question_pool_filter(test_code)
    try:
        questions = await question_crud.fetch_eligible_questions(session, pool, requested)
        if len(questions) < requested:
            raise InsufficientQuestionsError(requested, len(questions))
        exam = exam_assembler.assemble_exam(questions)
    except (InsufficientQuestionsError, InvalidQuestionDataError) as e:
        logger.warning(f"Exam assembly failed: code={code}, student_id={student_id}, error={e.message}")
        await _release_code(session, test_code_id, student_id)
        raise

    try:
        await answer_mapping_crud.put_answer_mapping(session, test_code_id, student_id, exam.answer_mapping)
        await session.commit()
    except Exception as e:
        logger.error(f"Storing answer mapping failed: code={code}, student_id={student_id}, error={e}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Exam delivered: code={code}, student_id={student_id}, question_count={len(exam.questions)}")
    return exam_schema.TakeTestResponse(
        **paper_header,
        questions=exam.questions,
        total=len(exam.questions),
    )
