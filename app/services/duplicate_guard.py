import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import test_result as test_result_crud
from app.exceptions import DuplicateAttemptError
from app.models.test_code import TestCode

logger = logging.getLogger(__name__)


async def ensure_can_attempt(
    session: AsyncSession,
    test_code: TestCode,
    student_id: int,
) -> None:
    """Reject a student who already sat this code or an overlapping exam

    Overlap is scoped by subject, class level and term. An aggregate test type
    (e.g. "Examination") overlaps with every prior attempt in that scope; a
    specific bucket (e.g. "First CA") only with prior attempts of the same bucket.
    Read-only: runs before any state change.
    """
    if await test_result_crud.has_result_for_code(session, test_code.id, student_id):
        logger.warning(
            f"Duplicate attempt rejected: code={test_code.code}, student_id={student_id}, reason=same code"
        )
        raise DuplicateAttemptError("You have already taken this test")

    test_type = test_code.test_type or settings.default_question_assignment
    aggregate = settings.is_aggregate_test_type(test_type)

    prior = await test_result_crud.find_overlapping_result(
        session,
        student_id=student_id,
        subject_id=test_code.subject_id,
        class_level=test_code.class_level,
        term_id=test_code.term_id,
        test_type=None if aggregate else test_type,
    )
    if prior is not None:
        logger.warning(
            f"Duplicate attempt rejected: code={test_code.code}, student_id={student_id}, "
            f"test_type={test_type}, prior_result_id={prior.id}"
        )
        if aggregate:
            raise DuplicateAttemptError(
                "You have already taken a test for this subject, class and term"
            )
        raise DuplicateAttemptError(
            f"You have already taken a {test_type} test for this subject, class and term"
        )
