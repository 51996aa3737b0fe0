import logging
import secrets
import string
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.crud import question as question_crud
from app.crud import test_code as test_code_crud
from app.crud import test_result as test_result_crud
from app.exceptions import (
    BatchLockedError,
    BatchNotFoundError,
    ConflictError,
    InsufficientQuestionsError,
    InvalidRequestError,
    TestCodeNotFoundError,
)
from app.models.test_code import TestCodeStatus
from app.schemas import test_code as test_code_schema
from app.services import exam_assembler
from app.services.test_code_service import utcnow

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_GENERATION_ATTEMPTS = 20


def generate_code(length: int | None = None) -> str:
    """Random uppercase alphanumeric token"""
    length = length or settings.test_code_length
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def _generate_unique_codes(session: AsyncSession, count: int) -> list[str]:
    codes: list[str] = []
    taken: set[str] = set()
    for _ in range(count):
        for _attempt in range(MAX_CODE_GENERATION_ATTEMPTS):
            code = generate_code()
            if code in taken:
                continue
            if not await test_code_crud.code_exists(session, code):
                break
        else:
            raise ConflictError("Could not generate a unique test code, please try again")
        taken.add(code)
        codes.append(code)
    return codes


async def create_batch(
    session: AsyncSession,
    request: test_code_schema.BatchCreateRequest,
    admin_id: int,
) -> test_code_schema.BatchCreateResponse:
    """Generate a batch of single-use codes sharing one batch id

    Codes start active but not activated; an admin activates the batch later.
    """
    if request.count > settings.max_codes_per_batch:
        raise InvalidRequestError(f"Count must be between 1 and {settings.max_codes_per_batch}")

    pool = exam_assembler.question_pool_filter(request)
    available = await question_crud.count_eligible_questions(session, pool)
    if request.total_questions > available:
        raise InsufficientQuestionsError(request.total_questions, available)

    batch_id = f"batch_{uuid.uuid4().hex}"
    codes = await _generate_unique_codes(session, request.count)

    rows = []
    for i, code in enumerate(codes):
        title = f"{request.title} ({i + 1})" if request.count > 1 else request.title
        rows.append({
            "code": code,
            "title": title,
            "subject_id": request.subject_id,
            "class_level": request.class_level,
            "term_id": request.term_id,
            "session_id": request.session_id,
            "test_type": request.test_type,
            "duration_minutes": request.duration_minutes,
            "total_questions": request.total_questions,
            "score_per_question": request.score_per_question,
            "pass_score": request.pass_score,
            "expires_at": request.expires_at,
            "batch_id": batch_id,
            "is_active": True,
            "is_activated": False,
            "status": TestCodeStatus.ACTIVE,
            "created_by": admin_id,
        })

    try:
        test_codes = await test_code_crud.create_test_codes(session, rows)
        created = [
            test_code_schema.CreatedCode(id=tc.id, code=tc.code, title=tc.title)
            for tc in test_codes
        ]
        await session.commit()
    except IntegrityError as e:
        logger.warning(f"Batch creation collided with an existing code: {e.__class__.__name__}")
        await session.rollback()
        raise ConflictError("Could not generate a unique test code, please try again")
    except Exception as e:
        logger.error(f"Batch creation failed: {e}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Test code batch created: batch_id={batch_id}, count={len(created)}, admin_id={admin_id}")
    return test_code_schema.BatchCreateResponse(batch_id=batch_id, count=len(created), codes=created)


async def list_batches(
    session: AsyncSession,
    subject_id: int | None = None,
    class_level: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> test_code_schema.BatchListResponse:
    """Paged batch overview with total and used code counts"""
    rows = await test_code_crud.list_batches(session, subject_id, class_level, limit, offset)
    total = await test_code_crud.count_batches(session, subject_id, class_level)
    return test_code_schema.BatchListResponse(
        batches=[test_code_schema.BatchSummary(**row) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


async def get_batch(session: AsyncSession, batch_id: str) -> test_code_schema.BatchSummary:
    summary = await test_code_crud.get_batch_summary(session, batch_id)
    if summary is None:
        raise BatchNotFoundError(batch_id)
    return test_code_schema.BatchSummary(**summary)


async def list_batch_codes(
    session: AsyncSession,
    batch_id: str,
) -> test_code_schema.BatchCodeListResponse:
    """Codes of a batch, each flagged with whether it produced a result"""
    rows = await test_code_crud.get_batch_codes_with_result_flag(session, batch_id)
    if not rows:
        raise BatchNotFoundError(batch_id)

    codes = []
    for test_code, has_result in rows:
        response = test_code_schema.TestCodeResponse.model_validate(test_code)
        response.has_result = has_result
        codes.append(response)
    return test_code_schema.BatchCodeListResponse(batch_id=batch_id, codes=codes, total=len(codes))


async def activate_batch(
    session: AsyncSession,
    batch_id: str,
    is_activated: bool,
) -> test_code_schema.BatchActivationResponse:
    """Toggle is_activated on every code of a batch, all or nothing

    Re-activating a batch in which any code already produced a result is a
    conflict. Repeating the same call is harmless.
    """
    if await test_code_crud.count_codes_in_batch(session, batch_id) == 0:
        raise BatchNotFoundError(batch_id)

    if is_activated and await test_code_crud.batch_has_results(session, batch_id):
        logger.warning(f"Batch activation blocked: batch_id={batch_id} has results")
        raise BatchLockedError(batch_id, "activate")

    activated_at = utcnow() if is_activated else None
    try:
        updated = await test_code_crud.set_batch_activation(session, batch_id, is_activated, activated_at)
        if updated == 0:
            # The guard inside the UPDATE saw a result the pre-check missed
            await session.rollback()
            raise BatchLockedError(batch_id, "activate")
        await session.commit()
    except BatchLockedError:
        raise
    except Exception as e:
        logger.error(f"Batch activation failed: batch_id={batch_id}, error={e}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Batch activation updated: batch_id={batch_id}, is_activated={is_activated}, codes={updated}")
    return test_code_schema.BatchActivationResponse(
        batch_id=batch_id,
        is_activated=is_activated,
        updated_codes=updated,
    )


async def delete_batch(
    session: AsyncSession,
    batch_id: str,
) -> test_code_schema.BatchDeleteResponse:
    """Delete a whole batch; refused once any code produced a result"""
    if await test_code_crud.count_codes_in_batch(session, batch_id) == 0:
        raise BatchNotFoundError(batch_id)

    if await test_code_crud.batch_has_results(session, batch_id):
        logger.warning(f"Batch deletion blocked: batch_id={batch_id} has results")
        raise BatchLockedError(batch_id, "delete")

    try:
        deleted = await test_code_crud.delete_batch(session, batch_id)
        if deleted == 0:
            await session.rollback()
            raise BatchLockedError(batch_id, "delete")
        await session.commit()
    except BatchLockedError:
        raise
    except Exception as e:
        logger.error(f"Batch deletion failed: batch_id={batch_id}, error={e}", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Test code batch deleted: batch_id={batch_id}, codes={deleted}")
    return test_code_schema.BatchDeleteResponse(batch_id=batch_id, deleted_codes=deleted)


async def update_test_code(
    session: AsyncSession,
    test_code_id: int,
    request: test_code_schema.TestCodeUpdateRequest,
) -> test_code_schema.TestCodeResponse:
    """Edit descriptive fields of a code that nobody has redeemed yet"""
    test_code = await test_code_crud.get_test_code_by_id(session, test_code_id)
    if not test_code:
        raise TestCodeNotFoundError(str(test_code_id))

    if TestCodeStatus(test_code.status) != TestCodeStatus.ACTIVE or await test_result_crud.code_has_results(
        session, test_code_id
    ):
        raise ConflictError("Test code has already been used and can no longer be modified")

    changes = request.changes()
    if "total_questions" in changes:
        pool = exam_assembler.question_pool_filter(test_code)
        available = await question_crud.count_eligible_questions(session, pool)
        if changes["total_questions"] > available:
            raise InsufficientQuestionsError(changes["total_questions"], available)

    test_code = await test_code_crud.update_test_code(session, test_code, changes)
    logger.info(f"Test code updated: test_code_id={test_code_id}, fields={sorted(changes)}")
    return test_code_schema.TestCodeResponse.model_validate(test_code)
