from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import CurrentUser, require_student
from app.models.base import get_db
from app.schemas import exam as exam_schema, test_code as test_code_schema
from app.services import exam_delivery_service, test_code_service

router = APIRouter(prefix="/student", tags=["student"])


@router.post("/test-codes/redeem", response_model=test_code_schema.TestCodeSnapshot)
async def redeem_test_code(
    request: test_code_schema.TestCodeRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_student),
):
    """Redeem a test code API"""
    return await test_code_service.redeem_test_code(db, request.test_code, user.id)


@router.get("/take-test", response_model=exam_schema.TakeTestResponse)
async def take_test(
    test_code: str = Query(..., min_length=1, max_length=32, description="Redeemed test code"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_student),
):
    """Exam paper delivery API"""
    return await exam_delivery_service.take_test(db, test_code, user.id)


@router.post("/test-codes/cancel", response_model=test_code_schema.CancelTestCodeResponse)
async def cancel_test_code(
    request: test_code_schema.TestCodeRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_student),
):
    """Cancel a redemption API"""
    return await test_code_service.cancel_redemption(db, request.test_code, user.id)
