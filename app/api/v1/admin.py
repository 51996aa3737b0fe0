from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import CurrentUser, require_admin
from app.exceptions import IndividualCodeMutationError
from app.models.base import get_db
from app.schemas import test_code as test_code_schema
from app.services import batch_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/test-code-batches",
    response_model=test_code_schema.BatchCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_test_code_batch(
    request: test_code_schema.BatchCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Test code batch creation API"""
    return await batch_service.create_batch(db, request, user.id)


@router.get("/test-code-batches", response_model=test_code_schema.BatchListResponse)
async def list_test_code_batches(
    subject_id: int | None = Query(None),
    class_level: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Batch list API"""
    return await batch_service.list_batches(db, subject_id, class_level, limit, offset)


@router.get("/test-code-batches/{batch_id}", response_model=test_code_schema.BatchSummary)
async def get_test_code_batch(
    batch_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Batch overview API"""
    return await batch_service.get_batch(db, batch_id)


@router.get("/test-code-batches/{batch_id}/codes",response_model=test_code_schema.BatchCodeListResponse)
async def list_batch_codes(
    batch_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Batch code list API"""
    return await batch_service.list_batch_codes(db, batch_id)


@router.patch(
    "/test-code-batches/{batch_id}/activation",
    response_model=test_code_schema.BatchActivationResponse,
)
async def set_batch_activation(
    batch_id: str,
    request: test_code_schema.BatchActivationRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Batch activation toggle API"""
    return await batch_service.activate_batch(db, batch_id, request.is_activated)


@router.delete("/test-code-batches/{batch_id}", response_model=test_code_schema.BatchDeleteResponse)
async def delete_test_code_batch(
    batch_id: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Batch deletion API"""
    return await batch_service.delete_batch(db, batch_id)


@router.patch("/test-codes/{test_code_id}", response_model=test_code_schema.TestCodeResponse)
async def update_test_code(
    test_code_id: int,
    request: test_code_schema.TestCodeUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_admin),
):
    """Descriptive field edit API for a single unused code"""
    return await batch_service.update_test_code(db, test_code_id, request)


@router.patch("/test-codes/{test_code_id}/activation")
async def set_test_code_activation(
    test_code_id: int,
    user: CurrentUser = Depends(require_admin),
):
    """Activation is batch-level only"""
    raise IndividualCodeMutationError("activation")


@router.delete("/test-codes/{test_code_id}")
async def delete_test_code(
    test_code_id: int,
    user: CurrentUser = Depends(require_admin),
):
    """Deletion is batch-level only"""
    raise IndividualCodeMutationError("deletion")
