from app.schemas.exam import (
    ExamQuestion,
    TakeTestResponse,
)
from app.schemas.test_code import (
    BatchActivationRequest,
    BatchActivationResponse,
    BatchCodeListResponse,
    BatchCreateRequest,
    BatchCreateResponse,
    BatchDeleteResponse,
    BatchListResponse,
    BatchSummary,
    CancelTestCodeResponse,
    CreatedCode,
    TestCodeRequest,
    TestCodeResponse,
    TestCodeSnapshot,
    TestCodeUpdateRequest,
    normalize_test_code,
    parse_activation_flag,
)

__all__ = [
    "ExamQuestion",
    "TakeTestResponse",
    "TestCodeRequest",
    "TestCodeSnapshot",
    "CancelTestCodeResponse",
    "BatchCreateRequest",
    "BatchCreateResponse",
    "CreatedCode",
    "BatchActivationRequest",
    "BatchActivationResponse",
    "BatchDeleteResponse",
    "TestCodeResponse",
    "BatchCodeListResponse",
    "BatchSummary",
    "BatchListResponse",
    "TestCodeUpdateRequest",
    "normalize_test_code",
    "parse_activation_flag",
]
