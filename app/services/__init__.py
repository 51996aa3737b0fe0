from app.services.batch_service import (
    activate_batch,
    create_batch,
    delete_batch,
    get_batch,
    list_batch_codes,
    list_batches,
    update_test_code,
)
from app.services.duplicate_guard import ensure_can_attempt
from app.services.exam_assembler import (
    assemble_exam,
    question_pool_filter,
    shuffle_question,
)
from app.services.exam_delivery_service import take_test
from app.services.test_code_service import (
    cancel_redemption,
    complete_attempt,
    redeem_test_code,
)

__all__ = [
    "redeem_test_code",
    "cancel_redemption",
    "complete_attempt",
    "take_test",
    "ensure_can_attempt",
    "assemble_exam",
    "question_pool_filter",
    "shuffle_question",
    "create_batch",
    "list_batches",
    "get_batch",
    "list_batch_codes",
    "activate_batch",
    "delete_batch",
    "update_test_code",
]
