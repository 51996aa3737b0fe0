from app.crud.answer_mapping import (
    delete_answer_mapping,
    get_answer_mapping,
    put_answer_mapping,
)
from app.crud.question import (
    QuestionPoolFilter,
    count_eligible_questions,
    fetch_eligible_questions,
)
from app.crud.test_code import (
    batch_has_results,
    code_exists,
    count_batches,
    count_codes_in_batch,
    create_test_codes,
    delete_batch,
    get_batch_codes_with_result_flag,
    get_batch_summary,
    get_test_code_by_code,
    get_test_code_by_id,
    list_batches,
    mark_test_code_used,
    redeem_test_code,
    revert_redemption,
    set_batch_activation,
    update_test_code,
)
from app.crud.test_result import (
    code_has_results,
    find_overlapping_result,
    has_result_for_code,
)

__all__ = [
    "get_test_code_by_code",
    "get_test_code_by_id",
    "code_exists",
    "redeem_test_code",
    "revert_redemption",
    "mark_test_code_used",
    "count_codes_in_batch",
    "batch_has_results",
    "set_batch_activation",
    "delete_batch",
    "create_test_codes",
    "get_batch_codes_with_result_flag",
    "list_batches",
    "count_batches",
    "get_batch_summary",
    "update_test_code",
    "QuestionPoolFilter",
    "count_eligible_questions",
    "fetch_eligible_questions",
    "has_result_for_code",
    "code_has_results",
    "find_overlapping_result",
    "put_answer_mapping",
    "get_answer_mapping",
    "delete_answer_mapping",
]
