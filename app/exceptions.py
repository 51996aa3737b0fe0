"""Custom exception classes"""


class BaseAppError(Exception):
    """Base application error"""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class AuthenticationError(BaseAppError):
    """Missing or invalid credentials (401)"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class ForbiddenError(BaseAppError):
    """Role or ownership mismatch (403)"""

    def __init__(self, message: str = "You are not allowed to perform this action"):
        super().__init__(message, status_code=403)


class TestCodeNotFoundError(BaseAppError):
    """Unknown test code (404)"""

    __test__ = False

    def __init__(self, code: str):
        super().__init__(f"Test code not found: {code}", status_code=404)


class BatchNotFoundError(BaseAppError):
    """Unknown test code batch (404)"""

    def __init__(self, batch_id: str):
        super().__init__(f"Test code batch not found: {batch_id}", status_code=404)


class TestCodeInvalidStateError(BaseAppError):
    """Code is inactive, not activated, or not in the expected lifecycle state (400)"""

    __test__ = False

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class TestCodeExpiredError(BaseAppError):
    """Code is past its expiry timestamp (410)"""

    __test__ = False

    def __init__(self, message: str = "Test code has expired"):
        super().__init__(message, status_code=410)


class TestCodeInUseError(BaseAppError):
    """Code has been redeemed and the attempt is in progress (409)"""

    __test__ = False

    def __init__(self, message: str = "This test code is currently being used by another student"):
        super().__init__(message, status_code=409)


class TestCodeConsumedError(BaseAppError):
    """Code has been used up or the attempt is already graded (409)"""

    __test__ = False

    def __init__(self, message: str = "This test code has already been used and is permanently deactivated"):
        super().__init__(message, status_code=409)


class ConflictError(BaseAppError):
    """State changed underneath the request or the mutation is blocked (409)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class RedemptionConflictError(ConflictError):
    """Another redeemer won the compare-and-swap"""

    def __init__(self, message: str = "Test code is no longer available"):
        super().__init__(message)


class BatchLockedError(ConflictError):
    """Batch mutation blocked because a code already produced a result"""

    def __init__(self, batch_id: str, action: str):
        super().__init__(
            f"Cannot {action} batch {batch_id}: one or more codes have already been used to sit a test"
        )


class DuplicateAttemptError(ConflictError):
    """Student already sat this code or an overlapping exam"""

    def __init__(self, message: str):
        super().__init__(message)


class InsufficientQuestionsError(BaseAppError):
    """Question pool is smaller than the paper requires (422)"""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient questions available for this test. Requested: {requested}, available: {available}",
            status_code=422,
        )


class InvalidQuestionDataError(BaseAppError):
    """Stored question cannot be delivered, e.g. correct answer points at an empty option (500)"""

    def __init__(self, question_id: int, reason: str):
        self.question_id = question_id
        super().__init__(f"Question {question_id} cannot be delivered: {reason}", status_code=500)


class InvalidRequestError(BaseAppError):
    """Request is well-formed but not acceptable (400)"""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class IndividualCodeMutationError(BaseAppError):
    """Single-code activation/deletion is not supported (400)"""

    def __init__(self, action: str = "activation"):
        super().__init__(
            f"Individual code {action} is not allowed. Use the batch endpoint instead.",
            status_code=400,
        )
