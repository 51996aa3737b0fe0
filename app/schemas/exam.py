from pydantic import BaseModel, Field


class ExamQuestion(BaseModel):
    """Student-facing question: shuffled options, no correct answer"""
    id: int
    question_text: str
    option_a: str | None = None
    option_b: str | None = None
    option_c: str | None = None
    option_d: str | None = None
    question_type: str

    model_config = {"extra": "forbid"}


class TakeTestResponse(BaseModel):
    """Delivered exam paper"""
    id: int = Field(..., description="Test code id")
    title: str
    subject_id: int
    class_level: str
    test_type: str
    duration_minutes: int
    questions: list[ExamQuestion]
    total: int
