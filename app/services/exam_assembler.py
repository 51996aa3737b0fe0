import logging
import random
from dataclasses import dataclass, field
from typing import Sequence

from app.core.config import settings
from app.crud.question import QuestionPoolFilter
from app.exceptions import InvalidQuestionDataError
from app.models.question import OPTION_LETTERS, Question, QuestionType
from app.models.test_code import TestCode
from app.schemas.exam import ExamQuestion
from app.schemas.test_code import BatchCreateRequest

logger = logging.getLogger(__name__)

TRUE_FALSE_LETTERS = OPTION_LETTERS[:2]

# OS entropy; shuffle() is Fisher-Yates
_system_random = random.SystemRandom()


@dataclass
class AssembledExam:
    """Sanitized paper plus its private grading key"""
    questions: list[ExamQuestion] = field(default_factory=list)
    answer_mapping: dict[int, str] = field(default_factory=dict)


def question_pool_filter(source: TestCode | BatchCreateRequest) -> QuestionPoolFilter:
    """Question pool a code (or a batch about to be created) draws from

    Aggregate test types span every configured bucket; a specific bucket only
    draws its own questions.
    """
    test_type = source.test_type or settings.default_question_assignment
    if settings.is_aggregate_test_type(test_type):
        buckets = tuple(settings.aggregate_question_buckets)
    else:
        buckets = (test_type,)
    return QuestionPoolFilter(
        subject_id=source.subject_id,
        class_level=source.class_level,
        term_id=source.term_id,
        session_id=source.session_id,
        buckets=buckets,
        default_bucket=settings.default_question_assignment,
    )


def _is_populated(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def shuffle_question(
    question: Question,
    rng: random.Random | None = None,
) -> tuple[ExamQuestion, str]:
    """Shuffle the populated options of one question

    Returns the student-facing question (letters re-assigned A, B, C, D in
    order, unused letters None, no correct answer) and the letter that now
    holds the originally correct option text.
    """
    rng = rng or _system_random
    question_type = QuestionType(question.question_type)

    if question_type == QuestionType.TRUE_FALSE:
        candidate_letters = TRUE_FALSE_LETTERS
    else:
        candidate_letters = OPTION_LETTERS

    populated = [
        question.option_for(letter)
        for letter in candidate_letters
        if _is_populated(question.option_for(letter))
    ]
    if len(populated) < 2:
        raise InvalidQuestionDataError(question.id, "fewer than two populated options")

    original_letter = (question.correct_answer or "").strip().upper()
    if original_letter not in candidate_letters:
        raise InvalidQuestionDataError(
            question.id, f"correct answer '{question.correct_answer}' is not a valid option letter"
        )
    correct_text = question.option_for(original_letter)
    if not _is_populated(correct_text):
        raise InvalidQuestionDataError(
            question.id, f"correct answer '{original_letter}' points at an empty option"
        )

    shuffled = list(populated)
    rng.shuffle(shuffled)

    options: dict[str, str | None] = dict.fromkeys(OPTION_LETTERS)
    for letter, text in zip(OPTION_LETTERS, shuffled):
        options[letter] = text

    # Matched by value: the correct text follows its option wherever it landed
    new_correct = next(letter for letter in OPTION_LETTERS if options[letter] == correct_text)

    exam_question = ExamQuestion(
        id=question.id,
        question_text=question.question_text,
        option_a=options["A"],
        option_b=options["B"],
        option_c=options["C"],
        option_d=options["D"],
        question_type=question_type.value,
    )
    return exam_question, new_correct


def assemble_exam(
    questions: Sequence[Question],
    rng: random.Random | None = None,
) -> AssembledExam:
    """Build a randomized paper and its answer mapping"""
    rng = rng or _system_random

    ordered = list(questions)
    rng.shuffle(ordered)

    exam = AssembledExam()
    for question in ordered:
        exam_question, correct_label = shuffle_question(question, rng)
        exam.questions.append(exam_question)
        exam.answer_mapping[question.id] = correct_label

    logger.debug(f"Assembled exam: question_count={len(exam.questions)}")
    return exam
