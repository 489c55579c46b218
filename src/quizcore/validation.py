"""
Authoring validation.

Tells a quiz author how far along a question is and what is still wrong
with it. Every check counts as one requirement; the completion percentage is
met / total. Problems fall in two buckets:

- missing_fields: content not filled in yet (empty prompt, no options)
- errors: structural violations that block publishing even when every field
  is filled in (two correct options on a single choice, gaps in ordering
  positions, unresolved template placeholders)

Status priority: error > complete > partial > incomplete.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loguru import logger

from config import Settings, get_settings

from .questions import get_handler
from .questions.base import FieldError, RequirementTally
from .questions.checks import is_blank
from .types import Question, Quiz


class ValidationStatus(str, Enum):
    """Authoring status of a question or quiz."""
    INCOMPLETE = "incomplete"
    PARTIAL = "partial"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class ValidationResult:
    """Validation outcome for one question."""
    status: ValidationStatus
    errors: list[FieldError] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    completion_percentage: int = 0

    @property
    def is_complete(self) -> bool:
        return self.status == ValidationStatus.COMPLETE

    @classmethod
    def from_tally(cls, tally: RequirementTally) -> "ValidationResult":
        percentage = tally.percentage
        if tally.errors:
            status = ValidationStatus.ERROR
        elif percentage == 100:
            status = ValidationStatus.COMPLETE
        elif percentage > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.INCOMPLETE

        return cls(
            status=status,
            errors=list(tally.errors),
            missing_fields=list(tally.missing_fields),
            completion_percentage=percentage,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "isComplete": self.is_complete,
            "errors": [e.to_dict() for e in self.errors],
            "missingFields": list(self.missing_fields),
            "completionPercentage": self.completion_percentage,
        }


def validate_question(question: Question, settings: Settings | None = None) -> ValidationResult:
    """
    Check an authored question for completeness and structural problems.

    Never raises; everything wrong with the question ends up in the result.
    """
    settings = settings or get_settings()
    tally = RequirementTally()

    tally.check(not is_blank(question.text), missing="Question text")

    handler = get_handler(question.question_type)
    if handler is None:
        tally.add_error("questionType", f"Unsupported question type: {question.question_type}")
    else:
        handler.validate(question, tally, settings)

    result = ValidationResult.from_tally(tally)
    logger.debug(
        f"Validated {question.question_type.value} {question.id}: "
        f"{result.status.value} ({result.completion_percentage}%, {len(result.errors)} errors)"
    )
    return result


def is_question_complete(question: Question, settings: Settings | None = None) -> bool:
    return validate_question(question, settings).is_complete


def question_validation_summary(question: Question, settings: Settings | None = None) -> str:
    """One-line description of where the question stands."""
    result = validate_question(question, settings)

    if result.status == ValidationStatus.COMPLETE:
        return "Question is complete and ready to use"

    if result.status == ValidationStatus.ERROR:
        n = len(result.errors)
        return f"{n} error{'s' if n != 1 else ''} need{'s' if n == 1 else ''} to be fixed"

    if result.missing_fields:
        shown = ", ".join(result.missing_fields[:3])
        more = len(result.missing_fields) - 3
        suffix = f" and {more} more" if more > 0 else ""
        return f"{result.completion_percentage}% complete - missing: {shown}{suffix}"

    return f"{result.completion_percentage}% complete"


@dataclass
class QuizValidationResult:
    """Validation outcome for a whole quiz."""
    status: ValidationStatus
    errors: list[FieldError] = field(default_factory=list)
    questions: dict[str, ValidationResult] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.status == ValidationStatus.COMPLETE

    @property
    def complete_count(self) -> int:
        return sum(1 for r in self.questions.values() if r.is_complete)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "errors": [e.to_dict() for e in self.errors],
            "questions": {qid: r.to_dict() for qid, r in self.questions.items()},
        }


def validate_quiz(quiz: Quiz, settings: Settings | None = None) -> QuizValidationResult:
    """
    Validate quiz-level fields and every question.

    The quiz is in error if its own fields are wrong or any question is;
    complete only when every question is complete.
    """
    settings = settings or get_settings()
    errors: list[FieldError] = []

    if len(quiz.title.strip()) < settings.quiz_title_min_length:
        errors.append(FieldError(
            "title",
            f"Title must be at least {settings.quiz_title_min_length} characters",
        ))
    if not quiz.questions:
        errors.append(FieldError("questions", "At least one question is required"))

    seen: set[str] = set()
    for q in quiz.questions:
        if q.id in seen:
            errors.append(FieldError("questions", f"Duplicate question id '{q.id}'"))
        seen.add(q.id)

    results = {q.id: validate_question(q, settings) for q in quiz.questions}
    statuses = {r.status for r in results.values()}

    if errors or ValidationStatus.ERROR in statuses:
        status = ValidationStatus.ERROR
    elif statuses == {ValidationStatus.COMPLETE}:
        status = ValidationStatus.COMPLETE
    elif statuses - {ValidationStatus.INCOMPLETE}:
        status = ValidationStatus.PARTIAL
    else:
        status = ValidationStatus.INCOMPLETE

    return QuizValidationResult(status=status, errors=errors, questions=results)
