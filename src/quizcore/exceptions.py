"""
Exceptions raised by quizcore.

Authoring problems are reported through ValidationResult and scoring never
raises, so these only cover loading records, gated persistence and misuse
of a quiz-taking session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationResult


class QuizCoreError(Exception):
    """Base class for quizcore errors."""
    pass


class QuestionRecordError(QuizCoreError):
    """Raised when a stored question record cannot be parsed."""

    def __init__(self, message: str, record_id: str | None = None):
        self.record_id = record_id
        prefix = f"Question {record_id}: " if record_id else ""
        super().__init__(f"{prefix}{message}")


class QuizFileError(QuizCoreError):
    """Raised when a quiz file is missing or not valid JSON."""
    pass


class QuestionIncompleteError(QuizCoreError):
    """Raised when persisting a question that did not validate as complete."""

    def __init__(self, question_id: str, result: "ValidationResult"):
        self.question_id = question_id
        self.result = result
        super().__init__(
            f"Question {question_id or '<new>'} is {result.status.value} "
            f"({result.completion_percentage}% complete)"
        )


class UnknownQuestionError(QuizCoreError):
    """Raised when a session is asked about a question it does not hold."""
    pass


class QuestionTypeMismatchError(QuizCoreError):
    """Raised when an interaction does not fit the question's type."""
    pass
