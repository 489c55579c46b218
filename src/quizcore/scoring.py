"""
Scoring engine.

score_question() turns one (question, answer) pair into a ScoreResult by
dispatching to the question type's handler. It is a pure function: no I/O,
no state, same input -> same output. It never raises for missing, empty or
oddly shaped answers; those simply score 0.

score_quiz() scores every question of a quiz and builds the Submission
record handed to storage.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from .questions import get_handler
from .questions.base import ScoreResult
from .types import Answer, Connection, Question


def score_question(question: Question, answer: Any) -> ScoreResult:
    """Score a raw answer against a (validated) question."""
    handler = get_handler(question.question_type)
    if handler is None:
        logger.warning(f"No handler for question type {question.question_type}")
        return ScoreResult(question.id, False, 0.0, 0.0)

    normalized = handler.normalize_answer(answer)
    return handler.score(question, normalized)


def answer_to_record(answer: Answer) -> Any:
    """Answer in its stored JSON shape (connections become dicts)."""
    if isinstance(answer, list) and any(isinstance(a, Connection) for a in answer):
        return [a.to_record() if isinstance(a, Connection) else a for a in answer]
    return answer


@dataclass
class SubmissionAnswer:
    """Scored answer to one question."""
    question_id: str
    answer: Answer
    is_correct: bool
    score: float
    max_score: float
    details: dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "answer": answer_to_record(self.answer),
            "isCorrect": self.is_correct,
            "score": self.score,
            "maxScore": self.max_score,
        }


@dataclass
class Submission:
    """All scored answers of one quiz attempt."""
    answers: list[SubmissionAnswer] = field(default_factory=list)

    @property
    def total_score(self) -> float:
        return sum(a.score for a in self.answers)

    @property
    def max_total_score(self) -> float:
        return sum(a.max_score for a in self.answers)

    @property
    def percentage(self) -> float:
        max_total = self.max_total_score
        return self.total_score / max_total * 100 if max_total > 0 else 0.0

    @property
    def correct_questions(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)

    @property
    def total_questions(self) -> int:
        return len(self.answers)

    def result_for(self, question_id: str) -> SubmissionAnswer | None:
        return next((a for a in self.answers if a.question_id == question_id), None)

    def to_record(self) -> dict[str, Any]:
        return {
            "answers": [a.to_record() for a in self.answers],
            "totalScore": self.total_score,
            "maxTotalScore": self.max_total_score,
            "percentage": self.percentage,
            "correctQuestions": self.correct_questions,
            "totalQuestions": self.total_questions,
        }


def score_quiz(questions: Sequence[Question], answers: Mapping[str, Any]) -> Submission:
    """
    Score every question; unanswered questions count with score 0.

    Args:
        questions: Questions in quiz order
        answers: Raw answers keyed by question id

    Returns:
        Submission with one entry per question, in question order
    """
    submission = Submission()

    for question in questions:
        handler = get_handler(question.question_type)
        raw = answers.get(question.id)
        normalized = handler.normalize_answer(raw) if handler else raw
        result = score_question(question, normalized)

        submission.answers.append(SubmissionAnswer(
            question_id=question.id,
            answer=normalized,
            is_correct=result.is_correct,
            score=result.score,
            max_score=result.max_score,
            details=result.details,
        ))

    logger.debug(
        f"Scored {submission.total_questions} questions: "
        f"{submission.total_score}/{submission.max_total_score} ({submission.percentage:.1f}%)"
    )
    return submission
