"""
Single choice question handler.

- Two or more options, exactly one marked correct.
- The student picks one option id.
- One point for the correct option, nothing otherwise.
"""

from typing import Any

from loguru import logger

from config import Settings

from ..types import Answer, Question, QuestionType, SingleChoiceBody
from . import register
from .base import RequirementTally, ScoreResult
from .checks import check_choice_options


@register(QuestionType.SINGLE_CHOICE)
class SingleChoiceHandler:
    """Handler for single choice questions."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        body: SingleChoiceBody = question.body
        check_choice_options(body.options, tally, settings)

        correct_count = sum(1 for o in body.options if o.is_correct)
        tally.check(
            correct_count == 1,
            missing="Correct answer selection" if correct_count == 0 else None,
            field="options",
            error="Exactly one option must be marked as correct for single choice questions",
        )

    def normalize_answer(self, answer: Any) -> Answer:
        if isinstance(answer, str):
            return answer.strip()
        if isinstance(answer, list) and len(answer) == 1 and isinstance(answer[0], str):
            return answer[0].strip()
        return ""

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        body: SingleChoiceBody = question.body
        correct_ids = [o.id for o in body.options if o.is_correct]
        selected = next((o for o in body.options if o.id == answer), None)
        is_correct = bool(selected and selected.is_correct)

        logger.debug(f"Single choice {question.id}: selected={answer!r} correct={is_correct}")
        return ScoreResult(
            question_id=question.id,
            is_correct=is_correct,
            score=1.0 if is_correct else 0.0,
            max_score=1.0,
            details={
                "selected": answer,
                "correct_options": correct_ids,
            },
        )
