"""
Multiple choice question handler.

- Two or more options, at least one marked correct.
- The student picks a set of option ids, optionally bounded by
  minSelections/maxSelections.
- ALL_OR_NOTHING: one point only for exactly the correct set.
- PARTIAL_CREDIT: points per correct pick plus a (non-positive) penalty per
  wrong pick, clamped to [minScore, maximum].
"""

from typing import Any

from loguru import logger

from config import Settings

from ..types import Answer, MultipleChoiceBody, Question, QuestionType, ScoringMethod
from . import register
from .base import RequirementTally, ScoreResult, clamp
from .checks import check_choice_options


@register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceHandler:
    """Handler for multiple choice (multi-select) questions."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        body: MultipleChoiceBody = question.body
        check_choice_options(body.options, tally, settings)

        has_correct = any(o.is_correct for o in body.options)
        tally.check(
            has_correct,
            missing="Correct answer selections",
            field="options",
            error="At least one option must be marked as correct for multiple choice questions",
        )

        data = body.multiple_choice_data
        if data.min_selections < 1:
            tally.add_error("multipleChoiceData.minSelections", "Minimum selections must be at least 1")

        if data.max_selections is not None:
            if data.max_selections > len(body.options):
                tally.add_error(
                    "multipleChoiceData.maxSelections",
                    "Maximum selections cannot exceed number of options",
                )
            if data.min_selections > data.max_selections:
                tally.add_error(
                    "multipleChoiceData.minSelections",
                    "Minimum selections cannot exceed maximum selections",
                )

        if data.scoring_method == ScoringMethod.PARTIAL_CREDIT and data.partial_credit_rules:
            rules = data.partial_credit_rules
            if rules.correct_selection_points < 0:
                tally.add_error(
                    "multipleChoiceData.partialCreditRules.correctSelectionPoints",
                    "Correct selection points must be non-negative",
                )
            if rules.incorrect_selection_penalty > 0:
                tally.add_error(
                    "multipleChoiceData.partialCreditRules.incorrectSelectionPenalty",
                    "Incorrect selection penalty must be non-positive",
                )
            if rules.min_score < 0:
                tally.add_error(
                    "multipleChoiceData.partialCreditRules.minScore",
                    "Minimum score must be non-negative",
                )

    def normalize_answer(self, answer: Any) -> Answer:
        if isinstance(answer, str):
            answer = [answer]
        if not isinstance(answer, (list, tuple, set)):
            return []
        # dict.fromkeys keeps first-seen order while dropping repeats
        return list(dict.fromkeys(a for a in answer if isinstance(a, str) and a))

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        body: MultipleChoiceBody = question.body
        data = body.multiple_choice_data

        correct_ids = [o.id for o in body.options if o.is_correct]
        correct_set = set(correct_ids)
        selected_set = set(answer or [])

        hits = len(selected_set & correct_set)
        misses = len(selected_set - correct_set)
        is_correct = bool(selected_set) and selected_set == correct_set

        if data.scoring_method == ScoringMethod.PARTIAL_CREDIT:
            rules = data.rules
            max_score = rules.correct_selection_points * len(correct_set)
            if selected_set:
                raw = rules.correct_selection_points * hits + rules.incorrect_selection_penalty * misses
                score = clamp(raw, rules.min_score, max_score)
            else:
                score = 0.0
        else:
            max_score = 1.0
            score = 1.0 if is_correct else 0.0

        logger.debug(
            f"Multiple choice {question.id} ({data.scoring_method.value}): "
            f"{hits} correct, {misses} incorrect -> {score}/{max_score}"
        )
        return ScoreResult(
            question_id=question.id,
            is_correct=is_correct,
            score=score,
            max_score=max_score,
            details={
                "selected": list(answer or []),
                "correct_options": correct_ids,
                "correct_selections": hits,
                "incorrect_selections": misses,
                "scoring_method": data.scoring_method.value,
            },
        )
