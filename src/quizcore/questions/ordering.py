"""
Ordering question handler.

Items carry a 1-based correctPosition; the student submits item ids in the
order they arranged them. Position i is correct when the submitted id at i
is the id that belongs there. Partial credit applies when allowPartialCredit is
set or exactOrderRequired is false.
"""

from typing import Any

from loguru import logger

from config import Settings

from ..types import Answer, OrderingBody, Question, QuestionType
from . import register
from .base import RequirementTally, ScoreResult
from .checks import check_item_content, check_sequential, is_blank, is_positive_int


@register(QuestionType.ORDERING)
class OrderingHandler:
    """Handler for item ordering questions."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        body: OrderingBody = question.body
        data = body.ordering_data

        if not tally.check(data is not None, missing="Ordering configuration"):
            tally.check(False)
            tally.check(False)
            return

        tally.check(not is_blank(data.instructions), missing="Instructions")

        items = data.items
        if len(items) < settings.ordering_min_items:
            tally.check(False, missing="Ordering items")
            return
        if len(items) > settings.ordering_max_items:
            tally.check(
                False,
                field="orderingData.items",
                error=f"Maximum {settings.ordering_max_items} items allowed",
            )
            return

        all_valid = True
        for i, item in enumerate(items):
            all_valid &= tally.check(not is_blank(item.id), missing=f"Item {i + 1} ID")
            all_valid &= check_item_content(item.content, tally, f"Item {i + 1}")
            if item.correct_position is None:
                all_valid &= tally.check(False, missing=f"Item {i + 1} position")
            else:
                all_valid &= tally.check(
                    is_positive_int(item.correct_position),
                    field=f"orderingData.items.{i}.correctPosition",
                    error=f"Item {i + 1} must have a positive position",
                )
        tally.check(all_valid)

        if all(item.correct_position is not None for item in items):
            check_sequential(
                [item.correct_position for item in items],
                tally,
                "orderingData.items",
            )

    def normalize_answer(self, answer: Any) -> Answer:
        if not isinstance(answer, (list, tuple)):
            return []
        return [a for a in answer if isinstance(a, str)]

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        body: OrderingBody = question.body
        data = body.ordering_data
        correct_order = data.correct_order() if data else []
        user_order = list(answer or [])

        correct_positions = []
        incorrect_positions = []
        for i, item_id in enumerate(correct_order):
            submitted = user_order[i] if i < len(user_order) else None
            if submitted == item_id:
                correct_positions.append(i + 1)
            else:
                incorrect_positions.append(i + 1)

        is_correct = bool(correct_order) and user_order == correct_order
        if is_correct:
            score = 1.0
        elif data and (data.allow_partial_credit or not data.exact_order_required) and correct_order:
            score = len(correct_positions) / len(correct_order)
        else:
            score = 0.0

        logger.debug(
            f"Ordering {question.id}: {len(correct_positions)}/{len(correct_order)} in place -> {score}"
        )
        return ScoreResult(
            question_id=question.id,
            is_correct=is_correct,
            score=score,
            max_score=1.0,
            details={
                "correct_order": correct_order,
                "user_order": user_order,
                "correct_positions": correct_positions,
                "incorrect_positions": incorrect_positions,
            },
        )
