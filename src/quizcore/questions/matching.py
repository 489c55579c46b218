"""
Matching question handler.

Two columns of items; the student connects left items to right items, one
connection per item on either side. A connection is correct when the exact
pair is listed in correctMatches.
"""

from collections import Counter
from collections.abc import Sequence
from typing import Any

from loguru import logger
from pydantic import ValidationError

from config import Settings

from ..types import Answer, Connection, MatchingBody, MatchingItem, Question, QuestionType
from . import register
from .base import RequirementTally, ScoreResult
from .checks import check_item_content, check_sequential, is_blank, is_positive_int


def _check_column(
    items: Sequence[MatchingItem],
    tally: RequirementTally,
    side: str,
    max_items: int,
    min_items: int,
) -> None:
    """One requirement for the column plus id, position and content per item."""
    field = f"matchingData.{side}Items"
    label = f"{side.capitalize()} item"

    if len(items) < min_items:
        tally.check(False, missing=f"{side.capitalize()} items")
        return
    if len(items) > max_items:
        tally.check(False, field=field, error=f"Maximum {max_items} {side} items allowed")
        return

    all_valid = True
    for i, item in enumerate(items):
        all_valid &= tally.check(not is_blank(item.id), missing=f"{label} {i + 1} ID")
        if item.position is None:
            all_valid &= tally.check(False, missing=f"{label} {i + 1} position")
        else:
            all_valid &= tally.check(
                is_positive_int(item.position),
                field=f"{field}.{i}.position",
                error=f"{label} {i + 1} must have a positive position",
            )
        all_valid &= check_item_content(item.content, tally, f"{label} {i + 1}")
    tally.check(all_valid)

    if all(item.position is not None for item in items):
        check_sequential([item.position for item in items], tally, field, f"{label} positions")


def _to_connection(raw: Any) -> Connection | None:
    if isinstance(raw, Connection):
        return Connection(left_id=raw.left_id, right_id=raw.right_id)
    if isinstance(raw, dict):
        try:
            parsed = Connection.model_validate(raw)
        except ValidationError:
            return None
        return Connection(left_id=parsed.left_id, right_id=parsed.right_id)
    if isinstance(raw, (list, tuple)) and len(raw) == 2 and all(isinstance(x, str) for x in raw):
        return Connection(left_id=raw[0], right_id=raw[1])
    return None


@register(QuestionType.MATCHING)
class MatchingHandler:
    """Handler for left/right matching questions."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        body: MatchingBody = question.body
        data = body.matching_data

        if not tally.check(data is not None, missing="Matching configuration"):
            for _ in range(4):
                tally.check(False)
            return

        tally.check(not is_blank(data.instructions), missing="Instructions")
        _check_column(data.left_items, tally, "left", settings.matching_max_left_items, 2)
        _check_column(data.right_items, tally, "right", settings.matching_max_right_items, 2)

        matches = data.correct_matches
        if not tally.check(bool(matches), missing="Correct matches"):
            return

        left_ids = {item.id for item in data.left_items}
        right_ids = {item.id for item in data.right_items}
        for i, match in enumerate(matches):
            if match.left_id not in left_ids:
                tally.add_error(
                    f"matchingData.correctMatches.{i}.leftId",
                    f"Correct match {i + 1} references unknown left item '{match.left_id}'",
                )
            if match.right_id not in right_ids:
                tally.add_error(
                    f"matchingData.correctMatches.{i}.rightId",
                    f"Correct match {i + 1} references unknown right item '{match.right_id}'",
                )

        for side, ids in (
            ("Left", Counter(m.left_id for m in matches)),
            ("Right", Counter(m.right_id for m in matches)),
        ):
            for item_id, count in ids.items():
                if count > 1:
                    tally.add_error(
                        "matchingData.correctMatches",
                        f"{side} item '{item_id}' is matched more than once",
                    )

    def normalize_answer(self, answer: Any) -> Answer:
        if not isinstance(answer, (list, tuple)):
            return []
        connections = (_to_connection(raw) for raw in answer)
        return list(dict.fromkeys(c for c in connections if c is not None))

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        body: MatchingBody = question.body
        data = body.matching_data
        if data is None:
            return ScoreResult(question.id, False, 0.0, 0.0, {})

        scoring = data.scoring
        expected = {(m.left_id, m.right_id) for m in data.correct_matches}
        submitted = [(c.left_id, c.right_id) for c in (answer or [])]

        correct = [pair for pair in submitted if pair in expected]
        incorrect = [pair for pair in submitted if pair not in expected]
        missed = expected - set(submitted)

        if scoring.require_all_matches:
            is_correct = not incorrect and not missed
        else:
            is_correct = not incorrect and bool(correct)

        max_score = scoring.points_per_match * len(data.correct_matches)
        if scoring.partial_credit:
            raw = scoring.points_per_match * len(correct)
            if scoring.penalize_incorrect:
                raw -= scoring.penalty_per_incorrect * len(incorrect)
            score = max(0.0, raw)
        else:
            score = max_score if is_correct else 0.0

        logger.debug(
            f"Matching {question.id}: {len(correct)} correct, {len(incorrect)} incorrect, "
            f"{len(missed)} missed -> {score}/{max_score}"
        )
        return ScoreResult(
            question_id=question.id,
            is_correct=is_correct,
            score=score,
            max_score=max_score,
            details={
                "correct_connections": len(correct),
                "incorrect_connections": len(incorrect),
                "missed_matches": len(missed),
                "connections": [
                    {"leftId": left, "rightId": right, "correct": (left, right) in expected}
                    for left, right in submitted
                ],
            },
        )
