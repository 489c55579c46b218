"""
Dropdown question handler.

The prompt is a template with {fieldId} placeholders; each placeholder is a
select box with its own options. Every field is scored on its own and the
field points are summed:

- pointsPerDropdown per correct field
- penalizeIncorrect subtracts pointsPerDropdown per answered wrong field,
  the total is floored at 0 once after summing
- requireAllCorrect turns the question into all-or-nothing
"""

from collections import Counter
from typing import Any

from loguru import logger

from config import Settings

from ..template import find_placeholders
from ..types import Answer, DropdownBody, Question, QuestionType
from . import register
from .base import RequirementTally, ScoreResult
from .checks import is_blank


@register(QuestionType.DROPDOWN)
class DropdownHandler:
    """Handler for templated dropdown questions."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        body: DropdownBody = question.body
        data = body.dropdown_data

        if not tally.check(data is not None, missing="Dropdown configuration"):
            tally.check(False)
            tally.check(False)
            return

        tally.check(not is_blank(data.template), missing="Template text")

        if data.scoring.points_per_dropdown <= 0:
            tally.add_error(
                "dropdownData.scoring.pointsPerDropdown",
                "Points per dropdown must be positive",
            )

        fields = data.dropdowns
        if not fields:
            tally.check(False, missing="Dropdown fields")
            return

        all_valid = True
        for i, field in enumerate(fields):
            prefix = f"Dropdown {i + 1}"
            all_valid &= tally.check(not is_blank(field.label), missing=f"{prefix} label")

            if len(field.options) < settings.choice_min_options:
                all_valid &= tally.check(False, missing=f"{prefix} options")
            else:
                all_valid &= tally.check(
                    not any(is_blank(o.text) for o in field.options),
                    missing=f"{prefix} option texts",
                )
            all_valid &= tally.check(
                any(o.is_correct for o in field.options),
                missing=f"{prefix} correct answer",
            )
        tally.check(all_valid)

        if len(fields) > settings.dropdown_max_fields:
            tally.add_error(
                "dropdownData.dropdowns",
                f"Maximum {settings.dropdown_max_fields} dropdowns allowed",
            )

        duplicates = [fid for fid, n in Counter(f.id for f in fields).items() if n > 1]
        for field_id in duplicates:
            tally.add_error("dropdownData.dropdowns", f"Duplicate dropdown id '{field_id}'")

        if is_blank(data.template):
            return

        placeholders = set(find_placeholders(data.template))
        known = {f.id for f in fields}
        for placeholder in sorted(placeholders - known):
            tally.add_error(
                "dropdownData.template",
                f"Placeholder {{{placeholder}}} does not match any dropdown",
            )
        for i, field in enumerate(fields):
            if field.id not in placeholders:
                tally.add_error(
                    f"dropdownData.dropdowns.{i}.id",
                    f"Dropdown {i + 1} is not used in the template",
                )

    def normalize_answer(self, answer: Any) -> Answer:
        if not isinstance(answer, dict):
            return {}
        return {k: v for k, v in answer.items() if isinstance(k, str) and isinstance(v, str) and v}

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        body: DropdownBody = question.body
        data = body.dropdown_data
        fields = data.dropdowns if data else []
        scoring = data.scoring if data else None
        selections = answer or {}

        field_results = {}
        correct = wrong = 0
        for field in fields:
            selected = selections.get(field.id)
            option = field.option(selected) if selected else None
            is_right = bool(option and option.is_correct)
            if is_right:
                correct += 1
            elif selected:
                wrong += 1
            field_results[field.id] = {"selected": selected, "correct": is_right}

        if scoring is None:
            return ScoreResult(question.id, False, 0.0, 0.0, {"fields": field_results})

        points = scoring.points_per_dropdown
        max_score = points * len(fields)
        is_correct = bool(fields) and correct == len(fields)

        if scoring.require_all_correct:
            score = max_score if is_correct else 0.0
        else:
            raw = points * correct
            if scoring.penalize_incorrect:
                raw -= points * wrong
            score = max(0.0, raw)

        logger.debug(
            f"Dropdown {question.id}: {correct}/{len(fields)} correct, {wrong} wrong -> {score}/{max_score}"
        )
        return ScoreResult(
            question_id=question.id,
            is_correct=is_correct,
            score=score,
            max_score=max_score,
            details={
                "fields": field_results,
                "correct_fields": correct,
                "incorrect_fields": wrong,
                "unanswered_fields": len(fields) - correct - wrong,
            },
        )
