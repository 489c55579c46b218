"""
Text input question handler.

The student types a free-text answer which is compared with a list of
acceptable answers. Comparison ignores surrounding whitespace and, unless
caseSensitive is set, letter case. Number inputs compare numerically within
numericTolerance.
"""

import math
import re
from typing import Any
from urllib.parse import urlparse

from loguru import logger

from config import Settings

from ..types import Answer, InputType, Question, QuestionType, TextInputBody
from . import register
from .base import RequirementTally, ScoreResult
from .checks import is_blank

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def parse_number(value: str) -> float | None:
    """Parse a finite number, or None."""
    try:
        number = float(value.strip())
    except (ValueError, AttributeError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def check_input_format(text: str, input_type: InputType | str) -> bool:
    """
    Check that typed text looks like its declared input type.

    Blank input is always acceptable; this drives as-you-type feedback only
    and never affects scoring.
    """
    text = text.strip()
    if not text:
        return True

    input_type = InputType(input_type)
    if input_type == InputType.NUMBER:
        return parse_number(text) is not None
    if input_type == InputType.EMAIL:
        return bool(EMAIL_PATTERN.match(text))
    if input_type == InputType.URL:
        parsed = urlparse(text)
        return bool(parsed.scheme and parsed.netloc)
    return True


@register(QuestionType.TEXT_INPUT)
class TextInputHandler:
    """Handler for free-text questions."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        body: TextInputBody = question.body
        data = body.text_input_data

        if not tally.check(data is not None, missing="Text input configuration"):
            tally.check(False)
            return

        answers = data.acceptable_answers
        if not answers:
            tally.check(False, missing="Acceptable answers")
        elif any(is_blank(a) for a in answers):
            tally.check(
                False,
                field="textInputData.acceptableAnswers",
                error="Acceptable answers cannot be empty",
            )
        else:
            tally.check(True)

        if data.input_type == InputType.NUMBER:
            for i, accepted in enumerate(answers):
                if not is_blank(accepted) and parse_number(accepted) is None:
                    tally.add_error(
                        f"textInputData.acceptableAnswers.{i}",
                        f"Acceptable answer {i + 1} is not a number",
                    )
        if data.numeric_tolerance is not None and data.numeric_tolerance < 0:
            tally.add_error("textInputData.numericTolerance", "Numeric tolerance cannot be negative")

    def normalize_answer(self, answer: Any) -> Answer:
        if isinstance(answer, str):
            return answer
        if isinstance(answer, (int, float)) and not isinstance(answer, bool):
            return str(answer)
        return ""

    def _matches(self, student: str, accepted: str, body: TextInputBody) -> bool:
        data = body.text_input_data
        if data.input_type == InputType.NUMBER:
            student_number = parse_number(student)
            accepted_number = parse_number(accepted)
            if student_number is not None and accepted_number is not None:
                tolerance = data.numeric_tolerance or 0.0
                return abs(student_number - accepted_number) <= tolerance

        accepted = accepted.strip()
        if not data.case_sensitive:
            return student.lower() == accepted.lower()
        return student == accepted

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        body: TextInputBody = question.body
        student = (answer or "").strip()

        matched = None
        if student and body.text_input_data:
            matched = next(
                (a for a in body.text_input_data.acceptable_answers if self._matches(student, a, body)),
                None,
            )
        is_correct = matched is not None

        logger.debug(f"Text input {question.id}: {student!r} matched={matched!r}")
        return ScoreResult(
            question_id=question.id,
            is_correct=is_correct,
            score=1.0 if is_correct else 0.0,
            max_score=1.0,
            details={
                "answer": student,
                "matched_answer": matched,
            },
        )
