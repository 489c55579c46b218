"""
Base protocol and types for question handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from config import Settings

from ..types import Answer, Question


@dataclass
class FieldError:
    """A structural problem found while validating an authored question."""
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class RequirementTally:
    """
    Running count of authoring requirements.

    Every check adds one requirement; satisfied checks add one met
    requirement. Absent content is listed in missing_fields, structural
    violations in errors.
    """
    total: int = 0
    met: int = 0
    errors: list[FieldError] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)

    def check(
        self,
        satisfied: bool,
        *,
        missing: str | None = None,
        field: str | None = None,
        error: str | None = None,
    ) -> bool:
        """Count one requirement and record why it failed."""
        self.total += 1
        if satisfied:
            self.met += 1
            return True
        if missing:
            self.missing_fields.append(missing)
        if error:
            self.add_error(field or "", error)
        return False

    def add_error(self, field: str, message: str) -> None:
        self.errors.append(FieldError(field=field, message=message))

    @property
    def percentage(self) -> int:
        # halves round up (62.5 -> 63)
        return int(self.met * 100 / self.total + 0.5) if self.total else 0


@dataclass
class ScoreResult:
    """Result of scoring one answer."""
    question_id: str
    is_correct: bool
    score: float
    max_score: float
    details: dict[str, Any] = field(default_factory=dict)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


class QuestionHandler(Protocol):
    """Protocol for question type handlers."""

    def validate(self, question: Question, tally: RequirementTally, settings: Settings) -> None:
        """Add this type's authoring requirements to the tally."""
        ...

    def normalize_answer(self, answer: Any) -> Answer:
        """Coerce a raw submitted answer into this type's shape. Never raises."""
        ...

    def score(self, question: Question, answer: Answer) -> ScoreResult:
        """Score an already normalized answer. Assumes a valid question."""
        ...
